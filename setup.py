from setuptools import setup, find_packages

setup(
    name="txbridge",
    version="0.1.0",
    packages=find_packages(include=["txbridge", "txbridge.*"]),
    install_requires=[
        # Ethereum primitives: RLP, keccak, secp256k1 recovery, addresses
        # (bech32 renders them in the action ledger's io1 form)
        "eth-account>=0.13.0",
        "eth-keys>=0.5.0",
        "eth-utils>=4.0.0",
        "eth-typing>=4.0.0",
        "rlp>=4.0.0",
        "bech32>=1.2.0",
        # HTTP client
        "aiohttp>=3.8.4",
        # Data validation and configuration
        "pydantic>=2.0.0",
        "pydantic-settings>=2.0.0",
        "python-dotenv>=1.0.0",
        # CLI and UI
        "click>=8.1.3",
        "rich>=13.0.0",
        # Logging
        "coloredlogs>=15.0.0",
        # Monitoring
        "prometheus_client>=0.17.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0.0",
            "pytest-asyncio>=0.21.0",
            "pytest-mock>=3.10.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "txbridge=txbridge.cli.main:main",
        ],
    },
    description="Translate EIP-155 signed legacy transactions into action ledger envelopes",
    long_description=open("README.md").read(),
    long_description_content_type="text/markdown",
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
    python_requires=">=3.9",
)
