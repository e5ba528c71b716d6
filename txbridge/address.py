"""
Action ledger addresses

The ledger names accounts by the same 20 bytes as Ethereum, rendered as a
bech32 string with the ``io`` human readable part.
"""

from typing import Union

from bech32 import bech32_decode, bech32_encode, convertbits
from eth_utils import is_hex_address, to_canonical_address

ADDRESS_HRP = "io"
ADDRESS_LENGTH = 20

IO_ZERO_ADDRESS = "io1qqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqd39ym7"


def io_address_to_bytes(address: str) -> bytes:
    """Decode an ``io1`` address into its 20 account bytes."""
    hrp, data = bech32_decode(address)
    if hrp != ADDRESS_HRP or data is None:
        raise ValueError(f"Not an {ADDRESS_HRP} address: {address!r}")
    decoded = convertbits(data, 5, 8, False)
    if decoded is None or len(decoded) != ADDRESS_LENGTH:
        raise ValueError(f"Not an {ADDRESS_HRP} address: {address!r}")
    return bytes(decoded)


def to_io_address(address: Union[bytes, str]) -> str:
    """
    Render 20 account bytes, a 0x hex address or an ``io1`` address as ``io1``.

    Raises:
        ValueError: if ``address`` is none of those
    """
    if isinstance(address, str):
        if address.lower().startswith(ADDRESS_HRP + "1"):
            return to_io_address(io_address_to_bytes(address.lower()))
        if not is_hex_address(address):
            raise ValueError(f"Not an address: {address!r}")
        address = to_canonical_address(address)

    if len(address) != ADDRESS_LENGTH:
        raise ValueError(
            f"Address must be {ADDRESS_LENGTH} bytes, got {len(address)}"
        )
    return bech32_encode(ADDRESS_HRP, convertbits(address, 8, 5))
