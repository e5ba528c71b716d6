# txbridge/config/settings.py

import logging
import re
from typing import Optional

import coloredlogs
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from txbridge.address import IO_ZERO_ADDRESS, to_io_address

# ANSI color codes
YELLOW = "\033[93m"
CYAN = "\033[96m"
RESET = "\033[0m"

# Action hashes and public keys (64+ hex chars), then 0x and io1 addresses
HEX_ID_REGEX = re.compile(r"(\b[a-fA-F0-9]{64,130}\b)")
ADDRESS_REGEX = re.compile(r"(\b0x[a-fA-F0-9]{40}\b|\bio1[02-9ac-hj-np-z]{38}\b)")

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class HighlightFormatter(coloredlogs.ColoredFormatter):
    """Formatter highlighting action hashes, keys and addresses."""

    def format(self, record):
        formatted_message = super().format(record)
        formatted_message = HEX_ID_REGEX.sub(
            f"{YELLOW}\\1{RESET}", formatted_message
        )
        return ADDRESS_REGEX.sub(f"{CYAN}\\1{RESET}", formatted_message)


class Settings(BaseSettings):
    """
    Centralized configuration, loaded from environment variables or a .env file.
    """

    model_config = SettingsConfigDict(
        extra="ignore",
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="TXBRIDGE_",
    )

    # --- Gateway ---
    GATEWAY_URL: str = Field(
        default="http://127.0.0.1:14014",
        description="Base URL of the action ledger JSON gateway",
    )
    HTTP_CLIENT_TIMEOUT: int = Field(
        default=30,
        gt=0,
        description="HTTP client timeout in seconds",
    )

    # --- Chains ---
    TARGET_CHAIN_ID: int = Field(
        default=4689,
        gt=0,
        description="Chain id folded into the signing hash of translated transactions",
    )
    LEGACY_CHAIN_ID: Optional[int] = Field(
        default=None,
        gt=0,
        description="Chain id encoded in v by the signer (defaults to TARGET_CHAIN_ID)",
    )

    # --- Gas estimation ---
    DEFAULT_CALLER_ADDRESS: str = Field(
        default=IO_ZERO_ADDRESS,
        description="Caller used for gas estimation when no sender is given",
    )

    LOG_LEVEL: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )

    @field_validator("LOG_LEVEL", mode="before")
    def validate_log_level(cls, value: Optional[str]):
        if value is None:
            return "INFO"
        level = str(value).strip().upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"Unknown log level: {value}")
        return level

    @field_validator("DEFAULT_CALLER_ADDRESS")
    def validate_caller_address(cls, value: str):
        # Accepts 0x hex as well, stored in ledger form
        return to_io_address(value)


settings = Settings()  # type: ignore

DEFAULT_LEVEL_STYLES = {
    "debug": {"color": "green"},
    "info": {"color": "cyan"},
    "warning": {"color": "yellow"},
    "error": {"color": "red"},
    "critical": {"bold": True, "color": "red"},
}
DEFAULT_FIELD_STYLES = {
    "asctime": {"color": "magenta"},
    "levelname": {"bold": True, "color": "blue"},
    "name": {"color": "white"},
}
DEFAULT_FMT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def configure_logging(level: Optional[str] = None) -> None:
    """Attach a single highlighting colored handler to the root logger."""
    level_name = (level or settings.LOG_LEVEL).upper()
    if level_name not in LOG_LEVELS:
        level_name = "INFO"

    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setFormatter(
        HighlightFormatter(
            fmt=DEFAULT_FMT,
            level_styles=DEFAULT_LEVEL_STYLES,
            field_styles=DEFAULT_FIELD_STYLES,
        )
    )
    root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, level_name))
    logging.getLogger(__name__).debug(f"Logging configured at {level_name}.")
