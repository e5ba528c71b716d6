"""
Translation Error Handling
Error taxonomy for the legacy transaction translation pipeline
"""

import logging
from contextlib import contextmanager
from typing import Generator, Type

logger = logging.getLogger(__name__)


class BridgeError(Exception):
    """Base class for every error raised by a translation"""

    pass


class DecodeError(BridgeError):
    """Raw transaction is not a well-formed nine-field RLP tuple"""

    pass


class RecoveryError(BridgeError):
    """Signature cannot be normalized or the sender key cannot be recovered"""

    pass


class ClassificationError(BridgeError):
    """Recipient account metadata is unavailable"""

    pass


class TransportError(BridgeError):
    """The RPC gateway rejected or failed a request"""

    pass


@contextmanager
def translation_stage(
    stage: str, error_cls: Type[BridgeError]
) -> Generator[None, None, None]:
    """
    Context manager wrapping library failures of one pipeline stage.

    Errors that already belong to the taxonomy pass through untouched so the
    caller sees the stage that actually failed.

    Args:
        stage: Name of the stage being performed
        error_cls: Error class raised for foreign exceptions
    """
    try:
        yield
    except BridgeError:
        raise
    except Exception as e:
        logger.error(f"Error in translation stage '{stage}': {e}")
        raise error_cls(f"Failed {stage}: {e}") from e
