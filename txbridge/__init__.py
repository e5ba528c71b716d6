"""
txbridge - submit EIP-155 signed legacy transactions to an action ledger.
"""

from .address import IO_ZERO_ADDRESS, to_io_address
from .bridge import LegacyTransactionBridge, translate_and_submit
from .decoder import RawTransaction, decode_raw_transaction
from .envelope import (
    AccountClassification,
    ActionCore,
    ActionEnvelope,
    ExecutionPayload,
    TransferPayload,
    build_envelope,
)
from .errors import (
    BridgeError,
    ClassificationError,
    DecodeError,
    RecoveryError,
    TransportError,
)
from .recovery import ChainContext, RecoveredIdentity, recover_identity
from .transport import ActionTransport, HttpActionTransport

__version__ = "0.1.0"

__all__ = [
    "AccountClassification",
    "ActionCore",
    "ActionEnvelope",
    "ActionTransport",
    "BridgeError",
    "ChainContext",
    "ClassificationError",
    "DecodeError",
    "ExecutionPayload",
    "HttpActionTransport",
    "IO_ZERO_ADDRESS",
    "LegacyTransactionBridge",
    "RawTransaction",
    "RecoveredIdentity",
    "RecoveryError",
    "TransferPayload",
    "TransportError",
    "build_envelope",
    "decode_raw_transaction",
    "recover_identity",
    "to_io_address",
    "translate_and_submit",
]
