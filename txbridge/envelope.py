"""
Action envelope models and builders

The envelope carries exactly one operation: a plain ``transfer`` to an
externally owned account, or an ``execution`` against a contract (including
contract creation, where the contract address is empty).
"""

import logging
from typing import Annotated, Any, Dict, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_serializer

from .decoder import RawTransaction
from .recovery import RecoveredIdentity

logger = logging.getLogger(__name__)

ACTION_VERSION = 0
# Chain id of the envelope core. Unrelated to the chain id in the signing payload.
ENVELOPE_CHAIN_ID = 0
# Marks the signature as produced over an RLP-encoded legacy transaction
ETHEREUM_RLP_ENCODING = 1


class _FrozenModel(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)


class AccountClassification(_FrozenModel):
    """Account metadata needed to pick the payload variant"""

    is_contract: bool = Field(alias="isContract")


class TransferPayload(_FrozenModel):
    kind: Literal["transfer"] = "transfer"
    amount: str
    recipient: str
    payload: bytes = b""

    @field_serializer("payload")
    def serialize_bytes(self, value: bytes) -> str:
        return value.hex()


class ExecutionPayload(_FrozenModel):
    kind: Literal["execution"] = "execution"
    amount: str
    contract: str = ""
    data: bytes = b""

    @field_serializer("data")
    def serialize_bytes(self, value: bytes) -> str:
        return value.hex()


ActionPayload = Annotated[
    Union[TransferPayload, ExecutionPayload], Field(discriminator="kind")
]


class ActionCore(_FrozenModel):
    version: int = ACTION_VERSION
    nonce: str
    gas_limit: str = Field(alias="gasLimit")
    gas_price: str = Field(alias="gasPrice")
    chain_id: int = Field(default=ENVELOPE_CHAIN_ID, alias="chainID")


class ActionEnvelope(_FrozenModel):
    core: ActionCore
    sender_pub_key: bytes = Field(alias="senderPubKey")
    signature: bytes
    encoding: int = ETHEREUM_RLP_ENCODING
    payload: ActionPayload

    @field_serializer("sender_pub_key", "signature")
    def serialize_bytes(self, value: bytes) -> str:
        return value.hex()

    @property
    def is_transfer(self) -> bool:
        return isinstance(self.payload, TransferPayload)

    def to_request(self) -> Dict[str, Any]:
        """Request body of the gateway's send action call"""
        core = self.core.model_dump(mode="json", by_alias=True)
        core[self.payload.kind] = self.payload.model_dump(
            mode="json", by_alias=True, exclude={"kind"}
        )
        return {
            "action": {
                "core": core,
                "senderPubKey": self.sender_pub_key.hex(),
                "signature": self.signature.hex(),
                "encoding": self.encoding,
            }
        }


def build_action_payload(
    recipient: str,
    amount: int,
    data: bytes,
    classification: Optional[AccountClassification],
) -> Union[TransferPayload, ExecutionPayload]:
    """
    Pick the payload variant for a destination.

    A missing recipient (contract creation) or a contract recipient yields an
    execution; an externally owned recipient yields a transfer.
    """
    if not recipient or classification is None or classification.is_contract:
        return ExecutionPayload(amount=str(amount), contract=recipient, data=data)
    return TransferPayload(amount=str(amount), recipient=recipient, payload=data)


def build_envelope(
    tx: RawTransaction,
    identity: RecoveredIdentity,
    classification: Optional[AccountClassification],
) -> ActionEnvelope:
    """Assemble the action envelope of a decoded, recovered transaction"""
    if tx.recipient and classification is None:
        raise ValueError("A recipient requires an account classification")

    payload = build_action_payload(tx.recipient, tx.value, tx.data, classification)
    envelope = ActionEnvelope(
        core=ActionCore(
            nonce=str(tx.nonce),
            gas_limit=str(tx.gas_limit),
            gas_price=str(tx.gas_price),
        ),
        sender_pub_key=identity.compact_public_key,
        signature=identity.normalized_signature,
        payload=payload,
    )
    logger.debug(f"Built {payload.kind} envelope for nonce {tx.nonce}")
    return envelope


def build_estimate_request(
    caller: str,
    recipient: str,
    amount: int,
    data: bytes,
    classification: Optional[AccountClassification],
) -> Dict[str, Any]:
    """Request body of the gateway's action gas estimation call"""
    payload = build_action_payload(recipient, amount, data, classification)
    return {
        "callerAddress": caller,
        payload.kind: payload.model_dump(mode="json", by_alias=True, exclude={"kind"}),
    }
