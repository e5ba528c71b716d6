"""
Signature recovery for EIP-155 signed legacy transactions

Rebuilds the payload that was hashed at signing time under the target chain id,
recovers the secp256k1 public key of the sender and re-assembles the signature
in the fixed r || s || recovery_id layout expected by the action ledger.
"""

import logging
from dataclasses import dataclass
from typing import Optional

import rlp
from eth_keys import keys
from eth_keys.exceptions import BadSignature, ValidationError
from eth_utils import keccak, to_checksum_address
from rlp.sedes import big_endian_int

from .decoder import RawTransaction
from .errors import RecoveryError, translation_stage

logger = logging.getLogger(__name__)

# Type marker of an uncompressed SEC1 point
UNCOMPRESSED_KEY_PREFIX = b"\x04"
SIGNATURE_PART_LENGTH = 32

# v = recovery_id + 35 + 2 * chain_id; subtracting 2 * chain_id + 8 leaves 27/28
EIP155_OFFSET = 8
LEGACY_V_BASE = 27


@dataclass(frozen=True)
class ChainContext:
    """Chain ids used to undo replay protection and to rebuild the signing hash"""

    target_chain_id: int
    legacy_chain_id: Optional[int] = None

    def __post_init__(self) -> None:
        if not isinstance(self.target_chain_id, int) or self.target_chain_id <= 0:
            raise ValueError(
                f"target_chain_id must be a positive integer: {self.target_chain_id!r}"
            )
        if self.legacy_chain_id is not None and self.legacy_chain_id <= 0:
            raise ValueError(
                f"legacy_chain_id must be a positive integer: {self.legacy_chain_id!r}"
            )

    @property
    def signing_chain_id(self) -> int:
        """Chain id folded into v by the original signer"""
        if self.legacy_chain_id is None:
            return self.target_chain_id
        return self.legacy_chain_id


@dataclass(frozen=True)
class RecoveredIdentity:
    compact_public_key: bytes
    normalized_signature: bytes
    recovery_id: int

    @property
    def address(self) -> str:
        """Checksum address derived from the recovered key"""
        return to_checksum_address(keccak(self.compact_public_key[1:])[-20:])


def build_signing_payload(tx: RawTransaction, chain_id: int) -> bytes:
    """
    RLP encode the first six original fields followed by the chain id and two
    empty strings in the r and s positions.
    """
    chain_field = big_endian_int.serialize(chain_id)
    return rlp.encode([*tx.unsigned_fields, chain_field, b"", b""])


def signing_hash(tx: RawTransaction, chain_id: int) -> bytes:
    return keccak(build_signing_payload(tx, chain_id))


def recovery_id_from_v(v: int, chain_id: int) -> int:
    """
    Undo the EIP-155 chain id offset of v.

    Raises:
        RecoveryError: if v was not produced for ``chain_id``
    """
    legacy_v = v - (2 * chain_id + EIP155_OFFSET)
    if legacy_v not in (LEGACY_V_BASE, LEGACY_V_BASE + 1):
        raise RecoveryError(
            f"v={v} does not carry replay protection for chain {chain_id}"
        )
    return legacy_v - LEGACY_V_BASE


def _signature_part(name: str, value: bytes) -> bytes:
    if len(value) > SIGNATURE_PART_LENGTH:
        raise RecoveryError(
            f"Signature component {name} is {len(value)} bytes, "
            f"at most {SIGNATURE_PART_LENGTH} allowed"
        )
    return value.rjust(SIGNATURE_PART_LENGTH, b"\x00")


def recover_identity(
    tx: RawTransaction,
    context: ChainContext,
    expected_sender: Optional[str] = None,
) -> RecoveredIdentity:
    """
    Recover the sender's public key and normalized signature.

    Args:
        tx: Decoded legacy transaction
        context: Chain ids for the v offset and for the signing hash
        expected_sender: Optional address the recovered key must match

    Returns:
        RecoveredIdentity with the 65 byte compact key and 65 byte signature

    Raises:
        RecoveryError: on an impossible v, malformed r/s, failed point
            recovery or a sender mismatch
    """
    recovery_id = recovery_id_from_v(tx.v, context.signing_chain_id)
    r = _signature_part("r", tx.r)
    s = _signature_part("s", tx.s)

    digest = signing_hash(tx, context.target_chain_id)

    with translation_stage("public key recovery", RecoveryError):
        try:
            signature = keys.Signature(
                vrs=(recovery_id, int.from_bytes(r, "big"), int.from_bytes(s, "big"))
            )
            public_key = signature.recover_public_key_from_msg_hash(digest)
        except (BadSignature, ValidationError) as e:
            raise RecoveryError(f"Cannot recover public key: {e}") from e

    identity = RecoveredIdentity(
        compact_public_key=UNCOMPRESSED_KEY_PREFIX + public_key.to_bytes(),
        normalized_signature=r + s + bytes([recovery_id]),
        recovery_id=recovery_id,
    )

    if expected_sender is not None and (
        identity.address.lower() != expected_sender.lower()
    ):
        raise RecoveryError(
            f"Recovered sender {identity.address} does not match {expected_sender}"
        )

    logger.debug(
        f"Recovered sender {identity.address} (recovery id {recovery_id}) "
        f"for chain {context.target_chain_id}"
    )
    return identity
