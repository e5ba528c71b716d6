"""
Tests for signing payload reconstruction and sender recovery
"""

import pytest
import rlp
from eth_account import Account
from eth_utils import keccak, to_canonical_address
from rlp.sedes import big_endian_int

from txbridge.decoder import decode_raw_transaction
from txbridge.envelope import AccountClassification, build_envelope
from txbridge.errors import RecoveryError
from txbridge.recovery import (
    ChainContext,
    build_signing_payload,
    recover_identity,
    recovery_id_from_v,
    signing_hash,
)
from tests.core.signing import (
    CONTRACT_RECIPIENT,
    EOA_RECIPIENT,
    TEST_CHAIN_ID,
    compact_public_key,
    sign_legacy_transaction,
    test_private_keys,
)


def _replace_field(raw: bytes, index: int, value: bytes) -> bytes:
    fields = list(rlp.decode(raw))
    fields[index] = value
    return rlp.encode(fields)


def test_signing_payload_matches_reference_encoding(signed_transfer):
    tx = decode_raw_transaction(signed_transfer)

    reference = rlp.encode(
        [
            0,
            1_000_000_000_000,
            21000,
            to_canonical_address(EOA_RECIPIENT),
            10**18,
            b"",
            TEST_CHAIN_ID,
            0,
            0,
        ]
    )

    assert build_signing_payload(tx, TEST_CHAIN_ID) == reference
    assert signing_hash(tx, TEST_CHAIN_ID) == keccak(reference)
    assert len(signing_hash(tx, TEST_CHAIN_ID)) == 32


def test_signing_payload_with_call_data(test_key):
    data = bytes.fromhex("a9059cbb") + b"\x00" * 31 + b"\x7d"
    raw = sign_legacy_transaction(
        test_key, to=CONTRACT_RECIPIENT, value=0, data=data, nonce=5, gas=60000
    )
    tx = decode_raw_transaction(raw)

    reference = rlp.encode(
        [5, 1_000_000_000_000, 60000, to_canonical_address(CONTRACT_RECIPIENT), 0, data]
        + [TEST_CHAIN_ID, b"", b""]
    )
    assert build_signing_payload(tx, TEST_CHAIN_ID) == reference


def test_recovered_key_belongs_to_signer(test_key, test_account, signed_transfer):
    tx = decode_raw_transaction(signed_transfer)
    identity = recover_identity(tx, ChainContext(TEST_CHAIN_ID))

    assert len(identity.compact_public_key) == 65
    assert identity.compact_public_key[0] == 0x04
    assert identity.compact_public_key == compact_public_key(test_key)
    assert keccak(identity.compact_public_key[1:])[-20:] == to_canonical_address(
        test_account.address
    )
    assert identity.address == test_account.address


@pytest.mark.parametrize("private_key", test_private_keys)
@pytest.mark.parametrize("chain_id", [1, 56, 4689, 4690])
def test_recovery_across_keys_and_chains(private_key, chain_id):
    raw = sign_legacy_transaction(private_key, to=EOA_RECIPIENT, value=1, chain_id=chain_id)
    tx = decode_raw_transaction(raw)
    identity = recover_identity(tx, ChainContext(chain_id))

    assert identity.address == Account.from_key(private_key).address


def test_normalized_signature_layout(test_key, signed_transfer):
    signed = Account.sign_transaction(
        {
            "nonce": 0,
            "gasPrice": 1_000_000_000_000,
            "gas": 21000,
            "to": EOA_RECIPIENT,
            "value": 10**18,
            "data": b"",
            "chainId": TEST_CHAIN_ID,
        },
        test_key,
    )
    tx = decode_raw_transaction(signed_transfer)
    identity = recover_identity(tx, ChainContext(TEST_CHAIN_ID))
    signature = identity.normalized_signature

    assert len(signature) == 65
    assert signature[:32] == signed.r.to_bytes(32, "big")
    assert signature[32:64] == signed.s.to_bytes(32, "big")
    assert signature[64] == signed.v - 35 - 2 * TEST_CHAIN_ID
    assert signature[64] == identity.recovery_id
    assert signature[64] in (0, 1)


def test_recovery_is_deterministic(signed_transfer):
    tx = decode_raw_transaction(signed_transfer)
    context = ChainContext(TEST_CHAIN_ID)
    assert recover_identity(tx, context) == recover_identity(tx, context)


@pytest.mark.parametrize(
    "v, chain_id, expected",
    [(37, 1, 0), (38, 1, 1), (9413, 4689, 0), (9414, 4689, 1)],
)
def test_recovery_id_from_v(v, chain_id, expected):
    assert recovery_id_from_v(v, chain_id) == expected


@pytest.mark.parametrize("v", [0, 1, 27, 28, 36, 39, 9412, 9415])
def test_impossible_v_offset_is_rejected(v):
    with pytest.raises(RecoveryError):
        recovery_id_from_v(v, 4689 if v > 100 else 1)


def test_pre_eip155_signature_is_rejected(signed_transfer):
    raw = _replace_field(signed_transfer, 6, big_endian_int.serialize(27))
    with pytest.raises(RecoveryError):
        recover_identity(decode_raw_transaction(raw), ChainContext(TEST_CHAIN_ID))


def test_foreign_chain_signature_is_rejected(test_key):
    raw = sign_legacy_transaction(test_key, to=EOA_RECIPIENT, value=1, chain_id=1)
    with pytest.raises(RecoveryError):
        recover_identity(decode_raw_transaction(raw), ChainContext(TEST_CHAIN_ID))


def test_legacy_chain_id_differs_from_target(test_key, test_account):
    raw = sign_legacy_transaction(test_key, to=EOA_RECIPIENT, value=1, chain_id=1)
    tx = decode_raw_transaction(raw)
    context = ChainContext(target_chain_id=TEST_CHAIN_ID, legacy_chain_id=1)

    # The v offset is accepted but the hash is rebuilt under the target chain,
    # so the key recovered is not the signer's.
    identity = recover_identity(tx, context)
    assert identity.address != test_account.address

    with pytest.raises(RecoveryError):
        recover_identity(tx, context, expected_sender=test_account.address)


def test_expected_sender_match(test_account, signed_transfer):
    tx = decode_raw_transaction(signed_transfer)
    identity = recover_identity(
        tx,
        ChainContext(TEST_CHAIN_ID),
        expected_sender=test_account.address.lower(),
    )
    assert identity.address == test_account.address


def test_oversized_signature_component_is_rejected(signed_transfer):
    raw = _replace_field(signed_transfer, 7, b"\x01" * 33)
    with pytest.raises(RecoveryError):
        recover_identity(decode_raw_transaction(raw), ChainContext(TEST_CHAIN_ID))


def test_out_of_range_signature_component_is_rejected(signed_transfer):
    raw = _replace_field(signed_transfer, 8, b"\xff" * 32)
    with pytest.raises(RecoveryError):
        recover_identity(decode_raw_transaction(raw), ChainContext(TEST_CHAIN_ID))


@pytest.mark.parametrize("chain_id", [0, -1])
def test_chain_context_requires_positive_chain_id(chain_id):
    with pytest.raises(ValueError):
        ChainContext(chain_id)
    with pytest.raises(ValueError):
        ChainContext(TEST_CHAIN_ID, legacy_chain_id=chain_id)


def test_chain_context_defaults_legacy_to_target():
    assert ChainContext(4689).signing_chain_id == 4689
    assert ChainContext(4689, legacy_chain_id=1).signing_chain_id == 1


@pytest.mark.parametrize("chain_id", [1, 4689, 4690])
def test_envelope_and_signing_chain_ids_never_collapse(test_key, chain_id):
    raw = sign_legacy_transaction(test_key, to=EOA_RECIPIENT, value=1, chain_id=chain_id)
    tx = decode_raw_transaction(raw)
    identity = recover_identity(tx, ChainContext(chain_id))
    envelope = build_envelope(tx, identity, AccountClassification(is_contract=False))

    signing_fields = rlp.decode(build_signing_payload(tx, chain_id))
    assert signing_fields[6] == big_endian_int.serialize(chain_id)
    assert signing_fields[7] == b""
    assert signing_fields[8] == b""
    assert envelope.core.chain_id == 0
    assert envelope.core.chain_id != int.from_bytes(signing_fields[6], "big")
