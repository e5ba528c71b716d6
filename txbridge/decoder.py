"""
Binary transaction decoder for legacy RLP-encoded signed transactions

A legacy transaction is stored as:
[nonce, gasPrice, gasLimit, to, value, data, v, r, s]

Every item is a byte string. Integers are big-endian with leading zero bytes
elided (eg. 0 -> '', 7 -> '\\x07', 1000 -> '\\x03\\xe8'), so no fixed width is
assumed when decoding them.
"""

import logging
from dataclasses import dataclass
from typing import Tuple, Union

import rlp
from eth_typing import HexStr
from eth_utils import is_hexstr, to_bytes
from rlp.sedes import List, binary

from .address import ADDRESS_LENGTH, to_io_address
from .errors import DecodeError, translation_stage

logger = logging.getLogger(__name__)

FIELD_NAMES: Tuple[str, ...] = (
    "nonce",
    "gas_price",
    "gas_limit",
    "to",
    "value",
    "data",
    "v",
    "r",
    "s",
)

# Nine raw byte strings, nothing nested
_LEGACY_TX_SEDES = List([binary] * len(FIELD_NAMES), strict=True)


@dataclass(frozen=True)
class RawTransaction:
    """Decoded legacy transaction, keeping the original field bytes"""

    fields: Tuple[bytes, ...]

    def _int(self, index: int) -> int:
        return int.from_bytes(self.fields[index], "big")

    @property
    def nonce(self) -> int:
        return self._int(0)

    @property
    def gas_price(self) -> int:
        return self._int(1)

    @property
    def gas_limit(self) -> int:
        return self._int(2)

    @property
    def to(self) -> bytes:
        return self.fields[3]

    @property
    def value(self) -> int:
        return self._int(4)

    @property
    def data(self) -> bytes:
        return self.fields[5]

    @property
    def v(self) -> int:
        return self._int(6)

    @property
    def r(self) -> bytes:
        return self.fields[7]

    @property
    def s(self) -> bytes:
        return self.fields[8]

    @property
    def is_contract_creation(self) -> bool:
        return len(self.to) == 0

    @property
    def recipient(self) -> str:
        """Ledger address of the recipient, empty for contract creation"""
        if self.is_contract_creation:
            return ""
        return to_io_address(self.to)

    @property
    def unsigned_fields(self) -> Tuple[bytes, ...]:
        """nonce, gasPrice, gasLimit, to, value, data as originally encoded"""
        return self.fields[:6]


def hex_to_bytes(data: str) -> bytes:
    return to_bytes(hexstr=HexStr(data))


def decode_raw_transaction(raw: Union[bytes, str]) -> RawTransaction:
    """
    Decode a signed legacy transaction.

    Args:
        raw: RLP bytes or their 0x-prefixed hex representation

    Returns:
        RawTransaction with all nine fields

    Raises:
        DecodeError: if the input is not a nine-item list of byte strings or
            the recipient is neither empty nor a 20-byte address
    """
    if isinstance(raw, str):
        if not is_hexstr(raw):
            raise DecodeError(f"Raw transaction is not a hex string: {raw[:20]!r}")
        raw = hex_to_bytes(raw)

    if not raw:
        raise DecodeError("Raw transaction is empty")

    with translation_stage("rlp decode", DecodeError):
        items = rlp.decode(bytes(raw), sedes=_LEGACY_TX_SEDES, strict=True)

    fields = tuple(bytes(item) for item in items)
    to = fields[3]
    if to and len(to) != ADDRESS_LENGTH:
        raise DecodeError(
            f"Recipient must be empty or {ADDRESS_LENGTH} bytes, got {len(to)}"
        )

    tx = RawTransaction(fields=fields)
    logger.debug(
        f"Decoded legacy transaction nonce={tx.nonce} to={tx.recipient or '<create>'} "
        f"value={tx.value} data_len={len(tx.data)}"
    )
    return tx
