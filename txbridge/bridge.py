"""
Legacy transaction bridge

Translates EIP-155 signed legacy transactions into action envelopes and hands
them to the action ledger transport:

    decode -> recover sender -> classify recipient -> build envelope -> submit

Decoding and recovery are synchronous. Classification and submission are the
only awaited calls, performed strictly in that order. Nothing is submitted when
any earlier stage fails.
"""

import logging
import time
from typing import Optional, Union

from .address import to_io_address
from .config.settings import Settings, settings as default_settings
from .decoder import decode_raw_transaction
from .envelope import (
    AccountClassification,
    ActionEnvelope,
    build_envelope,
    build_estimate_request,
)
from .errors import BridgeError, ClassificationError, RecoveryError, translation_stage
from .monitoring.metrics import get_metrics_manager
from .recovery import ChainContext, recover_identity
from .transport import ActionTransport, submit_envelope

logger = logging.getLogger(__name__)


class LegacyTransactionBridge:
    """
    Bridge from signed legacy transactions to action envelopes.

    Holds no per-translation state, so one instance can serve concurrent
    translations.
    """

    def __init__(self, transport: ActionTransport, settings: Optional[Settings] = None):
        self.transport = transport
        self.settings = settings or default_settings
        self.metrics = get_metrics_manager()

    def chain_context(
        self,
        target_chain_id: Optional[int] = None,
        legacy_chain_id: Optional[int] = None,
    ) -> ChainContext:
        if target_chain_id is None:
            target_chain_id = self.settings.TARGET_CHAIN_ID
        if legacy_chain_id is None:
            legacy_chain_id = self.settings.LEGACY_CHAIN_ID
        with translation_stage("chain context", RecoveryError):
            return ChainContext(
                target_chain_id=target_chain_id, legacy_chain_id=legacy_chain_id
            )

    async def classify(self, address: str) -> AccountClassification:
        """
        Look up whether ``address`` is a contract.

        Raises:
            ClassificationError: if the gateway has no metadata for the account
        """
        classification = await self.transport.get_account_meta(address)
        if classification is None:
            raise ClassificationError(f"can't fetch {address} account info")
        logger.debug(f"Account {address} is_contract={classification.is_contract}")
        return classification

    async def translate(
        self,
        raw: Union[bytes, str],
        target_chain_id: Optional[int] = None,
        legacy_chain_id: Optional[int] = None,
        expected_sender: Optional[str] = None,
    ) -> ActionEnvelope:
        """
        Translate a raw legacy transaction into an action envelope.

        Args:
            raw: RLP bytes or hex of the signed legacy transaction
            target_chain_id: Chain id of the signing hash (settings default)
            legacy_chain_id: Chain id encoded in v, when it differs
            expected_sender: Address the recovered key must match

        Returns:
            ActionEnvelope ready for submission

        Raises:
            DecodeError, RecoveryError, ClassificationError, TransportError
        """
        context = self.chain_context(target_chain_id, legacy_chain_id)
        tx = decode_raw_transaction(raw)
        identity = recover_identity(tx, context, expected_sender=expected_sender)

        classification = None
        if not tx.is_contract_creation:
            classification = await self.classify(tx.recipient)

        return build_envelope(tx, identity, classification)

    async def translate_and_submit(
        self,
        raw: Union[bytes, str],
        target_chain_id: Optional[int] = None,
        legacy_chain_id: Optional[int] = None,
        expected_sender: Optional[str] = None,
    ) -> str:
        """Translate then submit; returns the action hash"""
        try:
            envelope = await self.translate(
                raw,
                target_chain_id=target_chain_id,
                legacy_chain_id=legacy_chain_id,
                expected_sender=expected_sender,
            )
            started = time.perf_counter()
            action_hash = await submit_envelope(self.transport, envelope)
            self.metrics.submission_duration_seconds.observe(
                time.perf_counter() - started
            )
        except BridgeError as e:
            self.metrics.record_translation(type(e).__name__)
            logger.error(f"Legacy transaction translation failed: {e}")
            raise

        self.metrics.record_translation("submitted")
        return action_hash

    async def estimate_gas(
        self,
        to: Optional[str] = None,
        value: int = 0,
        data: bytes = b"",
        sender: Optional[str] = None,
    ) -> int:
        """
        Estimate the gas of a transfer or execution towards ``to``.

        No destination means contract deployment; a destination is classified
        the same way as in a translation.
        """
        recipient = to_io_address(to) if to else ""
        caller = self.settings.DEFAULT_CALLER_ADDRESS
        if sender:
            caller = to_io_address(sender)

        classification = None
        if recipient:
            classification = await self.classify(recipient)

        request = build_estimate_request(caller, recipient, value, data, classification)
        gas = await self.transport.estimate_action_gas(request)
        logger.debug(f"Estimated {gas} gas for {recipient or '<create>'}")
        return gas


async def translate_and_submit(
    transport: ActionTransport,
    raw: Union[bytes, str],
    target_chain_id: int,
) -> str:
    """Translate ``raw`` for ``target_chain_id`` and submit it with ``transport``"""
    bridge = LegacyTransactionBridge(transport)
    return await bridge.translate_and_submit(raw, target_chain_id=target_chain_id)
