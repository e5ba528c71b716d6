"""
Action ledger transport for txbridge
Provides the async gateway client that classifies accounts and submits actions
"""

import asyncio
import logging
from typing import Any, Dict, Optional, Protocol

import aiohttp

from .config.settings import settings
from .envelope import AccountClassification, ActionEnvelope
from .errors import TransportError

logger = logging.getLogger(__name__)


class ActionTransport(Protocol):
    async def get_account_meta(self, address: str) -> Optional[AccountClassification]:
        ...

    async def send_action(self, envelope: ActionEnvelope) -> str:
        ...

    async def estimate_action_gas(self, request: Dict[str, Any]) -> int:
        ...


class HttpActionTransport:
    """Async client for the action ledger JSON gateway"""

    def __init__(self, gateway_url: str = None, timeout: int = None):
        self.gateway_url = (gateway_url or settings.GATEWAY_URL).rstrip("/")
        self.timeout = timeout or settings.HTTP_CLIENT_TIMEOUT
        self.session: Optional[aiohttp.ClientSession] = None

    async def __aenter__(self):
        """Async context manager entry"""
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit"""
        await self.close()

    async def connect(self):
        """Open the HTTP session"""
        if not self.session:
            timeout = aiohttp.ClientTimeout(total=self.timeout)
            self.session = aiohttp.ClientSession(timeout=timeout)
            logger.info(f"Connected to action gateway: {self.gateway_url}")

    async def close(self):
        """Close the HTTP session"""
        if self.session:
            await self.session.close()
            self.session = None
            logger.info("Action gateway client disconnected")

    async def _post(self, method: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        if not self.session:
            await self.connect()

        url = f"{self.gateway_url}/{method}"
        try:
            async with self.session.post(url, json=payload) as response:
                if response.status != 200:
                    body = await response.text()
                    raise TransportError(
                        f"{method} failed with HTTP {response.status}: {body}"
                    )
                result = await response.json(content_type=None)
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            raise TransportError(f"{method} request to {url} failed: {e}") from e

        if not isinstance(result, dict):
            raise TransportError(f"{method} returned a non-object response")
        return result

    async def get_account_meta(self, address: str) -> Optional[AccountClassification]:
        """Account metadata of ``address``, None when the gateway has none"""
        result = await self._post("getAccount", {"address": address})
        meta = result.get("accountMeta")
        if not meta:
            return None
        if not isinstance(meta, dict):
            raise TransportError(f"getAccount returned malformed accountMeta: {meta!r}")
        return AccountClassification(is_contract=bool(meta.get("isContract", False)))

    async def send_action(self, envelope: ActionEnvelope) -> str:
        """Submit the envelope and return its action hash"""
        result = await self._post("sendAction", envelope.to_request())
        action_hash = result.get("actionHash")
        if not action_hash:
            raise TransportError("sendAction response carries no actionHash")
        if not isinstance(action_hash, str):
            raise TransportError(
                f"sendAction returned a malformed actionHash: {action_hash!r}"
            )
        return action_hash

    async def estimate_action_gas(self, request: Dict[str, Any]) -> int:
        result = await self._post("estimateActionGasConsumption", request)
        try:
            return int(result["gas"])
        except (KeyError, TypeError, ValueError) as e:
            raise TransportError(f"Invalid gas estimation response: {result}") from e


async def submit_envelope(transport: ActionTransport, envelope: ActionEnvelope) -> str:
    """Single submission attempt; transport errors propagate unchanged"""
    action_hash = await transport.send_action(envelope)
    logger.info(f"Submitted {envelope.payload.kind} action {action_hash}")
    return action_hash
