"""
TokenPulse - DexScreener Client

Fetches live trading-pair statistics for a token address from the
DexScreener public REST API.
"""

from __future__ import annotations

from typing import Any

import httpx

from tokenpulse.config import DexScreenerConfig, settings
from tokenpulse.errors import UpstreamUnavailable
from tokenpulse.logging import get_ingestion_logger

logger = get_ingestion_logger("dexscreener")

PROVIDER = "market-data"


class DexScreenerClient:
    """
    Async client for the DexScreener token lookup endpoint.

    A shared ``httpx.AsyncClient`` may be injected; otherwise one is
    opened per request. The client never retries.
    """

    TOKENS_PATH = "/latest/dex/tokens/{address}"

    def __init__(
        self,
        config: DexScreenerConfig | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self.config = config or settings.dexscreener
        self._http_client = http_client

    def token_url(self, address: str) -> str:
        """Build the lookup-by-address URL."""
        return self.config.base_url.rstrip("/") + self.TOKENS_PATH.format(address=address)

    async def fetch_pairs(self, address: str) -> list[dict[str, Any]]:
        """
        Fetch all trading pairs DexScreener lists for a token.

        Args:
            address: Token contract address

        Returns:
            The ``pairs`` array (possibly empty)

        Raises:
            UpstreamUnavailable: non-2xx status, transport failure or a
                body that is not a JSON object
        """
        url = self.token_url(address)

        try:
            if self._http_client is not None:
                response = await self._http_client.get(url, timeout=self.config.timeout)
            else:
                async with httpx.AsyncClient(timeout=self.config.timeout) as client:
                    response = await client.get(url)
        except httpx.HTTPError as e:
            logger.error("dexscreener_request_failed", address=address, error=str(e))
            raise UpstreamUnavailable(PROVIDER) from e

        if not response.is_success:
            logger.warning(
                "dexscreener_bad_status",
                address=address,
                status=response.status_code,
            )
            raise UpstreamUnavailable(PROVIDER, status=response.status_code)

        try:
            data = response.json()
        except ValueError as e:
            logger.error("dexscreener_invalid_json", address=address, error=str(e))
            raise UpstreamUnavailable(PROVIDER, status=response.status_code) from e

        if not isinstance(data, dict):
            raise UpstreamUnavailable(PROVIDER, status=response.status_code)

        pairs = data.get("pairs") or []
        if not isinstance(pairs, list):
            pairs = []

        logger.info("dexscreener_pairs_fetched", address=address, pairs=len(pairs))
        return pairs
