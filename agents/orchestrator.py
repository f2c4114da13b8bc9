"""
TokenPulse - Analysis Orchestrator

Stateless two-stage pipeline: DexScreener market data, then LLM analysis.
Failures surface as typed TokenPulseError subclasses; nothing is retried
here, retry policy belongs to the client.
"""

from __future__ import annotations

import time
from typing import Any

from tokenpulse.config import LLMConfig, settings
from tokenpulse.errors import InferenceFailed, Misconfigured, NotFound
from tokenpulse.ingestion import DexScreenerClient
from tokenpulse.logging import get_agent_logger, token_context
from tokenpulse.models import AnalysisResult, MarketSnapshot, validate_token_address

from agents.market_analyst import create_llm, run_market_analysis

logger = get_agent_logger()


class AnalysisOrchestrator:
    """
    Runs one token analysis per ``analyze`` call.

    Holds its provider clients but no per-request state.
    """

    def __init__(
        self,
        market_data: DexScreenerClient | None = None,
        llm_config: LLMConfig | None = None,
        llm: Any = None,
    ) -> None:
        self.market_data = market_data or DexScreenerClient()
        self.llm_config = llm_config or settings.llm
        self._llm = llm

    @property
    def is_configured(self) -> bool:
        return self.llm_config.is_configured

    def _get_llm(self) -> Any:
        if self._llm is None:
            self._llm = create_llm(self.llm_config)
        return self._llm

    async def analyze(self, token_address: Any, prompt: str | None = None) -> AnalysisResult:
        """
        Run the full analysis pipeline for a token.

        Args:
            token_address: Token contract address
            prompt: Optional user question

        Returns:
            AnalysisResult with the narrative and the snapshot it was based on

        Raises:
            InvalidInput: missing or malformed address
            Misconfigured: model credential not configured
            UpstreamUnavailable: DexScreener failure
            NotFound: no trading pair for the address
            InferenceFailed: model provider failure
        """
        address = validate_token_address(token_address)

        if not self.is_configured:
            logger.error("llm_not_configured")
            raise Misconfigured("Model provider API key not configured")

        with token_context(address):
            return await self._run(address, prompt)

    async def _run(self, address: str, prompt: str | None) -> AnalysisResult:
        start = time.time()
        logger.info("analysis_started")

        # ── Stage 1: market data ──────────────────────────────────
        pairs = await self.market_data.fetch_pairs(address)
        if not pairs:
            logger.info("no_pairs_found")
            raise NotFound("No trading pairs found for this token")

        snapshot = MarketSnapshot.from_pair(pairs[0])
        logger.info("market_data_fetched", symbol=snapshot.symbol, price=snapshot.price_usd)

        # ── Stage 2: inference ────────────────────────────────────
        try:
            analysis = await run_market_analysis(self._get_llm(), snapshot, prompt)
        except Exception as e:
            logger.error("inference_failed", error=str(e))
            raise InferenceFailed(str(e) or "Failed to generate AI analysis") from e

        elapsed_ms = (time.time() - start) * 1000
        logger.info("analysis_complete", symbol=snapshot.symbol, latency_ms=round(elapsed_ms, 1))

        return AnalysisResult(analysis=analysis, snapshot=snapshot)
