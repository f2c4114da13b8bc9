"""
Pytest configuration and fixtures for TokenPulse tests.
"""

from typing import Any, Callable

import httpx
import pytest
from langchain_core.messages import AIMessage

from tokenpulse.config import DexScreenerConfig, LLMConfig
from tokenpulse.ingestion import DexScreenerClient

from agents.orchestrator import AnalysisOrchestrator


TOKEN_ADDRESS = "TOKEN111" + "1" * 32 + "pump"
OTHER_ADDRESS = "So11111111111111111111111111111111111111112"


class FakeLLM:
    """Stands in for ChatGroq; records every message list it receives."""

    def __init__(self, content: Any = "Bullish momentum.", error: Exception | None = None):
        self.content = content
        self.error = error
        self.calls: list[list] = []

    async def ainvoke(self, messages):
        self.calls.append(messages)
        if self.error is not None:
            raise self.error
        return AIMessage(content=self.content)


class MarketDataStub:
    """DexScreenerClient over httpx.MockTransport with a request log."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]):
        self.requests: list[httpx.Request] = []

        def _record(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return handler(request)

        self.http = httpx.AsyncClient(transport=httpx.MockTransport(_record))
        self.client = DexScreenerClient(
            config=DexScreenerConfig(base_url="https://dex.test"),
            http_client=self.http,
        )


@pytest.fixture
def sample_pair() -> dict[str, Any]:
    """A DexScreener pair record as returned by /latest/dex/tokens."""
    return {
        "chainId": "solana",
        "dexId": "raydium",
        "pairAddress": "Pair1111111111111111111111111111111111111111",
        "baseToken": {"address": TOKEN_ADDRESS, "name": "Test Token", "symbol": "TEST"},
        "priceUsd": "0.004512",
        "volume": {"h24": 152340.5, "h6": 40000},
        "liquidity": {"usd": 88000.25, "base": 1000, "quote": 50},
        "priceChange": {"h24": -5.2, "h1": 0.3},
        "marketCap": 4512000,
    }


@pytest.fixture
def llm_config() -> LLMConfig:
    return LLMConfig(api_key="test-key")


@pytest.fixture
def market_data_stub() -> Callable[..., MarketDataStub]:
    """Factory: build a MarketDataStub from a JSON body or a handler."""

    def _make(body: Any = None, status: int = 200, handler=None) -> MarketDataStub:
        if handler is None:
            def handler(request: httpx.Request) -> httpx.Response:
                return httpx.Response(status, json=body)
        return MarketDataStub(handler)

    return _make


@pytest.fixture
def make_orchestrator(market_data_stub, llm_config) -> Callable[..., tuple]:
    """Factory: orchestrator wired to stubbed providers."""

    def _make(body: Any = None, status: int = 200, llm: FakeLLM | None = None, config: LLMConfig | None = None):
        stub = market_data_stub(body, status)
        llm = llm or FakeLLM()
        orchestrator = AnalysisOrchestrator(
            market_data=stub.client,
            llm_config=config or llm_config,
            llm=llm,
        )
        return orchestrator, stub, llm

    return _make
