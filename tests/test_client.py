"""Tests for the analysis API client."""

import json

import httpx
import pytest

from tokenpulse.errors import AnalysisRequestError

from frontend.client import AnalysisClient
from tests.conftest import TOKEN_ADDRESS


def _client(handler) -> tuple[AnalysisClient, list[httpx.Request]]:
    requests: list[httpx.Request] = []

    def _record(request):
        requests.append(request)
        return handler(request)

    http = httpx.AsyncClient(transport=httpx.MockTransport(_record))
    return AnalysisClient(base_url="http://api.test/", http_client=http), requests


class TestAnalysisClient:
    """Test request encoding and error mapping."""

    @pytest.mark.asyncio
    async def test_success(self):
        body = {
            "analysis": "Bearish short-term.",
            "marketSnapshot": {"token": "TEST", "priceChange24h": -5.2},
        }
        client, requests = _client(lambda r: httpx.Response(200, json=body))

        result = await client.analyze(TOKEN_ADDRESS, "Why?")

        assert result.analysis == "Bearish short-term."
        assert result.snapshot.trend == "Down"
        assert str(requests[0].url) == "http://api.test/api/ai-analysis"
        assert json.loads(requests[0].content) == {
            "tokenIdentifier": TOKEN_ADDRESS,
            "userPrompt": "Why?",
        }

    @pytest.mark.asyncio
    async def test_server_error_text_surfaced(self):
        client, _ = _client(lambda r: httpx.Response(404, json={"error": "No trading pairs found for this token"}))

        with pytest.raises(AnalysisRequestError) as exc_info:
            await client.analyze(TOKEN_ADDRESS)

        assert exc_info.value.message == "No trading pairs found for this token"
        assert exc_info.value.status == 404

    @pytest.mark.asyncio
    async def test_error_without_body(self):
        client, _ = _client(lambda r: httpx.Response(502, text="Bad Gateway"))

        with pytest.raises(AnalysisRequestError) as exc_info:
            await client.analyze(TOKEN_ADDRESS)

        assert exc_info.value.message == "API Error: 502"

    @pytest.mark.asyncio
    async def test_transport_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        client, _ = _client(handler)

        with pytest.raises(AnalysisRequestError) as exc_info:
            await client.analyze(TOKEN_ADDRESS)

        assert "connection refused" in exc_info.value.message
        assert exc_info.value.status is None

    @pytest.mark.asyncio
    async def test_unparseable_success_body(self):
        client, _ = _client(lambda r: httpx.Response(200, json={"unexpected": True}))

        with pytest.raises(AnalysisRequestError) as exc_info:
            await client.analyze(TOKEN_ADDRESS)

        assert exc_info.value.message == "Invalid response from analysis API"
