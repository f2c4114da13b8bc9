"""
TokenPulse - Data Models

Pydantic models for the analysis request pipeline and its wire formats.
"""

import math
import re
from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from tokenpulse.errors import InvalidInput


UNKNOWN = "Unknown"
NOT_AVAILABLE = "N/A"

# Base58 (Solana) and hex (EVM) addresses both fit this shape.
TOKEN_ADDRESS_PATTERN = re.compile(r"^[A-Za-z0-9]{32,44}$")


class RequestStatus(str, Enum):
    """Client-side lifecycle of an analysis request."""

    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    ERROR = "error"


def is_valid_token_address(address: Any) -> bool:
    """Check the shape of a token address (no network lookup)."""
    return isinstance(address, str) and bool(TOKEN_ADDRESS_PATTERN.match(address.strip()))


def validate_token_address(address: Any) -> str:
    """
    Normalize a token address or raise InvalidInput.

    Returns:
        The trimmed address
    """
    if not isinstance(address, str) or not address.strip():
        raise InvalidInput("Token address is required")
    address = address.strip()
    if not TOKEN_ADDRESS_PATTERN.match(address):
        raise InvalidInput(f"Invalid token address: {address[:64]}")
    return address


# =============================================================================
# Market Data
# =============================================================================

def _nested(data: dict[str, Any], *keys: str) -> Any:
    """Walk nested dicts, returning None as soon as a level is missing."""
    current: Any = data
    for key in keys:
        if not isinstance(current, dict):
            return None
        current = current.get(key)
    return current


def _metric(value: Any) -> float | str:
    """Keep numeric-looking provider values, substitute N/A for the rest."""
    if isinstance(value, bool) or value is None:
        return NOT_AVAILABLE
    if isinstance(value, (int, float)):
        return float(value) if math.isfinite(value) else NOT_AVAILABLE
    if isinstance(value, str) and value.strip():
        return value.strip()
    return NOT_AVAILABLE


def _label(value: Any) -> str:
    if isinstance(value, str) and value.strip():
        return value.strip()
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return UNKNOWN


class MarketSnapshot(BaseModel):
    """
    Normalized view of the first DexScreener trading pair for a token.

    Every field has a fallback, so the prompt text never contains nulls.
    Serialized (by alias) with the keys the analysis prompt and the
    HTTP response use.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    symbol: str = Field(default=UNKNOWN, alias="token")
    price_usd: float | str = Field(default=NOT_AVAILABLE, alias="price")
    volume_24h: float | str = Field(default=NOT_AVAILABLE, alias="volume24h")
    liquidity_usd: float | str = Field(default=NOT_AVAILABLE, alias="liquidity")
    price_change_24h_pct: float | str = Field(default=NOT_AVAILABLE, alias="priceChange24h")
    market_cap_usd: float | str = Field(default=NOT_AVAILABLE, alias="marketCap")
    venue_id: str = Field(default=UNKNOWN, alias="dex")

    @classmethod
    def from_pair(cls, pair: Any) -> "MarketSnapshot":
        """Project a raw DexScreener pair record; never raises on missing fields."""
        if not isinstance(pair, dict):
            pair = {}
        return cls(
            symbol=_label(_nested(pair, "baseToken", "symbol")),
            price_usd=_metric(pair.get("priceUsd")),
            volume_24h=_metric(_nested(pair, "volume", "h24")),
            liquidity_usd=_metric(_nested(pair, "liquidity", "usd")),
            price_change_24h_pct=_metric(_nested(pair, "priceChange", "h24")),
            market_cap_usd=_metric(pair.get("marketCap")),
            venue_id=_label(pair.get("dexId")),
        )

    @property
    def trend(self) -> str:
        """24h direction as displayed next to the price: Up, Down or N/A."""
        try:
            change = float(self.price_change_24h_pct)
        except ValueError:
            return NOT_AVAILABLE
        if math.isnan(change):
            return NOT_AVAILABLE
        return "Up" if change >= 0 else "Down"

    def to_prompt_dict(self) -> dict[str, Any]:
        """Serialize with the wire keys."""
        return self.model_dump(by_alias=True)


# =============================================================================
# Analysis Request / Result
# =============================================================================

class AnalysisRequest(BaseModel):
    """Inbound analysis request. Immutable once issued."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    token_address: str = Field(
        default="",
        validation_alias=AliasChoices("tokenIdentifier", "tokenAddress", "token_address"),
        description="Token contract address",
    )
    prompt: str | None = Field(
        default=None,
        validation_alias=AliasChoices("userPrompt", "prompt"),
        description="Optional question; a default prompt is used when empty",
    )


class AnalysisResult(BaseModel):
    """
    Outcome of one successful orchestration call.

    ``analysis`` is the model's narrative text; ``snapshot`` is the market
    data it was generated from.
    """

    analysis: str
    snapshot: MarketSnapshot


# =============================================================================
# API Response Models
# =============================================================================

class AnalysisResponse(BaseModel):
    """API response for the analysis endpoint."""

    model_config = ConfigDict(populate_by_name=True)

    analysis: str
    market_snapshot: MarketSnapshot = Field(alias="marketSnapshot")

    @classmethod
    def from_result(cls, result: AnalysisResult) -> "AnalysisResponse":
        return cls(analysis=result.analysis, market_snapshot=result.snapshot)

    def to_result(self) -> AnalysisResult:
        return AnalysisResult(analysis=self.analysis, snapshot=self.market_snapshot)


class ErrorResponse(BaseModel):
    """Error body shared by every failing endpoint."""

    error: str


class HealthStatus(BaseModel):
    """API health check response."""

    status: str = "healthy"
    version: str
    timestamp: datetime = Field(default_factory=datetime.utcnow)
    services: dict[str, bool] = Field(default_factory=dict)
