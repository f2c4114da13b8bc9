"""
TokenPulse - Ingestion Module

Live market data from DexScreener.
"""

from tokenpulse.ingestion.dexscreener_client import DexScreenerClient

__all__ = ["DexScreenerClient"]
