"""
TokenPulse - Core Package

AI-assisted token analysis: live DexScreener market data fed to an LLM.
"""

__version__ = "0.1.0"
__author__ = "TokenPulse Team"

from tokenpulse.config import settings, get_settings

__all__ = ["settings", "get_settings", "__version__"]
