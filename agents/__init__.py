"""
TokenPulse - Analysis Agents Package

Two-stage token analysis pipeline:
    - DexScreener market snapshot
    - MarketAnalyst LLM narrative

Usage:
    from agents.orchestrator import AnalysisOrchestrator
"""

from agents.orchestrator import AnalysisOrchestrator

__all__ = ["AnalysisOrchestrator"]
