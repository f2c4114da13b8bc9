"""
TokenPulse - Market Analyst

Prompt construction and LLM inference for a single token snapshot.
"""

from __future__ import annotations

import json
from typing import Any

from langchain_core.messages import BaseMessage, HumanMessage, SystemMessage

from tokenpulse.config import LLMConfig
from tokenpulse.models import MarketSnapshot


MARKET_ANALYST_PROMPT = """You are an expert cryptocurrency analyst. Analyze the following token data and provide insights about:
1. Price action and volatility
2. Trading volume and liquidity
3. Market sentiment based on metrics
4. Potential risks and opportunities
5. Key metrics comparison to market standards

Keep the analysis concise, factual, and focused on the data provided."""

DEFAULT_USER_PROMPT = "Please provide a comprehensive analysis of this token's current market status."

FALLBACK_ANALYSIS = "No analysis generated."


def build_messages(snapshot: MarketSnapshot, prompt: str | None = None) -> list[BaseMessage]:
    """
    Build the system + user message pair for one analysis.

    The user message embeds the serialized snapshot followed by the
    caller's prompt, or the default prompt when none is given.
    """
    user_prompt = prompt.strip() if prompt and prompt.strip() else DEFAULT_USER_PROMPT
    data_context = json.dumps(snapshot.to_prompt_dict(), indent=2)

    return [
        SystemMessage(content=MARKET_ANALYST_PROMPT),
        HumanMessage(content=f"""Here is the token data to analyze:
{data_context}

{user_prompt}"""),
    ]


def create_llm(config: LLMConfig) -> Any:
    """Create the chat model with the fixed sampling policy."""
    from langchain_groq import ChatGroq

    return ChatGroq(
        model=config.model,
        temperature=config.temperature,
        max_tokens=config.max_tokens,
        api_key=config.api_key,
        timeout=config.timeout,
    )


def extract_text(response: Any) -> str:
    """Pull the completion text out of a chat response, or the fallback."""
    content = getattr(response, "content", None)

    if isinstance(content, list):
        # Content blocks: keep the text parts
        content = "".join(
            block if isinstance(block, str) else str(block.get("text", ""))
            for block in content
            if isinstance(block, (str, dict))
        )

    if not isinstance(content, str) or not content.strip():
        return FALLBACK_ANALYSIS
    return content


async def run_market_analysis(
    llm: Any,
    snapshot: MarketSnapshot,
    prompt: str | None = None,
) -> str:
    """Invoke the model once; provider exceptions propagate to the caller."""
    response = await llm.ainvoke(build_messages(snapshot, prompt))
    return extract_text(response)
