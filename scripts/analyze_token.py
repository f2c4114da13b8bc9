"""
TokenPulse - Command-line Analysis

Runs one analysis through the request controller against a running API,
printing every state change.

Usage:
    python -m scripts.analyze_token <token_address> [prompt]
"""

from __future__ import annotations

import asyncio
import sys

from tokenpulse.logging import setup_logging

from frontend.client import AnalysisClient
from frontend.controller import AnalysisController, RequestState


def _print_state(state: RequestState) -> None:
    line = f"  [{state.status.value}]"
    if state.attempt_count:
        line += f" attempt {state.attempt_count}"
    if state.error_message:
        line += f": {state.error_message}"
    print(line)


async def main(token_address: str, prompt: str | None = None) -> int:
    setup_logging()
    client = AnalysisClient()
    controller = AnalysisController(client, on_change=_print_state)

    try:
        controller.bind(token_address, prompt)
        await controller.wait()
    finally:
        await controller.close()
        await client.aclose()

    result = controller.state.result
    if result is None:
        return 1

    snapshot = result.snapshot
    print("═" * 50)
    print(f"  {snapshot.symbol} @ ${snapshot.price_usd}  ({snapshot.trend}, {snapshot.price_change_24h_pct}%)")
    print("═" * 50)
    print(result.analysis)
    return 0


if __name__ == "__main__":
    if len(sys.argv) < 2:
        print(__doc__)
        sys.exit(2)
    sys.exit(asyncio.run(main(sys.argv[1], " ".join(sys.argv[2:]) or None)))
