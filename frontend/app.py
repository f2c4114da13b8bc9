"""
TokenPulse - Flask Frontend

Serves the trading-interface endpoints: address search with recent-search
history, and a proxy to the analysis API.
"""

import os

import httpx
from flask import Flask, jsonify, request
from flask_cors import CORS

from tokenpulse.config import settings
from tokenpulse.history import JsonFileHistoryStore, SearchHistory
from tokenpulse.logging import get_client_logger
from tokenpulse.models import is_valid_token_address

logger = get_client_logger()

# Backend API URL
API_URL = os.getenv("TOKENPULSE_API_URL", settings.client.api_url).rstrip("/")


def create_app(history: SearchHistory | None = None, api_url: str = API_URL) -> Flask:
    """Build the frontend app; history storage is injectable."""
    app = Flask(__name__)
    CORS(app)

    if history is None:
        history = SearchHistory(JsonFileHistoryStore(settings.client.history_path))

    # =========================================================================
    # Search Routes
    # =========================================================================

    @app.route("/api/search", methods=["POST"])
    def api_search():
        """Validate an address, remember it and return the chart URL."""
        data = request.get_json(silent=True) or {}
        address = str(data.get("address", "")).strip()

        if not is_valid_token_address(address):
            return jsonify({"error": "Please enter a valid token contract address"}), 400

        entries = history.record(address)
        logger.info("token_searched", token_address=address)

        return jsonify({
            "address": address,
            "chartUrl": settings.client.chart_url_template.format(address=address),
            "history": entries,
        })

    @app.route("/api/history")
    def api_history():
        return jsonify({"history": history.entries()})

    @app.route("/api/history", methods=["DELETE"])
    def api_clear_history():
        history.clear()
        return jsonify({"history": []})

    # =========================================================================
    # API Proxy Routes
    # =========================================================================

    @app.route("/api/ai-analysis", methods=["POST"])
    def api_analysis():
        """Proxy analysis request to the FastAPI backend."""
        payload = request.get_json(silent=True) or {}
        try:
            with httpx.Client(timeout=settings.client.timeout) as client:
                resp = client.post(f"{api_url}/api/ai-analysis", json=payload)
            return jsonify(resp.json()), resp.status_code
        except (httpx.HTTPError, ValueError) as e:
            logger.error("analysis_proxy_failed", error=str(e))
            return jsonify({"error": str(e)}), 502

    @app.route("/api/health")
    def api_health():
        """Proxy health check."""
        try:
            with httpx.Client(timeout=5) as client:
                resp = client.get(f"{api_url}/health")
            return jsonify(resp.json())
        except (httpx.HTTPError, ValueError) as e:
            return jsonify({"status": "unreachable", "error": str(e)}), 500

    return app


if __name__ == "__main__":
    create_app().run(host="0.0.0.0", port=5050, debug=True)
