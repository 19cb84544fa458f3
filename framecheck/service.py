"""HTTP front for the header fetch, used by RemoteHeaderFetcher.

    POST /api/check-headers  {"url": "example.com"}
      200 {"headers": {...}, "ip": "93.184.216.34"}
      400 {"error": "..."}   bad input
      502 {"error": "..."}   target unreachable

``RemoteHeaderFetcher`` is its client; run it with ``framecheck-service``.
"""

import asyncio

from flask import Flask, jsonify, request

from framecheck.core.config import Config
from framecheck.core.fetcher import FetchError, HeaderFetcher
from framecheck.parsers.target import normalize_target

app = Flask(__name__)
# Zero-arg callable returning a HeaderFetcher; swapped out in tests.
app.config["FETCHER_FACTORY"] = lambda: HeaderFetcher(Config())


async def _fetch(url: str):
    async with app.config["FETCHER_FACTORY"]() as fetcher:
        return await fetcher.fetch(url)


@app.route("/api/check-headers", methods=["POST"])
def check_headers():
    data = request.get_json(silent=True) or {}
    raw = data.get("url") if isinstance(data, dict) else None
    if not raw or not isinstance(raw, str):
        return jsonify({"error": "Missing 'url' in request body"}), 400

    try:
        url = normalize_target(raw)
    except ValueError as exc:
        return jsonify({"error": str(exc)}), 400

    try:
        result = asyncio.run(_fetch(url))
    except FetchError as exc:
        app.logger.warning("check-headers %s failed: %s", url, exc.message)
        return jsonify({"error": exc.message}), 502

    return jsonify({"headers": result.headers, "ip": result.ip})


def main():
    print("\n  framecheck header service on http://127.0.0.1:8787\n")
    app.run(host="127.0.0.1", port=8787)


if __name__ == "__main__":
    main()
