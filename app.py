"""
app.py
------
Flask application exposing the tweet text preparation pipeline.

Key design decisions:
    - Patterns are compiled ONCE at startup (not per-request)
    - Routes are thin; all logic lives in services/
    - /health endpoint for load balancer / monitoring checks
    - Stateless: no sessions, no storage; the client address is only logged

Run in production:
    gunicorn -w 4 -b 0.0.0.0:5000 --timeout 30 app:app

Run in development:
    python app.py
"""

import time

# ── Load .env FIRST, before anything reads os.getenv() ───────────────────────
try:
    from dotenv import load_dotenv
    load_dotenv()
except ImportError:
    pass

from flask import Flask, jsonify, request

from config.settings import settings
from services.nlp_pipeline import process_batch, process_text
from services.patterns import get_catalog
from utils.logger import log_error, log_request


# ── Patterns: compiled once, at startup ───────────────────────────────────────
get_catalog()

# ── Flask app ─────────────────────────────────────────────────────────────────
app = Flask(__name__)
app.json.ensure_ascii = False   # keep emoji readable in responses

# ── CORS: browser frontends listed in CORS_ORIGINS ───────────────────────────
try:
    from flask_cors import CORS
    CORS(app, origins=list(settings.CORS_ORIGINS))
except ImportError:
    pass


_BODY_ERROR = "Request body must be a JSON object."


def _json_body():
    """The request's JSON object; {} when there is no body, None when it is not an object."""
    data = request.get_json(silent=True)
    if data is None:
        return {}
    return data if isinstance(data, dict) else None


def _client_id() -> str:
    return request.headers.get("X-Forwarded-For", request.remote_addr or "anonymous")


def _logged(route: str, t_start: float, status: int) -> None:
    log_request(
        client_id=_client_id(),
        route=route,
        method=request.method,
        status=status,
        latency_ms=(time.perf_counter() - t_start) * 1000,
    )


def _run(data: dict) -> dict:
    return process_text(
        raw_text=data.get("text", ""),
        client_id=_client_id(),
        actions=data.get("actions"),
        options=data.get("options"),
    )


# ── Routes ────────────────────────────────────────────────────────────────────

@app.route("/prep", methods=["POST"])
def prep():
    """
    Clean one text.

    Request body (JSON):
        {
            "text":    "@abc😂#hashtag",
            "actions": {"emojis": "demojize"},        # optional
            "options": {"reduce_len": true}           # optional
        }

    Response (JSON):
        {"text": "@abc :joy: #hashtag"}
    """
    t_start = time.perf_counter()
    data = _json_body()
    if data is None:
        return jsonify({"error": _BODY_ERROR}), 400
    result = _run(data)

    _logged("/prep", t_start, result["status_code"])
    if result["error"]:
        return jsonify({"error": result["error"]}), result["status_code"]
    return jsonify({"text": result["text"]}), 200


@app.route("/parse", methods=["POST"])
def parse():
    """Same body as /prep; returns the tokens and category views as well."""
    t_start = time.perf_counter()
    data = _json_body()
    if data is None:
        return jsonify({"error": _BODY_ERROR}), 400
    result = _run(data)

    _logged("/parse", t_start, result["status_code"])
    status_code = result.pop("status_code")
    if result["error"]:
        return jsonify({"error": result["error"]}), status_code
    result.pop("error")
    return jsonify(result), status_code


@app.route("/prep/batch", methods=["POST"])
def prep_batch():
    """
    Clean many texts with one set of actions and options.

    Request body (JSON):
        {"texts": ["...", "..."], "actions": {...}, "options": {...}}

    Response (JSON):
        {"results": ["...", "..."]}
    """
    t_start = time.perf_counter()
    data = _json_body()
    if data is None:
        return jsonify({"error": _BODY_ERROR}), 400
    batch = process_batch(
        texts=data.get("texts"),
        client_id=_client_id(),
        actions=data.get("actions"),
        options=data.get("options"),
    )

    _logged("/prep/batch", t_start, batch["status_code"])
    if batch["error"]:
        return jsonify({"error": batch["error"]}), batch["status_code"]
    return jsonify({"results": [r["text"] for r in batch["results"]]}), 200


@app.route("/health")
def health():
    """Health check endpoint for load balancers and monitoring tools."""
    try:
        get_catalog()
        patterns_ok = True
    except Exception as e:
        log_error(error=str(e), context="health_patterns")
        patterns_ok = False

    status = {
        "status": "healthy" if patterns_ok else "degraded",
        "patterns": "ok" if patterns_ok else "failed",
    }
    return jsonify(status), 200 if patterns_ok else 503


# ── Error handlers ────────────────────────────────────────────────────────────

@app.errorhandler(404)
def not_found(e):
    return jsonify({"error": "Route not found"}), 404


@app.errorhandler(405)
def method_not_allowed(e):
    return jsonify({"error": "Method not allowed"}), 405


@app.errorhandler(500)
def server_error(e):
    log_error(error=str(e), context="unhandled_exception")
    return jsonify({"error": "An internal error occurred. Please try again."}), 500


# ── Dev server ────────────────────────────────────────────────────────────────

if __name__ == "__main__":
    # Development only. In production, use:
    # gunicorn -w 4 -b 0.0.0.0:5000 --timeout 30 app:app
    app.run(
        host="0.0.0.0",
        port=settings.PORT,
        debug=(settings.FLASK_ENV == "development"),
    )
