"""
utils/logger.py
---------------
Structured JSON logging for the text preparation service.

Every log record is a JSON object, not a plain string.
The raw text is never logged, only its length.

Fields logged on every parse:
    - timestamp (ISO 8601)
    - event type
    - client_id
    - input_length / output_length (character counts)
    - token_count
    - latency_ms
    - actions requested per category

Usage:
    from utils.logger import log_parse, log_error, log_request

    log_parse(client_id="abc", input_length=42, token_count=9,
              output_length=40, latency_ms=0.4, actions={"urls": "tag"})
    log_error(error="Unknown action", context="validate_actions")
    log_request(client_id="abc", route="/prep", method="POST", status=200, latency_ms=1.1)
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Optional


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _base_record(event: str, client_id: Optional[str] = None) -> dict:
    return {
        "timestamp": _now(),
        "event": event,
        "client_id": client_id or "anonymous",
    }


# ── Logger setup ──────────────────────────────────────────────────────────────
# One logger, writes to stdout so Gunicorn / Docker can capture it
_logger = logging.getLogger("text_prep")
_logger.setLevel(logging.DEBUG)

_handler = logging.StreamHandler(sys.stdout)
_handler.setFormatter(logging.Formatter("%(message)s"))   # raw JSON, no extra wrapping
_logger.addHandler(_handler)
_logger.propagate = False


def _emit(record: dict) -> None:
    _logger.info(json.dumps(record, ensure_ascii=False))


# ── Public API ────────────────────────────────────────────────────────────────

def log_parse(
    client_id: Optional[str],
    input_length: int,
    token_count: int,
    output_length: int,
    latency_ms: float,
    actions: Optional[dict] = None,
) -> None:
    """Log one completed parse."""
    record = _base_record("parse", client_id)
    record.update({
        "input_length": input_length,
        "token_count": token_count,
        "output_length": output_length,
        "latency_ms": round(latency_ms, 3),
        "actions": {k: v for k, v in (actions or {}).items() if v},
    })
    _emit(record)


def log_request(
    client_id: Optional[str],
    route: str,
    method: str,
    status: int,
    latency_ms: float,
) -> None:
    """Log an HTTP request to the text API."""
    record = _base_record("http_request", client_id)
    record.update({
        "route": route,
        "method": method,
        "status": status,
        "latency_ms": round(latency_ms, 2),
    })
    _emit(record)


def log_file_prep(
    infile: str,
    outfile: str,
    lines: int,
    latency_ms: float,
) -> None:
    """Log a completed line-by-line file run."""
    record = _base_record("file_prep")
    record.update({
        "infile": infile,
        "outfile": outfile,
        "lines": lines,
        "latency_ms": round(latency_ms, 2),
    })
    _emit(record)


def log_error(
    error: str,
    context: str,
    client_id: Optional[str] = None,
) -> None:
    """Log an error with context so it's easy to trace."""
    record = _base_record("error", client_id)
    record.update({
        "error": error,
        "context": context,
    })
    _logger.error(json.dumps(record, ensure_ascii=False))
