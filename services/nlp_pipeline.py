"""
services/nlp_pipeline.py
------------------------
Orchestrates the full text pipeline for one request:

    Raw input
        ↓
    InputValidator       (reject bad text / actions / options early)
        ↓
    parse_text           (preprocess → tokenize → category actions)
        ↓
    post_process         (collapse whitespace in the joined value)
        ↓
    Structured log       (lengths, token count, latency; never the text)
        ↓
    Response dict

This is the single function Flask routes should call.
It handles its own error catching so Flask routes stay simple.

Usage:
    from services.nlp_pipeline import process_text

    result = process_text(
        raw_text="asylum seeker:http://t.co/skU8zM7Slh",
        client_id="127.0.0.1",
        actions={"urls": "tag"},
    )
    # result["text"]        → "asylum seeker : <URL>"
    # result["tokens"]      → ["asylum", "seeker", ":", "<URL>"]
    # result["error"]       → None or error message string
    # result["status_code"] → 200 / 400 / 500
"""

import time
from typing import Optional

from config.settings import settings
from middleware.input_validator import (
    InputValidationError,
    validate_actions,
    validate_input,
    validate_options,
)
from services.text_parser import parse_text
from utils.logger import log_error, log_parse


_VIEW_NAMES = ("mentions", "hashtags", "urls", "digits", "emails", "emojis", "emoticons")


def _error_result(message: str, status_code: int) -> dict:
    result = {
        "text": None,
        "tokens": [],
        "latency_ms": 0.0,
        "error": message,
        "status_code": status_code,
    }
    result.update({name: [] for name in _VIEW_NAMES})
    return result


def process_text(
    raw_text,
    client_id: Optional[str] = None,
    actions: Optional[dict] = None,
    options: Optional[dict] = None,
) -> dict:
    """
    Run the full pipeline for one text.

    Args:
        raw_text:   Text from the request body (any type; validated here).
        client_id:  Caller identifier used only for logging.
        actions:    {"urls": "tag", "emojis": "demojize", ...}
        options:    {"to_lower": false, "reduce_len": true, "filters": [...], ...}

    Returns:
        dict with keys:
            text        (str|None)  final cleaned string
            tokens      (list[str]) surviving token texts
            mentions, hashtags, urls, digits, emails, emojis, emoticons
                        (list[str]) category views over the final tokens
            latency_ms  (float)
            error       (str|None)
            status_code (int)       HTTP status to return (200, 400, 500)
    """
    t_start = time.perf_counter()

    # ── 1. Validation ─────────────────────────────────────────────────────
    try:
        text = validate_input(raw_text)
        action_kwargs = validate_actions(actions)
        option_kwargs = validate_options(options)
    except InputValidationError as e:
        return _error_result(str(e), 400)

    # ── 2. Parse ───────────────────────────────────────────────────────────
    try:
        parsed = parse_text(text, **option_kwargs, **action_kwargs)
        parsed.post_process()
    except Exception as e:
        log_error(error=str(e), context="parse_text", client_id=client_id)
        return _error_result("An internal error occurred while parsing the text.", 500)

    latency_ms = (time.perf_counter() - t_start) * 1000

    # ── 3. Log ─────────────────────────────────────────────────────────────
    log_parse(
        client_id=client_id,
        input_length=len(text),
        token_count=len(parsed),
        output_length=len(parsed.value),
        latency_ms=latency_ms,
        actions=action_kwargs,
    )

    result = {
        "text": parsed.value,
        "tokens": [token.text for token in parsed.tokens],
        "latency_ms": round(latency_ms, 3),
        "error": None,
        "status_code": 200,
    }
    result.update({name: getattr(parsed, name) for name in _VIEW_NAMES})
    return result


def process_batch(
    texts,
    client_id: Optional[str] = None,
    actions: Optional[dict] = None,
    options: Optional[dict] = None,
) -> dict:
    """
    Run process_text() over a list of texts with shared actions and options.

    The whole batch fails with 400 if the list itself is invalid or any
    single text fails validation.
    """
    if not isinstance(texts, list):
        return {"results": [], "error": "Texts must be a list of strings.", "status_code": 400}
    if len(texts) > settings.MAX_BATCH_SIZE:
        return {
            "results": [],
            "error": f"Too many texts. Please send at most {settings.MAX_BATCH_SIZE} per request.",
            "status_code": 400,
        }

    results = []
    for raw_text in texts:
        result = process_text(raw_text, client_id=client_id, actions=actions, options=options)
        if result["error"]:
            return {"results": [], "error": result["error"], "status_code": result["status_code"]}
        results.append(result)

    return {"results": results, "error": None, "status_code": 200}
