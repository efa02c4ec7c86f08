"""
middleware/input_validator.py
------------------------------
Validates every request before it touches the text parser.

Checks performed:
    1. Text: must be a string, at most MAX_RAW_CHARS long; NUL and other
       control characters are stripped (tabs and newlines are kept). An
       empty string is valid and simply parses to nothing.
    2. Actions: every category name must be known and every action must be
       allowed for that category ("demojize" only for emojis, ...).
    3. Options: preprocessing flags must be booleans, the encoding must be a
       codec Python knows, filters must be a list of strings.

Returns clean values on success, or raises InputValidationError with a
user-friendly message that the Flask route can return directly. Checking
actions here keeps the parser's ActionError for programming mistakes only.

Usage:
    from middleware.input_validator import validate_input, InputValidationError

    try:
        text = validate_input(raw_text)
        actions = validate_actions({"urls": "tag"})
    except InputValidationError as e:
        return jsonify({"error": str(e)}), 400
"""

import codecs
import re

from config.settings import settings
from models.token import ACTION_ARGUMENTS, ALLOWED_ACTIONS
from services.patterns import TWITTER_HASHTAGS, WEIBO_HASHTAGS


class InputValidationError(ValueError):
    """Raised when a request fails validation. Message is safe to expose."""
    pass


# Pre-compiled patterns for performance (compiled once at import time)
_CONTROL_CHAR_PATTERN = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")  # keeps \t \n \r

_BOOLEAN_OPTIONS = ("remove_unencodable_char", "to_lower", "strip_accents", "reduce_len")

_HASHTAG_RULES = {
    TWITTER_HASHTAGS.name: TWITTER_HASHTAGS,
    WEIBO_HASHTAGS.name: WEIBO_HASHTAGS,
}


def _strip_control_chars(text: str) -> str:
    return _CONTROL_CHAR_PATTERN.sub("", text)


def validate_input(raw_text) -> str:
    """
    Validate and sanitize raw request text.

    Raises:
        InputValidationError: If validation fails (message is user-safe).
    """
    if not isinstance(raw_text, str):
        raise InputValidationError("Text must be a string.")

    if len(raw_text) > settings.MAX_RAW_CHARS:
        raise InputValidationError(
            f"Text is too long. Please keep it under {settings.MAX_RAW_CHARS} characters."
        )

    return _strip_control_chars(raw_text)


def validate_actions(actions) -> dict:
    """
    Check a {"urls": "tag", ...} mapping and return parse_text() keyword arguments.

    Missing, null and empty actions mean "leave this category alone".
    """
    if actions is None:
        return {}
    if not isinstance(actions, dict):
        raise InputValidationError("Actions must be an object mapping categories to actions.")

    validated = {}
    for name, action in actions.items():
        category = ACTION_ARGUMENTS.get(name)
        if category is None:
            raise InputValidationError(
                f"Unknown category '{name}'. Expected one of: {', '.join(ACTION_ARGUMENTS)}."
            )
        if action is None or action == "":
            continue
        if not isinstance(action, str) or action not in ALLOWED_ACTIONS[category]:
            raise InputValidationError(
                f"Action {action!r} is not allowed for '{name}'. "
                f"Expected one of: {', '.join(ALLOWED_ACTIONS[category])}."
            )
        validated[name] = action
    return validated


def validate_options(options) -> dict:
    """
    Check preprocessing options and merge them over the configured defaults.

    Returns parse_text() keyword arguments.
    """
    if options is None:
        options = {}
    if not isinstance(options, dict):
        raise InputValidationError("Options must be an object.")

    validated = settings.prep_defaults()
    for name, value in options.items():
        if name in _BOOLEAN_OPTIONS:
            if not isinstance(value, bool):
                raise InputValidationError(f"Option '{name}' must be true or false.")
            validated[name] = value
        elif name == "encoding":
            validated[name] = _validate_encoding(value)
        elif name == "filters":
            if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
                raise InputValidationError("Option 'filters' must be a list of strings.")
            validated[name] = value
        elif name == "platform":
            rule = _HASHTAG_RULES.get(value)
            if rule is None:
                raise InputValidationError(
                    f"Unknown platform {value!r}. Expected one of: {', '.join(_HASHTAG_RULES)}."
                )
            validated["hashtag_rule"] = rule
        else:
            raise InputValidationError(f"Unknown option '{name}'.")
    return validated


def _validate_encoding(value):
    if value is None or value == "":
        return None
    if not isinstance(value, str):
        raise InputValidationError("Option 'encoding' must be a string.")
    try:
        codecs.lookup(value)
    except LookupError:
        raise InputValidationError(f"Unknown encoding '{value}'.") from None
    return value
