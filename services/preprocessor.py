"""
services/preprocessor.py
------------------------
Text normalization that runs BEFORE the tokenizer.

Why preprocess before tokenizing?
    - Tweets arrive with broken encodings, HTML entities (&amp;) and emoji
      variation selectors that would otherwise leak into tokens.
    - Links are often glued to the previous word ("seeker:http://t.co/x"),
      which would hide them from the URL pattern.
    - Informal text stretches words ("waaaaayyyy"); optionally we cap every
      run of the same character at three.

This module is stateless and does no I/O or logging.

Usage:
    from services.preprocessor import preprocess_text

    clean = preprocess_text("I&#39;m sooooo HAPPY:https://t.co/x", reduce_len=True)
    # → "i'm sooo happy: https://t.co/x"
"""

import html
import re
from typing import Optional, Union

from services.patterns import PatternCatalog, get_catalog
from utils.unicode_chars import remove_variation_selectors, strip_accents_unicode


# ── Compiled patterns (created once at module load) ───────────────────────────

# U+FFFD runs, and the same character mis-decoded as latin-1 ("ï¿½")
_REPLACEMENT_RUN_PATTERN = re.compile("(?:\ufffd|ï¿½)+")

# Repeated characters: "sooooo" → "sooo" (any run of 3+ becomes exactly 3)
_REPEATED_CHAR_PATTERN = re.compile(r"(.)\1{2,}")


def fix_encoding(
    text: Union[str, bytes],
    encoding: Optional[str] = None,
    remove_unencodable_char: bool = False,
) -> str:
    """
    Decode / re-encode `text` and clean up replacement characters.

    Bytes are decoded with `encoding` (UTF-8 when not given). A str is
    round-tripped through `encoding` when one is given, so characters the
    encoding cannot represent are replaced. Runs of U+FFFD are then collapsed
    to one, or dropped when `remove_unencodable_char` is set. Never raises on
    bad input bytes.
    """
    if isinstance(text, bytes):
        text = text.decode(encoding or "utf-8", errors="replace")
    elif encoding:
        text = text.encode(encoding, errors="replace").decode(encoding, errors="replace")

    replacement = "" if remove_unencodable_char else "\ufffd"
    return _REPLACEMENT_RUN_PATTERN.sub(replacement, text)


def reduce_lengthening(text: str) -> str:
    return _REPEATED_CHAR_PATTERN.sub(r"\1\1\1", text)


def split_attached_urls(text: str, catalog: Optional[PatternCatalog] = None) -> str:
    """":http://url" → ": http://url"."""
    catalog = catalog or get_catalog()
    return catalog.attached_url.sub(r"\1 \2", text)


def normalize_quotes(text: str, catalog: Optional[PatternCatalog] = None) -> str:
    catalog = catalog or get_catalog()
    text = catalog.quotes.sub('"', text)
    return catalog.apostrophes.sub("'", text)


def preprocess_text(
    text: Union[str, bytes],
    encoding: Optional[str] = None,
    remove_unencodable_char: bool = False,
    to_lower: bool = True,
    strip_accents: bool = False,
    reduce_len: bool = False,
    catalog: Optional[PatternCatalog] = None,
) -> str:
    """
    Clean and normalize raw text for the tokenizer.

    Steps (order matters):
        1. Fix encoding / replacement characters
        2. Lowercase                     (to_lower, default on)
        3. Strip accents                 (strip_accents, default off)
        4. Cap repeated characters at 3  (reduce_len, default off)
        5. Remove variation selectors U+FE00..U+FE0F
        6. Split links glued to the previous character
        7. Normalize curly quotes and apostrophes
        8. Decode HTML entities

    Args:
        text: Raw text, str or undecoded bytes.

    Returns:
        Cleaned string. Empty or whitespace-only input gives back a
        (possibly empty) string, never an error.
    """
    catalog = catalog or get_catalog()

    # 1. Encoding
    text = fix_encoding(text, encoding, remove_unencodable_char)

    # 2. Case
    if to_lower:
        text = text.lower()

    # 3. Accents
    if strip_accents:
        text = strip_accents_unicode(text)

    # 4. Lengthening
    if reduce_len:
        text = reduce_lengthening(text)

    # 5-8. Always on
    text = remove_variation_selectors(text)
    text = split_attached_urls(text, catalog)
    text = normalize_quotes(text, catalog)
    text = html.unescape(text)

    return text
