"""
utils/unicode_chars.py
----------------------
Unicode character helpers used by the tokenizer and the preprocessor.

    is_punctuation("。")             → True   (general category P*)
    is_nonspacing_mark(chr(0x301))  → True   (general category Mn)
    strip_accents_unicode("être")    → "etre"
    remove_variation_selectors("❤️") → "❤"

Pure functions, no state.
"""

import unicodedata

# U+FE00..U+FE0F, removed verbatim from every input
VARIATION_SELECTORS = tuple(chr(cp) for cp in range(0xFE00, 0xFE10))

_VARIATION_SELECTOR_TABLE = {ord(ch): None for ch in VARIATION_SELECTORS}


def is_punctuation(ch: str) -> bool:
    """True if `ch` is a single code point in any Punctuation subcategory."""
    return len(ch) == 1 and unicodedata.category(ch).startswith("P")


def is_nonspacing_mark(ch: str) -> bool:
    return len(ch) == 1 and unicodedata.category(ch) == "Mn"


def strip_accents_unicode(text: str) -> str:
    """Decompose to NFD and drop the nonspacing marks."""
    decomposed = unicodedata.normalize("NFD", text)
    return "".join(ch for ch in decomposed if not is_nonspacing_mark(ch))


def remove_variation_selectors(text: str) -> str:
    return text.translate(_VARIATION_SELECTOR_TABLE)
