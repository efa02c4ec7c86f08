"""
services/patterns.py
--------------------
The fixed token-category patterns and the composite tokenizer alternation.

Two kinds of pattern live here:
    - unanchored pattern strings (URL, EMAIL, ...) that are OR-ed together,
      in a fixed order, into the single tokenizer pattern
    - compiled patterns that classify a whole token with fullmatch()

The alternation is resolved leftmost-first by `re`: at any offset the first
branch that matches wins, so the order below is the category precedence of
the tokenizer. Do not reorder without re-running the tokenizer tests.

The emoticon expressions are adapted from ekphrasis
(https://github.com/cbaziotis/ekphrasis/blob/master/ekphrasis/regexes/generate_expressions.py)
and NLTK's TweetTokenizer.

Everything is compiled once per process by get_catalog() and never mutated.

Usage:
    from services.patterns import get_catalog

    catalog = get_catalog()
    catalog.url.fullmatch("www.google.fr")            # → match
    catalog.tokenizer_pattern().findall("@a #b c")    # → ["@a", "#b", "c"]
"""

import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional, Pattern

import emoji


# ── Category patterns ─────────────────────────────────────────────────────────

URL = r"(?:https?://[^\s.]+\.\S{2,}|www\.\S+\.\S{2,})"

# local part: word / plus / hyphen runs joined by single dots, at most 64
# characters; the lookahead keeps "x+x+x+..." from rescanning to the end of
# the text at every start position
EMAIL = (
    r"(?<![\w@.)])"
    r"(?=[\w+.\-]{1,64}@)"
    r"[\w+\-]+(?:\.[\w+\-]+)*"
    r"@(?:\w+-)*\w+(?:\.[a-z]{2,}){1,3}\b"
)

MENTION = r"@\w+"

HASHTAG = r"\#\b[\w\-]+\b"
NOT_A_HASHTAG = r"\#\d+"
# Weibo closes the topic with a second '#': #话题#
WEIBO_HASHTAG = r"\#[^#\s]+\#"

HTML_TAG = r"<[^>\s]+>"

ASCII_ARROW = r"-+>|<-+"

DIGIT = r"[+\-]?\d+[,/.:\-]?\d*[+\-]?"

ELLIPSIS_DOTS = r"\.(?:\s*\.)+"

EMOJI_STRING = r":\w+:"

# Letter runs; Thai (U+0E00..U+0E7F) is listed because its vowel signs are
# nonspacing marks, which \w does not cover.
WORD = r"(?:[^\W\d_](?:[^\W\d_]|['\-_]|[\u0e00-\u0e7f])+[^\W\d_]?)[^\W\d]?"


# ── Emoticons ─────────────────────────────────────────────────────────────────

_LTR_EMOTICON = (
    # optional hat
    r"(?:(?<![a-zA-Z])[DPO]|(?<!\d)[03]|[|}><=])?",
    # eyes
    r"(?:(?<![a-zA-Z\(])[xXB](?![a-ce-oq-zA-CE-OQ-Z,\.\/])|(?<![:])[:=|](?![\.])"
    r"|(?<![%#\d])[%#](?![%#\d])|(?<![\d\$])[$](?![\d\.,\$])|[;](?!\()"
    r"|(?<![\d\(\-\+])8(?![\da-ce-zA-CE-Z\\/])|\*(?![\*\d,.]))",
    # optional tears
    r"""(?:['",])?""",
    # optional nose
    r"(?:(?<![\w*])[oc](?![a-zA-Z])|(?:[-‑^]))?",
    # mouth
    r"(?:[(){}\[\]<>|/\\]+|[Þ×þ]|(?<!\d)[30](?!\d)|(?<![\d\*])[*,.@#&](?![\*\d,.])"
    r"|(?<![\d\$])[$](?![\d\.,\$])|[DOosSJLxXpPbc](?![a-zA-Z]))",
)

_RTL_EMOTICON = (
    r"(?<![\w])",
    # mouth
    r"(?:[(){}\[\]<>|/\\]+|(?<![\d\.\,])[0](?![\d\.])|(?<![\d\*])[*,.@#&](?![\*\d,.])"
    r"|[$]|(?<![a-zA-Z])[DOosSxX])",
    # optional nose
    r"(?:[-‑^])?",
    # optional tears
    r"""(?:['",])?""",
    # eyes
    r"(?:[xX]|[:=|]|[%#]|[$8](?![\d\.])|[;]|\*)",
    # optional hat
    r"(?:[O]|[0]|[|{><=])?",
    r"(?![a-zA-Z])",
)

_EASTERN_EMOTICON = (
    r"(?<![\w])(?:"
    r"(?:[<>]?[\^;][\W_m][;^][;<>]?)"
    r"|(?:[^\s()]?m?[\(][\W_oTOJ]{1,3}[\s]?[\W_oTOJ]{1,3}[)]m?[^\s()]?)"
    r"|(?:\*?[v>\-\/\\][o0O\_\.][v\-<\/\\]\*?)"
    r"|(?:[oO0>][\-_\/oO\.\\]{1,2}[oO0>])"
    r"|(?:¯\\_\(ツ\)_/¯)"
    r"|(?:\^\^)"
    r")(?![\w])"
)

_REST_EMOTICON = r"(?<![A-Za-z0-9/()])(?:\^5|<3)(?![A-Za-z0-9/()])"

EMOTICONS = "|".join([
    "".join(_LTR_EMOTICON),
    "".join(_RTL_EMOTICON),
    _EASTERN_EMOTICON,
    _REST_EMOTICON,
])


# ── Text patterns used by the preprocessor ────────────────────────────────────

QUOTES = r"[“”«»]"
APOSTROPHES = r"[‘’]"
# any non-space character glued to the start of a link
ATTACHED_URL = r"([^ ])(https?://)"


# ── Hashtag strategies ────────────────────────────────────────────────────────

@dataclass(frozen=True)
class HashtagRule:
    """
    How a platform writes hashtags.

    `segment` is spliced into the tokenizer alternation; `pattern` is the same
    expression compiled for whole-token tests. `excluded` marks shapes that
    segment like a hashtag but are not one (Twitter: "#123").
    """
    name: str
    segment: str
    pattern: Pattern
    excluded: Optional[Pattern] = None
    closing: str = ""

    def matches(self, value: str) -> bool:
        if not self.pattern.fullmatch(value):
            return False
        return not (self.excluded is not None and self.excluded.fullmatch(value))

    def strip(self, value: str) -> str:
        """Drop the hashtag markers: "#nlp" → "nlp", "#话题#" → "话题"."""
        if value.startswith("#"):
            value = value[1:]
        if self.closing and value.endswith(self.closing):
            value = value[: -len(self.closing)]
        return value


TWITTER_HASHTAGS = HashtagRule(
    name="twitter",
    segment=HASHTAG,
    pattern=re.compile(HASHTAG),
    excluded=re.compile(NOT_A_HASHTAG),
)

WEIBO_HASHTAGS = HashtagRule(
    name="weibo",
    segment=WEIBO_HASHTAG,
    pattern=re.compile(WEIBO_HASHTAG),
    closing="#",
)


def _token_pipeline(hashtag_segment: str) -> str:
    branches = [
        URL, EMAIL, MENTION, hashtag_segment, HTML_TAG, ASCII_ARROW,
        DIGIT, ELLIPSIS_DOTS, EMOJI_STRING, WORD, r"\S",
    ]
    return "|".join(f"(?:{branch})" for branch in branches)


@lru_cache(maxsize=None)
def _compile_tokenizer(hashtag_segment: str) -> Pattern:
    return re.compile(_token_pipeline(hashtag_segment))


# ── Catalog ───────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class PatternCatalog:
    """
    Compiled, read-only category patterns plus the emoji alias table.

    Safe to share between threads; each ParsedText owns its own tokens.
    """
    url: Pattern
    email: Pattern
    mention: Pattern
    digit: Pattern
    html_tag: Pattern
    emoticon: Pattern
    quotes: Pattern
    apostrophes: Pattern
    attached_url: Pattern
    hashtag_rule: HashtagRule = TWITTER_HASHTAGS

    def tokenizer_pattern(self, hashtag_rule: Optional[HashtagRule] = None) -> Pattern:
        rule = hashtag_rule or self.hashtag_rule
        return _compile_tokenizer(rule.segment)

    # ── Emoji table ───────────────────────────────────────────────────────

    @staticmethod
    def is_unicode_emoji(value: str) -> bool:
        return emoji.is_emoji(value)

    @staticmethod
    def emoji_for(shortcode: str) -> Optional[str]:
        """The emoji for a shortcode without colons ("joy" → "😂"), or None."""
        if not shortcode:
            return None
        candidate = emoji.emojize(f":{shortcode}:", language="alias")
        return candidate if emoji.is_emoji(candidate) else None

    @staticmethod
    def alias_for(grapheme: str) -> Optional[str]:
        """The ":shortcode:" form of one emoji ("😂" → ":joy:"), or None."""
        if not emoji.is_emoji(grapheme):
            return None
        return emoji.demojize(grapheme, language="alias")

    def is_emoji_alias(self, value: str) -> bool:
        if len(value) < 3 or not (value.startswith(":") and value.endswith(":")):
            return False
        return self.emoji_for(value[1:-1]) is not None


def build_catalog(hashtag_rule: HashtagRule = TWITTER_HASHTAGS) -> PatternCatalog:
    """Compile every category pattern. A malformed pattern raises re.error here."""
    catalog = PatternCatalog(
        url=re.compile(URL),
        email=re.compile(EMAIL),
        mention=re.compile(MENTION),
        digit=re.compile(DIGIT),
        html_tag=re.compile(HTML_TAG),
        emoticon=re.compile(f"(?:{EMOTICONS})"),
        quotes=re.compile(QUOTES),
        apostrophes=re.compile(APOSTROPHES),
        attached_url=re.compile(ATTACHED_URL),
        hashtag_rule=hashtag_rule,
    )
    catalog.tokenizer_pattern()
    return catalog


@lru_cache(maxsize=None)
def get_catalog() -> PatternCatalog:
    """The process-wide catalog, compiled on first use."""
    return build_catalog()
