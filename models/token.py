"""
models/token.py
---------------
Token value type, token categories and the action (rewrite) engine.

A Token is only its text. Every category test re-runs an anchored pattern
against the current text, so a token rewritten by an action is classified
by what it says now, not by what it said when it was tokenized.

An Action pairs a category condition ("is_url") with an operation name
("remove" | "tag" | "demojize" | "emojize"). Asking for an operation the
category does not support raises ActionError: that is a caller bug, and it
is never swallowed.

Usage:
    from models.token import Token, Action

    token = Token("http://t.co/skU8zM7Slh")
    token.is_url()                             # → True
    Action("is_url", "tag").apply(token)       # → True
    token.text                                 # → "<URL>"
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from services.patterns import HashtagRule, PatternCatalog, get_catalog
from utils.unicode_chars import is_punctuation


class ActionError(ValueError):
    """Raised when an action is not legal for its category. Not recoverable."""
    pass


# ── Categories ────────────────────────────────────────────────────────────────

class Category(str, Enum):
    MENTION = "is_mention"
    HASHTAG = "is_hashtag"
    URL = "is_url"
    DIGIT = "is_digit"
    EMOJI = "is_emoji"
    EMOTICON = "is_emoticon"
    PUNCT = "is_punct"
    EMAIL = "is_email"
    HTML_TAG = "is_html_tag"


# Order in which categories are tried on every token; first action that fires wins
CATEGORY_PRECEDENCE = (
    Category.MENTION,
    Category.HASHTAG,
    Category.URL,
    Category.DIGIT,
    Category.EMOJI,
    Category.EMOTICON,
    Category.PUNCT,
    Category.EMAIL,
    Category.HTML_TAG,
)

REPLACE_TAGS = {
    Category.MENTION: "<MENTION>",
    Category.HASHTAG: "<HASHTAG>",
    Category.URL: "<URL>",
    Category.DIGIT: "<DIGIT>",
    Category.EMOJI: "<EMOJI>",
    Category.EMOTICON: "<EMOTICON>",
    Category.PUNCT: "<PUNCT>",
    Category.EMAIL: "<EMAIL>",
}

ALLOWED_ACTIONS = {
    Category.MENTION: ("remove", "tag"),
    Category.HASHTAG: ("remove", "tag"),
    Category.URL: ("remove", "tag"),
    Category.DIGIT: ("remove", "tag"),
    Category.EMOJI: ("remove", "tag", "demojize", "emojize"),
    Category.EMOTICON: ("remove", "tag"),
    Category.PUNCT: ("remove", "tag"),
    Category.EMAIL: ("remove", "tag"),
    Category.HTML_TAG: ("remove",),
}


# Keyword names used by parse_text(), the HTTP API and the command line
ACTION_ARGUMENTS = {
    "mentions": Category.MENTION,
    "hashtags": Category.HASHTAG,
    "urls": Category.URL,
    "digits": Category.DIGIT,
    "emojis": Category.EMOJI,
    "emoticons": Category.EMOTICON,
    "puncts": Category.PUNCT,
    "emails": Category.EMAIL,
    "html_tags": Category.HTML_TAG,
}


def to_category(condition) -> Category:
    """Accept a Category or its condition name ("is_url")."""
    try:
        return Category(condition)
    except ValueError:
        raise ActionError(
            f"Unknown category condition {condition!r}, expected one of "
            f"{', '.join(c.value for c in Category)}"
        ) from None


# ── Token ─────────────────────────────────────────────────────────────────────

class Token:
    """
    One span of text produced by the tokenizer.

    `catalog` and `hashtag_rule` are injected; both default to the shared
    Twitter-style catalog.
    """

    __slots__ = ("text", "_catalog", "_hashtag_rule")

    def __init__(
        self,
        text: str,
        catalog: Optional[PatternCatalog] = None,
        hashtag_rule: Optional[HashtagRule] = None,
    ):
        self.text = text
        self._catalog = catalog or get_catalog()
        self._hashtag_rule = hashtag_rule or self._catalog.hashtag_rule

    # ── String behaviour ──────────────────────────────────────────────────

    def __str__(self) -> str:
        return self.text

    def __repr__(self) -> str:
        return f"Token({self.text!r})"

    def __len__(self) -> int:
        return len(self.text)

    def __iter__(self):
        return iter(self.text)

    def __getitem__(self, index) -> str:
        return self.text[index]

    def __add__(self, other) -> str:
        return self.text + str(other)

    def __radd__(self, other) -> str:
        return str(other) + self.text

    def __eq__(self, other) -> bool:
        if isinstance(other, Token):
            return self.text == other.text
        if isinstance(other, str):
            return self.text == other
        return NotImplemented

    __hash__ = None   # mutable

    def set_text(self, text: str) -> None:
        self.text = text

    # ── Category predicates ───────────────────────────────────────────────

    def _full(self, pattern) -> bool:
        return pattern.fullmatch(self.text) is not None

    def is_mention(self) -> bool:
        return self._full(self._catalog.mention)

    def is_hashtag(self) -> bool:
        return self._hashtag_rule.matches(self.text)

    def is_url(self) -> bool:
        return self._full(self._catalog.url)

    def is_digit(self) -> bool:
        return self._full(self._catalog.digit)

    def is_email(self) -> bool:
        return self._full(self._catalog.email)

    def is_html_tag(self) -> bool:
        return self._full(self._catalog.html_tag)

    def is_emoticon(self) -> bool:
        return self._full(self._catalog.emoticon)

    def is_punct(self) -> bool:
        return is_punctuation(self.text)

    def is_emoji(self) -> bool:
        return (
            self._catalog.is_unicode_emoji(self.text)
            or self._catalog.is_emoji_alias(self.text)
        )

    def is_a(self, category) -> bool:
        return getattr(self, to_category(category).value)()

    def strip_hashtag(self) -> str:
        return self._hashtag_rule.strip(self.text)

    # ── Emoji conversions ─────────────────────────────────────────────────

    def demojize(self) -> str:
        alias = self._catalog.alias_for(self.text)
        return alias if alias is not None else f":{self.text}:"

    def emojize(self) -> str:
        grapheme = self._catalog.emoji_for(self.text[1:-1]) if len(self.text) > 2 else None
        return grapheme if grapheme is not None else self.text

    def do_action(self, action: "Action") -> bool:
        return action.apply(self)


# ── Actions ───────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Action:
    """
    A requested operation for one category.

    An empty or missing `name` never fires. A name outside the category's
    allowed set raises ActionError from is_valid() / apply().
    """
    condition: Category
    name: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, "condition", to_category(self.condition))

    def is_valid(self) -> bool:
        if not self.name:
            return False
        allowed = ALLOWED_ACTIONS[self.condition]
        if self.name not in allowed:
            raise ActionError(
                f"Unknown action {self.name!r} for {self.condition.value}, "
                f"expected one of {', '.join(allowed)}"
            )
        return True

    def apply(self, token: Token) -> bool:
        """Rewrite `token` in place if it belongs to the category. Returns True if it fired."""
        if not self.is_valid():
            return False
        if not token.is_a(self.condition):
            return False

        if self.name == "remove":
            token.set_text("")
        elif self.name == "tag":
            token.set_text(REPLACE_TAGS[self.condition])
        elif self.name == "demojize":
            token.set_text(token.demojize())
        elif self.name == "emojize":
            token.set_text(token.emojize())
        return True
