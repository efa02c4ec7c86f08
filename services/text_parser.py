"""
services/text_parser.py
-----------------------
Preprocess → tokenize → apply category actions → join.

    Raw text
        ↓
    preprocess_text     (encoding, case, accents, lengthening, URLs, entities)
        ↓
    tweet_tokenize      (composite category alternation)
        ↓
    filters             (drop tokens whose exact text is blocked)
        ↓
    ParsedText.process  (per token: first category in precedence order whose
                         action fires wins; emptied tokens are dropped)
        ↓
    ParsedText.value    (tokens joined with the separator, memoized)

Usage:
    from services.text_parser import parse_text, prep

    parsed = parse_text("asylum seeker:http://t.co/skU8zM7Slh", urls="tag")
    parsed.value      # → "asylum seeker : <URL>"

    prep("@abc😂#hashtag", emojis="demojize")
    # → "@abc :joy: #hashtag"
"""

import time
from typing import Callable, Iterable, List, Optional, Union

from models.token import Action, Category, CATEGORY_PRECEDENCE, Token
from services.patterns import HashtagRule, PatternCatalog, get_catalog
from services.preprocessor import preprocess_text
from services.tokenizer import tweet_tokenize
from utils.logger import log_file_prep


class ParsedText:
    """
    The token sequence of one input plus its joined value.

    The joined value is memoized. process() and item assignment invalidate
    it; a Token changed directly through `tokens` is only reflected after
    join() is called again.
    """

    def __init__(
        self,
        tokens: Iterable[Token],
        split: str = " ",
    ):
        self._tokens: List[Token] = list(tokens)
        self.split = split
        self._value: Optional[str] = None

    # ── Sequence behaviour ────────────────────────────────────────────────

    @property
    def tokens(self) -> List[Token]:
        return self._tokens

    def __len__(self) -> int:
        return len(self._tokens)

    def __iter__(self):
        return iter(self._tokens)

    def __getitem__(self, index: int) -> Token:
        return self._tokens[index]

    def __setitem__(self, index: int, value: Union[Token, str]) -> None:
        if isinstance(value, Token):
            self._tokens[index] = value
        else:
            self._tokens[index].set_text(value)
        self._value = None

    def __str__(self) -> str:
        return self.value

    def __repr__(self) -> str:
        return f"ParsedText({self.value!r})"

    # ── State transitions ─────────────────────────────────────────────────

    def process(
        self,
        mentions: Optional[str] = None,
        hashtags: Optional[str] = None,
        urls: Optional[str] = None,
        digits: Optional[str] = None,
        emojis: Optional[str] = None,
        emoticons: Optional[str] = None,
        puncts: Optional[str] = None,
        emails: Optional[str] = None,
        html_tags: Optional[str] = None,
    ) -> None:
        """
        Apply at most one action per token, then drop tokens left empty.

        Raises:
            ActionError: an action is not allowed for its category. Raised
                before any token is touched.
        """
        requested = {
            Category.MENTION: mentions,
            Category.HASHTAG: hashtags,
            Category.URL: urls,
            Category.DIGIT: digits,
            Category.EMOJI: emojis,
            Category.EMOTICON: emoticons,
            Category.PUNCT: puncts,
            Category.EMAIL: emails,
            Category.HTML_TAG: html_tags,
        }
        actions = [Action(category, requested[category]) for category in CATEGORY_PRECEDENCE]
        actions = [action for action in actions if action.is_valid()]

        for token in self._tokens:
            for action in actions:
                if action.apply(token):
                    break

        self._tokens = [token for token in self._tokens if token.text]
        self._value = None

    def join(self) -> str:
        """Join the current tokens and memoize the result."""
        self._value = self.split.join(token.text for token in self._tokens)
        return self._value

    @property
    def value(self) -> str:
        if self._value is None:
            return self.join()
        return self._value

    def post_process(self) -> None:
        """Collapse whitespace runs in the joined value and trim the ends."""
        self._value = " ".join(self.value.split())

    # ── Category views ────────────────────────────────────────────────────

    def _texts(self, predicate: Callable[[Token], bool]) -> List[str]:
        return [token.text for token in self._tokens if predicate(token)]

    @property
    def mentions(self) -> List[str]:
        return self._texts(Token.is_mention)

    @property
    def hashtags(self) -> List[str]:
        return [token.strip_hashtag() for token in self._tokens if token.is_hashtag()]

    @property
    def urls(self) -> List[str]:
        return self._texts(Token.is_url)

    @property
    def digits(self) -> List[str]:
        return self._texts(Token.is_digit)

    @property
    def emails(self) -> List[str]:
        return self._texts(Token.is_email)

    @property
    def emojis(self) -> List[str]:
        return self._texts(Token.is_emoji)

    @property
    def emoticons(self) -> List[str]:
        return self._texts(Token.is_emoticon)


def parse_text(
    text: Union[str, bytes],
    encoding: Optional[str] = None,
    remove_unencodable_char: bool = False,
    to_lower: bool = True,
    strip_accents: bool = False,
    reduce_len: bool = False,
    tokenizer: Optional[Callable[[str], List[Union[Token, str]]]] = None,
    filters: Optional[Iterable[str]] = None,
    emojis: Optional[str] = None,
    emoticons: Optional[str] = None,
    mentions: Optional[str] = None,
    hashtags: Optional[str] = None,
    urls: Optional[str] = None,
    digits: Optional[str] = None,
    puncts: Optional[str] = None,
    emails: Optional[str] = None,
    html_tags: Optional[str] = None,
    split: str = " ",
    hashtag_rule: Optional[HashtagRule] = None,
    catalog: Optional[PatternCatalog] = None,
) -> ParsedText:
    """
    Parse one text and apply the requested category actions.

    Each category argument is None (leave alone) or an action name:
    "remove", "tag", and for emojis also "demojize" / "emojize".

    `tokenizer` is any callable `tokenizer(text) -> list` of Tokens or plain
    strings (`str.split` works); strings are wrapped into Tokens that use
    `catalog` and `hashtag_rule`. Without one, tweet_tokenize() is used.

    Raises:
        ActionError: an action is not allowed for its category.
    """
    catalog = catalog or get_catalog()
    rule = hashtag_rule or catalog.hashtag_rule

    cleaned = preprocess_text(
        text,
        encoding=encoding,
        remove_unencodable_char=remove_unencodable_char,
        to_lower=to_lower,
        strip_accents=strip_accents,
        reduce_len=reduce_len,
        catalog=catalog,
    )
    if tokenizer is None:
        tokens = tweet_tokenize(cleaned, catalog=catalog, hashtag_rule=rule)
    else:
        tokens = [
            token if isinstance(token, Token) else Token(token, catalog=catalog, hashtag_rule=rule)
            for token in tokenizer(cleaned)
        ]
    if filters:
        blocked = set(filters)
        tokens = [token for token in tokens if token.text not in blocked]

    parsed = ParsedText(tokens, split=split)
    parsed.process(
        mentions=mentions,
        hashtags=hashtags,
        urls=urls,
        digits=digits,
        emojis=emojis,
        emoticons=emoticons,
        puncts=puncts,
        emails=emails,
        html_tags=html_tags,
    )
    return parsed


def prep(text: Union[str, bytes], **kwargs) -> str:
    """parse_text() + post_process(), returning the final string."""
    parsed = parse_text(text, **kwargs)
    parsed.post_process()
    return parsed.value


def prep_file(infile: str, outfile: str, encoding: Optional[str] = None, **kwargs) -> int:
    """
    Run prep() over a file line by line; one output line per input line.

    The file is decoded with `encoding` (UTF-8 when not given) before it is
    split into lines, so multi-byte newlines (UTF-16, UTF-32) are handled.
    Undecodable bytes become U+FFFD and are then cleaned like any other
    replacement character instead of aborting the run.

    Returns:
        Number of lines written.
    """
    t_start = time.perf_counter()
    lines = 0
    with open(infile, encoding=encoding or "utf-8", errors="replace", newline=None) as src, \
            open(outfile, "w", encoding="utf-8") as dst:
        for raw_line in src:
            line = raw_line.rstrip("\r\n")
            dst.write(prep(line, **kwargs) + "\n")
            lines += 1

    log_file_prep(
        infile=infile,
        outfile=outfile,
        lines=lines,
        latency_ms=(time.perf_counter() - t_start) * 1000,
    )
    return lines
