"""
services/tokenizer.py
---------------------
Split cleaned text into Tokens with the composite category alternation.

Leftmost match wins at every offset; whitespace between matches is
consumed as a separator and never becomes a token. The result is a plain
list because ParsedText indexes into it and classifies each token many times.

Usage:
    from services.tokenizer import tweet_tokenize

    [t.text for t in tweet_tokenize(" @remy: This is waaaaayyyy #too much")]
    # → ["@remy", ":", "This", "is", "waaaaayyyy", "#too", "much"]
"""

from typing import List, Optional

from models.token import Token
from services.patterns import HashtagRule, PatternCatalog, get_catalog


def tweet_tokenize(
    text: str,
    catalog: Optional[PatternCatalog] = None,
    hashtag_rule: Optional[HashtagRule] = None,
) -> List[Token]:
    catalog = catalog or get_catalog()
    rule = hashtag_rule or catalog.hashtag_rule
    pattern = catalog.tokenizer_pattern(rule)
    return [
        Token(match.group(0), catalog=catalog, hashtag_rule=rule)
        for match in pattern.finditer(text)
    ]
