"""
tests/test_tokenizer.py
-----------------------
Tests for the composite tokenizer: category order, separators and the
hashtag strategy it is given.

Run from the project root:
    python -m pytest tests/ -v
"""

import sys
import os
import time
import unittest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from services.tokenizer import tweet_tokenize  # noqa: E402


def _texts(text, **kwargs):
    return [token.text for token in tweet_tokenize(text, **kwargs)]


class TestTweetTokenize(unittest.TestCase):

    def test_tweet(self):
        self.assertEqual(
            _texts(" @remy: This is waaaaayyyy #too much for you"),
            ["@remy", ":", "This", "is", "waaaaayyyy", "#too", "much", "for", "you"],
        )

    def test_entities_in_order(self):
        self.assertEqual(
            _texts("123 @hello #world www.url.com abc@gmail.com"),
            ["123", "@hello", "#world", "www.url.com", "abc@gmail.com"],
        )

    def test_whitespace_is_never_a_token(self):
        self.assertEqual(_texts("hello   world\n\tagain "), ["hello", "world", "again"])
        self.assertEqual(_texts(""), [])
        self.assertEqual(_texts("   "), [])

    def test_url_then_emoji_alias(self):
        self.assertEqual(
            _texts("http://t.co/skU8zM7Slh :joy:"),
            ["http://t.co/skU8zM7Slh", ":joy:"],
        )

    def test_email_wins_over_mention(self):
        self.assertEqual(_texts("mail abc@gmail.com"), ["mail", "abc@gmail.com"])

    def test_html_tags(self):
        self.assertEqual(_texts("<p>hello</p>"), ["<p>", "hello", "</p>"])

    def test_arrows_digits_and_ellipsis(self):
        self.assertEqual(_texts("go --> 12.34 wait..."), ["go", "-->", "12.34", "wait", "..."])

    def test_words_keep_apostrophes_and_hyphens(self):
        self.assertEqual(_texts("don't self-made"), ["don't", "self-made"])

    def test_each_emoji_is_its_own_token(self):
        self.assertEqual(_texts("lol😂😂"), ["lol", "😂", "😂"])

    def test_emoticons_are_split_into_characters(self):
        # no emoticon branch in the alternation
        self.assertEqual(_texts("hi :)"), ["hi", ":", ")"])

    def test_twitter_rule_leaves_weibo_closing_mark(self):
        self.assertEqual(_texts("#中国# 加油"), ["#中国", "#", "加油"])

    def test_weibo_rule(self):
        from services.patterns import WEIBO_HASHTAGS
        tokens = tweet_tokenize("#中国# 加油", hashtag_rule=WEIBO_HASHTAGS)
        self.assertEqual([t.text for t in tokens], ["#中国#", "加油"])
        self.assertTrue(tokens[0].is_hashtag())

    def test_tokens_are_independent(self):
        tokens = tweet_tokenize("same same")
        tokens[0].set_text("changed")
        self.assertEqual(tokens[1].text, "same")

    def test_email_lookalike_runs_tokenize_in_linear_time(self):
        for text in ["x+" * 2500, "a-" * 2500, "a.b+" * 1250]:
            with self.subTest(text=text[:8]):
                t_start = time.perf_counter()
                tokens = tweet_tokenize(text)
                self.assertLess(time.perf_counter() - t_start, 0.2)
                self.assertGreater(len(tokens), 0)

    def test_long_local_part_is_not_an_email(self):
        self.assertEqual(_texts("a.b+c@gmail.com"), ["a.b+c@gmail.com"])
        self.assertNotIn("x" * 65 + "@gmail.com", _texts("x" * 65 + "@gmail.com"))


if __name__ == "__main__":
    unittest.main(verbosity=2)
