"""
tests/test_token.py
-------------------
Tests for Token (string behaviour and category predicates) and the
Action engine.

Run from the project root:
    python -m pytest tests/ -v
    # or
    python -m unittest tests/test_token.py -v
"""

import sys
import os
import unittest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from models.token import Action, ActionError, Category, Token, to_category  # noqa: E402


# ── 1. String behaviour ───────────────────────────────────────────────────────

class TestTokenString(unittest.TestCase):

    def test_behaves_like_its_text(self):
        token = Token("abc")
        self.assertEqual(str(token), "abc")
        self.assertEqual(repr(token), "Token('abc')")
        self.assertEqual(len(token), 3)
        self.assertEqual(list(token), ["a", "b", "c"])
        self.assertEqual(token[0], "a")
        self.assertEqual(token + "d", "abcd")
        self.assertEqual("x" + token, "xabc")

    def test_equality_with_tokens_and_strings(self):
        self.assertEqual(Token("abc"), Token("abc"))
        self.assertEqual(Token("abc"), "abc")
        self.assertNotEqual(Token("abc"), "abd")
        self.assertNotEqual(Token("1"), 1)

    def test_tokens_are_not_hashable(self):
        with self.assertRaises(TypeError):
            hash(Token("abc"))

    def test_set_text(self):
        token = Token("abc")
        token.set_text("xyz")
        self.assertEqual(token.text, "xyz")


# ── 2. Category predicates ────────────────────────────────────────────────────

class TestTokenPredicates(unittest.TestCase):

    CASES = {
        "is_mention": (["@tutu", "@a_b"], ["@@", "tutu@gmail.com", "tutu"]),
        "is_hashtag": (["#emnlp2019", "#nlp"], ["#123", "nlp", "#"]),
        "is_url": (["www.google.fr", "http://t.co/skU8zM7Slh"], ["google", "@tutu"]),
        "is_digit": (["123", "12.34", "12/34", "-5"], ["12abc", "abc"]),
        "is_email": (["tutu@gmail.com", "a.b+c@mail.co.uk"], ["@tutu", "tutu@"]),
        "is_html_tag": (["<p>", "</p>", "<MENTION>"], ["</p", "< p>"]),
        "is_emoticon": ([":)", ":-)", "<3"], ["hello", "12"]),
        "is_punct": ([",", "。", "’", "!"], ["12", "a", ",,"]),
        "is_emoji": (["😂", "😀", ":joy:"], [":notemoji:", "joy", "a"]),
    }

    def test_predicates(self):
        for condition, (positives, negatives) in self.CASES.items():
            for value in positives:
                with self.subTest(condition=condition, value=value):
                    self.assertTrue(getattr(Token(value), condition)())
            for value in negatives:
                with self.subTest(condition=condition, value=value):
                    self.assertFalse(getattr(Token(value), condition)())

    def test_is_a_accepts_category_or_name(self):
        token = Token("@tutu")
        self.assertTrue(token.is_a("is_mention"))
        self.assertTrue(token.is_a(Category.MENTION))
        self.assertFalse(token.is_a(Category.URL))

    def test_unknown_condition_raises(self):
        with self.assertRaises(ActionError):
            Token("x").is_a("is_banana")
        with self.assertRaises(ActionError):
            to_category("is_banana")

    def test_weibo_token_hashtags(self):
        from services.patterns import WEIBO_HASHTAGS
        self.assertTrue(Token("#中国#", hashtag_rule=WEIBO_HASHTAGS).is_hashtag())
        self.assertFalse(Token("#中国", hashtag_rule=WEIBO_HASHTAGS).is_hashtag())
        self.assertEqual(Token("#中国#", hashtag_rule=WEIBO_HASHTAGS).strip_hashtag(), "中国")

    def test_predicates_follow_rewritten_text(self):
        token = Token("@abc")
        self.assertTrue(token.is_mention())
        token.set_text("www.google.fr")
        self.assertFalse(token.is_mention())
        self.assertTrue(token.is_url())


# ── 3. Emoji conversions ──────────────────────────────────────────────────────

class TestTokenEmoji(unittest.TestCase):

    def test_demojize(self):
        self.assertEqual(Token("😀").demojize(), ":grinning:")
        self.assertEqual(Token("😂").demojize(), ":joy:")

    def test_demojize_unknown_wraps_text(self):
        self.assertEqual(Token("abc").demojize(), ":abc:")

    def test_emojize(self):
        self.assertEqual(Token(":grinning:").emojize(), "😀")

    def test_emojize_unknown_keeps_text(self):
        self.assertEqual(Token(":notemoji:").emojize(), ":notemoji:")
        self.assertEqual(Token("::").emojize(), "::")


# ── 4. Action engine ──────────────────────────────────────────────────────────

class TestAction(unittest.TestCase):

    def test_tag_url(self):
        token = Token("http://t.co/skU8zM7Slh")
        self.assertTrue(Action("is_url", "tag").apply(token))
        self.assertEqual(token.text, "<URL>")

    def test_remove_mention(self):
        token = Token("@abc")
        self.assertTrue(token.do_action(Action(Category.MENTION, "remove")))
        self.assertEqual(token.text, "")

    def test_tag_emoji(self):
        token = Token("😂")
        Action("is_emoji", "tag").apply(token)
        self.assertEqual(token.text, "<EMOJI>")

    def test_demojize_and_emojize_actions(self):
        token = Token("😀")
        Action("is_emoji", "demojize").apply(token)
        self.assertEqual(token.text, ":grinning:")
        Action("is_emoji", "emojize").apply(token)
        self.assertEqual(token.text, "😀")

    def test_remove_html_tag(self):
        token = Token("<p>")
        Action("is_html_tag", "remove").apply(token)
        self.assertEqual(token.text, "")

    def test_action_for_other_category_does_not_fire(self):
        token = Token("hello")
        self.assertFalse(Action("is_url", "tag").apply(token))
        self.assertEqual(token.text, "hello")

    def test_empty_action_never_fires(self):
        for name in [None, ""]:
            with self.subTest(name=name):
                token = Token("@abc")
                action = Action("is_mention", name)
                self.assertFalse(action.is_valid())
                self.assertFalse(action.apply(token))
                self.assertEqual(token.text, "@abc")

    def test_emojize_on_hashtag_is_a_configuration_error(self):
        with self.assertRaises(ActionError):
            Action("is_hashtag", "emojize").is_valid()
        with self.assertRaises(ActionError):
            Action("is_hashtag", "emojize").apply(Token("#nlp"))

    def test_html_tags_cannot_be_tagged(self):
        with self.assertRaises(ActionError):
            Action("is_html_tag", "tag").is_valid()

    def test_unknown_condition(self):
        with self.assertRaises(ActionError):
            Action("is_banana", "remove")

    def test_action_error_is_a_value_error(self):
        self.assertTrue(issubclass(ActionError, ValueError))


if __name__ == "__main__":
    unittest.main(verbosity=2)
