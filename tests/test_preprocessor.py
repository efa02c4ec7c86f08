"""
tests/test_preprocessor.py
--------------------------
Tests for text normalization before tokenization.

Run from the project root:
    python -m pytest tests/ -v
"""

import sys
import os
import unittest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from services.preprocessor import (  # noqa: E402
    fix_encoding,
    normalize_quotes,
    preprocess_text,
    reduce_lengthening,
    split_attached_urls,
)


# ── 1. Individual steps ───────────────────────────────────────────────────────

class TestSteps(unittest.TestCase):

    def test_reduce_lengthening_caps_runs_at_three(self):
        self.assertEqual(reduce_lengthening("waaaaayyyy"), "waaayyy")
        self.assertEqual(reduce_lengthening("sooo"), "sooo")
        self.assertEqual(reduce_lengthening("too"), "too")
        self.assertEqual(reduce_lengthening("!!!!!!"), "!!!")

    def test_split_attached_urls(self):
        self.assertEqual(split_attached_urls("seeker:http://t.co/x"), "seeker: http://t.co/x")
        self.assertEqual(split_attached_urls("a https://t.co/x"), "a https://t.co/x")

    def test_normalize_quotes(self):
        self.assertEqual(normalize_quotes("“hi” «there» it’s ‘ok’"), "\"hi\" \"there\" it's 'ok'")

    def test_bytes_are_decoded_as_utf8(self):
        self.assertEqual(fix_encoding(b"caf\xc3\xa9"), "café")

    def test_undecodable_bytes_collapse_to_one_replacement(self):
        self.assertEqual(fix_encoding(b"bad\xff\xfeend"), "bad\ufffdend")

    def test_undecodable_bytes_removed(self):
        self.assertEqual(fix_encoding(b"bad\xff\xfeend", remove_unencodable_char=True), "badend")

    def test_mis_decoded_replacement_runs(self):
        self.assertEqual(fix_encoding("aï¿½ï¿½b"), "a\ufffdb")
        self.assertEqual(fix_encoding("a\ufffd\ufffd\ufffdb"), "a\ufffdb")

    def test_reencoding_a_string(self):
        self.assertEqual(fix_encoding("café", encoding="ascii"), "caf?")
        self.assertEqual(fix_encoding("café", encoding="utf-8"), "café")

    def test_bytes_with_named_encoding(self):
        self.assertEqual(fix_encoding("café".encode("latin-1"), encoding="latin-1"), "café")


# ── 2. Full preprocessing ─────────────────────────────────────────────────────

class TestPreprocessText(unittest.TestCase):

    def test_lowercases_by_default(self):
        self.assertEqual(preprocess_text("HELLO World"), "hello world")
        self.assertEqual(preprocess_text("HELLO World", to_lower=False), "HELLO World")

    def test_reduce_len_is_opt_in(self):
        self.assertEqual(preprocess_text("waaaaayyyy"), "waaaaayyyy")
        self.assertEqual(preprocess_text("waaaaayyyy", reduce_len=True), "waaayyy")

    def test_strip_accents_is_opt_in(self):
        self.assertEqual(preprocess_text("Être"), "être")
        self.assertEqual(preprocess_text("Être", strip_accents=True), "etre")

    def test_variation_selectors_always_removed(self):
        self.assertEqual(preprocess_text("i ❤\ufe0f nlp"), "i ❤ nlp")

    def test_html_entities_decoded(self):
        self.assertEqual(preprocess_text("a &amp; b"), "a & b")
        self.assertEqual(preprocess_text("I&#39;m here"), "i'm here")

    def test_entities_are_decoded_last(self):
        # decoded after lowercasing and accent stripping, so their output survives
        self.assertEqual(preprocess_text("&Eacute;t&eacute;", strip_accents=True), "été")

    def test_attached_url_is_split(self):
        self.assertEqual(
            preprocess_text("asylum seeker:http://t.co/skU8zM7Slh"),
            "asylum seeker: http://t.co/sku8zm7slh",
        )

    def test_empty_and_blank_input(self):
        self.assertEqual(preprocess_text(""), "")
        self.assertEqual(preprocess_text("   "), "   ")

    def test_never_raises_on_broken_bytes(self):
        self.assertEqual(preprocess_text(b"OK\xff"), "ok\ufffd")


if __name__ == "__main__":
    unittest.main(verbosity=2)
