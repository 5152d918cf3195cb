"""
Tests for answer normalization.
"""

import pytest

from lingodrill.utils.text_utils import fold_pinyin_tones, normalize_answer


class TestNormalizeAnswer:
    """Lower-casing, punctuation, whitespace."""

    def test_lowercases_and_strips_punctuation(self):
        assert normalize_answer("Hello, World!", "indonesian") == "hello world"

    def test_collapses_whitespace_and_trims(self):
        assert normalize_answer("  good \t  morning \n", "indonesian") == "good morning"

    def test_punctuation_between_words_leaves_single_space(self):
        assert normalize_answer("thank you ( very much )", "indonesian") == "thank you very much"

    def test_empty_input(self):
        assert normalize_answer("", "chinese") == ""
        assert normalize_answer(None, "chinese") == ""

    def test_only_punctuation_becomes_empty(self):
        assert normalize_answer("?!.", "chinese") == ""

    def test_hanzi_untouched(self):
        assert normalize_answer("你好。", "chinese") == "你好。"

    @pytest.mark.parametrize("text, language", [
        ("Nǐ hǎo!", "chinese"),
        ("  Lǜ  sè ", "chinese"),
        ("Selamat pagi, Bu!", "indonesian"),
        ("What's (that)?", "english"),
    ])
    def test_idempotent(self, text, language):
        once = normalize_answer(text, language)
        assert normalize_answer(once, language) == once


class TestPinyinFolding:
    """Tone marks only fold for Chinese decks."""

    def test_tones_removed_for_chinese(self):
        assert normalize_answer("nǐ hǎo", "chinese") == "ni hao"

    def test_all_four_tones(self):
        assert fold_pinyin_tones("māmámǎmà") == "mamamama"

    def test_umlaut_becomes_v(self):
        assert fold_pinyin_tones("lǜ") == "lv"
        assert fold_pinyin_tones("nǚ") == "nv"
        assert fold_pinyin_tones("lü") == "lv"

    def test_other_languages_keep_diacritics(self):
        assert normalize_answer("café", "indonesian") == "café"
