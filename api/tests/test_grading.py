"""
Tests for the fuzzy answer grader.

Tests cover:
- Exact, forward-containment and backward-containment matches
- Levenshtein distance and similarity
- Threshold boundary behaviour
- Empty inputs
"""

import pytest

from lingodrill.services.grading_service import (
    CONTAINMENT_SIMILARITY,
    grade_answer,
    levenshtein_distance,
    similarity,
)


class TestLevenshtein:
    """Edit distance basics."""

    @pytest.mark.parametrize("source, target, expected", [
        ("", "", 0),
        ("", "abc", 3),
        ("abc", "", 3),
        ("kitten", "sitting", 3),
        ("flaw", "lawn", 2),
        ("你好", "你们好", 1),
    ])
    def test_distance(self, source, target, expected):
        assert levenshtein_distance(source, target) == expected

    def test_distance_is_symmetric(self):
        assert levenshtein_distance("selamat", "salamet") == levenshtein_distance("salamet", "selamat")

    def test_similarity_empty_cases(self):
        assert similarity("", "") == 1.0
        assert similarity("", "abc") == 0.0
        assert similarity("abc", "") == 0.0

    def test_similarity_value(self):
        assert similarity("abcd", "abcx") == pytest.approx(0.75)


class TestGradeAnswer:
    """Order of checks and verdicts."""

    def test_exact_match(self):
        result = grade_answer("你好", "你好", "chinese")
        assert result.correct is True
        assert result.similarity == 1.0

    def test_tone_folding_makes_pinyin_match(self):
        result = grade_answer("ni hao", "nǐ hǎo", "chinese", 0.6)
        assert result.correct is True
        assert result.similarity == 1.0
        assert result.normalized_expected == "ni hao"

    def test_case_and_punctuation_ignored(self):
        result = grade_answer("Hello!", "hello", "indonesian")
        assert result.correct is True
        assert result.similarity == 1.0

    def test_forward_containment(self):
        result = grade_answer("the answer is hello", "hello", "indonesian", 0.6)
        assert result.correct is True
        assert result.similarity == CONTAINMENT_SIMILARITY

    def test_forward_containment_needs_expected_longer_than_two(self):
        # "hi" is too short to be trusted inside a longer transcript
        result = grade_answer("this is hi there", "hi", "indonesian", 0.6)
        assert result.correct is False
        assert result.similarity < 0.6

    def test_backward_containment_with_enough_coverage(self):
        result = grade_answer("good morn", "good morning", "indonesian", 0.9)
        assert result.correct is True
        assert result.similarity == pytest.approx(9 / 12)

    def test_backward_containment_below_ratio_falls_through(self):
        # 4/12 coverage is not enough; Levenshtein decides
        result = grade_answer("good", "good morning", "indonesian", 0.6)
        assert result.correct is False
        assert result.similarity == pytest.approx(4 / 12)

    def test_threshold_boundary_exactly_met(self):
        result = grade_answer("abcde", "abcxy", "indonesian", 0.6)
        assert result.similarity == pytest.approx(0.6)
        assert result.correct is True

    def test_threshold_boundary_just_missed(self):
        expected = "a" * 100
        transcript = "a" * 59 + "b" * 41
        result = grade_answer(transcript, expected, "indonesian", 0.6)
        assert result.similarity == pytest.approx(0.59)
        assert result.correct is False

    def test_threshold_is_injectable(self):
        assert grade_answer("abcde", "abcxy", "indonesian", 0.5).correct is True
        assert grade_answer("abcde", "abcxy", "indonesian", 0.7).correct is False

    def test_empty_transcript_is_incorrect(self):
        result = grade_answer("", "hello", "indonesian")
        assert result.correct is False
        assert result.similarity == 0.0

    def test_empty_expected_does_not_crash(self):
        result = grade_answer("hello", "", "indonesian")
        assert result.correct is False
        assert result.similarity == 0.0

    def test_both_empty_is_a_match(self):
        result = grade_answer("?!", "", "chinese")
        assert result.correct is True
        assert result.similarity == 1.0
