"""
Grading service for fuzzy matching of spoken or typed answers.

Speech recognizers add filler words, drop syllables and misspell; answers are
therefore compared after normalization, first by exact match, then by
containment in either direction, and finally by Levenshtein similarity.
"""
import logging

from lingodrill.schemas.grading import MatchResult
from lingodrill.utils.text_utils import normalize_answer

logger = logging.getLogger(__name__)

DEFAULT_MATCH_THRESHOLD = 0.6

# Similarity reported when the transcript wraps the whole expected answer
CONTAINMENT_SIMILARITY = 0.95

# Containment checks only apply to texts longer than this many characters
MIN_CONTAINMENT_LENGTH = 2

# A truncated transcript must cover at least this share of the expected answer
MIN_PARTIAL_RATIO = 0.7


def levenshtein_distance(source: str, target: str) -> int:
    """
    Compute the edit distance between two strings.

    Insertions, deletions and substitutions all cost 1.

    Args:
        source: First string
        target: Second string

    Returns:
        Minimum number of single-character edits turning source into target
    """
    if not source:
        return len(target)
    if not target:
        return len(source)

    previous_row = list(range(len(target) + 1))
    for i, source_char in enumerate(source, 1):
        current_row = [i]
        for j, target_char in enumerate(target, 1):
            cost = 0 if source_char == target_char else 1
            current_row.append(min(
                previous_row[j] + 1,         # deletion
                current_row[j - 1] + 1,      # insertion
                previous_row[j - 1] + cost,  # substitution
            ))
        previous_row = current_row

    return previous_row[-1]


def similarity(first: str, second: str) -> float:
    """
    Normalized Levenshtein similarity in [0, 1].

    Two empty strings are identical (1.0); one empty string matches nothing (0.0).
    """
    if not first and not second:
        return 1.0
    if not first or not second:
        return 0.0

    distance = levenshtein_distance(first, second)
    return 1 - distance / max(len(first), len(second))


def grade_answer(
    transcript: str,
    expected: str,
    language: str,
    threshold: float = DEFAULT_MATCH_THRESHOLD
) -> MatchResult:
    """
    Decide whether a transcript answers a card correctly.

    Checks run in order and the first hit wins:
    1. exact match of the normalized strings (similarity 1.0)
    2. transcript contains the expected answer, which is longer than 2 characters (0.95)
    3. expected answer contains the transcript, which is longer than 2 characters
       and covers at least 70% of it (similarity = covered share)
    4. Levenshtein similarity compared against threshold

    Args:
        transcript: Spoken or typed answer
        expected: Ground-truth answer
        language: Deck language, selects language-specific normalization
        threshold: Minimum similarity counted as correct in step 4

    Returns:
        MatchResult with verdict, similarity and both normalized strings
    """
    normalized_input = normalize_answer(transcript or "", language)
    normalized_expected = normalize_answer(expected or "", language)

    def result(correct: bool, score: float) -> MatchResult:
        return MatchResult(
            correct=correct,
            similarity=score,
            normalized_input=normalized_input,
            normalized_expected=normalized_expected,
        )

    if normalized_input == normalized_expected:
        return result(True, 1.0)

    # Verbose transcript wrapping the answer ("the answer is hello")
    if len(normalized_expected) > MIN_CONTAINMENT_LENGTH and normalized_expected in normalized_input:
        return result(True, CONTAINMENT_SIMILARITY)

    # Truncated transcript covering most of the answer
    if len(normalized_input) > MIN_CONTAINMENT_LENGTH and normalized_input in normalized_expected:
        ratio = len(normalized_input) / len(normalized_expected)
        if ratio >= MIN_PARTIAL_RATIO:
            return result(True, ratio)

    score = similarity(normalized_input, normalized_expected)
    logger.debug(
        f"Fuzzy grade '{normalized_input}' vs '{normalized_expected}': "
        f"similarity={score:.3f}, threshold={threshold}"
    )
    return result(score >= threshold, score)
