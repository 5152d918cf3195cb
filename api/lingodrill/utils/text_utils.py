"""
Text utility functions.
"""
import re
import unicodedata

# Punctuation a recognizer or a typist may add around an answer
ANSWER_PUNCTUATION_PATTERN = re.compile(r"[.,!?;:'\"()]")
WHITESPACE_PATTERN = re.compile(r"\s+")

# Combining marks used for the four pinyin tones: grave, acute, macron, caron
PINYIN_TONE_MARKS = frozenset("\u0300\u0301\u0304\u030c")

# Once tones are gone the u-umlaut family is written 'v', as on pinyin keyboards
PINYIN_UMLAUT_TABLE = str.maketrans({'ü': 'v'})


def fold_pinyin_tones(text: str) -> str:
    """
    Replace toned pinyin vowels with their base letter.

    ā/á/ǎ/à become a (likewise e, i, o, u) and ǖ/ǘ/ǚ/ǜ/ü become v.

    Args:
        text: Lower-cased text

    Returns:
        Text without tone marks
    """
    decomposed = unicodedata.normalize("NFD", text)
    untoned = "".join(ch for ch in decomposed if ch not in PINYIN_TONE_MARKS)
    folded = unicodedata.normalize("NFC", untoned).translate(PINYIN_UMLAUT_TABLE)
    return unicodedata.normalize("NFC", folded)


def normalize_answer(text: str, language: str) -> str:
    """
    Normalize an answer or transcript for comparison.

    Lower-cases, strips the punctuation set . , ! ? ; : ' " ( ), collapses
    whitespace runs to one space and trims. For Chinese decks the pinyin tone
    marks are folded as well. Applying it twice gives the same result as once.

    Args:
        text: Raw transcript or expected answer
        language: Deck language ('chinese', 'indonesian', ...)

    Returns:
        Normalized text
    """
    if not text:
        return ""

    normalized = unicodedata.normalize("NFC", text.lower())
    normalized = ANSWER_PUNCTUATION_PATTERN.sub("", normalized)
    normalized = WHITESPACE_PATTERN.sub(" ", normalized).strip()
    # Removing punctuation can put a base letter next to a stray combining mark
    normalized = unicodedata.normalize("NFC", normalized)

    if language == "chinese":
        normalized = fold_pinyin_tones(normalized)

    return normalized
