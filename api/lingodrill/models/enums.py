"""
Model enums.
"""
from enum import Enum


class Skill(str, Enum):
    """Independent skill tracks kept for every flashcard."""
    READING = "reading"
    LISTENING = "listening"
    SPEAKING = "speaking"


class DeckLanguage(str, Enum):
    """Languages a deck can be learned in."""
    CHINESE = "chinese"
    INDONESIAN = "indonesian"


class QuizDirection(str, Enum):
    """Which side of a card is shown as the prompt."""
    WORD_TO_TRANSLATION = "word_to_translation"
    TRANSLATION_TO_WORD = "translation_to_word"
    MIXED = "mixed"


class FailurePolicy(str, Enum):
    """What a failed review does to a skill level."""
    RESET = "reset"
    DECREMENT = "decrement"


class SessionState(str, Enum):
    """States of a practice session."""
    IDLE = "idle"
    LOADING = "loading"
    PROMPTING = "prompting"
    AWAITING_ANSWER = "awaiting_answer"
    GRADING = "grading"
    FEEDBACK = "feedback"
    FINISHED = "finished"
    STOPPED = "stopped"


class ChallengeType(str, Enum):
    """Kinds of daily challenge, in the order the date hash picks from."""
    REVIEW_COUNT = "review_count"
    CORRECT_STREAK = "correct_streak"
    LISTENING_PRACTICE = "listening_practice"
    SPEAKING_PRACTICE = "speaking_practice"
