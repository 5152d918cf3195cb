"""
Models package - imports all models so they register with SQLModel.
"""
# Import enums first
from lingodrill.models.enums import (
    Skill,
    DeckLanguage,
    QuizDirection,
    FailurePolicy,
    SessionState,
)

# Import all models
from lingodrill.models.category import Category
from lingodrill.models.flashcard import Flashcard
from lingodrill.models.review_session import ReviewSession, DailyActivity

__all__ = [
    'Skill',
    'DeckLanguage',
    'QuizDirection',
    'FailurePolicy',
    'SessionState',
    'Category',
    'Flashcard',
    'ReviewSession',
    'DailyActivity',
]
