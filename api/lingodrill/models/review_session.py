"""
Review session and daily activity models.
"""
from sqlalchemy import DateTime
from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import datetime

from lingodrill.utils.time_utils import utc_now


class ReviewSession(SQLModel, table=True):
    """ReviewSession table - one graded answer for one card."""
    __tablename__ = "review_session"

    id: Optional[int] = Field(default=None, primary_key=True)
    flashcard_id: str = Field(foreign_key="flashcard.id", index=True)
    skill: Optional[str] = None  # Skill track the answer was graded for
    was_correct: bool
    reviewed_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True))
    time_taken: float = Field(default=0)  # Seconds from prompt to answer


class DailyActivity(SQLModel, table=True):
    """DailyActivity table - per-day review counters for a deck."""
    __tablename__ = "daily_activity"

    language: str = Field(primary_key=True)
    date: str = Field(primary_key=True)  # ISO format date string (YYYY-MM-DD)
    reviews: int = Field(default=0)
    correct: int = Field(default=0)
