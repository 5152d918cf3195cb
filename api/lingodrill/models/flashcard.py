"""
Flashcard model.
"""
from sqlalchemy import DateTime
from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import date, datetime
import uuid

from lingodrill.models.enums import Skill
from lingodrill.utils.time_utils import utc_now


def today_iso() -> str:
    """Local calendar date as YYYY-MM-DD."""
    return date.today().isoformat()


def new_card_id() -> str:
    return uuid.uuid4().hex


class Flashcard(SQLModel, table=True):
    """Flashcard table - a word with three independent skill tracks."""
    __tablename__ = "flashcard"

    id: str = Field(default_factory=new_card_id, primary_key=True)
    language: str = Field(index=True)  # Deck language ('chinese' or 'indonesian')
    word: str  # Target-language text
    translation: str  # English gloss
    pronunciation: Optional[str] = None  # Romanization / phonetic string
    category_id: Optional[int] = Field(default=None, foreign_key="category.id")
    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True))
    updated_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True))

    # Skill tracks: level 0-5, next review date as ISO date string
    reading_level: int = Field(default=0)
    reading_next_review_date: str = Field(default_factory=today_iso)
    listening_level: int = Field(default=0)
    listening_next_review_date: str = Field(default_factory=today_iso)
    speaking_level: int = Field(default=0)
    speaking_next_review_date: str = Field(default_factory=today_iso)

    def skill_level(self, skill: Skill) -> int:
        return getattr(self, f"{Skill(skill).value}_level")

    def skill_next_review_date(self, skill: Skill) -> str:
        return getattr(self, f"{Skill(skill).value}_next_review_date")

    def set_skill_track(self, skill: Skill, level: int, next_review_date: str) -> None:
        """Overwrite one skill track; the other two are left alone."""
        skill = Skill(skill)
        setattr(self, f"{skill.value}_level", level)
        setattr(self, f"{skill.value}_next_review_date", next_review_date)
