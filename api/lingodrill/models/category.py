"""
Category model.
"""
from sqlalchemy import DateTime
from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import datetime

from lingodrill.utils.time_utils import utc_now


class Category(SQLModel, table=True):
    """Category table for grouping flashcards within a deck."""
    __tablename__ = "category"

    id: Optional[int] = Field(default=None, primary_key=True)
    language: str = Field(index=True)
    name: str
    color: str = Field(default="#FF5733")  # Hex color for visual distinction
    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True))
