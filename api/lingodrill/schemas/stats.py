"""
Study statistics schemas.
"""
from pydantic import BaseModel
from typing import List

from lingodrill.models.enums import ChallengeType


class LevelBinData(BaseModel):
    """Data for a single skill level."""
    level: int
    count: int
    count_due: int = 0  # Cards at this level whose next review date is today or earlier
    count_not_due: int = 0  # Cards at this level scheduled after today


class SkillDistribution(BaseModel):
    """Level distribution of one skill track."""
    skill: str
    distribution: List[LevelBinData]


class StudyStatsResponse(BaseModel):
    """Response for deck study statistics."""
    language: str
    total_cards: int
    reviewed_today: int
    average_score: int  # Percent correct over the last 7 days
    streak_days: int
    skills: List[SkillDistribution]


class DailyChallengeResponse(BaseModel):
    """Today's challenge and the progress made on it."""
    id: str
    type: ChallengeType
    description: str
    target_value: int
    current_value: int = 0
    date: str  # YYYY-MM-DD
    completed: bool = False

    class Config:
        json_schema_extra = {
            "example": {
                "id": "challenge-2024-03-15",
                "type": "review_count",
                "description": "Review 10 cards today",
                "target_value": 10,
                "current_value": 4,
                "date": "2024-03-15",
                "completed": False
            }
        }
