"""
Review scheduling and practice session schemas.
"""
from pydantic import BaseModel, Field
from typing import List, Optional

from lingodrill.models.enums import Skill, QuizDirection, SessionState
from lingodrill.schemas.flashcard import FlashcardResponse
from lingodrill.schemas.grading import MatchResult


class ScheduledReview(BaseModel):
    """New level and next review date for one skill track."""
    level: int = Field(..., ge=0, le=5)
    next_review_date: str  # ISO format date string (YYYY-MM-DD)


class SessionTotals(BaseModel):
    """Counters reported when a session finishes."""
    correct: int = 0
    incorrect: int = 0
    skipped: int = 0


class StartSessionRequest(BaseModel):
    """Request to start a practice session."""
    skill: Skill = Field(..., description="Skill track to review")
    direction: QuizDirection = Field(QuizDirection.WORD_TO_TRANSLATION, description="Prompt direction")
    category_id: Optional[str] = Field(
        None, description="Category id, or 'uncategorized' for cards without a category"
    )
    practice_mode: bool = Field(False, description="Grade without updating spaced repetition state")
    threshold: Optional[float] = Field(None, ge=0.0, le=1.0, description="Grader threshold override")

    class Config:
        json_schema_extra = {
            "example": {
                "skill": "speaking",
                "direction": "translation_to_word",
                "category_id": None,
                "practice_mode": False
            }
        }


class JudgmentRequest(BaseModel):
    """Flip-card verdict from the UI."""
    correct: bool


class TranscriptRequest(BaseModel):
    """Spoken or typed answer from the UI."""
    transcript: str


class SessionStateResponse(BaseModel):
    """Snapshot of the active practice session."""
    state: SessionState
    skill: Skill
    direction: QuizDirection
    current_direction: Optional[QuizDirection] = None
    current_card: Optional[FlashcardResponse] = None
    prompt: Optional[str] = None
    expected_answer: Optional[str] = None
    remaining: int
    totals: SessionTotals
    last_result: Optional[MatchResult] = None
    last_correct: Optional[bool] = None
    warnings: List[str] = []
