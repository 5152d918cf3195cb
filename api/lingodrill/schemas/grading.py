"""
Answer grading schemas.
"""
from pydantic import BaseModel, Field


class MatchResult(BaseModel):
    """Outcome of grading a transcript against an expected answer."""
    correct: bool
    similarity: float = Field(..., ge=0.0, le=1.0)
    normalized_input: str
    normalized_expected: str


class GradeRequest(BaseModel):
    """Request schema for grading a single transcript."""
    transcript: str = Field(..., description="Spoken or typed answer")
    expected: str = Field(..., description="Ground-truth answer")
    language: str = Field("chinese", description="Deck language used for normalization")
    threshold: float = Field(0.6, ge=0.0, le=1.0, description="Minimum similarity counted as correct")

    class Config:
        json_schema_extra = {
            "example": {
                "transcript": "ni hao",
                "expected": "nǐ hǎo",
                "language": "chinese",
                "threshold": 0.6
            }
        }
