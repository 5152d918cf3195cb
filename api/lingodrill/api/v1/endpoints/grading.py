"""
Answer grading endpoint.
"""
from fastapi import APIRouter
from lingodrill.schemas.grading import GradeRequest, MatchResult
from lingodrill.services.grading_service import grade_answer

router = APIRouter(prefix="/grading", tags=["grading"])


@router.post("", response_model=MatchResult)
async def grade(request: GradeRequest):
    """Fuzzy-match a spoken or typed answer against the expected one."""
    return grade_answer(request.transcript, request.expected, request.language, request.threshold)
