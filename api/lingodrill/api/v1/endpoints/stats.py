"""
Study statistics endpoints.
"""
from fastapi import APIRouter, Depends
from datetime import date
from typing import Optional
from lingodrill.core.database import get_store
from lingodrill.schemas.stats import DailyChallengeResponse, StudyStatsResponse
from lingodrill.services.flashcard_service import FlashcardStore
from lingodrill.services.stats_service import get_daily_challenge, get_study_stats

router = APIRouter(prefix="/stats", tags=["stats"])


@router.get("", response_model=StudyStatsResponse)
async def get_stats(
    today: Optional[date] = None,
    store: FlashcardStore = Depends(get_store)
):
    """
    Get the study statistics of a deck.

    Returns cards reviewed today, the 7-day accuracy, the study streak and
    the level distribution of every skill track.
    """
    return get_study_stats(store, today)


@router.get("/challenge", response_model=DailyChallengeResponse)
async def get_challenge(
    today: Optional[date] = None,
    store: FlashcardStore = Depends(get_store)
):
    """
    Get the daily challenge of a deck.

    The challenge is the same all day; progress counts today's reviews.
    """
    return get_daily_challenge(store, today)
