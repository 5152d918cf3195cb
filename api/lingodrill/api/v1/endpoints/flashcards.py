"""
Flashcard endpoints.
"""
from fastapi import APIRouter, Depends, status
from datetime import date
from typing import Optional
from lingodrill.core.database import get_store
from lingodrill.models.enums import Skill
from lingodrill.schemas.flashcard import (
    FlashcardResponse,
    CreateFlashcardRequest,
    FlashcardsResponse,
)
from lingodrill.services.flashcard_service import FlashcardStore
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/flashcards", tags=["flashcards"])


def _flashcards_response(cards) -> FlashcardsResponse:
    return FlashcardsResponse(
        flashcards=[FlashcardResponse.model_validate(card) for card in cards],
        count=len(cards)
    )


@router.get("", response_model=FlashcardsResponse)
async def list_flashcards(
    category_id: Optional[str] = None,
    store: FlashcardStore = Depends(get_store)
):
    """
    Get the cards of a deck, oldest first.

    Args:
        category_id: Optional category id, or 'uncategorized' for cards without a category
    """
    return _flashcards_response(store.list_cards(category_id))


@router.get("/due", response_model=FlashcardsResponse)
async def get_due_flashcards(
    skill: Skill,
    category_id: Optional[str] = None,
    today: Optional[date] = None,
    store: FlashcardStore = Depends(get_store)
):
    """Get the cards due for review on a skill track."""
    return _flashcards_response(store.get_due_cards(skill, today=today, category_id=category_id))


@router.post("", response_model=FlashcardResponse, status_code=status.HTTP_201_CREATED)
async def create_flashcard(
    request: CreateFlashcardRequest,
    store: FlashcardStore = Depends(get_store)
):
    """Create a card; all three skill tracks start at level 0 and are due today."""
    card = store.create_card(
        word=request.word,
        translation=request.translation,
        pronunciation=request.pronunciation,
        category_id=request.category_id
    )
    return FlashcardResponse.model_validate(card)


@router.get("/{card_id}", response_model=FlashcardResponse)
async def get_flashcard(
    card_id: str,
    store: FlashcardStore = Depends(get_store)
):
    """Get a card by ID."""
    return FlashcardResponse.model_validate(store.get_card(card_id))


@router.delete("/{card_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_flashcard(
    card_id: str,
    store: FlashcardStore = Depends(get_store)
):
    """Delete a card and its review history."""
    store.delete_card(card_id)
    return None
