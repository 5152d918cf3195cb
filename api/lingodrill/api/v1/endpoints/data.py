"""
Deck export and import endpoints.
"""
from fastapi import APIRouter, Body, Depends
from typing import Any, Dict
from lingodrill.core.database import get_store
from lingodrill.core.exceptions import ValidationError
from lingodrill.schemas.flashcard import ImportDataResponse
from lingodrill.services.flashcard_service import FlashcardStore
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/data", tags=["data"])


@router.get("/export")
async def export_data(store: FlashcardStore = Depends(get_store)) -> Dict[str, Any]:
    """Export the cards and categories of a deck as JSON."""
    return store.export_data()


@router.post("/import", response_model=ImportDataResponse)
async def import_data(
    payload: Any = Body(...),
    store: FlashcardStore = Depends(get_store)
):
    """
    Import cards and categories from an export or a legacy backup.

    Cards with an existing id are overwritten; everything else is added.
    """
    success, message = store.import_data(payload)
    if not success:
        logger.warning(f"Import into {store.language} deck failed: {message}")
        raise ValidationError(message)
    return ImportDataResponse(success=success, message=message)
