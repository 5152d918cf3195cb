"""
Categories endpoint.
"""
from fastapi import APIRouter, Depends, status
from lingodrill.core.database import get_store
from lingodrill.schemas.flashcard import (
    CategoryResponse,
    CreateCategoryRequest,
    CategoriesResponse
)
from lingodrill.services.flashcard_service import FlashcardStore

router = APIRouter(prefix="/categories", tags=["categories"])


@router.get("", response_model=CategoriesResponse)
async def get_categories(store: FlashcardStore = Depends(get_store)):
    """Get the categories of a deck, oldest first."""
    return CategoriesResponse(
        categories=[CategoryResponse.model_validate(category) for category in store.list_categories()]
    )


@router.post("", response_model=CategoryResponse, status_code=status.HTTP_201_CREATED)
async def create_category(
    request: CreateCategoryRequest,
    store: FlashcardStore = Depends(get_store)
):
    """Create a category."""
    category = store.create_category(request.name, request.color)
    return CategoryResponse.model_validate(category)


@router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_category(
    category_id: int,
    store: FlashcardStore = Depends(get_store)
):
    """Delete a category. Its cards stay in the deck, uncategorized."""
    store.delete_category(category_id)
    return None
