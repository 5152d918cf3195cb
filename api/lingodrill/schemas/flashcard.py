"""
Flashcard and category schemas.
"""
from pydantic import BaseModel, Field, field_validator
from typing import List, Optional
from datetime import datetime


class FlashcardResponse(BaseModel):
    """Flashcard response schema with all three skill tracks."""
    id: str
    language: str
    word: str
    translation: str
    pronunciation: Optional[str] = None
    category_id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    reading_level: int
    reading_next_review_date: str
    listening_level: int
    listening_next_review_date: str
    speaking_level: int
    speaking_next_review_date: str

    class Config:
        from_attributes = True


class CreateFlashcardRequest(BaseModel):
    """Request schema for creating a flashcard."""
    word: str = Field(..., description="Target-language text")
    translation: str = Field(..., description="English gloss")
    pronunciation: Optional[str] = Field(None, description="Romanization or phonetic string")
    category_id: Optional[int] = Field(None, description="Category to file the card under")

    @field_validator('word', 'translation')
    @classmethod
    def strip_required_text(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be empty")
        return v

    class Config:
        json_schema_extra = {
            "example": {
                "word": "你好",
                "translation": "hello",
                "pronunciation": "nǐ hǎo",
                "category_id": None
            }
        }


class FlashcardsResponse(BaseModel):
    """Response schema for a list of flashcards."""
    flashcards: List[FlashcardResponse]
    count: int


class CategoryResponse(BaseModel):
    """Category response schema."""
    id: int
    language: str
    name: str
    color: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class CreateCategoryRequest(BaseModel):
    """Request schema for creating a category."""
    name: str
    color: str = "#FF5733"


class CategoriesResponse(BaseModel):
    """Response schema for categories list."""
    categories: List[CategoryResponse]


class ImportDataResponse(BaseModel):
    """Response from a data import."""
    success: bool
    message: str
