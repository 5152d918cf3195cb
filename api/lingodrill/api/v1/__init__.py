"""
API v1 router aggregation.
"""
from fastapi import APIRouter
from lingodrill.api.v1.endpoints import (
    flashcards, categories, sessions, grading, stats, data
)

api_router = APIRouter()

# Include all endpoint routers
# Note: Each router already defines its own prefix, so we don't add another one here
api_router.include_router(flashcards.router)
api_router.include_router(categories.router)
api_router.include_router(sessions.router)
api_router.include_router(grading.router)
api_router.include_router(stats.router)
api_router.include_router(data.router)
