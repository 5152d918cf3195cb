"""
Practice session endpoints.

The session runs server-side; the UI speaks the prompt and sends back either
a flip-card verdict or the recognized transcript. After every handled answer
the next prompt is presented and the new snapshot returned.
"""
from fastapi import APIRouter, Depends, status
from lingodrill.core.database import get_store
from lingodrill.schemas.grading import MatchResult
from lingodrill.schemas.session import (
    StartSessionRequest,
    JudgmentRequest,
    TranscriptRequest,
    SessionStateResponse
)
from lingodrill.services.flashcard_service import FlashcardStore
from lingodrill.services.session_service import SessionManager, get_session_manager
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/sessions", tags=["sessions"])


@router.post("", response_model=SessionStateResponse, status_code=status.HTTP_201_CREATED)
async def start_session(
    request: StartSessionRequest,
    store: FlashcardStore = Depends(get_store),
    manager: SessionManager = Depends(get_session_manager)
):
    """
    Start a practice session over the cards due on a skill track.

    A session that is still running is stopped first. With no cards due the
    returned session is already finished.
    """
    session = await manager.start(store, request)
    return session.snapshot()


@router.get("/current", response_model=SessionStateResponse)
async def get_current_session(manager: SessionManager = Depends(get_session_manager)):
    """Get the state of the active session."""
    return manager.get().snapshot()


@router.post("/current/judgment", response_model=SessionStateResponse)
async def submit_judgment(
    request: JudgmentRequest,
    manager: SessionManager = Depends(get_session_manager)
):
    """Submit a flip-card verdict for the current card."""
    session = manager.get()
    await session.submit_manual_judgment(request.correct)
    await manager.present_if_ready(session)
    return session.snapshot()


@router.post("/current/transcript", response_model=SessionStateResponse)
async def submit_transcript(
    request: TranscriptRequest,
    manager: SessionManager = Depends(get_session_manager)
):
    """Grade a spoken or typed answer for the current card."""
    session = manager.get()
    result: MatchResult = await session.submit_transcript(request.transcript)
    logger.debug(f"Graded transcript '{request.transcript}': correct={result.correct}")
    await manager.present_if_ready(session)
    return session.snapshot()


@router.post("/current/skip", response_model=SessionStateResponse)
async def skip_card(manager: SessionManager = Depends(get_session_manager)):
    """Drop the current card from the session without touching its review state."""
    session = manager.get()
    await session.skip()
    await manager.present_if_ready(session)
    return session.snapshot()


@router.post("/current/stop", response_model=SessionStateResponse)
async def stop_session(manager: SessionManager = Depends(get_session_manager)):
    """Stop the active session."""
    return manager.stop().snapshot()
