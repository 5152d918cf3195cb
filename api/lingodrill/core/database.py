from typing import Optional
from sqlmodel import SQLModel, create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool
from lingodrill.core.config import settings
from lingodrill.models.enums import DeckLanguage
from lingodrill.services.flashcard_service import FlashcardStore
import logging

logger = logging.getLogger(__name__)


def normalize_database_url(db_url: str) -> str:
    """SQLAlchemy prefers postgresql:// over postgres://."""
    if db_url.startswith("postgres://"):
        db_url = db_url.replace("postgres://", "postgresql://", 1)
    return db_url


IN_MEMORY_SQLITE_URLS = ("sqlite://", "sqlite:///:memory:")


def build_engine(db_url: str) -> Engine:
    """
    Create a database engine for the given URL.

    SQLite engines are shared across threads (FastAPI runs sync dependencies in
    a threadpool) and do not accept pool sizing arguments.
    """
    db_url = normalize_database_url(db_url)
    if db_url in IN_MEMORY_SQLITE_URLS:
        # One shared connection, otherwise every connection gets its own empty database
        return create_engine(
            db_url,
            echo=False,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    if db_url.startswith("sqlite"):
        return create_engine(
            db_url,
            echo=False,
            connect_args={"check_same_thread": False},
        )
    return create_engine(
        db_url,
        echo=False,
        pool_pre_ping=True,  # Verify connections before using
        pool_size=5,
        max_overflow=10,
    )


logger.info(f"Connecting to database: {settings.database_url[:20]}...")  # Log partial URL for debugging

engine = build_engine(settings.database_url)


def get_store(language: Optional[DeckLanguage] = None) -> FlashcardStore:
    """Dependency for getting the flashcard store of a deck (defaults to the configured language)."""
    return FlashcardStore(engine, language.value if language is not None else None)


def init_db(target_engine: Engine = None):
    """Initialize database tables."""
    # Import models to register them with SQLModel
    from lingodrill import models  # noqa: F401

    SQLModel.metadata.create_all(target_engine or engine)
