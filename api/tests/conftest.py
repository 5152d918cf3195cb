import os
import sys
from datetime import date

import pytest

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

# Settings refuse to load without a database; tests run on in-memory SQLite
os.environ.setdefault("DATABASE_URL", "sqlite://")

from sqlmodel import create_engine
from sqlalchemy.pool import StaticPool

from lingodrill.core.database import init_db
from lingodrill.services.flashcard_service import FlashcardStore


TODAY = date(2024, 3, 15)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def store(engine):
    return FlashcardStore(engine, "chinese")


@pytest.fixture
def today():
    return TODAY
