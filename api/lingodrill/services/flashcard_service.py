"""
Flashcard store: persistence of cards, categories and review history for one deck.
"""
# pyright: reportAttributeAccessIssue=false
# pyright: reportArgumentType=false
import logging
from contextlib import contextmanager
from datetime import date, datetime
from typing import Any, Dict, Iterator, List, Optional, Tuple

from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from lingodrill.core.config import settings
from lingodrill.core.exceptions import NotFoundError, PersistenceError, ValidationError
from lingodrill.models.category import Category
from lingodrill.models.enums import Skill
from lingodrill.models.flashcard import Flashcard, new_card_id
from lingodrill.models.review_session import DailyActivity, ReviewSession
from lingodrill.services.srs_service import MAX_LEVEL, MIN_LEVEL
from lingodrill.utils.time_utils import as_utc, local_date, utc_now

logger = logging.getLogger(__name__)

# Category filter value selecting cards that are not filed under any category
UNCATEGORIZED = "uncategorized"

EXPORT_VERSION = "1.0"


def matches_category(card: Flashcard, category_filter: Optional[str]) -> bool:
    """
    Check a card against a category filter.

    Args:
        card: Flashcard to check
        category_filter: None (any card), 'uncategorized', or a category id

    Returns:
        True if the card passes the filter
    """
    if category_filter is None:
        return True
    if category_filter == UNCATEGORIZED:
        return card.category_id is None
    return card.category_id is not None and str(card.category_id) == str(category_filter)


def _validate_iso_date(value: str) -> str:
    try:
        return date.fromisoformat(value).isoformat()
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid review date '{value}', expected YYYY-MM-DD")


class FlashcardStore:
    """
    Flashcard collection of one deck language.

    Every call opens a short-lived database session; every write is a
    single-card read-modify-write committed before the method returns.
    Database errors, on reads and writes alike, surface as PersistenceError.
    """

    def __init__(self, engine: Engine, language: Optional[str] = None):
        self.engine = engine
        self.language = (language or settings.learning_language).lower()

    @contextmanager
    def _session(self, action: str) -> Iterator[Session]:
        # Objects stay readable after commit; sessions hand them to the engine detached
        session = Session(self.engine, expire_on_commit=False)
        try:
            yield session
        except SQLAlchemyError as e:
            session.rollback()
            logger.error(f"Error while trying to {action}: {str(e)}")
            raise PersistenceError(f"Failed to {action}: {str(e)}") from e
        finally:
            session.close()

    # ------------------------------------------------------------------
    # Cards
    # ------------------------------------------------------------------

    def list_cards(self, category_id: Optional[str] = None) -> List[Flashcard]:
        """All cards of the deck, oldest first, optionally filtered by category."""
        with self._session("list flashcards") as session:
            cards = session.exec(
                select(Flashcard)
                .where(Flashcard.language == self.language)
                .order_by(Flashcard.created_at)  # type: ignore
            ).all()
        return [card for card in cards if matches_category(card, category_id)]

    def get_due_cards(
        self,
        skill: Skill,
        today: Optional[date] = None,
        category_id: Optional[str] = None
    ) -> List[Flashcard]:
        """
        Cards due for review on a skill track.

        Args:
            skill: Skill track to check
            today: Calendar date (defaults to the local date)
            category_id: Optional category filter (id or 'uncategorized')

        Returns:
            Cards whose next review date for the skill is today or earlier
        """
        skill = Skill(skill)
        today_str = (today or date.today()).isoformat()
        date_column = getattr(Flashcard, f"{skill.value}_next_review_date")
        with self._session(f"load due {skill.value} flashcards") as session:
            cards = session.exec(
                select(Flashcard).where(
                    Flashcard.language == self.language,
                    date_column <= today_str
                )
            ).all()
        return [card for card in cards if matches_category(card, category_id)]

    def get_card(self, card_id: str) -> Flashcard:
        """
        Get one card of the deck.

        Raises:
            NotFoundError: If no card with this id exists in the deck
        """
        with self._session(f"load flashcard {card_id}") as session:
            card = session.get(Flashcard, card_id)
        if card is None or card.language != self.language:
            raise NotFoundError(f"Flashcard with id {card_id} not found")
        return card

    def create_card(
        self,
        word: str,
        translation: str,
        pronunciation: Optional[str] = None,
        category_id: Optional[int] = None,
        today: Optional[date] = None
    ) -> Flashcard:
        """Create a card with all three skill tracks at level 0 and due today."""
        today_str = (today or date.today()).isoformat()
        card = Flashcard(
            language=self.language,
            word=word,
            translation=translation,
            pronunciation=pronunciation,
            category_id=category_id,
        )
        for skill in Skill:
            card.set_skill_track(skill, 0, today_str)

        with self._session(f"create flashcard '{word}'") as session:
            session.add(card)
            session.commit()
            session.refresh(card)
        logger.info(f"Created flashcard {card.id} '{word}' in {self.language} deck")
        return card

    def delete_card(self, card_id: str) -> None:
        """Delete a card together with its review history."""
        with self._session(f"delete flashcard {card_id}") as session:
            card = session.get(Flashcard, card_id)
            if card is None or card.language != self.language:
                raise NotFoundError(f"Flashcard with id {card_id} not found")
            reviews = session.exec(
                select(ReviewSession).where(ReviewSession.flashcard_id == card_id)
            ).all()
            for review in reviews:
                session.delete(review)
            session.delete(card)
            session.commit()

    def update_card_skill(
        self,
        card_id: str,
        skill: Skill,
        level: int,
        next_review_date: str
    ) -> None:
        """
        Write the level and next review date of one skill track.

        Raises:
            ValidationError: If level is outside 0-5 or the date is not YYYY-MM-DD
            NotFoundError: If the card does not exist
            PersistenceError: If the write fails
        """
        if not MIN_LEVEL <= level <= MAX_LEVEL:
            raise ValidationError(f"Level must be between {MIN_LEVEL} and {MAX_LEVEL}, got {level}")
        next_review_date = _validate_iso_date(next_review_date)

        with self._session(f"update {Skill(skill).value} track of flashcard {card_id}") as session:
            card = session.get(Flashcard, card_id)
            if card is None or card.language != self.language:
                raise NotFoundError(f"Flashcard with id {card_id} not found")
            card.set_skill_track(skill, level, next_review_date)
            card.updated_at = utc_now()
            session.add(card)
            session.commit()

    # ------------------------------------------------------------------
    # Review history
    # ------------------------------------------------------------------

    def append_review_session(
        self,
        card_id: str,
        correct: bool,
        timestamp: Optional[datetime] = None,
        skill: Optional[Skill] = None,
        time_taken: float = 0
    ) -> ReviewSession:
        """
        Record one graded answer and bump the day's activity counters.

        A naive timestamp is read as local time. The record is stored in UTC
        and counted on the local calendar day it falls on.

        Raises:
            PersistenceError: If the write fails
        """
        timestamp = as_utc(timestamp) if timestamp is not None else utc_now()
        day = local_date(timestamp).isoformat()
        review = ReviewSession(
            flashcard_id=card_id,
            skill=Skill(skill).value if skill is not None else None,
            was_correct=correct,
            reviewed_at=timestamp,
            time_taken=time_taken,
        )

        with self._session(f"record review of flashcard {card_id}") as session:
            session.add(review)
            activity = session.get(DailyActivity, (self.language, day))
            if activity is None:
                activity = DailyActivity(language=self.language, date=day)
            activity.reviews += 1
            if correct:
                activity.correct += 1
            session.add(activity)
            session.commit()
            session.refresh(review)
        return review

    def get_review_sessions(self, since: Optional[datetime] = None) -> List[ReviewSession]:
        """Review records of the deck's cards, optionally only those after a point in time."""
        with self._session("load review history") as session:
            query = (
                select(ReviewSession)
                .join(Flashcard, Flashcard.id == ReviewSession.flashcard_id)
                .where(Flashcard.language == self.language)
            )
            if since is not None:
                query = query.where(ReviewSession.reviewed_at >= as_utc(since))
            return list(session.exec(query).all())

    def get_daily_activity(self) -> List[DailyActivity]:
        """Per-day activity counters of the deck, most recent first."""
        with self._session("load daily activity") as session:
            return list(session.exec(
                select(DailyActivity)
                .where(DailyActivity.language == self.language)
                .order_by(DailyActivity.date.desc())  # type: ignore
            ).all())

    # ------------------------------------------------------------------
    # Categories
    # ------------------------------------------------------------------

    def list_categories(self) -> List[Category]:
        with self._session("list categories") as session:
            return list(session.exec(
                select(Category)
                .where(Category.language == self.language)
                .order_by(Category.created_at)  # type: ignore
            ).all())

    def create_category(self, name: str, color: str = "#FF5733") -> Category:
        name = name.strip()
        if not name:
            raise ValidationError("Category name must not be empty")
        category = Category(language=self.language, name=name, color=color)
        with self._session(f"create category '{name}'") as session:
            session.add(category)
            session.commit()
            session.refresh(category)
        return category

    def delete_category(self, category_id: int) -> None:
        """Delete a category; its cards become uncategorized."""
        with self._session(f"delete category {category_id}") as session:
            category = session.get(Category, category_id)
            if category is None or category.language != self.language:
                raise NotFoundError(f"Category with id {category_id} not found")
            cards = session.exec(
                select(Flashcard).where(Flashcard.category_id == category_id)
            ).all()
            for card in cards:
                card.category_id = None
                session.add(card)
            session.delete(category)
            session.commit()

    # ------------------------------------------------------------------
    # Export / import
    # ------------------------------------------------------------------

    def export_data(self) -> Dict[str, Any]:
        """Serialize the deck's cards and categories to a JSON-compatible dict."""
        flashcards = []
        for card in self.list_cards():
            flashcards.append({
                "id": card.id,
                "word": card.word,
                "translation": card.translation,
                "pronunciation": card.pronunciation,
                "categoryId": card.category_id,
                "createdAt": card.created_at.isoformat() if card.created_at else None,
                "readingReviewLevel": card.reading_level,
                "readingNextReviewDate": card.reading_next_review_date,
                "listeningReviewLevel": card.listening_level,
                "listeningNextReviewDate": card.listening_next_review_date,
                "speakingReviewLevel": card.speaking_level,
                "speakingNextReviewDate": card.speaking_next_review_date,
            })
        categories = [
            {
                "id": category.id,
                "name": category.name,
                "color": category.color,
                "createdAt": category.created_at.isoformat() if category.created_at else None,
            }
            for category in self.list_categories()
        ]
        return {
            "flashcards": flashcards,
            "categories": categories,
            "exportDate": utc_now().isoformat(),
            "version": EXPORT_VERSION,
        }

    def import_data(self, payload: Dict[str, Any], today: Optional[date] = None) -> Tuple[bool, str]:
        """
        Import cards and categories from an export or a legacy backup.

        Legacy card fields are accepted: text/chinese/word for the word,
        pinyin/pronunciation, translation/english. Missing skill tracks start
        at level 0 and are due today. Cards whose id already exists are updated.

        Returns:
            (success, message)
        """
        if not isinstance(payload, dict):
            return False, "Invalid data format"

        today_str = (today or date.today()).isoformat()
        category_id_map: Dict[Any, int] = {}
        imported_cards = 0

        try:
            with self._session("import flashcards") as session:
                for raw in payload.get("categories") or []:
                    if not isinstance(raw, dict):
                        continue
                    category = Category(
                        language=self.language,
                        name=raw.get("name") or "Unnamed Category",
                        color=raw.get("color") or "#FF5733",
                    )
                    session.add(category)
                    session.flush()  # Flush to get the ID
                    if raw.get("id") is not None:
                        category_id_map[raw["id"]] = category.id

                for raw in payload.get("flashcards") or []:
                    if not isinstance(raw, dict):
                        continue
                    card_id = str(raw.get("id") or new_card_id())
                    card = session.get(Flashcard, card_id)
                    if card is None:
                        card = Flashcard(id=card_id, language=self.language, word="", translation="")
                    elif card.language != self.language:
                        logger.warning(f"Skipping import of card {card_id}: it belongs to the {card.language} deck")
                        continue
                    card.word = raw.get("text") or raw.get("chinese") or raw.get("word") or ""
                    card.pronunciation = raw.get("pinyin") or raw.get("pronunciation") or None
                    card.translation = raw.get("translation") or raw.get("english") or ""
                    card.category_id = category_id_map.get(raw.get("categoryId"))
                    card.updated_at = utc_now()
                    for skill in Skill:
                        level = raw.get(f"{skill.value}ReviewLevel")
                        level = level if isinstance(level, int) else 0
                        level = max(MIN_LEVEL, min(MAX_LEVEL, level))
                        try:
                            next_review_date = _validate_iso_date(raw.get(f"{skill.value}NextReviewDate"))
                        except ValidationError:
                            next_review_date = today_str
                        card.set_skill_track(skill, level, next_review_date)
                    session.add(card)
                    imported_cards += 1

                session.commit()
        except PersistenceError as e:
            return False, str(e)

        logger.info(f"Imported {imported_cards} flashcard(s) into {self.language} deck")
        return True, "Data imported successfully"
