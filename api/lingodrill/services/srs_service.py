"""
SRS (Spaced Repetition System) service implementing per-skill review levels.

Every flashcard carries three independent skill tracks (reading, listening,
speaking). Each track has a level 0-5 and a next review date; this service
maps a review outcome to the new level and date using a fixed interval table.
"""
import logging
from datetime import date, timedelta
from typing import Optional

from lingodrill.core.config import settings
from lingodrill.models.enums import FailurePolicy, Skill
from lingodrill.schemas.session import ScheduledReview

logger = logging.getLogger(__name__)


# Review intervals in days, indexed by level
# Level 0 = today, Level 1 = 1 day, Level 2 = 3 days, Level 3 = 5 days, Level 4 = 10 days, Level 5 = 24 days
REVIEW_INTERVALS = [0, 1, 3, 5, 10, 24]
MAX_LEVEL = 5
MIN_LEVEL = 0


def default_failure_policy() -> FailurePolicy:
    """Failure policy configured for the application."""
    return FailurePolicy(settings.failure_policy)


def next_interval(level: int) -> int:
    """
    Number of days until the next review for a level.

    Args:
        level: Skill level (clamped to 0-5)

    Returns:
        Days to add to today
    """
    level = max(MIN_LEVEL, min(MAX_LEVEL, level))
    return REVIEW_INTERVALS[level]


def calculate_next_review_date(level: int, today: Optional[date] = None) -> str:
    """
    Calculate the next review date for a level.

    Args:
        level: Skill level after the review
        today: Calendar date the review happened (defaults to the local date)

    Returns:
        ISO format date string (YYYY-MM-DD)
    """
    if today is None:
        today = date.today()
    return (today + timedelta(days=next_interval(level))).isoformat()


def update_level(
    current_level: int,
    correct: bool,
    policy: FailurePolicy = FailurePolicy.RESET
) -> int:
    """
    Update a skill level based on a review outcome.

    Args:
        current_level: Current level (0-5)
        correct: Whether the answer was correct
        policy: What a failure does; RESET drops to 0, DECREMENT moves down one level

    Returns:
        New level
    """
    # Clamp current level to valid range
    current_level = max(MIN_LEVEL, min(MAX_LEVEL, current_level))

    if correct:
        return min(MAX_LEVEL, current_level + 1)
    if policy == FailurePolicy.DECREMENT:
        return max(MIN_LEVEL, current_level - 1)
    return MIN_LEVEL


def apply_outcome(
    current_level: int,
    correct: bool,
    today: Optional[date] = None,
    policy: Optional[FailurePolicy] = None
) -> ScheduledReview:
    """
    Map a review outcome to the new level and next review date of one skill track.

    The interval used is the one of the new level: a correct answer at level 3
    moves the card to level 4 and schedules it 10 days out.

    Args:
        current_level: Level before the review
        correct: Whether the answer was correct
        today: Calendar date of the review (defaults to the local date)
        policy: Failure policy (defaults to the configured one)

    Returns:
        ScheduledReview with the new level and next review date
    """
    if policy is None:
        policy = default_failure_policy()

    new_level = update_level(current_level, correct, policy)
    return ScheduledReview(
        level=new_level,
        next_review_date=calculate_next_review_date(new_level, today),
    )


def is_due(next_review_date: str, today: Optional[date] = None) -> bool:
    """A card is due when its next review date is today or earlier (ISO strings compare by date)."""
    if today is None:
        today = date.today()
    return next_review_date <= today.isoformat()


def schedule_review(
    store,
    card_id: str,
    skill: Skill,
    correct: bool,
    today: Optional[date] = None,
    policy: Optional[FailurePolicy] = None
) -> ScheduledReview:
    """
    Read-modify-write one card's skill track after a graded review.

    Args:
        store: FlashcardStore holding the card
        card_id: Card to update
        skill: Skill track that was reviewed
        correct: Review outcome
        today: Calendar date of the review (defaults to the local date)
        policy: Failure policy (defaults to the configured one)

    Returns:
        The ScheduledReview written to the store

    Raises:
        NotFoundError: If the card does not exist
        PersistenceError: If the write fails
    """
    card = store.get_card(card_id)
    current_level = card.skill_level(skill)
    review = apply_outcome(current_level, correct, today=today, policy=policy)
    store.update_card_skill(card_id, skill, review.level, review.next_review_date)

    logger.info(
        f"Card {card_id} {Skill(skill).value}: level {current_level} -> {review.level}, "
        f"next review {review.next_review_date}"
    )
    return review
