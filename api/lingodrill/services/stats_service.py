"""
Study statistics of a deck: daily review counts, recent accuracy, streak,
the level distribution of every skill track and the daily challenge.
"""
import logging
from datetime import date, timedelta
from typing import Dict, List, Optional

from lingodrill.models.enums import ChallengeType, Skill
from lingodrill.models.flashcard import Flashcard
from lingodrill.models.review_session import ReviewSession
from lingodrill.schemas.stats import DailyChallengeResponse, LevelBinData, SkillDistribution, StudyStatsResponse
from lingodrill.services.flashcard_service import FlashcardStore
from lingodrill.services.srs_service import MAX_LEVEL, MIN_LEVEL, is_due
from lingodrill.utils.time_utils import local_date, local_midnight, stored_as_utc

logger = logging.getLogger(__name__)

# Accuracy is averaged over this many days, today included
SCORE_WINDOW_DAYS = 7

# Challenge kinds with their description template and base target
CHALLENGE_CONFIGS: Dict[ChallengeType, Dict] = {
    ChallengeType.REVIEW_COUNT: {"description": "Review {n} cards today", "base_target": 10},
    ChallengeType.CORRECT_STREAK: {"description": "Get {n} cards correct in a row", "base_target": 5},
    ChallengeType.LISTENING_PRACTICE: {"description": "Complete {n} listening reviews", "base_target": 8},
    ChallengeType.SPEAKING_PRACTICE: {"description": "Complete {n} speaking reviews", "base_target": 5},
}

# Decks larger than this get a scaled challenge target
CHALLENGE_SCALE_MIN_CARDS = 50


def review_day(review: ReviewSession) -> date:
    """Local calendar day a review was recorded on."""
    return local_date(stored_as_utc(review.reviewed_at))


def percent_rounded(part: int, whole: int) -> int:
    """Percentage of part in whole, halves rounded up (1 of 8 is 13)."""
    if whole == 0:
        return 0
    return int(part * 100 / whole + 0.5)


def calculate_streak(active_days: List[str], today: Optional[date] = None) -> int:
    """
    Count consecutive study days ending today.

    A day counts when at least one review was recorded on it. A streak that
    ended yesterday is already broken.

    Args:
        active_days: ISO dates with at least one review, in any order
        today: Calendar date (defaults to the local date)

    Returns:
        Number of consecutive days
    """
    if today is None:
        today = date.today()
    days = set(active_days)

    streak = 0
    day = today
    while day.isoformat() in days:
        streak += 1
        day -= timedelta(days=1)
    return streak


def get_level_distribution(cards: List[Flashcard], skill: Skill, today: Optional[date] = None) -> List[LevelBinData]:
    """Number of cards at each level of a skill track, split into due and not due."""
    bins = {level: LevelBinData(level=level, count=0) for level in range(MIN_LEVEL, MAX_LEVEL + 1)}
    for card in cards:
        level = max(MIN_LEVEL, min(MAX_LEVEL, card.skill_level(skill)))
        bin_data = bins[level]
        bin_data.count += 1
        if is_due(card.skill_next_review_date(skill), today):
            bin_data.count_due += 1
        else:
            bin_data.count_not_due += 1
    return [bins[level] for level in sorted(bins)]


def get_study_stats(store: FlashcardStore, today: Optional[date] = None) -> StudyStatsResponse:
    """
    Compute the study statistics of a deck.

    Args:
        store: FlashcardStore of the deck
        today: Calendar date (defaults to the local date)

    Returns:
        StudyStatsResponse with:
        - reviewed_today: distinct cards answered today
        - average_score: percent of correct answers over the last 7 days (0 without reviews)
        - streak_days: consecutive days with reviews ending today
        - skills: level distribution per skill track
    """
    if today is None:
        today = date.today()

    window_start = local_midnight(today - timedelta(days=SCORE_WINDOW_DAYS - 1))
    recent_reviews = store.get_review_sessions(since=window_start)

    reviewed_today = len({
        review.flashcard_id
        for review in recent_reviews
        if review_day(review) == today
    })

    correct = sum(1 for review in recent_reviews if review.was_correct)
    average_score = percent_rounded(correct, len(recent_reviews))

    active_days = [activity.date for activity in store.get_daily_activity() if activity.reviews > 0]
    streak_days = calculate_streak(active_days, today)

    cards = store.list_cards()
    skills = [
        SkillDistribution(skill=skill.value, distribution=get_level_distribution(cards, skill, today))
        for skill in Skill
    ]

    logger.debug(
        f"Stats for {store.language} deck: {len(cards)} card(s), reviewed_today={reviewed_today}, "
        f"average_score={average_score}, streak_days={streak_days}"
    )
    return StudyStatsResponse(
        language=store.language,
        total_cards=len(cards),
        reviewed_today=reviewed_today,
        average_score=average_score,
        streak_days=streak_days,
        skills=skills,
    )


# ----------------------------------------------------------------------
# Daily challenge
# ----------------------------------------------------------------------

def hash_date_string(day: str) -> int:
    """Deterministic 32-bit hash of a date string (h * 31 + char, signed wrap, absolute value)."""
    value = 0
    for char in day:
        value = value * 31 + ord(char)
        value = (value + 2**31) % 2**32 - 2**31
    return abs(value)


def challenge_target(challenge_type: ChallengeType, total_cards: int, seed: int) -> int:
    """
    Target of a challenge.

    The base target applies to small decks; decks of more than 50 cards get
    a fifth of their size, at most 5 above the base. The date seed then moves
    the target by -1, 0 or +1, never below 3.
    """
    base = CHALLENGE_CONFIGS[challenge_type]["base_target"]
    target = base
    if total_cards > CHALLENGE_SCALE_MIN_CARDS:
        target = min(base + 5, int(total_cards * 0.2))
    return max(3, target + seed % 3 - 1)


def generate_daily_challenge(day: date, total_cards: int) -> DailyChallengeResponse:
    """Challenge of a calendar day, without progress."""
    day_str = day.isoformat()
    seed = hash_date_string(day_str)
    challenge_types = list(ChallengeType)
    challenge_type = challenge_types[seed % len(challenge_types)]
    target = challenge_target(challenge_type, total_cards, seed)
    return DailyChallengeResponse(
        id=f"challenge-{day_str}",
        type=challenge_type,
        description=CHALLENGE_CONFIGS[challenge_type]["description"].format(n=target),
        target_value=target,
        date=day_str,
    )


def longest_correct_run(reviews: List[ReviewSession]) -> int:
    longest = run = 0
    for review in reviews:
        run = run + 1 if review.was_correct else 0
        longest = max(longest, run)
    return longest


def challenge_progress(challenge_type: ChallengeType, reviews: List[ReviewSession]) -> int:
    """
    Progress on a challenge from one day's reviews.

    Args:
        challenge_type: Kind of challenge
        reviews: The day's review records in the order they were recorded
    """
    if challenge_type == ChallengeType.REVIEW_COUNT:
        return len(reviews)
    if challenge_type == ChallengeType.CORRECT_STREAK:
        return longest_correct_run(reviews)
    skill = Skill.LISTENING if challenge_type == ChallengeType.LISTENING_PRACTICE else Skill.SPEAKING
    return sum(1 for review in reviews if review.skill == skill.value)


def get_daily_challenge(store: FlashcardStore, today: Optional[date] = None) -> DailyChallengeResponse:
    """Today's challenge of a deck with the progress from today's reviews."""
    if today is None:
        today = date.today()

    challenge = generate_daily_challenge(today, len(store.list_cards()))
    reviews = [
        review for review in store.get_review_sessions(since=local_midnight(today))
        if review_day(review) == today
    ]
    reviews.sort(key=lambda review: (stored_as_utc(review.reviewed_at), review.id))

    challenge.current_value = challenge_progress(challenge.type, reviews)
    challenge.completed = challenge.current_value >= challenge.target_value
    logger.debug(
        f"Daily challenge for {store.language} deck on {challenge.date}: {challenge.type.value} "
        f"{challenge.current_value}/{challenge.target_value}"
    )
    return challenge
