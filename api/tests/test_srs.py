"""
Tests for the per-skill review scheduler.
"""

from datetime import date

import pytest

from lingodrill.core.exceptions import NotFoundError
from lingodrill.models.enums import FailurePolicy, Skill
from lingodrill.services.srs_service import (
    REVIEW_INTERVALS,
    apply_outcome,
    calculate_next_review_date,
    is_due,
    next_interval,
    schedule_review,
    update_level,
)


class TestIntervals:
    """Fixed level -> days table."""

    @pytest.mark.parametrize("level, days", [(0, 0), (1, 1), (2, 3), (3, 5), (4, 10), (5, 24)])
    def test_table(self, level, days):
        assert next_interval(level) == days

    def test_out_of_range_levels_are_clamped(self):
        assert next_interval(-3) == REVIEW_INTERVALS[0]
        assert next_interval(9) == REVIEW_INTERVALS[-1]

    def test_date_is_iso(self, today):
        assert calculate_next_review_date(2, today) == "2024-03-18"

    def test_date_crosses_month_end(self):
        assert calculate_next_review_date(5, date(2024, 1, 20)) == "2024-02-13"


class TestApplyOutcome:
    """Level transitions and the dates they produce."""

    @pytest.mark.parametrize("level", range(6))
    def test_correct_moves_up_one_capped_at_five(self, level, today):
        assert apply_outcome(level, True, today, FailurePolicy.RESET).level == min(5, level + 1)

    @pytest.mark.parametrize("level", range(6))
    def test_failure_resets_to_zero(self, level, today):
        review = apply_outcome(level, False, today, FailurePolicy.RESET)
        assert review.level == 0
        assert review.next_review_date == today.isoformat()

    def test_uses_interval_of_new_level(self, today):
        # 3 -> 4, and level 4 waits 10 days
        review = apply_outcome(3, True, today, FailurePolicy.RESET)
        assert review.level == 4
        assert review.next_review_date == "2024-03-25"

    def test_max_level_stays_at_max(self, today):
        review = apply_outcome(5, True, today, FailurePolicy.RESET)
        assert review.level == 5
        assert review.next_review_date == "2024-04-08"

    def test_decrement_policy(self):
        assert update_level(3, False, FailurePolicy.DECREMENT) == 2
        assert update_level(0, False, FailurePolicy.DECREMENT) == 0

    def test_default_policy_is_reset(self, today):
        assert apply_outcome(4, False, today).level == 0


class TestIsDue:
    """Due when the next review date is today or earlier."""

    def test_today_is_due(self, today):
        assert is_due("2024-03-15", today) is True

    def test_past_is_due(self, today):
        assert is_due("2023-12-31", today) is True

    def test_future_is_not_due(self, today):
        assert is_due("2024-03-16", today) is False


class TestScheduleReview:
    """Read-modify-write of one skill track."""

    def test_updates_only_the_reviewed_skill(self, store, today):
        card = store.create_card("你好", "hello", "nǐ hǎo", today=today)

        review = schedule_review(store, card.id, Skill.SPEAKING, True, today=today)

        saved = store.get_card(card.id)
        assert review.level == 1
        assert saved.speaking_level == 1
        assert saved.speaking_next_review_date == "2024-03-16"
        assert saved.reading_level == 0
        assert saved.reading_next_review_date == "2024-03-15"
        assert saved.listening_level == 0
        assert saved.listening_next_review_date == "2024-03-15"

    def test_failure_resets_persisted_level(self, store, today):
        card = store.create_card("谢谢", "thank you", today=today)
        store.update_card_skill(card.id, Skill.LISTENING, 4, "2024-03-10")

        schedule_review(store, card.id, Skill.LISTENING, False, today=today, policy=FailurePolicy.RESET)

        saved = store.get_card(card.id)
        assert saved.listening_level == 0
        assert saved.listening_next_review_date == "2024-03-15"

    def test_unknown_card(self, store, today):
        with pytest.raises(NotFoundError):
            schedule_review(store, "missing", Skill.READING, True, today=today)
