"""
Tests for study statistics.
"""

from datetime import date, datetime

from lingodrill.models.enums import ChallengeType, Skill
from lingodrill.models.review_session import ReviewSession
from lingodrill.services.stats_service import (
    calculate_streak,
    challenge_progress,
    challenge_target,
    generate_daily_challenge,
    get_daily_challenge,
    get_study_stats,
    hash_date_string,
    percent_rounded,
)


class TestStreak:
    """Consecutive days ending today."""

    def test_counts_back_from_today(self):
        days = ["2024-03-15", "2024-03-14", "2024-03-13", "2024-03-10"]
        assert calculate_streak(days, date(2024, 3, 15)) == 3

    def test_no_activity_today_breaks_the_streak(self):
        assert calculate_streak(["2024-03-14", "2024-03-13"], date(2024, 3, 15)) == 0

    def test_empty(self):
        assert calculate_streak([], date(2024, 3, 15)) == 0


class TestAverageScore:
    """Percentages round halves up."""

    def test_half_rounds_up(self):
        assert percent_rounded(1, 8) == 13
        assert percent_rounded(3, 8) == 38

    def test_regular_rounding(self):
        assert percent_rounded(2, 3) == 67
        assert percent_rounded(1, 3) == 33
        assert percent_rounded(4, 4) == 100

    def test_no_reviews(self):
        assert percent_rounded(0, 0) == 0


class TestStudyStats:
    """Aggregates over cards and review history."""

    def test_empty_deck(self, store, today):
        stats = get_study_stats(store, today)

        assert stats.language == "chinese"
        assert stats.total_cards == 0
        assert stats.reviewed_today == 0
        assert stats.average_score == 0
        assert stats.streak_days == 0
        assert [s.skill for s in stats.skills] == ["reading", "listening", "speaking"]
        assert all(b.count == 0 for s in stats.skills for b in s.distribution)

    def test_review_counters(self, store, today):
        hello = store.create_card("你好", "hello", today=today)
        thanks = store.create_card("谢谢", "thank you", today=today)
        # Today: hello twice, thanks once; one miss
        store.append_review_session(hello.id, False, timestamp=datetime(2024, 3, 15, 8, 0))
        store.append_review_session(hello.id, True, timestamp=datetime(2024, 3, 15, 8, 1))
        store.append_review_session(thanks.id, True, timestamp=datetime(2024, 3, 15, 8, 2))
        # Yesterday and two days ago
        store.append_review_session(thanks.id, True, timestamp=datetime(2024, 3, 14, 21, 0))
        store.append_review_session(thanks.id, True, timestamp=datetime(2024, 3, 13, 21, 0))
        # Outside the 7-day window
        store.append_review_session(thanks.id, False, timestamp=datetime(2024, 3, 1, 21, 0))

        stats = get_study_stats(store, today)

        assert stats.total_cards == 2
        assert stats.reviewed_today == 2
        assert stats.average_score == 80
        assert stats.streak_days == 3

    def test_level_distribution_splits_due_and_not_due(self, store, today):
        first = store.create_card("一", "one", today=today)
        second = store.create_card("二", "two", today=today)
        store.create_card("三", "three", today=today)
        store.update_card_skill(first.id, Skill.SPEAKING, 2, "2024-03-18")
        store.update_card_skill(second.id, Skill.SPEAKING, 2, "2024-03-12")

        stats = get_study_stats(store, today)
        speaking = next(s for s in stats.skills if s.skill == "speaking")
        bins = {b.level: b for b in speaking.distribution}

        assert sorted(bins) == [0, 1, 2, 3, 4, 5]
        assert (bins[0].count, bins[0].count_due, bins[0].count_not_due) == (1, 1, 0)
        assert (bins[2].count, bins[2].count_due, bins[2].count_not_due) == (2, 1, 1)
        reading = next(s for s in stats.skills if s.skill == "reading")
        assert reading.distribution[0].count == 3

    def test_average_score_rounds_half_up(self, store, today):
        card = store.create_card("好", "good", today=today)
        for minute in range(8):
            store.append_review_session(card.id, minute == 0, timestamp=datetime(2024, 3, 15, 9, minute))

        assert get_study_stats(store, today).average_score == 13


def review(correct, skill=None):
    return ReviewSession(flashcard_id="card-1", was_correct=correct, skill=skill)


class TestDailyChallenge:
    """Deterministic challenge of the day."""

    def test_hash_matches_string_hash(self):
        # "2024": ((50 * 31 + 48) * 31 + 50) * 31 + 52
        assert hash_date_string("2024") == 1537280
        assert hash_date_string("") == 0

    def test_hash_stays_within_32_bits(self):
        for day in ("2024-03-15", "2025-12-31", "1999-01-01"):
            assert 0 <= hash_date_string(day) <= 2**31

    def test_same_day_same_challenge(self):
        first = generate_daily_challenge(date(2024, 3, 15), 20)
        second = generate_daily_challenge(date(2024, 3, 15), 20)

        assert first == second
        assert first.id == "challenge-2024-03-15"
        assert first.date == "2024-03-15"
        assert first.type == list(ChallengeType)[hash_date_string("2024-03-15") % 4]
        assert first.current_value == 0
        assert first.completed is False

    def test_description_names_the_target(self):
        challenge = generate_daily_challenge(date(2024, 3, 15), 20)
        assert str(challenge.target_value) in challenge.description

    def test_target_varies_by_seed(self):
        assert [challenge_target(ChallengeType.REVIEW_COUNT, 10, seed) for seed in (0, 1, 2)] == [9, 10, 11]

    def test_target_scales_with_large_decks(self):
        # 100 cards: min(10 + 5, 20) = 15
        assert [challenge_target(ChallengeType.REVIEW_COUNT, 100, seed) for seed in (3, 4, 5)] == [14, 15, 16]
        # 60 cards: min(15, 12) = 12
        assert challenge_target(ChallengeType.REVIEW_COUNT, 60, 1) == 12
        # Exactly 50 cards keeps the base
        assert challenge_target(ChallengeType.LISTENING_PRACTICE, 50, 1) == 8

    def test_target_never_below_three(self):
        assert challenge_target(ChallengeType.SPEAKING_PRACTICE, 0, 0) == 4
        assert all(
            challenge_target(challenge_type, cards, seed) >= 3
            for challenge_type in ChallengeType
            for cards in (0, 51, 500)
            for seed in range(3)
        )

    def test_progress_by_type(self):
        reviews = [
            review(True, "listening"),
            review(True, "speaking"),
            review(False, "speaking"),
            review(True, "reading"),
            review(True, "reading"),
            review(True),
        ]

        assert challenge_progress(ChallengeType.REVIEW_COUNT, reviews) == 6
        assert challenge_progress(ChallengeType.CORRECT_STREAK, reviews) == 3
        assert challenge_progress(ChallengeType.LISTENING_PRACTICE, reviews) == 1
        assert challenge_progress(ChallengeType.SPEAKING_PRACTICE, reviews) == 2
        assert challenge_progress(ChallengeType.CORRECT_STREAK, []) == 0

    def test_progress_counts_only_today(self, store, today):
        hello = store.create_card("你好", "hello", today=today)
        thanks = store.create_card("谢谢", "thank you", today=today)
        store.append_review_session(hello.id, True, timestamp=datetime(2024, 3, 15, 8, 0), skill=Skill.LISTENING)
        store.append_review_session(hello.id, True, timestamp=datetime(2024, 3, 15, 8, 1), skill=Skill.SPEAKING)
        store.append_review_session(thanks.id, False, timestamp=datetime(2024, 3, 15, 8, 2), skill=Skill.SPEAKING)
        store.append_review_session(thanks.id, True, timestamp=datetime(2024, 3, 15, 8, 3), skill=Skill.READING)
        store.append_review_session(thanks.id, True, timestamp=datetime(2024, 3, 14, 21, 0), skill=Skill.SPEAKING)

        challenge = get_daily_challenge(store, today)

        expected = {
            ChallengeType.REVIEW_COUNT: 4,
            ChallengeType.CORRECT_STREAK: 2,
            ChallengeType.LISTENING_PRACTICE: 1,
            ChallengeType.SPEAKING_PRACTICE: 2,
        }
        assert challenge.id == "challenge-2024-03-15"
        assert challenge.current_value == expected[challenge.type]
        assert challenge.completed is False

    def test_completed_when_target_reached(self, store, today):
        card = store.create_card("好", "good", today=today)
        target = generate_daily_challenge(today, 1).target_value
        for minute in range(target):
            for skill in (Skill.LISTENING, Skill.SPEAKING):
                store.append_review_session(
                    card.id, True, timestamp=datetime(2024, 3, 15, 9, minute, int(skill == Skill.SPEAKING)), skill=skill
                )

        challenge = get_daily_challenge(store, today)

        assert challenge.current_value >= challenge.target_value
        assert challenge.completed is True
