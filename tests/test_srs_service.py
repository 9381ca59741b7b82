"""Tests for the pure study-weighting functions."""
import random
from collections import Counter
from dataclasses import dataclass
from datetime import date, timedelta

import pytest

from lingocards.models.card import MIN_STUDY_WEIGHT, MAX_STUDY_WEIGHT
from lingocards.models.enums import StudyOutcome
from lingocards.services.srs_service import (
    calculate_new_weight,
    weighted_random_sample,
    calculate_streak_from_dates,
    calculate_accuracy_rate,
)


@dataclass
class WeightedItem:
    name: str
    study_weight: float


class FixedRandom:
    """Stand-in for random.Random returning a fixed sequence of draws."""

    def __init__(self, *values):
        self.values = list(values)

    def random(self):
        return self.values.pop(0)


class TestCalculateNewWeight:

    @pytest.mark.parametrize("previous,outcome,expected", [
        (1.0, "correct", 0.8),
        (0.6, "correct", 0.5),
        (0.5, "correct", 0.5),
        (1.0, "incorrect", 1.5),
        (4.0, "incorrect", 5.0),
        (5.0, "incorrect", 5.0),
        (2.0, "skipped", 2.2),
        (4.8, "skipped", 5.0),
        (1.23456, "correct", 1.23456 * 0.8),
        (1.23456, "incorrect", 1.23456 * 1.5),
        (2.5, "skipped", 2.5 * 1.1),
    ])
    def test_outcome_multipliers(self, previous, outcome, expected):
        assert calculate_new_weight(previous, outcome) == expected

    def test_accepts_enum(self):
        assert calculate_new_weight(1.0, StudyOutcome.INCORRECT) == 1.5

    def test_unknown_outcome_rejected(self):
        with pytest.raises(ValueError):
            calculate_new_weight(1.0, "maybe")

    def test_stays_within_bounds(self):
        weights = [MIN_STUDY_WEIGHT + step * 0.25 for step in range(19)]
        for weight in weights:
            for outcome in StudyOutcome:
                new_weight = calculate_new_weight(weight, outcome)
                assert MIN_STUDY_WEIGHT <= new_weight <= MAX_STUDY_WEIGHT

    def test_repeated_misses_saturate(self):
        weight = 1.0
        for _ in range(10):
            weight = calculate_new_weight(weight, "incorrect")
        assert weight == MAX_STUDY_WEIGHT

        for _ in range(20):
            weight = calculate_new_weight(weight, "correct")
        assert weight == MIN_STUDY_WEIGHT


class TestWeightedRandomSample:

    def _items(self, *weights):
        return [WeightedItem(f"card-{i}", w) for i, w in enumerate(weights)]

    def test_returns_count_distinct_items(self):
        items = self._items(*[1.0] * 10)
        picked = weighted_random_sample(items, 4, random.Random(7))
        assert len(picked) == 4
        assert len({item.name for item in picked}) == 4
        assert all(item in items for item in picked)

    def test_count_larger_than_pool(self):
        items = self._items(1.0, 2.0, 3.0)
        picked = weighted_random_sample(items, 10, random.Random(1))
        assert sorted(item.name for item in picked) == ["card-0", "card-1", "card-2"]

    def test_empty_pool(self):
        assert weighted_random_sample([], 5) == []

    def test_does_not_mutate_input(self):
        items = self._items(1.0, 2.0, 3.0)
        weighted_random_sample(items, 2, random.Random(3))
        assert [item.name for item in items] == ["card-0", "card-1", "card-2"]

    def test_seeded_draws_are_reproducible(self):
        items = self._items(0.5, 1.0, 2.5, 5.0, 1.2, 3.3)
        first = weighted_random_sample(items, 3, random.Random(42))
        second = weighted_random_sample(items, 3, random.Random(42))
        assert first == second

    def test_walks_cumulative_weights(self):
        # Total weight 4.0: draw 0.6 * 4.0 = 2.4 falls inside the second card (1.0, 3.0]
        items = self._items(1.0, 2.0, 1.0)
        picked = weighted_random_sample(items, 1, FixedRandom(0.6))
        assert picked == [items[1]]

    def test_renormalizes_after_each_draw(self):
        # card-0 goes first; over the remaining 3.0, a draw of 1.5 passes card-1 and lands in card-2
        items = self._items(5.0, 1.0, 2.0)
        picked = weighted_random_sample(items, 2, FixedRandom(0.0, 0.5))
        assert [item.name for item in picked] == ["card-0", "card-2"]

    def test_top_draw_selects_last_item(self):
        items = self._items(1.0, 1.0, 1.0)
        picked = weighted_random_sample(items, 1, FixedRandom(0.9999999999))
        assert picked == [items[2]]

    def test_heavier_cards_drawn_more_often(self):
        items = self._items(5.0, 0.5)
        rng = random.Random(2024)
        firsts = Counter(weighted_random_sample(items, 1, rng)[0].name for _ in range(2000))
        assert firsts["card-0"] > firsts["card-1"] * 4


class TestCalculateStreak:
    today = date(2024, 5, 10)

    def _days(self, *offsets):
        return [self.today - timedelta(days=offset) for offset in offsets]

    def test_no_activity(self):
        assert calculate_streak_from_dates([], self.today) == 0

    def test_today_only(self):
        assert calculate_streak_from_dates(self._days(0), self.today) == 1

    def test_consecutive_days_ending_today(self):
        assert calculate_streak_from_dates(self._days(0, 1, 2), self.today) == 3

    def test_streak_ending_yesterday_still_counts(self):
        assert calculate_streak_from_dates(self._days(1, 2, 3), self.today) == 3

    def test_gap_before_yesterday_breaks_streak(self):
        assert calculate_streak_from_dates(self._days(2, 3, 4), self.today) == 0

    def test_first_gap_ends_count(self):
        assert calculate_streak_from_dates(self._days(0, 1, 3, 4, 5), self.today) == 2

    def test_duplicate_days_counted_once(self):
        assert calculate_streak_from_dates(self._days(0, 0, 1, 1, 1), self.today) == 2

    def test_future_days_ignored(self):
        days = self._days(0, 1) + [self.today + timedelta(days=1)]
        assert calculate_streak_from_dates(days, self.today) == 2


class TestAccuracyRate:

    def test_skips_excluded_from_denominator(self):
        assert calculate_accuracy_rate(correct=2, total=4, skipped=1) == 66.67

    def test_only_skips(self):
        assert calculate_accuracy_rate(correct=0, total=3, skipped=3) == 0.0

    def test_no_reviews(self):
        assert calculate_accuracy_rate(correct=0, total=0, skipped=0) == 0.0

    def test_perfect(self):
        assert calculate_accuracy_rate(correct=5, total=5, skipped=0) == 100.0
