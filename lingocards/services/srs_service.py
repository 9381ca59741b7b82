"""
Study weighting service.

Each card carries a study weight between 0.5 and 5.0. Reviews move the weight
up or down, and study sessions draw cards with probability proportional to
their weight. This module holds the pure parts of that scheme; the database
side lives in study_service.
"""
import logging
import random
from datetime import date, timedelta
from typing import Iterable, List, Optional, Sequence, TypeVar, Union

from lingocards.models.card import MIN_STUDY_WEIGHT, MAX_STUDY_WEIGHT
from lingocards.models.enums import StudyOutcome

logger = logging.getLogger(__name__)

# Multipliers applied to the previous weight for each outcome
CORRECT_FACTOR = 0.8
INCORRECT_FACTOR = 1.5
SKIPPED_FACTOR = 1.1

CardT = TypeVar("CardT")


def calculate_new_weight(previous_weight: float, outcome: Union[StudyOutcome, str]) -> float:
    """
    Calculate a card's study weight after a review.

    - correct: decay towards the floor (card resurfaces less often)
    - incorrect: grow towards the ceiling (card resurfaces sooner)
    - skipped: mild growth

    Args:
        previous_weight: Weight before the review (0.5-5.0)
        outcome: Review outcome ('correct', 'incorrect' or 'skipped')

    Returns:
        New weight, clamped to [0.5, 5.0]

    Raises:
        ValueError: If the outcome is not one of the three known values
    """
    outcome = StudyOutcome(outcome)

    if outcome == StudyOutcome.CORRECT:
        new_weight = max(MIN_STUDY_WEIGHT, previous_weight * CORRECT_FACTOR)
    elif outcome == StudyOutcome.INCORRECT:
        new_weight = min(MAX_STUDY_WEIGHT, previous_weight * INCORRECT_FACTOR)
    else:
        new_weight = min(MAX_STUDY_WEIGHT, previous_weight * SKIPPED_FACTOR)

    return new_weight


def weighted_random_sample(
    cards: Sequence[CardT],
    count: int,
    rng: Optional[random.Random] = None
) -> List[CardT]:
    """
    Draw cards with probability proportional to study_weight, without replacement.

    Every draw re-normalizes over the cards still remaining, so a heavy card
    removed early no longer skews later draws.

    Args:
        cards: Candidate cards (anything with a ``study_weight`` attribute)
        count: Number of cards to draw
        rng: Random generator; pass a seeded ``random.Random`` for reproducible draws

    Returns:
        Up to ``count`` distinct cards in draw order
    """
    if rng is None:
        rng = random.Random()

    remaining = list(cards)
    selected: List[CardT] = []

    while len(selected) < count and remaining:
        total_weight = sum(card.study_weight for card in remaining)
        draw = rng.random() * total_weight

        chosen_index = len(remaining) - 1  # float rounding can leave draw slightly positive
        for index, card in enumerate(remaining):
            draw -= card.study_weight
            if draw <= 0:
                chosen_index = index
                break

        selected.append(remaining.pop(chosen_index))

    return selected


def calculate_streak_from_dates(study_days: Iterable[date], today: date) -> int:
    """
    Count consecutive study days ending today or yesterday.

    A user who has not studied yet today keeps the streak that ended
    yesterday. Any missing day ends the streak.

    Args:
        study_days: Calendar days with at least one review (duplicates allowed)
        today: The current calendar day

    Returns:
        Streak length in days (0 if the last study day is before yesterday)
    """
    # Future-dated reviews (clock skew) are ignored
    unique_days = sorted({day for day in study_days if day <= today}, reverse=True)
    if not unique_days:
        return 0

    one_day = timedelta(days=1)
    most_recent = unique_days[0]

    if most_recent == today:
        expected = today
    elif most_recent == today - one_day:
        expected = today - one_day
    else:
        return 0

    streak = 0
    for day in unique_days:
        if day != expected:
            break
        streak += 1
        expected -= one_day

    return streak


def calculate_accuracy_rate(correct: int, total: int, skipped: int) -> float:
    """Percentage of correct answers among non-skipped reviews, rounded to 2 decimals."""
    answered = total - skipped
    if answered <= 0:
        return 0.0
    return round(correct / answered * 100, 2)
