"""
Model enums.
"""
from enum import Enum


class CardStatus(str, Enum):
    """Lifecycle status of a card."""
    REVIEW = "review"
    ACTIVE = "active"
    ARCHIVED = "archived"


class CardSource(str, Enum):
    """Where a card came from."""
    MANUAL = "manual"
    AI = "ai"


class StudyOutcome(str, Enum):
    """Self-reported recall result for a reviewed card."""
    CORRECT = "correct"
    INCORRECT = "incorrect"
    SKIPPED = "skipped"


class StatisticsPeriod(str, Enum):
    """Time window for study statistics."""
    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    ALL = "all"
