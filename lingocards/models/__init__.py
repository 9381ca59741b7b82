"""
Models package - imports all models so SQLModel registers their tables.
"""
# Import enums first
from lingocards.models.enums import CardStatus, CardSource, StudyOutcome, StatisticsPeriod

# Import all models
from lingocards.models.card import Card, MIN_STUDY_WEIGHT, MAX_STUDY_WEIGHT, DEFAULT_STUDY_WEIGHT
from lingocards.models.card_tag import CardTag
from lingocards.models.study_review import StudyReview

__all__ = [
    'CardStatus',
    'CardSource',
    'StudyOutcome',
    'StatisticsPeriod',
    'Card',
    'CardTag',
    'StudyReview',
    'MIN_STUDY_WEIGHT',
    'MAX_STUDY_WEIGHT',
    'DEFAULT_STUDY_WEIGHT',
]
