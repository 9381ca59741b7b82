"""
Study session, review and statistics schemas.
"""
from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime
import uuid

from lingocards.models.enums import StudyOutcome, StatisticsPeriod


class StudyCardResponse(BaseModel):
    """Card as shown in a study session - the back stays hidden."""
    id: uuid.UUID
    front: str
    tags: List[str]
    current_weight: float


class StartStudySessionResponse(BaseModel):
    session_id: uuid.UUID
    cards: List[StudyCardResponse]
    total_cards: int
    started_at: datetime


class SubmitReviewRequest(BaseModel):
    card_id: uuid.UUID = Field(..., description="Reviewed card ID")
    outcome: StudyOutcome = Field(..., description="'correct', 'incorrect' or 'skipped'")

    class Config:
        json_schema_extra = {
            "example": {
                "card_id": "6f1c8f0e-2d4b-4a3c-9a57-2f7c1b0d9e11",
                "outcome": "correct"
            }
        }


class StudyReviewResponse(BaseModel):
    """A stored review (owner id omitted)."""
    id: uuid.UUID
    card_id: uuid.UUID
    outcome: StudyOutcome
    previous_weight: float
    new_weight: float
    reviewed_at: datetime

    class Config:
        from_attributes = True


class StudyStatisticsResponse(BaseModel):
    period: StatisticsPeriod
    total_reviews: int
    correct_reviews: int
    incorrect_reviews: int
    skipped_reviews: int
    accuracy_rate: float
    cards_studied: int
    average_weight: float
    study_streak_days: int
    last_study_session: Optional[datetime] = None


class CardHistoryResponse(BaseModel):
    card_id: uuid.UUID
    reviews: List[StudyReviewResponse]
    total_reviews: int
    correct_count: int
    incorrect_count: int
    skipped_count: int
    accuracy_rate: float
