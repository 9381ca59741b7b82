"""
StudyReview model.
"""
from sqlmodel import SQLModel, Field
from sqlalchemy import CheckConstraint, DateTime
from datetime import datetime
import uuid


class StudyReview(SQLModel, table=True):
    """StudyReview table - append-only log of review outcomes."""
    __tablename__ = "study_review"
    __table_args__ = (
        CheckConstraint("outcome IN ('correct', 'incorrect', 'skipped')", name="ck_study_review_outcome"),
    )

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    user_id: uuid.UUID = Field(index=True)
    card_id: uuid.UUID = Field(foreign_key="card.id", index=True)
    outcome: str = Field(max_length=16)  # 'correct', 'incorrect' or 'skipped'
    previous_weight: float
    new_weight: float
    reviewed_at: datetime = Field(default_factory=datetime.utcnow, sa_type=DateTime, index=True)  # Naive UTC
