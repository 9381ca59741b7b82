"""
Card model.
"""
from sqlmodel import SQLModel, Field, Relationship
from sqlalchemy import CheckConstraint, DateTime
from typing import Optional, List, TYPE_CHECKING
from datetime import datetime
import uuid

from lingocards.models.enums import CardStatus, CardSource

if TYPE_CHECKING:
    from lingocards.models.card_tag import CardTag

# Bounds of the per-card study weight
MIN_STUDY_WEIGHT = 0.5
MAX_STUDY_WEIGHT = 5.0
DEFAULT_STUDY_WEIGHT = 1.0


class Card(SQLModel, table=True):
    """Card table - a user's flashcard with its study weight."""
    __tablename__ = "card"
    __table_args__ = (
        CheckConstraint("study_weight >= 0.5 AND study_weight <= 5.0", name="ck_card_study_weight_range"),
    )

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    user_id: uuid.UUID = Field(index=True)  # Owner, issued by the auth provider
    front: str = Field(max_length=2000)
    back: str = Field(max_length=2000)
    status: str = Field(default=CardStatus.ACTIVE.value, max_length=16, index=True)
    source: str = Field(default=CardSource.MANUAL.value, max_length=16)
    study_weight: float = Field(default=DEFAULT_STUDY_WEIGHT)  # Only changed by review submission
    # Timestamps are naive UTC
    created_at: datetime = Field(default_factory=datetime.utcnow, sa_type=DateTime)
    updated_at: datetime = Field(default_factory=datetime.utcnow, sa_type=DateTime)
    deleted_at: Optional[datetime] = Field(default=None, sa_type=DateTime)  # Soft deletion timestamp

    # Relationships
    tag_links: List["CardTag"] = Relationship(
        back_populates="card",
        sa_relationship_kwargs={
            "cascade": "all, delete-orphan",
            "order_by": "CardTag.position",
        },
    )

    @property
    def tags(self) -> List[str]:
        return [link.tag for link in self.tag_links]
