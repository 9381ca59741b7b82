"""
CardTag model - junction table holding the tags of a card.
"""
from sqlmodel import SQLModel, Field, Relationship
from typing import TYPE_CHECKING
import uuid

if TYPE_CHECKING:
    from lingocards.models.card import Card


class CardTag(SQLModel, table=True):
    """CardTag table - one row per (card, tag), ordered by position."""
    __tablename__ = "card_tag"

    card_id: uuid.UUID = Field(foreign_key="card.id", primary_key=True, ondelete="CASCADE")
    tag: str = Field(primary_key=True, max_length=100, index=True)
    position: int = Field(default=0)

    # Relationships
    card: "Card" = Relationship(back_populates="tag_links")
