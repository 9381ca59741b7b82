"""
Card schemas.
"""
from pydantic import BaseModel, Field, model_validator
from typing import List, Optional
from datetime import datetime
import uuid

from lingocards.models.enums import CardStatus, CardSource


class CardResponse(BaseModel):
    """Card response schema (owner id omitted)."""
    id: uuid.UUID
    front: str
    back: str
    tags: List[str] = []
    status: CardStatus
    source: CardSource
    study_weight: float
    created_at: datetime
    updated_at: datetime
    deleted_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class CreateCardRequest(BaseModel):
    """Request schema for creating a card."""
    front: str = Field(..., min_length=1, max_length=2000)
    back: str = Field(..., min_length=1, max_length=2000)
    tags: List[str] = Field(default_factory=list)
    status: CardStatus = CardStatus.ACTIVE

    class Config:
        json_schema_extra = {
            "example": {
                "front": "la manzana",
                "back": "the apple",
                "tags": ["food", "nouns"],
                "status": "active"
            }
        }


class UpdateCardRequest(BaseModel):
    """Request schema for updating a card. The study weight is not editable."""
    front: Optional[str] = Field(None, min_length=1, max_length=2000)
    back: Optional[str] = Field(None, min_length=1, max_length=2000)
    tags: Optional[List[str]] = None
    status: Optional[CardStatus] = None

    @model_validator(mode="after")
    def check_not_empty(self):
        if self.front is None and self.back is None and self.tags is None and self.status is None:
            raise ValueError("At least one field must be provided for update")
        return self


class PaginationMeta(BaseModel):
    total: int
    limit: int
    offset: int
    has_more: bool


class CardsResponse(BaseModel):
    """Paginated list of cards."""
    data: List[CardResponse]
    pagination: PaginationMeta


class DeleteCardResponse(BaseModel):
    id: uuid.UUID
    deleted_at: datetime


class BulkDeleteRequest(BaseModel):
    card_ids: List[uuid.UUID] = Field(..., min_length=1)


class BulkDeleteResponse(BaseModel):
    deleted_count: int
    deleted_ids: List[uuid.UUID]
