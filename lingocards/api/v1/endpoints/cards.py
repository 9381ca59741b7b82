"""
Card CRUD endpoints.
"""
from fastapi import APIRouter, Depends, Query, status
from sqlmodel import Session
from typing import Literal, Optional
import logging
import uuid

from lingocards.core.database import get_session
from lingocards.core.exceptions import NotFoundError
from lingocards.models.enums import CardStatus, CardSource
from lingocards.schemas.card import (
    CardResponse,
    CardsResponse,
    CreateCardRequest,
    UpdateCardRequest,
    PaginationMeta,
    DeleteCardResponse,
    BulkDeleteRequest,
    BulkDeleteResponse,
)
from lingocards.services.card_service import (
    list_cards,
    get_card,
    create_card,
    update_card,
    soft_delete_card,
    restore_card,
    bulk_delete_cards,
)
from lingocards.utils.text_utils import parse_tags

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/cards", tags=["cards"])


@router.get("", response_model=CardsResponse)
async def get_cards(
    user_id: uuid.UUID,
    status: Optional[CardStatus] = None,
    source: Optional[CardSource] = None,
    tags: Optional[str] = Query(None, description="Comma-separated list of tags"),
    include_deleted: bool = False,
    sort: Literal["created_at", "updated_at"] = "created_at",
    order: Literal["asc", "desc"] = "desc",
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    session: Session = Depends(get_session)
):
    """List the user's cards, newest first by default."""
    cards, total = list_cards(
        session,
        user_id,
        status=status,
        source=source,
        tags=parse_tags(tags),
        include_deleted=include_deleted,
        sort=sort,
        order=order,
        limit=limit,
        offset=offset,
    )
    return CardsResponse(
        data=[CardResponse.model_validate(card) for card in cards],
        pagination=PaginationMeta(
            total=total,
            limit=limit,
            offset=offset,
            has_more=offset + limit < total,
        ),
    )


@router.post("", response_model=CardResponse, status_code=status.HTTP_201_CREATED)
async def post_card(
    user_id: uuid.UUID,
    request: CreateCardRequest,
    session: Session = Depends(get_session)
):
    """Create a card. New cards start with study weight 1.0."""
    card = create_card(
        session,
        user_id,
        front=request.front,
        back=request.back,
        tags=request.tags,
        status=request.status,
    )
    return CardResponse.model_validate(card)


@router.post("/bulk-delete", response_model=BulkDeleteResponse)
async def post_bulk_delete(
    user_id: uuid.UUID,
    request: BulkDeleteRequest,
    session: Session = Depends(get_session)
):
    """Soft-delete several cards at once. Unknown or foreign ids are ignored."""
    deleted_ids = bulk_delete_cards(session, user_id, request.card_ids)
    return BulkDeleteResponse(deleted_count=len(deleted_ids), deleted_ids=deleted_ids)


@router.get("/{card_id}", response_model=CardResponse)
async def get_card_by_id(
    card_id: uuid.UUID,
    user_id: uuid.UUID,
    session: Session = Depends(get_session)
):
    """Get a single card, including its back."""
    card = get_card(session, user_id, card_id)
    if not card:
        raise NotFoundError("Card not found")
    return CardResponse.model_validate(card)


@router.patch("/{card_id}", response_model=CardResponse)
async def patch_card(
    card_id: uuid.UUID,
    user_id: uuid.UUID,
    request: UpdateCardRequest,
    session: Session = Depends(get_session)
):
    """Update front, back, tags or status of a card."""
    card = update_card(
        session,
        user_id,
        card_id,
        front=request.front,
        back=request.back,
        tags=request.tags,
        status=request.status,
    )
    return CardResponse.model_validate(card)


@router.delete("/{card_id}", response_model=DeleteCardResponse)
async def delete_card(
    card_id: uuid.UUID,
    user_id: uuid.UUID,
    session: Session = Depends(get_session)
):
    """Soft-delete a card. It can be restored for a limited time."""
    card = soft_delete_card(session, user_id, card_id)
    return DeleteCardResponse(id=card.id, deleted_at=card.deleted_at)


@router.post("/{card_id}/restore", response_model=CardResponse)
async def post_restore_card(
    card_id: uuid.UUID,
    user_id: uuid.UUID,
    session: Session = Depends(get_session)
):
    """Restore a soft-deleted card."""
    card = restore_card(session, user_id, card_id)
    return CardResponse.model_validate(card)
