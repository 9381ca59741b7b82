"""
Card service for flashcard CRUD.

Cards are owned by a user; every lookup is scoped by user_id so one user can
never read or change another user's cards. None of these operations touch
study_weight, which only review submission may change.
"""
# pyright: reportAttributeAccessIssue=false
# pyright: reportCallIssue=false
# pyright: reportArgumentType=false
from sqlmodel import Session, select, func
from datetime import datetime, timedelta
from typing import List, Optional, Sequence, Tuple
import logging
import uuid

from lingocards.core.config import settings
from lingocards.core.exceptions import NotFoundError, GoneError, ValidationError
from lingocards.models.card import Card
from lingocards.models.card_tag import CardTag
from lingocards.models.enums import CardStatus, CardSource
from lingocards.utils.text_utils import normalize_tags

logger = logging.getLogger(__name__)

SORTABLE_FIELDS = ("created_at", "updated_at")


def tag_overlap_clause(tags: Sequence[str]):
    """WHERE clause matching cards that carry at least one of ``tags``."""
    return Card.id.in_(  # type: ignore[attr-defined]
        select(CardTag.card_id).where(CardTag.tag.in_(list(tags)))  # type: ignore[attr-defined]
    )


def _set_tags(card: Card, tags: Sequence[str]) -> None:
    """Replace a card's tags, reusing existing link rows so their keys are not re-inserted."""
    existing = {link.tag: link for link in card.tag_links}
    links = []
    for position, tag in enumerate(normalize_tags(tags)):
        link = existing.get(tag) or CardTag(tag=tag)
        link.position = position
        links.append(link)
    card.tag_links = links


def _commit(session: Session, action: str) -> None:
    try:
        session.commit()
    except Exception as e:
        session.rollback()
        logger.error(f"Error while trying to {action}: {str(e)}")
        raise


def list_cards(
    session: Session,
    user_id: uuid.UUID,
    status: Optional[CardStatus] = None,
    source: Optional[CardSource] = None,
    tags: Optional[List[str]] = None,
    include_deleted: bool = False,
    sort: str = "created_at",
    order: str = "desc",
    limit: int = 20,
    offset: int = 0,
) -> Tuple[List[Card], int]:
    """
    List a user's cards with optional filters.

    Args:
        session: Database session
        user_id: Owner of the cards
        status: Only cards with this status
        source: Only cards from this source
        tags: Only cards carrying at least one of these tags
        include_deleted: Include soft-deleted cards
        sort: 'created_at' or 'updated_at'
        order: 'asc' or 'desc'
        limit: Page size
        offset: Number of cards to skip

    Returns:
        Tuple of (cards on this page, total number of matching cards)

    Raises:
        ValidationError: If sort is not a sortable field
    """
    if sort not in SORTABLE_FIELDS:
        raise ValidationError(f"Cannot sort cards by {sort!r}")

    query = select(Card).where(Card.user_id == user_id)

    if status is not None:
        query = query.where(Card.status == CardStatus(status).value)
    if source is not None:
        query = query.where(Card.source == CardSource(source).value)
    if tags:
        query = query.where(tag_overlap_clause(tags))
    if not include_deleted:
        query = query.where(Card.deleted_at.is_(None))  # type: ignore[union-attr]

    total = session.exec(select(func.count()).select_from(query.subquery())).one()

    sort_column = getattr(Card, sort)
    query = query.order_by(sort_column.asc() if order == "asc" else sort_column.desc())
    cards = session.exec(query.offset(offset).limit(limit)).all()

    return list(cards), total


def get_card(session: Session, user_id: uuid.UUID, card_id: uuid.UUID) -> Optional[Card]:
    """Get a user's card by id, including soft-deleted cards."""
    return session.exec(
        select(Card).where(Card.id == card_id, Card.user_id == user_id)
    ).first()


def create_card(
    session: Session,
    user_id: uuid.UUID,
    front: str,
    back: str,
    tags: Optional[Sequence[str]] = None,
    status: CardStatus = CardStatus.ACTIVE,
) -> Card:
    """Create a manual card with the default study weight."""
    card = Card(
        user_id=user_id,
        front=front,
        back=back,
        status=CardStatus(status).value,
        source=CardSource.MANUAL.value,
    )
    _set_tags(card, tags or [])
    session.add(card)
    _commit(session, f"create card for user {user_id}")
    session.refresh(card)

    logger.info(f"Created card {card.id} for user {user_id}")
    return card


def update_card(
    session: Session,
    user_id: uuid.UUID,
    card_id: uuid.UUID,
    front: Optional[str] = None,
    back: Optional[str] = None,
    tags: Optional[Sequence[str]] = None,
    status: Optional[CardStatus] = None,
) -> Card:
    """Update the editable fields of a card. Raises NotFoundError for unknown cards."""
    card = get_card(session, user_id, card_id)
    if not card:
        raise NotFoundError("Card not found")

    if front is not None:
        card.front = front
    if back is not None:
        card.back = back
    if tags is not None:
        _set_tags(card, tags)
    if status is not None:
        card.status = CardStatus(status).value
    card.updated_at = datetime.utcnow()

    session.add(card)
    _commit(session, f"update card {card_id}")
    session.refresh(card)
    return card


def soft_delete_card(session: Session, user_id: uuid.UUID, card_id: uuid.UUID) -> Card:
    """Mark a card as deleted. It drops out of study sessions and can be restored later."""
    card = get_card(session, user_id, card_id)
    if not card:
        raise NotFoundError("Card not found")

    card.deleted_at = datetime.utcnow()
    session.add(card)
    _commit(session, f"delete card {card_id}")
    session.refresh(card)

    logger.info(f"Soft-deleted card {card_id} for user {user_id}")
    return card


def restore_card(
    session: Session,
    user_id: uuid.UUID,
    card_id: uuid.UUID,
    now: Optional[datetime] = None,
) -> Card:
    """
    Restore a soft-deleted card.

    Raises:
        NotFoundError: The card does not exist or is not deleted
        GoneError: The card was deleted longer ago than the restore window
    """
    now = now or datetime.utcnow()
    card = get_card(session, user_id, card_id)
    if not card:
        raise NotFoundError("Card not found")
    if card.deleted_at is None:
        raise NotFoundError("Card is not deleted")

    if now - card.deleted_at > timedelta(days=settings.card_restore_window_days):
        logger.warning(f"Refusing to restore card {card_id}: deleted at {card.deleted_at}")
        raise GoneError("Card has been permanently deleted")

    card.deleted_at = None
    card.updated_at = now
    session.add(card)
    _commit(session, f"restore card {card_id}")
    session.refresh(card)

    logger.info(f"Restored card {card_id} for user {user_id}")
    return card


def bulk_delete_cards(
    session: Session,
    user_id: uuid.UUID,
    card_ids: Sequence[uuid.UUID],
) -> List[uuid.UUID]:
    """Soft-delete the user's non-deleted cards among ``card_ids``. Returns the ids deleted."""
    cards = session.exec(
        select(Card).where(
            Card.user_id == user_id,
            Card.id.in_(list(card_ids)),  # type: ignore[attr-defined]
            Card.deleted_at.is_(None),  # type: ignore[union-attr]
        )
    ).all()

    deleted_at = datetime.utcnow()
    deleted_ids = []
    for card in cards:
        card.deleted_at = deleted_at
        deleted_ids.append(card.id)
        session.add(card)
    _commit(session, f"bulk delete cards for user {user_id}")

    logger.info(f"Bulk deleted {len(deleted_ids)} card(s) for user {user_id}")
    return deleted_ids
