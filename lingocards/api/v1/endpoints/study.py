"""
Study session, review and statistics endpoints.
"""
from fastapi import APIRouter, Depends, Query
from sqlmodel import Session
from typing import Optional
import logging
import uuid

from lingocards.core.config import settings
from lingocards.core.database import get_session
from lingocards.core.rate_limiter import rate_limit
from lingocards.models.enums import CardStatus, StatisticsPeriod
from lingocards.schemas.study import (
    StartStudySessionResponse,
    SubmitReviewRequest,
    StudyReviewResponse,
    StudyStatisticsResponse,
    CardHistoryResponse,
)
from lingocards.services.study_service import (
    MAX_CARD_COUNT,
    start_study_session,
    submit_review,
    get_study_statistics,
    get_card_history,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/study", tags=["study"])


@router.post(
    "/session",
    response_model=StartStudySessionResponse,
    dependencies=[Depends(rate_limit("study:session"))],
)
async def start_session(
    user_id: uuid.UUID,
    card_count: int = Query(settings.study_default_card_count, ge=1, le=MAX_CARD_COUNT),
    tags: Optional[str] = Query(None, description="Comma-separated list of tags; cards matching any tag qualify"),
    status: CardStatus = CardStatus.ACTIVE,
    session: Session = Depends(get_session)
):
    """
    Start a study session.

    Returns up to card_count cards drawn by study weight. Only the front and
    tags of each card are returned; the back is fetched when revealed.
    Responds 404 when no card matches the filters.
    """
    return start_study_session(
        session,
        user_id,
        card_count=card_count,
        tags=tags,
        status=status,
    )


@router.post(
    "/review",
    response_model=StudyReviewResponse,
    dependencies=[Depends(rate_limit("study:review"))],
)
async def review_card(
    user_id: uuid.UUID,
    request: SubmitReviewRequest,
    session: Session = Depends(get_session)
):
    """Submit the outcome of a card review and update the card's study weight."""
    review = submit_review(session, user_id, request.card_id, request.outcome)
    return StudyReviewResponse.model_validate(review)


@router.get("/statistics", response_model=StudyStatisticsResponse)
async def statistics(
    user_id: uuid.UUID,
    period: StatisticsPeriod = StatisticsPeriod.ALL,
    session: Session = Depends(get_session)
):
    """Get review statistics for the given period (day, week, month or all)."""
    return get_study_statistics(session, user_id, period)


@router.get("/cards/{card_id}/history", response_model=CardHistoryResponse)
async def card_history(
    card_id: uuid.UUID,
    user_id: uuid.UUID,
    limit: int = Query(20, ge=1, le=100),
    session: Session = Depends(get_session)
):
    """Get the most recent reviews of a card together with its all-time accuracy."""
    return get_card_history(session, user_id, card_id, limit)
