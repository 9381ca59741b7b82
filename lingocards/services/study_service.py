"""
Study service: session card selection, review submission and statistics.

Selection fetches a bounded candidate pool ordered by study weight and
samples from it; reviews adjust the weight of the reviewed card; statistics
and streaks are computed on demand from the review log.
"""
# pyright: reportAttributeAccessIssue=false
# pyright: reportCallIssue=false
# pyright: reportArgumentType=false
from sqlmodel import Session, select, func
from sqlalchemy import update
from datetime import date, datetime, timedelta
from typing import Dict, List, Optional, Union
import logging
import random
import uuid

from lingocards.core.exceptions import NotFoundError, ConflictError
from lingocards.models.card import Card, DEFAULT_STUDY_WEIGHT
from lingocards.models.enums import CardStatus, StudyOutcome, StatisticsPeriod
from lingocards.models.study_review import StudyReview
from lingocards.schemas.study import (
    StartStudySessionResponse,
    StudyCardResponse,
    StudyReviewResponse,
    StudyStatisticsResponse,
    CardHistoryResponse,
)
from lingocards.services.card_service import get_card, tag_overlap_clause
from lingocards.services.srs_service import (
    calculate_new_weight,
    weighted_random_sample,
    calculate_streak_from_dates,
    calculate_accuracy_rate,
)
from lingocards.utils.text_utils import parse_tags

logger = logging.getLogger(__name__)

DEFAULT_CARD_COUNT = 20
MAX_CARD_COUNT = 50
# The candidate pool is over-fetched so the sampler has room to choose
CANDIDATE_POOL_FACTOR = 2
MAX_CANDIDATE_POOL = 100

PERIOD_LENGTHS = {
    StatisticsPeriod.DAY: timedelta(days=1),
    StatisticsPeriod.WEEK: timedelta(days=7),
    StatisticsPeriod.MONTH: timedelta(days=30),
}


def select_study_cards(
    session: Session,
    user_id: uuid.UUID,
    card_count: int = DEFAULT_CARD_COUNT,
    tags: Optional[str] = None,
    status: Union[CardStatus, str] = CardStatus.ACTIVE,
    rng: Optional[random.Random] = None,
) -> List[Card]:
    """
    Select the cards for a study session.

    Candidates are the user's non-deleted cards with the requested status
    (and, when tags are given, at least one matching tag), heaviest first,
    capped at min(card_count * 2, 100). If the pool is larger than
    card_count, card_count cards are drawn from it by weight.

    Args:
        session: Database session
        user_id: Owner of the cards
        card_count: Number of cards wanted
        tags: Comma-separated tag list; cards matching any tag qualify
        status: Card status to study (default 'active')
        rng: Random generator handed to the sampler

    Returns:
        Selected cards; empty when nothing matches
    """
    query = select(Card).where(
        Card.user_id == user_id,
        Card.status == CardStatus(status).value,
        Card.deleted_at.is_(None),  # type: ignore[union-attr]
    )

    tag_list = parse_tags(tags)
    if tag_list:
        query = query.where(tag_overlap_clause(tag_list))

    candidate_count = min(card_count * CANDIDATE_POOL_FACTOR, MAX_CANDIDATE_POOL)
    query = query.order_by(Card.study_weight.desc()).limit(candidate_count)  # type: ignore[attr-defined]

    cards = list(session.exec(query).all())
    logger.info(
        f"Study selection for user {user_id}: {len(cards)} candidate(s) "
        f"(card_count={card_count}, status={CardStatus(status).value}, tags={tag_list})"
    )

    if len(cards) <= card_count:
        return cards

    return weighted_random_sample(cards, card_count, rng)


def start_study_session(
    session: Session,
    user_id: uuid.UUID,
    card_count: int = DEFAULT_CARD_COUNT,
    tags: Optional[str] = None,
    status: Union[CardStatus, str] = CardStatus.ACTIVE,
    rng: Optional[random.Random] = None,
) -> StartStudySessionResponse:
    """Build a study session snapshot. Raises NotFoundError when no card qualifies."""
    cards = select_study_cards(session, user_id, card_count, tags, status, rng)
    if not cards:
        raise NotFoundError("No cards available for study with the specified filters")

    study_cards = [
        StudyCardResponse(
            id=card.id,
            front=card.front,
            tags=card.tags,
            current_weight=card.study_weight,
        )
        for card in cards
    ]
    return StartStudySessionResponse(
        session_id=uuid.uuid4(),
        cards=study_cards,
        total_cards=len(study_cards),
        started_at=datetime.utcnow(),
    )


def submit_review(
    session: Session,
    user_id: uuid.UUID,
    card_id: uuid.UUID,
    outcome: Union[StudyOutcome, str],
    now: Optional[datetime] = None,
) -> StudyReview:
    """
    Record a review and apply the new weight to the card in one transaction.

    The weight update only matches if the card still has the weight that was
    read, so two concurrent reviews of the same card cannot silently
    overwrite each other: the later one fails with ConflictError and leaves
    nothing behind.

    Args:
        session: Database session
        user_id: Reviewing user (must own the card)
        card_id: Reviewed card
        outcome: 'correct', 'incorrect' or 'skipped'
        now: Review timestamp (defaults to the current UTC time)

    Returns:
        The stored review

    Raises:
        NotFoundError: The card does not exist, belongs to someone else, or is deleted
        ConflictError: The card's weight changed between read and write
    """
    outcome = StudyOutcome(outcome)
    card = get_card(session, user_id, card_id)
    if not card or card.deleted_at is not None:
        raise NotFoundError("Card not found")

    previous_weight = card.study_weight
    new_weight = calculate_new_weight(previous_weight, outcome)
    reviewed_at = now or datetime.utcnow()

    review = StudyReview(
        user_id=user_id,
        card_id=card_id,
        outcome=outcome.value,
        previous_weight=previous_weight,
        new_weight=new_weight,
        reviewed_at=reviewed_at,
    )

    try:
        session.add(review)
        result = session.exec(  # type: ignore[call-overload]
            update(Card)
            .where(
                Card.id == card_id,
                Card.user_id == user_id,
                Card.study_weight == previous_weight,
            )
            .values(study_weight=new_weight, updated_at=reviewed_at)
        )
        if result.rowcount != 1:
            session.rollback()
            logger.warning(
                f"Concurrent review detected for card {card_id} (user {user_id}); "
                f"weight is no longer {previous_weight}"
            )
            raise ConflictError("Card was reviewed concurrently, please retry")
        session.commit()
    except ConflictError:
        raise
    except Exception as e:
        session.rollback()
        logger.error(f"Error submitting review for card {card_id}: {str(e)}")
        raise

    session.refresh(review)
    logger.info(
        f"Review {review.id} for card {card_id}: {outcome.value}, "
        f"weight {previous_weight} -> {new_weight}"
    )
    return review


def calculate_study_streak(
    session: Session,
    user_id: uuid.UUID,
    today: Optional[date] = None,
) -> int:
    """Consecutive UTC calendar days with reviews, ending today or yesterday."""
    timestamps = session.exec(
        select(StudyReview.reviewed_at)
        .where(StudyReview.user_id == user_id)
        .order_by(StudyReview.reviewed_at.desc())  # type: ignore[attr-defined]
    ).all()

    if not timestamps:
        return 0

    today = today or datetime.utcnow().date()
    return calculate_streak_from_dates((ts.date() for ts in timestamps), today)


def _count_outcomes(session: Session, *conditions) -> Dict[str, int]:
    rows = session.exec(
        select(StudyReview.outcome, func.count(StudyReview.id))
        .where(*conditions)
        .group_by(StudyReview.outcome)
    ).all()
    return {outcome: count for outcome, count in rows}


def get_study_statistics(
    session: Session,
    user_id: uuid.UUID,
    period: Union[StatisticsPeriod, str] = StatisticsPeriod.ALL,
    now: Optional[datetime] = None,
) -> StudyStatisticsResponse:
    """
    Summarize a user's reviews over a period.

    Review counts, accuracy, cards studied and last session cover the
    requested period only. The average weight is taken over the user's
    current active cards, and the streak always covers the full history.
    """
    period = StatisticsPeriod(period)
    now = now or datetime.utcnow()

    conditions = [StudyReview.user_id == user_id]
    if period in PERIOD_LENGTHS:
        conditions.append(StudyReview.reviewed_at >= now - PERIOD_LENGTHS[period])

    counts = _count_outcomes(session, *conditions)
    total_reviews = sum(counts.values())
    correct_reviews = counts.get(StudyOutcome.CORRECT.value, 0)
    incorrect_reviews = counts.get(StudyOutcome.INCORRECT.value, 0)
    skipped_reviews = counts.get(StudyOutcome.SKIPPED.value, 0)

    cards_studied, last_study_session = session.exec(
        select(
            func.count(func.distinct(StudyReview.card_id)),
            func.max(StudyReview.reviewed_at),
        ).where(*conditions)
    ).one()

    average_weight = session.exec(
        select(func.avg(Card.study_weight)).where(
            Card.user_id == user_id,
            Card.status == CardStatus.ACTIVE.value,
            Card.deleted_at.is_(None),  # type: ignore[union-attr]
        )
    ).one()
    if average_weight is None:
        average_weight = DEFAULT_STUDY_WEIGHT

    return StudyStatisticsResponse(
        period=period,
        total_reviews=total_reviews,
        correct_reviews=correct_reviews,
        incorrect_reviews=incorrect_reviews,
        skipped_reviews=skipped_reviews,
        accuracy_rate=calculate_accuracy_rate(correct_reviews, total_reviews, skipped_reviews),
        cards_studied=cards_studied or 0,
        average_weight=round(float(average_weight), 2),
        study_streak_days=calculate_study_streak(session, user_id, today=now.date()),
        last_study_session=last_study_session,
    )


def get_card_history(
    session: Session,
    user_id: uuid.UUID,
    card_id: uuid.UUID,
    limit: int = 20,
) -> CardHistoryResponse:
    """
    Recent reviews of one card plus its all-time outcome counts.

    ``limit`` only bounds the returned review list; the counts and accuracy
    cover every review of the card by this user.
    """
    card = get_card(session, user_id, card_id)
    if not card:
        raise NotFoundError("Card not found")

    conditions = [StudyReview.card_id == card_id, StudyReview.user_id == user_id]

    reviews = session.exec(
        select(StudyReview)
        .where(*conditions)
        .order_by(StudyReview.reviewed_at.desc())  # type: ignore[attr-defined]
        .limit(limit)
    ).all()

    counts = _count_outcomes(session, *conditions)
    total_reviews = sum(counts.values())
    correct_count = counts.get(StudyOutcome.CORRECT.value, 0)
    incorrect_count = counts.get(StudyOutcome.INCORRECT.value, 0)
    skipped_count = counts.get(StudyOutcome.SKIPPED.value, 0)

    return CardHistoryResponse(
        card_id=card_id,
        reviews=[StudyReviewResponse.model_validate(review) for review in reviews],
        total_reviews=total_reviews,
        correct_count=correct_count,
        incorrect_count=incorrect_count,
        skipped_count=skipped_count,
        accuracy_rate=calculate_accuracy_rate(correct_count, total_reviews, skipped_count),
    )
