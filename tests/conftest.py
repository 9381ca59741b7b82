import os

# Settings require a database URL at import time
os.environ.setdefault("DATABASE_URL", "sqlite://")

import uuid
from datetime import datetime

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, Session, create_engine

from lingocards.core.database import get_session
from lingocards.main import app, build_rate_limiter
from lingocards.models import Card, CardTag, CardStatus, StudyReview


@pytest.fixture
def engine():
    """In-memory SQLite database shared by every connection of one test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def user_id():
    return uuid.uuid4()


@pytest.fixture
def other_user_id():
    return uuid.uuid4()


@pytest.fixture
def make_card(session, user_id):
    """Factory inserting a card straight into the database."""
    def _make_card(
        front="la casa",
        back="the house",
        tags=(),
        status=CardStatus.ACTIVE,
        study_weight=1.0,
        deleted_at=None,
        owner=None,
    ):
        card = Card(
            user_id=owner or user_id,
            front=front,
            back=back,
            status=CardStatus(status).value,
            study_weight=study_weight,
            deleted_at=deleted_at,
        )
        card.tag_links = [CardTag(tag=tag, position=i) for i, tag in enumerate(tags)]
        session.add(card)
        session.commit()
        session.refresh(card)
        return card

    return _make_card


@pytest.fixture
def add_review(session, user_id):
    """Factory inserting a review without touching the card's weight."""
    def _add_review(card, outcome="correct", reviewed_at=None, owner=None):
        review = StudyReview(
            user_id=owner or user_id,
            card_id=card.id,
            outcome=outcome,
            previous_weight=1.0,
            new_weight=1.0,
            reviewed_at=reviewed_at or datetime.utcnow(),
        )
        session.add(review)
        session.commit()
        return review

    return _add_review


@pytest.fixture
def client(session):
    def get_session_override():
        yield session

    app.dependency_overrides[get_session] = get_session_override
    app.state.rate_limiter = build_rate_limiter()
    yield TestClient(app)
    app.dependency_overrides.clear()
