"""HTTP tests for the card and study endpoints."""
import uuid
from datetime import datetime, timedelta

from lingocards.core.rate_limiter import RateLimiter, RateLimitRule
from lingocards.main import app

API = "/api/v1"


def create_card(client, user_id, **overrides):
    payload = {"front": "la manzana", "back": "the apple", "tags": ["food"]}
    payload.update(overrides)
    response = client.post(f"{API}/cards", params={"user_id": str(user_id)}, json=payload)
    assert response.status_code == 201, response.text
    return response.json()


class TestHealth:

    def test_root(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert response.json()["status"] == "running"

    def test_health(self, client):
        assert client.get("/health").json() == {"status": "healthy"}


class TestCardEndpoints:

    def test_create_and_fetch(self, client, user_id):
        created = create_card(client, user_id)
        assert created["study_weight"] == 1.0
        assert created["source"] == "manual"
        assert "user_id" not in created

        response = client.get(f"{API}/cards/{created['id']}", params={"user_id": str(user_id)})
        assert response.status_code == 200
        assert response.json()["back"] == "the apple"

    def test_create_validates_payload(self, client, user_id):
        response = client.post(
            f"{API}/cards",
            params={"user_id": str(user_id)},
            json={"front": "", "back": "x"},
        )
        assert response.status_code == 422

    def test_missing_user_id(self, client):
        response = client.post(f"{API}/cards", json={"front": "a", "back": "b"})
        assert response.status_code == 422

    def test_fetch_other_users_card(self, client, user_id, other_user_id):
        created = create_card(client, user_id)
        response = client.get(f"{API}/cards/{created['id']}", params={"user_id": str(other_user_id)})
        assert response.status_code == 404
        assert response.json()["type"] == "NotFoundError"

    def test_patch_rejects_empty_update(self, client, user_id):
        created = create_card(client, user_id)
        response = client.patch(
            f"{API}/cards/{created['id']}",
            params={"user_id": str(user_id)},
            json={},
        )
        assert response.status_code == 422

    def test_patch_ignores_weight(self, client, user_id):
        created = create_card(client, user_id)
        response = client.patch(
            f"{API}/cards/{created['id']}",
            params={"user_id": str(user_id)},
            json={"back": "an apple", "study_weight": 5.0},
        )
        assert response.status_code == 200
        assert response.json()["back"] == "an apple"
        assert response.json()["study_weight"] == 1.0

    def test_list_with_tag_filter(self, client, user_id):
        create_card(client, user_id, tags=["food"])
        create_card(client, user_id, front="correr", back="to run", tags=["verbs"])
        response = client.get(
            f"{API}/cards",
            params={"user_id": str(user_id), "tags": "verbs", "limit": 1},
        )
        body = response.json()
        assert response.status_code == 200
        assert body["pagination"]["total"] == 1
        assert body["pagination"]["has_more"] is False
        assert body["data"][0]["front"] == "correr"

    def test_delete_and_restore(self, client, user_id):
        created = create_card(client, user_id)
        params = {"user_id": str(user_id)}

        response = client.delete(f"{API}/cards/{created['id']}", params=params)
        assert response.status_code == 200
        assert response.json()["deleted_at"] is not None

        response = client.post(f"{API}/cards/{created['id']}/restore", params=params)
        assert response.status_code == 200
        assert response.json()["deleted_at"] is None

    def test_restore_expired_is_gone(self, client, user_id, make_card):
        card = make_card(deleted_at=datetime.utcnow() - timedelta(days=45))
        response = client.post(f"{API}/cards/{card.id}/restore", params={"user_id": str(user_id)})
        assert response.status_code == 410

    def test_bulk_delete(self, client, user_id):
        first = create_card(client, user_id)
        second = create_card(client, user_id, front="la pera", back="the pear")
        response = client.post(
            f"{API}/cards/bulk-delete",
            params={"user_id": str(user_id)},
            json={"card_ids": [first["id"], second["id"], str(uuid.uuid4())]},
        )
        assert response.status_code == 200
        assert response.json()["deleted_count"] == 2


class TestStudyEndpoints:

    def test_session_hides_backs(self, client, user_id):
        for front in ("uno", "dos", "tres"):
            create_card(client, user_id, front=front, back=front.upper())
        response = client.post(
            f"{API}/study/session",
            params={"user_id": str(user_id), "card_count": 2},
        )
        assert response.status_code == 200
        body = response.json()
        assert body["total_cards"] == 2
        assert len({card["id"] for card in body["cards"]}) == 2
        for card in body["cards"]:
            assert set(card) == {"id", "front", "tags", "current_weight"}

    def test_session_without_cards(self, client, user_id):
        response = client.post(f"{API}/study/session", params={"user_id": str(user_id)})
        assert response.status_code == 404

    def test_session_card_count_bounds(self, client, user_id):
        for card_count in (0, 51):
            response = client.post(
                f"{API}/study/session",
                params={"user_id": str(user_id), "card_count": card_count},
            )
            assert response.status_code == 422

    def test_session_tag_filter(self, client, user_id):
        create_card(client, user_id, tags=["food"])
        response = client.post(
            f"{API}/study/session",
            params={"user_id": str(user_id), "tags": "colors"},
        )
        assert response.status_code == 404

    def test_review_updates_weight(self, client, user_id):
        card = create_card(client, user_id)
        params = {"user_id": str(user_id)}
        response = client.post(
            f"{API}/study/review",
            params=params,
            json={"card_id": card["id"], "outcome": "incorrect"},
        )
        assert response.status_code == 200
        review = response.json()
        assert review["previous_weight"] == 1.0
        assert review["new_weight"] == 1.5

        fetched = client.get(f"{API}/cards/{card['id']}", params=params).json()
        assert fetched["study_weight"] == 1.5

    def test_review_invalid_outcome(self, client, user_id):
        card = create_card(client, user_id)
        response = client.post(
            f"{API}/study/review",
            params={"user_id": str(user_id)},
            json={"card_id": card["id"], "outcome": "maybe"},
        )
        assert response.status_code == 422

    def test_review_unknown_card(self, client, user_id):
        response = client.post(
            f"{API}/study/review",
            params={"user_id": str(user_id)},
            json={"card_id": str(uuid.uuid4()), "outcome": "correct"},
        )
        assert response.status_code == 404

    def test_statistics_and_history(self, client, user_id):
        card = create_card(client, user_id)
        params = {"user_id": str(user_id)}
        for outcome in ("correct", "incorrect", "skipped"):
            client.post(
                f"{API}/study/review",
                params=params,
                json={"card_id": card["id"], "outcome": outcome},
            )

        stats = client.get(f"{API}/study/statistics", params={**params, "period": "day"}).json()
        assert stats["total_reviews"] == 3
        assert stats["accuracy_rate"] == 50.0
        assert stats["cards_studied"] == 1
        assert stats["study_streak_days"] == 1

        history = client.get(
            f"{API}/study/cards/{card['id']}/history",
            params={**params, "limit": 1},
        ).json()
        assert len(history["reviews"]) == 1
        assert history["total_reviews"] == 3
        assert history["skipped_count"] == 1

    def test_statistics_invalid_period(self, client, user_id):
        response = client.get(
            f"{API}/study/statistics",
            params={"user_id": str(user_id), "period": "year"},
        )
        assert response.status_code == 422

    def test_history_unknown_card(self, client, user_id):
        response = client.get(
            f"{API}/study/cards/{uuid.uuid4()}/history",
            params={"user_id": str(user_id)},
        )
        assert response.status_code == 404

    def test_session_rate_limited(self, client, user_id):
        app.state.rate_limiter = RateLimiter(
            rules={"study:session": RateLimitRule(max_requests=2, window_seconds=3600)},
        )
        create_card(client, user_id)
        params = {"user_id": str(user_id)}

        for _ in range(2):
            assert client.post(f"{API}/study/session", params=params).status_code == 200

        response = client.post(f"{API}/study/session", params=params)
        assert response.status_code == 429
        assert response.json()["type"] == "RateLimitError"
        assert 1 <= int(response.headers["Retry-After"]) <= 3600

        other = client.post(f"{API}/study/session", params={"user_id": str(uuid.uuid4())})
        assert other.status_code == 404
