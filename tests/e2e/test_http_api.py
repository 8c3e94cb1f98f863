"""
E2E tests for the HTTP surface: auth, reviews, notifications, presence
and health.

Usage:
    pytest tests/e2e/test_http_api.py
"""

import pytest

from cineshare.application.use_cases import CreateNotificationCommand
from cineshare.domain.entities import Review
from cineshare.domain.value_objects import NotificationType
from cineshare.infrastructure.persistence.repositories import ReviewRepository

PASSWORD = "Secret123"


async def register(api_client, username: str, **overrides) -> dict:
    body = {
        "email": f"{username}@example.com",
        "username": username,
        "password": PASSWORD,
    }
    body.update(overrides)
    response = await api_client.post("/auth/register", json=body)
    assert response.status_code == 201, response.text
    return response.json()


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


class TestAuthApi:
    """E2E tests for /auth."""

    # ================================================================
    # Register and login
    # ================================================================

    async def test_register_returns_tokens_and_user(self, api_client, token_service):
        data = await register(api_client, "ada", displayName="Ada")

        assert set(data) == {"accessToken", "refreshToken", "user"}
        assert data["user"]["username"] == "ada"
        assert data["user"]["displayName"] == "Ada"
        assert "password" not in data["user"]
        payload = token_service.validate(data["accessToken"])
        assert payload.sub == data["user"]["id"]

    async def test_register_duplicate_email(self, api_client):
        await register(api_client, "ada")

        response = await api_client.post(
            "/auth/register",
            json={"email": "ADA@example.com", "username": "ada2", "password": PASSWORD},
        )

        assert response.status_code == 409
        assert response.json()["error"] == "CONFLICT"

    async def test_register_lists_every_invalid_field(self, api_client):
        response = await api_client.post(
            "/auth/register",
            json={"email": "ada@example.com", "username": "a!", "password": "short"},
        )

        assert response.status_code == 422
        body = response.json()
        assert body["error"] == "VALIDATION_ERROR"
        assert {e["field"] for e in body["errors"]} == {"username", "password"}

    async def test_register_rejects_bad_email(self, api_client):
        response = await api_client.post(
            "/auth/register",
            json={"email": "not-an-email", "username": "ada", "password": PASSWORD},
        )

        assert response.status_code == 422
        assert [e["field"] for e in response.json()["errors"]] == ["email"]

    async def test_login(self, api_client):
        await register(api_client, "ada")

        response = await api_client.post(
            "/auth/login", json={"email": "Ada@Example.com", "password": PASSWORD}
        )

        assert response.status_code == 200
        assert response.json()["user"]["username"] == "ada"

    async def test_login_wrong_password(self, api_client):
        await register(api_client, "ada")

        response = await api_client.post(
            "/auth/login", json={"email": "ada@example.com", "password": "Wrong1234"}
        )

        assert response.status_code == 401
        assert response.json()["error"] == "INVALID_CREDENTIALS"

    # ================================================================
    # Refresh and logout
    # ================================================================

    async def test_refresh_rotates_pair(self, api_client, token_service):
        """Test the new pair works and the exchanged refresh token does not."""
        data = await register(api_client, "ada")

        response = await api_client.post(
            "/auth/refresh", json={"refreshToken": data["refreshToken"]}
        )
        assert response.status_code == 200
        rotated = response.json()
        assert rotated["user"] == data["user"]
        assert token_service.validate(rotated["accessToken"]).sub == data["user"]["id"]

        reused = await api_client.post(
            "/auth/refresh", json={"refreshToken": data["refreshToken"]}
        )
        assert reused.status_code == 401

        again = await api_client.post(
            "/auth/refresh", json={"refreshToken": rotated["refreshToken"]}
        )
        assert again.status_code == 200

    async def test_access_token_rejected_as_refresh_token(self, api_client):
        data = await register(api_client, "ada")

        response = await api_client.post(
            "/auth/refresh", json={"refreshToken": data["accessToken"]}
        )

        assert response.status_code == 401

    async def test_logout_revokes_refresh_token(self, api_client):
        data = await register(api_client, "ada")

        response = await api_client.post(
            "/auth/logout", headers=bearer(data["accessToken"])
        )
        assert response.status_code == 204

        refreshed = await api_client.post(
            "/auth/refresh", json={"refreshToken": data["refreshToken"]}
        )
        assert refreshed.status_code == 401

    # ================================================================
    # Guards
    # ================================================================

    async def test_me_requires_token(self, api_client):
        response = await api_client.get("/auth/me")

        assert response.status_code == 401
        assert response.headers["WWW-Authenticate"] == "Bearer"

    async def test_me_rejects_malformed_token(self, api_client):
        response = await api_client.get("/auth/me", headers=bearer("garbage"))

        assert response.status_code == 401
        assert response.json()["error"] == "TOKEN_MALFORMED"

    async def test_me(self, api_client):
        data = await register(api_client, "ada")

        response = await api_client.get("/auth/me", headers=bearer(data["accessToken"]))

        assert response.status_code == 200
        assert response.json()["id"] == data["user"]["id"]


class TestReviewsApi:
    """E2E tests for reading and reporting reviews."""

    @pytest.fixture
    async def review_id(self, api_client, cineshare_app):
        author = await register(api_client, "carol")
        async with cineshare_app.container.database.session() as session:
            review = await ReviewRepository(session).create(
                Review(
                    author_id=author["user"]["id"],
                    movie_id=603,
                    title="Still holds up",
                    content="Great",
                    rating=9,
                )
            )
        return review.id

    async def test_report_twice_conflicts(self, api_client, review_id):
        """Test the second report by the same user is a conflict."""
        ada = await register(api_client, "ada")
        headers = bearer(ada["accessToken"])

        first = await api_client.post(
            f"/reviews/{review_id}/report",
            json={"reason": "spoilers", "details": "Reveals the ending"},
            headers=headers,
        )
        assert first.status_code == 201
        assert first.json()["reason"] == "spoilers"

        second = await api_client.post(
            f"/reviews/{review_id}/report", json={"reason": "spam"}, headers=headers
        )
        assert second.status_code == 409
        assert second.json()["message"] == "You have already reported this review"

    async def test_reported_by_me_flag(self, api_client, review_id):
        ada = await register(api_client, "ada")
        bob = await register(api_client, "bob")
        await api_client.post(
            f"/reviews/{review_id}/report",
            json={"reason": "offensive"},
            headers=bearer(ada["accessToken"]),
        )

        anonymous = await api_client.get(f"/reviews/{review_id}")
        reporter_view = await api_client.get(
            f"/reviews/{review_id}", headers=bearer(ada["accessToken"])
        )
        other_view = await api_client.get(
            f"/reviews/{review_id}", headers=bearer(bob["accessToken"])
        )

        assert "reportedByMe" not in anonymous.json()
        assert reporter_view.json()["reportedByMe"] is True
        assert other_view.json()["reportedByMe"] is False

    async def test_invalid_token_reads_anonymously(self, api_client, review_id):
        response = await api_client.get(f"/reviews/{review_id}", headers=bearer("bad"))

        assert response.status_code == 200
        assert "reportedByMe" not in response.json()

    async def test_report_unknown_reason(self, api_client, review_id):
        ada = await register(api_client, "ada")

        response = await api_client.post(
            f"/reviews/{review_id}/report",
            json={"reason": "boring"},
            headers=bearer(ada["accessToken"]),
        )

        assert response.status_code == 422
        assert response.json()["errors"][0]["field"] == "reason"

    async def test_report_missing_review(self, api_client):
        ada = await register(api_client, "ada")

        response = await api_client.post(
            "/reviews/missing/report",
            json={"reason": "spam"},
            headers=bearer(ada["accessToken"]),
        )

        assert response.status_code == 404

    async def test_report_requires_auth(self, api_client, review_id):
        response = await api_client.post(
            f"/reviews/{review_id}/report", json={"reason": "spam"}
        )

        assert response.status_code == 401


class TestNotificationsApi:
    """E2E tests for the notifications REST mirror."""

    async def test_list_and_mark_read(self, api_client, cineshare_app):
        ada = await register(api_client, "ada")
        bob = await register(api_client, "bob")
        container = cineshare_app.container

        async with container.database.session() as session:
            use_case = container.get_create_notification_use_case(session)
            for kind in (NotificationType.LIKE, NotificationType.FOLLOW):
                await use_case.execute(
                    CreateNotificationCommand(
                        user_id=bob["user"]["id"],
                        type=kind,
                        actor_id=ada["user"]["id"],
                        actor_name="ada",
                        message=f"ada sent a {kind.value}",
                    )
                )

        headers = bearer(bob["accessToken"])
        listing = (await api_client.get("/notifications", headers=headers)).json()
        assert listing["unreadCount"] == 2
        first_id = listing["notifications"][0]["id"]

        marked = await api_client.patch(
            f"/notifications/{first_id}/read", headers=headers
        )
        assert marked.json() == {"notificationId": first_id}

        unread = await api_client.get(
            "/notifications", params={"unreadOnly": "true"}, headers=headers
        )
        assert len(unread.json()["notifications"]) == 1

        all_read = await api_client.patch("/notifications/read-all", headers=headers)
        assert all_read.json() == {"count": 1}

    async def test_cannot_mark_someone_elses_notification(
        self, api_client, cineshare_app
    ):
        ada = await register(api_client, "ada")
        bob = await register(api_client, "bob")
        container = cineshare_app.container

        async with container.database.session() as session:
            notification = await container.get_create_notification_use_case(
                session
            ).execute(
                CreateNotificationCommand(
                    user_id=bob["user"]["id"],
                    type=NotificationType.MENTION,
                    actor_id=ada["user"]["id"],
                    actor_name="ada",
                    message="ada mentioned you",
                )
            )

        response = await api_client.patch(
            f"/notifications/{notification.id}/read",
            headers=bearer(ada["accessToken"]),
        )

        assert response.status_code == 404


class TestServiceEndpoints:
    """E2E tests for /health and /presence/online."""

    async def test_health(self, api_client):
        response = await api_client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "ok"
        assert body["database"] is True
        assert body["total_connections"] == 0

    async def test_presence_online_requires_auth(self, api_client):
        assert (await api_client.get("/presence/online")).status_code == 401

    async def test_presence_online_empty(self, api_client):
        ada = await register(api_client, "ada")

        response = await api_client.get(
            "/presence/online", headers=bearer(ada["accessToken"])
        )

        assert response.status_code == 200
        assert response.json()["userIds"] == []
