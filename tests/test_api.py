"""End-to-end tests for the HTTP surface."""

from datetime import timedelta
from unittest.mock import AsyncMock

from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from taleforge.api.deps import get_story_service
from taleforge.core.security import TokenService
from taleforge.services import StoryService


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def register(client: TestClient, username: str, password: str = "pw1") -> str:
    response = client.post(
        "/auth/register",
        json={"username": username, "email": f"{username}@x.com", "password": password},
    )
    assert response.status_code == 200, response.text
    return response.json()["token"]


def create_story(client: TestClient, token: str, title: str, hints: str = "hints", genres=None):
    return client.post(
        "/stories",
        json={"title": title, "hints": hints, "genres": genres or ["Fantasy"]},
        headers=bearer(token),
    )


class TestAuthEndpoints:
    def test_register(self, client: TestClient) -> None:
        response = client.post(
            "/auth/register",
            json={"username": "alice", "email": "alice@x.com", "password": "pw1"},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["token"]
        assert body["token_type"] == "bearer"
        assert body["user"]["username"] == "alice"
        assert body["user"]["email"] == "alice@x.com"
        assert "password" not in body["user"]
        assert "hashed_password" not in body["user"]

    def test_register_duplicate_username(self, client: TestClient) -> None:
        register(client, "alice")
        response = client.post(
            "/auth/register",
            json={"username": "alice", "email": "new@x.com", "password": "pw1"},
        )

        assert response.status_code == 409
        assert response.json()["details"]["field"] == "username"

    def test_register_duplicate_email(self, client: TestClient) -> None:
        register(client, "alice")
        response = client.post(
            "/auth/register",
            json={"username": "alicia", "email": "alice@x.com", "password": "pw1"},
        )

        assert response.status_code == 409
        assert response.json()["details"]["field"] == "email"

    def test_register_missing_fields(self, client: TestClient) -> None:
        response = client.post("/auth/register", json={"username": "alice"})

        assert response.status_code == 400
        assert response.json()["details"]["fields"] == ["email", "password"]

    def test_login_with_username_and_email(self, client: TestClient, tokens: TokenService) -> None:
        register(client, "alice")

        for identifier in ("alice", "alice@x.com"):
            response = client.post(
                "/auth/login", json={"emailOrUsername": identifier, "password": "pw1"}
            )
            assert response.status_code == 200
            body = response.json()
            assert tokens.verify(body["token"]) == str(body["user"]["id"])
            assert body["user"]["username"] == "alice"

    def test_login_invalid_credentials(self, client: TestClient) -> None:
        register(client, "alice")

        wrong_password = client.post(
            "/auth/login", json={"emailOrUsername": "alice", "password": "nope"}
        )
        unknown_user = client.post(
            "/auth/login", json={"emailOrUsername": "mallory", "password": "pw1"}
        )

        assert wrong_password.status_code == 400
        assert unknown_user.status_code == 400
        assert wrong_password.json() == unknown_user.json()

    def test_me(self, client: TestClient) -> None:
        token = register(client, "alice")
        response = client.get("/auth/me", headers=bearer(token))

        assert response.status_code == 200
        assert response.json()["username"] == "alice"
        assert "created_at" in response.json()

    def test_logout_requires_token(self, client: TestClient) -> None:
        token = register(client, "alice")

        assert client.post("/auth/logout").status_code == 401
        response = client.post("/auth/logout", headers=bearer(token))
        assert response.status_code == 200
        assert response.json()["message"] == "Successfully logged out"


class TestAuthGate:
    def test_missing_token(self, client: TestClient) -> None:
        response = client.get("/stories")

        assert response.status_code == 401
        assert response.headers["www-authenticate"] == "Bearer"

    def test_non_bearer_scheme(self, client: TestClient) -> None:
        token = register(client, "alice")
        response = client.get("/stories", headers={"Authorization": f"Token {token}"})
        assert response.status_code == 401

    def test_failures_are_indistinguishable(self, client: TestClient, tokens: TokenService) -> None:
        """Expired, forged and malformed tokens produce the same response."""
        token = register(client, "alice")
        header, payload, signature = token.split(".")
        forged = f"{header}.{payload}.{'A' if signature[0] != 'A' else 'B'}{signature[1:]}"
        expired = tokens.issue("1", expires_delta=timedelta(seconds=-10))

        responses = [
            client.get("/stories", headers=bearer(t))
            for t in (forged, expired, "garbage")
        ]

        assert [r.status_code for r in responses] == [401, 401, 401]
        assert len({r.text for r in responses}) == 1

    def test_other_signing_key(self, client: TestClient) -> None:
        token = TokenService("someone-elses-key").issue("1")
        assert client.get("/stories", headers=bearer(token)).status_code == 401

    def test_non_numeric_subject(self, client: TestClient, tokens: TokenService) -> None:
        token = tokens.issue("not-a-user-id")
        assert client.get("/stories", headers=bearer(token)).status_code == 401


class TestStoryEndpoints:
    def test_example_scenario(self, client: TestClient) -> None:
        alice = register(client, "alice")
        hints = "x" * 300

        response = create_story(client, alice, "Test", hints=hints)
        assert response.status_code == 200
        story = response.json()
        assert "Test" in story["content"]
        assert "x" * 250 in story["content"]
        assert "x" * 251 not in story["content"]
        assert story["genres"] == ["Fantasy"]
        assert story["id"]
        assert story["created_at"]

        listed = client.get("/stories", headers=bearer(alice))
        assert listed.status_code == 200
        assert len(listed.json()) == 1

        bob = register(client, "bob")
        assert client.get("/stories", headers=bearer(bob)).json() == []

    def test_validation_error(self, client: TestClient) -> None:
        token = register(client, "alice")

        for body in (
            {"title": "", "hints": "h", "genres": ["Fantasy"]},
            {"title": "T", "hints": "", "genres": ["Fantasy"]},
            {"title": "T", "hints": "h", "genres": []},
            {},
        ):
            response = client.post("/stories", json=body, headers=bearer(token))
            assert response.status_code == 400
            assert response.json()["error"] == "Title, hints and at least one genre required"

    def test_malformed_body(self, client: TestClient) -> None:
        token = register(client, "alice")
        response = client.post(
            "/stories",
            json={"title": "T", "hints": "h", "genres": "Fantasy"},
            headers=bearer(token),
        )

        assert response.status_code == 400
        assert response.json()["error"] == "Validation error"

    def test_create_requires_token(self, client: TestClient) -> None:
        response = client.post(
            "/stories", json={"title": "T", "hints": "h", "genres": ["Fantasy"]}
        )
        assert response.status_code == 401

    def test_newest_first_and_isolated(self, client: TestClient) -> None:
        alice = register(client, "alice")
        bob = register(client, "bob")

        create_story(client, alice, "t1")
        create_story(client, bob, "bob's story")
        create_story(client, alice, "t2")
        create_story(client, alice, "t3")

        alice_titles = [s["title"] for s in client.get("/stories", headers=bearer(alice)).json()]
        bob_titles = [s["title"] for s in client.get("/stories", headers=bearer(bob)).json()]

        assert alice_titles == ["t3", "t2", "t1"]
        assert bob_titles == ["bob's story"]

    def test_unstripped_input_is_accepted(self, client: TestClient) -> None:
        token = register(client, "alice")
        response = client.post(
            "/stories",
            json={"title": "x" * 300, "hints": "   ", "genres": [" Sci-Fi ", ""]},
            headers=bearer(token),
        )

        assert response.status_code == 200
        story = response.json()
        assert story["title"] == "x" * 300
        assert story["hints"] == "   "
        assert story["genres"] == [" Sci-Fi ", ""]

    def test_store_failure_is_opaque(self, client: TestClient) -> None:
        token = register(client, "alice")
        broken_db = AsyncMock()
        broken_db.execute.side_effect = OperationalError(
            "SELECT", {}, Exception("could not connect to server at 10.0.0.5")
        )
        client.app.dependency_overrides[get_story_service] = lambda: StoryService(broken_db)
        try:
            response = client.get("/stories", headers=bearer(token))
        finally:
            client.app.dependency_overrides.clear()

        assert response.status_code == 503
        assert response.json() == {"error": "Service temporarily unavailable", "details": {}}
        assert "10.0.0.5" not in response.text


class TestHealth:
    def test_health(self, client: TestClient) -> None:
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "version": "0.1.0", "database": "healthy"}

    def test_probes(self, client: TestClient) -> None:
        assert client.get("/ready").json() == {"ready": True}
        assert client.get("/live").json() == {"alive": True}
