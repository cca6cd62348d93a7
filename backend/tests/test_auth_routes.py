"""
Plant API — Auth Endpoint Tests
================================

What we test:
    ✅ register → login → verify recovers {id, username}
    ✅ Missing fields → 400, duplicate username → 409
    ✅ Unknown user and wrong password produce identical 400 bodies
    ✅ Stored password is a hash, never the plaintext
    ✅ Malformed stored hash → 500 (details only in development)
"""

import pytest
from sqlalchemy import select

from plant_api.models.user import User

CREDENTIALS = {"username": "fern", "password": "s3cret-pass"}


class TestRegister:

    @pytest.mark.asyncio
    async def test_register_returns_public_user(self, client):
        response = await client.post("/auth/register", json=CREDENTIALS)

        assert response.status_code == 201
        body = response.json()
        assert body["message"] == "User registered successfully"
        assert body["user"]["username"] == "fern"
        assert isinstance(body["user"]["id"], int)
        assert "password" not in body["user"]

    @pytest.mark.asyncio
    async def test_register_stores_hash(self, client, db_session):
        await client.post("/auth/register", json=CREDENTIALS)

        result = await db_session.execute(select(User).where(User.username == "fern"))
        user = result.scalar_one()
        assert user.password_hash != CREDENTIALS["password"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "body",
        [{}, {"username": "fern"}, {"password": "x"}, {"username": "", "password": "x"}],
    )
    async def test_register_requires_both_fields(self, client, body):
        response = await client.post("/auth/register", json=body)

        assert response.status_code == 400
        assert response.json()["error"] == "validation_error"

    @pytest.mark.asyncio
    async def test_duplicate_username(self, client):
        await client.post("/auth/register", json=CREDENTIALS)
        response = await client.post(
            "/auth/register", json={"username": "fern", "password": "another-pass"}
        )

        assert response.status_code == 409
        assert response.json() == {"error": "conflict", "message": "Username already exists"}

    @pytest.mark.asyncio
    async def test_username_is_case_sensitive(self, client):
        await client.post("/auth/register", json=CREDENTIALS)
        response = await client.post("/auth/register", json={**CREDENTIALS, "username": "Fern"})

        assert response.status_code == 201


class TestLogin:

    @pytest.mark.asyncio
    async def test_login_token_carries_identity(self, app, client):
        registered = (await client.post("/auth/register", json=CREDENTIALS)).json()["user"]

        response = await client.post("/auth/login", json=CREDENTIALS)

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Logged in successfully"
        claims = app.state.token_service.verify(body["token"])
        assert claims == {"id": registered["id"], "username": "fern"}

    @pytest.mark.asyncio
    async def test_login_requires_both_fields(self, client):
        response = await client.post("/auth/login", json={"username": "fern"})

        assert response.status_code == 400
        assert response.json()["error"] == "validation_error"

    @pytest.mark.asyncio
    async def test_unknown_user_and_wrong_password_look_the_same(self, client):
        await client.post("/auth/register", json=CREDENTIALS)

        unknown = await client.post("/auth/login", json={"username": "ghost", "password": "s3cret-pass"})
        wrong = await client.post("/auth/login", json={"username": "fern", "password": "wrong-pass"})

        assert unknown.status_code == wrong.status_code == 400
        assert unknown.content == wrong.content
        assert wrong.json() == {"error": "invalid_credentials", "message": "Invalid credentials"}


class TestMe:

    @pytest.mark.asyncio
    async def test_me_returns_identity(self, client, auth_headers):
        response = await client.get("/auth/me", headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["username"] == "fern"


class TestInternalFailures:
    """A broken stored hash is a server fault, never "invalid credentials"."""

    @staticmethod
    async def _seed_broken_user(app):
        async with app.state.session_factory() as session:
            session.add(User(username="broken", password_hash="not-a-bcrypt-hash"))
            await session.commit()

    @pytest.mark.asyncio
    async def test_malformed_hash_is_500(self, app, client):
        await self._seed_broken_user(app)

        response = await client.post("/auth/login", json={"username": "broken", "password": "anything"})

        assert response.status_code == 500
        body = response.json()
        assert body["error"] == "server_error"
        assert "details" not in body

    @pytest.mark.asyncio
    async def test_development_exposes_details(self, client_factory):
        app, client = await client_factory(environment="development")
        await self._seed_broken_user(app)

        response = await client.post("/auth/login", json={"username": "broken", "password": "anything"})

        assert response.status_code == 500
        body = response.json()
        assert body["error"] == "server_error"
        assert body["details"]
