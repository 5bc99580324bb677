"""
Pytest configuration and shared fixtures.
"""
import os
from typing import AsyncGenerator, Callable, List

import pytest
from httpx import AsyncClient, ASGITransport

# Set testing environment before the app reads its settings
os.environ['BCRYPT_ROUNDS'] = '4'
os.environ['RATE_LIMIT_ENABLED'] = 'false'
os.environ['SESSION_SECRET_KEY'] = 'test-session-secret'
os.environ['ENVIRONMENT'] = 'development'

from taskhub.database import Database
from taskhub.main import create_app
from taskhub.routes import Concepts
from tests.mocks.fake_supabase import FakeSupabase

TEST_PASSWORD = "testpassword123"


@pytest.fixture
def fake_supabase() -> FakeSupabase:
    """A fresh in-memory store for each test"""
    return FakeSupabase()


@pytest.fixture
def database(fake_supabase: FakeSupabase) -> Database:
    return Database(client=fake_supabase)


@pytest.fixture
def concepts(database: Database) -> Concepts:
    return Concepts(database)


@pytest.fixture
def app(database: Database):
    return create_app(database)


@pytest.fixture
async def make_client(app) -> AsyncGenerator[Callable[[], AsyncClient], None]:
    """Factory for clients with their own cookie jar, i.e. their own session"""
    clients: List[AsyncClient] = []

    def _make() -> AsyncClient:
        client = AsyncClient(transport=ASGITransport(app=app), base_url='http://test')
        clients.append(client)
        return client

    yield _make

    for client in clients:
        await client.aclose()


@pytest.fixture
async def client(make_client) -> AsyncClient:
    return make_client()


async def register_and_login(client: AsyncClient, username: str, password: str = TEST_PASSWORD) -> str:
    """Register a user through the API, log the client in, and return the user's id"""
    response = await client.post("/api/users", json={"username": username, "password": password})
    assert response.status_code == 201, response.text
    response = await client.post("/api/login", json={"username": username, "password": password})
    assert response.status_code == 200, response.text
    return (await client.get("/api/session")).json()["id"]
