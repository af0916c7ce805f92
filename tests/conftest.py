"""Shared fixtures: deterministic service wiring, signed tokens, HTTP clients."""

import itertools
from datetime import datetime, timedelta, timezone
from typing import Dict, Optional

import jwt
import pytest
from fastapi.testclient import TestClient

from stargazer.app import create_app
from stargazer.config import ServerConfig
from stargazer.services import EngagementService, MemoryItemStore, UserIdentity
from stargazer.state import AppState

JWT_KEY = "test-signing-key-that-is-long-enough-for-hs256"
COOKIE_NAME = "ka_auth"
FIXED_NOW = datetime(2024, 5, 1, 12, 30, tzinfo=timezone.utc)

RICK = UserIdentity(id="u-rick", name="Rick Sanchez", email="rick@sanchez.com")
MORTY = UserIdentity(id="u-morty", name="Morty Smith", email="morty@smith.com")


def make_token(user: UserIdentity, key: str = JWT_KEY, algorithm: str = "HS256", expires_in: Optional[int] = 3600) -> str:
    claims: Dict = {"id": user.id, "name": user.name, "email": user.email}
    if expires_in is not None:
        claims["exp"] = datetime.now(timezone.utc) + timedelta(seconds=expires_in)
    return jwt.encode(claims, key, algorithm=algorithm)


def sequential_ids():
    counter = itertools.count(1)
    return lambda: f"comment-{next(counter)}"


@pytest.fixture
def config() -> ServerConfig:
    return ServerConfig(jwt_key=JWT_KEY, auth_cookie_name=COOKIE_NAME, data_source="memory")


@pytest.fixture
def store() -> MemoryItemStore:
    return MemoryItemStore()


@pytest.fixture
def service(store) -> EngagementService:
    return EngagementService(store, clock=lambda: FIXED_NOW, id_generator=sequential_ids())


@pytest.fixture
def app_state(config, store) -> AppState:
    return AppState(config, item_store=store, clock=lambda: FIXED_NOW, id_generator=sequential_ids())


@pytest.fixture
def app(app_state):
    return create_app(app_state)


@pytest.fixture
def client(app) -> TestClient:
    """Anonymous client."""
    return TestClient(app)


@pytest.fixture
def rick_client(app) -> TestClient:
    return TestClient(app, cookies={COOKIE_NAME: make_token(RICK)})


@pytest.fixture
def morty_client(app) -> TestClient:
    return TestClient(app, cookies={COOKIE_NAME: make_token(MORTY)})
