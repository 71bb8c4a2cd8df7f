"""
Shared fixtures: in-memory store, fixed clock, real rules and an app client
wired to them through dependency overrides.
"""

from __future__ import annotations

from collections.abc import Iterator
from datetime import UTC, datetime
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from src.adapters.auth.crypto import JWTAuthAdapter
from src.adapters.auth.identity import LocalAuthGateway
from src.adapters.clock import FixedClock
from src.adapters.memory_store import InMemoryDocumentStore
from src.api.deps import get_clock, get_rules, get_store, get_token_adapter
from src.api.main import app
from src.components.auth import CreateUserInput, run_create_user
from src.rules.loader import load_rules
from src.rules.models import Rules

ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "correct-horse"
ADMIN_NAME = "Site Admin"


@pytest.fixture
def store() -> InMemoryDocumentStore:
    """Empty in-memory document store."""
    return InMemoryDocumentStore()


@pytest.fixture
def clock() -> FixedClock:
    """Clock frozen at 2025-01-15 12:00 UTC."""
    return FixedClock(datetime(2025, 1, 15, 12, 0, tzinfo=UTC))


@pytest.fixture
def rules() -> Rules:
    """Rules from the project root rules.yaml."""
    rules_path = Path("rules.yaml").resolve()
    if not rules_path.exists():
        raise FileNotFoundError(f"Rules not found at {rules_path}")
    return load_rules(rules_path)


@pytest.fixture
def tokens() -> JWTAuthAdapter:
    return JWTAuthAdapter(secret_key="test-secret")


@pytest.fixture
def gateway(
    store: InMemoryDocumentStore, clock: FixedClock, tokens: JWTAuthAdapter
) -> LocalAuthGateway:
    return LocalAuthGateway(store, clock, tokens=tokens)


@pytest.fixture
def client(
    store: InMemoryDocumentStore,
    clock: FixedClock,
    rules: Rules,
    tokens: JWTAuthAdapter,
) -> Iterator[TestClient]:
    """Full application client backed by the in-memory store (no lifespan)."""
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_clock] = lambda: clock
    app.dependency_overrides[get_rules] = lambda: rules
    app.dependency_overrides[get_token_adapter] = lambda: tokens
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def admin_client(
    client: TestClient,
    gateway: LocalAuthGateway,
    store: InMemoryDocumentStore,
    clock: FixedClock,
) -> TestClient:
    """Client holding a session cookie for a freshly created admin."""
    created = run_create_user(
        CreateUserInput(email=ADMIN_EMAIL, password=ADMIN_PASSWORD, display_name=ADMIN_NAME),
        gateway,
        store,
        clock,
    )
    assert created.success, created.error
    response = client.post(
        "/api/auth/login", data={"username": ADMIN_EMAIL, "password": ADMIN_PASSWORD}
    )
    assert response.status_code == 200, response.text
    return client
