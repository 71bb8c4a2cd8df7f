"""
Tests for the local identity gateway: accounts, sign-in and session
change notifications.
"""

from __future__ import annotations

import pytest

from src.adapters.auth.crypto import JWTAuthAdapter
from src.adapters.auth.identity import IDENTITIES, LocalAuthGateway
from src.adapters.clock import FixedClock
from src.adapters.memory_store import InMemoryDocumentStore
from src.domain.entities import AuthSession
from src.ports.auth import (
    EmailAlreadyInUseError,
    InvalidCredentialsError,
    InvalidEmailError,
    WeakPasswordError,
)

PASSWORD = "hunter22"


@pytest.fixture
def account(gateway: LocalAuthGateway) -> str:
    """Registers editor@example.com and returns its uid."""
    return gateway.create_user("Editor@Example.com ", PASSWORD).uid


# --- Accounts ---


class TestCreateUser:
    def test_email_normalised_and_hash_stored(
        self, gateway: LocalAuthGateway, store: InMemoryDocumentStore, account: str
    ) -> None:
        doc = store.get_record_by_id(IDENTITIES, account)

        assert doc is not None
        assert doc["email"] == "editor@example.com"
        assert doc["passwordHash"] != PASSWORD
        assert doc["createdAt"] == "2025-01-15T12:00:00.000000Z"

    def test_weak_password(self, gateway: LocalAuthGateway) -> None:
        with pytest.raises(WeakPasswordError):
            gateway.create_user("a@example.com", "12345")

    def test_invalid_email(self, gateway: LocalAuthGateway) -> None:
        with pytest.raises(InvalidEmailError):
            gateway.create_user("not-an-email", PASSWORD)

    def test_duplicate_email(self, gateway: LocalAuthGateway, account: str) -> None:
        with pytest.raises(EmailAlreadyInUseError):
            gateway.create_user("editor@example.com", PASSWORD)

    def test_list_identities(self, gateway: LocalAuthGateway, account: str) -> None:
        assert [i.uid for i in gateway.list_identities()] == [account]


# --- Sign In / Out ---


class TestSignIn:
    def test_sign_in_sets_session(self, gateway: LocalAuthGateway, account: str) -> None:
        session = gateway.sign_in("EDITOR@example.com", PASSWORD)

        assert session.uid == account
        assert gateway.current_session == session

    def test_wrong_password(self, gateway: LocalAuthGateway, account: str) -> None:
        with pytest.raises(InvalidCredentialsError):
            gateway.sign_in("editor@example.com", "wrong-password")
        assert gateway.current_session is None

    def test_unknown_email(self, gateway: LocalAuthGateway) -> None:
        with pytest.raises(InvalidCredentialsError):
            gateway.sign_in("nobody@example.com", PASSWORD)

    def test_restore_on_fresh_gateway(
        self,
        gateway: LocalAuthGateway,
        store: InMemoryDocumentStore,
        clock: FixedClock,
        tokens: JWTAuthAdapter,
        account: str,
    ) -> None:
        token = gateway.sign_in("editor@example.com", PASSWORD).token
        other = LocalAuthGateway(store, clock, tokens=tokens)

        restored = other.restore(token)

        assert restored is not None
        assert restored.uid == account
        assert other.current_session is not None

    def test_restore_rejects_foreign_token(
        self, store: InMemoryDocumentStore, clock: FixedClock, account: str
    ) -> None:
        issuer = LocalAuthGateway(store, clock, tokens=JWTAuthAdapter(secret_key="other"))
        token = issuer.sign_in("editor@example.com", PASSWORD).token
        gateway = LocalAuthGateway(store, clock, tokens=JWTAuthAdapter(secret_key="test"))

        assert gateway.restore(token) is None
        assert gateway.restore("garbage") is None

    def test_update_profile_refreshes_session(
        self, gateway: LocalAuthGateway, account: str
    ) -> None:
        gateway.sign_in("editor@example.com", PASSWORD)
        identity = next(gateway.list_identities())

        gateway.update_profile(identity, display_name="Ed")

        assert gateway.current_session is not None
        assert gateway.current_session.display_name == "Ed"


# --- Session Subscription ---


class TestSessionSubscription:
    def test_current_state_delivered_immediately(self, gateway: LocalAuthGateway) -> None:
        seen: list[AuthSession | None] = []
        gateway.on_session_change(seen.append)
        assert seen == [None]

    def test_transitions_until_disposed(self, gateway: LocalAuthGateway, account: str) -> None:
        seen: list[AuthSession | None] = []
        dispose = gateway.on_session_change(seen.append)

        gateway.sign_in("editor@example.com", PASSWORD)
        gateway.sign_out()
        dispose()
        gateway.sign_in("editor@example.com", PASSWORD)

        assert [s.uid if s else None for s in seen] == [None, account, None]
        assert gateway.subscriber_count == 0

    def test_scoped_subscription_always_unsubscribes(self, gateway: LocalAuthGateway) -> None:
        with pytest.raises(RuntimeError):
            with gateway.subscribed(lambda s: None):
                assert gateway.subscriber_count == 1
                raise RuntimeError("view unmounted")
        assert gateway.subscriber_count == 0

    def test_dispose_twice_is_harmless(self, gateway: LocalAuthGateway) -> None:
        dispose = gateway.on_session_change(lambda s: None)
        dispose()
        dispose()
        assert gateway.subscriber_count == 0
