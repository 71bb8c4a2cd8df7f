"""
Auth gateway port.

Mirrors a client-side identity SDK: one gateway instance tracks one signed-in
session and notifies subscribers whenever it changes.
"""

from collections.abc import Callable, Iterator
from contextlib import AbstractContextManager
from typing import Protocol

from src.domain.entities import AuthSession, Identity

SessionCallback = Callable[[AuthSession | None], None]
Unsubscribe = Callable[[], None]


class AuthError(Exception):
    """Identity service rejected the request."""

    code = "auth/unknown"


class InvalidCredentialsError(AuthError):
    code = "auth/invalid-credential"


class EmailAlreadyInUseError(AuthError):
    code = "auth/email-already-in-use"


class WeakPasswordError(AuthError):
    code = "auth/weak-password"


class InvalidEmailError(AuthError):
    code = "auth/invalid-email"


class AuthGatewayPort(Protocol):
    @property
    def current_session(self) -> AuthSession | None: ...

    def sign_in(self, email: str, password: str) -> AuthSession:
        """Raises InvalidCredentialsError on unknown email or wrong password."""
        ...

    def sign_out(self) -> None: ...

    def restore(self, token: str) -> AuthSession | None:
        """Adopt a previously issued token as the current session."""
        ...

    def on_session_change(self, callback: SessionCallback) -> Unsubscribe:
        """
        Deliver the current session immediately, then every change until the
        returned disposer is called.
        """
        ...

    def subscribed(self, callback: SessionCallback) -> AbstractContextManager[None]:
        """Scoped subscription; always unsubscribes on exit."""
        ...

    def create_user(self, email: str, password: str) -> Identity: ...

    def update_profile(self, identity: Identity, display_name: str | None = None) -> None: ...

    def list_identities(self) -> Iterator[Identity]: ...
