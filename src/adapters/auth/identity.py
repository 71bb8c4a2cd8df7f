"""
Local identity service.

Credentials live in the `identities` collection of the document store
(document id = uid). A `LocalAuthGateway` instance tracks one signed-in
session, the way a browser SDK instance does, and notifies subscribers when
it changes.
"""

import logging
import re
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import UTC, datetime
from uuid import uuid4

from src.adapters.auth.crypto import JWTAuthAdapter
from src.domain.entities import AuthSession, Identity, iso_utc
from src.ports.auth import (
    EmailAlreadyInUseError,
    InvalidCredentialsError,
    InvalidEmailError,
    SessionCallback,
    Unsubscribe,
    WeakPasswordError,
)
from src.ports.clock import ClockPort
from src.ports.store import ContentStorePort

logger = logging.getLogger(__name__)

IDENTITIES = "identities"

EMAIL_REGEX = re.compile(
    r"^[a-zA-Z0-9.!#$%&'*+/=?^_`{|}~-]+@"
    r"[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?"
    r"(?:\.[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?)+$"
)


def normalize_email(email: str) -> str:
    return email.strip().lower()


def _to_identity(doc: dict) -> Identity:
    created = doc.get("createdAt")
    return Identity(
        uid=doc["id"],
        email=doc.get("email", ""),
        display_name=doc.get("displayName"),
        created_at=datetime.fromisoformat(created.replace("Z", "+00:00"))
        if created
        else datetime.fromtimestamp(0, UTC),
    )


class LocalAuthGateway:
    def __init__(
        self,
        store: ContentStorePort,
        clock: ClockPort,
        tokens: JWTAuthAdapter | None = None,
        min_password_length: int = 6,
        token_ttl_minutes: int = 60 * 24,
    ) -> None:
        self._store = store
        self._clock = clock
        self._tokens = tokens or JWTAuthAdapter()
        self._min_password_length = min_password_length
        self._token_ttl_minutes = token_ttl_minutes
        self._session: AuthSession | None = None
        self._subscribers: dict[int, SessionCallback] = {}
        self._next_key = 0
        self._lock = threading.Lock()

    # --- Session state ---

    @property
    def current_session(self) -> AuthSession | None:
        return self._session

    def _set_session(self, session: AuthSession | None) -> None:
        self._session = session
        with self._lock:
            callbacks = list(self._subscribers.values())
        for cb in callbacks:
            cb(session)

    def on_session_change(self, callback: SessionCallback) -> Unsubscribe:
        with self._lock:
            key = self._next_key
            self._next_key += 1
            self._subscribers[key] = callback

        def unsubscribe() -> None:
            with self._lock:
                self._subscribers.pop(key, None)

        callback(self._session)
        return unsubscribe

    @contextmanager
    def subscribed(self, callback: SessionCallback) -> Iterator[None]:
        unsubscribe = self.on_session_change(callback)
        try:
            yield
        finally:
            unsubscribe()

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscribers)

    # --- Sign in / out ---

    def _find_by_email(self, email: str) -> dict | None:
        docs = self._store.query(IDENTITIES, "email", "==", normalize_email(email), limit=1)
        return docs[0] if docs else None

    def _issue(self, doc: dict) -> AuthSession:
        token, expires_at = self._tokens.create_token(
            doc["id"], doc.get("email", ""), self._token_ttl_minutes
        )
        return AuthSession(
            uid=doc["id"],
            email=doc.get("email", ""),
            display_name=doc.get("displayName"),
            token=token,
            expires_at=expires_at,
        )

    def sign_in(self, email: str, password: str) -> AuthSession:
        doc = self._find_by_email(email)
        if doc is None or not self._tokens.verify_password(password, doc.get("passwordHash", "")):
            logger.info("Failed sign-in for %s", normalize_email(email))
            raise InvalidCredentialsError("Invalid email or password")
        session = self._issue(doc)
        self._set_session(session)
        logger.info("Signed in uid=%s", session.uid)
        return session

    def sign_out(self) -> None:
        if self._session is not None:
            logger.info("Signed out uid=%s", self._session.uid)
        self._set_session(None)

    def restore(self, token: str) -> AuthSession | None:
        claims = self._tokens.validate_token(token)
        if claims is None:
            return None
        doc = self._store.get_record_by_id(IDENTITIES, claims["sub"])
        if doc is None:
            return None
        session = AuthSession(
            uid=doc["id"],
            email=doc.get("email", ""),
            display_name=doc.get("displayName"),
            token=token,
            expires_at=datetime.fromtimestamp(int(claims["exp"]), UTC),
        )
        self._set_session(session)
        return session

    # --- Identity management ---

    def create_user(self, email: str, password: str) -> Identity:
        normalized = normalize_email(email)
        if not EMAIL_REGEX.match(normalized):
            raise InvalidEmailError("Invalid email address.")
        if len(password) < self._min_password_length:
            raise WeakPasswordError(
                f"Password should be at least {self._min_password_length} characters."
            )
        if self._find_by_email(normalized) is not None:
            raise EmailAlreadyInUseError("This email is already registered.")

        uid = uuid4().hex
        created_at = self._clock.now()
        self._store.set_record(
            IDENTITIES,
            uid,
            {
                "email": normalized,
                "passwordHash": self._tokens.hash_password(password),
                "displayName": None,
                "createdAt": iso_utc(created_at),
            },
        )
        logger.info("Created identity uid=%s", uid)
        return Identity(uid=uid, email=normalized, display_name=None, created_at=created_at)

    def update_profile(self, identity: Identity, display_name: str | None = None) -> None:
        self._store.update(IDENTITIES, identity.uid, {"displayName": display_name})
        if self._session is not None and self._session.uid == identity.uid:
            self._session = self._session.model_copy(update={"display_name": display_name})

    def list_identities(self) -> Iterator[Identity]:
        for doc in self._store.get_collection(IDENTITIES, order_by="createdAt"):
            yield _to_identity(doc)
