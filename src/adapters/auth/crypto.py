from datetime import UTC, datetime, timedelta
from typing import Any

from src.api.auth_utils import (
    create_access_token,
    decode_access_token,
    get_password_hash,
    verify_password,
)


class JWTAuthAdapter:
    """JWT session tokens (python-jose) and argon2 password hashes (passlib)."""

    def __init__(self, secret_key: str | None = None) -> None:
        self._secret_key = secret_key

    def hash_password(self, password: str) -> str:
        return get_password_hash(password)

    def verify_password(self, plain: str, hashed: str) -> bool:
        return verify_password(plain, hashed)

    def create_token(self, uid: str, email: str, ttl_minutes: int) -> tuple[str, datetime]:
        issued = datetime.now(UTC)
        expires_at = issued + timedelta(minutes=ttl_minutes)
        token = create_access_token(
            {"sub": uid, "email": email},
            timedelta(minutes=ttl_minutes),
            now_utc=issued,
            secret_key=self._secret_key,
        )
        return token, expires_at

    def validate_token(self, token: str) -> dict[str, Any] | None:
        """Claims of a valid, unexpired token; None otherwise."""
        payload = decode_access_token(token, secret_key=self._secret_key)
        if not payload or not isinstance(payload.get("sub"), str):
            return None
        return payload
