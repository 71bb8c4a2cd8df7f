"""Session storage adapters for the analytics session id."""

from typing import Any


class InMemorySessionStorage:
    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value


class CookieSessionStorage:
    """
    Browser-session cookies as tab storage.

    Reads come from the request cookies; writes are buffered and flushed onto
    the outgoing response by `apply`. Cookies carry no max-age, so they end
    with the browser session.
    """

    def __init__(self, cookies: dict[str, str], secure: bool = False, same_site: str = "lax"):
        self._cookies = dict(cookies)
        self._pending: dict[str, str] = {}
        self._secure = secure
        self._same_site = same_site

    def get(self, key: str) -> str | None:
        return self._pending.get(key) or self._cookies.get(key)

    def set(self, key: str, value: str) -> None:
        self._pending[key] = value

    @property
    def pending(self) -> dict[str, str]:
        return dict(self._pending)

    def apply(self, response: Any) -> None:
        for key, value in self._pending.items():
            response.set_cookie(
                key=key,
                value=value,
                httponly=True,
                secure=self._secure,
                samesite=self._same_site,
            )
