import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Annotated

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer
from pydantic import BaseModel

from src.adapters.auth.crypto import JWTAuthAdapter
from src.adapters.auth.identity import LocalAuthGateway
from src.adapters.clock import SystemClock
from src.adapters.session_storage import CookieSessionStorage
from src.adapters.sqlite.document_store import SQLiteDocumentStore
from src.api.auth_utils import COOKIE_NAME, bearer_from_cookie
from src.components.analytics import AnalyticsRecorder, ScanAggregator
from src.components.catalog import PriceBracket, brackets_from_rules
from src.domain.entities import AuthSession
from src.ports.store import ContentStorePort, StoreError
from src.rules.loader import load_rules
from src.rules.models import Rules

logger = logging.getLogger(__name__)


# --- Settings ---
class BackendConfig(BaseModel):
    """Identity of the hosted backend project, read from the environment."""

    api_key: str = ""
    project_id: str = ""
    storage_bucket: str = ""
    messaging_sender_id: str = ""
    app_id: str = ""
    measurement_id: str = ""

    @classmethod
    def from_env(cls) -> "BackendConfig":
        return cls(
            api_key=os.environ.get("REVIEWS_API_KEY", ""),
            project_id=os.environ.get("REVIEWS_PROJECT_ID", ""),
            storage_bucket=os.environ.get("REVIEWS_STORAGE_BUCKET", ""),
            messaging_sender_id=os.environ.get("REVIEWS_MESSAGING_SENDER_ID", ""),
            app_id=os.environ.get("REVIEWS_APP_ID", ""),
            measurement_id=os.environ.get("REVIEWS_MEASUREMENT_ID", ""),
        )


class Settings:
    def __init__(self) -> None:
        self.base_dir = Path(os.getcwd())
        self.data_dir = Path(os.environ.get("REVIEWS_DATA_DIR", "./data"))
        self.db_path = str(self.data_dir / "reviews.db")
        self.rules_path = Path(os.environ.get("REVIEWS_RULES_PATH", "rules.yaml"))
        if not self.rules_path.is_absolute():
            self.rules_path = self.base_dir / self.rules_path
        self.secret_key = os.environ.get("REVIEWS_SECRET_KEY", "dev-secret-unsafe")
        self.backend = BackendConfig.from_env()


@lru_cache
def get_settings() -> Settings:
    return Settings()


# --- Rules ---
@lru_cache
def get_rules(settings: Settings = Depends(get_settings)) -> Rules:
    return load_rules(settings.rules_path)


def get_price_brackets(rules: Rules = Depends(get_rules)) -> tuple[PriceBracket, ...]:
    return brackets_from_rules(rules.catalog)


# --- Store / Clock ---
def get_store(settings: Settings = Depends(get_settings)) -> ContentStorePort:
    return SQLiteDocumentStore(settings.db_path)


_clock_instance: SystemClock | None = None


def get_clock() -> SystemClock:
    """Get clock singleton."""
    global _clock_instance
    if _clock_instance is None:
        _clock_instance = SystemClock()
    return _clock_instance


# --- Auth ---
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)


def get_token_adapter(settings: Settings = Depends(get_settings)) -> JWTAuthAdapter:
    return JWTAuthAdapter(secret_key=settings.secret_key)


def get_gateway(
    request: Request,
    token: Annotated[str | None, Depends(oauth2_scheme)],
    store: ContentStorePort = Depends(get_store),
    clock: SystemClock = Depends(get_clock),
    rules: Rules = Depends(get_rules),
    tokens: JWTAuthAdapter = Depends(get_token_adapter),
) -> LocalAuthGateway:
    """
    A gateway for this request, restored from the session cookie.

    The HttpOnly cookie wins over the Authorization header.
    """
    gateway = LocalAuthGateway(
        store,
        clock,
        tokens=tokens,
        min_password_length=rules.auth.min_password_length,
        token_ttl_minutes=rules.auth.token_ttl_minutes,
    )
    token = bearer_from_cookie(request.cookies.get(COOKIE_NAME)) or token
    if token:
        try:
            gateway.restore(token)
        except StoreError:
            logger.exception("Could not restore session")
    return gateway


def get_current_session(
    gateway: LocalAuthGateway = Depends(get_gateway),
) -> AuthSession | None:
    return gateway.current_session


def require_session(
    session: AuthSession | None = Depends(get_current_session),
) -> AuthSession:
    if session is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return session


# --- Analytics ---
def get_aggregator(
    store: ContentStorePort = Depends(get_store),
    rules: Rules = Depends(get_rules),
) -> ScanAggregator:
    return ScanAggregator(store, collection=rules.analytics.collection)


def get_session_storage(
    request: Request, rules: Rules = Depends(get_rules)
) -> CookieSessionStorage:
    return CookieSessionStorage(
        request.cookies, secure=rules.cookies.secure, same_site=rules.cookies.same_site
    )


def get_recorder(
    request: Request,
    store: ContentStorePort = Depends(get_store),
    clock: SystemClock = Depends(get_clock),
    rules: Rules = Depends(get_rules),
    session_storage: CookieSessionStorage = Depends(get_session_storage),
) -> AnalyticsRecorder:
    return AnalyticsRecorder(
        store,
        clock,
        session_storage,
        user_agent=request.headers.get("user-agent"),
        collection=rules.analytics.collection,
        enabled=rules.analytics.enabled,
    )
