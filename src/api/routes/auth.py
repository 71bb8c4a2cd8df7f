import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Form, HTTPException, Response, status
from fastapi.responses import JSONResponse, RedirectResponse
from fastapi.security import OAuth2PasswordRequestForm
from pydantic import BaseModel

from src.adapters.auth.identity import LocalAuthGateway
from src.api.auth_utils import COOKIE_NAME, safe_redirect_path
from src.api.deps import get_gateway, get_rules, require_session
from src.api.schemas import SessionResponse
from src.components.auth import LoginInput, run_login, run_logout
from src.domain.entities import AuthSession
from src.rules.models import Rules

logger = logging.getLogger(__name__)

router = APIRouter()


class Token(BaseModel):
    access_token: str
    token_type: str


def set_session_cookie(response: Response, token: str, rules: Rules) -> None:
    max_age = rules.auth.token_ttl_minutes * 60
    response.set_cookie(
        key=COOKIE_NAME,
        value=f"Bearer {token}",
        httponly=True,
        max_age=max_age,
        expires=max_age,
        samesite=rules.cookies.same_site,
        secure=rules.cookies.secure,
    )


@router.post("/login", response_model=Token)
def login_for_access_token(
    form_data: Annotated[OAuth2PasswordRequestForm, Depends()],
    next: Annotated[str | None, Form()] = None,
    gateway: LocalAuthGateway = Depends(get_gateway),
    rules: Rules = Depends(get_rules),
) -> Response:
    """
    Sign in with email and password.

    Form posts carrying `next` are redirected there (or back to the login
    form on failure); API clients get the token as JSON.
    """
    result = run_login(LoginInput(email=form_data.username, password=form_data.password), gateway)
    if not result.success or result.session is None:
        if next:
            return RedirectResponse(
                "/dashboard?error=login", status_code=status.HTTP_303_SEE_OTHER
            )
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=result.error,
            headers={"WWW-Authenticate": "Bearer"},
        )

    token = result.session.token
    response: Response
    if next:
        response = RedirectResponse(
            safe_redirect_path(next, "/dashboard"), status_code=status.HTTP_303_SEE_OTHER
        )
    else:
        response = JSONResponse(Token(access_token=token, token_type="bearer").model_dump())
    set_session_cookie(response, token, rules)
    return response


@router.post("/logout")
def logout(
    next: Annotated[str | None, Form()] = None,
    gateway: LocalAuthGateway = Depends(get_gateway),
) -> Response:
    """Sign out and clear the session cookie."""
    run_logout(gateway)
    response: Response
    if next:
        response = RedirectResponse(
            safe_redirect_path(next, "/dashboard"), status_code=status.HTTP_303_SEE_OTHER
        )
    else:
        response = JSONResponse({"status": "success"})
    response.delete_cookie(key=COOKIE_NAME)
    return response


@router.get("/me", response_model=SessionResponse)
def read_current_session(session: AuthSession = Depends(require_session)) -> SessionResponse:
    return SessionResponse(
        uid=session.uid,
        email=session.email,
        display_name=session.display_name,
        expires_at=session.expires_at,
    )
