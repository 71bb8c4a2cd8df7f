from fastapi import APIRouter, Depends, HTTPException, status

from src.adapters.auth.identity import LocalAuthGateway
from src.adapters.clock import SystemClock
from src.api.deps import get_clock, get_gateway, get_store, require_session
from src.api.schemas import UserCreateRequest, UserResponse, UserUpdateRequest
from src.components.auth import (
    CreateUserInput,
    UpdateUserInput,
    run_create_user,
    run_list_users,
    run_update_user,
)
from src.domain.entities import AdminUser, AuthSession
from src.ports.store import ContentStorePort

router = APIRouter()


def _to_response(user: AdminUser) -> UserResponse:
    return UserResponse(
        uid=user.uid,
        email=user.email,
        display_name=user.display_name,
        created_at=user.created_at,
    )


@router.get("", response_model=list[UserResponse])
def list_users(
    session: AuthSession = Depends(require_session),
    store: ContentStorePort = Depends(get_store),
) -> list[UserResponse]:
    """List admin users."""
    result = run_list_users(store)
    if not result.success:
        raise HTTPException(status_code=500, detail=result.error)
    return [_to_response(u) for u in result.users]


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def create_user(
    req: UserCreateRequest,
    session: AuthSession = Depends(require_session),
    gateway: LocalAuthGateway = Depends(get_gateway),
    store: ContentStorePort = Depends(get_store),
    clock: SystemClock = Depends(get_clock),
) -> UserResponse:
    """Create an admin account and its users record."""
    inp = CreateUserInput(email=req.email, password=req.password, display_name=req.display_name)
    result = run_create_user(inp, gateway, store, clock)
    if not result.success or result.user is None:
        raise HTTPException(status_code=400, detail=result.error)
    return _to_response(result.user)


@router.put("/{uid}", response_model=UserResponse)
def update_user(
    uid: str,
    req: UserUpdateRequest,
    session: AuthSession = Depends(require_session),
    gateway: LocalAuthGateway = Depends(get_gateway),
    store: ContentStorePort = Depends(get_store),
) -> UserResponse:
    """Change a user's display name."""
    inp = UpdateUserInput(uid=uid, display_name=req.display_name)
    result = run_update_user(inp, gateway, store)
    if not result.success or result.user is None:
        code = 404 if result.error == "User not found" else 500
        raise HTTPException(status_code=code, detail=result.error)
    return _to_response(result.user)
