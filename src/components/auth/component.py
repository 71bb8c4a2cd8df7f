import logging

from pydantic import ValidationError

from src.domain.entities import AdminUser, iso_utc
from src.ports.auth import (
    AuthError,
    EmailAlreadyInUseError,
    InvalidEmailError,
    WeakPasswordError,
)
from src.ports.store import StoreError

from .models import (
    AuthOutput,
    CreateUserInput,
    LoginInput,
    UpdateUserInput,
    UserListOutput,
    UserOutput,
)
from .ports import USERS_COLLECTION, AuthGatewayPort, ClockPort, ContentStorePort

logger = logging.getLogger(__name__)

LOGIN_FAILED_MESSAGE = "Invalid email or password"
ADD_USER_FAILED_MESSAGE = "Failed to add user"
UPDATE_USER_FAILED_MESSAGE = "Failed to update user"

USER_ERROR_MESSAGES: dict[type[AuthError], str] = {
    EmailAlreadyInUseError: "This email is already registered. Please use a different email.",
    WeakPasswordError: "Password should be at least 6 characters.",
    InvalidEmailError: "Invalid email address.",
}


def map_user_error(exc: Exception) -> str:
    # The gateway words the length rule from its configured minimum.
    if isinstance(exc, WeakPasswordError) and str(exc):
        return str(exc)
    for exc_type, message in USER_ERROR_MESSAGES.items():
        if isinstance(exc, exc_type):
            return message
    return ADD_USER_FAILED_MESSAGE


def _to_user(record: dict) -> AdminUser | None:
    # Blank fields take the model defaults ("No Name").
    data = {k: v for k, v in record.items() if v not in (None, "")}
    try:
        return AdminUser.model_validate({"uid": record.get("id"), **data})
    except ValidationError as e:
        logger.warning("Skipping malformed user %s: %s", record.get("id"), e)
        return None


def run_login(inp: LoginInput, gateway: AuthGatewayPort) -> AuthOutput:
    # Every failure reads the same to the caller.
    try:
        session = gateway.sign_in(inp.email, inp.password)
    except AuthError:
        return AuthOutput(success=False, error=LOGIN_FAILED_MESSAGE)
    except StoreError:
        logger.exception("Sign-in failed on store error")
        return AuthOutput(success=False, error=LOGIN_FAILED_MESSAGE)
    return AuthOutput(session=session, success=True)


def run_logout(gateway: AuthGatewayPort) -> AuthOutput:
    gateway.sign_out()
    return AuthOutput(success=True)


def run_create_user(
    inp: CreateUserInput,
    gateway: AuthGatewayPort,
    store: ContentStorePort,
    clock: ClockPort,
) -> UserOutput:
    """Create the identity, set its display name, then write the users record."""
    try:
        identity = gateway.create_user(inp.email, inp.password)
        if inp.display_name:
            gateway.update_profile(identity, display_name=inp.display_name)
        user = AdminUser(
            uid=identity.uid,
            email=identity.email,
            display_name=inp.display_name or "No Name",
            created_at=iso_utc(clock.now()),
        )
        store.set_record(
            USERS_COLLECTION,
            identity.uid,
            {"email": user.email, "displayName": inp.display_name, "createdAt": user.created_at},
        )
    except AuthError as e:
        logger.info("User creation rejected: %s", e.code)
        return UserOutput(success=False, error=map_user_error(e))
    except StoreError:
        logger.exception("Error adding user")
        return UserOutput(success=False, error=ADD_USER_FAILED_MESSAGE)

    logger.info("Added admin user %s", user.uid)
    return UserOutput(user=user, success=True)


def run_list_users(store: ContentStorePort) -> UserListOutput:
    try:
        records = store.get_collection(USERS_COLLECTION)
    except StoreError:
        logger.exception("Error loading users")
        return UserListOutput(users=[], success=False, error="Failed to load users")
    users = [u for u in (_to_user(r) for r in records) if u is not None]
    return UserListOutput(users=users)


def run_update_user(
    inp: UpdateUserInput,
    gateway: AuthGatewayPort,
    store: ContentStorePort,
) -> UserOutput:
    """Only the display name is editable; email and creation time are kept."""
    try:
        record = store.get_record_by_id(USERS_COLLECTION, inp.uid)
        if record is None:
            return UserOutput(success=False, error="User not found")
        store.set_record(
            USERS_COLLECTION,
            inp.uid,
            {
                "email": record.get("email", ""),
                "displayName": inp.display_name,
                "createdAt": record.get("createdAt", ""),
            },
        )
    except StoreError:
        logger.exception("Error updating user %s", inp.uid)
        return UserOutput(success=False, error=UPDATE_USER_FAILED_MESSAGE)

    for identity in gateway.list_identities():
        if identity.uid == inp.uid:
            try:
                gateway.update_profile(identity, display_name=inp.display_name)
            except StoreError:
                logger.exception("Could not sync display name for %s", inp.uid)
            break

    user = _to_user({**record, "id": inp.uid, "displayName": inp.display_name})
    return UserOutput(user=user, success=user is not None)
