from .component import (
    ADD_USER_FAILED_MESSAGE,
    LOGIN_FAILED_MESSAGE,
    USER_ERROR_MESSAGES,
    map_user_error,
    run_create_user,
    run_list_users,
    run_login,
    run_logout,
    run_update_user,
)
from .models import (
    AuthOutput,
    CreateUserInput,
    LoginInput,
    UpdateUserInput,
    UserListOutput,
    UserOutput,
)
from .ports import USERS_COLLECTION

__all__ = [
    "run_login",
    "run_logout",
    "run_create_user",
    "run_list_users",
    "run_update_user",
    "map_user_error",
    "LoginInput",
    "CreateUserInput",
    "UpdateUserInput",
    "AuthOutput",
    "UserOutput",
    "UserListOutput",
    "ADD_USER_FAILED_MESSAGE",
    "LOGIN_FAILED_MESSAGE",
    "USER_ERROR_MESSAGES",
    "USERS_COLLECTION",
]
