from dataclasses import dataclass

from src.domain.entities import AdminUser, AuthSession


@dataclass
class LoginInput:
    email: str
    password: str


@dataclass
class CreateUserInput:
    email: str
    password: str
    display_name: str = ""


@dataclass
class UpdateUserInput:
    uid: str
    display_name: str


@dataclass
class AuthOutput:
    session: AuthSession | None = None
    success: bool = False
    error: str | None = None


@dataclass
class UserOutput:
    user: AdminUser | None = None
    success: bool = False
    error: str | None = None


@dataclass
class UserListOutput:
    users: list[AdminUser]
    success: bool = True
    error: str | None = None
