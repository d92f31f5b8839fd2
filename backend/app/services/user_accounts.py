"""User Accounts — registration and password login.

Invariants:
    - Usernames are unique: checked up front, and again by the store on insert
    - Passwords shorter than PASSWORD_MIN_LENGTH raise ValidationFailedError
    - Login failures never say which half (username or password) was wrong
"""

import logging
from dataclasses import dataclass

from app.core.domain_types import PASSWORD_MIN_LENGTH, UserDraft
from app.core.errors import (
    AuthenticationFailedError, AuthFailureReason, DuplicateUsernameError,
    ValidationFailedError,
)
from app.core.repository_protocols import UserLike, UserStore
from app.infrastructure.auth import hash_password, issue_token, verify_password
from app.schemas.user import UserCreate

logger = logging.getLogger(__name__)


@dataclass
class LoginResult:
    token: str
    user: UserLike


async def register_user(users: UserStore, payload: UserCreate) -> UserLike:
    if len(payload.password) < PASSWORD_MIN_LENGTH:
        raise ValidationFailedError(
            f"password must be at least {PASSWORD_MIN_LENGTH} characters long",
            "password",
        )
    if await users.find_by_username(payload.username) is not None:
        raise DuplicateUsernameError()

    user = await users.insert(UserDraft(
        username=payload.username,
        name=payload.name,
        password_hash=hash_password(payload.password),
    ))
    logger.info(f"User {user.username} registered", extra={"user_id": str(user.id)})
    return user


async def login(
    users: UserStore, username: str, password: str,
    secret_key: str, algorithm: str = "HS256", ttl_seconds: int = 3600,
) -> LoginResult:
    user = await users.find_by_username(username)
    if user is None or not verify_password(password, user.password_hash):
        raise AuthenticationFailedError(
            AuthFailureReason.INVALID, "invalid username or password",
        )
    token = issue_token(user, secret_key, algorithm, ttl_seconds)
    return LoginResult(token=token, user=user)
