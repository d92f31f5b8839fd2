"""Authentication — password hashing, bearer token issuance, and credential resolution.

Invariants:
    - Passwords are only ever stored as passlib hashes
    - Tokens carry user id, username and an exp claim
    - JWTAuthContext.resolve either returns a UserIdentity or raises
      AuthenticationFailedError with reason missing | malformed | invalid
    - A valid signature for a user that no longer exists is invalid

Design Decisions:
    - PyJWT + passlib CryptContext: same pairing as the pack's blog platform client
    - pbkdf2_sha256 over bcrypt: pure-python backend, no native build in CI
    - InvalidSignatureError checked before DecodeError: PyJWT subclasses it from DecodeError,
      but a bad signature means "invalid", not "malformed"
"""

import logging
from datetime import datetime, timedelta, timezone
from uuid import UUID

import jwt
from passlib.context import CryptContext

from app.core.domain_types import UserId, UserIdentity
from app.core.errors import AuthenticationFailedError, AuthFailureReason
from app.core.repository_protocols import UserLike, UserStore

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")

BEARER_PREFIX = "bearer "


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    return pwd_context.verify(password, password_hash)


def issue_token(
    user: UserLike, secret_key: str, algorithm: str = "HS256",
    ttl_seconds: int = 3600,
) -> str:
    """Sign a bearer token for user, expiring after ttl_seconds."""
    payload = {
        "id": str(user.id),
        "username": user.username,
        "exp": datetime.now(timezone.utc) + timedelta(seconds=ttl_seconds),
    }
    return jwt.encode(payload, secret_key, algorithm=algorithm)


def extract_bearer_token(credential: str | None) -> str:
    """Strip the Bearer scheme from an Authorization header value."""
    if not credential or not credential.strip():
        raise AuthenticationFailedError(AuthFailureReason.MISSING)
    if not credential.lower().startswith(BEARER_PREFIX):
        raise AuthenticationFailedError(AuthFailureReason.MALFORMED)
    token = credential[len(BEARER_PREFIX):].strip()
    if not token:
        raise AuthenticationFailedError(AuthFailureReason.MALFORMED)
    return token


class JWTAuthContext:
    """AuthContext verifying HS256 bearer tokens against the user store."""

    def __init__(self, users: UserStore, secret_key: str, algorithm: str = "HS256"):
        self.users = users
        self.secret_key = secret_key
        self.algorithm = algorithm

    async def resolve(self, credential: str | None) -> UserIdentity:
        token = extract_bearer_token(credential)
        payload = self._decode(token)
        try:
            user_id = UserId(UUID(str(payload["id"])))
        except (KeyError, ValueError):
            raise AuthenticationFailedError(AuthFailureReason.INVALID)

        user = await self.users.find_by_id(user_id)
        if user is None:
            logger.warning(
                "Token references a user that no longer exists",
                extra={"user_id": str(user_id)},
            )
            raise AuthenticationFailedError(AuthFailureReason.INVALID)
        return UserIdentity(id=user.id, username=user.username, name=user.name)

    def _decode(self, token: str) -> dict:
        try:
            return jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except jwt.ExpiredSignatureError:
            raise AuthenticationFailedError(
                AuthFailureReason.INVALID, "token expired",
            )
        except jwt.InvalidSignatureError:
            raise AuthenticationFailedError(AuthFailureReason.INVALID)
        except jwt.DecodeError:
            raise AuthenticationFailedError(AuthFailureReason.MALFORMED)
        except jwt.InvalidTokenError:
            raise AuthenticationFailedError(AuthFailureReason.INVALID)
