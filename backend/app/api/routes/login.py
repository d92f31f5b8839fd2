"""Login Route — exchanges username/password for a bearer token."""

from fastapi import APIRouter, Depends

from app.api.dependencies import get_user_store
from app.config import Settings, get_settings
from app.infrastructure.repositories import SqlUserStore
from app.schemas.user import LoginRequest, LoginResponse
from app.services.user_accounts import login

router = APIRouter(prefix="/api/v1/login", tags=["login"])


@router.post("", response_model=LoginResponse)
async def login_user(
    body: LoginRequest,
    users: SqlUserStore = Depends(get_user_store),
    settings: Settings = Depends(get_settings),
):
    result = await login(
        users, body.username, body.password,
        settings.secret_key, settings.token_algorithm, settings.token_ttl_seconds,
    )
    return LoginResponse(
        token=result.token,
        username=result.user.username,
        name=result.user.name,
    )
