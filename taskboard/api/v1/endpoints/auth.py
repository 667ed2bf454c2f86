from datetime import timedelta
import logging
from fastapi import APIRouter, Depends, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.core.config import settings
from taskboard.core.database import aget_db
from taskboard.core.limiter import limiter
from taskboard.core.security import AUTH_COOKIE_NAME, create_jwt_token, get_current_user
from taskboard.models.user import User
from taskboard.schemas.userSchema import LoginRequest, RegisterRequest, TokenResponse, UserResponse
from taskboard.services import UserService
from taskboard.utils.clock import utcnow

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/auth",
    tags=["auth"]
)


# -----------------------------
# Cookie Helpers
# -----------------------------
def set_auth_cookie(response: Response, token: str, expires: timedelta):
    """Set auth cookie."""
    response.set_cookie(
        key=AUTH_COOKIE_NAME,
        value=token,
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite="lax",
        path="/",
        max_age=int(expires.total_seconds())
    )

def clear_auth_cookie(response: Response):
    """Clear auth cookie."""
    set_auth_cookie(response, "", timedelta(0))


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(settings.AUTH_RATE_LIMIT)
async def register(
    request: Request,
    user_data: RegisterRequest,
    db: AsyncSession = Depends(aget_db)
):
    """Create a new account."""
    return await UserService.register_user(db, user_data.name, user_data.password, user_data.email)


@router.post("/login", response_model=TokenResponse)
@limiter.limit(settings.AUTH_RATE_LIMIT)
async def login(
    request: Request,
    response: Response,
    credentials: LoginRequest,
    db: AsyncSession = Depends(aget_db)
):
    """
    Exchange email and password for a token.
    The token is returned in the body and also set as an http-only cookie.
    """
    user = await UserService.authenticate_user(db, credentials.email, credentials.password)

    expires = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    token = create_jwt_token({"sub": user.email, "uid": user.id}, expires)
    set_auth_cookie(response, token, expires)
    logger.info(f"User {user.id} logged in")

    return TokenResponse(
        access_token=token,
        expires_at=utcnow() + expires,
        user=UserResponse.model_validate(user),
    )


@router.post("/logout")
async def logout(response: Response):
    clear_auth_cookie(response)
    return {"message": "Logged out successfully"}


@router.get("/me", response_model=UserResponse)
async def me(current_user: User = Depends(get_current_user)):
    return current_user
