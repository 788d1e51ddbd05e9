"""FastAPI authentication dependencies."""

import logging
from typing import Annotated, Optional

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ...shared.db import get_db_session
from ...shared.db.repositories import ProfileRepository
from .jwt import decode_token, TokenData

logger = logging.getLogger(__name__)


class AuthContext:
    """Authenticated caller."""

    def __init__(self, token_data: TokenData, role: Optional[str] = None):
        self.token_data = token_data
        self._role = role

    @property
    def user_id(self) -> str:
        return self.token_data.user_id

    @property
    def email(self) -> Optional[str]:
        return self.token_data.email

    @property
    def role(self) -> Optional[str]:
        """Profile role, falling back to the token's claim."""
        return self._role or self.token_data.role


class LoginRequired(Exception):
    """Raised by page dependencies; rendered as a redirect to the login page."""


def get_token(request: Request) -> Optional[str]:
    """Extract token from the session cookie or a bearer header."""
    config = request.app.state.config
    token = request.cookies.get(config.COOKIE_NAME)
    if token:
        return token

    header = request.headers.get("Authorization", "")
    scheme, _, credentials = header.partition(" ")
    if scheme.lower() == "bearer" and credentials:
        return credentials.strip()
    return None


async def authenticate(request: Request, db: AsyncSession) -> Optional[AuthContext]:
    """Resolve the caller, or None when there is no valid token."""
    token = get_token(request)
    if not token:
        return None

    config = request.app.state.config
    token_data = decode_token(
        token,
        config.SECRET_KEY,
        algorithm=config.JWT_ALGORITHM,
        audience=config.JWT_AUDIENCE,
    )
    if not token_data:
        return None

    role = None
    if token_data.profile_id:
        try:
            role = await ProfileRepository(db).get_role(token_data.profile_id)
        except SQLAlchemyError as e:
            # Token is still valid; fall back to the role claim
            logger.warning("Profile lookup failed for %s: %s", token_data.user_id, e)
            await db.rollback()

    return AuthContext(token_data, role)


async def get_current_user(
    request: Request,
    db: AsyncSession = Depends(get_db_session),
) -> AuthContext:
    """
    Get current authenticated user.

    This is the main authentication dependency for protected routes.

    Raises:
        HTTPException 401: If not authenticated or token invalid
    """
    auth = await authenticate(request, db)
    if auth is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return auth


async def get_page_user(
    request: Request,
    db: AsyncSession = Depends(get_db_session),
) -> AuthContext:
    """Authentication for HTML pages; unauthenticated callers are redirected."""
    auth = await authenticate(request, db)
    if auth is None:
        raise LoginRequired()
    return auth


# Type aliases for cleaner route signatures
CurrentUser = Annotated[AuthContext, Depends(get_current_user)]
PageUser = Annotated[AuthContext, Depends(get_page_user)]
