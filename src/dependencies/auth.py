from __future__ import annotations

import logging
from typing import Annotated
from uuid import UUID

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from core.security import decode_token
from dependencies.db import DbSession
from models.users import User


# --------------------------------------------------------------------------- #
# Common constants / helpers
# --------------------------------------------------------------------------- #
LOGGER = logging.getLogger(__name__)
BEARER = "Bearer"


def unauthorized(detail: str = "Could not validate credentials") -> HTTPException:
    """Return the canonical 401 response."""
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": BEARER},
    )


def not_found(detail: str = "Resource not found") -> HTTPException:
    """Return the canonical 404 response."""
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=detail,
    )


# Tokens are issued by the external auth provider; this URL only documents
# the flow in OpenAPI.
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/login")


# --------------------------------------------------------------------------- #
# The dependency
# --------------------------------------------------------------------------- #
async def get_current_user(
    db: DbSession,
    token: Annotated[str, Depends(oauth2_scheme)],
) -> User:
    """
    Resolve the currently authenticated user from a JWT.

    Raises
    ------
    HTTPException(401)
        If the token is missing, malformed, expired, or the user does not exist.
    """

    # `decode_token` raises HTTPException(401) on failure
    token_data = decode_token(token)

    sub = token_data.sub
    if not sub:
        LOGGER.debug("Token missing 'sub' claim")
        raise unauthorized()

    try:
        user_id = UUID(sub)
    except ValueError as exc:
        LOGGER.debug("Token 'sub' is not a valid UUID", exc_info=exc)
        raise unauthorized() from exc

    try:
        result = await db.execute(select(User).where(User.id == user_id))
        user = result.scalar_one_or_none()
    except SQLAlchemyError as exc:  # pragma: no cover - DB errors should be explicit
        LOGGER.error("DB lookup failed", exc_info=exc)
        raise

    if user is None:
        LOGGER.debug("User not found for sub=%s", sub)
        raise unauthorized()

    return user


CurrentUser = Annotated[User, Depends(get_current_user)]
