# backend/app/auth.py
"""
Password hashing and access tokens.

Tokens are HS256 JWTs whose ``sub`` claim is the user's email. They are
accepted from ``Authorization: Bearer`` or the ``x-auth-token`` header,
which older mobile clients still send.
"""

from datetime import datetime, timedelta, timezone
import logging
from typing import Any, Dict, Optional, cast

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer
import jwt
from jwt import PyJWTError
from passlib.context import CryptContext

from .core.config import settings

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

oauth2_scheme_optional = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/login", auto_error=False)

LEGACY_TOKEN_HEADER = "x-auth-token"


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """A malformed stored hash counts as a mismatch."""
    try:
        return bool(pwd_context.verify(plain_password, hashed_password))
    except ValueError as e:
        logger.error(f"Unreadable password hash: {str(e)}")
        return False


def get_password_hash(password: str) -> str:
    return str(pwd_context.hash(password))


def create_access_token(data: Dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    """
    Sign ``data`` into a JWT.

    Args:
        data: Claims; ``sub`` must be the user's email
        expires_delta: Lifetime, defaulting to ``access_token_expire_minutes``
    """
    lifetime = expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    claims = {**data, "exp": datetime.now(timezone.utc) + lifetime}
    token = jwt.encode(claims, settings.secret_key.get_secret_value(), algorithm=settings.algorithm)
    logger.debug(f"Issued access token for {data.get('sub')}")
    return cast(str, token)


def decode_access_token(token: str) -> Dict[str, Any]:
    """Raises PyJWTError for bad signatures, malformed tokens and expired tokens."""
    payload = jwt.decode(
        token, settings.secret_key.get_secret_value(), algorithms=[settings.algorithm]
    )
    return cast(Dict[str, Any], payload)


def _credentials_error(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user(
    request: Request, token: Optional[str] = Depends(oauth2_scheme_optional)
) -> str:
    """
    Resolve the caller's email from their token.

    Raises:
        HTTPException: 401 if the token is missing, invalid or expired
    """
    token = token or request.headers.get(LEGACY_TOKEN_HEADER)
    if not token:
        raise _credentials_error("Not authenticated")

    try:
        payload = decode_access_token(token)
    except PyJWTError as e:
        logger.warning(f"JWT validation error: {str(e)}")
        raise _credentials_error("Could not validate credentials")

    email = payload.get("sub")
    if not isinstance(email, str):
        logger.warning("Token payload missing 'sub' field")
        raise _credentials_error("Could not validate credentials")
    return email
