# backend/app/routes/v1/auth.py
"""
Authentication routes - API v1

Endpoints:
    POST /register - Create an account and return a token
    POST /login - Exchange credentials for a token
    GET /me - Current user's profile
"""

import logging
from typing import NoReturn

from fastapi import APIRouter, Depends, HTTPException, status

from ...api.dependencies import get_auth_service, get_current_active_user
from ...core.exceptions import DomainException
from ...models.user import User
from ...schemas.user import AuthResponse, UserCreate, UserLogin, UserResponse
from ...services.auth_service import AuthService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth-v1"])


def handle_domain_exception(exc: DomainException) -> NoReturn:
    """Convert domain exceptions to HTTP exceptions."""
    if hasattr(exc, "to_http_exception"):
        raise exc.to_http_exception()
    raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(
    payload: UserCreate,
    auth_service: AuthService = Depends(get_auth_service),
) -> AuthResponse:
    """Register a client or trainer account."""
    try:
        user = auth_service.register_user(
            name=payload.name,
            email=payload.email,
            password=payload.password,
            role=payload.role,
        )
        return AuthResponse(
            access_token=auth_service.issue_token(user),
            user=UserResponse.model_validate(user),
        )
    except DomainException as e:
        handle_domain_exception(e)


@router.post("/login", response_model=AuthResponse)
def login(
    payload: UserLogin,
    auth_service: AuthService = Depends(get_auth_service),
) -> AuthResponse:
    try:
        user = auth_service.authenticate_user(payload.email, payload.password)
        return AuthResponse(
            access_token=auth_service.issue_token(user),
            user=UserResponse.model_validate(user),
        )
    except DomainException as e:
        handle_domain_exception(e)


@router.get("/me", response_model=UserResponse)
def read_me(current_user: User = Depends(get_current_active_user)) -> UserResponse:
    return UserResponse.model_validate(current_user)
