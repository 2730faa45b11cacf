"""
Folio Backend — Auth Route Handlers
=====================================

What:  Register, login, current user, logout, and password change.
Who:   Called by the admin dashboard.

Token transport:
    Successful register/login/password responses return the token in the
    body and also set it as an HttpOnly cookie, so browser clients can rely
    on the cookie while API clients use the Authorization header.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from app.context import AppContext, get_context
from app.database import get_db_session
from app.dependencies import get_current_user, registration_gate
from app.models.user import User
from app.schemas.common import ErrorEnvelope, MessageEnvelope
from app.schemas.user import (
    LoginRequest,
    PasswordChangeRequest,
    RegisterRequest,
    TokenEnvelope,
    UserEnvelope,
    UserResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["Auth"])


def _set_token_cookie(response: Response, token: str, context: AppContext) -> None:
    settings = context.settings
    response.set_cookie(
        key=settings.auth_cookie_name,
        value=token,
        max_age=settings.jwt_expire_minutes * 60,
        httponly=True,
        secure=settings.cookie_secure,
        samesite="lax",
    )


def _token_envelope(user: User, token: str) -> TokenEnvelope:
    return TokenEnvelope(token=token, data=UserResponse.model_validate(user))


@router.post(
    "/register",
    status_code=201,
    response_model=TokenEnvelope,
    responses={400: {"model": ErrorEnvelope}, 403: {"model": ErrorEnvelope}},
    summary="Register a user",
)
async def register(
    payload: RegisterRequest,
    response: Response,
    actor: Optional[User] = Depends(registration_gate),
    db: AsyncSession = Depends(get_db_session),
    context: AppContext = Depends(get_context),
) -> TokenEnvelope:
    user, token = await context.auth.register(db, payload, actor=actor)
    _set_token_cookie(response, token, context)
    return _token_envelope(user, token)


@router.post(
    "/login",
    response_model=TokenEnvelope,
    responses={400: {"model": ErrorEnvelope}, 401: {"model": ErrorEnvelope}},
    summary="Log in with email and password",
)
async def login(
    payload: LoginRequest,
    response: Response,
    db: AsyncSession = Depends(get_db_session),
    context: AppContext = Depends(get_context),
) -> TokenEnvelope:
    user, token = await context.auth.login(db, payload)
    _set_token_cookie(response, token, context)
    return _token_envelope(user, token)


@router.get(
    "/me",
    response_model=UserEnvelope,
    responses={401: {"model": ErrorEnvelope}},
    summary="Current user",
)
async def me(user: User = Depends(get_current_user)) -> UserEnvelope:
    return UserEnvelope(data=UserResponse.model_validate(user))


@router.post(
    "/logout",
    response_model=MessageEnvelope,
    responses={401: {"model": ErrorEnvelope}},
    summary="Clear the auth cookie",
)
async def logout(
    response: Response,
    user: User = Depends(get_current_user),
    context: AppContext = Depends(get_context),
) -> MessageEnvelope:
    """
    Tokens are stateless; logging out only clears the cookie. A token copied
    elsewhere stays valid until it expires.
    """
    response.delete_cookie(context.settings.auth_cookie_name)
    logger.info("User logged out: %s", user.id)
    return MessageEnvelope()


@router.put(
    "/password",
    response_model=TokenEnvelope,
    responses={400: {"model": ErrorEnvelope}, 401: {"model": ErrorEnvelope}},
    summary="Change the current user's password",
)
async def change_password(
    payload: PasswordChangeRequest,
    response: Response,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
    context: AppContext = Depends(get_context),
) -> TokenEnvelope:
    token = await context.auth.change_password(db, user, payload)
    _set_token_cookie(response, token, context)
    return _token_envelope(user, token)
