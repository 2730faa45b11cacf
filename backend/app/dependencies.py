"""
Folio Backend — Authentication & Authorization Dependencies
=============================================================

What:  FastAPI dependencies that resolve the calling user and gate routes
       by role.
Who:   Declared on mutating and management routes.

Token lookup order:
    1. Authorization: Bearer <token>   (takes precedence)
    2. the auth cookie (settings.auth_cookie_name)

Usage:
    @router.delete("/{id}")
    async def remove(user: User = Depends(get_current_user)): ...

    @router.get("", dependencies=[Depends(require_roles(Role.ADMIN, Role.EDITOR))])
    async def list_all(): ...

require_roles() depends on get_current_user, so authentication always runs
before the role check and a missing token answers 401, never 403.
"""

import logging
from typing import Callable, Optional

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.context import AppContext, get_context
from app.database import get_db_session
from app.exceptions import AuthError, AuthzError
from app.models.user import Role, User

logger = logging.getLogger(__name__)


def extract_token(request: Request, cookie_name: str) -> Optional[str]:
    header = request.headers.get("Authorization", "")
    scheme, _, credentials = header.partition(" ")
    if scheme.lower() == "bearer" and credentials.strip():
        return credentials.strip()
    return request.cookies.get(cookie_name) or None


async def get_current_user(
    request: Request,
    db: AsyncSession = Depends(get_db_session),
    context: AppContext = Depends(get_context),
) -> User:
    """
    Resolve the authenticated user and attach it to request.state.user.

    Raises:
        AuthError: no token, bad signature, expired, or unknown user
    """
    token = extract_token(request, context.settings.auth_cookie_name)
    if not token:
        raise AuthError()

    user = await context.auth.resolve_token(db, token)
    request.state.user = user
    return user


def require_roles(*roles: Role) -> Callable:
    """Build a dependency admitting only users whose role is in `roles`."""
    allowed = {role.value for role in roles}

    async def check_role(user: User = Depends(get_current_user)) -> User:
        if user.role not in allowed:
            logger.info("Role %s denied (allowed: %s)", user.role, sorted(allowed))
            raise AuthzError(f"User role {user.role} is not authorized to access this route")
        return user

    return check_role


async def registration_gate(
    request: Request,
    db: AsyncSession = Depends(get_db_session),
    context: AppContext = Depends(get_context),
) -> Optional[User]:
    """
    Open when public registration is enabled; otherwise only an
    authenticated admin may create accounts.

    Returns the calling user when one is authenticated (None for anonymous
    public sign-ups), so the service can decide which roles may be granted.
    """
    if context.settings.allow_public_registration:
        if not extract_token(request, context.settings.auth_cookie_name):
            return None
        try:
            return await get_current_user(request, db, context)
        except AuthError:
            # A stale cookie does not block public sign-up
            logger.info("Ignoring invalid token on public registration")
            return None

    user = await get_current_user(request, db, context)
    if not user.is_admin:
        raise AuthzError("Only administrators can register new users")
    return user
