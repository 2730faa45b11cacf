"""
Folio Backend — Authentication Service
========================================

What:  Registration, login, token resolution, and password change.
Why:   Keeps credential handling out of the route layer.
Who:   Called by /api/auth routes and by the authentication dependency.

Account enumeration:
    An unknown email and a wrong password both raise the same AuthError,
    and both run a hash verification so their timing is similar.
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import Optional, Tuple

from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import AuthError, DuplicateKeyError, ValidationError
from app.models.user import Role, User
from app.schemas.user import LoginRequest, PasswordChangeRequest, RegisterRequest
from app.security import TokenManager, hash_password, verify_password

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid credentials"

# Verified against when the email is unknown, to even out response timing
_DUMMY_HASH = hash_password(uuid.uuid4().hex)


class AuthService:
    def __init__(self, tokens: TokenManager):
        self.tokens = tokens

    async def register(
        self, db: AsyncSession, payload: RegisterRequest, actor: Optional[User] = None
    ) -> Tuple[User, str]:
        """
        Create a user with a salted hash of the password.

        Only an admin `actor` may grant a role other than editor; for anyone
        else the requested role is ignored.

        Raises:
            ValidationError: email or username already taken
        """
        role = payload.role
        if role is not Role.EDITOR and (actor is None or not actor.is_admin):
            logger.info("Requested role %s ignored for non-admin registration", role.value)
            role = Role.EDITOR

        result = await db.execute(
            select(User).where(
                or_(User.email == payload.email, User.username == payload.username)
            )
        )
        existing = result.scalars().first()
        if existing is not None:
            field = "email" if existing.email == payload.email else "username"
            raise ValidationError(
                message=f"A user with that {field} already exists",
                field=field,
            )

        user = User(
            username=payload.username,
            email=payload.email,
            password_hash=hash_password(payload.password),
            role=role.value,
        )
        db.add(user)
        try:
            await db.flush()
        except IntegrityError as e:
            # Concurrent registration won the race on the unique index
            raise DuplicateKeyError("email", context={"error_type": type(e).__name__})

        logger.info("User registered: %s (role=%s)", user.id, user.role)
        return user, self.tokens.create_access_token(user.id)

    async def login(self, db: AsyncSession, payload: LoginRequest) -> Tuple[User, str]:
        """
        Verify credentials, stamp last_login, and issue a token.

        Raises:
            AuthError: unknown email or wrong password (indistinguishable)
        """
        result = await db.execute(select(User).where(User.email == payload.email))
        user = result.scalar_one_or_none()

        if user is None:
            verify_password(payload.password, _DUMMY_HASH)
            logger.info("Login failed: unknown account")
            raise AuthError(INVALID_CREDENTIALS)

        if not verify_password(payload.password, user.password_hash):
            logger.info("Login failed: bad password for user %s", user.id)
            raise AuthError(INVALID_CREDENTIALS)

        user.last_login = datetime.now(timezone.utc)
        await db.flush()
        logger.info("User logged in: %s", user.id)
        return user, self.tokens.create_access_token(user.id)

    async def resolve_token(self, db: AsyncSession, token: str) -> User:
        """
        Map a bearer/cookie token to its user.

        Raises:
            AuthError: invalid/expired token, or the user no longer exists
        """
        user_id = self.tokens.decode_access_token(token)
        user = await db.get(User, user_id)
        if user is None:
            raise AuthError("Not authorized to access this route")
        return user

    async def change_password(
        self, db: AsyncSession, user: User, payload: PasswordChangeRequest
    ) -> str:
        """
        Replace the user's password and return a fresh token.

        Raises:
            AuthError: current password does not match
        """
        if not verify_password(payload.current_password, user.password_hash):
            raise AuthError("Password is incorrect")

        user.password_hash = hash_password(payload.new_password)
        await db.flush()
        logger.info("Password changed for user %s", user.id)
        return self.tokens.create_access_token(user.id)
