"""
Folio Backend — Password Hashing & Access Tokens
==================================================

What:  Salted password hashing (passlib) and signed, time-limited JWTs
       (python-jose).
Who:   AuthService and the authentication dependency.

Token claims:
    sub: user id (UUID string)
    exp: expiry as a UNIX timestamp
    iat: issue time

pbkdf2_sha256 is pure Python on top of hashlib, so no native bcrypt build
is required on deployment hosts.
"""

import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext

from app.config import Settings
from app.exceptions import AuthError

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return pwd_context.verify(password, password_hash)
    except (ValueError, TypeError):
        # Unrecognised or corrupted hash
        logger.warning("Stored password hash could not be verified")
        return False


class TokenManager:
    """Issues and verifies access tokens with the configured secret."""

    def __init__(self, settings: Settings):
        self.secret = settings.jwt_secret
        self.algorithm = settings.jwt_algorithm
        self.expire_minutes = settings.jwt_expire_minutes

    def create_access_token(
        self, user_id: uuid.UUID, expires_delta: Optional[timedelta] = None
    ) -> str:
        now = datetime.now(timezone.utc)
        expire = now + (expires_delta or timedelta(minutes=self.expire_minutes))
        claims = {
            "sub": str(user_id),
            "iat": int(now.timestamp()),
            "exp": int(expire.timestamp()),
        }
        return jwt.encode(claims, self.secret, algorithm=self.algorithm)

    def decode_access_token(self, token: str) -> uuid.UUID:
        """
        Verify signature and expiry, returning the user id.

        Raises:
            AuthError: expired, tampered, malformed, or missing the subject claim
        """
        try:
            payload = jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except ExpiredSignatureError:
            raise AuthError("Token has expired")
        except JWTError:
            raise AuthError("Not authorized to access this route")

        subject = payload.get("sub")
        try:
            return uuid.UUID(str(subject))
        except ValueError:
            raise AuthError("Not authorized to access this route")
