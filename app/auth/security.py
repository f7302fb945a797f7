import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional, Protocol
from uuid import UUID

from jose import jwt
from jose.exceptions import ExpiredSignatureError, JWTError
from passlib.context import CryptContext

logger = logging.getLogger(__name__)


class PasswordHasher(Protocol):
    def hash(self, plaintext: str) -> str:
        ...

    def verify(self, plaintext: str, hashed: str) -> bool:
        ...


class BcryptPasswordHasher:
    """Salted bcrypt hashing through passlib."""

    def __init__(self, rounds: int = 12):
        self._context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds)

    def hash(self, plaintext: str) -> str:
        """
        Hashes a plaintext password using bcrypt.

        Args:
            plaintext (str): Raw password input.

        Returns:
            str: Bcrypt-hashed password.
        """
        if not plaintext:
            raise ValueError("password_blank")
        return self._context.hash(plaintext)

    def verify(self, plaintext: str, hashed: str) -> bool:
        """
        Verifies a plaintext password against a bcrypt hash.

        Returns:
            bool: True if match, False otherwise (including unusable hashes).
        """
        if not plaintext or not hashed:
            return False
        try:
            return self._context.verify(plaintext, hashed)
        except ValueError:
            logger.warning("Stored password hash could not be parsed")
            return False


class TokenError(Exception):
    """Base class for bearer token verification failures."""


class InvalidTokenError(TokenError):
    pass


class ExpiredTokenError(TokenError):
    pass


class MalformedTokenError(TokenError):
    pass


class TokenService:
    """Issues and verifies signed, time-bound bearer tokens."""

    def __init__(self, secret: str, algorithm: str = "HS256", expire_minutes: int = 60 * 24):
        if not secret:
            raise ValueError("jwt_secret_blank")
        self._secret = secret
        self.algorithm = algorithm
        self.expire_minutes = expire_minutes

    def issue(self, account_id: UUID, expires_delta: Optional[timedelta] = None) -> str:
        now = datetime.now(timezone.utc)
        if expires_delta is None:
            expires_delta = timedelta(minutes=self.expire_minutes)
        payload: Dict[str, Any] = {
            "sub": str(account_id),
            "iat": int(now.timestamp()),
            "exp": int((now + expires_delta).timestamp()),
        }
        return jwt.encode(payload, self._secret, algorithm=self.algorithm)

    def verify(self, token: str) -> UUID:
        """
        Decodes a token and returns the account id it was issued for.

        Raises:
            ExpiredTokenError: The token is past its expiry.
            InvalidTokenError: The signature or encoding is wrong.
            MalformedTokenError: The payload lacks a usable subject.
        """
        if not token:
            raise MalformedTokenError("token is blank")
        try:
            payload = jwt.decode(token, self._secret, algorithms=[self.algorithm])
        except ExpiredSignatureError as e:
            raise ExpiredTokenError(str(e)) from e
        except JWTError as e:
            raise InvalidTokenError(str(e)) from e

        subject = payload.get("sub")
        if not subject:
            raise MalformedTokenError("token has no subject")
        try:
            return UUID(str(subject))
        except ValueError as e:
            raise MalformedTokenError("token subject is not an account id") from e
