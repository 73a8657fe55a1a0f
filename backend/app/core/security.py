from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional
from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext
from app.core.config import settings
from app.core.errors import InvalidTokenError, UnauthorizedError


class PasswordHasher:
    """Salted one-way password hashing backed by bcrypt"""

    def __init__(self, rounds: int = 12) -> None:
        # bcrypt generates a salt per hash and embeds it in the output
        self._context = CryptContext(
            schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds)

    def hash(self, password: str) -> str:
        return self._context.hash(password)

    def verify(self, plain_password: str, hashed_password: str) -> bool:
        """Verify a password against a hash using constant-time comparison"""
        return self._context.verify(plain_password, hashed_password)


@dataclass(frozen=True)
class TokenPayload:
    user_id: int
    email: Optional[str]


class TokenService:
    """
    Issues and verifies signed identity tokens.

    The signing key is passed in at construction; nothing here reads a
    module-level secret.
    """

    def __init__(self, secret_key: str, algorithm: str = "HS256", expire_minutes: int = 60 * 24) -> None:
        self._secret_key = secret_key
        self._algorithm = algorithm
        self._expire_delta = timedelta(minutes=expire_minutes)

    def create_access_token(self, user_id: int, email: str, now: Optional[datetime] = None) -> str:
        issued_at = now or datetime.now(timezone.utc)
        claims = {
            # JWT standard 'sub' claim carries the user id as a string
            "sub": str(user_id),
            "email": email,
            "exp": issued_at + self._expire_delta,
        }
        return jwt.encode(claims, self._secret_key, algorithm=self._algorithm)

    def verify(self, token: str) -> TokenPayload:
        """
        Decode a token and return its identity claims.

        Raises UnauthorizedError (401) for expired tokens and
        InvalidTokenError (403) for anything tampered, malformed or unsigned.
        """
        try:
            payload = jwt.decode(token, self._secret_key, algorithms=[self._algorithm])
        except ExpiredSignatureError:
            raise UnauthorizedError("Token has expired")
        except JWTError:
            raise InvalidTokenError()

        try:
            user_id = int(payload.get("sub"))
        except (ValueError, TypeError):
            raise InvalidTokenError("Invalid token payload")
        return TokenPayload(user_id=user_id, email=payload.get("email"))


password_hasher = PasswordHasher(rounds=settings.BCRYPT_ROUNDS)

token_service = TokenService(
    secret_key=settings.SECRET_KEY,
    algorithm=settings.ALGORITHM,
    expire_minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES,
)
