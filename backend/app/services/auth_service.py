import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional
from app.core.errors import DuplicateFieldError, InvalidCredentialsError
from app.core.security import PasswordHasher, TokenService
from app.models.user import User
from app.storage.user_store import DuplicateField, UserStore

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    return email.strip().lower()


@dataclass
class AuthService:
    """Registration and login on top of the user store, hasher and token service"""
    store: UserStore
    hasher: PasswordHasher
    tokens: TokenService

    def register(self, email: str, username: str, password: str) -> User:
        email, username = normalize_email(email), username.strip()
        # Reject duplicates before paying for the bcrypt hash
        duplicate = self.store.find_duplicate(email=email, username=username)
        if duplicate is not None:
            logger.info(f"Registration rejected: duplicate {duplicate.name}")
            raise DuplicateFieldError(duplicate.name)

        result = self.store.create_user(
            email=email,
            username=username,
            hashed_password=self.hasher.hash(password),
            is_premium=False,
            unlimited_swipes=False,
            verified_label=False,
            last_login=None,
        )
        if isinstance(result, DuplicateField):
            logger.info(f"Registration rejected: duplicate {result.name}")
            raise DuplicateFieldError(result.name)

        logger.info(f"Registered user {result.id}")
        return result

    def login(self, email: str, password: str, now: Optional[datetime] = None) -> str:
        """Verify credentials, stamp last_login and return a signed access token"""
        user = self.store.get_by_field("email", normalize_email(email))
        # Same error for unknown email and wrong password to avoid account enumeration
        if user is None or not self.hasher.verify(password, user.hashed_password):
            raise InvalidCredentialsError()

        user.last_login = now or datetime.now(timezone.utc)
        self.store.save(user)
        logger.info(f"User {user.id} logged in")
        return self.tokens.create_access_token(user.id, user.email)
