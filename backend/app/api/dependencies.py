from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session
from app.core.database import get_db
from app.core.errors import UnauthorizedError
from app.core.security import (
    PasswordHasher,
    TokenPayload,
    TokenService,
    password_hasher,
    token_service,
)
from app.storage.user_store import UserStore

# auto_error=False so missing and malformed headers get our own 401 messages
bearer_scheme = HTTPBearer(auto_error=False)


def get_token_service() -> TokenService:
    return token_service


def get_password_hasher() -> PasswordHasher:
    return password_hasher


def get_user_store(db: Session = Depends(get_db)) -> UserStore:
    return UserStore(db)


async def get_current_identity(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    tokens: TokenService = Depends(get_token_service),
) -> TokenPayload:
    """
    Resolve the caller from an `Authorization: Bearer <token>` header.

    Only the token is checked here; handlers look the user up themselves so
    a deleted account yields 404 rather than 401.
    """
    if credentials is None:
        authorization = request.headers.get("Authorization", "")
        if not authorization.strip():
            raise UnauthorizedError("No token provided")
        raise UnauthorizedError("Invalid token format")

    return tokens.verify(credentials.credentials)
