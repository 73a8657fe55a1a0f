import re
from email_validator import EmailNotValidError, validate_email
from fastapi import APIRouter, Depends, Request, status
from pydantic import BaseModel, field_validator
from pydantic_core import PydanticCustomError
from app.api.dependencies import get_password_hasher, get_token_service, get_user_store
from app.core.config import settings
from app.core.limiter import limiter
from app.core.security import PasswordHasher, TokenService
from app.services.auth_service import AuthService
from app.storage.user_store import UserStore

router = APIRouter(prefix="/auth", tags=["auth"])

EMAIL_MESSAGE = "Please enter a valid email"
USERNAME_MESSAGE = (
    "Username must be 3-30 characters and can only contain letters, numbers and underscore"
)
PASSWORD_MESSAGE = (
    "Password must be 8-20 characters and contain uppercase, lowercase, number and special character"
)
LOGIN_PASSWORD_MESSAGE = "Password must be at least 8 characters long"

USERNAME_PATTERN = re.compile(r"^[a-zA-Z0-9_]{3,30}$")
PASSWORD_CHARSET = re.compile(r"^[A-Za-z\d@$!%*?&]{8,20}$")
# Each class must appear at least once
PASSWORD_REQUIRED_CLASSES = (r"[a-z]", r"[A-Z]", r"\d", r"[@$!%*?&]")


def _check_email(value: str) -> str:
    value = value.strip()
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError:
        raise PydanticCustomError("invalid_email", EMAIL_MESSAGE)
    return value.lower()


class RegisterRequest(BaseModel):
    email: str
    username: str
    password: str

    @field_validator("email")
    @classmethod
    def validate_email_field(cls, value: str) -> str:
        return _check_email(value)

    @field_validator("username")
    @classmethod
    def validate_username(cls, value: str) -> str:
        value = value.strip()
        if not USERNAME_PATTERN.match(value):
            raise PydanticCustomError("invalid_username", USERNAME_MESSAGE)
        return value

    @field_validator("password")
    @classmethod
    def validate_password(cls, value: str) -> str:
        if not PASSWORD_CHARSET.match(value) or not all(
            re.search(pattern, value) for pattern in PASSWORD_REQUIRED_CLASSES
        ):
            raise PydanticCustomError("weak_password", PASSWORD_MESSAGE)
        return value


class LoginRequest(BaseModel):
    email: str
    password: str

    @field_validator("email")
    @classmethod
    def validate_email_field(cls, value: str) -> str:
        return _check_email(value)

    @field_validator("password")
    @classmethod
    def validate_password(cls, value: str) -> str:
        if len(value) < 8:
            raise PydanticCustomError("password_too_short", LOGIN_PASSWORD_MESSAGE)
        return value


class TokenData(BaseModel):
    token: str


class MessageResponse(BaseModel):
    success: bool
    message: str


class LoginResponse(MessageResponse):
    data: TokenData


def get_auth_service(
    store: UserStore = Depends(get_user_store),
    hasher: PasswordHasher = Depends(get_password_hasher),
    tokens: TokenService = Depends(get_token_service),
) -> AuthService:
    return AuthService(store=store, hasher=hasher, tokens=tokens)


@router.post("/register", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(settings.AUTH_RATE_LIMIT)
async def register(
    request: Request,
    payload: RegisterRequest,
    auth: AuthService = Depends(get_auth_service),
):
    """Register a new user"""
    auth.register(payload.email, payload.username, payload.password)
    return {"success": True, "message": "Registration successful"}


@router.post("/login", response_model=LoginResponse)
@limiter.limit(settings.AUTH_RATE_LIMIT)
async def login(
    request: Request,
    payload: LoginRequest,
    auth: AuthService = Depends(get_auth_service),
):
    """Login and get access token"""
    token = auth.login(payload.email, payload.password)
    return {"success": True, "message": "Login successful", "data": {"token": token}}
