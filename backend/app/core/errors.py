"""
Application error taxonomy.

Services raise these; the handlers registered in main.py turn them into
JSON responses of the form {"success": false, "code": ..., "message": ...}.
"""
from typing import Any, Dict, Optional
from fastapi import status


class AppError(Exception):
    code = "APP_ERROR"
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Request failed"

    def __init__(self, message: Optional[str] = None, **extra: Any) -> None:
        self.message = message or self.message
        # Extra fields are merged into the response body (e.g. totalSwipes)
        self.extra: Dict[str, Any] = extra
        super().__init__(self.message)

    def to_body(self) -> Dict[str, Any]:
        return {"success": False, "code": self.code, "message": self.message, **self.extra}


class DuplicateFieldError(AppError):
    code = "DUPLICATE_FIELD"
    status_code = status.HTTP_409_CONFLICT

    def __init__(self, field: str) -> None:
        self.field = field
        super().__init__(
            f"This {field} is already registered. Please use a different {field}."
        )


class InvalidCredentialsError(AppError):
    code = "INVALID_CREDENTIALS"
    message = "Invalid credentials"


class UnauthorizedError(AppError):
    code = "UNAUTHORIZED"
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Unauthorized"


class InvalidTokenError(UnauthorizedError):
    # A token was presented but is not one we signed
    status_code = status.HTTP_403_FORBIDDEN
    message = "Invalid token"


class NotFoundError(AppError):
    code = "NOT_FOUND"
    status_code = status.HTTP_404_NOT_FOUND
    message = "User not found"


class SelfTargetError(AppError):
    code = "SELF_TARGET"
    message = "You cannot swipe on your own profile."


class AlreadySwipedError(AppError):
    code = "ALREADY_SWIPED"
    message = "You have already swiped this profile today."


class LimitReachedError(AppError):
    code = "LIMIT_REACHED"
    message = (
        "You have reached your daily swipe limit. "
        "Consider upgrading to Premium for unlimited swipes!"
    )


class AlreadyPremiumError(AppError):
    code = "ALREADY_PREMIUM"
    message = "User already has premium status"


class StorageError(AppError):
    """The data store failed or timed out. Details are logged, never returned."""
    code = "STORAGE_FAILURE"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    message = "Internal server error"
