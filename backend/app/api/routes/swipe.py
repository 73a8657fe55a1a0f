from typing import Union
from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field
from app.api.dependencies import get_current_identity, get_user_store
from app.core.security import TokenPayload
from app.models.swipe import SwipeDirection
from app.services.swipe_service import SwipeService
from app.storage.user_store import UserStore

router = APIRouter(prefix="/swipe", tags=["swipe"])


class SwipeRequest(BaseModel):
    # Upper bound matches the 32-bit Integer primary key
    target_user_id: int = Field(alias="targetUserId", gt=0, le=2**31 - 1)
    direction: SwipeDirection

    model_config = ConfigDict(populate_by_name=True)


class TargetUserInfo(BaseModel):
    is_verified: bool = Field(alias="isVerified")

    model_config = ConfigDict(populate_by_name=True)


class SwipeResponse(BaseModel):
    message: str
    total_swipes: int = Field(alias="totalSwipes")
    remaining_swipes: Union[int, str] = Field(alias="remainingSwipes")
    target_user: TargetUserInfo = Field(alias="targetUser")

    model_config = ConfigDict(populate_by_name=True)


@router.post("", response_model=SwipeResponse)
async def swipe(
    payload: SwipeRequest,
    identity: TokenPayload = Depends(get_current_identity),
    store: UserStore = Depends(get_user_store),
):
    """Swipe left (pass) or right (like) on another profile"""
    outcome = SwipeService(store).swipe(
        identity.user_id, payload.target_user_id, payload.direction
    )
    return SwipeResponse(
        message=outcome.message,
        total_swipes=outcome.total_swipes,
        remaining_swipes=outcome.remaining,
        target_user=TargetUserInfo(is_verified=outcome.target_is_verified),
    )
