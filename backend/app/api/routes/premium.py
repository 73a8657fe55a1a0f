from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field
from app.api.dependencies import get_current_identity, get_user_store
from app.core.security import TokenPayload
from app.services.premium_service import purchase_premium
from app.storage.user_store import UserStore

router = APIRouter(prefix="/purchase-premium", tags=["premium"])


class PremiumStatus(BaseModel):
    user_id: int = Field(alias="userId")
    is_premium: bool = Field(alias="isPremium")

    model_config = ConfigDict(populate_by_name=True)


class PurchaseResponse(BaseModel):
    success: bool
    message: str
    data: PremiumStatus


@router.post("", response_model=PurchaseResponse)
async def purchase(
    identity: TokenPayload = Depends(get_current_identity),
    store: UserStore = Depends(get_user_store),
):
    """Upgrade the current user to premium"""
    user = purchase_premium(store, identity.user_id)
    return PurchaseResponse(
        success=True,
        message="Purchase successfully",
        data=PremiumStatus(user_id=user.id, is_premium=user.is_premium),
    )
