import logging
from app.core.errors import AlreadyPremiumError, NotFoundError
from app.models.user import User
from app.storage.user_store import UserStore

logger = logging.getLogger(__name__)


def purchase_premium(store: UserStore, user_id: int) -> User:
    """Flip a user to premium. No payment is modelled; a second purchase is rejected."""
    user = store.get_by_id(user_id)
    if user is None:
        raise NotFoundError("User not found")
    if user.is_premium:
        raise AlreadyPremiumError()

    user.is_premium = True
    store.save(user)
    logger.info(f"User {user_id} purchased premium")
    return user
