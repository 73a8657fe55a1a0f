import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional
from sqlalchemy.exc import IntegrityError
from app.core.config import settings
from app.core.errors import (
    AlreadySwipedError,
    LimitReachedError,
    NotFoundError,
    SelfTargetError,
)
from app.models.swipe import SwipeDirection
from app.services.swipe_quota import SwipeOutcome, SwipeRejection, evaluate_swipe
from app.storage.user_store import UserStore

logger = logging.getLogger(__name__)


@dataclass
class SwipeService:
    store: UserStore
    daily_limit: int = settings.DAILY_SWIPE_LIMIT

    def swipe(
        self,
        actor_id: int,
        target_user_id: int,
        direction: SwipeDirection,
        now: Optional[datetime] = None,
    ) -> SwipeOutcome:
        """
        Record a swipe by actor_id on target_user_id.

        The actor row is locked for the whole read-evaluate-write cycle, so two
        swipes from the same user are applied one after the other. A day reset
        is committed even when the swipe itself is rejected.
        """
        if actor_id == target_user_id:
            raise SelfTargetError()

        now = now or datetime.now(timezone.utc)

        actor = self.store.get_by_id(actor_id, for_update=True)
        if actor is None:
            self.store.rollback()
            raise NotFoundError("User not found")

        target = self.store.get_by_id(target_user_id)
        if target is None:
            self.store.rollback()
            raise NotFoundError("Target user not found.")

        outcome = evaluate_swipe(actor, target, direction, now, daily_limit=self.daily_limit)

        if outcome.accepted:
            try:
                self.store.save(actor)
            except IntegrityError:
                # Another request recorded the same target between our read and write
                logger.warning(f"Concurrent duplicate swipe by user {actor_id} on {target_user_id}")
                raise AlreadySwipedError(totalSwipes=outcome.total_swipes - 1)
            logger.info(
                f"User {actor_id} swiped {SwipeDirection(direction).value} on {target_user_id} "
                f"({outcome.total_swipes} today)"
            )
            return outcome

        if outcome.reset:
            self.store.save(actor)
        else:
            self.store.rollback()

        logger.info(f"Swipe by user {actor_id} on {target_user_id} rejected: {outcome.rejection.value}")
        if outcome.rejection is SwipeRejection.ALREADY_SWIPED:
            raise AlreadySwipedError(totalSwipes=outcome.total_swipes)
        raise LimitReachedError(totalSwipes=outcome.total_swipes)
