"""
Daily swipe quota.

evaluate_swipe() is the single decision point for a swipe: it rolls the
actor's history over to a new UTC day when needed, rejects duplicate targets
and over-limit swipes, and appends the new record on acceptance. It mutates
the actor in memory only; persisting is the caller's job.
"""
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Optional, Union
from app.models.swipe import SwipeDirection, SwipeRecord
from app.models.user import User

DAILY_SWIPE_LIMIT = 10
UNLIMITED = "unlimited"


class SwipeRejection(str, Enum):
    ALREADY_SWIPED = "ALREADY_SWIPED"
    LIMIT_REACHED = "LIMIT_REACHED"


@dataclass
class SwipeOutcome:
    accepted: bool
    total_swipes: int
    # True when this attempt discarded the previous day's history
    reset: bool = False
    rejection: Optional[SwipeRejection] = None
    message: Optional[str] = None
    remaining: Union[int, str, None] = None
    target_is_verified: bool = False


def calendar_day(moment: Optional[datetime]) -> str:
    """UTC date of an instant as YYYY-MM-DD; naive datetimes are taken as UTC"""
    if moment is None:
        return ""
    if moment.tzinfo is not None:
        moment = moment.astimezone(timezone.utc)
    return moment.date().isoformat()


def evaluate_swipe(
    actor: User,
    target: User,
    direction: SwipeDirection,
    now: datetime,
    daily_limit: int = DAILY_SWIPE_LIMIT,
) -> SwipeOutcome:
    today = calendar_day(now)
    reset = today != calendar_day(actor.last_swipe_date)
    if reset:
        actor.swiped_profiles = []
        actor.last_swipe_date = now

    todays_swipes = [record for record in actor.swiped_profiles if record.date == today]
    count = len(todays_swipes)

    if any(record.target_user_id == target.id for record in todays_swipes):
        return SwipeOutcome(
            accepted=False, total_swipes=count, reset=reset,
            rejection=SwipeRejection.ALREADY_SWIPED,
        )

    unlimited = actor.has_unlimited_swipes
    if not unlimited and count >= daily_limit:
        return SwipeOutcome(
            accepted=False, total_swipes=count, reset=reset,
            rejection=SwipeRejection.LIMIT_REACHED,
        )

    direction = SwipeDirection(direction)
    actor.swiped_profiles.append(
        SwipeRecord(target_user_id=target.id, direction=direction, date=today)
    )

    total = count + 1
    return SwipeOutcome(
        accepted=True,
        total_swipes=total,
        reset=reset,
        message=f"You {'like' if direction is SwipeDirection.RIGHT else 'passed'} this user",
        remaining=UNLIMITED if unlimited else max(0, daily_limit - total),
        target_is_verified=target.is_verified,
    )
