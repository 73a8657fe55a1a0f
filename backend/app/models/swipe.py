import enum

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Enum, UniqueConstraint
from sqlalchemy.sql import func
from app.core.database import Base


class SwipeDirection(str, enum.Enum):
    LEFT = "left"
    RIGHT = "right"


class SwipeRecord(Base):
    """One swipe by `user_id` on `target_user_id`, recorded on a UTC calendar day."""
    __tablename__ = "swipe_records"
    # Backstop for concurrent requests: one record per target per day
    __table_args__ = (
        UniqueConstraint("user_id", "target_user_id", "date", name="uq_swipe_target_per_day"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    target_user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    direction = Column(
        Enum(SwipeDirection, name="swipe_direction", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
    )
    date = Column(String(10), nullable=False)  # YYYY-MM-DD
    created_at = Column(DateTime(timezone=True), server_default=func.now())
