from sqlalchemy import Column, Integer, String, DateTime, Boolean
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.core.database import Base
from app.models.swipe import SwipeRecord


class User(Base):
    """
    User model representing dating profiles.

    Holds credentials, premium entitlements and the swipe history of the
    current quota day. Passwords are stored as bcrypt hashes.
    """
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    # Username is stored trimmed, email trimmed and lowercased
    username = Column(String(30), unique=True, index=True, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)

    is_premium = Column(Boolean, default=False, nullable=False)
    # Premium features are independent flags; they only take effect while is_premium is set
    unlimited_swipes = Column(Boolean, default=False, nullable=False)
    verified_label = Column(Boolean, default=False, nullable=False)

    # Instant of the first swipe attempt on the current quota day
    last_swipe_date = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    last_login = Column(DateTime(timezone=True), nullable=True)

    # Replacing or clearing this list deletes the dropped rows (day reset)
    swiped_profiles = relationship(
        SwipeRecord,
        foreign_keys=[SwipeRecord.user_id],
        order_by=SwipeRecord.id,
        cascade="all, delete-orphan",
    )

    @property
    def has_unlimited_swipes(self) -> bool:
        return bool(self.is_premium and self.unlimited_swipes)

    @property
    def is_verified(self) -> bool:
        return bool(self.is_premium and self.verified_label)
