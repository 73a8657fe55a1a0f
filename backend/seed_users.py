"""
Seed the database with demo users.

Usage: python seed_users.py   (run from the backend/ directory)

Replaces all existing users. The first five users are premium; premium
features are spread across them so every combination can be tried.
"""
import logging
from datetime import datetime, timedelta, timezone
from app.core.database import Base, SessionLocal, engine
from app.core.security import password_hasher
from app.models.swipe import SwipeRecord
from app.models.user import User

logger = logging.getLogger(__name__)

TOTAL_USERS = 20
PREMIUM_USERS = 5
DEFAULT_PASSWORD = "Password123!"

NAMES = [
    ("john", "smith"), ("emma", "johnson"), ("alex", "williams"), ("sarah", "brown"),
    ("mike", "jones"), ("lisa", "garcia"), ("david", "miller"), ("anna", "davis"),
    ("james", "rodriguez"), ("olivia", "martinez"), ("william", "hernandez"),
    ("sophia", "lopez"), ("robert", "gonzalez"), ("isabella", "wilson"),
    ("michael", "anderson"), ("emily", "thomas"), ("daniel", "taylor"),
    ("ava", "moore"), ("joseph", "jackson"), ("mia", "martin"),
]


def build_user(index: int, hashed_password: str, now: datetime) -> User:
    first, last = NAMES[index]
    is_premium = index < PREMIUM_USERS
    # Older accounts first, one day apart
    timestamp = now - timedelta(days=TOTAL_USERS - index)
    return User(
        username=f"{first}_{last}",
        email=f"{first}.{last}@example.com",
        hashed_password=hashed_password,
        is_premium=is_premium,
        unlimited_swipes=is_premium and index % 2 == 0,
        verified_label=is_premium and (index % 2 == 0 or index == 2),
        created_at=timestamp,
        last_swipe_date=timestamp,
        last_login=timestamp if index % 3 == 0 else None,
    )


def seed() -> int:
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        db.query(SwipeRecord).delete()
        db.query(User).delete()
        # One hash for all users; bcrypt is deliberately slow
        hashed_password = password_hasher.hash(DEFAULT_PASSWORD)
        now = datetime.now(timezone.utc)
        users = [build_user(i, hashed_password, now) for i in range(TOTAL_USERS)]
        db.add_all(users)
        db.commit()
        logger.info(f"Seeded {len(users)} users ({PREMIUM_USERS} premium)")
        return len(users)
    except Exception:
        db.rollback()
        logger.exception("Seeding failed")
        raise
    finally:
        db.close()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    seed()
