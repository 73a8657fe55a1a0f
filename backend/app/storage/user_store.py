import logging
from dataclasses import dataclass
from typing import Optional, Union
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from app.core.errors import StorageError
from app.models.user import User

logger = logging.getLogger(__name__)

# Unique fields checked on create, in the order they are reported
UNIQUE_FIELDS = ("email", "username")


@dataclass(frozen=True)
class DuplicateField:
    """Result of create_user when a unique field is already taken"""
    name: str


class UserStore:
    """
    Persistence for user records.

    Every method translates SQLAlchemy failures into StorageError so callers
    can tell infrastructure problems apart from business rejections.
    """

    def __init__(self, db: Session) -> None:
        self.db = db

    def get_by_id(self, user_id: int, for_update: bool = False) -> Optional[User]:
        """Fetch a user; for_update takes a row lock held until commit/rollback"""
        try:
            query = self.db.query(User).filter(User.id == user_id)
            if for_update:
                query = query.with_for_update()
            return query.first()
        except SQLAlchemyError as e:
            raise self._storage_failure("get_by_id", e)

    def get_by_field(self, field: str, value: str) -> Optional[User]:
        if field not in UNIQUE_FIELDS:
            raise ValueError(f"Unsupported lookup field: {field}")
        try:
            return self.db.query(User).filter(getattr(User, field) == value).first()
        except SQLAlchemyError as e:
            raise self._storage_failure("get_by_field", e)

    def find_duplicate(self, **fields) -> Optional[DuplicateField]:
        """First unique field whose value is already taken, if any"""
        for field in UNIQUE_FIELDS:
            if field in fields and self.get_by_field(field, fields[field]) is not None:
                return DuplicateField(field)
        return None

    def create_user(self, **fields) -> Union[User, DuplicateField]:
        """
        Insert a user, or report which unique field collides.

        The explicit pre-check gives a precise field name; the IntegrityError
        branch covers two requests racing past the pre-check.
        """
        duplicate = self.find_duplicate(**fields)
        if duplicate is not None:
            return duplicate

        user = User(**fields)
        try:
            self.db.add(user)
            self.db.commit()
            self.db.refresh(user)
            return user
        except IntegrityError:
            self.db.rollback()
            duplicate = self.find_duplicate(**fields)
            if duplicate is not None:
                return duplicate
            raise self._storage_failure("create_user", None)
        except SQLAlchemyError as e:
            self.db.rollback()
            raise self._storage_failure("create_user", e)

    def save(self, user: User) -> User:
        """
        Commit pending changes on a user loaded through this store.

        IntegrityError is re-raised after rollback so the caller can map the
        violated constraint to a business rejection.
        """
        try:
            self.db.add(user)
            self.db.commit()
            self.db.refresh(user)
            return user
        except IntegrityError:
            self.db.rollback()
            raise
        except SQLAlchemyError as e:
            self.db.rollback()
            raise self._storage_failure("save", e)

    def rollback(self) -> None:
        try:
            self.db.rollback()
        except SQLAlchemyError as e:
            raise self._storage_failure("rollback", e)

    @staticmethod
    def _storage_failure(operation: str, error: Optional[Exception]) -> StorageError:
        logger.error(f"User store {operation} failed", exc_info=error)
        return StorageError()
