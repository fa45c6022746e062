"""SQLAlchemy User Repository: UserRepository implementation over an AsyncSession.

Invariants:
    - Every write commits before returning (one operation = one transaction)
    - IntegrityError on the email index maps to EmailConflictError, after rollback
    - Other SQLAlchemy failures map to DatabaseError naming the operation
    - updated_at is refreshed on every update; created_at is never touched

Design Decisions:
    - Session injected per request: repository holds no connection state of its own
    - delete returns a detached snapshot of the row (expire_on_commit=False keeps
      attributes loaded after commit)
"""

import logging
import uuid

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from user_registry.core.domain_types import UserId
from user_registry.core.errors import DatabaseError, EmailConflictError
from user_registry.models.user import User, utc_now

logger = logging.getLogger(__name__)


class SqlAlchemyUserRepository:
    """Persists UserRecords in the `users` table."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_all(self) -> list[User]:
        try:
            result = await self.db.execute(
                select(User).order_by(User.created_at, User.id),
            )
        except SQLAlchemyError as e:
            logger.error(f"Failed to list users: {e}")
            raise DatabaseError("Could not read users", "select")
        return list(result.scalars().all())

    async def get(self, user_id: UserId) -> User | None:
        try:
            return await self.db.get(User, user_id)
        except SQLAlchemyError as e:
            logger.error(f"Failed to load user {user_id}: {e}")
            raise DatabaseError("Could not read user", "select")

    async def find_by_email(self, email: str) -> User | None:
        try:
            result = await self.db.execute(select(User).where(User.email == email))
        except SQLAlchemyError as e:
            logger.error(f"Failed to look up email: {e}")
            raise DatabaseError("Could not read user", "select")
        return result.scalar_one_or_none()

    async def create(self, fields: dict) -> User:
        now = utc_now()
        user = User(id=uuid.uuid4(), created_at=now, updated_at=now, **fields)
        self.db.add(user)
        await self._commit(fields.get("email"), "insert")
        return user

    async def update(self, user_id: UserId, fields: dict) -> User | None:
        user = await self.get(user_id)
        if user is None:
            return None
        for key, value in fields.items():
            setattr(user, key, value)
        user.updated_at = utc_now()
        await self._commit(fields.get("email"), "update")
        return user

    async def delete(self, user_id: UserId) -> User | None:
        user = await self.get(user_id)
        if user is None:
            return None
        await self.db.delete(user)
        await self._commit(None, "delete")
        return user

    async def _commit(self, email: str | None, operation: str) -> None:
        """Commit, translating constraint and driver failures."""
        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            if email is not None:
                logger.warning(f"Unique email violated on {operation}")
                raise EmailConflictError(email) from e
            logger.error(f"DB integrity error on {operation}: {e}")
            raise DatabaseError("Integrity constraint violated", operation)
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"DB error on {operation}: {e}")
            raise DatabaseError("Database write failed", operation)
