"""User ORM: persists the single UserRecord entity.

Invariants:
    - id is a UUID primary key assigned by the application at creation
    - email is unique (index ix_users_email) and always stored lowercased
    - created_at/updated_at are timezone-aware UTC timestamps

Design Decisions:
    - Generic Uuid type over the postgres dialect type: same model runs on
      asyncpg in production and aiosqlite in tests
    - updated_at refreshed by the repository, not onupdate=: the in-memory
      store must follow the same rule without SQLAlchemy events
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from user_registry.db.base import Base


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class User(Base):
    """UserRecord: one user entity."""
    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    name: Mapped[str] = mapped_column(Text, nullable=False)
    email: Mapped[str] = mapped_column(
        String(254), nullable=False, unique=True, index=True,
    )
    age: Mapped[int | None] = mapped_column(Integer, nullable=True)
    phone: Mapped[str | None] = mapped_column(Text, nullable=True)
    city: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utc_now,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utc_now,
    )

    def __repr__(self) -> str:
        return f"<User {self.id} {self.email}>"
