"""Boundary Protocols: contracts between core/services and persistence.

Invariants:
    - Services NEVER import a concrete repository: they receive one via injection
    - update/delete return None when the id does not resolve (services raise 404)
    - create/update raise EmailConflictError when the unique email index is hit
    - Any other storage failure surfaces as DatabaseError

Design Decisions:
    - Protocol over ABC: structural subtyping, SQLAlchemy and in-memory stores
      share no base class
    - Records exposed through UserLike so services never depend on the ORM model
"""

from datetime import datetime
from typing import Protocol
from uuid import UUID

from user_registry.core.domain_types import UserId


class UserLike(Protocol):
    """Structural contract for a stored UserRecord."""
    id: UUID
    name: str
    email: str
    age: int | None
    phone: str | None
    city: str | None
    created_at: datetime
    updated_at: datetime


class UserRepository(Protocol):
    """Contract for UserRecord persistence: implemented by infrastructure."""
    async def list_all(self) -> list[UserLike]: ...
    async def get(self, user_id: UserId) -> UserLike | None: ...
    async def find_by_email(self, email: str) -> UserLike | None: ...
    async def create(self, fields: dict) -> UserLike: ...
    async def update(self, user_id: UserId, fields: dict) -> UserLike | None: ...
    async def delete(self, user_id: UserId) -> UserLike | None: ...
