"""In-Memory User Repository: process-local UserRepository for tests and `memory://`.

Invariants:
    - Same contract as SqlAlchemyUserRepository: conflicts raise EmailConflictError,
      unknown ids return None
    - Records returned are copies; callers cannot mutate stored state
    - Insertion order is preserved (list_all mirrors created_at ordering)

Design Decisions:
    - Stores transient User instances (never attached to a session): one record
      type across both stores, serialized by the same schema
    - No locking: the event loop is single-threaded and no method awaits
      between read and write
"""

import copy
import uuid

from user_registry.core.domain_types import UserId
from user_registry.core.errors import EmailConflictError
from user_registry.models.user import User, utc_now


def _snapshot(user: User) -> User:
    return User(
        id=user.id, name=user.name, email=user.email, age=user.age,
        phone=user.phone, city=user.city,
        created_at=user.created_at, updated_at=user.updated_at,
    )


class InMemoryUserRepository:
    """Dict-backed store keyed by UserId."""

    def __init__(self):
        self._records: dict[uuid.UUID, User] = {}

    def _email_owner(self, email: str) -> uuid.UUID | None:
        for user_id, user in self._records.items():
            if user.email == email:
                return user_id
        return None

    async def list_all(self) -> list[User]:
        return [_snapshot(u) for u in self._records.values()]

    async def get(self, user_id: UserId) -> User | None:
        user = self._records.get(user_id)
        return _snapshot(user) if user else None

    async def find_by_email(self, email: str) -> User | None:
        owner = self._email_owner(email)
        return _snapshot(self._records[owner]) if owner is not None else None

    async def create(self, fields: dict) -> User:
        if self._email_owner(fields["email"]) is not None:
            raise EmailConflictError(fields["email"])
        now = utc_now()
        user = User(
            id=uuid.uuid4(), created_at=now, updated_at=now,
            **copy.deepcopy(fields),
        )
        self._records[user.id] = user
        return _snapshot(user)

    async def update(self, user_id: UserId, fields: dict) -> User | None:
        user = self._records.get(user_id)
        if user is None:
            return None
        email = fields.get("email")
        if email is not None and self._email_owner(email) not in (None, user_id):
            raise EmailConflictError(email)
        for key, value in fields.items():
            setattr(user, key, value)
        user.updated_at = utc_now()
        return _snapshot(user)

    async def delete(self, user_id: UserId) -> User | None:
        user = self._records.pop(user_id, None)
        return _snapshot(user) if user else None
