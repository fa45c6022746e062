"""User Service: validation, uniqueness and persistence flow per CRUD operation.

Invariants:
    - Validation runs before any storage call; a non-empty violation list aborts the write
    - Missing name/email on create wins over every other violation
    - Email uniqueness checked before the write AND enforced by the store (race-safe)
    - DatabaseError never leaves this module: it becomes InternalError with the
      operation's user-facing message
    - Domain errors (validation, conflict, not found) pass through untouched

Design Decisions:
    - Repository injected in __init__: same service over SQLAlchemy or in-memory store
    - Re-submitting a record's own email on update is not a conflict
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator

from user_registry.core.domain_types import UserId
from user_registry.core.errors import (
    DatabaseError,
    EmailConflictError,
    InternalError,
    RecordNotFoundError,
    RecordValidationError,
)
from user_registry.core.repository_protocols import UserLike, UserRepository
from user_registry.core.validate_user import (
    has_missing_required,
    validate_new_user,
    validate_user_changes,
)

logger = logging.getLogger(__name__)

MSG_REQUIRED = "Name and email are required fields"
MSG_LIST_FAILED = "Error fetching users"
MSG_CREATE_FAILED = "Error creating user"
MSG_UPDATE_FAILED = "Error updating user"
MSG_DELETE_FAILED = "Error deleting user"


@asynccontextmanager
async def _storage_failure(message: str) -> AsyncGenerator[None, None]:
    """Translate DatabaseError into InternalError carrying message."""
    try:
        yield
    except DatabaseError as e:
        logger.error(
            f"{message}: {e.message}",
            extra={"error_code": e.code},
        )
        raise InternalError(message, detail=e.detail) from e


class UserService:
    """CRUD operations over a UserRepository."""

    def __init__(self, repository: UserRepository):
        self.repository = repository

    async def list_users(self) -> list[UserLike]:
        async with _storage_failure(MSG_LIST_FAILED):
            return await self.repository.list_all()

    async def create_user(self, payload: Any) -> UserLike:
        """Validate a full record and insert it."""
        fields, violations = validate_new_user(payload)
        if has_missing_required(violations):
            raise RecordValidationError(MSG_REQUIRED, violations)
        if violations:
            raise RecordValidationError(MSG_CREATE_FAILED, violations)

        async with _storage_failure(MSG_CREATE_FAILED):
            if await self.repository.find_by_email(fields["email"]):
                raise EmailConflictError(fields["email"])
            user = await self.repository.create(fields)
        logger.info("User created", extra={"user_id": user.id})
        return user

    async def update_user(self, user_id: UserId, payload: Any) -> UserLike:
        """Validate supplied fields only and apply them."""
        fields, violations = validate_user_changes(payload)
        if violations:
            raise RecordValidationError(MSG_UPDATE_FAILED, violations)

        async with _storage_failure(MSG_UPDATE_FAILED):
            if await self.repository.get(user_id) is None:
                raise RecordNotFoundError("User", str(user_id))
            email = fields.get("email")
            if email:
                owner = await self.repository.find_by_email(email)
                if owner is not None and owner.id != user_id:
                    raise EmailConflictError(email)
            user = await self.repository.update(user_id, fields)
        if user is None:
            raise RecordNotFoundError("User", str(user_id))
        logger.info("User updated", extra={"user_id": user_id})
        return user

    async def delete_user(self, user_id: UserId) -> UserLike:
        """Hard delete; returns the record as it was before removal."""
        async with _storage_failure(MSG_DELETE_FAILED):
            user = await self.repository.delete(user_id)
        if user is None:
            raise RecordNotFoundError("User", str(user_id))
        logger.info("User deleted", extra={"user_id": user_id})
        return user
