"""User Routes: list, create, update and delete UserRecords.

Invariants:
    - Routes never contain business logic (delegate to UserService)
    - Every response is an ApiResponse envelope
    - Path ids are parsed to UUID here; malformed ids -> InvalidIdError (400)
    - Errors propagate to the global handlers (api/error_handlers.py)

Design Decisions:
    - Body taken as raw JSON (Any): field validation lives in core/validate_user.py
      so violations share the envelope with every other failure
"""

import logging
from typing import Any
from uuid import UUID

from fastapi import APIRouter, Body, Depends, status
from fastapi.responses import JSONResponse

from user_registry.api.dependencies import get_user_service
from user_registry.core.domain_types import UserId
from user_registry.core.errors import InvalidIdError
from user_registry.schemas.user import ApiResponse, UserResponse
from user_registry.services.user_service import UserService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/users", tags=["users"])


def parse_user_id(raw_id: str) -> UserId:
    """Parse a path id or raise InvalidIdError."""
    try:
        return UserId(UUID(raw_id))
    except ValueError:
        raise InvalidIdError(raw_id)


def _respond(status_code: int, envelope: ApiResponse) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=envelope.to_content())


@router.get("")
async def list_users(service: UserService = Depends(get_user_service)):
    """Return every UserRecord."""
    users = await service.list_users()
    return _respond(status.HTTP_200_OK, ApiResponse(
        success=True,
        count=len(users),
        data=[UserResponse.model_validate(u) for u in users],
    ))


@router.post("")
async def create_user(
    payload: Any = Body(None),
    service: UserService = Depends(get_user_service),
):
    """Create a UserRecord from name, email and optional age/phone/city."""
    user = await service.create_user(payload)
    return _respond(status.HTTP_201_CREATED, ApiResponse(
        success=True,
        message="User created successfully",
        data=UserResponse.model_validate(user),
    ))


@router.put("/{user_id}")
async def update_user(
    user_id: str,
    payload: Any = Body(None),
    service: UserService = Depends(get_user_service),
):
    """Apply any subset of writable fields to an existing UserRecord."""
    user = await service.update_user(parse_user_id(user_id), payload)
    return _respond(status.HTTP_200_OK, ApiResponse(
        success=True,
        message="User updated successfully",
        data=UserResponse.model_validate(user),
    ))


@router.delete("/{user_id}")
async def delete_user(
    user_id: str,
    service: UserService = Depends(get_user_service),
):
    """Hard-delete a UserRecord; responds with its prior state."""
    user = await service.delete_user(parse_user_id(user_id))
    return _respond(status.HTTP_200_OK, ApiResponse(
        success=True,
        message="User deleted successfully",
        data=UserResponse.model_validate(user),
    ))
