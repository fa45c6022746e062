"""Request Dependencies: per-request repository and service wiring.

Invariants:
    - Stores are read from app.state (set by the lifespan), never from module globals
    - One database session per request; rollback on any exception (DatabaseSessionManager)
    - The in-memory store, when configured, is shared by all requests

Design Decisions:
    - Tests override get_user_repository via app.dependency_overrides
"""

from typing import AsyncGenerator

from fastapi import Depends, Request

from user_registry.core.repository_protocols import UserRepository
from user_registry.infrastructure.user_repository import SqlAlchemyUserRepository
from user_registry.services.user_service import UserService


async def get_user_repository(
    request: Request,
) -> AsyncGenerator[UserRepository, None]:
    """FastAPI dependency yielding the configured UserRepository."""
    memory_store = getattr(request.app.state, "memory_store", None)
    if memory_store is not None:
        yield memory_store
        return
    db_manager = getattr(request.app.state, "db_manager", None)
    if db_manager is None:
        raise RuntimeError("Database not initialized")
    async with db_manager.session() as session:
        yield SqlAlchemyUserRepository(session)


def get_user_service(
    repository: UserRepository = Depends(get_user_repository),
) -> UserService:
    return UserService(repository)
