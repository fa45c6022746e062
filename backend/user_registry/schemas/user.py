"""User Schemas: response models and the uniform API envelope.

Invariants:
    - Timestamps serialize as createdAt/updatedAt (camelCase on the wire)
    - Absent optional fields are omitted from JSON, never sent as null
    - Every response body is an ApiResponse: {success, message?, data?, count?, error?}

Design Decisions:
    - Request bodies are NOT modelled here: writes are validated by core/validate_user.py
      so violations come back as a structured list in the envelope, not as a 422
    - from_attributes=True: records built straight from ORM/in-memory User objects
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class UserResponse(BaseModel):
    """Public representation of a UserRecord."""
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: UUID
    name: str
    email: str
    age: int | None = None
    phone: str | None = None
    city: str | None = None
    created_at: datetime = Field(serialization_alias="createdAt")
    updated_at: datetime = Field(serialization_alias="updatedAt")


class ApiResponse(BaseModel):
    """Uniform envelope for every response, success or failure."""
    success: bool
    message: str | None = None
    count: int | None = None
    data: UserResponse | list[UserResponse] | None = None
    error: str | None = None

    def to_content(self) -> dict:
        """JSON-ready dict: aliases applied, None fields dropped."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
