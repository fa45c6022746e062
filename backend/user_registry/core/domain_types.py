"""Domain Types: rich types and constants for the User record.

Invariants:
    - UserId wraps UUID: never use bare UUID in domain logic
    - Age bounds are inclusive: AGE_MIN <= age <= AGE_MAX
    - EMAIL_PATTERN is ASCII-only and must be applied with fullmatch
    - WritableField lists every field a client may set; nothing else is persisted

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enum for field names: serializes to JSON without custom encoders
"""

import re
from enum import Enum
from typing import NewType
from uuid import UUID


# ─── Identity Types ──────────────────────────────────────────────

UserId = NewType("UserId", UUID)


# ─── Field Constraints ───────────────────────────────────────────

NAME_MIN_LENGTH = 2
AGE_MIN = 0
AGE_MAX = 150
EMAIL_MAX_LENGTH = 254
EMAIL_PATTERN = re.compile(r"\w+(?:[.-]\w+)*@\w+(?:[.-]\w+)*\.\w{2,3}", re.ASCII)


# ─── Enums ───────────────────────────────────────────────────────

class WritableField(str, Enum):
    """Client-writable fields of a UserRecord."""
    NAME = "name"
    EMAIL = "email"
    AGE = "age"
    PHONE = "phone"
    CITY = "city"


REQUIRED_FIELDS = (WritableField.NAME, WritableField.EMAIL)
TRIMMED_FIELDS = (WritableField.NAME, WritableField.PHONE, WritableField.CITY)
