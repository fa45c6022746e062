"""User Validation: pure normalization and constraint checks for UserRecord writes.

Invariants:
    - All functions are PURE: no IO, no async, no DB, no side effects
    - Violations are returned, never raised: list of {"field", "message", "type"}
    - Only WritableField keys survive normalization; unknown keys are dropped
    - Create validates every field; update validates only the supplied fields

Design Decisions:
    - Return (fields, violations) tuples: the service decides which error to raise,
      keeping this module free of HTTP concerns (ADR: functional core)
    - Transforms (trim, lowercase, int cast) run before checks, so constraints apply
      to the stored value, not the submitted one
"""

from typing import Any

from user_registry.core.domain_types import (
    AGE_MAX,
    AGE_MIN,
    EMAIL_MAX_LENGTH,
    EMAIL_PATTERN,
    NAME_MIN_LENGTH,
    REQUIRED_FIELDS,
    TRIMMED_FIELDS,
    WritableField,
)

_MISSING_MESSAGES = {
    WritableField.NAME: "Please provide a name",
    WritableField.EMAIL: "Please provide an email",
}


def _violation(field: str, message: str, kind: str) -> dict:
    return {"field": field, "message": message, "type": kind}


# ─── Transforms ──────────────────────────────────────────────────

def _coerce_text(field: WritableField, value: Any) -> tuple[Any, dict | None]:
    """Cast scalars to str; trim or lowercase per field."""
    if value is None:
        return None, None
    if isinstance(value, bool) or not isinstance(value, (str, int, float)):
        return value, _violation(
            field.value, f"{field.value.capitalize()} must be a string", "type_error",
        )
    text = str(value)
    if field in TRIMMED_FIELDS:
        text = text.strip()
    if field == WritableField.EMAIL:
        text = text.lower()
    return text, None


def _coerce_age(value: Any) -> tuple[Any, dict | None]:
    """Accept ints, integral floats and integer strings."""
    if value is None:
        return None, None
    if isinstance(value, bool):
        return value, _violation("age", "Age must be an integer", "type_error")
    if isinstance(value, int):
        return value, None
    if isinstance(value, float) and value.is_integer():
        return int(value), None
    if isinstance(value, str):
        try:
            return int(value.strip()), None
        except ValueError:
            pass
    return value, _violation("age", "Age must be an integer", "type_error")


def normalize_user_fields(payload: dict) -> tuple[dict, list[dict]]:
    """Pick writable keys present in payload and apply transforms.

    Returns the normalized fields and any type violations found while
    coercing. Keys absent from payload stay absent.
    """
    fields: dict = {}
    violations: list[dict] = []
    for field in WritableField:
        if field.value not in payload:
            continue
        raw = payload[field.value]
        if field == WritableField.AGE:
            value, error = _coerce_age(raw)
        else:
            value, error = _coerce_text(field, raw)
        if error:
            violations.append(error)
        else:
            fields[field.value] = value
    return fields, violations


# ─── Constraint Checks ───────────────────────────────────────────

def check_name(name: str) -> dict | None:
    if len(name) < NAME_MIN_LENGTH:
        return _violation(
            "name", f"Name must be at least {NAME_MIN_LENGTH} characters", "too_short",
        )
    return None


def check_email(email: str) -> dict | None:
    if len(email) > EMAIL_MAX_LENGTH or not EMAIL_PATTERN.fullmatch(email):
        return _violation("email", "Please provide a valid email", "pattern")
    return None


def check_age(age: int) -> dict | None:
    if age < AGE_MIN:
        return _violation("age", "Age cannot be negative", "range")
    if age > AGE_MAX:
        return _violation("age", f"Age cannot exceed {AGE_MAX}", "range")
    return None


def _check_present(fields: dict) -> list[dict]:
    """Run constraint checks on every non-null field in fields."""
    checks = {"name": check_name, "email": check_email, "age": check_age}
    violations = []
    for key, check in checks.items():
        value = fields.get(key)
        if value is None or value == "":
            continue
        error = check(value)
        if error:
            violations.append(error)
    return violations


def _check_required(
    fields: dict, rejected: set[str], supplied_only: bool,
) -> list[dict]:
    """Required fields must be non-empty; on update only when supplied.

    Fields already rejected for their type are not reported again.
    """
    violations = []
    for field in REQUIRED_FIELDS:
        if field.value in rejected:
            continue
        if supplied_only and field.value not in fields:
            continue
        if not fields.get(field.value):
            violations.append(
                _violation(field.value, _MISSING_MESSAGES[field], "missing"),
            )
    return violations


# ─── Entry Points ────────────────────────────────────────────────

def _validate(payload: Any, supplied_only: bool) -> tuple[dict, list[dict]]:
    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        return {}, [
            _violation("body", "Request body must be a JSON object", "type_error"),
        ]
    fields, violations = normalize_user_fields(payload)
    rejected = {v["field"] for v in violations}
    violations += _check_required(fields, rejected, supplied_only)
    violations += _check_present(fields)
    return fields, violations


def validate_new_user(payload: Any) -> tuple[dict, list[dict]]:
    """Full validation for create. Returns (fields, violations)."""
    return _validate(payload, supplied_only=False)


def validate_user_changes(payload: Any) -> tuple[dict, list[dict]]:
    """Partial validation for update: only supplied fields are checked."""
    return _validate(payload, supplied_only=True)


def has_missing_required(violations: list[dict]) -> bool:
    """True if any violation reports an absent required field."""
    return any(v["type"] == "missing" for v in violations)
