"""
Validation Utilities
====================

Input validation for vault entries and passwords.
"""

from __future__ import annotations

from typing import Any, Optional

from lockbox.core.errors import LockboxError

MAX_NAME_LENGTH = 255


class ValidationError(LockboxError, ValueError):
    """Raised when validation fails."""
    pass


def validate_string_safe(
    value: Any,
    max_length: Optional[int] = None,
    allow_empty: bool = False,
    allow_null_bytes: bool = True,
    field_name: str = "value",
) -> str:
    """
    Validate a string value for safety.

    Args:
        value: The string to validate
        max_length: Maximum allowed length (None for unbounded)
        allow_empty: If False, empty strings are rejected
        allow_null_bytes: If False, strings containing NUL are rejected
        field_name: Name of the field for error messages

    Returns:
        Validated string

    Raises:
        ValidationError: If validation fails
    """
    if not isinstance(value, str):
        raise ValidationError(f"{field_name} must be a string")

    if not allow_empty and not value:
        raise ValidationError(f"{field_name} cannot be empty")

    if max_length is not None and len(value) > max_length:
        raise ValidationError(
            f"{field_name} must be at most {max_length} characters"
        )

    if not allow_null_bytes and "\x00" in value:
        raise ValidationError(f"{field_name} contains invalid characters")

    return value


def validate_entry(name: Any, value: Any) -> tuple[str, str]:
    """
    Validate an entry name/value pair before it enters the vault.

    Raises:
        ValidationError: If either side is not a non-empty string
    """
    return (
        validate_string_safe(
            name,
            max_length=MAX_NAME_LENGTH,
            allow_null_bytes=False,
            field_name="name",
        ),
        validate_string_safe(value, field_name="value"),
    )


def validate_new_password(password: Any) -> str:
    """Validate a password chosen for a brand-new vault."""
    return validate_string_safe(password, field_name="password")
