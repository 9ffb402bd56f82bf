"""Name and content-type rules shared by every store provider

The boolean ``validate_*`` functions are pure predicates. The ``check_*``
functions raise the store's error types and are what providers call before
any physical access, so every backend rejects exactly the same input.
"""

import re
from typing import Any, Optional

from binary_store.exceptions import ArgumentError, ValidationError

NAME_FORMAT = r"^([a-zA-Z0-9\-_.]+)(/[a-zA-Z0-9\-_.]+)*$"
CONTENT_TYPE_FORMAT = r"^[a-z-]+/[a-z0-9\-+.]+$"

NAME_PATTERN = re.compile(NAME_FORMAT)
CONTENT_TYPE_PATTERN = re.compile(CONTENT_TYPE_FORMAT)

DOT_SEGMENTS = frozenset({".", ".."})


def validate_name(name: Optional[str]) -> bool:
    """Return True if ``name`` is a well-formed object name.

    An object name is one or more "/"-separated segments of letters, digits,
    "-", "_" and ".".
    """
    if not isinstance(name, str) or not name.strip():
        return False
    return NAME_PATTERN.fullmatch(name) is not None


def validate_content_type(content_type: Optional[str]) -> bool:
    """Return True if ``content_type`` is empty or of the form type/subtype."""
    if content_type is None or content_type == "":
        return True
    if not isinstance(content_type, str):
        return False
    return CONTENT_TYPE_PATTERN.fullmatch(content_type) is not None


def check_name(name: Any) -> str:
    """Return ``name`` unchanged or raise.

    Raises:
        ArgumentError: If name is None or not a string
        ValidationError: If name is blank, fails the name grammar or has a
            "." or ".." segment
    """
    if name is None:
        raise ArgumentError("MISSING_ARGUMENT", "Object name cannot be None.", {"argument": "name"})
    if not isinstance(name, str):
        raise ArgumentError(
            "MISSING_ARGUMENT",
            f"Object name must be a string, got {type(name).__name__}.",
            {"argument": "name"},
        )
    if not name.strip():
        raise ValidationError(
            "INVALID_NAME", "Value cannot be empty or whitespace only string.", {"name": name}
        )
    if not validate_name(name):
        raise ValidationError("INVALID_NAME", "Invalid name format.", {"name": name})
    # Dot segments match the grammar but would address a folder or leave it
    if any(segment in DOT_SEGMENTS for segment in name.split("/")):
        raise ValidationError(
            "INVALID_NAME", "Name cannot contain \".\" or \"..\" segments.", {"name": name}
        )
    return name


def check_content_type(content_type: Optional[str]) -> Optional[str]:
    """Return ``content_type`` unchanged or raise ValidationError."""
    if not validate_content_type(content_type):
        raise ValidationError(
            "INVALID_CONTENT_TYPE",
            "Invalid content-type format.",
            {"content_type": content_type},
        )
    return content_type


def effective_content_type(content_type: Optional[str], default: str) -> str:
    """Substitute ``default`` when the caller supplied no content type."""
    if content_type is None or not content_type.strip():
        return default
    return content_type
