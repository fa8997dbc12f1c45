"""Project name validation."""

from __future__ import annotations

import re
from collections.abc import Collection

from nodejs_fs.config import MAX_NAME_LENGTH, RESERVED_NAMES
from nodejs_fs.errors import InvalidNameError

_VALID_NAME_RE = re.compile(r"^[a-zA-Z0-9_-]+$")


def validate_project_name(
    name: str,
    *,
    reserved: Collection[str] = RESERVED_NAMES,
    max_length: int = MAX_NAME_LENGTH,
) -> None:
    """Check that *name* is usable as a project directory and package name.

    Rules are applied in order and the first one that fails determines the
    ``reason`` on the raised error:

    * ``"characters"`` -- only ASCII letters, digits, hyphens and underscores;
    * ``"reserved"`` -- not one of the reserved names (case-insensitive);
    * ``"length"`` -- between 1 and *max_length* characters.

    Raises:
        InvalidNameError: If any rule is violated.
    """
    # ``$`` would also accept a trailing newline, so anchor on fullmatch.
    if not _VALID_NAME_RE.fullmatch(name):
        raise InvalidNameError(
            name,
            "characters",
            "Project name can only contain letters, numbers, hyphens, and underscores",
        )

    if name.lower() in {r.lower() for r in reserved}:
        raise InvalidNameError(
            name, "reserved", f'"{name}" is a reserved name and cannot be used'
        )

    if not 1 <= len(name) <= max_length:
        raise InvalidNameError(
            name,
            "length",
            f"Project name must be between 1 and {max_length} characters",
        )
