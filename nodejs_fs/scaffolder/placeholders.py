"""``{{TOKEN}}`` placeholder substitution for generated text files."""

from __future__ import annotations

import asyncio
import re
from collections.abc import Mapping
from pathlib import Path

from nodejs_fs.errors import ConfigurationError


def placeholder(key: str) -> str:
    """Return the literal marker for *key*, e.g. ``{{PROJECT_NAME}}``."""
    return "{{" + key + "}}"


def replace_placeholders_in_text(text: str, replacements: Mapping[str, str]) -> str:
    """Replace every ``{{KEY}}`` in *text* with ``replacements[KEY]``.

    Markers are matched literally, with no whitespace allowed inside the
    braces.  All keys are applied in a single pass over the original text,
    so a replacement value that itself contains a marker is left as-is.
    """
    if not replacements:
        return text
    pattern = re.compile("|".join(re.escape(placeholder(key)) for key in replacements))
    values = {placeholder(key): str(value) for key, value in replacements.items()}
    return pattern.sub(lambda match: values[match.group(0)], text)


async def replace_placeholders(
    file_path: str | Path, replacements: Mapping[str, str]
) -> None:
    """Rewrite *file_path* in place with its placeholders substituted.

    Raises:
        ConfigurationError: If the file cannot be read or written.
    """
    path = Path(file_path)
    try:
        # Bytes I/O keeps line endings exactly as they were.
        raw = await asyncio.to_thread(path.read_bytes)
        updated = replace_placeholders_in_text(raw.decode("utf-8"), replacements)
        await asyncio.to_thread(path.write_bytes, updated.encode("utf-8"))
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigurationError(
            f"Failed to replace placeholders in {path}: {exc}"
        ) from exc
