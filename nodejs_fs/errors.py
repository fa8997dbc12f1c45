"""Exception types raised by the scaffolding engine.

Fatal kinds (``InvalidNameError``, ``DirectoryNotEmptyError``,
``TemplateNotFoundError``, ``CopyError``, ``ConfigurationError``,
``PermissionDeniedError``, ``OutOfDiskSpaceError``) always abort a run.
``OptionalStepError`` is only fatal in verbose mode.
"""

from __future__ import annotations

import errno
from pathlib import Path


class ScaffoldError(Exception):
    """Base class for every failure the scaffolder reports to the user."""

    def __init__(self, message: str, *, step: str = "") -> None:
        self.step = step
        super().__init__(message)


class InvalidNameError(ScaffoldError):
    """Raised when the project name fails validation."""

    def __init__(self, name: str, reason: str, message: str) -> None:
        self.name = name
        self.reason = reason
        super().__init__(message)


class DirectoryNotEmptyError(ScaffoldError):
    """Raised when the target directory exists and cannot be reused."""

    def __init__(self, path: Path, name: str) -> None:
        self.path = path
        super().__init__(
            f'Directory "{name}" already exists and is not empty. '
            "Please choose a different name or remove the existing directory."
        )


class TemplateNotFoundError(ScaffoldError):
    """Raised when the template directory for a variant is missing."""

    def __init__(self, template_name: str, path: Path) -> None:
        self.template_name = template_name
        self.path = path
        super().__init__(f'Template "{template_name}" not found at {path}')


class CopyError(ScaffoldError):
    """Raised when copying a template file fails unexpectedly."""

    def __init__(self, source: Path, cause: OSError) -> None:
        self.source = source
        self.cause = cause
        super().__init__(f"Failed to copy template: {source}: {cause}")


class ConfigurationError(ScaffoldError):
    """Raised when the generated project's manifest or docs cannot be updated."""


class OptionalStepError(ScaffoldError):
    """Raised when dependency installation or git initialisation fails."""


class PermissionDeniedError(ScaffoldError):
    def __init__(self, *, step: str = "") -> None:
        super().__init__(
            "Permission denied. Try running with elevated privileges.", step=step
        )


class OutOfDiskSpaceError(ScaffoldError):
    def __init__(self, *, step: str = "") -> None:
        super().__init__("Not enough disk space available.", step=step)


class CommandError(Exception):
    """Raised when an external command cannot be run or exits non-zero."""

    def __init__(self, message: str, command: str = "", returncode: int | None = None):
        self.command = command
        self.returncode = returncode
        super().__init__(message)


class NonZeroExitError(CommandError):
    """Raised when a command exits non-zero.  Captured output stays on ``stderr``."""

    def __init__(self, command: str, returncode: int, stderr: str = "") -> None:
        self.stderr = stderr
        super().__init__(
            f"Command failed with exit code {returncode}: {command}",
            command=command,
            returncode=returncode,
        )


class SpawnError(CommandError):
    def __init__(self, command: str, cause: OSError) -> None:
        self.cause = cause
        super().__init__(f"Failed to execute command: {cause}", command=command)


def find_os_error(exc: BaseException) -> OSError | None:
    """Return the first ``OSError`` in *exc*'s cause chain, if any."""
    seen: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in seen:
        if isinstance(current, OSError):
            return current
        seen.add(id(current))
        current = current.__cause__ or current.__context__
    return None


def translate_os_error(exc: BaseException, *, step: str = "") -> ScaffoldError | None:
    """Map permission and disk-space failures to friendlier errors.

    Returns ``None`` when *exc* carries no recognised ``errno``.
    """
    os_error = find_os_error(exc)
    if os_error is None:
        return None
    if os_error.errno in (errno.EACCES, errno.EPERM):
        return PermissionDeniedError(step=step)
    if os_error.errno == errno.ENOSPC:
        return OutOfDiskSpaceError(step=step)
    return None
