"""Unit tests for exception types and errno translation (nodejs_fs.errors)."""

from __future__ import annotations

import errno
from pathlib import Path

import pytest

from nodejs_fs.errors import (
    CommandError,
    ConfigurationError,
    CopyError,
    DirectoryNotEmptyError,
    InvalidNameError,
    NonZeroExitError,
    OptionalStepError,
    OutOfDiskSpaceError,
    PermissionDeniedError,
    ScaffoldError,
    SpawnError,
    TemplateNotFoundError,
    find_os_error,
    translate_os_error,
)


pytestmark = pytest.mark.unit


class TestHierarchy:
    @pytest.mark.parametrize(
        "error",
        [
            InvalidNameError("x y", "characters", "bad"),
            DirectoryNotEmptyError(Path("/tmp/x"), "x"),
            TemplateNotFoundError("base-backend", Path("/nowhere")),
            CopyError(Path("a.js"), OSError("boom")),
            ConfigurationError("bad manifest"),
            OptionalStepError("npm failed", step="install"),
            PermissionDeniedError(),
            OutOfDiskSpaceError(),
        ],
    )
    def test_all_kinds_are_scaffold_errors(self, error):
        assert isinstance(error, ScaffoldError)

    def test_command_errors_are_separate(self):
        assert not issubclass(CommandError, ScaffoldError)
        assert issubclass(NonZeroExitError, CommandError)
        assert issubclass(SpawnError, CommandError)

    def test_step_defaults_empty(self):
        assert ConfigurationError("x").step == ""
        assert OptionalStepError("x", step="git").step == "git"


class TestMessages:
    def test_directory_not_empty_names_directory(self):
        err = DirectoryNotEmptyError(Path("/tmp/my-api"), "my-api")
        assert '"my-api" already exists and is not empty' in str(err)
        assert err.path == Path("/tmp/my-api")

    def test_copy_error_carries_context(self):
        cause = OSError("disk on fire")
        err = CopyError(Path("src/index.js"), cause)
        assert err.source == Path("src/index.js")
        assert err.cause is cause
        assert "src/index.js" in str(err)
        assert "disk on fire" in str(err)

    def test_non_zero_exit(self):
        err = NonZeroExitError("npm install", 1, "ERR! 404")
        assert err.returncode == 1
        assert err.command == "npm install"
        assert err.stderr == "ERR! 404"
        assert str(err) == "Command failed with exit code 1: npm install"

    def test_non_zero_exit_without_stderr(self):
        assert str(NonZeroExitError("git init", 128)) == (
            "Command failed with exit code 128: git init"
        )

    def test_spawn_error(self):
        cause = FileNotFoundError(2, "No such file or directory")
        err = SpawnError("npm install", cause)
        assert err.cause is cause
        assert err.returncode is None
        assert str(err).startswith("Failed to execute command:")


class TestTranslateOsError:
    def test_permission_denied(self):
        result = translate_os_error(PermissionError(errno.EACCES, "denied"), step="copy")
        assert isinstance(result, PermissionDeniedError)
        assert result.step == "copy"
        assert "elevated privileges" in str(result)

    def test_eperm(self):
        assert isinstance(
            translate_os_error(OSError(errno.EPERM, "nope")), PermissionDeniedError
        )

    def test_out_of_space(self):
        result = translate_os_error(OSError(errno.ENOSPC, "No space left on device"))
        assert isinstance(result, OutOfDiskSpaceError)
        assert str(result) == "Not enough disk space available."

    def test_wrapped_cause(self):
        cause = OSError(errno.ENOSPC, "full")
        try:
            try:
                raise cause
            except OSError as exc:
                raise CopyError(Path("a"), exc) from exc
        except CopyError as wrapped:
            assert find_os_error(wrapped) is cause
            assert isinstance(translate_os_error(wrapped), OutOfDiskSpaceError)

    def test_other_errno_not_translated(self):
        assert translate_os_error(FileNotFoundError(errno.ENOENT, "missing")) is None

    def test_non_os_error(self):
        assert translate_os_error(ConfigurationError("x")) is None
