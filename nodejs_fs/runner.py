"""External process execution for optional scaffolding steps.

The orchestrator only needs to know whether a command succeeded, so the
boundary is narrow: :class:`CommandRunner` runs a program and
raises :class:`~nodejs_fs.errors.CommandError` on failure.  Tests substitute
their own runner instead of spawning real processes.
"""

from __future__ import annotations

import shutil
from pathlib import Path
from typing import Protocol, runtime_checkable

from nodejs_fs.errors import NonZeroExitError, SpawnError
from nodejs_fs.utils import print_debug, run_command


@runtime_checkable
class CommandRunner(Protocol):
    """Runs external programs on behalf of the orchestrator."""

    async def run(
        self,
        command: str,
        args: list[str] | None = None,
        *,
        cwd: str | Path | None = None,
        verbose: bool = False,
    ) -> None:
        """Run *command* and wait for it.  Raise ``CommandError`` on failure."""
        ...

    async def command_exists(self, command: str) -> bool:
        """Return ``True`` if *command* can be found on ``PATH``."""
        ...


class SubprocessRunner:
    """:class:`CommandRunner` backed by asyncio subprocesses.

    In verbose mode the child inherits the terminal so its output streams
    live; otherwise output is captured and only surfaces in error messages.
    """

    async def run(
        self,
        command: str,
        args: list[str] | None = None,
        *,
        cwd: str | Path | None = None,
        verbose: bool = False,
    ) -> None:
        args = list(args or [])
        cmd_str = " ".join([command, *args])
        print_debug(f"Running: {cmd_str}", verbose)

        # Resolve through PATH so wrappers such as npm.cmd work on Windows.
        executable = shutil.which(command) or command
        try:
            returncode, stdout, stderr = await run_command(
                [executable, *args], cwd=cwd, capture=not verbose
            )
        except OSError as exc:
            raise SpawnError(cmd_str, exc) from exc

        if returncode != 0:
            output = stderr or stdout
            if output:
                print_debug(output, verbose)
            raise NonZeroExitError(cmd_str, returncode, output)

    async def command_exists(self, command: str) -> bool:
        # Same PATH lookup ``run`` uses.
        return shutil.which(command) is not None


async def detect_package_manager(runner: CommandRunner) -> str:
    """Return ``"yarn"`` when it is installed, otherwise ``"npm"``."""
    if await runner.command_exists("yarn"):
        return "yarn"
    return "npm"
