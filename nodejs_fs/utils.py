"""Shared utility functions for nodejs-fs.

Provides async command execution, JSON I/O, file-system helpers and
Rich-based console reporting.  Every public function is designed to be
safe and side-effect-free where possible, with clear error messages when
something goes wrong.
"""

from __future__ import annotations

import asyncio
import json
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.status import Status

console = Console()
err_console = Console(stderr=True)

# ---------------------------------------------------------------------------
# Async command execution
# ---------------------------------------------------------------------------


async def run_command(
    cmd: list[str],
    cwd: str | Path | None = None,
    capture: bool = True,
) -> tuple[int, str, str]:
    """Run a command asynchronously and wait for it to exit.

    No timeout is applied: dependency installs can legitimately take many
    minutes and the caller always waits for the child to finish.

    Args:
        cmd: Program followed by its arguments.
        cwd: Working directory for the child process.
        capture: Whether to capture stdout/stderr (if ``False`` they inherit
            the parent's streams).

    Returns:
        A ``(returncode, stdout, stderr)`` tuple.  If *capture* is ``False``
        the stdout/stderr strings will be empty.

    Raises:
        OSError: If the program cannot be spawned (e.g. it does not exist).
    """
    stdout_pipe = asyncio.subprocess.PIPE if capture else None
    stderr_pipe = asyncio.subprocess.PIPE if capture else None

    process = await asyncio.create_subprocess_exec(
        *cmd,
        stdout=stdout_pipe,
        stderr=stderr_pipe,
        cwd=str(cwd) if cwd else None,
    )
    stdout_bytes, stderr_bytes = await process.communicate()

    stdout_str = (stdout_bytes or b"").decode("utf-8", errors="replace").strip()
    stderr_str = (stderr_bytes or b"").decode("utf-8", errors="replace").strip()
    return (process.returncode or 0, stdout_str, stderr_str)


# ---------------------------------------------------------------------------
# JSON I/O
# ---------------------------------------------------------------------------


def load_json(path: str | Path) -> dict[str, Any]:
    """Load and parse a JSON file that holds a top-level object.

    Raises:
        FileNotFoundError: If the file does not exist.
        json.JSONDecodeError: If the file is not valid JSON.
        ValueError: If the document is not a JSON object.
    """
    raw = Path(path).read_text(encoding="utf-8")
    data = json.loads(raw)
    if not isinstance(data, dict):
        raise ValueError(f"Expected a JSON object in {path}, got {type(data).__name__}")
    return data


async def save_json(data: dict[str, Any] | list[Any], path: str | Path) -> None:
    """Save data as JSON with 2-space indentation and a trailing newline.

    Key order is preserved.  The write is performed in a worker thread to
    avoid blocking the event loop.
    """
    file_path = Path(path)
    content = json.dumps(data, indent=2, ensure_ascii=False) + "\n"
    await asyncio.to_thread(file_path.write_text, content, "utf-8")


# ---------------------------------------------------------------------------
# File-system helpers
# ---------------------------------------------------------------------------


def ensure_dir(path: str | Path) -> Path:
    """Create a directory (and parents) if it does not exist.

    Returns:
        The resolved ``Path`` object.
    """
    dir_path = Path(path)
    dir_path.mkdir(parents=True, exist_ok=True)
    return dir_path.resolve()


# ---------------------------------------------------------------------------
# Rich output helpers
# ---------------------------------------------------------------------------


def print_step(message: str) -> None:
    """Print a magenta step marker."""
    console.print(f"[magenta]>[/magenta] {escape(message)}")


def print_info(message: str) -> None:
    """Print a cyan informational message."""
    console.print(f"[cyan]i[/cyan] {escape(message)}")


def print_success(message: str) -> None:
    """Print a green success message."""
    console.print(f"[bold green]+[/bold green] {escape(message)}")


def print_warning(message: str) -> None:
    """Print a yellow warning message."""
    console.print(f"[bold yellow]![/bold yellow] {escape(message)}")


def print_error(message: str) -> None:
    """Print a red error message to stderr."""
    err_console.print(f"[bold red]ERROR:[/bold red] [red]{escape(message)}[/red]")


def print_debug(message: str, verbose: bool = False) -> None:
    """Print a dim debug line, but only in verbose mode."""
    if verbose and message:
        console.print(f"[dim]> {escape(message)}[/dim]", highlight=False)


def print_blank() -> None:
    console.print()


def print_banner(title: str, style: str = "bright_cyan") -> None:
    """Print a boxed banner line."""
    console.print()
    console.print(Panel(f"[bold]{title}[/bold]", border_style=style, expand=False))
    console.print()


@contextmanager
def spinner(message: str) -> Iterator[Status]:
    """Show a Rich spinner for the duration of the ``with`` block."""
    with console.status(message) as status:
        yield status
