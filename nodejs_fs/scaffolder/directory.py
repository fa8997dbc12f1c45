"""Target directory resolution.

Decides where a project is generated and whether an existing directory may
be reused.  Nothing here ever deletes or empties a directory.
"""

from __future__ import annotations

import asyncio
from pathlib import Path

from nodejs_fs.errors import DirectoryNotEmptyError
from nodejs_fs.utils import ensure_dir, print_debug


def is_dir_empty(path: str | Path) -> bool:
    """Return ``True`` if *path* is a directory with no entries."""
    dir_path = Path(path)
    if not dir_path.is_dir():
        return False
    return next(dir_path.iterdir(), None) is None


async def resolve_project_directory(
    name: str,
    cwd: str | Path | None = None,
    *,
    verbose: bool = False,
) -> Path:
    """Return the absolute project directory for *name*, creating it if needed.

    An existing directory is reused only when it is empty.

    Raises:
        DirectoryNotEmptyError: If the path exists and is not an empty
            directory.
    """
    base = Path(cwd) if cwd is not None else Path.cwd()
    project_path = (base / name).resolve()

    if project_path.exists():
        empty = await asyncio.to_thread(is_dir_empty, project_path)
        if not empty:
            raise DirectoryNotEmptyError(project_path, name)
        print_debug(f"Using existing empty directory: {project_path}", verbose)
        return project_path

    await asyncio.to_thread(ensure_dir, project_path)
    print_debug(f"Created directory: {project_path}", verbose)
    return project_path
