"""Post-copy configuration of a generated project.

Stamps the project name into the manifest (``package.json``) and the
top-level README.  No other file is touched.
"""

from __future__ import annotations

import asyncio
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from nodejs_fs.errors import ConfigurationError
from nodejs_fs.scaffolder.placeholders import replace_placeholders
from nodejs_fs.utils import load_json, print_debug, save_json


async def update_package_json(
    manifest_path: str | Path, updates: Mapping[str, Any]
) -> dict[str, Any]:
    """Merge *updates* into a JSON manifest and write it back.

    Existing key order is kept; new keys are appended.  The file is written
    with 2-space indentation.

    Returns:
        The updated manifest.

    Raises:
        ConfigurationError: If the manifest is missing, unreadable or not a
            JSON object.
    """
    path = Path(manifest_path)
    try:
        manifest = await asyncio.to_thread(load_json, path)
        manifest.update(updates)
        await save_json(manifest, path)
    except (OSError, ValueError) as exc:
        # json.JSONDecodeError is a ValueError subclass.
        raise ConfigurationError(f"Failed to update {path.name}: {exc}") from exc
    return manifest


async def update_project_config(
    project_path: str | Path,
    project_name: str,
    *,
    manifest_file: str = "package.json",
    readme_file: str = "README.md",
    verbose: bool = False,
) -> None:
    """Write *project_name* into the manifest and README of a project.

    Raises:
        ConfigurationError: If either file cannot be updated.
    """
    root = Path(project_path)

    await update_package_json(root / manifest_file, {"name": project_name})
    print_debug(f"Updated {manifest_file}", verbose)

    readme_path = root / readme_file
    if await asyncio.to_thread(readme_path.is_file):
        await replace_placeholders(readme_path, {"PROJECT_NAME": project_name})
        print_debug(f"Updated {readme_file}", verbose)
