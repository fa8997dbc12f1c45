"""Template copying.

Copies a template tree into a project directory.  The copy is additive:
files that already exist at the destination are left untouched, so a rerun
against a partially populated directory fills in only what is missing.
"""

from __future__ import annotations

import asyncio
import shutil
import threading
from collections.abc import Iterable
from pathlib import Path, PurePath

from nodejs_fs.config import (
    DEFAULT_SKIP_SEGMENTS,
    DEFAULT_SKIP_SUFFIXES,
    DEFAULT_TEMPLATE_NAME,
    TEMPLATE_MAP,
    TemplateDescriptor,
    TemplateVariant,
)
from nodejs_fs.errors import CopyError, TemplateNotFoundError
from nodejs_fs.utils import print_debug


# ---------------------------------------------------------------------------
# Template lookup
# ---------------------------------------------------------------------------


def resolve_template(
    variant: TemplateVariant | str, templates_dir: str | Path
) -> TemplateDescriptor:
    """Map a template variant to its directory under *templates_dir*.

    Raises:
        TemplateNotFoundError: If the mapped directory does not exist.
    """
    variant = TemplateVariant(variant)
    name = TEMPLATE_MAP.get(variant, DEFAULT_TEMPLATE_NAME)
    source_root = Path(templates_dir) / name
    if not source_root.is_dir():
        raise TemplateNotFoundError(name, source_root)
    return TemplateDescriptor(variant=variant, name=name, source_root=source_root)


# ---------------------------------------------------------------------------
# Filtering
# ---------------------------------------------------------------------------


def should_skip(
    relative_path: str | PurePath,
    skip_segments: Iterable[str] = DEFAULT_SKIP_SEGMENTS,
    skip_suffixes: Iterable[str] = DEFAULT_SKIP_SUFFIXES,
) -> bool:
    """Return ``True`` if a template entry must not be copied.

    An entry is skipped when any segment of its path relative to the
    template root is a denylisted name (``node_modules``, ``.git``, ``logs``,
    ``dist``, ``build``...) or when the path ends with a denylisted suffix.
    """
    rel = PurePath(relative_path)
    segments = set(skip_segments)
    if any(part in segments for part in rel.parts):
        return True
    return rel.as_posix().endswith(tuple(skip_suffixes))


# ---------------------------------------------------------------------------
# Copying
# ---------------------------------------------------------------------------


async def copy_template(
    template_root: str | Path,
    target_path: str | Path,
    *,
    skip_segments: Iterable[str] = DEFAULT_SKIP_SEGMENTS,
    skip_suffixes: Iterable[str] = DEFAULT_SKIP_SUFFIXES,
    verbose: bool = False,
) -> list[Path]:
    """Copy every non-skipped entry of *template_root* into *target_path*.

    Sibling subdirectories are copied concurrently, but the call completes
    (or fails) as a whole.

    Args:
        template_root: Root of the template tree.
        target_path: Existing project directory to copy into.
        skip_segments: Path segments that exclude an entry and its subtree.
        skip_suffixes: Path suffixes that exclude an entry.
        verbose: Emit debug lines for skipped and copied entries.

    Returns:
        Destination paths of the files written by this call.  Files that
        already existed are not included.

    Raises:
        TemplateNotFoundError: If *template_root* is not a directory.
        CopyError: If reading the template or writing the project fails.
    """
    root = Path(template_root)
    target = Path(target_path)
    if not await asyncio.to_thread(root.is_dir):
        raise TemplateNotFoundError(root.name, root)

    print_debug(f"Copying from: {root}", verbose)
    print_debug(f"Copying to: {target}", verbose)

    copier = _TreeCopier(
        root,
        target,
        skip_segments=tuple(skip_segments),
        skip_suffixes=tuple(skip_suffixes),
        verbose=verbose,
    )
    written = await copier.copy_dir(root)

    print_debug("Template copied successfully", verbose)
    return sorted(written)


class _TreeCopier:
    """Recursive worker behind :func:`copy_template`.

    The first I/O failure sets ``failed``.  Work that has not started yet
    sees the flag and does nothing, and every directory waits for all of
    its children before re-raising, so no file is written after
    :func:`copy_template` has returned or raised.
    """

    def __init__(
        self,
        root: Path,
        target: Path,
        *,
        skip_segments: tuple[str, ...],
        skip_suffixes: tuple[str, ...],
        verbose: bool,
    ) -> None:
        self.root = root
        self.target = target
        self.skip_segments = skip_segments
        self.skip_suffixes = skip_suffixes
        self.verbose = verbose
        self.failed = threading.Event()

    async def copy_dir(self, src_dir: Path) -> list[Path]:
        dest_dir = self.target / src_dir.relative_to(self.root)
        entries = await asyncio.to_thread(self._prepare_dir, src_dir, dest_dir)

        tasks = []
        for entry, is_dir in entries:
            rel = entry.relative_to(self.root)
            if should_skip(rel, self.skip_segments, self.skip_suffixes):
                print_debug(f"Skipping: {rel.as_posix()}", self.verbose)
                continue
            if is_dir:
                tasks.append(self.copy_dir(entry))
            else:
                tasks.append(self._copy_file(entry, dest_dir / entry.name))

        written: list[Path] = []
        errors: list[BaseException] = []
        for result in await asyncio.gather(*tasks, return_exceptions=True):
            if isinstance(result, BaseException):
                errors.append(result)
            else:
                written.extend(result)
        if errors:
            raise errors[0]
        return written

    async def _copy_file(self, src: Path, dest: Path) -> list[Path]:
        copied = await asyncio.to_thread(self._copy_file_if_missing, src, dest)
        if copied is None:
            return []
        if not copied:
            print_debug(f"Exists, not overwriting: {dest}", self.verbose)
            return []
        return [dest]

    def _prepare_dir(self, src_dir: Path, dest_dir: Path) -> list[tuple[Path, bool]]:
        """Create *dest_dir* and return ``(entry, is_dir)`` for *src_dir*, sorted."""
        if self.failed.is_set():
            return []
        try:
            dest_dir.mkdir(parents=True, exist_ok=True)
            return [
                (entry, entry.is_dir() and not entry.is_symlink())
                for entry in sorted(src_dir.iterdir())
            ]
        except OSError as exc:
            self.failed.set()
            raise CopyError(src_dir, exc) from exc

    def _copy_file_if_missing(self, src: Path, dest: Path) -> bool | None:
        """Copy *src* to *dest* unless *dest* already exists.

        Returns ``True`` if the file was written, ``False`` if it already
        existed and ``None`` if the walk was aborted first.
        """
        if self.failed.is_set():
            return None
        if dest.exists() or dest.is_symlink():
            return False
        try:
            shutil.copy2(src, dest)
        except OSError as exc:
            self.failed.set()
            raise CopyError(src, exc) from exc
        return True
