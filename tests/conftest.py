"""Shared pytest fixtures for the nodejs-fs test suite.

Provides reusable fixtures for:
- A small template tree containing denylisted paths
- A ScaffoldConfig pointing at that tree
- A fake CommandRunner that records calls instead of spawning processes
- Mock subprocess helpers
"""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

from nodejs_fs.config import ScaffoldConfig
from nodejs_fs.errors import NonZeroExitError, SpawnError


# ---------------------------------------------------------------------------
# Template tree
# ---------------------------------------------------------------------------

TEMPLATE_FILES: dict[str, str] = {
    "package.json": json.dumps(
        {"name": "base-backend", "version": "1.0.0", "scripts": {"dev": "node src/index.js"}},
        indent=2,
    )
    + "\n",
    "README.md": "# {{PROJECT_NAME}}\n\nRun `cd {{PROJECT_NAME}}` to start.\n",
    ".env.example": "PORT=5000\n",
    ".gitignore": "node_modules/\n",
    "src/index.js": "import app from './app.js';\n",
    "src/routes/index.js": "export default router;\n",
    "src/config/logger.js": "export default logger;\n",
}

# Everything below must never reach a generated project.
SKIPPED_FILES: dict[str, str] = {
    "node_modules/express/index.js": "module.exports = {};\n",
    ".git/HEAD": "ref: refs/heads/main\n",
    "logs/error.log": "boom\n",
    "dist/bundle.js": "// built\n",
    "build/output.js": "// built\n",
    "src/build/cache.js": "// nested build dir\n",
    "debug.log": "noise\n",
    "src/npm-debug.log": "noise\n",
}


def _write_tree(root: Path, files: dict[str, str]) -> None:
    for rel_path, content in files.items():
        file_path = root / rel_path
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_path.write_text(content, encoding="utf-8")


@pytest.fixture
def templates_dir(tmp_path: Path) -> Path:
    """A templates directory holding a single ``base-backend`` template."""
    root = tmp_path / "templates"
    template = root / "base-backend"
    _write_tree(template, TEMPLATE_FILES)
    _write_tree(template, SKIPPED_FILES)
    (template / "src" / "empty").mkdir(parents=True)
    return root


@pytest.fixture
def template_root(templates_dir: Path) -> Path:
    return templates_dir / "base-backend"


@pytest.fixture
def workspace(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """An empty working directory that is also the process cwd."""
    work = tmp_path / "workspace"
    work.mkdir()
    monkeypatch.chdir(work)
    return work


@pytest.fixture
def scaffold_config(templates_dir: Path) -> ScaffoldConfig:
    return ScaffoldConfig(templates_dir=templates_dir)


# ---------------------------------------------------------------------------
# Fake command runner
# ---------------------------------------------------------------------------


class FakeRunner:
    """In-memory ``CommandRunner``.

    Attributes:
        available: Commands reported by ``command_exists``.
        failures: Maps ``"command arg1 arg2"`` to the exception ``run`` raises.
        calls: Every ``(command, args, cwd, verbose)`` passed to ``run``.
    """

    def __init__(
        self,
        available: set[str] | None = None,
        failures: dict[str, Exception] | None = None,
    ) -> None:
        self.available = available if available is not None else {"npm", "git"}
        self.failures = failures or {}
        self.calls: list[tuple[str, list[str], Path | None, bool]] = []

    async def run(self, command, args=None, *, cwd=None, verbose=False) -> None:
        args = list(args or [])
        self.calls.append((command, args, Path(cwd) if cwd else None, verbose))
        key = " ".join([command, *args])
        if key in self.failures:
            raise self.failures[key]

    async def command_exists(self, command: str) -> bool:
        return command in self.available

    @property
    def commands(self) -> list[str]:
        return [" ".join([c, *a]) for c, a, _, _ in self.calls]


@pytest.fixture
def fake_runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def failing_install_runner() -> FakeRunner:
    return FakeRunner(
        failures={"npm install": NonZeroExitError("npm install", 1, "ERR! network")}
    )


@pytest.fixture
def unspawnable_git_runner() -> FakeRunner:
    return FakeRunner(
        failures={"git init": SpawnError("git init", FileNotFoundError(2, "No such file"))}
    )


# ---------------------------------------------------------------------------
# Mock Subprocess (generic)
# ---------------------------------------------------------------------------


@pytest.fixture
def mock_subprocess():
    """Factory for mock asyncio subprocesses.

    Usage:
        def test_command(mock_subprocess):
            proc = mock_subprocess(stdout="output", returncode=0)
            with patch("asyncio.create_subprocess_exec", return_value=proc):
                ...
    """
    def factory(
        stdout: str = "",
        stderr: str = "",
        returncode: int = 0,
    ) -> AsyncMock:
        mock_proc = AsyncMock()
        mock_proc.communicate = AsyncMock(
            return_value=(stdout.encode("utf-8"), stderr.encode("utf-8"))
        )
        mock_proc.returncode = returncode
        mock_proc.pid = 99999
        mock_proc.kill = MagicMock()
        mock_proc.wait = AsyncMock(return_value=returncode)
        return mock_proc

    return factory


@pytest.fixture
def make_runner():
    """Return the ``FakeRunner`` class for tests that need custom setups."""
    return FakeRunner
