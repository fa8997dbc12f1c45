"""nodejs-fs configuration and request models.

Typed settings for the scaffolder.  All models use Pydantic v2 so they are
validated at construction time and can be dumped for debugging without
boiler-plate.
"""

from __future__ import annotations

import os
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_TEMPLATES_DIR = Path(__file__).parent / "templates"

RESERVED_NAMES: frozenset[str] = frozenset({"node_modules", "src", "test", "tests"})
MAX_NAME_LENGTH = 214

# Path segments and suffixes never copied out of a template.
DEFAULT_SKIP_SEGMENTS: tuple[str, ...] = (
    "node_modules",
    ".git",
    ".hg",
    ".svn",
    "logs",
    "dist",
    "build",
)
DEFAULT_SKIP_SUFFIXES: tuple[str, ...] = (".log",)


class TemplateVariant(str, Enum):
    """Template flavours selectable with ``--template``."""

    BASIC = "basic"
    SECURE = "secure"
    FULL = "full"


# Every variant currently renders the same physical template.
TEMPLATE_MAP: dict[TemplateVariant, str] = {
    TemplateVariant.BASIC: "base-backend",
    TemplateVariant.SECURE: "base-backend",
    TemplateVariant.FULL: "base-backend",
}
DEFAULT_TEMPLATE_NAME = "base-backend"


class TemplateDescriptor(BaseModel):
    """A requested variant resolved to a template directory on disk."""

    model_config = ConfigDict(frozen=True)

    variant: TemplateVariant
    name: str
    source_root: Path


class ProjectOptions(BaseModel):
    """Flags collected from the command line."""

    model_config = ConfigDict(frozen=True)

    install: bool = Field(default=True, description="Run the package manager install step")
    git: bool = Field(default=False, description="Initialise a git repository")
    template: TemplateVariant = Field(default=TemplateVariant.FULL)
    verbose: bool = Field(
        default=False,
        description="Show debug output and treat optional step failures as fatal",
    )
    typescript: bool = Field(default=False, description="Accepted but not implemented yet")


class ProjectRequest(BaseModel):
    """A single scaffolding invocation.  Immutable once constructed."""

    model_config = ConfigDict(frozen=True)

    name: str
    target_directory: Path = Field(default_factory=Path.cwd)
    options: ProjectOptions = Field(default_factory=ProjectOptions)

    @property
    def project_path(self) -> Path:
        """Absolute path of the directory the project is generated into."""
        return (self.target_directory / self.name).resolve()


class ScaffoldConfig(BaseModel):
    """Tool-level settings shared by every scaffolding run."""

    templates_dir: Path = Field(default=DEFAULT_TEMPLATES_DIR)
    reserved_names: frozenset[str] = Field(default=RESERVED_NAMES)
    max_name_length: int = Field(default=MAX_NAME_LENGTH, ge=1)
    skip_segments: tuple[str, ...] = Field(default=DEFAULT_SKIP_SEGMENTS)
    skip_suffixes: tuple[str, ...] = Field(default=DEFAULT_SKIP_SUFFIXES)
    manifest_file: str = Field(default="package.json")
    readme_file: str = Field(default="README.md")
    package_manager: str = Field(
        default="npm", description='Install command, or "auto" to prefer yarn when present'
    )
    install_args: list[str] = Field(default_factory=lambda: ["install"])
    initial_commit_message: str = Field(default="Initial commit from nodejs-fs")

    @classmethod
    def from_env(cls) -> "ScaffoldConfig":
        """Build a ``ScaffoldConfig`` from environment variables.

        Recognised variables (all optional):
            NODEJS_FS_TEMPLATES_DIR, NODEJS_FS_PACKAGE_MANAGER.
        """
        kwargs: dict[str, Any] = {}
        if os.environ.get("NODEJS_FS_TEMPLATES_DIR"):
            kwargs["templates_dir"] = Path(os.environ["NODEJS_FS_TEMPLATES_DIR"])
        if os.environ.get("NODEJS_FS_PACKAGE_MANAGER"):
            kwargs["package_manager"] = os.environ["NODEJS_FS_PACKAGE_MANAGER"]
        return cls(**kwargs)
