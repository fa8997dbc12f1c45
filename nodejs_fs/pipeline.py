"""nodejs-fs project creation pipeline.

Runs the scaffolding steps strictly in order:

validate   -- Check the project name.
directory  -- Create (or reuse an empty) project directory.
copy       -- Copy the template tree, never overwriting existing files.
configure  -- Stamp the project name into package.json and README.md.
install    -- (optional) Install dependencies with the package manager.
git        -- (optional) Initialise a git repository with a first commit.

The first fatal failure stops the run.  Nothing is rolled back: rerunning
against the same directory resumes safely because the copy step only adds
missing files.  Install and git failures are downgraded to warnings unless
``--verbose`` is given.

Usage::

    python -m nodejs_fs my-api
    python -m nodejs_fs my-api --no-install --git --template secure
"""

from __future__ import annotations

import asyncio
import contextlib
import sys
import traceback
from collections.abc import Awaitable, Callable, Iterator
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from nodejs_fs import __version__
from nodejs_fs.config import ProjectOptions, ProjectRequest, ScaffoldConfig, TemplateVariant
from nodejs_fs.errors import (
    CommandError,
    OptionalStepError,
    ScaffoldError,
    translate_os_error,
)
from nodejs_fs.runner import CommandRunner, SubprocessRunner, detect_package_manager
from nodejs_fs.scaffolder import (
    copy_template,
    resolve_project_directory,
    resolve_template,
    update_project_config,
    validate_project_name,
)
from nodejs_fs.utils import (
    console,
    err_console,
    print_banner,
    print_blank,
    print_debug,
    print_error,
    print_info,
    print_step,
    print_success,
    print_warning,
    spinner,
)

# ---------------------------------------------------------------------------
# Result model
# ---------------------------------------------------------------------------


class ScaffoldState(str, Enum):
    """States a run moves through.  ``FAILED`` can follow any other state."""

    VALIDATING = "validating"
    DIRECTORY_READY = "directory_ready"
    TEMPLATE_COPIED = "template_copied"
    CONFIGURED = "configured"
    DEPENDENCIES_INSTALLED = "dependencies_installed"
    VERSION_CONTROL_INITIALIZED = "version_control_initialized"
    DONE = "done"
    FAILED = "failed"


@dataclass
class ScaffoldResult:
    """Outcome of one :meth:`ProjectCreator.create` call."""

    request: ProjectRequest
    project_path: Path | None = None
    state: ScaffoldState = ScaffoldState.VALIDATING
    history: list[ScaffoldState] = field(default_factory=lambda: [ScaffoldState.VALIDATING])
    copied_files: list[Path] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    failed_step: str | None = None
    error: ScaffoldError | None = None

    @property
    def success(self) -> bool:
        return self.state is ScaffoldState.DONE

    def advance(self, state: ScaffoldState) -> None:
        self.state = state
        self.history.append(state)


@dataclass
class _Step:
    name: str
    title: str
    state: ScaffoldState | None
    # Returns False when the step was skipped and its state not reached.
    action: Callable[[ProjectRequest, ScaffoldResult], Awaitable[bool]]


# ---------------------------------------------------------------------------
# Orchestrator
# ---------------------------------------------------------------------------


class ProjectCreator:
    """Drives a single project through the scaffolding steps.

    Attributes:
        config: Tool-level settings (template location, package manager...).
        runner: Executes external commands for the optional steps.
    """

    def __init__(
        self,
        config: ScaffoldConfig | None = None,
        runner: CommandRunner | None = None,
    ) -> None:
        self.config = config or ScaffoldConfig()
        self.runner: CommandRunner = runner or SubprocessRunner()

    async def create(self, request: ProjectRequest) -> ScaffoldResult:
        """Scaffold the project described by *request*.

        Never raises for expected failures; inspect ``result.success`` and
        ``result.error`` instead.
        """
        result = ScaffoldResult(request=request)

        for step in self._plan(request.options):
            print_step(step.title)
            try:
                reached = await step.action(request, result)
            except (ScaffoldError, OSError) as exc:
                self._fail(result, step.name, exc)
                return result
            if reached and step.state is not None:
                result.advance(step.state)
            print_blank()

        result.advance(ScaffoldState.DONE)
        return result

    # -- Planning ----------------------------------------------------------

    def _plan(self, options: ProjectOptions) -> list[_Step]:
        steps = [
            _Step("validate", "Validating project name...", None, self._validate),
            _Step(
                "directory",
                "Creating project directory...",
                ScaffoldState.DIRECTORY_READY,
                self._prepare_directory,
            ),
            _Step(
                "copy",
                "Setting up project structure...",
                ScaffoldState.TEMPLATE_COPIED,
                self._copy_template,
            ),
            _Step(
                "configure",
                "Updating project configuration...",
                ScaffoldState.CONFIGURED,
                self._configure,
            ),
        ]
        if options.install:
            steps.append(
                _Step(
                    "install",
                    "Installing dependencies...",
                    ScaffoldState.DEPENDENCIES_INSTALLED,
                    self._install_dependencies,
                )
            )
        if options.git:
            steps.append(
                _Step(
                    "git",
                    "Initializing git repository...",
                    ScaffoldState.VERSION_CONTROL_INITIALIZED,
                    self._init_git,
                )
            )
        return steps

    def _fail(self, result: ScaffoldResult, step: str, exc: BaseException) -> None:
        friendly = translate_os_error(exc, step=step)
        if friendly is not None:
            friendly.__cause__ = exc
            error = friendly
        elif isinstance(exc, ScaffoldError):
            error = exc
        else:
            error = ScaffoldError(str(exc), step=step)
            error.__cause__ = exc
        if not error.step:
            error.step = step

        result.failed_step = step
        result.error = error
        result.advance(ScaffoldState.FAILED)

    # -- Fatal steps -------------------------------------------------------

    async def _validate(self, request: ProjectRequest, result: ScaffoldResult) -> bool:
        validate_project_name(
            request.name,
            reserved=self.config.reserved_names,
            max_length=self.config.max_name_length,
        )
        print_success(f'Project name "{request.name}" is valid')
        return True

    async def _prepare_directory(self, request: ProjectRequest, result: ScaffoldResult) -> bool:
        result.project_path = await resolve_project_directory(
            request.name, request.target_directory, verbose=request.options.verbose
        )
        print_success(f"Project directory ready: {request.name}")
        return True

    async def _copy_template(self, request: ProjectRequest, result: ScaffoldResult) -> bool:
        project_path = _require_project_path(result)
        verbose = request.options.verbose
        template = resolve_template(request.options.template, self.config.templates_dir)
        print_debug(f"Template '{request.options.template.value}' -> {template.name}", verbose)

        with _progress("Copying template files...", verbose):
            result.copied_files = await copy_template(
                template.source_root,
                project_path,
                skip_segments=self.config.skip_segments,
                skip_suffixes=self.config.skip_suffixes,
                verbose=verbose,
            )
        print_success(f"Template files copied ({len(result.copied_files)} new)")
        return True

    async def _configure(self, request: ProjectRequest, result: ScaffoldResult) -> bool:
        project_path = _require_project_path(result)
        with _progress("Configuring project...", request.options.verbose):
            await update_project_config(
                project_path,
                request.name,
                manifest_file=self.config.manifest_file,
                readme_file=self.config.readme_file,
                verbose=request.options.verbose,
            )
        print_success("Project configured")
        return True

    # -- Optional steps ----------------------------------------------------

    async def _install_dependencies(
        self, request: ProjectRequest, result: ScaffoldResult
    ) -> bool:
        project_path = _require_project_path(result)
        verbose = request.options.verbose
        manager = self.config.package_manager
        if manager == "auto":
            manager = await detect_package_manager(self.runner)
        manual = " ".join([manager, *self.config.install_args])

        if not await self.runner.command_exists(manager):
            self._warn(result, f"{manager} not found. Skipping dependency installation.")
            print_info(f"Please install dependencies manually with: {manual}")
            return False

        try:
            with _progress("Installing dependencies (this may take a few minutes)...", verbose):
                await self.runner.run(
                    manager, self.config.install_args, cwd=project_path, verbose=verbose
                )
        except CommandError as exc:
            return self._optional_failure(
                result,
                "Failed to install dependencies",
                exc,
                remedy=f"You can install dependencies manually by running: {manual}",
                step="install",
                verbose=verbose,
            )

        print_success("Dependencies installed")
        return True

    async def _init_git(self, request: ProjectRequest, result: ScaffoldResult) -> bool:
        project_path = _require_project_path(result)
        verbose = request.options.verbose

        if not await self.runner.command_exists("git"):
            self._warn(result, "git not found. Skipping git initialization.")
            return False

        commands = [
            ["init"],
            ["add", "."],
            ["commit", "-m", self.config.initial_commit_message],
        ]
        try:
            with _progress("Initializing git repository...", verbose):
                for args in commands:
                    await self.runner.run("git", args, cwd=project_path, verbose=verbose)
        except CommandError as exc:
            return self._optional_failure(
                result,
                "Failed to initialize git repository",
                exc,
                remedy="You can initialize it manually by running: git init",
                step="git",
                verbose=verbose,
            )

        print_success("Git repository initialized")
        return True

    def _optional_failure(
        self,
        result: ScaffoldResult,
        message: str,
        exc: CommandError,
        *,
        remedy: str,
        step: str,
        verbose: bool,
    ) -> bool:
        """Escalate in verbose mode, otherwise record a warning and carry on."""
        if verbose:
            raise OptionalStepError(f"{message}: {exc}", step=step) from exc
        self._warn(result, f"{message}: {exc}")
        print_info(remedy)
        return False

    @staticmethod
    def _warn(result: ScaffoldResult, message: str) -> None:
        result.warnings.append(message)
        print_warning(message)


async def create_project(
    request: ProjectRequest,
    *,
    config: ScaffoldConfig | None = None,
    runner: CommandRunner | None = None,
) -> ScaffoldResult:
    """Convenience wrapper around :meth:`ProjectCreator.create`."""
    return await ProjectCreator(config, runner).create(request)


def _require_project_path(result: ScaffoldResult) -> Path:
    if result.project_path is None:
        raise ScaffoldError("Project directory has not been prepared")
    return result.project_path


@contextlib.contextmanager
def _progress(message: str, verbose: bool) -> Iterator[None]:
    # Child processes write straight to the terminal in verbose mode, which
    # would garble a live spinner.
    if verbose:
        print_debug(message, verbose)
        yield
        return
    with spinner(message):
        yield


# ---------------------------------------------------------------------------
# Console output
# ---------------------------------------------------------------------------


def _print_next_steps(request: ProjectRequest) -> None:
    print_banner("PROJECT CREATED SUCCESSFULLY!", style="bright_green")
    console.print(f"[cyan]Your project is ready at:[/cyan] [bold]./{request.name}[/bold]")
    console.print()
    console.print("[yellow]Next steps:[/yellow]")
    console.print()
    console.print(f"   cd {request.name}")
    if not request.options.install:
        console.print("   npm install")
    console.print("   cp .env.example .env")
    console.print("   # Edit .env with your configuration")
    console.print("   npm run dev")
    console.print()
    console.print("[cyan]Documentation:[/cyan] README.md")
    console.print()


def _print_failure(result: ScaffoldResult) -> None:
    error = result.error
    print_error(str(error) if error is not None else "Project creation failed")
    if result.request.options.verbose and error is not None:
        detail = "".join(traceback.format_exception(error))
        err_console.print(detail, style="dim", markup=False, highlight=False)


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for ``nodejs-fs`` and ``python -m nodejs_fs``."""
    import argparse

    parser = argparse.ArgumentParser(
        prog="nodejs-fs",
        description="Generate a production-ready Express + Mongoose backend",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  nodejs-fs my-api\n"
            "  nodejs-fs my-api --no-install --git\n"
            "  nodejs-fs my-api --template secure --verbose\n"
        ),
    )

    parser.add_argument(
        "project_name",
        nargs="?",
        help="Name of your project",
    )
    parser.add_argument(
        "-v", "--version",
        action="version",
        version=__version__,
        help="Output the current version",
    )
    parser.add_argument(
        "--no-install",
        dest="install",
        action="store_false",
        help="Skip npm install",
    )
    parser.add_argument(
        "--git",
        action="store_true",
        help="Initialize git repository",
    )
    parser.add_argument(
        "--template",
        choices=[variant.value for variant in TemplateVariant],
        default=TemplateVariant.FULL.value,
        help="Template type: basic, secure, full (default: full)",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Show detailed logs and fail on install/git errors",
    )
    parser.add_argument(
        "--typescript",
        action="store_true",
        help="Use TypeScript (not implemented yet)",
    )

    args = parser.parse_args(argv)

    if args.project_name is None:
        parser.print_help()
        return

    print_banner("NODEJS-FS Generator")

    if args.typescript:
        print_warning("TypeScript support is coming soon!")
        print_warning("Generating JavaScript project for now...")
        print_blank()

    request = ProjectRequest(
        name=args.project_name,
        target_directory=Path.cwd(),
        options=ProjectOptions(
            install=args.install,
            git=args.git,
            template=TemplateVariant(args.template),
            verbose=args.verbose,
            typescript=args.typescript,
        ),
    )

    result = asyncio.run(create_project(request, config=ScaffoldConfig.from_env()))

    if not result.success:
        _print_failure(result)
        sys.exit(1)

    _print_next_steps(request)


if __name__ == "__main__":
    main()
