"""nodejs-fs scaffolder -- turns a template tree into a new project.

The individual steps are plain async functions so that the orchestrator in
``nodejs_fs.pipeline`` (or a test) can drive them one at a time.

Quick usage::

    from nodejs_fs.scaffolder import (
        copy_template,
        resolve_project_directory,
        resolve_template,
        update_project_config,
        validate_project_name,
    )

    validate_project_name("my-api")
    project_path = await resolve_project_directory("my-api")
    template = resolve_template("full", templates_dir)
    await copy_template(template.source_root, project_path)
    await update_project_config(project_path, "my-api")
"""

from nodejs_fs.scaffolder.configurator import update_package_json, update_project_config
from nodejs_fs.scaffolder.copier import copy_template, resolve_template, should_skip
from nodejs_fs.scaffolder.directory import is_dir_empty, resolve_project_directory
from nodejs_fs.scaffolder.placeholders import (
    replace_placeholders,
    replace_placeholders_in_text,
)
from nodejs_fs.scaffolder.validator import validate_project_name

__all__ = [
    "copy_template",
    "is_dir_empty",
    "replace_placeholders",
    "replace_placeholders_in_text",
    "resolve_project_directory",
    "resolve_template",
    "should_skip",
    "update_package_json",
    "update_project_config",
    "validate_project_name",
]
