"""nodejs-fs -- scaffold a production-ready Express + Mongoose backend.

Quick usage::

    from nodejs_fs import ProjectOptions, ProjectRequest, create_project

    request = ProjectRequest(name="my-api", options=ProjectOptions(install=False))
    result = await create_project(request)
    assert result.success
"""

__version__ = "1.0.0"

from nodejs_fs.config import (  # noqa: E402
    ProjectOptions,
    ProjectRequest,
    ScaffoldConfig,
    TemplateVariant,
)
from nodejs_fs.pipeline import (  # noqa: E402
    ProjectCreator,
    ScaffoldResult,
    ScaffoldState,
    create_project,
)

__all__ = [
    "ProjectCreator",
    "ProjectOptions",
    "ProjectRequest",
    "ScaffoldConfig",
    "ScaffoldResult",
    "ScaffoldState",
    "TemplateVariant",
    "__version__",
    "create_project",
]
