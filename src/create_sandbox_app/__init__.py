from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("create-sandbox-app")
except PackageNotFoundError:
    __version__ = "0.0.0"

from create_sandbox_app.errors import (  # noqa: E402
    ConfigError,
    DirectoryConflictError,
    InstallFailure,
    InvalidProjectNameError,
    PathNotWritableError,
    ScaffoldError,
    TemplateNotFoundError,
)
from create_sandbox_app.models import (  # noqa: E402
    ConflictReport,
    InstallSpec,
    ProcessOutcome,
    ScaffoldRequest,
    ScaffoldResult,
    ScaffoldState,
    ValidationResult,
)
from create_sandbox_app.orchestrator import create_app  # noqa: E402

__all__ = [
    "ConfigError",
    "ConflictReport",
    "DirectoryConflictError",
    "InstallFailure",
    "InstallSpec",
    "InvalidProjectNameError",
    "PathNotWritableError",
    "ProcessOutcome",
    "ScaffoldError",
    "ScaffoldRequest",
    "ScaffoldResult",
    "ScaffoldState",
    "TemplateNotFoundError",
    "ValidationResult",
    "__version__",
    "create_app",
]
