from __future__ import annotations

from typing import Any

from create_sandbox_app.models import ConflictReport, ProcessOutcome


class ScaffoldError(RuntimeError):
    def __init__(
        self,
        message: str,
        *,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.details = details or {}


class ConfigError(ScaffoldError):
    pass


class PathNotWritableError(ScaffoldError):
    def __init__(self, path: str) -> None:
        super().__init__(
            "The application path is not writable, please check folder permissions and try again.\n"
            "It is likely you do not have write permissions for this folder.",
            code="path_not_writable",
            details={"path": path},
        )
        self.path = path


class DirectoryConflictError(ScaffoldError):
    def __init__(self, app_name: str, report: ConflictReport) -> None:
        super().__init__(
            f"The directory {app_name} contains files that could conflict.",
            code="directory_conflict",
            details={"conflicts": [c.name for c in report.conflicts]},
        )
        self.app_name = app_name
        self.report = report


class InvalidProjectNameError(ScaffoldError):
    def __init__(self, name: str, problems: tuple[str, ...]) -> None:
        super().__init__(
            f'Could not create a project called "{name}" because of npm naming restrictions.',
            code="invalid_name",
            details={"problems": list(problems)},
        )
        self.name = name
        self.problems = problems


class TemplateNotFoundError(ScaffoldError):
    def __init__(self, name: str, available: list[str]) -> None:
        listing = ", ".join(available) if available else "(none)"
        super().__init__(
            f"Template {name!r} does not exist. Available templates: {listing}",
            code="template_not_found",
            details={"template": name, "available": list(available)},
        )
        self.name = name
        self.available = list(available)


class InstallFailure(ScaffoldError):
    def __init__(self, outcome: ProcessOutcome) -> None:
        super().__init__(
            f"{outcome.failing_command} has failed (exit code {outcome.exit_code}).",
            code="install_failed",
            details={"exit_code": outcome.exit_code, "command": outcome.failing_command},
        )
        self.outcome = outcome

    @property
    def command(self) -> str:
        return self.outcome.failing_command
