from __future__ import annotations

import enum
from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal

PackageManager = Literal["npm", "yarn", "pnpm"]

PACKAGE_MANAGERS: tuple[PackageManager, ...] = ("npm", "yarn", "pnpm")


@dataclass(frozen=True)
class ScaffoldRequest:
    target_path: Path
    package_manager: PackageManager
    template_name: str = "default"

    def __post_init__(self) -> None:
        if not self.target_path.is_absolute():
            raise ValueError(f"target_path must be absolute: {self.target_path}")
        if self.package_manager not in PACKAGE_MANAGERS:
            raise ValueError(f"Unsupported package manager: {self.package_manager!r}")

    @property
    def app_name(self) -> str:
        return self.target_path.name


@dataclass(frozen=True)
class ValidationResult:
    valid: bool
    problems: tuple[str, ...] = ()


@dataclass(frozen=True)
class InstallSpec:
    target_dir: Path
    dependency_names: tuple[str, ...]
    package_manager: PackageManager
    dev: bool = False
    online: bool = True

    @classmethod
    def build(
        cls,
        *,
        target_dir: Path,
        dependency_names: list[str] | tuple[str, ...],
        package_manager: PackageManager,
        dev: bool = False,
        online: bool = True,
    ) -> InstallSpec:
        # Set semantics with insertion order kept for display.
        names = tuple(dict.fromkeys(n for n in dependency_names if n))
        return cls(
            target_dir=target_dir,
            dependency_names=names,
            package_manager=package_manager,
            dev=dev,
            online=online,
        )


@dataclass(frozen=True)
class Conflict:
    name: str
    is_directory: bool = False


@dataclass(frozen=True)
class ConflictReport:
    conflicts: tuple[Conflict, ...] = ()

    @property
    def is_safe(self) -> bool:
        return not self.conflicts


@dataclass(frozen=True)
class ProcessOutcome:
    exit_code: int
    failing_command: str


class ScaffoldState(str, enum.Enum):
    VALIDATING = "validating"
    GUARDING = "guarding"
    PROBING = "probing"
    WRITING_MANIFEST = "writing_manifest"
    INSTALLING_RUNTIME = "installing_runtime"
    INSTALLING_DEV = "installing_dev"
    MATERIALIZING = "materializing"
    VCS_INIT = "vcs_init"
    DONE = "done"
    ABORTED = "aborted"


@dataclass
class ScaffoldResult:
    request: ScaffoldRequest
    state: ScaffoldState = ScaffoldState.VALIDATING
    online: bool = True
    git_initialized: bool = False
    error: BaseException | None = None
    failed_state: ScaffoldState | None = None
    transitions: list[ScaffoldState] = field(default_factory=list)

    @property
    def exit_code(self) -> int:
        return 0 if self.state is ScaffoldState.DONE else 1
