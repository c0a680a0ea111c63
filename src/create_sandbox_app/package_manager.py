from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass

from create_sandbox_app.models import PACKAGE_MANAGERS, InstallSpec, PackageManager

USER_AGENT_ENV = "npm_config_user_agent"
DEFAULT_PACKAGE_MANAGER: PackageManager = "npm"


@dataclass(frozen=True)
class InstallerBackend:
    name: PackageManager

    def add_args(self, spec: InstallSpec) -> list[str]:
        raise NotImplementedError

    def restore_args(self, spec: InstallSpec) -> list[str]:
        return ["install"]

    def install_args(self, spec: InstallSpec) -> list[str]:
        if spec.dependency_names:
            return self.add_args(spec)
        return self.restore_args(spec)

    def run_script_command(self, script: str) -> str:
        return f"{self.name} run {script}"


@dataclass(frozen=True)
class NpmBackend(InstallerBackend):
    name: PackageManager = "npm"

    def add_args(self, spec: InstallSpec) -> list[str]:
        return ["install", "--save-dev" if spec.dev else "--save", *spec.dependency_names]


@dataclass(frozen=True)
class PnpmBackend(NpmBackend):
    name: PackageManager = "pnpm"


@dataclass(frozen=True)
class YarnBackend(InstallerBackend):
    name: PackageManager = "yarn"

    def add_args(self, spec: InstallSpec) -> list[str]:
        args = ["add"]
        if not spec.online:
            args.append("--offline")
        args.extend(["--cwd", str(spec.target_dir)])
        if spec.dev:
            args.append("--dev")
        args.extend(spec.dependency_names)
        return args

    def restore_args(self, spec: InstallSpec) -> list[str]:
        if not spec.online:
            return ["install", "--offline"]
        return ["install"]

    def run_script_command(self, script: str) -> str:
        return f"yarn {script}"


BACKENDS: dict[str, InstallerBackend] = {
    "npm": NpmBackend(),
    "yarn": YarnBackend(),
    "pnpm": PnpmBackend(),
}


def get_backend(package_manager: str) -> InstallerBackend:
    try:
        return BACKENDS[package_manager]
    except KeyError as e:
        raise ValueError(f"Unsupported package manager: {package_manager!r}") from e


def detect_from_user_agent(env: Mapping[str, str] | None = None) -> PackageManager | None:
    environ = os.environ if env is None else env
    user_agent = (environ.get(USER_AGENT_ENV) or "").strip()
    for candidate in PACKAGE_MANAGERS:
        if user_agent.startswith(candidate):
            return candidate
    return None


def select_package_manager(
    *,
    use_npm: bool = False,
    use_pnpm: bool = False,
    use_yarn: bool = False,
    env: Mapping[str, str] | None = None,
) -> PackageManager:
    if use_npm:
        return "npm"
    if use_pnpm:
        return "pnpm"
    if use_yarn:
        return "yarn"
    detected = detect_from_user_agent(env)
    if detected is not None:
        return detected
    return DEFAULT_PACKAGE_MANAGER
