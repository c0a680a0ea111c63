from __future__ import annotations

import os

from create_sandbox_app.errors import InstallFailure
from create_sandbox_app.models import InstallSpec, ProcessOutcome
from create_sandbox_app.package_manager import get_backend
from create_sandbox_app.process import run_streaming

# Silences funding/donation banners printed by postinstall scripts.
INSTALL_ENV_OVERRIDES: dict[str, str] = {
    "ADBLOCK": "1",
    "DISABLE_OPENCOLLECTIVE": "1",
    "NODE_ENV": "development",
}

COMMAND_NOT_FOUND_EXIT_CODE = 127


def build_install_argv(spec: InstallSpec) -> list[str]:
    backend = get_backend(spec.package_manager)
    return [backend.name, *backend.install_args(spec)]


def install_env() -> dict[str, str]:
    return {**os.environ, **INSTALL_ENV_OVERRIDES}


def _print_dependency_list(spec: InstallSpec) -> None:
    if not spec.dependency_names:
        return
    heading = "devDependencies" if spec.dev else "dependencies"
    lines = ["", f"Installing {heading}:"]
    lines.extend(f"- {name}" for name in spec.dependency_names)
    print("\n".join(lines) + "\n")


def _print_offline_advisory(spec: InstallSpec) -> None:
    if spec.dependency_names or spec.online:
        return
    print("You appear to be offline.")
    if spec.package_manager == "yarn":
        print("Falling back to the local Yarn cache.")
    print()


def _spawn(argv: list[str], *, spec: InstallSpec) -> int:
    return run_streaming(argv, cwd=spec.target_dir, env=install_env())


def install_dependencies(spec: InstallSpec) -> None:
    argv = build_install_argv(spec)
    command = " ".join(argv)

    _print_dependency_list(spec)
    _print_offline_advisory(spec)

    try:
        exit_code = _spawn(argv, spec=spec)
    except FileNotFoundError:
        exit_code = COMMAND_NOT_FOUND_EXIT_CODE

    if exit_code != 0:
        raise InstallFailure(ProcessOutcome(exit_code=exit_code, failing_command=command))
