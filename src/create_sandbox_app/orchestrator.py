"""Scaffold state machine.

Steps run strictly in order:

    validating -> guarding -> probing -> writing_manifest -> installing_runtime
    -> installing_dev -> materializing -> vcs_init -> done

The first exception moves the run to `aborted` and skips every later step.
Nothing is retried and partially written output is left in place.
`report_abort` is the only place that turns an abort into console output.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import TextIO

from create_sandbox_app.config import AppConfig
from create_sandbox_app.connectivity import probe_connectivity
from create_sandbox_app.errors import (
    DirectoryConflictError,
    InstallFailure,
    InvalidProjectNameError,
    PathNotWritableError,
    ScaffoldError,
)
from create_sandbox_app.fs_guard import ensure_directory, find_conflicts, format_conflicts, is_writeable
from create_sandbox_app.git_ops import try_git_init
from create_sandbox_app.installer import install_dependencies
from create_sandbox_app.models import InstallSpec, ScaffoldRequest, ScaffoldResult, ScaffoldState
from create_sandbox_app.naming import validate_project_name
from create_sandbox_app.package_manager import get_backend
from create_sandbox_app.templates import (
    build_project_manifest,
    copy_template,
    dependency_names,
    load_template_manifest,
    resolve_template_dir,
    write_project_manifest,
)


def _enter(result: ScaffoldResult, state: ScaffoldState) -> None:
    result.state = state
    result.transitions.append(state)


def _validate(request: ScaffoldRequest, config: AppConfig) -> Path:
    validation = validate_project_name(request.app_name)
    if not validation.valid:
        raise InvalidProjectNameError(request.app_name, validation.problems)
    return resolve_template_dir(request.template_name, config.templates_dir)


def _guard(request: ScaffoldRequest) -> None:
    root = request.target_path
    if not is_writeable(root.parent):
        raise PathNotWritableError(str(root.parent))
    ensure_directory(root)
    report = find_conflicts(root)
    if not report.is_safe:
        raise DirectoryConflictError(request.app_name, report)


def create_app(
    request: ScaffoldRequest,
    *,
    config: AppConfig,
    original_directory: Path | None = None,
    skip_install: bool = False,
    init_git: bool = True,
) -> ScaffoldResult:
    result = ScaffoldResult(request=request)
    root = request.target_path
    pm = request.package_manager

    try:
        _enter(result, ScaffoldState.VALIDATING)
        template_dir = _validate(request, config)

        _enter(result, ScaffoldState.GUARDING)
        _guard(request)

        _enter(result, ScaffoldState.PROBING)
        result.online = probe_connectivity(pm, registry_host=config.registry_host)

        print(f"Creating a new app in {root}.\n")
        print(f"Using {pm}.")

        _enter(result, ScaffoldState.WRITING_MANIFEST)
        template_manifest = load_template_manifest(template_dir)
        write_project_manifest(root, build_project_manifest(request.app_name, template_manifest))

        _enter(result, ScaffoldState.INSTALLING_RUNTIME)
        if not skip_install:
            install_dependencies(
                InstallSpec.build(
                    target_dir=root,
                    dependency_names=dependency_names(template_manifest, dev=False),
                    package_manager=pm,
                    online=result.online,
                )
            )

        _enter(result, ScaffoldState.INSTALLING_DEV)
        if not skip_install:
            install_dependencies(
                InstallSpec.build(
                    target_dir=root,
                    dependency_names=dependency_names(template_manifest, dev=True),
                    package_manager=pm,
                    dev=True,
                    online=result.online,
                )
            )

        _enter(result, ScaffoldState.MATERIALIZING)
        copy_template(template_dir, root)

        _enter(result, ScaffoldState.VCS_INIT)
        if init_git:
            result.git_initialized = try_git_init(root)
            if result.git_initialized:
                print("\nInitialized a git repository.")

        _enter(result, ScaffoldState.DONE)
    except Exception as e:  # noqa: BLE001
        result.failed_state = result.state
        result.error = e
        _enter(result, ScaffoldState.ABORTED)
        return result

    print(format_success(request, original_directory=original_directory, skip_install=skip_install))
    return result


def format_success(
    request: ScaffoldRequest,
    *,
    original_directory: Path | None = None,
    skip_install: bool = False,
) -> str:
    backend = get_backend(request.package_manager)
    app_name = request.app_name
    app_path = request.target_path
    base = original_directory if original_directory is not None else Path.cwd()
    cdpath = app_name if (base / app_name) == app_path else str(app_path)

    dev_cmd = backend.run_script_command("dev")
    build_cmd = backend.run_script_command("build")
    start_cmd = f"{backend.name} start"

    begin = [f"  cd {cdpath}"]
    if skip_install:
        begin.append(f"  {backend.name} install")
    begin.append(f"  {dev_cmd}")

    return "\n".join(
        [
            "",
            f"Success! Created {app_name} at {app_path}",
            "Inside that directory, you can run several commands:",
            "",
            f"  {dev_cmd}",
            "    Starts the development server.",
            "",
            f"  {build_cmd}",
            "    Builds the app for production.",
            "",
            f"  {start_cmd}",
            "    Runs the built app in production mode.",
            "",
            "We suggest that you begin by typing:",
            "",
            *begin,
            "",
        ]
    )


def format_abort(error: BaseException) -> str:
    if isinstance(error, InvalidProjectNameError):
        lines = [
            "",
            f'Could not create a project called "{error.name}" because of npm naming restrictions:',
        ]
        lines.extend(f"  * {problem}" for problem in error.problems)
        return "\n".join(lines) + "\n"
    if isinstance(error, DirectoryConflictError):
        return "\n" + format_conflicts(error.app_name, error.report) + "\n"
    if isinstance(error, InstallFailure):
        return f"\nAborting installation.\n  {error.command} has failed.\n"
    if isinstance(error, ScaffoldError):
        return f"\n{error}\n"
    return f"\nAborting installation.\nUnexpected error. Please report it as a bug:\n{error!r}\n"


def report_abort(error: BaseException, *, stream: TextIO | None = None) -> int:
    print(format_abort(error), file=stream if stream is not None else sys.stderr)
    return 1
