#!/usr/bin/env python
from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Any

from create_sandbox_app import __version__
from create_sandbox_app.config import AppConfig, load_config
from create_sandbox_app.errors import ConfigError
from create_sandbox_app.models import ScaffoldRequest
from create_sandbox_app.naming import validate_project_name
from create_sandbox_app.orchestrator import create_app, report_abort
from create_sandbox_app.package_manager import select_package_manager
from create_sandbox_app.update_check import notify_update

PROG = "create-sandbox-app"
DEFAULT_PROJECT_NAME = "my-app"


def _enable_console_backslashreplace(stream: Any) -> None:
    reconfigure = getattr(stream, "reconfigure", None)
    if not callable(reconfigure):
        return
    try:
        if str(getattr(stream, "errors", "")).lower() == "backslashreplace":
            return
        reconfigure(errors="backslashreplace")
    except Exception:
        return


def _configure_console_output() -> None:
    _enable_console_backslashreplace(sys.stdout)
    _enable_console_backslashreplace(sys.stderr)


def _usage_hint() -> str:
    return (
        "\n"
        "Please specify the project directory:\n"
        f"  {PROG} <project-directory>\n"
        "\n"
        "For example:\n"
        f"  {PROG} {DEFAULT_PROJECT_NAME}\n"
        "\n"
        f"Run {PROG} --help to see all options.\n"
    )


def _stdin_is_interactive() -> bool:
    isatty = getattr(sys.stdin, "isatty", None)
    return bool(callable(isatty) and isatty())


def prompt_project_name() -> str | None:
    while True:
        try:
            raw = input(f"What is your project named? ({DEFAULT_PROJECT_NAME}) ")
        except EOFError:
            return None
        name = raw.strip() or DEFAULT_PROJECT_NAME
        validation = validate_project_name(Path(name).resolve().name)
        if validation.valid:
            return name
        print(f"Invalid project name: {', '.join(validation.problems)}", file=sys.stderr)


def _run_update_check(config: AppConfig, *, enabled: bool) -> None:
    if not enabled or not config.update_check:
        return
    notify_update(__version__, index_url=config.package_index_url)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=PROG,
        description="Bootstrap a new application from a template.",
    )
    parser.add_argument("project_directory", nargs="?", help="Directory to create the app in.")
    parser.add_argument(
        "--use-npm",
        action="store_true",
        help="Explicitly tell the CLI to bootstrap the app using npm.",
    )
    parser.add_argument(
        "--use-pnpm",
        action="store_true",
        help="Explicitly tell the CLI to bootstrap the app using pnpm.",
    )
    parser.add_argument(
        "--use-yarn",
        action="store_true",
        help="Explicitly tell the CLI to bootstrap the app using Yarn.",
    )
    parser.add_argument("--template", help="Template to bootstrap from (default: from config, else 'default').")
    parser.add_argument("--config", type=Path, help="Optional YAML config file.")
    parser.add_argument("--skip-install", action="store_true", help="Do not install dependencies.")
    parser.add_argument("--no-git", dest="init_git", action="store_false", help="Skip git initialization.")
    parser.add_argument(
        "--no-update-check",
        dest="update_check",
        action="store_false",
        help="Do not check the package index for a newer release.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv: list[str] | None = None) -> int:
    _configure_console_output()
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = load_config(args.config)
    except ConfigError as e:
        return report_abort(e)

    project_name = (args.project_directory or "").strip()
    if not project_name and _stdin_is_interactive():
        project_name = (prompt_project_name() or "").strip()
    if not project_name:
        print(_usage_hint(), file=sys.stderr)
        return 1

    package_manager = select_package_manager(
        use_npm=bool(args.use_npm),
        use_pnpm=bool(args.use_pnpm),
        use_yarn=bool(args.use_yarn),
    )
    request = ScaffoldRequest(
        target_path=Path(project_name).resolve(),
        package_manager=package_manager,
        template_name=args.template or config.default_template,
    )

    result = create_app(
        request,
        config=config,
        original_directory=Path.cwd(),
        skip_install=bool(args.skip_install),
        init_git=bool(args.init_git),
    )
    if result.error is not None:
        report_abort(result.error)

    _run_update_check(config, enabled=bool(args.update_check))
    return result.exit_code


if __name__ == "__main__":
    raise SystemExit(main())
