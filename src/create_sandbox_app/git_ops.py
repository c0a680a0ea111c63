from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from create_sandbox_app.process import run_captured


@dataclass(frozen=True)
class CommandResult:
    argv: list[str]
    returncode: int


def _run(argv: list[str], *, cwd: Path) -> CommandResult:
    try:
        proc = run_captured(argv, cwd=cwd)
    except OSError:
        return CommandResult(argv=argv, returncode=127)
    return CommandResult(argv=argv, returncode=proc.returncode)


def git_available(workspace_dir: Path) -> bool:
    return _run(["git", "--version"], cwd=workspace_dir).returncode == 0


def is_in_git_repository(workspace_dir: Path) -> bool:
    result = _run(["git", "rev-parse", "--is-inside-work-tree"], cwd=workspace_dir)
    return result.returncode == 0


def is_in_mercurial_repository(workspace_dir: Path) -> bool:
    result = _run(["hg", "--cwd", ".", "root"], cwd=workspace_dir)
    return result.returncode == 0


def try_git_init(workspace_dir: Path) -> bool:
    """Initialize a git repository unless one (or a Mercurial one) already encloses the directory."""
    if not git_available(workspace_dir):
        return False
    if is_in_git_repository(workspace_dir) or is_in_mercurial_repository(workspace_dir):
        return False
    return _run(["git", "init"], cwd=workspace_dir).returncode == 0
