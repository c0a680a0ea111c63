from __future__ import annotations

import shutil
import subprocess
from pathlib import Path

import pytest

import create_sandbox_app.git_ops as git_ops


def _fake_runner(
    monkeypatch: pytest.MonkeyPatch, returncodes: dict[tuple[str, ...], int]
) -> list[list[str]]:
    calls: list[list[str]] = []

    def _fake_run(argv: list[str], *, cwd: Path) -> git_ops.CommandResult:  # noqa: ARG001
        calls.append(argv)
        return git_ops.CommandResult(argv=argv, returncode=returncodes.get(tuple(argv), 1))

    monkeypatch.setattr(git_ops, "_run", _fake_run)
    return calls


def test_skips_when_git_is_missing(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    calls = _fake_runner(monkeypatch, {("git", "--version"): 127})
    assert git_ops.try_git_init(tmp_path) is False
    assert calls == [["git", "--version"]]


def test_skips_inside_existing_git_repository(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    calls = _fake_runner(
        monkeypatch,
        {
            ("git", "--version"): 0,
            ("git", "rev-parse", "--is-inside-work-tree"): 0,
        },
    )
    assert git_ops.try_git_init(tmp_path) is False
    assert ["git", "init"] not in calls


def test_skips_inside_mercurial_repository(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    calls = _fake_runner(
        monkeypatch,
        {
            ("git", "--version"): 0,
            ("hg", "--cwd", ".", "root"): 0,
        },
    )
    assert git_ops.try_git_init(tmp_path) is False
    assert ["git", "init"] not in calls


def test_initializes_when_no_repository_encloses(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    calls = _fake_runner(monkeypatch, {("git", "--version"): 0, ("git", "init"): 0})
    assert git_ops.try_git_init(tmp_path) is True
    assert calls[-1] == ["git", "init"]


def test_missing_executable_maps_to_failure(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    def _raise(*_args, **_kwargs) -> subprocess.CompletedProcess[str]:
        raise FileNotFoundError("git")

    monkeypatch.setattr(git_ops, "run_captured", _raise)
    assert git_ops.git_available(tmp_path) is False
    assert git_ops.try_git_init(tmp_path) is False


@pytest.mark.skipif(shutil.which("git") is None, reason="git not available")
def test_real_git_init_is_idempotent(tmp_path: Path) -> None:
    workspace = tmp_path / "workspace"
    workspace.mkdir()
    if git_ops.is_in_git_repository(workspace):
        pytest.skip("tmp_path is inside a git work tree")

    assert git_ops.try_git_init(workspace) is True
    assert (workspace / ".git").is_dir()
    assert git_ops.try_git_init(workspace) is False
