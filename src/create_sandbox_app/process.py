from __future__ import annotations

import os
import shutil
import subprocess
import sys
from collections.abc import Mapping
from pathlib import Path

DEBUG_ENV = "CREATE_SANDBOX_APP_DEBUG"


def _eprint(*args: object) -> None:
    print(*args, file=sys.stderr)


def _debug_enabled() -> bool:
    return bool(os.environ.get(DEBUG_ENV, "").strip())


def resolve_argv(argv: list[str]) -> list[str]:
    """Resolve argv[0] via PATH for cross-platform execution.

    On Windows, package manager entrypoints (`npm`, `yarn`, `pnpm`) are usually `.cmd` shims. `subprocess.run()`
    cannot execute `.cmd`/`.bat` files directly, so they are invoked via `cmd.exe /c`.
    """

    if not argv:
        raise ValueError("Internal error: empty argv")

    cmd = argv[0]
    if any(sep and sep in cmd for sep in ("/", "\\", os.path.sep, os.path.altsep)):
        return argv

    resolved = shutil.which(cmd)
    if resolved is None:
        return argv

    if os.name == "nt":
        suffix = Path(resolved).suffix.lower()
        if suffix in {".cmd", ".bat"}:
            comspec = os.environ.get("ComSpec", "cmd.exe")
            return [comspec, "/d", "/c", resolved, *argv[1:]]

    return [resolved, *argv[1:]]


def run_captured(
    argv: list[str],
    *,
    cwd: Path | None = None,
) -> subprocess.CompletedProcess[str]:
    resolved_argv = resolve_argv(argv)
    if _debug_enabled():
        _eprint(f"+ ({cwd or Path.cwd()}) {' '.join(argv)}")
    return subprocess.run(
        resolved_argv,
        cwd=str(cwd) if cwd is not None else None,
        capture_output=True,
        text=True,
        encoding="utf-8",
        errors="replace",
        check=False,
    )


def run_streaming(
    argv: list[str],
    *,
    cwd: Path,
    env: Mapping[str, str] | None = None,
) -> int:
    """Run a command with inherited stdio and wait for it to exit."""
    resolved_argv = resolve_argv(argv)
    if _debug_enabled():
        _eprint(f"+ ({cwd}) {' '.join(argv)}")
        if resolved_argv != argv:
            _eprint(f"  -> ({cwd}) {' '.join(resolved_argv)}")
    proc = subprocess.run(
        resolved_argv,
        cwd=str(cwd),
        env=dict(env) if env is not None else None,
        check=False,
    )
    return proc.returncode
