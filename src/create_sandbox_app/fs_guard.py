from __future__ import annotations

import os
import stat
from pathlib import Path

from create_sandbox_app.models import Conflict, ConflictReport

# Entries that may already exist in a fresh project directory without clashing
# with generated files.
ALLOWED_EXISTING_ENTRIES: frozenset[str] = frozenset(
    {
        ".DS_Store",
        ".git",
        ".gitattributes",
        ".gitignore",
        ".gitlab-ci.yml",
        ".hg",
        ".hgcheck",
        ".hgignore",
        ".idea",
        ".npmignore",
        ".travis.yml",
        ".yarn",
        ".yarnrc.yml",
        "LICENSE",
        "README.md",
        "Thumbs.db",
        "docs",
        "mkdocs.yml",
        "npm-debug.log",
        "yarn-debug.log",
        "yarn-error.log",
    }
)

_IDE_MODULE_SUFFIX = ".iml"


def is_writeable(directory: Path) -> bool:
    return os.access(directory, os.W_OK)


def ensure_directory(path: Path) -> None:
    path.mkdir(parents=True, exist_ok=True)


def _is_allowed(name: str) -> bool:
    return name in ALLOWED_EXISTING_ENTRIES or name.endswith(_IDE_MODULE_SUFFIX)


def _is_directory(path: Path) -> bool:
    try:
        return stat.S_ISDIR(path.lstat().st_mode)
    except OSError:
        # Entry vanished or cannot be inspected; list it as a plain file.
        return False


def find_conflicts(root: Path) -> ConflictReport:
    names = sorted(entry.name for entry in root.iterdir())
    conflicts = tuple(
        Conflict(name=name, is_directory=_is_directory(root / name))
        for name in names
        if not _is_allowed(name)
    )
    return ConflictReport(conflicts=conflicts)


def format_conflicts(app_name: str, report: ConflictReport) -> str:
    lines = [f"The directory {app_name} contains files that could conflict:", ""]
    for conflict in report.conflicts:
        suffix = "/" if conflict.is_directory else ""
        lines.append(f"  {conflict.name}{suffix}")
    lines.append("")
    lines.append("Either try using a new directory name, or remove the files listed above.")
    return "\n".join(lines)
