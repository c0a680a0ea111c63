"""Template discovery, manifest synthesis and file-tree materialization.

A template is a plain directory under the templates root. Its `package.json`
declares dependencies but is never copied; the project manifest is synthesized
from it instead. Files are copied verbatim, with one rename rule for dotfiles
that cannot be shipped literally inside a distributed template tree.
"""

from __future__ import annotations

import json
import os
import shutil
from pathlib import Path
from typing import Any

from jsonschema import Draft202012Validator

from create_sandbox_app.errors import ScaffoldError, TemplateNotFoundError

MANIFEST_FILENAME = "package.json"

# Template file name -> name written into the project.
DOTFILE_RENAMES: dict[str, str] = {"gitignore": ".gitignore"}

BUNDLED_TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"

_TEMPLATE_MANIFEST_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "dependencies": {"type": "object", "additionalProperties": {"type": "string"}},
        "devDependencies": {"type": "object", "additionalProperties": {"type": "string"}},
        "scripts": {"type": "object", "additionalProperties": {"type": "string"}},
    },
}


def list_templates(root: Path = BUNDLED_TEMPLATES_DIR) -> list[str]:
    try:
        return sorted(p.name for p in root.iterdir() if p.is_dir() and not p.name.startswith("__"))
    except OSError:
        return []


def check_template(name: str, root: Path = BUNDLED_TEMPLATES_DIR) -> bool:
    return name in list_templates(root)


def resolve_template_dir(name: str, root: Path = BUNDLED_TEMPLATES_DIR) -> Path:
    if not check_template(name, root):
        raise TemplateNotFoundError(name, list_templates(root))
    return root / name


def _format_schema_errors(manifest: Any) -> list[str]:
    validator = Draft202012Validator(_TEMPLATE_MANIFEST_SCHEMA)
    errors = sorted(validator.iter_errors(manifest), key=lambda e: str(e.path))
    formatted: list[str] = []
    for error in errors:
        path = "$"
        for part in error.path:
            path += f"[{part!r}]" if isinstance(part, int) else f".{part}"
        formatted.append(f"{path}: {error.message}")
    return formatted


def load_template_manifest(template_dir: Path) -> dict[str, Any]:
    path = template_dir / MANIFEST_FILENAME
    if not path.exists():
        return {}
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise ScaffoldError(f"Failed to read template manifest {path}: {e}") from e

    problems = _format_schema_errors(raw)
    if problems:
        raise ScaffoldError(
            f"Invalid template manifest {path}:\n" + "\n".join(f"  - {p}" for p in problems),
            code="invalid_template_manifest",
            details={"problems": problems},
        )
    return raw


def dependency_names(manifest: dict[str, Any], *, dev: bool) -> list[str]:
    section = manifest.get("devDependencies" if dev else "dependencies") or {}
    return list(section.keys())


def build_project_manifest(app_name: str, template_manifest: dict[str, Any]) -> dict[str, Any]:
    fixed: dict[str, Any] = {
        "name": app_name,
        "private": True,
        "sideEffects": False,
    }
    merged = dict(fixed)
    for key, value in template_manifest.items():
        if key not in fixed:
            merged[key] = value
    return merged


def write_project_manifest(target_dir: Path, manifest: dict[str, Any]) -> Path:
    path = target_dir / MANIFEST_FILENAME
    path.write_text(json.dumps(manifest, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")
    return path


def _destination_name(name: str) -> str:
    return DOTFILE_RENAMES.get(name, name)


def copy_template(template_dir: Path, target_dir: Path) -> list[Path]:
    """Copy every file of `template_dir` into `target_dir`; returns the written paths."""
    written: list[Path] = []
    for dirpath, dirnames, filenames in os.walk(template_dir):
        dirnames.sort()
        src_dir = Path(dirpath)
        rel_dir = src_dir.relative_to(template_dir)
        dest_dir = target_dir / rel_dir
        for filename in sorted(filenames):
            if rel_dir == Path(".") and filename == MANIFEST_FILENAME:
                continue
            dest_dir.mkdir(parents=True, exist_ok=True)
            dest = dest_dir / _destination_name(filename)
            shutil.copy2(src_dir / filename, dest)
            written.append(dest)
    return written
