from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

import yaml
from jsonschema import Draft202012Validator

from create_sandbox_app.connectivity import DEFAULT_REGISTRY_HOST
from create_sandbox_app.errors import ConfigError
from create_sandbox_app.templates import BUNDLED_TEMPLATES_DIR

CONFIG_PATH_ENV = "CREATE_SANDBOX_APP_CONFIG"
TEMPLATES_DIR_ENV = "CREATE_SANDBOX_APP_TEMPLATES_DIR"
NO_UPDATE_CHECK_ENV = "CREATE_SANDBOX_APP_NO_UPDATE_CHECK"

DEFAULT_PACKAGE_INDEX_URL = "https://pypi.org/pypi"

_CONFIG_SCHEMA: dict[str, Any] = {
    "type": "object",
    "additionalProperties": False,
    "properties": {
        "default_template": {"type": "string", "minLength": 1},
        "templates_dir": {"type": "string", "minLength": 1},
        "registry_host": {"type": "string", "minLength": 1},
        "update_check": {"type": "boolean"},
        "package_index_url": {"type": "string", "minLength": 1},
    },
}

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class AppConfig:
    default_template: str = "default"
    templates_dir: Path = BUNDLED_TEMPLATES_DIR
    registry_host: str = DEFAULT_REGISTRY_HOST
    update_check: bool = True
    package_index_url: str = DEFAULT_PACKAGE_INDEX_URL
    source_path: Path | None = None


def _env_bool(raw: str | None, *, default: bool) -> bool:
    if raw is None:
        return default
    v = raw.strip().lower()
    if v in _TRUTHY:
        return True
    if v in _FALSY:
        return False
    return default


def _load_yaml_mapping(path: Path) -> dict[str, Any]:
    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ConfigError(f"Failed to read {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Failed to parse YAML in {path}: {e}") from e

    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(raw).__name__}.")
    return raw


def validate_config_data(data: Any) -> list[str]:
    validator = Draft202012Validator(_CONFIG_SCHEMA)
    errors = sorted(validator.iter_errors(data), key=lambda e: (str(e.path), e.message))
    formatted: list[str] = []
    for error in errors:
        path = "$"
        for part in error.path:
            path += f"[{part!r}]" if isinstance(part, int) else f".{part}"
        formatted.append(f"{path}: {error.message}")
    return formatted


def _config_from_mapping(data: dict[str, Any], *, source_path: Path) -> AppConfig:
    problems = validate_config_data(data)
    if problems:
        raise ConfigError(
            f"Invalid config {source_path}:\n" + "\n".join(f"  - {p}" for p in problems),
            code="invalid_config",
            details={"problems": problems},
        )

    cfg = AppConfig(source_path=source_path)
    if "default_template" in data:
        cfg = replace(cfg, default_template=data["default_template"])
    if "templates_dir" in data:
        templates_dir = Path(data["templates_dir"]).expanduser()
        if not templates_dir.is_absolute():
            templates_dir = source_path.parent / templates_dir
        cfg = replace(cfg, templates_dir=templates_dir.resolve())
    if "registry_host" in data:
        cfg = replace(cfg, registry_host=data["registry_host"])
    if "update_check" in data:
        cfg = replace(cfg, update_check=data["update_check"])
    if "package_index_url" in data:
        cfg = replace(cfg, package_index_url=data["package_index_url"].rstrip("/"))
    return cfg


def load_config(path: Path | None = None, *, env: Mapping[str, str] | None = None) -> AppConfig:
    environ = os.environ if env is None else env

    if path is None:
        raw_path = (environ.get(CONFIG_PATH_ENV) or "").strip()
        path = Path(raw_path) if raw_path else None

    if path is None:
        cfg = AppConfig()
    else:
        resolved = path.expanduser().resolve()
        if not resolved.exists():
            raise ConfigError(f"Config file not found: {resolved}")
        cfg = _config_from_mapping(_load_yaml_mapping(resolved), source_path=resolved)

    templates_override = (environ.get(TEMPLATES_DIR_ENV) or "").strip()
    if templates_override:
        cfg = replace(cfg, templates_dir=Path(templates_override).expanduser().resolve())
    if _env_bool(environ.get(NO_UPDATE_CHECK_ENV), default=False):
        cfg = replace(cfg, update_check=False)
    return cfg
