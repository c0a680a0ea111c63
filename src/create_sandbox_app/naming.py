"""Project name validation following the npm registry naming rules.

Mirrors what `validate-npm-package-name` reports for new packages: hard errors
first, then the legacy "warnings" (which also disqualify a new package name).
Every violated rule is reported so the caller can show one complete diagnostic.
"""

from __future__ import annotations

import re
from urllib.parse import quote

from create_sandbox_app.models import ValidationResult

MAX_NAME_LENGTH = 214

BLACKLISTED_NAMES: frozenset[str] = frozenset({"node_modules", "favicon.ico"})

NODE_CORE_MODULES: frozenset[str] = frozenset(
    {
        "assert",
        "async_hooks",
        "buffer",
        "child_process",
        "cluster",
        "console",
        "constants",
        "crypto",
        "dgram",
        "diagnostics_channel",
        "dns",
        "domain",
        "events",
        "fs",
        "http",
        "http2",
        "https",
        "inspector",
        "module",
        "net",
        "os",
        "path",
        "perf_hooks",
        "process",
        "punycode",
        "querystring",
        "readline",
        "repl",
        "stream",
        "string_decoder",
        "sys",
        "timers",
        "tls",
        "trace_events",
        "tty",
        "url",
        "util",
        "v8",
        "vm",
        "wasi",
        "worker_threads",
        "zlib",
    }
)

_SCOPED_NAME_RE = re.compile(r"^(?:@([^/]+?)/)?([^/]+?)$")
_SPECIAL_CHARS_RE = re.compile(r"[~'!()*]")
# Characters encodeURIComponent leaves untouched.
_URL_SAFE = "-_.!~*'()"


def _is_url_safe(value: str) -> bool:
    return quote(value, safe=_URL_SAFE) == value


def _name_errors(name: str) -> list[str]:
    errors: list[str] = []
    if not name:
        errors.append("name length must be greater than zero")
    if name.startswith("."):
        errors.append("name cannot start with a period")
    if name.startswith("_"):
        errors.append("name cannot start with an underscore")
    if name.strip() != name:
        errors.append("name cannot contain leading or trailing spaces")
    if name.lower() in BLACKLISTED_NAMES:
        errors.append(f"{name.lower()} is a blacklisted name")

    if name and not _is_url_safe(name):
        match = _SCOPED_NAME_RE.match(name)
        scoped_ok = False
        if match is not None and match.group(1) is not None:
            user, pkg = match.group(1), match.group(2)
            scoped_ok = _is_url_safe(user) and _is_url_safe(pkg)
        if not scoped_ok:
            errors.append("name can only contain URL-friendly characters")
    return errors


def _name_warnings(name: str) -> list[str]:
    warnings: list[str] = []
    if name in NODE_CORE_MODULES:
        warnings.append(f"{name} is a core module name")
    if len(name) > MAX_NAME_LENGTH:
        warnings.append(f"name can no longer contain more than {MAX_NAME_LENGTH} characters")
    if name.lower() != name:
        warnings.append("name can no longer contain capital letters")
    if _SPECIAL_CHARS_RE.search(name.split("/")[-1]):
        warnings.append('name can no longer contain special characters ("~\'!()*")')
    return warnings


def validate_project_name(name: str) -> ValidationResult:
    problems = [*_name_errors(name), *_name_warnings(name)]
    if not problems:
        return ValidationResult(valid=True)
    return ValidationResult(valid=False, problems=tuple(problems))
