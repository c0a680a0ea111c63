from __future__ import annotations

import os
import socket
from collections.abc import Mapping
from urllib.parse import urlparse

from create_sandbox_app.process import run_captured

DEFAULT_REGISTRY_HOST = "registry.yarnpkg.com"
OFFLINE_SENSITIVE_MANAGERS: frozenset[str] = frozenset({"yarn"})

_PROXY_ENV_KEYS: tuple[str, ...] = ("https_proxy", "HTTPS_PROXY")
_UNSET_CONFIG_VALUES: frozenset[str] = frozenset({"", "null", "undefined"})


def dns_resolves(hostname: str) -> bool:
    if not hostname:
        return False
    try:
        socket.getaddrinfo(hostname, None)
    except (OSError, UnicodeError):
        return False
    return True


def _proxy_from_package_manager(package_manager: str) -> str | None:
    try:
        proc = run_captured([package_manager, "config", "get", "https-proxy"])
    except OSError:
        return None
    if proc.returncode != 0:
        return None
    value = proc.stdout.strip()
    if value in _UNSET_CONFIG_VALUES:
        return None
    return value


def get_proxy(package_manager: str, env: Mapping[str, str] | None = None) -> str | None:
    environ = os.environ if env is None else env
    for key in _PROXY_ENV_KEYS:
        value = (environ.get(key) or "").strip()
        if value:
            return value
    return _proxy_from_package_manager(package_manager)


def _proxy_hostname(proxy: str) -> str | None:
    try:
        parsed = urlparse(proxy)
        hostname = parsed.hostname
    except ValueError:
        return None
    return hostname or None


def is_online(
    package_manager: str,
    *,
    registry_host: str = DEFAULT_REGISTRY_HOST,
    env: Mapping[str, str] | None = None,
) -> bool:
    if dns_resolves(registry_host):
        return True

    proxy = get_proxy(package_manager, env)
    if not proxy:
        return False
    hostname = _proxy_hostname(proxy)
    if hostname is None:
        return False
    return dns_resolves(hostname)


def probe_connectivity(
    package_manager: str,
    *,
    registry_host: str = DEFAULT_REGISTRY_HOST,
    env: Mapping[str, str] | None = None,
) -> bool:
    """Only the offline-sensitive manager is probed; the others always install directly."""
    if package_manager not in OFFLINE_SENSITIVE_MANAGERS:
        return True
    return is_online(package_manager, registry_host=registry_host, env=env)
