from __future__ import annotations

from typing import Any

import requests
from packaging.version import InvalidVersion, Version

DIST_NAME = "create-sandbox-app"
_REQUEST_TIMEOUT_SECONDS = 5


def fetch_latest_version(
    *,
    index_url: str,
    dist_name: str = DIST_NAME,
    session: Any | None = None,
) -> str | None:
    http = session or requests.Session()
    res = http.get(f"{index_url.rstrip('/')}/{dist_name}/json", timeout=_REQUEST_TIMEOUT_SECONDS)
    if res.status_code != 200:
        return None
    payload = res.json()
    if not isinstance(payload, dict):
        return None
    info = payload.get("info")
    if not isinstance(info, dict):
        return None
    latest = info.get("version")
    return latest if isinstance(latest, str) and latest.strip() else None


def newer_version_available(current: str, latest: str | None) -> bool:
    if latest is None:
        return False
    try:
        return Version(latest) > Version(current)
    except InvalidVersion:
        return False


def notify_update(
    current_version: str,
    *,
    index_url: str,
    session: Any | None = None,
) -> bool:
    """Print an upgrade hint when a newer release exists. Never raises."""
    try:
        latest = fetch_latest_version(index_url=index_url, session=session)
        if not newer_version_available(current_version, latest):
            return False
        print(
            f"\nA new version of `{DIST_NAME}` is available! ({current_version} -> {latest})\n"
            f"You can update by running: python -m pip install --upgrade {DIST_NAME}\n"
        )
        return True
    except Exception:  # noqa: BLE001
        return False
