from __future__ import annotations

import subprocess

import pytest

import create_sandbox_app.connectivity as connectivity


def _completed(stdout: str, returncode: int = 0) -> subprocess.CompletedProcess[str]:
    return subprocess.CompletedProcess(args=["yarn"], returncode=returncode, stdout=stdout, stderr="")


def test_online_when_registry_resolves(monkeypatch: pytest.MonkeyPatch) -> None:
    looked_up: list[str] = []

    def _fake_dns(hostname: str) -> bool:
        looked_up.append(hostname)
        return True

    monkeypatch.setattr(connectivity, "dns_resolves", _fake_dns)
    assert connectivity.is_online("yarn", env={}) is True
    assert looked_up == ["registry.yarnpkg.com"]


def test_falls_back_to_proxy_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    looked_up: list[str] = []

    def _fake_dns(hostname: str) -> bool:
        looked_up.append(hostname)
        return hostname == "proxy.internal"

    def _fail_config(*_args, **_kwargs) -> subprocess.CompletedProcess[str]:
        raise AssertionError("package manager config should not be queried when env proxy is set")

    monkeypatch.setattr(connectivity, "dns_resolves", _fake_dns)
    monkeypatch.setattr(connectivity, "run_captured", _fail_config)

    online = connectivity.is_online("yarn", env={"https_proxy": "http://proxy.internal:3128"})
    assert online is True
    assert looked_up == ["registry.yarnpkg.com", "proxy.internal"]


def test_offline_when_proxy_host_does_not_resolve(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(connectivity, "dns_resolves", lambda _host: False)
    assert connectivity.is_online("yarn", env={"HTTPS_PROXY": "http://proxy.internal:3128"}) is False


def test_proxy_from_package_manager_config(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[list[str]] = []

    def _fake_run(argv: list[str], **_kwargs) -> subprocess.CompletedProcess[str]:
        calls.append(argv)
        return _completed("http://corp-proxy:8080\n")

    monkeypatch.setattr(connectivity, "run_captured", _fake_run)
    assert connectivity.get_proxy("yarn", env={}) == "http://corp-proxy:8080"
    assert calls == [["yarn", "config", "get", "https-proxy"]]


@pytest.mark.parametrize("stdout", ["null\n", "undefined\n", "\n"])
def test_unset_package_manager_proxy_means_none(monkeypatch: pytest.MonkeyPatch, stdout: str) -> None:
    monkeypatch.setattr(connectivity, "run_captured", lambda *_a, **_k: _completed(stdout))
    assert connectivity.get_proxy("yarn", env={}) is None


def test_missing_package_manager_means_no_proxy(monkeypatch: pytest.MonkeyPatch) -> None:
    def _raise(*_args, **_kwargs) -> subprocess.CompletedProcess[str]:
        raise FileNotFoundError("yarn")

    monkeypatch.setattr(connectivity, "run_captured", _raise)
    monkeypatch.setattr(connectivity, "dns_resolves", lambda _host: False)
    assert connectivity.get_proxy("yarn", env={}) is None
    assert connectivity.is_online("yarn", env={}) is False


def test_proxy_without_hostname_is_offline(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(connectivity, "dns_resolves", lambda _host: False)
    assert connectivity.is_online("yarn", env={"https_proxy": "not a url"}) is False


def test_only_offline_sensitive_manager_is_probed(monkeypatch: pytest.MonkeyPatch) -> None:
    def _fail_dns(_hostname: str) -> bool:
        raise AssertionError("npm/pnpm must not probe connectivity")

    monkeypatch.setattr(connectivity, "dns_resolves", _fail_dns)
    assert connectivity.probe_connectivity("npm") is True
    assert connectivity.probe_connectivity("pnpm") is True


def test_dns_resolves_handles_lookup_errors(monkeypatch: pytest.MonkeyPatch) -> None:
    def _raise(*_args, **_kwargs):
        raise connectivity.socket.gaierror("no such host")

    monkeypatch.setattr(connectivity.socket, "getaddrinfo", _raise)
    assert connectivity.dns_resolves("registry.yarnpkg.com") is False
    assert connectivity.dns_resolves("") is False
