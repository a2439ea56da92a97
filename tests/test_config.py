from __future__ import annotations

from pathlib import Path

import pytest

from native_messaging.installer.config import InstallerConfig
from native_messaging.installer.errors import InstallError


def test_config_from_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.setenv("DENO_NATIVE_HOST_RUNTIME", "/opt/deno/bin/deno")
    monkeypatch.setenv("DENO_NATIVE_HOST_PREWARM", "no")
    monkeypatch.setenv("DENO_NATIVE_HOST_HTTP_TIMEOUT", "2.5")

    cfg = InstallerConfig.from_env()

    assert cfg.home == tmp_path
    assert cfg.runtime == "/opt/deno/bin/deno"
    assert cfg.prewarm is False
    assert cfg.http_timeout == 2.5
    assert cfg.launcher_path("com.x") == tmp_path / ".local" / "var" / "deno-native-messaging" / "com.x.sh"


def test_config_defaults(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("HOME", str(tmp_path))
    for name in ("DENO_NATIVE_HOST_RUNTIME", "DENO_NATIVE_HOST_PREWARM", "DENO_NATIVE_HOST_HTTP_TIMEOUT"):
        monkeypatch.delenv(name, raising=False)
    cfg = InstallerConfig.from_env()
    assert cfg.runtime == "deno"
    assert cfg.prewarm is True
    assert cfg.http_max_bytes == 1_000_000


@pytest.mark.parametrize(("raw", "expected"), [("linux", "linux"), ("linux2", "linux"), ("darwin", "darwin")])
def test_normalize_platform(raw: str, expected: str) -> None:
    assert InstallerConfig.normalize_platform(raw) == expected


@pytest.mark.parametrize(
    "name",
    ["DENO_NATIVE_HOST_HTTP_TIMEOUT", "DENO_NATIVE_HOST_HTTP_MAX_BYTES", "DENO_NATIVE_HOST_CACHE_TIMEOUT"],
)
def test_config_rejects_malformed_numbers(monkeypatch: pytest.MonkeyPatch, tmp_path: Path, name: str) -> None:
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.setenv(name, "ten")
    with pytest.raises(InstallError) as exc:
        InstallerConfig.from_env()
    assert exc.value.step == "config"
    assert name in str(exc.value)
