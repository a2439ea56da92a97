from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from pathlib import Path

from .errors import InstallError

LAUNCHER_DIR_SUFFIX = Path(".local") / "var" / "deno-native-messaging"
DEFAULT_RUNTIME = "deno"


def expand_path(raw: str) -> str:
    return str(Path(raw).expanduser())


def _env_flag(name: str, default: str = "1") -> bool:
    return str(os.environ.get(name) or default).strip().lower() not in {"0", "false", "no", "off"}


def _env_number(name: str, default: str, kind: type[float] | type[int]) -> float | int:
    raw = os.environ.get(name, default)
    try:
        return kind(raw)
    except ValueError:
        raise InstallError(f"{name} must be a number, got {raw!r}", step="config") from None


@dataclass
class InstallerConfig:
    home: Path
    platform: str
    runtime: str = DEFAULT_RUNTIME
    prewarm: bool = True
    http_timeout: float = 10.0
    http_max_bytes: int = 1_000_000
    cache_timeout: float = 120.0

    @staticmethod
    def normalize_platform(raw: str | None) -> str:
        platform = (raw or "").strip()
        if platform.startswith("linux"):
            return "linux"
        return platform

    @staticmethod
    def detect_home() -> Path:
        env_home = os.environ.get("HOME")
        if env_home:
            return Path(expand_path(env_home))
        return Path.home()

    @classmethod
    def from_env(cls) -> InstallerConfig:
        runtime = (os.environ.get("DENO_NATIVE_HOST_RUNTIME") or "").strip() or DEFAULT_RUNTIME
        timeout = _env_number("DENO_NATIVE_HOST_HTTP_TIMEOUT", "10", float)
        max_bytes = _env_number("DENO_NATIVE_HOST_HTTP_MAX_BYTES", "1000000", int)
        cache_timeout = _env_number("DENO_NATIVE_HOST_CACHE_TIMEOUT", "120", float)
        return cls(
            home=cls.detect_home(),
            platform=cls.normalize_platform(sys.platform),
            runtime=runtime,
            prewarm=_env_flag("DENO_NATIVE_HOST_PREWARM"),
            http_timeout=timeout,
            http_max_bytes=max_bytes,
            cache_timeout=cache_timeout,
        )

    @property
    def launcher_dir(self) -> Path:
        return self.home / LAUNCHER_DIR_SUFFIX

    def launcher_path(self, resource_id: str) -> Path:
        return self.launcher_dir / f"{resource_id}.sh"


__all__ = ["DEFAULT_RUNTIME", "LAUNCHER_DIR_SUFFIX", "InstallerConfig", "expand_path"]
