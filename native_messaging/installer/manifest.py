from __future__ import annotations

import contextlib
import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from .errors import InstallIOError

_LOGGER = logging.getLogger("native_messaging.installer.manifest")

HOST_TYPE = "stdio"


@dataclass(frozen=True, slots=True)
class ResolvedManifest:
    name: str
    path: str
    description: str
    allowed_origins: list[str] = field(default_factory=list)
    type: str = HOST_TYPE

    def to_dict(self) -> dict[str, object]:
        return {
            "name": self.name,
            "path": self.path,
            "description": self.description,
            "allowed_origins": list(self.allowed_origins),
            "type": self.type,
        }


def render_manifest(manifest: ResolvedManifest) -> str:
    return json.dumps(manifest.to_dict(), ensure_ascii=False, separators=(",", ":"))


def write_manifest(path: Path, manifest: ResolvedManifest) -> Path:
    path = Path(path)
    try:
        path.write_text(render_manifest(manifest), encoding="utf-8")
    except OSError as exc:
        raise InstallIOError(f"failed to write manifest {path}: {exc}", step="write_manifest") from exc
    if os.name != "nt":
        with contextlib.suppress(Exception):
            path.chmod(0o644)
    _LOGGER.info("manifest_written path=%s name=%s", path, manifest.name)
    return path


def read_manifest(path: Path) -> dict[str, object]:
    return json.loads(Path(path).read_text(encoding="utf-8"))


__all__ = ["HOST_TYPE", "ResolvedManifest", "read_manifest", "render_manifest", "write_manifest"]
