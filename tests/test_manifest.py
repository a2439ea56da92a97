from __future__ import annotations

import json
import os
from pathlib import Path

import pytest

from native_messaging.installer.errors import InstallIOError
from native_messaging.installer.manifest import ResolvedManifest, read_manifest, render_manifest, write_manifest


def _manifest() -> ResolvedManifest:
    return ResolvedManifest(
        name="com.example.host",
        path="/home/u/.local/var/deno-native-messaging/com.example.host.sh",
        description="Example host",
        allowed_origins=["chrome-extension://abc123/"],
    )


def test_manifest_fields_and_stdio(tmp_path: Path) -> None:
    path = write_manifest(tmp_path / "host.json", _manifest())
    data = read_manifest(path)
    assert list(data) == ["name", "path", "description", "allowed_origins", "type"]
    assert data["type"] == "stdio"
    assert data["allowed_origins"] == ["chrome-extension://abc123/"]


def test_manifest_is_compact_json() -> None:
    text = render_manifest(_manifest())
    assert text.startswith('{"name":"com.example.host","path":')
    assert text.endswith('"type":"stdio"}')
    assert json.loads(text)["description"] == "Example host"


def test_write_manifest_overwrites(tmp_path: Path) -> None:
    path = tmp_path / "host.json"
    path.write_text("x" * 4096, encoding="utf-8")
    write_manifest(path, _manifest())
    assert read_manifest(path)["name"] == "com.example.host"


def test_write_manifest_permissions(tmp_path: Path) -> None:
    if os.name == "nt":
        return

    manifest_path = tmp_path / "host.json"
    write_manifest(manifest_path, _manifest())
    mode = manifest_path.stat().st_mode & 0o777
    assert mode == 0o644


def test_write_manifest_missing_dir_raises(tmp_path: Path) -> None:
    with pytest.raises(InstallIOError):
        write_manifest(tmp_path / "nope" / "host.json", _manifest())
