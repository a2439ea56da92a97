from __future__ import annotations

from pathlib import Path

import pytest

from native_messaging.installer.browser_paths import (
    Browser,
    OperatingSystem,
    candidate_dirs,
    manifest_path_for,
    resolve_browser_config_dir,
    supported_targets,
)
from native_messaging.installer.errors import NoConfigDirFound, UnsupportedTarget


class _ExistsStub:
    def __init__(self, present: set[Path]) -> None:
        self.present = present
        self.calls: list[Path] = []

    def __call__(self, path: Path) -> bool:
        self.calls.append(path)
        return path in self.present


def test_linux_chrome_prefers_stable_over_beta() -> None:
    home = Path("/home/u")
    stub = _ExistsStub({home / ".config/google-chrome", home / ".config/google-chrome-beta"})
    assert resolve_browser_config_dir("linux", "chrome", home=home, exists=stub) == home / ".config/google-chrome"
    assert stub.calls == [home / ".config/google-chrome"]


def test_linux_chrome_falls_back_to_beta() -> None:
    home = Path("/home/u")
    stub = _ExistsStub({home / ".config/google-chrome-beta"})
    resolved = resolve_browser_config_dir("linux", "chrome", home=home, exists=stub)
    assert resolved == home / ".config/google-chrome-beta"
    assert stub.calls == [home / ".config/google-chrome", home / ".config/google-chrome-beta"]


@pytest.mark.parametrize("target", supported_targets())
def test_every_supported_target_returns_first_existing(target: tuple[OperatingSystem, Browser]) -> None:
    home = Path("/home/u")
    suffixes = candidate_dirs(*target)
    assert suffixes
    last = home / suffixes[-1]
    assert resolve_browser_config_dir(*target, home=home, exists=_ExistsStub({last})) == last
    everything = {home / s for s in suffixes}
    assert resolve_browser_config_dir(*target, home=home, exists=_ExistsStub(everything)) == home / suffixes[0]


@pytest.mark.parametrize(
    ("os_name", "browser"),
    [("linux", "firefox"), ("win32", "chrome"), ("Linux", "chrome"), ("linux", "Chrome"), ("darwin", "brave")],
)
def test_unsupported_target_fails_without_filesystem_checks(os_name: str, browser: str) -> None:
    stub = _ExistsStub(set())
    with pytest.raises(UnsupportedTarget):
        resolve_browser_config_dir(os_name, browser, home=Path("/home/u"), exists=stub)
    assert stub.calls == []


def test_no_candidate_present_raises(tmp_path: Path) -> None:
    with pytest.raises(NoConfigDirFound):
        resolve_browser_config_dir("linux", "chromium", home=tmp_path)


def test_resolves_real_directories(tmp_path: Path) -> None:
    (tmp_path / ".config" / "vivaldi").mkdir(parents=True)
    assert resolve_browser_config_dir(OperatingSystem.LINUX, Browser.VIVALDI, home=tmp_path) == (
        tmp_path / ".config" / "vivaldi"
    )


def test_darwin_chrome_order() -> None:
    assert candidate_dirs("darwin", "chrome") == [
        "Library/Application Support/Google/Chrome",
        "Library/Application Support/Google/Chrome Beta",
    ]


def test_supported_targets_filtered_by_os() -> None:
    linux = supported_targets("linux")
    assert (OperatingSystem.LINUX, Browser.BRAVE) in linux
    assert all(os_name is OperatingSystem.LINUX for os_name, _ in linux)
    assert supported_targets("win32") == []


def test_manifest_path_for() -> None:
    assert manifest_path_for(Path("/h/.config/chromium"), "com.x") == Path(
        "/h/.config/chromium/NativeMessagingHosts/com.x.json"
    )
