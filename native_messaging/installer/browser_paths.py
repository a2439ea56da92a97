from __future__ import annotations

import logging
import os
from collections.abc import Callable
from enum import Enum
from pathlib import Path

from .errors import NoConfigDirFound, UnsupportedTarget

_LOGGER = logging.getLogger("native_messaging.installer.browser_paths")

NATIVE_MESSAGING_HOSTS_DIR = "NativeMessagingHosts"


class OperatingSystem(str, Enum):
    LINUX = "linux"
    DARWIN = "darwin"


class Browser(str, Enum):
    CHROME = "chrome"
    CHROMIUM = "chromium"
    BRAVE = "brave"
    VIVALDI = "vivaldi"
    EDGE = "edge"


_APP_SUPPORT = "Library/Application Support"

# Order is precedence: the first existing directory wins.
_CANDIDATES: dict[tuple[OperatingSystem, Browser], tuple[str, ...]] = {
    (OperatingSystem.LINUX, Browser.CHROME): (".config/google-chrome", ".config/google-chrome-beta"),
    (OperatingSystem.LINUX, Browser.CHROMIUM): (".config/chromium",),
    (OperatingSystem.LINUX, Browser.BRAVE): (".config/BraveSoftware/Brave-Browser",),
    (OperatingSystem.LINUX, Browser.VIVALDI): (".config/vivaldi",),
    (OperatingSystem.LINUX, Browser.EDGE): (".config/microsoft-edge", ".config/microsoft-edge-beta"),
    (OperatingSystem.DARWIN, Browser.CHROME): (
        f"{_APP_SUPPORT}/Google/Chrome",
        f"{_APP_SUPPORT}/Google/Chrome Beta",
    ),
    (OperatingSystem.DARWIN, Browser.CHROMIUM): (f"{_APP_SUPPORT}/Chromium",),
    (OperatingSystem.DARWIN, Browser.VIVALDI): (f"{_APP_SUPPORT}/Vivaldi",),
    (OperatingSystem.DARWIN, Browser.EDGE): (f"{_APP_SUPPORT}/Microsoft Edge",),
}


def _parse_target(os_name: str | OperatingSystem, browser: str | Browser) -> tuple[OperatingSystem, Browser]:
    try:
        os_key = OperatingSystem(os_name)
        browser_key = Browser(browser)
    except ValueError as exc:
        raise UnsupportedTarget(f"unknown browser/os combo: {os_name} {browser}") from exc
    return os_key, browser_key


def candidate_dirs(os_name: str | OperatingSystem, browser: str | Browser) -> list[str]:
    """Return the home-relative config dirs for a target, in precedence order."""
    key = _parse_target(os_name, browser)
    suffixes = _CANDIDATES.get(key)
    if not suffixes:
        raise UnsupportedTarget(f"unknown browser/os combo: {key[0].value} {key[1].value}")
    return list(suffixes)


def supported_targets(os_name: str | OperatingSystem | None = None) -> list[tuple[OperatingSystem, Browser]]:
    targets = list(_CANDIDATES)
    if os_name is None:
        return targets
    return [target for target in targets if target[0].value == str(getattr(os_name, "value", os_name))]


def resolve_browser_config_dir(
    os_name: str | OperatingSystem,
    browser: str | Browser,
    *,
    home: Path,
    exists: Callable[[Path], bool] = os.path.isdir,
) -> Path:
    suffixes = candidate_dirs(os_name, browser)
    _LOGGER.info("browser_dir_lookup browser=%s os=%s", browser, os_name)
    for suffix in suffixes:
        candidate = Path(home) / suffix
        if exists(candidate):
            _LOGGER.debug("browser_dir_found path=%s", candidate)
            return candidate
    raise NoConfigDirFound(
        f"unable to locate {getattr(browser, 'value', browser)} config dir; checked: "
        + ", ".join(str(Path(home) / s) for s in suffixes)
    )


def manifest_path_for(browser_dir: Path, resource_id: str) -> Path:
    return Path(browser_dir) / NATIVE_MESSAGING_HOSTS_DIR / f"{resource_id}.json"


__all__ = [
    "NATIVE_MESSAGING_HOSTS_DIR",
    "Browser",
    "OperatingSystem",
    "candidate_dirs",
    "manifest_path_for",
    "resolve_browser_config_dir",
    "supported_targets",
]
