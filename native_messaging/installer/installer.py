from __future__ import annotations

import contextlib
import logging
import os
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

from .browser_paths import NATIVE_MESSAGING_HOSTS_DIR, candidate_dirs, manifest_path_for, resolve_browser_config_dir
from .config import InstallerConfig
from .errors import InstallIOError
from .launcher_script import write_launcher_script
from .manifest import ResolvedManifest, write_manifest
from .remote_config import resolve_remote_params
from .request import InstallationRequest, validate_request, validate_resolved, validate_resource_id
from .safe_dirs import ensure_dir_safe

_LOGGER = logging.getLogger("native_messaging.installer")


@dataclass(frozen=True, slots=True)
class InstallReport:
    resource_id: str
    launcher_path: Path
    browser_dir: Path
    manifest_path: Path
    manifest: ResolvedManifest
    dry_run: bool = False


@dataclass(slots=True)
class UninstallReport:
    resource_id: str
    removed: list[Path] = field(default_factory=list)
    missing: list[Path] = field(default_factory=list)


def resolve_parameters(
    request: InstallationRequest,
    *,
    config: InstallerConfig,
    fetch: Callable[[str], str] | None = None,
) -> InstallationRequest:
    """Validate ``request`` and, under auto-config, replace its parameters with the remote ones."""
    request = validate_request(request)
    if not request.auto_config:
        return request
    params = resolve_remote_params(request.code_uri, config=config, fetch=fetch)
    return validate_resolved(request.with_remote(params))


def install_native_host(
    request: InstallationRequest,
    *,
    config: InstallerConfig | None = None,
    fetch: Callable[[str], str] | None = None,
    exists: Callable[[Path], bool] = os.path.isdir,
    dry_run: bool = False,
) -> InstallReport:
    config = config or InstallerConfig.from_env()
    _LOGGER.info("native_host_install_start uri=%s browser=%s", request.code_uri, request.browser)
    effective = resolve_parameters(request, config=config, fetch=fetch)

    launcher_path = config.launcher_path(effective.resource_id)
    if not dry_run:
        ensure_dir_safe(config.launcher_dir, home=config.home)
        write_launcher_script(
            launcher_path,
            effective.code_uri,
            effective.runtime_flags,
            runtime=config.runtime,
            prewarm=config.prewarm,
            cache_timeout=config.cache_timeout,
        )
    browser_dir = resolve_browser_config_dir(config.platform, effective.browser, home=config.home, exists=exists)

    manifest = ResolvedManifest(
        name=effective.resource_id,
        path=str(launcher_path),
        description=effective.description,
        allowed_origins=list(effective.allowed_origins),
    )
    manifest_path = manifest_path_for(browser_dir, effective.resource_id)
    if not dry_run:
        ensure_dir_safe(browser_dir / NATIVE_MESSAGING_HOSTS_DIR, home=config.home)
        write_manifest(manifest_path, manifest)
        _LOGGER.info("native_host_install_ok manifest=%s launcher=%s", manifest_path, launcher_path)

    return InstallReport(
        resource_id=effective.resource_id,
        launcher_path=launcher_path,
        browser_dir=browser_dir,
        manifest_path=manifest_path,
        manifest=manifest,
        dry_run=dry_run,
    )


def uninstall_native_host(
    resource_id: str,
    *,
    browser: str = "chrome",
    config: InstallerConfig | None = None,
    exists: Callable[[Path], bool] = os.path.isdir,
) -> UninstallReport:
    config = config or InstallerConfig.from_env()
    rid = validate_resource_id(resource_id)
    report = UninstallReport(resource_id=rid)
    # Raises when no candidate exists; every existing one may hold a manifest.
    resolve_browser_config_dir(config.platform, browser, home=config.home, exists=exists)
    browser_dirs = [config.home / s for s in candidate_dirs(config.platform, browser) if exists(config.home / s)]
    targets = [manifest_path_for(d, rid) for d in browser_dirs]
    for path in (*targets, config.launcher_path(rid)):
        try:
            path.unlink()
        except FileNotFoundError:
            report.missing.append(path)
            continue
        except OSError as exc:
            raise InstallIOError(f"failed to remove {path}: {exc}", step="uninstall") from exc
        report.removed.append(path)
    with contextlib.suppress(OSError):
        # Only succeeds once the launcher directory is empty.
        config.launcher_dir.rmdir()
    _LOGGER.info("native_host_uninstall_ok removed=%s", [str(p) for p in report.removed])
    return report


__all__ = [
    "InstallReport",
    "UninstallReport",
    "install_native_host",
    "resolve_parameters",
    "uninstall_native_host",
]
