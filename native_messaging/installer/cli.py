"""
Command line entry point for installing deno native messaging hosts.

Installs a launcher script under ~/.local/var/deno-native-messaging and
registers it with the browser through a NativeMessagingHosts manifest.
"""

from __future__ import annotations

import argparse
import logging
import sys

from .browser_paths import candidate_dirs, resolve_browser_config_dir, supported_targets
from .config import InstallerConfig
from .errors import InstallError, NoConfigDirFound
from .installer import install_native_host, uninstall_native_host
from .manifest import render_manifest
from .request import InstallationRequest

logger = logging.getLogger("native_messaging.installer.cli")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="deno-native-messaging",
        description="Install a deno native messaging host for a Chromium-based browser.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    sub = parser.add_subparsers(dest="command", required=True)

    install = sub.add_parser("install", help="install a deno native messaging server")
    install.add_argument("code_uri", metavar="denoURI", help="The public url of the deno script to run")
    install.add_argument(
        "--autoConfig",
        "--auto-config",
        dest="auto_config",
        action="store_true",
        help="lookup config in the `native-host-params` sibling file of the main URI",
    )
    install.add_argument(
        "--denoFlags",
        "--runtime-flags",
        dest="runtime_flags",
        default="",
        help="flags to pass to deno when invoking the native host",
    )
    install.add_argument("--browser", default="chrome", help="the target browser for the native host extension")
    install.add_argument(
        "--resourceId",
        "--resource-id",
        dest="resource_id",
        default="",
        help="The resource id of the native messaging host",
    )
    install.add_argument("--description", default="", help="Human readable description of the host")
    install.add_argument(
        "--allowedOrigins",
        "--allowed-origins",
        dest="allowed_origins",
        nargs="+",
        default=[],
        help="Extension origins allowed to connect (chrome-extension://<id>/)",
    )
    install.add_argument(
        "--dry-run",
        action="store_true",
        help="Resolve everything and print the manifest without writing files",
    )

    uninstall = sub.add_parser("uninstall", help="remove an installed native messaging host")
    uninstall.add_argument("resource_id", metavar="resourceId")
    uninstall.add_argument("--browser", default="chrome")

    sub.add_parser("targets", help="list supported browsers and their config directories")
    return parser


def _cmd_install(args: argparse.Namespace, config: InstallerConfig) -> int:
    request = InstallationRequest(
        code_uri=args.code_uri,
        auto_config=bool(args.auto_config),
        browser=args.browser,
        runtime_flags=args.runtime_flags or "",
        resource_id=args.resource_id or "",
        description=args.description or "",
        allowed_origins=list(args.allowed_origins or []),
    )
    logger.info("Starting deno native host installation")
    report = install_native_host(request, config=config, dry_run=bool(args.dry_run))
    if report.dry_run:
        print(f"launcher: {report.launcher_path}")
        print(f"manifest: {report.manifest_path}")
        print(render_manifest(report.manifest))
        return 0
    logger.info("Install success! manifest=%s", report.manifest_path)
    return 0


def _cmd_uninstall(args: argparse.Namespace, config: InstallerConfig) -> int:
    report = uninstall_native_host(args.resource_id, browser=args.browser, config=config)
    for path in report.removed:
        print(f"removed {path}")
    if not report.removed:
        logger.warning("nothing to remove for %s", report.resource_id)
    return 0


def _cmd_targets(config: InstallerConfig) -> int:
    targets = supported_targets(config.platform)
    if not targets:
        logger.error("no supported browsers for platform %s", config.platform)
        return 1
    for os_name, browser in targets:
        try:
            found = str(resolve_browser_config_dir(os_name, browser, home=config.home))
        except NoConfigDirFound:
            found = "-"
        print(f"{browser.value}\t{found}\t{', '.join(candidate_dirs(os_name, browser))}")
    return 0


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(message)s",
    )
    try:
        config = InstallerConfig.from_env()
        if args.command == "install":
            return _cmd_install(args, config)
        if args.command == "uninstall":
            return _cmd_uninstall(args, config)
        return _cmd_targets(config)
    except InstallError as exc:
        logger.error("%s failed: %s", args.command, exc)
        return 1


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
