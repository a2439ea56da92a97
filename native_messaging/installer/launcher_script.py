from __future__ import annotations

import contextlib
import logging
import os
import shlex
import subprocess
from pathlib import Path

from .config import DEFAULT_RUNTIME
from .errors import InstallIOError

_LOGGER = logging.getLogger("native_messaging.installer.launcher_script")

SHEBANG = "#!/usr/bin/env bash"
# Owner rwx plus world-executable; existing deployments rely on it.
LAUNCHER_MODE = 0o777


def render_launcher_script(code_uri: str, runtime_flags: str = "", *, runtime: str = DEFAULT_RUNTIME) -> str:
    parts = ["/usr/bin/env", runtime, "run"]
    flags = (runtime_flags or "").strip()
    if flags:
        parts.append(flags)
    parts.append(code_uri)
    return f"{SHEBANG}\n{' '.join(parts)}\n"


def prewarm_runtime_cache(
    code_uri: str,
    runtime_flags: str = "",
    *,
    runtime: str = DEFAULT_RUNTIME,
    timeout: float = 120.0,
) -> bool:
    """Ask the runtime to download and compile ``code_uri`` ahead of the first launch (best-effort)."""
    try:
        flags = shlex.split(runtime_flags or "")
    except ValueError:
        flags = (runtime_flags or "").split()
    command = [runtime, "cache", *flags, code_uri]
    try:
        proc = subprocess.run(command, capture_output=True, timeout=timeout, check=False)
    except (OSError, subprocess.SubprocessError) as exc:
        _LOGGER.warning("runtime_cache_skipped cmd=%s error=%s", command[:2], exc)
        return False
    if proc.returncode != 0:
        stderr = (proc.stderr or b"").decode(errors="replace").strip()
        _LOGGER.warning("runtime_cache_failed code=%s stderr=%s", proc.returncode, stderr[-500:])
        return False
    _LOGGER.info("runtime_cache_ok uri=%s", code_uri)
    return True


def write_launcher_script(
    target: Path,
    code_uri: str,
    runtime_flags: str = "",
    *,
    runtime: str = DEFAULT_RUNTIME,
    prewarm: bool = True,
    cache_timeout: float = 120.0,
) -> Path:
    target = Path(target)
    if prewarm:
        prewarm_runtime_cache(code_uri, runtime_flags, runtime=runtime, timeout=cache_timeout)

    content = render_launcher_script(code_uri, runtime_flags, runtime=runtime)
    tmp = target.with_name(f".{target.name}.{os.getpid()}.tmp")
    try:
        tmp.write_text(content, encoding="utf-8")
        tmp.chmod(LAUNCHER_MODE)
        os.replace(tmp, target)
    except OSError as exc:
        with contextlib.suppress(OSError):
            tmp.unlink()
        raise InstallIOError(f"failed to write launcher script {target}: {exc}", step="write_launcher") from exc
    _LOGGER.info("launcher_script_written path=%s", target)
    return target


__all__ = [
    "LAUNCHER_MODE",
    "SHEBANG",
    "prewarm_runtime_cache",
    "render_launcher_script",
    "write_launcher_script",
]
