from __future__ import annotations

import logging
import os
from collections.abc import Callable
from pathlib import Path

from .errors import InstallIOError

_LOGGER = logging.getLogger("native_messaging.installer.safe_dirs")


def _mkdir(path: Path) -> None:
    path.mkdir(exist_ok=True)


def _is_at_or_above(path: Path, boundary: Path) -> bool:
    return path == boundary or path in boundary.parents


def ancestors_to_create(target: Path, *, home: Path) -> list[Path]:
    """Ancestors of ``target`` (inclusive), shallowest first, that lie strictly below ``home``.

    A target outside ``home`` keeps its whole chain.
    """
    target = Path(target)
    home = Path(home)
    chain = [*reversed(target.parents), target]
    out: list[Path] = []
    for ancestor in chain:
        if _is_at_or_above(ancestor, home):
            continue
        out.append(ancestor)
    return out


def ensure_dir_safe(
    target: Path,
    *,
    home: Path,
    mkdir: Callable[[Path], None] = _mkdir,
    exists: Callable[[Path], bool] = os.path.isdir,
) -> list[Path]:
    """Create the missing directories below ``home`` leading to ``target``; return the ones created."""
    created: list[Path] = []
    for ancestor in ancestors_to_create(target, home=home):
        if exists(ancestor):
            continue
        try:
            mkdir(ancestor)
        except FileExistsError:
            if not ancestor.is_dir():
                raise InstallIOError(f"not a directory: {ancestor}", step="ensure_dir") from None
        except OSError as exc:
            raise InstallIOError(f"failed to create {ancestor}: {exc}", step="ensure_dir") from exc
        created.append(ancestor)
    _LOGGER.debug("ensure_dir_safe target=%s dirs=%d", target, len(created))
    return created


__all__ = ["ancestors_to_create", "ensure_dir_safe"]
