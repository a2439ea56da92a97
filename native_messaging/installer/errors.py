from __future__ import annotations


class InstallError(Exception):
    """Base error for a failed native host install; ``step`` names the pipeline stage."""

    step = "install"

    def __init__(self, message: str, *, step: str | None = None) -> None:
        super().__init__(message)
        if step is not None:
            self.step = step

    def __str__(self) -> str:
        return f"[{self.step}] {super().__str__()}"


class UnsupportedTarget(InstallError):
    step = "resolve_browser_dir"


class NoConfigDirFound(InstallError):
    step = "resolve_browser_dir"


class RemoteConfigUnavailable(InstallError):
    step = "auto_config"


class InvalidOrigin(InstallError):
    step = "validate"


class MissingRequiredField(InstallError):
    step = "validate"


class InvalidResourceId(InstallError):
    step = "validate"


class InstallIOError(InstallError):
    step = "write"


__all__ = [
    "InstallError",
    "InstallIOError",
    "InvalidOrigin",
    "InvalidResourceId",
    "MissingRequiredField",
    "NoConfigDirFound",
    "RemoteConfigUnavailable",
    "UnsupportedTarget",
]
