from __future__ import annotations

from dataclasses import dataclass, field, replace

from .errors import InvalidOrigin, InvalidResourceId, MissingRequiredField
from .remote_config import RemoteParams

EXTENSION_ORIGIN_PREFIX = "chrome-extension://"


@dataclass(frozen=True, slots=True)
class InstallationRequest:
    code_uri: str
    auto_config: bool = False
    browser: str = "chrome"
    runtime_flags: str = ""
    resource_id: str = ""
    description: str = ""
    allowed_origins: list[str] = field(default_factory=list)

    def with_remote(self, params: RemoteParams) -> InstallationRequest:
        return replace(
            self,
            resource_id=params.resource_id,
            description=params.description,
            allowed_origins=list(params.allowed_origins),
            runtime_flags=params.runtime_flags,
        )


def validate_resource_id(resource_id: str) -> str:
    rid = str(resource_id or "").strip()
    if not rid:
        raise MissingRequiredField("provide a resourceId")
    if rid in {".", ".."} or "/" in rid or "\\" in rid or "\x00" in rid:
        raise InvalidResourceId(f"resourceId must be a plain name, got {resource_id!r}")
    return rid


def validate_origins(origins: list[str]) -> list[str]:
    for origin in origins:
        if not str(origin).startswith(EXTENSION_ORIGIN_PREFIX):
            raise InvalidOrigin(f"invalid allowed origin {origin!r}, all must start with {EXTENSION_ORIGIN_PREFIX}")
    return list(origins)


def validate_request(request: InstallationRequest) -> InstallationRequest:
    """Check the fields a manifest needs; auto-config requests are checked after the remote lookup."""
    if not str(request.code_uri or "").strip():
        raise MissingRequiredField("provide the program URI to install")
    if request.auto_config:
        return request
    return _validate_fields(request, require_origins=True)


def validate_resolved(request: InstallationRequest) -> InstallationRequest:
    """Check parameters that came back from a remote lookup; they are untrusted input."""
    return _validate_fields(request, require_origins=False)


def _validate_fields(request: InstallationRequest, *, require_origins: bool) -> InstallationRequest:
    rid = validate_resource_id(request.resource_id)
    if not str(request.description or "").strip():
        raise MissingRequiredField("provide a description")
    if require_origins and not request.allowed_origins:
        raise MissingRequiredField("provide at least one allowed origin")
    origins = validate_origins(request.allowed_origins)
    return replace(request, resource_id=rid, allowed_origins=origins)


__all__ = [
    "EXTENSION_ORIGIN_PREFIX",
    "InstallationRequest",
    "validate_origins",
    "validate_request",
    "validate_resolved",
    "validate_resource_id",
]
