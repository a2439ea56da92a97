from __future__ import annotations

import json
import logging
import re
import ssl
import urllib.parse
from collections.abc import Callable
from dataclasses import dataclass, field
from urllib.error import URLError
from urllib.request import HTTPSHandler, Request, build_opener

from .config import InstallerConfig
from .errors import RemoteConfigUnavailable

_LOGGER = logging.getLogger("native_messaging.installer.remote_config")

CONFIG_FILENAME = "native-host-params"
# Permissive on purpose: auto-config promises a "just works" install.
DEFAULT_AUTO_RUNTIME_FLAGS = "-A --unstable"
_ALLOWED_SCHEMES = ("http", "https", "file")
# Flags land unquoted on the launcher command line.
_SHELL_META_RE = re.compile(r"[;&|$`<>()\\#\r\n]")


@dataclass(frozen=True, slots=True)
class RemoteParams:
    resource_id: str
    description: str
    allowed_origins: list[str] = field(default_factory=list)
    runtime_flags: str = DEFAULT_AUTO_RUNTIME_FLAGS
    source_uri: str = ""


def config_uri_for(code_uri: str) -> str:
    """Sibling ``native-host-params`` of ``code_uri``: only the last path segment is replaced."""
    parts = urllib.parse.urlsplit(str(code_uri))
    head, _, _ = parts.path.rpartition("/")
    return urllib.parse.urlunsplit((parts.scheme, parts.netloc, f"{head}/{CONFIG_FILENAME}", "", ""))


def fetch_text(url: str, *, timeout: float, max_bytes: int) -> str:
    parsed = urllib.parse.urlparse(url)
    if parsed.scheme not in _ALLOWED_SCHEMES:
        raise RemoteConfigUnavailable(f"unsupported scheme for remote config: {url}")
    req = Request(url, headers={"User-Agent": "deno-native-messaging/1.0", "Accept": "application/json"})
    try:
        opener = build_opener(HTTPSHandler(context=ssl.create_default_context()))
        with opener.open(req, timeout=timeout) as resp:
            body = resp.read(max_bytes + 1)
    except (TimeoutError, URLError, OSError) as exc:
        raise RemoteConfigUnavailable(f"failed to fetch {url}: {exc}") from exc
    if len(body) > max_bytes:
        raise RemoteConfigUnavailable(f"remote config exceeds {max_bytes} bytes: {url}")
    try:
        return body.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise RemoteConfigUnavailable(f"remote config {url} is not valid UTF-8: {exc}") from exc


def _string_field(data: dict, key: str, *, url: str) -> str:
    value = data.get(key)
    if not isinstance(value, str):
        raise RemoteConfigUnavailable(f"remote config {url} missing string field `{key}`")
    return value


def parse_remote_params(text: str, *, url: str = "") -> RemoteParams:
    try:
        data = json.loads(text)
    except ValueError as exc:
        raise RemoteConfigUnavailable(f"remote config {url} is not valid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise RemoteConfigUnavailable(f"remote config {url} must be a JSON object")

    origins = data.get("allowedOrigins")
    if not isinstance(origins, list) or not all(isinstance(o, str) for o in origins):
        raise RemoteConfigUnavailable(f"remote config {url} needs `allowedOrigins` as a list of strings")

    flags = data.get("runtimeFlags", data.get("denoFlags"))
    if flags is None or (isinstance(flags, str) and not flags.strip()):
        flags = DEFAULT_AUTO_RUNTIME_FLAGS
    elif isinstance(flags, list):
        flags = " ".join(str(f) for f in flags)
    elif not isinstance(flags, str):
        raise RemoteConfigUnavailable(f"remote config {url} has invalid `runtimeFlags`")
    if _SHELL_META_RE.search(flags):
        raise RemoteConfigUnavailable(f"remote config {url} `runtimeFlags` contains shell metacharacters")

    return RemoteParams(
        resource_id=_string_field(data, "resourceId", url=url),
        description=_string_field(data, "description", url=url),
        allowed_origins=list(origins),
        runtime_flags=flags,
        source_uri=url,
    )


def resolve_remote_params(
    code_uri: str,
    *,
    config: InstallerConfig,
    fetch: Callable[[str], str] | None = None,
) -> RemoteParams:
    url = config_uri_for(code_uri)
    _LOGGER.info("remote_config_lookup url=%s", url)
    if fetch is None:
        text = fetch_text(url, timeout=config.http_timeout, max_bytes=config.http_max_bytes)
    else:
        try:
            text = fetch(url)
        except RemoteConfigUnavailable:
            raise
        except Exception as exc:  # noqa: BLE001
            raise RemoteConfigUnavailable(f"failed to fetch {url}: {exc}") from exc
    params = parse_remote_params(text, url=url)
    _LOGGER.info("remote_config_ok resource_id=%s origins=%d", params.resource_id, len(params.allowed_origins))
    return params


__all__ = [
    "CONFIG_FILENAME",
    "DEFAULT_AUTO_RUNTIME_FLAGS",
    "RemoteParams",
    "config_uri_for",
    "fetch_text",
    "parse_remote_params",
    "resolve_remote_params",
]
