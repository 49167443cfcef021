"""Connection settings, errors and the request helper shared by the API modules."""

from __future__ import annotations

import contextlib
import http
import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

import requests

DEFAULT_BASE_PATH = "http://localhost"
DEFAULT_USER_AGENT = "OpenAPI-Generator/0.1.0/python"

_URL_SAFE = frozenset(
    b"abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789*-._"
)


@dataclass
class ApiKey:
    """An API key with an optional prefix."""

    key: str
    prefix: str | None = None


@dataclass
class Configuration:
    """Where and how API requests are sent."""

    base_path: str = DEFAULT_BASE_PATH
    user_agent: str | None = DEFAULT_USER_AGENT
    session: requests.Session = field(default_factory=requests.Session, repr=False)
    basic_auth: tuple[str, str | None] | None = None
    oauth_access_token: str | None = None
    bearer_access_token: str | None = None
    api_key: ApiKey | None = None
    timeout: float | None = None


class ApiError(Exception):
    """Base class for every failed API call."""

    module = "api"

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail

    def __str__(self) -> str:
        return f"error in {self.module}: {self.detail}"


class TransportError(ApiError):
    """The request could not be sent or its response not read."""

    module = "transport"


class DecodeError(ApiError):
    """A successful response did not hold the expected JSON."""

    module = "decode"


class _LocalIoError(ApiError):
    module = "IO"


def _status_text(status: int) -> str:
    try:
        return f"{status} {http.HTTPStatus(status).phrase}"
    except ValueError:
        return str(status)


class ResponseError(ApiError):
    """The server answered with a client or server error status."""

    module = "response"

    def __init__(self, status: int, content: str, entity: Any = None) -> None:
        super().__init__(f"status code {_status_text(status)}")
        self.status = status
        self.content = content
        self.entity = entity


def urlencode(value: str) -> str:
    """Encode a value in application/x-www-form-urlencoded form."""
    return "".join(
        chr(byte) if byte in _URL_SAFE else "+" if byte == 0x20 else f"%{byte:02X}"
        for byte in value.encode("utf-8")
    )


def _scalar_text(value: Any) -> str:
    return value if isinstance(value, str) else json.dumps(value)


def parse_deep_object(prefix: str, value: Any) -> list[tuple[str, str]]:
    """Flatten an object into deepObject-style query parameters."""
    if not isinstance(value, Mapping):
        raise ValueError("Only objects are supported with style=deepObject")
    params: list[tuple[str, str]] = []
    for key, item in value.items():
        name = f"{prefix}[{key}]"
        if isinstance(item, Mapping):
            params.extend(parse_deep_object(name, item))
        elif isinstance(item, list):
            for position, element in enumerate(item):
                params.extend(parse_deep_object(f"{name}[{position}]", element))
        else:
            params.append((name, _scalar_text(item)))
    return params


def request(
    configuration: Configuration,
    method: str,
    path: str,
    *,
    json_body: Any = None,
    params: Any = None,
    form: Any = None,
    files: Mapping[str, Any] | None = None,
) -> Any:
    """Send a request and return the decoded JSON body of a successful response."""
    url = f"{configuration.base_path}{path}"
    headers: dict[str, str] = {}
    if configuration.user_agent is not None:
        headers["User-Agent"] = configuration.user_agent
    if configuration.bearer_access_token is not None:
        headers["Authorization"] = f"Bearer {configuration.bearer_access_token}"

    with contextlib.ExitStack() as stack:
        try:
            uploads = {
                name: (Path(file_path).name, stack.enter_context(open(file_path, "rb")))
                for name, file_path in (files or {}).items()
            }
        except OSError as exc:
            raise _LocalIoError(str(exc)) from exc
        try:
            response = configuration.session.request(
                method,
                url,
                params=params,
                json=json_body,
                data=form,
                files=uploads or None,
                headers=headers,
                timeout=configuration.timeout,
            )
            content = response.text
        except requests.RequestException as exc:
            raise TransportError(str(exc)) from exc

    status = response.status_code
    if not 400 <= status <= 599:
        try:
            return json.loads(content)
        except ValueError as exc:
            raise DecodeError(str(exc)) from exc

    try:
        entity = json.loads(content)
    except ValueError:
        entity = None
    raise ResponseError(status, content, entity)