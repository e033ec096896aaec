"""Runtime support for generated clients.

Each generated client method builds its path and query, then calls
``send_request``. One ``httpx.AsyncClient`` is opened per call and closed
on every exit path.

Every failure surfaces as ``TransportError``. Its subclasses keep the
cause apart for callers that care: ``StatusError`` for a non-2xx answer,
``ResponseDecodeError`` for a payload that does not match the declared
response type, ``ConnectionFailed`` for transport errors from httpx.
"""

from __future__ import annotations

import dataclasses
import json
import logging
from dataclasses import dataclass
from typing import Any

import httpx
from pydantic import TypeAdapter, ValidationError

logger = logging.getLogger(__name__)

JSON_HEADERS = {"Content-Type": "application/json"}


class TransportError(Exception):
    """A request did not produce a usable response."""


class StatusError(TransportError):
    def __init__(self, status_code: int, message: str, url: str = "") -> None:
        self.status_code = status_code
        self.message = message
        self.url = url
        where = f" from {url}" if url else ""
        super().__init__(f"{status_code}{where}: {message}")


class ResponseDecodeError(TransportError):
    """The payload could not be decoded as the declared response type."""


class ConnectionFailed(TransportError):
    """httpx could not complete the exchange."""


@dataclass(frozen=True)
class ClientConfig:
    """Per-client or per-call HTTP settings. None means "not set"."""

    headers: dict[str, str] | None = None
    timeout: float | None = None
    follow_redirects: bool | None = None
    verify: bool | None = None
    transport: httpx.AsyncBaseTransport | None = None

    def merged(self, override: ClientConfig) -> ClientConfig:
        """Field-by-field merge; override wins where it sets a field."""
        values: dict[str, Any] = {}
        for field in dataclasses.fields(self):
            base_value = getattr(self, field.name)
            override_value = getattr(override, field.name)
            values[field.name] = base_value if override_value is None else override_value

        if self.headers is not None and override.headers is not None:
            values["headers"] = {**self.headers, **override.headers}
        return ClientConfig(**values)

    def client_kwargs(self) -> dict[str, Any]:
        """Keyword arguments for ``httpx.AsyncClient``, unset fields omitted."""
        kwargs: dict[str, Any] = {}
        for field in dataclasses.fields(self):
            value = getattr(self, field.name)
            if value is not None:
                kwargs[field.name] = value
        return kwargs


def merge_configs(base: ClientConfig | None, override: ClientConfig | None) -> ClientConfig:
    """Effective configuration for one call."""
    if base is None:
        return override or ClientConfig()
    if override is None:
        return base
    return base.merged(override)


def _error_message(response: httpx.Response) -> str:
    """Prefer the adapter's JSON error message, fall back to the raw text."""
    try:
        payload = response.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return response.text or response.reason_phrase
    if isinstance(payload, dict) and isinstance(payload.get("message"), str):
        return payload["message"]
    return response.text


async def send_request(
    method: str,
    base_url: str,
    path: str,
    *,
    query: dict[str, str] | None = None,
    body: Any = None,
    body_type: Any = None,
    response_type: Any = None,
    config: ClientConfig | None = None,
) -> Any:
    """Issue one request and decode its payload as ``response_type``.

    ``body`` is only sent when ``body_type`` is given. A ``response_type``
    of None declares a route without content: the payload is ignored and
    None returned.
    """
    url = base_url.rstrip("/") + path
    content: bytes | None = None
    headers: dict[str, str] | None = None
    if body_type is not None:
        content = TypeAdapter(body_type).dump_json(body)
        headers = dict(JSON_HEADERS)

    effective = config or ClientConfig()
    logger.debug("%s %s query=%s", method, url, query)
    try:
        async with httpx.AsyncClient(**effective.client_kwargs()) as client:
            response = await client.request(
                method,
                url,
                params=query or None,
                content=content,
                headers=headers,
            )
    except httpx.HTTPError as exc:
        raise ConnectionFailed(f"{method} {url} failed: {exc}") from exc

    if not 200 <= response.status_code <= 299:
        raise StatusError(response.status_code, _error_message(response), str(response.url))

    if response_type is None:
        return None
    try:
        return TypeAdapter(response_type).validate_json(response.content)
    except ValidationError as exc:
        raise ResponseDecodeError(
            f"{method} {url}: payload does not match {response_type!r}: {exc}"
        ) from exc
