"""Typed interface description produced by the route parser.

Everything here is built once from the interface definition and is
immutable afterwards.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass

# Response type text that declares a route without a payload
NO_CONTENT = "None"


class HTTPMethod(enum.Enum):
    GET = "GET"
    POST = "POST"


@dataclass(frozen=True)
class RouteParameter:
    """A named string parameter, optionally absent."""

    name: str
    is_optional: bool = False

    @property
    def annotation(self) -> str:
        return "str | None" if self.is_optional else "str"


@dataclass(frozen=True)
class RouteMeta:
    """One RPC method exposed over HTTP.

    ``path_parameters`` follow template order, ``query_parameters``
    follow declaration order. The placeholders of ``path`` are exactly
    the names in ``path_parameters``.
    """

    name: str
    path: str
    method: HTTPMethod
    path_parameters: tuple[RouteParameter, ...] = ()
    query_parameters: tuple[RouteParameter, ...] = ()
    body_type: str | None = None
    response_type: str | None = None
    doc: str = ""

    @property
    def parameters(self) -> tuple[RouteParameter, ...]:
        return self.path_parameters + self.query_parameters

    @property
    def has_params(self) -> bool:
        return bool(self.path_parameters or self.query_parameters)

    @property
    def has_body(self) -> bool:
        return self.body_type is not None

    @property
    def is_no_content(self) -> bool:
        return self.response_type in (None, NO_CONTENT)


@dataclass(frozen=True)
class ServiceDefinition:
    """A named, ordered set of routes."""

    name: str
    routes: tuple[RouteMeta, ...] = ()
    imports: tuple[str, ...] = ()
    doc: str = ""
