"""Error taxonomy.

Build-time errors abort generation. ``HTTPError`` is the runtime error a
service implementation raises to report an explicit status.
"""

from __future__ import annotations


class RouteDefinitionError(Exception):
    """Base class for interface definitions that cannot be compiled."""

    def __init__(self, message: str, route: str | None = None) -> None:
        self.message = message
        self.route = route
        super().__init__(f"{route}: {message}" if route else message)


class InvalidMethod(RouteDefinitionError):
    """The HTTP verb is not GET or POST."""


class InvalidPath(RouteDefinitionError):
    """The path is not a literal template or disagrees with the parameters."""


class UnsupportedParameterType(RouteDefinitionError):
    """A parameter is not ``str`` or optional ``str``."""


class MissingResponseType(RouteDefinitionError):
    """The declaration has no usable return type."""


class InvalidIdentifier(RouteDefinitionError):
    """A service, method or parameter name cannot be used in Python code."""


class DuplicateRoute(RouteDefinitionError):
    """Two routes share a name, a struct name, or a verb and path."""


class HTTPError(Exception):
    """Raised by a handler to answer with an explicit status and message.

    The adapter forwards both verbatim::

        raise HTTPError(404, "Todo not found")
    """

    def __init__(self, status_code: int, message: str = "") -> None:
        self.status_code = status_code
        self.message = message
        super().__init__(f"{status_code}: {message}")


class BadRequest(HTTPError):
    def __init__(self, message: str = "Bad Request") -> None:
        super().__init__(400, message)


class NotFound(HTTPError):
    def __init__(self, message: str = "Not Found") -> None:
        super().__init__(404, message)


class InternalError(HTTPError):
    def __init__(self, message: str = "Internal Server Error") -> None:
        super().__init__(500, message)
