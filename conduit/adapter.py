"""Router-independent route registration contract.

Generated ``<Service>Routes.register_routes`` calls exactly one of the
four operations below per route, chosen by whether the route has named
parameters and whether it is a POST. Implementations translate the
``:name`` path template to their router's syntax and, per request:

1. merge path captures and query pairs into one mapping (path captures
   win on a name clash),
2. decode the mapping into ``params`` (400 on failure, handler not called),
3. decode the JSON payload into ``body`` (400 on failure, handler not called),
4. call the handler and encode its result as JSON; an ``HTTPError`` is
   forwarded verbatim, anything else becomes a 500,
5. answer an empty 200 when ``output`` is None.

``params``, ``body`` and ``output`` are any types pydantic can validate
and serialize. ``body=None`` on a POST operation declares a route
without payload; its handler is then called without the body argument.
Handlers may be plain functions or coroutine functions.
"""

from __future__ import annotations

import abc
from collections.abc import Callable
from typing import Any

Handler = Callable[..., Any]


class RouteBuilder(abc.ABC):
    @abc.abstractmethod
    def register_get(self, path: str, handler: Handler, *, output: Any) -> None:
        """Register ``GET path`` answered by ``handler()``."""

    @abc.abstractmethod
    def register_get_with_params(
        self, path: str, handler: Handler, *, params: type, output: Any
    ) -> None:
        """Register ``GET path`` answered by ``handler(params)``."""

    @abc.abstractmethod
    def register_post(self, path: str, handler: Handler, *, body: Any, output: Any) -> None:
        """Register ``POST path`` answered by ``handler(body)``."""

    @abc.abstractmethod
    def register_post_with_params(
        self, path: str, handler: Handler, *, params: type, body: Any, output: Any
    ) -> None:
        """Register ``POST path`` answered by ``handler(params, body)``."""
