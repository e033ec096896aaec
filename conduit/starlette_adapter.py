"""Starlette binding of the RouteBuilder contract.

Usage::

    router = Router()
    mount_rpc(router, TodoService(store), TodoAPIRoutes.register_routes)
    app = Starlette(routes=router.routes)
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable
from typing import Any

from pydantic import TypeAdapter, ValidationError
from starlette.exceptions import HTTPException
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.routing import Router

from .adapter import Handler, RouteBuilder
from .errors import DuplicateRoute, HTTPError
from .paths import to_router_pattern

logger = logging.getLogger(__name__)

JSON_MEDIA_TYPE = "application/json"


def error_response(status_code: int, message: str) -> JSONResponse:
    """JSON error body shared by every failure the adapter reports."""
    return JSONResponse(
        {"error": True, "status": status_code, "message": message},
        status_code=status_code,
    )


def merge_params(request: Request) -> dict[str, str]:
    """Union query pairs and path captures; path captures win on a clash."""
    merged: dict[str, str] = dict(request.query_params)
    merged.update({name: str(value) for name, value in request.path_params.items()})
    return merged


async def _invoke(handler: Handler, *args: Any) -> Any:
    result = handler(*args)
    if inspect.isawaitable(result):
        result = await result
    return result


def _validation_message(exc: ValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(part) for part in err['loc']) or 'value'}: {err['msg']}"
        for err in exc.errors()
    )


class StarletteRouteBuilder(RouteBuilder):
    """Registers generated routes on a ``starlette.routing.Router``."""

    def __init__(self, router: Router | None = None) -> None:
        self.router = router if router is not None else Router()
        self._registered: set[tuple[str, str]] = set()

    def register_get(self, path: str, handler: Handler, *, output: Any) -> None:
        self._register("GET", path, handler, params=None, body=None, output=output)

    def register_get_with_params(
        self, path: str, handler: Handler, *, params: type, output: Any
    ) -> None:
        self._register("GET", path, handler, params=params, body=None, output=output)

    def register_post(self, path: str, handler: Handler, *, body: Any, output: Any) -> None:
        self._register("POST", path, handler, params=None, body=body, output=output)

    def register_post_with_params(
        self, path: str, handler: Handler, *, params: type, body: Any, output: Any
    ) -> None:
        self._register("POST", path, handler, params=params, body=body, output=output)

    def _register(
        self,
        method: str,
        path: str,
        handler: Handler,
        *,
        params: type | None,
        body: Any,
        output: Any,
    ) -> None:
        pattern = to_router_pattern(path)
        key = (method, pattern)
        if key in self._registered:
            raise DuplicateRoute(f"{method} {path} is already registered")
        self._registered.add(key)

        endpoint = self._make_endpoint(method, path, handler, params, body, output)
        self.router.add_route(
            pattern, endpoint, methods=[method], name=f"{method.lower()} {path}"
        )
        logger.debug("Registered %s %s as %s", method, path, pattern)

    def _make_endpoint(
        self,
        method: str,
        path: str,
        handler: Handler,
        params: type | None,
        body: Any,
        output: Any,
    ) -> Callable[[Request], Any]:
        # Adapters are built once here and shared by every request.
        params_adapter = TypeAdapter(params) if params is not None else None
        body_adapter = TypeAdapter(body) if body is not None else None
        output_adapter = TypeAdapter(output) if output is not None else None

        async def endpoint(request: Request) -> Response:
            args: list[Any] = []

            if params_adapter is not None:
                try:
                    args.append(params_adapter.validate_python(merge_params(request)))
                except ValidationError as exc:
                    message = f"Invalid parameters: {_validation_message(exc)}"
                    logger.warning("%s %s: %s", method, path, message)
                    return error_response(400, message)

            if body_adapter is not None:
                payload = await request.body()
                try:
                    args.append(body_adapter.validate_json(payload))
                except ValidationError as exc:
                    message = f"Invalid request body: {_validation_message(exc)}"
                    logger.warning("%s %s: %s", method, path, message)
                    return error_response(400, message)

            try:
                result = await _invoke(handler, *args)
            except HTTPError as exc:
                return error_response(exc.status_code, exc.message)
            except HTTPException as exc:
                return error_response(exc.status_code, str(exc.detail))
            except Exception:
                logger.exception("Unhandled error in %s %s", method, path)
                return error_response(500, "Internal Server Error")

            if output_adapter is None:
                return Response(status_code=200)
            try:
                content = output_adapter.dump_json(result)
            except Exception:
                logger.exception("Failed to encode response for %s %s", method, path)
                return error_response(500, "Internal Server Error")
            return Response(content, status_code=200, media_type=JSON_MEDIA_TYPE)

        return endpoint


def mount_rpc(
    router: Router,
    impl: Any,
    register_routes: Callable[[Any, RouteBuilder], None],
) -> Router:
    """Run generated registration glue against ``router`` and return it."""
    builder = StarletteRouteBuilder(router)
    register_routes(impl, builder)
    return builder.router
