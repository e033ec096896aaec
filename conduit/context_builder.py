"""Build Jinja2 template context from a parsed ServiceDefinition.

Every piece of Python source that depends on a route (signatures, path
expressions, handler lambdas) is assembled here so the template only
loops and substitutes. Ordering follows the definition, never set or
dict-hash order, so the same input renders byte-identical output.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from .models import NO_CONTENT, HTTPMethod, RouteMeta, RouteParameter, ServiceDefinition
from .naming import params_struct_name, path_params_struct_name, to_module_name
from .paths import is_placeholder

logger = logging.getLogger(__name__)

# Adapter operation by (has named params, has body)
_REGISTER_CALLS: dict[tuple[HTTPMethod, bool], str] = {
    (HTTPMethod.GET, False): "register_get",
    (HTTPMethod.GET, True): "register_get_with_params",
    (HTTPMethod.POST, False): "register_post",
    (HTTPMethod.POST, True): "register_post_with_params",
}


def _py_str(value: str) -> str:
    """Render a Python string literal (JSON string syntax is valid Python)."""
    return json.dumps(value, ensure_ascii=False)


def _docstring(text: str) -> str:
    """Escape text for a triple-quoted docstring."""
    return text.replace("\\", "\\\\").replace('"', '\\"')


def path_expression(template: str, accessor: str = "path_params") -> str:
    """Build the Python expression that substitutes a template's placeholders.

    "/todos/:id/complete" ->
        "/todos/" + encode_segment(path_params.id) + "/complete"
    """
    pieces: list[str] = []
    literal = ""
    for index, segment in enumerate(template.split("/")):
        if index:
            literal += "/"
        if is_placeholder(segment):
            if literal:
                pieces.append(_py_str(literal))
                literal = ""
            pieces.append(f"encode_segment({accessor}.{segment[1:]})")
        else:
            literal += segment
    if literal:
        pieces.append(_py_str(literal))
    return " + ".join(pieces)


def _param_context(param: RouteParameter) -> dict[str, Any]:
    default = " = None" if param.is_optional else ""
    return {
        "name": param.name,
        "optional": param.is_optional,
        "annotation": param.annotation,
        "declaration": f"{param.name}: {param.annotation}{default}",
    }


def _response_annotation(route: RouteMeta) -> str:
    return NO_CONTENT if route.is_no_content else route.response_type


def _make_description(route: RouteMeta) -> str:
    """Docstring for generated methods; falls back to the verb and path."""
    doc = route.doc or f"{route.method.value} {route.path}"
    return _docstring(doc)


def _client_arguments(route: RouteMeta) -> list[str]:
    args: list[str] = []
    if route.has_body:
        args.append(f"body: {route.body_type}")
    args.extend(_param_context(p)["declaration"] for p in route.parameters)
    return args


def _impl_call(route: RouteMeta) -> str:
    args = [f"{p.name}=params.{p.name}" for p in route.parameters]
    if route.has_body:
        args.append("body=body")
    return f"impl.{route.name}({', '.join(args)})"


def _handler_arguments(route: RouteMeta) -> str:
    args: list[str] = []
    if route.has_params:
        args.append("params")
    if route.has_body:
        args.append("body")
    return ", ".join(args)


def _protocol_signature(route: RouteMeta) -> str:
    args = _client_arguments(route)
    params = "self, *, " + ", ".join(args) if args else "self"
    return f"async def {route.name}({params}) -> {_response_annotation(route)}: ..."


def build_route_context(service: ServiceDefinition, route: RouteMeta) -> dict[str, Any]:
    """Assemble the template context for one route."""
    path_builder = f"{service.name}PathBuilder"
    path_struct = path_params_struct_name(route.name)

    if route.path_parameters:
        ctor_args = ", ".join(f"{p.name}={p.name}" for p in route.path_parameters)
        client_path = (
            f"{path_builder}.{route.name}({path_builder}.{path_struct}({ctor_args}))"
        )
    else:
        client_path = _py_str(route.path)

    handler_args = _handler_arguments(route)
    lambda_head = f"lambda {handler_args}" if handler_args else "lambda"

    registration_kwargs: list[str] = []
    if route.has_params:
        registration_kwargs.append(
            f"params={service.name}Params.{params_struct_name(route.name)}"
        )
    if route.method is HTTPMethod.POST:
        registration_kwargs.append(f"body={route.body_type if route.has_body else 'None'}")
    registration_kwargs.append(f"output={_response_annotation(route)}")

    return {
        "name": route.name,
        "method": route.method.value,
        "path": route.path,
        "path_literal": _py_str(route.path),
        "description": _make_description(route),
        "struct_name": params_struct_name(route.name),
        "path_params_struct": path_struct,
        "path_params": [_param_context(p) for p in route.path_parameters],
        "query_params": [_param_context(p) for p in route.query_parameters],
        "params": [_param_context(p) for p in route.parameters],
        "has_params": route.has_params,
        "has_body": route.has_body,
        "body_type": route.body_type,
        "response_type": _response_annotation(route),
        "path_expression": path_expression(route.path),
        "client_arguments": _client_arguments(route),
        "client_path": client_path,
        "protocol_signature": _protocol_signature(route),
        "register_call": _REGISTER_CALLS[(route.method, route.has_params)],
        "handler": f"{lambda_head}: {_impl_call(route)}",
        "registration_kwargs": registration_kwargs,
    }


def build_context(service: ServiceDefinition) -> dict[str, Any]:
    """Build the full template context for one service."""
    routes = [build_route_context(service, route) for route in service.routes]
    for route in routes:
        logger.debug("Context for %s %s -> %s", route["method"], route["path"], route["name"])

    return {
        "service": service.name,
        "service_description": _docstring(service.doc or f"RPC bindings for {service.name}."),
        "module_name": to_module_name(service.name),
        "imports": list(service.imports),
        "routes": routes,
        "param_routes": [r for r in routes if r["has_params"]],
        "path_routes": [r for r in routes if r["path_params"]],
        "route_count": len(routes),
    }
