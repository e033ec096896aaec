"""Parse method declarations into RouteMeta records.

Handles:
- Verb validation (GET/POST)
- Literal path templates with :name placeholders
- Path vs query categorization against the template placeholders
- The POST-only ``body`` parameter naming the payload type
- str / optional str parameter types
- Verbatim response type capture (``None`` = no content)
"""

from __future__ import annotations

import logging
import re
from typing import Any

from .errors import (
    DuplicateRoute,
    InvalidIdentifier,
    InvalidMethod,
    InvalidPath,
    MissingResponseType,
    UnsupportedParameterType,
)
from .loader import get_imports, get_methods, get_parameters, get_service_name
from .models import HTTPMethod, RouteMeta, RouteParameter, ServiceDefinition
from .naming import (
    generated_class_names,
    is_reserved_parameter,
    is_reserved_route_name,
    is_valid_identifier,
    to_struct_prefix,
)
from .paths import placeholder_names

logger = logging.getLogger(__name__)

BODY_PARAMETER = "body"

_REQUIRED_STRING = {"str"}
_OPTIONAL_STRING = {"str|None", "None|str", "Optional[str]", "typing.Optional[str]"}


def _normalize_type(type_text: str) -> str:
    return re.sub(r"\s+", "", type_text)


def _type_names(*type_texts: str | None) -> set[str]:
    """Identifiers a generated client method evaluates for its types."""
    return {
        name for text in type_texts if text for name in re.findall(r"[A-Za-z_]\w*", text)
    }


def _route_shape(route: RouteMeta) -> tuple[str, str]:
    """Verb and path with placeholder names blanked out."""
    segments = [":" if seg.startswith(":") else seg for seg in route.path.split("/")]
    return route.method.value, "/".join(segments)


def parse_method(value: Any, route: str | None = None) -> HTTPMethod:
    """Resolve a verb, case-insensitively."""
    if isinstance(value, str):
        try:
            return HTTPMethod(value.strip().upper())
        except ValueError:
            pass
    raise InvalidMethod(f"unsupported HTTP method {value!r}", route)


def extract_path_parameters(path: Any, route: str | None = None) -> list[str]:
    """Validate a literal path template and return its placeholder names."""
    if not isinstance(path, str):
        raise InvalidPath(
            f"path must be a literal string, got {type(path).__name__}", route
        )
    if not path.startswith("/"):
        raise InvalidPath(f"path {path!r} must start with '/'", route)
    if "?" in path:
        raise InvalidPath(
            f"path {path!r} contains a query string; declare query parameters instead",
            route,
        )
    if "{" in path or "}" in path:
        raise InvalidPath(f"path {path!r} must use :name placeholders", route)

    names = placeholder_names(path)
    seen: set[str] = set()
    for name in names:
        if not name:
            raise InvalidPath(f"path {path!r} has an empty placeholder", route)
        if not is_valid_identifier(name):
            raise InvalidPath(f"placeholder :{name} is not a valid identifier", route)
        if name in seen:
            raise InvalidPath(f"placeholder :{name} appears twice in {path!r}", route)
        seen.add(name)
    return names


def parse_parameter_type(type_text: Any, name: str, route: str | None = None) -> bool:
    """Return True if the type is optional str, False for plain str."""
    if type_text is None:
        return False
    if isinstance(type_text, str):
        normalized = _normalize_type(type_text)
        if normalized in _REQUIRED_STRING:
            return False
        if normalized in _OPTIONAL_STRING:
            return True
    raise UnsupportedParameterType(
        f"parameter {name!r} has unsupported type {type_text!r}", route
    )


def get_response_type(declaration: dict[str, Any], route: str | None = None) -> str:
    """Capture the declared response type text verbatim."""
    returns = declaration.get("returns")
    if not isinstance(returns, str) or not returns.strip():
        raise MissingResponseType("missing response type", route)
    return returns.strip()


def parse_route(declaration: dict[str, Any]) -> RouteMeta:
    """Parse one method declaration into a RouteMeta."""
    name = declaration.get("name")
    if not is_valid_identifier(name):
        raise InvalidIdentifier(f"method name {name!r} is not a valid identifier")
    if is_reserved_route_name(name):
        raise InvalidIdentifier(f"method name {name!r} is taken by the generated client")

    method = parse_method(declaration.get("method"), name)
    path = declaration.get("path")
    path_names = extract_path_parameters(path, name)
    path_name_set = set(path_names)
    response_type = get_response_type(declaration, name)

    body_type: str | None = None
    path_params: dict[str, RouteParameter] = {}
    query_params: list[RouteParameter] = []
    seen: set[str] = set()

    for param in get_parameters(declaration):
        param_name = param.get("name")
        param_type = param.get("type")

        if param_name == BODY_PARAMETER and method is HTTPMethod.POST:
            if BODY_PARAMETER in path_name_set:
                raise InvalidPath("the body parameter cannot be a path placeholder", name)
            if body_type is not None:
                raise InvalidIdentifier("parameter 'body' declared twice", name)
            if not isinstance(param_type, str) or not param_type.strip():
                raise UnsupportedParameterType("body parameter needs a type", name)
            body_type = param_type.strip()
            continue

        if not is_valid_identifier(param_name):
            raise InvalidIdentifier(
                f"parameter name {param_name!r} is not a valid identifier", name
            )
        if is_reserved_parameter(param_name):
            raise InvalidIdentifier(
                f"parameter name {param_name!r} is taken by the generated client", name
            )
        if param_name in seen:
            raise InvalidIdentifier(f"parameter {param_name!r} declared twice", name)
        seen.add(param_name)

        is_optional = parse_parameter_type(param_type, param_name, name)
        route_param = RouteParameter(name=param_name, is_optional=is_optional)

        if param_name in path_name_set:
            if is_optional:
                raise UnsupportedParameterType(
                    f"path parameter {param_name!r} cannot be optional", name
                )
            path_params[param_name] = route_param
        else:
            query_params.append(route_param)

    missing = [p for p in path_names if p not in path_params]
    if missing:
        raise InvalidPath(
            "placeholders without a declared parameter: "
            + ", ".join(f":{p}" for p in missing),
            name,
        )

    shadowed = sorted(seen & _type_names(body_type, response_type))
    if shadowed:
        raise InvalidIdentifier(
            f"parameter {shadowed[0]!r} shadows a name used in the route's types", name
        )

    doc = declaration.get("doc") or ""
    route = RouteMeta(
        name=name,
        path=path,
        method=method,
        path_parameters=tuple(path_params[p] for p in path_names),
        query_parameters=tuple(query_params),
        body_type=body_type,
        response_type=response_type,
        doc=doc.strip(),
    )
    logger.debug(
        "Parsed %s %s %s (path=%s, query=%s, body=%s)",
        route.method.value,
        route.path,
        route.name,
        [p.name for p in route.path_parameters],
        [p.name for p in route.query_parameters],
        route.body_type,
    )
    return route


def parse_service(definition: dict[str, Any]) -> ServiceDefinition:
    """Parse a full interface definition into a ServiceDefinition."""
    service_name = get_service_name(definition)
    if not is_valid_identifier(service_name):
        raise InvalidIdentifier(f"service name {service_name!r} is not a valid identifier")

    class_names = generated_class_names(service_name)
    routes: list[RouteMeta] = []
    struct_names: dict[str, str] = {}
    for declaration in get_methods(definition):
        route = parse_route(declaration)
        clashing = sorted(class_names & {p.name for p in route.parameters})
        if clashing:
            raise InvalidIdentifier(
                f"parameter {clashing[0]!r} shadows a generated class", route.name
            )
        if any(r.name == route.name for r in routes):
            raise DuplicateRoute("method declared twice", route.name)
        struct_name = to_struct_prefix(route.name)
        if struct_name in struct_names:
            raise DuplicateRoute(
                f"struct name {struct_name} collides with {struct_names[struct_name]}",
                route.name,
            )
        struct_names[struct_name] = route.name
        shape = _route_shape(route)
        for other in routes:
            if _route_shape(other) == shape:
                raise DuplicateRoute(
                    f"{route.method.value} {route.path} overlaps {other.name}",
                    route.name,
                )
        routes.append(route)

    doc = definition.get("doc") or ""
    return ServiceDefinition(
        name=service_name,
        routes=tuple(routes),
        imports=tuple(get_imports(definition)),
        doc=doc.strip(),
    )
