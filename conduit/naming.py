"""Derive generated names from service and route names.

Pattern:
  - service TodoAPI          -> TodoAPIClient, TodoAPIParams, TodoAPIRoutes,
                                TodoAPIPathBuilder, module todo_api.py
  - route get_todo / getTodo -> struct GetTodo, path params GetTodoPathParams

Examples:
  to_struct_prefix("get_todo")      -> "GetTodo"
  to_struct_prefix("listTodos")     -> "ListTodos"
  to_module_name("TodoAPI")         -> "todo_api"
"""

from __future__ import annotations

import keyword
import re

# Locals and module helpers a generated client method reads at call time
RESERVED_PARAMETER_NAMES = frozenset({
    "self", "config", "path", "query", "send_request", "merge_configs", "encode_segment",
})

# Attributes every generated client defines before any route method
RESERVED_ROUTE_NAMES = frozenset({"base_url", "base_config", "live"})


def _camel_to_snake(name: str) -> str:
    """Convert camelCase or PascalCase to snake_case."""
    s1 = re.sub(r"([A-Z]+)([A-Z][a-z])", r"\1_\2", name)
    return re.sub(r"([a-z\d])([A-Z])", r"\1_\2", s1).lower()


def is_valid_identifier(name: object) -> bool:
    """Check that a name can be used verbatim in generated Python code."""
    return isinstance(name, str) and name.isidentifier() and not keyword.iskeyword(name)


def is_reserved_parameter(name: str) -> bool:
    return name in RESERVED_PARAMETER_NAMES


def is_reserved_route_name(name: str) -> bool:
    """Client attributes and dunder names cannot become route methods."""
    return name in RESERVED_ROUTE_NAMES or (name.startswith("__") and name.endswith("__"))


def generated_class_names(service_name: str) -> frozenset[str]:
    """Module-level classes emitted for a service."""
    return frozenset(
        service_name + suffix for suffix in ("", "Params", "PathBuilder", "Client", "Routes")
    )


def to_struct_prefix(route_name: str) -> str:
    """Capitalize each underscore-separated part: get_todo -> GetTodo."""
    parts = [p for p in route_name.split("_") if p]
    return "".join(p[:1].upper() + p[1:] for p in parts)


def to_module_name(service_name: str) -> str:
    """File name stem for a generated service module."""
    name = _camel_to_snake(service_name)
    name = re.sub(r"_+", "_", name)
    return name.strip("_")


def params_struct_name(route_name: str) -> str:
    return to_struct_prefix(route_name)


def path_params_struct_name(route_name: str) -> str:
    return to_struct_prefix(route_name) + "PathParams"
