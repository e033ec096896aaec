"""Fluent builder for interface definitions.

Produces the same dict shape as a JSON definition file, so both go
through the same route parser::

    api = (
        ServiceSchema("TodoAPI")
        .imports("from todo_app.models import Todo")
        .get("get_todo", "/todos/:id", params={"id": "str"}, returns="Todo")
    )
    service = api.build()
"""

from __future__ import annotations

from typing import Any

from .models import ServiceDefinition
from .route_parser import parse_service


class ServiceSchema:
    def __init__(self, name: str, doc: str = "") -> None:
        self.name = name
        self.doc = doc
        self._imports: list[str] = []
        self._methods: list[dict[str, Any]] = []

    def imports(self, *lines: str) -> ServiceSchema:
        self._imports.extend(lines)
        return self

    def route(
        self,
        method: str,
        name: str,
        path: Any,
        *,
        params: dict[str, str] | None = None,
        body: str | None = None,
        returns: str | None = None,
        doc: str = "",
    ) -> ServiceSchema:
        parameters = [{"name": n, "type": t} for n, t in (params or {}).items()]
        if body is not None:
            parameters.append({"name": "body", "type": body})
        declaration: dict[str, Any] = {
            "name": name,
            "method": method,
            "path": path,
            "parameters": parameters,
            "returns": returns,
        }
        if doc:
            declaration["doc"] = doc
        self._methods.append(declaration)
        return self

    def get(self, name: str, path: Any, **kwargs: Any) -> ServiceSchema:
        return self.route("GET", name, path, **kwargs)

    def post(self, name: str, path: Any, **kwargs: Any) -> ServiceSchema:
        return self.route("POST", name, path, **kwargs)

    def to_dict(self) -> dict[str, Any]:
        definition: dict[str, Any] = {
            "service": self.name,
            "imports": list(self._imports),
            "methods": [dict(m) for m in self._methods],
        }
        if self.doc:
            definition["doc"] = self.doc
        return definition

    def build(self) -> ServiceDefinition:
        return parse_service(self.to_dict())
