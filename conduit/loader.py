"""Load an interface definition.

Reads a JSON file (default: service.json in the working directory) and
exposes the pieces the route parser consumes.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

DEFINITION_PATH = Path("service.json")


def load_definition(path: Path | str | None = None) -> dict[str, Any]:
    """Load an interface definition from disk."""
    definition_file = Path(path) if path is not None else DEFINITION_PATH
    logger.debug("Loading interface definition from %s", definition_file)
    with open(definition_file, encoding="utf-8") as f:
        return json.load(f)


def get_service_name(definition: dict[str, Any]) -> Any:
    """Extract the service name."""
    return definition.get("service")


def get_methods(definition: dict[str, Any]) -> list[dict[str, Any]]:
    """Extract method declarations in definition order."""
    return list(definition.get("methods", []))


def get_imports(definition: dict[str, Any]) -> list[str]:
    """Extract import lines, dropping blanks and repeats but keeping order."""
    seen: set[str] = set()
    imports: list[str] = []
    for line in definition.get("imports", []):
        line = line.strip()
        if line and line not in seen:
            seen.add(line)
            imports.append(line)
    return imports


def get_parameters(method: dict[str, Any]) -> list[dict[str, Any]]:
    """Normalize a method's parameters to a list of {name, type} dicts.

    Accepts either a list of dicts or a mapping of name -> type text.
    """
    params = method.get("parameters", [])
    if isinstance(params, dict):
        return [{"name": name, "type": type_} for name, type_ in params.items()]
    return list(params)
