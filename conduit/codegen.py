"""Render templates and write generated output.

Takes the context from context_builder and produces one Python module
holding the params structs, path builder, service protocol, client and
route registration glue.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import jinja2

logger = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).parent / "templates"
TEMPLATE_NAME = "service.py.j2"


def _environment() -> jinja2.Environment:
    return jinja2.Environment(
        loader=jinja2.FileSystemLoader(str(TEMPLATE_DIR)),
        keep_trailing_newline=True,
        trim_blocks=True,
        lstrip_blocks=True,
        undefined=jinja2.StrictUndefined,
    )


def render(context: dict[str, Any]) -> str:
    """Render the service template to Python source text."""
    template = _environment().get_template(TEMPLATE_NAME)
    return template.render(**context)


def default_output_path(context: dict[str, Any]) -> Path:
    return Path(f"{context['module_name']}.py")


def generate(context: dict[str, Any], output_path: Path | str | None = None) -> Path:
    """Render the service template and write it to ``output_path``."""
    output = render(context)
    path = Path(output_path) if output_path is not None else default_output_path(context)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(output, encoding="utf-8")

    logger.info("Generated %s (%d routes)", path, context["route_count"])
    return path


def is_up_to_date(context: dict[str, Any], output_path: Path | str) -> bool:
    """Check whether ``output_path`` already holds the rendered output."""
    path = Path(output_path)
    if not path.exists():
        return False
    return path.read_text(encoding="utf-8") == render(context)
