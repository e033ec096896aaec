"""Entry point: python -m conduit [definition.json] [-o OUTPUT]

Reads an interface definition and generates the client, params structs
and route registration glue as one Python module.

Defaults come from CONDUIT_DEFINITION / CONDUIT_OUTPUT, then
service.json and <service_snake>.py in the working directory.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

from .codegen import default_output_path, generate, is_up_to_date, render
from .context_builder import build_context
from .errors import RouteDefinitionError
from .loader import DEFINITION_PATH, load_definition
from .route_parser import parse_service


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="conduit",
        description="Generate a typed RPC client and server glue from an interface definition.",
    )
    parser.add_argument(
        "definition",
        nargs="?",
        default=os.environ.get("CONDUIT_DEFINITION", str(DEFINITION_PATH)),
        help="Interface definition JSON file (default: %(default)s)",
    )
    parser.add_argument(
        "-o",
        "--output",
        default=os.environ.get("CONDUIT_OUTPUT"),
        help="Output module path (default: <service_snake>.py)",
    )
    parser.add_argument("--stdout", action="store_true", help="Print instead of writing")
    parser.add_argument(
        "--check",
        action="store_true",
        help="Exit 1 if the output file is missing or out of date",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = _parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        service = parse_service(load_definition(args.definition))
    except (OSError, ValueError) as exc:
        print(f"conduit: cannot read {args.definition}: {exc}", file=sys.stderr)
        return 1
    except RouteDefinitionError as exc:
        print(f"conduit: {type(exc).__name__}: {exc}", file=sys.stderr)
        return 1

    context = build_context(service)
    output_path = Path(args.output) if args.output else default_output_path(context)

    if args.stdout:
        sys.stdout.write(render(context))
        return 0
    if args.check:
        if is_up_to_date(context, output_path):
            print(f"{output_path} is up to date")
            return 0
        print(f"{output_path} is out of date", file=sys.stderr)
        return 1

    generate(context, output_path)
    print(f"Generated {output_path} ({context['route_count']} routes)")
    return 0


if __name__ == "__main__":
    sys.exit(main())
