"""``perch routes`` — list the path pattern of each endpoint case."""

import argparse
import sys

from perch.cli import config_from_args
from perch.cli._resolve import resolve_endpoint
from perch.codecs.sum import case_prefix
from perch.config import RouterConfig
from perch.errors import PerchError
from perch.inference import describe
from perch.router import compile_codec
from perch.types import Field, Ref, Sum, TypeDescriptor, describe_name


def field_pattern(f: Field) -> str:
    """``{name:type}`` placeholder for one field."""
    return f"{{{f.name}:{describe_name(f.type)}}}"


def route_patterns(descriptor: TypeDescriptor, config: RouterConfig) -> list[tuple[str, str]]:
    """Return ``(case, pattern)`` rows for *descriptor*.

    A sum gives one row per case; anything else gives a single row.
    """
    while isinstance(descriptor, Ref):
        descriptor = descriptor.target()

    if not isinstance(descriptor, Sum):
        return [(describe_name(descriptor), f"{{{describe_name(descriptor)}}}")]

    rows: list[tuple[str, str]] = []
    for case in descriptor.cases:
        parts = [field_pattern(f) for f in case.fields]
        prefix = case_prefix(case, config)
        if prefix:
            parts.insert(0, prefix)
        rows.append((case.name, config.separator.join(parts)))
    return rows


def run_routes(args: argparse.Namespace) -> None:
    """Print a CASE / PATTERN table for ``args.endpoint``."""
    config = config_from_args(args)
    try:
        endpoint = resolve_endpoint(args.endpoint)
        descriptor = describe(endpoint)
        # Compile as well, so configuration errors are reported here
        compile_codec(descriptor, config)
    except (ModuleNotFoundError, AttributeError, PerchError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    rows = route_patterns(descriptor, config)
    max_case = max(max(len(r[0]) for r in rows), 4)  # "CASE" header

    fmt = f"{{:<{max_case}}}  {{}}"
    print(fmt.format("CASE", "PATTERN"))
    print("-" * min(max_case + 2 + max(len(r[1]) for r in rows), 80))
    for name, pattern in rows:
        print(fmt.format(name, pattern or "(empty)"))
