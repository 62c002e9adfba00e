"""``perch match`` — show every endpoint value a path decodes to."""

import argparse
import sys

from perch.cli import config_from_args
from perch.cli._resolve import resolve_endpoint
from perch.errors import PerchError
from perch.router import compile_codec


def run_match(args: argparse.Namespace) -> None:
    """Print each full-path match in order; exit 1 when there is none.

    The first line is what a router would dispatch; any further lines
    are ambiguous alternatives that lose the tie.
    """
    try:
        codec = compile_codec(resolve_endpoint(args.endpoint), config_from_args(args))
    except (ModuleNotFoundError, AttributeError, PerchError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    found = 0
    for value in codec.matches(args.path):
        marker = "*" if found == 0 else " "
        print(f"{marker} {value!r}")
        found += 1

    if not found:
        print(f"No endpoint matches {args.path!r}.", file=sys.stderr)
        raise SystemExit(1)
