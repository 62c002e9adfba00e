"""Perch CLI — inspect how an endpoint type maps to paths.

Entry point registered as ``perch`` in ``pyproject.toml``::

    [project.scripts]
    perch = "perch.cli:main"
"""

import argparse
import logging
import sys

from perch.config import CASE_PREFIX_MODES, RouterConfig


def _add_endpoint_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "endpoint",
        help="Import string of the endpoint type (e.g. myapp.pages:Page)",
    )
    parser.add_argument(
        "--case-prefix",
        choices=CASE_PREFIX_MODES,
        default="name",
        help="Prefix for cases without @endpoint (default: name)",
    )
    parser.add_argument(
        "--strip-slashes",
        action="store_true",
        help="Ignore leading/trailing slashes in matched paths",
    )


def config_from_args(args: argparse.Namespace) -> RouterConfig:
    """Build a RouterConfig from the shared endpoint options."""
    return RouterConfig(case_prefix=args.case_prefix, strip_slashes=args.strip_slashes)


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``perch`` command."""
    parser = argparse.ArgumentParser(
        prog="perch",
        description="Perch — type-directed routing between endpoint values and paths.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log resolution details")
    subparsers = parser.add_subparsers(dest="command")

    # -- perch routes -----------------------------------------------------
    routes_parser = subparsers.add_parser("routes", help="List the path pattern of each case")
    _add_endpoint_arguments(routes_parser)

    # -- perch match ------------------------------------------------------
    match_parser = subparsers.add_parser("match", help="Show every endpoint matching a path")
    _add_endpoint_arguments(match_parser)
    match_parser.add_argument("path", help="Path to match (e.g. user/42)")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    if args.command == "routes":
        from perch.cli._routes import run_routes

        run_routes(args)
    elif args.command == "match":
        from perch.cli._match import run_match

        run_match(args)
