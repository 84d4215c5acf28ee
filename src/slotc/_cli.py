"""Slotc CLI — slotc compile.

Entry point for the ``slotc`` command-line interface.

Exit codes:
    0  build succeeded
    1  startup failure (missing source dir or layout, bad config file)
    2  build ran but at least one page failed
"""

from __future__ import annotations

import argparse
import sys

EXIT_OK = 0
EXIT_STARTUP = 1
EXIT_BUILD_FAILED = 2


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the slotc CLI."""
    parser = argparse.ArgumentParser(
        prog="slotc",
        description="Schema-enforcing static HTML compiler.",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {_get_version()}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # slotc compile
    compile_parser = subparsers.add_parser(
        "compile",
        help="Normalize pages and merge them into the layout",
    )
    compile_parser.add_argument(
        "source", nargs="?", default=None, help="Source directory (default: src)",
    )
    compile_parser.add_argument(
        "output", nargs="?", default=None, help="Output directory (default: dist)",
    )
    compile_parser.add_argument(
        "--watch", action="store_true", help="Rebuild when source files change",
    )
    compile_parser.add_argument(
        "--layout", default=None, help="Layout file name (default: _layout.html)",
    )
    compile_parser.add_argument(
        "--quiet", action="store_true", help="Only report through the exit code",
    )

    return parser


def _get_version() -> str:
    """Get the package version."""
    from slotc import __version__

    return __version__


def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(EXIT_OK)

    from slotc._errors import ConfigError
    from slotc.app import build, watch

    overrides: dict[str, object] = {"layout": args.layout}
    if args.quiet:
        overrides["verbose"] = False

    run = watch if args.watch else build
    try:
        result = run(args.source, args.output, **overrides)
    except ConfigError as exc:
        print(f"[Error] {exc}", file=sys.stderr)
        sys.exit(EXIT_STARTUP)

    # An interrupted watch session ends normally whatever the last build did.
    if args.watch or result.ok:
        sys.exit(EXIT_OK)
    sys.exit(EXIT_BUILD_FAILED)


if __name__ == "__main__":
    main()
