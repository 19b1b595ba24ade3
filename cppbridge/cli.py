"""Command-line entry point.

Usage::

    python -m cppbridge bindings.json -o generated/ [-n NAMESPACE] [-j JOBS]

Reads a JSON descriptor document (see :mod:`cppbridge.loader`) and writes
the enum and callback interface headers into the output directory. Files
whose content is unchanged are left alone.
"""

from __future__ import annotations

import argparse
import logging
import sys

from cppbridge.config import GeneratorConfig, log_level_from_env
from cppbridge.errors import GenerationError
from cppbridge.generator import Generator
from cppbridge.loader import load_module
from cppbridge.writers import get_writer_info

logger = logging.getLogger("cppbridge")


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not an integer: {value!r}") from None
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1: {number}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cppbridge",
        description="Generate C callback structs, C++ wrapper classes and C enum headers.",
    )
    parser.add_argument("descriptor", nargs="?", help="JSON descriptor document")
    parser.add_argument("-o", "--output-dir", default=".", help="directory for generated headers (default: .)")
    parser.add_argument(
        "-n",
        "--namespace",
        default=None,
        help="C++ namespace for generated classes (default: $CPPBRIDGE_NAMESPACE, "
        "then the descriptor's namespace, then 'cppbridge')",
    )
    parser.add_argument(
        "-j",
        "--jobs",
        type=_positive_int,
        default=None,
        help="number of declarations generated in parallel (default: $CPPBRIDGE_JOBS or 1)",
    )
    parser.add_argument("--dry-run", action="store_true", help="render headers but do not write them")
    parser.add_argument("--list-writers", action="store_true", help="list available writers and exit")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="increase log verbosity")
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose >= 2:
        level = logging.DEBUG
    elif args.verbose == 1:
        level = logging.INFO
    else:
        level = log_level_from_env()
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")

    if args.list_writers:
        for info in get_writer_info():
            print(f"{info['name']}: {info['description']}")
        return 0

    if args.descriptor is None:
        parser.error("the following arguments are required: descriptor")

    config = GeneratorConfig.from_env(args.output_dir, namespace=args.namespace, jobs=args.jobs, dry_run=args.dry_run)
    try:
        module = load_module(args.descriptor)
        result = Generator(config).generate(module)
    except GenerationError as e:
        logger.error("generation failed: %s", e)
        return 1

    if config.dry_run:
        for file_name in result.files:
            print(file_name)
    return 0


if __name__ == "__main__":
    sys.exit(main())
