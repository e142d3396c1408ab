"""Command line entry point: ``config-normalizer [OPTIONS] SOURCE``.

``SOURCE`` is ``module:attribute``.  The attribute must be a
``ConfigurationSource``, or a class or zero-argument factory returning one.

Examples::

    config-normalizer myapp.settings:SOURCE                  # everything, XML, stdout
    config-normalizer -f standard -o node.properties myapp.settings:build
    config-normalizer -c orders -p before myapp.settings:build
    config-normalizer -t jgroups -j ./plugins deploy.conf:source
"""

from __future__ import annotations

import argparse
import importlib
import inspect
import logging
import sys
from collections.abc import Sequence
from typing import Any

from config_normalizer import __version__
from config_normalizer.config import OutputFormat, OutputType
from config_normalizer.errors import NormalizerError, SourceLoadError
from config_normalizer.export import write_mapping
from config_normalizer.normalizer import ConfigNormalizer
from config_normalizer.protocols import ConfigurationSource

__all__ = ["build_parser", "load_source", "main"]

logger = logging.getLogger(__name__)


def load_source(reference: str) -> ConfigurationSource:
    """Import ``module:attribute`` and return the configuration source it names.

    Raises:
        SourceLoadError: The reference is malformed, the module or attribute
            does not exist, the factory failed, or the result is not a
            ``ConfigurationSource``.
    """
    module_name, sep, attribute = reference.partition(":")
    if not sep or not module_name or not attribute:
        msg = f"Source must be given as 'module:attribute', got {reference!r}"
        raise SourceLoadError(msg)

    try:
        target: Any = importlib.import_module(module_name)
    except ImportError as exc:
        msg = f"Could not import module {module_name!r}: {exc}"
        raise SourceLoadError(msg) from exc

    for part in attribute.split("."):
        try:
            target = getattr(target, part)
        except AttributeError as exc:
            msg = f"Module {module_name!r} has no attribute {attribute!r}"
            raise SourceLoadError(msg) from exc

    # A class satisfies the Protocol check structurally; instantiate it.
    if inspect.isclass(target) or (
        callable(target) and not isinstance(target, ConfigurationSource)
    ):
        try:
            target = target()
        except Exception as exc:
            msg = f"Calling {reference!r} failed: {exc}"
            raise SourceLoadError(msg) from exc

    if not isinstance(target, ConfigurationSource):
        msg = f"{reference!r} is not a configuration source: {type(target).__name__}"
        raise SourceLoadError(msg)
    return target


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="config-normalizer",
        description="Flatten a configuration object graph into sorted properties",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Output types:
  all      every section; keys start with global, cache.<name> and jgroups
  cache    one cache (the default cache unless -c is given)
  global   the global configuration only
  jgroups  the transport protocol stack only
        """,
    )
    parser.add_argument(
        "source",
        metavar="SOURCE",
        help="Configuration source as module:attribute",
    )
    parser.add_argument(
        "-o",
        "--output",
        metavar="FILE",
        help="Output file (default: standard output)",
    )
    parser.add_argument(
        "-f",
        "--format",
        default=OutputFormat.XML.value,
        choices=[f.value for f in OutputFormat],
        help="Output format (default: xml)",
    )
    parser.add_argument(
        "-t",
        "--type",
        dest="output_type",
        choices=[t.value for t in OutputType],
        help="Sections to output (default: all)",
    )
    parser.add_argument(
        "-c",
        "--cache",
        metavar="NAME",
        help="Cache to output; implies --type cache",
    )
    parser.add_argument(
        "-p",
        "--prefix",
        default="",
        help="Prefix prepended to every property key (default: none)",
    )
    parser.add_argument(
        "-j",
        "--plugin-dir",
        action="append",
        default=[],
        metavar="DIR",
        help="Directory added to the import path before SOURCE is loaded; repeatable",
    )
    parser.add_argument(
        "--retries",
        type=int,
        default=1,
        metavar="N",
        help="Total attempts when writing the output file (default: 1)",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: WARNING)",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the command line tool and return its exit status."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.cache is not None:
        if args.output_type not in (None, OutputType.CACHE.value):
            parser.error("-c/--cache can only be combined with --type cache")
        args.output_type = OutputType.CACHE.value
    if args.retries < 1:
        parser.error(f"--retries must be >= 1, got {args.retries}")

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    for directory in reversed(args.plugin_dir):
        sys.path.insert(0, directory)

    try:
        source = load_source(args.source)
        result = ConfigNormalizer().normalize_source(
            source,
            output_type=args.output_type or OutputType.ALL,
            cache_name=args.cache,
            prefix=args.prefix,
        )
        for record in result.skipped:
            logger.info("Skipped %s: %r", record.path, record.error)

        if args.output:
            write_mapping(result.properties, args.output, args.format, attempts=args.retries)
        else:
            write_mapping(result.properties, sys.stdout.buffer, args.format)
            sys.stdout.buffer.flush()
    except (NormalizerError, OSError, ValueError) as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1
    return 0
