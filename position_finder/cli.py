#!/usr/bin/env python3
"""
Command line entry points.

position-finder <haystackPathOrDir> <needlePathOrDir> [tolerance]
    Prints a JSON report of needle positions to stdout.

position-rectangles <image>
    Writes the black rectangle layout of an image to <image>.json.

Diagnostics go to stderr through logging. Any error exits with status 1.
"""

import argparse
import logging
import sys
from typing import List, Optional

from .config import FinderConfig, PixelModel, ReportMode, FailurePolicy, LogLevel
from .constants import DEFAULT_TOLERANCE, LOG_FORMAT
from .exceptions import (
    PositionFinderError,
    UsageError,
    InvalidToleranceError,
    ConfigError,
)
from .finder import ImagePositionFinder
from .rectangles import find_black_rectangles, save_layout
from .report import render_report

logger = logging.getLogger(__name__)


class _ArgumentParser(argparse.ArgumentParser):
    """ArgumentParser raising UsageError instead of exiting with status 2."""

    def error(self, message):
        raise UsageError(message)


def setup_logging(level: LogLevel = LogLevel.INFO) -> None:
    """Setup logging configuration."""
    logging.basicConfig(
        level=getattr(logging, level.value),
        format=LOG_FORMAT,
        stream=sys.stderr,
    )
    logging.getLogger().setLevel(getattr(logging, level.value))


def parse_tolerance(value: str) -> float:
    """Parse a tolerance argument.

    Raises:
        InvalidToleranceError: If the value is not a number in [0, 1]
    """
    try:
        tolerance = float(value)
    except (TypeError, ValueError):
        raise InvalidToleranceError(f"Tolerance must be a number between 0 and 1, got {value!r}")
    if not 0.0 <= tolerance <= 1.0:
        raise InvalidToleranceError(f"Tolerance must be between 0 and 1, got {tolerance}")
    return tolerance


def build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog='position-finder',
        description="Locate needle images inside haystack images paired by file name",
    )
    parser.add_argument("haystack", help="Full image file or directory")
    parser.add_argument("needle", help="Square image file or directory")
    parser.add_argument("tolerance", nargs='?', default=None,
                        help=f"Value between 0 and 1 (default: {DEFAULT_TOLERANCE})")

    parser.add_argument("--config", help="JSON configuration file")
    parser.add_argument("--pixel-model", choices=[m.value for m in PixelModel],
                        help="Pixel tolerance model")
    parser.add_argument("--report", choices=[m.value for m in ReportMode],
                        help="Report shape")
    parser.add_argument("--best-effort", action="store_true",
                        help="Skip pairs whose images cannot be decoded")
    parser.add_argument("--workers", type=int, help="Pairs matched in parallel")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser


def load_config(args: argparse.Namespace) -> FinderConfig:
    """Merge the optional config file with command line overrides."""
    config = FinderConfig.from_file(args.config) if args.config else FinderConfig()

    if args.tolerance is not None:
        config.tolerance = parse_tolerance(args.tolerance)
    elif not 0.0 <= config.tolerance <= 1.0:
        raise InvalidToleranceError(f"Tolerance must be between 0 and 1, got {config.tolerance}")

    if args.pixel_model:
        config.pixel_model = PixelModel(args.pixel_model)
    if args.report:
        config.report_mode = ReportMode(args.report)
    if args.best_effort:
        config.failure_policy = FailurePolicy.BEST_EFFORT
    if args.workers is not None:
        config.workers = args.workers
    if args.verbose:
        config.log_level = LogLevel.DEBUG

    errors = config.validate()
    if errors:
        raise ConfigError("; ".join(errors))
    return config


def main(argv: Optional[List[str]] = None) -> int:
    """Run the position finder; returns the process exit code."""
    setup_logging()
    parser = build_parser()

    try:
        args = parser.parse_args(argv)
        config = load_config(args)
        setup_logging(config.log_level)

        logger.info("Starting processing")
        logger.info(f"Full image path: {args.haystack}")
        logger.info(f"Square image path: {args.needle}")
        config.log_summary(logger)

        finder = ImagePositionFinder(config)
        outcomes = finder.find_positions(args.haystack, args.needle)
    except UsageError as e:
        parser.print_usage(sys.stderr)
        logger.error(f"Usage error: {e}")
        return 1
    except PositionFinderError as e:
        logger.error(f"Error: {e}")
        return 1

    print(render_report(outcomes, config.report_mode))
    return 0


def rectangles_main(argv: Optional[List[str]] = None) -> int:
    """Run the black rectangle finder; returns the process exit code."""
    setup_logging()
    parser = _ArgumentParser(
        prog='position-rectangles',
        description="Extract black rectangles grouped into columns",
    )
    parser.add_argument("image", help="Input image (.png or .jpg)")

    try:
        args = parser.parse_args(argv)
        columns = find_black_rectangles(args.image)
        output_path = save_layout(args.image, columns)
    except UsageError as e:
        parser.print_usage(sys.stderr)
        logger.error(f"Usage error: {e}")
        return 1
    except PositionFinderError as e:
        logger.error(f"Error processing image: {e}")
        return 1
    except OSError as e:
        logger.error(f"Error writing layout: {e}")
        return 1

    print(f"JSON data saved to: {output_path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
