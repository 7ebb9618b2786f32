#!/usr/bin/env python3
"""
CLI interface for duplicate sweeper
"""

import argparse
import logging
import sys

from . import __version__
from .index import build_index
from .reconciler import (
    MODE_AUTO,
    MODE_DRY_RUN,
    MODE_INTERACTIVE,
    format_size,
    reconcile,
)
from .walker import walk_files

logger = logging.getLogger(__name__)


def parse_args(argv=None) -> argparse.Namespace:
    """Parse command line arguments"""
    parser = argparse.ArgumentParser(
        prog="duplicate-sweeper",
        description="Detect duplicate files by content and delete redundant copies",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  duplicate-sweeper /path/to/directory
  duplicate-sweeper /path/to/directory --dry-run
  duplicate-sweeper /path/to/directory --yes --verify
  duplicate-sweeper /path/to/directory --min-size 1024 --show-size
  duplicate-sweeper /path/to/directory --workers 4
        """
    )

    parser.add_argument(
        "directory",
        help="Directory to scan for duplicate files"
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}"
    )
    parser.add_argument(
        "-y", "--yes",
        action="store_true",
        help="Delete duplicates without asking (keeps first occurrence)"
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show what would be deleted without actually deleting"
    )
    parser.add_argument(
        "--verify",
        action="store_true",
        help="Compare files byte for byte before deleting them"
    )
    parser.add_argument(
        "--min-size",
        type=int,
        default=0,
        help="Minimum file size in bytes (default: 0)"
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=1,
        help="Number of threads used for hashing (default: 1)"
    )
    parser.add_argument(
        "--show-size",
        action="store_true",
        help="Show file sizes"
    )
    parser.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Suppress progress output"
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose logging (INFO level)"
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging (DEBUG level)"
    )

    return parser.parse_args(argv)


def validate_args(args: argparse.Namespace) -> None:
    """Validate command line arguments"""
    if args.yes and args.dry_run:
        raise ValueError("Cannot use both --yes and --dry-run")

    if args.min_size < 0:
        raise ValueError("Minimum size must be non-negative")

    if args.workers < 1:
        raise ValueError("Number of workers must be at least 1")


def setup_logging(verbose: bool = False, debug: bool = False) -> None:
    """Configure logging on stderr"""
    if debug:
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    else:
        level = logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s")


def get_mode(args: argparse.Namespace) -> str:
    if args.dry_run:
        return MODE_DRY_RUN
    if args.yes:
        return MODE_AUTO
    return MODE_INTERACTIVE


def main(argv=None) -> None:
    """Main CLI entry point"""
    try:
        args = parse_args(argv)
        validate_args(args)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    setup_logging(verbose=args.verbose, debug=args.debug)

    try:
        paths = walk_files(args.directory, min_size=args.min_size)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    if not args.quiet:
        print(f"Scanning directory: {args.directory}", file=sys.stderr)

    try:
        buckets, skipped = build_index(
            paths,
            workers=args.workers,
            show_progress=not args.quiet
        )
        if skipped and not args.quiet:
            print(f"Skipped {len(skipped)} unreadable files", file=sys.stderr)

        result = reconcile(
            buckets,
            mode=get_mode(args),
            verify=args.verify,
            show_size=args.show_size
        )

        if result.confirmed and not args.quiet:
            print(f"Deleted {result.deleted} files, freed {format_size(result.freed)}", file=sys.stderr)
            if result.failed:
                print(f"Failed to delete {len(result.failed)} files", file=sys.stderr)

    except EOFError as e:
        print(f"\nError: {e}", file=sys.stderr)
        sys.exit(1)

    except KeyboardInterrupt:
        if not args.quiet:
            print("\n\nOperation cancelled by user", file=sys.stderr)
        sys.exit(130)

    except Exception as e:
        logger.debug("Unexpected failure", exc_info=True)
        print(f"\nError: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
