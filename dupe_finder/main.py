#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Main CLI entry point for the Duplicate Finder.
"""

import argparse
import sys
import logging
from pathlib import Path

from .config import ScanConfig, RetentionPolicy, ClusteringMode
from .database.manager import DatabaseManager
from .commands.scan import ScanCommand
from .commands.results import cmd_show_results, cmd_delete_duplicates
from .commands.maintenance import cmd_reset
from .errors import ConfigurationError
from .jsonio import enable_json_logging, error


def setup_logging(verbose: bool):
    """Configure logging for the CLI tool."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)]
    )
    logging.debug("Verbose logging enabled (DEBUG level).")


def create_parser():
    """Create and configure the argument parser."""
    parser = argparse.ArgumentParser(
        description="Duplicate Finder - incremental exact and near-duplicate image scanner",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""Examples:
  # Quick look at the first 1000 new or changed images
  %(prog)s scan --source ~/Pictures

  # Full batched scan, 200 images per batch
  %(prog)s scan --source ~/Pictures --full --batch-size 200

  # Show the cached result, then delete exact duplicates
  %(prog)s results --source ~/Pictures
  %(prog)s delete --source ~/Pictures --type exact --yes

  # Forget what was scanned
  %(prog)s reset --records
        """
    )

    # Global options
    parser.add_argument("--db", default="dupe_finder.db",
                        help="SQLite database path (default: dupe_finder.db)")
    parser.add_argument("--verbose", "-v", action="store_true",
                        help="Enable verbose (DEBUG) output")
    parser.add_argument("--json", action="store_true",
                        help="Output results as JSON instead of human-readable text")

    subparsers = parser.add_subparsers(dest="command", required=True, help="Available commands")

    _add_scan_parser(subparsers)
    _add_results_parsers(subparsers)
    _add_reset_parser(subparsers)

    return parser


def _add_config_arguments(p):
    """Options that make up the scan configuration snapshot."""
    p.add_argument("--config", help="JSON settings file (flags override its values)")
    p.add_argument("--threshold", type=float,
                   help="Similarity distance threshold, 0.0 identical .. 1.0 unrelated (default: 0.2)")
    p.add_argument("--no-similar", action="store_true",
                   help="Only report exact duplicates")
    p.add_argument("--skip-heic", action="store_true",
                   help="Skip HEIC images")
    p.add_argument("--max-dimension", type=int,
                   help="Longest side of the rendition used for similarity (default: 1024)")
    p.add_argument("--keep", choices=[r.value for r in RetentionPolicy],
                   help="Which member of a group counts as the one to keep (default: keep_newest)")
    p.add_argument("--clustering", choices=[c.value for c in ClusteringMode],
                   help="Similarity clustering strategy (default: union_find)")
    p.add_argument("--no-cache", action="store_true",
                   help="Do not store or read cached results")
    p.add_argument("--cache-hours", type=float,
                   help="Cached result validity window in hours (default: 24)")


def _add_scan_parser(subparsers):
    scan_parser = subparsers.add_parser("scan", help="Scan a folder for duplicate images")
    scan_parser.add_argument("--source", required=True, help="Folder to scan")
    scan_parser.add_argument("--full", action="store_true",
                             help="Scan every changed image in batches instead of a partial scan")
    scan_parser.add_argument("--batch-size", type=int,
                             help="Images per batch for a full scan (default: 100)")
    scan_parser.add_argument("--max-items", type=int,
                             help="Images processed by a partial scan (default: 1000)")
    scan_parser.add_argument("--batches", type=int,
                             help="Stop a full scan after this many batches")
    scan_parser.add_argument("--no-progress", action="store_true",
                             help="Hide the progress bar")
    _add_config_arguments(scan_parser)


def _add_results_parsers(subparsers):
    results_parser = subparsers.add_parser("results", help="Show the cached result of the last scan")
    results_parser.add_argument("--source", required=True, help="Folder that was scanned")
    _add_config_arguments(results_parser)

    delete_parser = subparsers.add_parser("delete", help="Delete duplicates found by the last scan")
    delete_parser.add_argument("--source", required=True, help="Folder that was scanned")
    delete_parser.add_argument("--type", choices=["exact", "similar"],
                               help="Only delete from groups of this type")
    delete_parser.add_argument("--yes", action="store_true",
                               help="Actually delete (otherwise only list)")
    _add_config_arguments(delete_parser)


def _add_reset_parser(subparsers):
    reset_parser = subparsers.add_parser("reset", help="Clear scan records and/or cached results")
    reset_parser.add_argument("--records", action="store_true", help="Clear scan records")
    reset_parser.add_argument("--cache", action="store_true", help="Clear cached results")


def build_config(args) -> ScanConfig:
    """Settings file first, then command-line overrides."""
    config = ScanConfig.load(Path(args.config)) if getattr(args, "config", None) else ScanConfig()
    changes = {}
    if getattr(args, "threshold", None) is not None:
        changes["similarity_threshold"] = args.threshold
    if getattr(args, "no_similar", False):
        changes["similarity_enabled"] = False
    if getattr(args, "skip_heic", False):
        changes["skip_heic"] = True
    if getattr(args, "max_dimension", None) is not None:
        changes["max_image_dimension"] = args.max_dimension
    if getattr(args, "keep", None):
        changes["retention"] = RetentionPolicy(args.keep)
    if getattr(args, "clustering", None):
        changes["clustering"] = ClusteringMode(args.clustering)
    if getattr(args, "no_cache", False):
        changes["cache_enabled"] = False
    if getattr(args, "cache_hours", None) is not None:
        changes["cache_validity_hours"] = args.cache_hours
    if getattr(args, "batch_size", None) is not None:
        changes["batch_size"] = args.batch_size
    if getattr(args, "max_items", None) is not None:
        changes["max_items_to_process"] = args.max_items
    return config.with_changes(**changes) if changes else config


def run(argv=None) -> int:
    """Parse arguments and execute one command; returns the exit code."""
    parser = create_parser()
    args = parser.parse_args(argv)
    as_json = getattr(args, "json", False)

    # Setup logging based on --verbose (but suppress if JSON output requested)
    if as_json:
        enable_json_logging()
    else:
        setup_logging(args.verbose)

    logging.debug("Parsed arguments: %s", args)

    db_manager = DatabaseManager(Path(args.db))
    logging.debug("Using database: %s", args.db)

    try:
        if args.command == "scan":
            config = build_config(args)
            scanner = ScanCommand(db_manager, Path(args.source), config,
                                  show_progress=not (args.no_progress or as_json))
            return scanner.execute(full_scan=args.full, max_batches=args.batches, as_json=as_json)

        elif args.command == "results":
            return cmd_show_results(db_manager, Path(args.source), build_config(args), as_json)

        elif args.command == "delete":
            return cmd_delete_duplicates(db_manager, Path(args.source), build_config(args),
                                         args.type, args.yes, as_json)

        elif args.command == "reset":
            # Neither flag means both
            records = args.records or not args.cache
            cache = args.cache or not args.records
            return cmd_reset(db_manager, records, cache, as_json)

    except KeyboardInterrupt:
        if as_json:
            return error(args.command, "Operation interrupted by user", code=130)
        logging.warning("Operation interrupted by user.")
        return 130
    except (ConfigurationError, FileNotFoundError) as e:
        if as_json:
            return error(args.command, str(e), code=2)
        print(f"Error: {e}", file=sys.stderr)
        return 2
    except Exception as e:
        if as_json:
            debug_info = {"exception_type": type(e).__name__} if args.verbose else None
            return error(args.command, str(e), debug=debug_info, code=1)
        logging.error("Error occurred: %s", e, exc_info=args.verbose)
        return 1
    finally:
        db_manager.close()

    return 0


def main():
    sys.exit(run())


if __name__ == "__main__":
    main()
