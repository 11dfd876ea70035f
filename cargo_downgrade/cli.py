"""
Command-line interface for cargo-downgrade.
"""

import argparse
import functools
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .applier import apply_target, apply_targets, format_pin
from .downgrader import Downgrader, normalize_crate_names
from .errors import GitTimestampError, LockfileError, RegistryUnavailableError
from .lockfile import load_lockfile
from .registry import DEFAULT_REGISTRY_URL, DEFAULT_REQUEST_INTERVAL, CratesIoClient
from .reporting import export_plan_csv, print_summary, save_results_json
from .selector import DEFAULT_MAX_DEPTH, select_dependencies
from .time_utils import parse_cutoff, timestamp_from_git


logger = logging.getLogger(__name__)


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"{value!r} is not an integer")
    if number < 1:
        raise argparse.ArgumentTypeError(f"{value!r} must be at least 1")
    return number


def _non_negative_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"{value!r} is not an integer")
    if number < 0:
        raise argparse.ArgumentTypeError(f"{value!r} must not be negative")
    return number


def _crate_list(value: str) -> List[str]:
    return [name for name in value.split(",") if name.strip()]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cargo-downgrade",
        description="Downgrade the dependencies of a Cargo project to the versions "
                    "that were available at a given date"
    )

    parser.add_argument(
        "--cargo-lock",
        type=Path,
        default=None,
        help="Path to the Cargo.lock file. Default: ./Cargo.lock"
    )

    when = parser.add_mutually_exclusive_group(required=True)
    when.add_argument(
        "-d", "--date",
        help="Date to which the dependencies should be downgraded. RFC 2822 "
             "(e.g. \"22 Feb 2021 23:16:09 GMT\") or ISO 8601"
    )
    when.add_argument(
        "-g", "--git",
        action="store_true",
        help="Use the commit date of the current git HEAD"
    )

    parser.add_argument(
        "-r", "--run",
        action="store_true",
        help="Actually run the downgrade with cargo update"
    )

    parser.add_argument(
        "--manifest-path",
        type=Path,
        default=None,
        help="Cargo.toml passed to cargo update when --run is given"
    )

    parser.add_argument(
        "--output-dir",
        type=Path,
        default=None,
        help="Write the downgrade plan as JSON and CSV to this directory"
    )

    parser.add_argument(
        "--registry-url",
        default=DEFAULT_REGISTRY_URL,
        help=f"Base URL of the crates.io API. Default: {DEFAULT_REGISTRY_URL}"
    )

    parser.add_argument(
        "--request-interval",
        type=_non_negative_int,
        default=int(DEFAULT_REQUEST_INTERVAL * 1000),
        help="Minimum delay between registry requests in milliseconds. Default: 1000"
    )

    parser.add_argument(
        "--max-depth",
        type=_positive_int,
        default=DEFAULT_MAX_DEPTH,
        help=f"Deepest dependency level that is visited. Default: {DEFAULT_MAX_DEPTH}"
    )

    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    verbosity.add_argument("-q", "--quiet", action="store_true", help="Only log warnings and errors")

    modes = parser.add_subparsers(dest="mode", required=True)

    all_mode = modes.add_parser(
        "all",
        help="Downgrade all transitive dependencies in Cargo.lock, optionally only one level"
    )
    all_mode.add_argument(
        "-l", "--dependency-level",
        type=_positive_int,
        default=None,
        help="Only downgrade the dependencies found at this distance from the workspace crates"
    )

    this_mode = modes.add_parser("this", help="Downgrade a list of specific crates")
    this_mode.add_argument(
        "crates",
        type=_crate_list,
        nargs="+",
        help="Comma-separated list of crate names to downgrade"
    )

    return parser


def _configure_logging(args: argparse.Namespace) -> None:
    level = logging.INFO
    if args.verbose:
        level = logging.DEBUG
    elif args.quiet:
        level = logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def main(argv: Optional[List[str]] = None):
    """Main entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args)

    if args.git:
        try:
            date = timestamp_from_git()
        except GitTimestampError as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)
    else:
        try:
            date = parse_cutoff(args.date)
        except ValueError as e:
            parser.error(str(e))

    if args.mode == "all":
        lock_path = args.cargo_lock or Path.cwd() / "Cargo.lock"
        try:
            graph = load_lockfile(lock_path)
        except LockfileError as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)
        crate_names = sorted(
            select_dependencies(graph, args.dependency_level, max_depth=args.max_depth)
        )
    else:
        crate_names = normalize_crate_names(name for group in args.crates for name in group)

    client = CratesIoClient(
        registry_url=args.registry_url,
        request_interval=args.request_interval / 1000,
    )
    downgrader = Downgrader(date, client, show_progress=sys.stderr.isatty())

    try:
        result = downgrader.downgrade(crate_names)
    except RegistryUnavailableError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    apply_failures = {}
    if args.run:
        apply = functools.partial(apply_target, manifest_path=args.manifest_path)
        apply_failures = apply_targets(result.targets, apply)
    else:
        for target in result.targets:
            print(format_pin(target))

    print_summary(result, apply_failures)

    if args.output_dir:
        results_file = save_results_json(result, args.output_dir, apply_failures)
        plan_file = export_plan_csv(result, args.output_dir, apply_failures)
        logger.info("Results saved to: %s", results_file)
        logger.info("Plan saved to: %s", plan_file)


if __name__ == "__main__":
    main()
