#!/usr/bin/env python
"""Main entry point for pressfit when run as a script."""

import argparse
import logging
import sys

from pressfit import __version__


def create_parent_parser():
    """Create a parent parser with common arguments."""
    parser = argparse.ArgumentParser(add_help=False)
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Show detailed progress information",
    )

    # Add version information for parent parser epilog
    parser.epilog = f"pressfit {__version__}"

    return parser


def configure_logging(verbose=False):
    """Send library logging to stderr, at DEBUG level when verbose."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def build_parser():
    """Build the top-level parser with one subparser per command."""
    from pressfit.cli.optimize_cli import add_optimize_arguments
    from pressfit.cli.estimate_cli import add_estimate_arguments

    parent_parser = create_parent_parser()

    parser = argparse.ArgumentParser(
        prog="pressfit",
        description="Fit images into byte and dimension budgets",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
        epilog=parent_parser.epilog,
    )

    # Set up subparsers for commands
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # Optimize command
    optimize_parser = subparsers.add_parser(
        "optimize",
        help="Optimize images to fit size and dimension limits",
        parents=[parent_parser],
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    add_optimize_arguments(optimize_parser)

    # Estimate command
    estimate_parser = subparsers.add_parser(
        "estimate",
        help="Estimate the decoded byte size of a base64 data URI",
        parents=[parent_parser],
    )
    add_estimate_arguments(estimate_parser)

    # Version command
    subparsers.add_parser("version", help="Show version information")

    return parser


def main(argv=None):
    """Main entry point for the script."""
    parser = build_parser()
    args = parser.parse_args(argv)

    # Handle commands
    if args.command == "optimize":
        from pressfit.cli.optimize_cli import run_optimize

        configure_logging(args.verbose)
        return run_optimize(args)

    elif args.command == "estimate":
        from pressfit.cli.estimate_cli import run_estimate

        configure_logging(args.verbose)
        return run_estimate(args)

    elif args.command == "version":
        print(f"pressfit version {__version__}")
        return 0

    else:
        # No command specified, show help
        parser.print_help()
        return 0


if __name__ == "__main__":
    sys.exit(main())
