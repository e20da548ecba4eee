"""CLI interface for data URI size estimation."""

import sys

from pressfit.utils.data_uri import estimate_bytes_from_data_uri


def add_estimate_arguments(parser):
    """Add estimate arguments to a parser."""
    parser.add_argument(
        "data_uri",
        nargs="?",
        default="-",
        help="Data URI to measure, or '-' to read it from stdin",
    )


def run_estimate(args):
    """Print the decoded byte size of a data URI.

    Args:
        args: Parsed command-line arguments

    Returns:
        int: Exit code (0 for success, 1 if the input has no base64 payload)
    """
    data_uri = sys.stdin.read() if args.data_uri == "-" else args.data_uri

    size = estimate_bytes_from_data_uri(data_uri)
    if size is None:
        print("Input is not a base64 data URI", file=sys.stderr)
        return 1

    print(size)
    return 0
