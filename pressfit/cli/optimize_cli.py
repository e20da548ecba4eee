"""CLI interface for pressfit optimization."""

import asyncio
import json
import mimetypes
import os
import sys
from urllib.parse import urlparse

import requests
from tqdm import tqdm

from pressfit.core.compression import (
    optimize_image,
    optimize_image_data_uri,
    optimize_image_file,
)
from pressfit.core.errors import OptimizationError
from pressfit.core.optimizer import run_blocking
from pressfit.core.options import (
    DEFAULT_MAX_BYTES,
    DEFAULT_MAX_DIMENSION,
    DEFAULT_QUALITY,
    FORMAT_EXTENSIONS,
    OptimizeOptions,
    OutputFormat,
)
from pressfit.utils.image import download_image
from pressfit.utils.validation import validate_output_extension

# Errors reported per input without aborting the other inputs
INPUT_ERRORS = (OptimizationError, ValueError, OSError, requests.RequestException)

# Extensions accepted for an explicit --output file name
OUTPUT_EXTENSIONS = {
    OutputFormat.JPEG: ["jpg", "jpeg"],
    OutputFormat.WEBP: ["webp"],
}


def add_optimize_arguments(parser):
    """Add optimization arguments to a parser."""
    parser.add_argument(
        "inputs",
        nargs="+",
        metavar="INPUT",
        help="Image file path, http(s) URL or data URI",
    )

    parser.add_argument(
        "--max-dimension",
        "-d",
        type=int,
        default=DEFAULT_MAX_DIMENSION,
        help="Maximum length of the longest side in pixels",
    )

    parser.add_argument(
        "--max-bytes",
        "-b",
        type=int,
        default=DEFAULT_MAX_BYTES,
        help="Maximum encoded size in bytes",
    )

    parser.add_argument(
        "--format",
        "-f",
        choices=["jpeg", "webp"],
        default="jpeg",
        help="Output format used when the image has to be re-encoded",
    )

    parser.add_argument(
        "--quality",
        "-q",
        type=float,
        default=DEFAULT_QUALITY,
        help="Initial encoder quality (0.30-0.95)",
    )

    parser.add_argument(
        "--output",
        "-o",
        type=str,
        help=(
            "Output directory or file. "
            "If not provided, writes <name>_optimized.<ext> next to each input"
        ),
    )

    output_mode = parser.add_mutually_exclusive_group()
    output_mode.add_argument(
        "--data-uri",
        action="store_true",
        help="Print the result as a data URI instead of writing a file",
    )
    output_mode.add_argument(
        "--json",
        action="store_true",
        help="Print a JSON summary per input",
    )


def build_options(args):
    """Build OptimizeOptions from parsed arguments.

    Raises:
        ValueError: If an option is out of range
    """
    return OptimizeOptions(
        max_dimension=args.max_dimension,
        max_bytes=args.max_bytes,
        output_format=OutputFormat.parse(args.format),
        quality=args.quality,
    )


def describe_input(source):
    """Short label for messages; data URIs can be megabytes long."""
    if source.startswith("data:"):
        return source[:32] + "..."
    return source


def input_base_name(source):
    """Base name for output files derived from an input."""
    if source.startswith("data:"):
        return "image"
    if source.startswith(("http://", "https://")):
        path = urlparse(source).path
        return os.path.splitext(os.path.basename(path))[0] or "image"
    return os.path.splitext(os.path.basename(source))[0]


async def optimize_source(source, options):
    """Optimize one CLI input, whatever its kind."""
    if source.startswith("data:"):
        return await optimize_image_data_uri(source, options)

    if source.startswith(("http://", "https://")):
        buffer = await run_blocking(download_image, source)
        return await optimize_image(buffer, options)

    return await optimize_image_file(source, options)


async def process_input(source, options):
    """Optimize one input, returning (source, result, error)."""
    try:
        result = await optimize_source(source, options)
    except INPUT_ERRORS as e:
        return source, None, e
    return source, result, None


def result_extension(source, result):
    """File extension for a result, keeping the original one on passthrough."""
    if result.optimized:
        return FORMAT_EXTENSIONS[OutputFormat.parse(result.mime_type)]

    ext = os.path.splitext(urlparse(source).path if "://" in source else source)[1]
    if ext and not source.startswith("data:"):
        return ext[1:]

    guessed = mimetypes.guess_extension(result.mime_type or "")
    return guessed[1:] if guessed else "bin"


def resolve_output_path(source, result, output, multiple):
    """Decide where a result is written.

    Args:
        source: Input as given on the command line
        result: OptimizedResult for the input
        output: Value of --output, or None
        multiple: Whether several inputs were given

    Returns:
        str: Output file path
    """
    base_name = input_base_name(source)
    ext = result_extension(source, result)

    if output is None:
        if source.startswith(("data:", "http://", "https://")):
            input_dir = "."
        else:
            input_dir = os.path.dirname(os.path.abspath(source))
        return os.path.join(input_dir, f"{base_name}_optimized.{ext}")

    if multiple or os.path.isdir(output) or output.endswith(("/", "\\")):
        return os.path.join(output, f"{base_name}.{ext}")

    return output


def write_result(path, result):
    """Write the encoded result to path, creating parent directories."""
    output_dir = os.path.dirname(path)
    if output_dir:
        os.makedirs(output_dir, exist_ok=True)

    with open(path, "wb") as f:
        f.write(result.data)


def accepted_extensions(source, result):
    """Extensions an explicit --output file may carry for this result."""
    if result.optimized:
        return OUTPUT_EXTENSIONS[OutputFormat.parse(result.mime_type)]

    guessed = mimetypes.guess_all_extensions(result.mime_type or "")
    extensions = [ext[1:] for ext in guessed]
    return extensions or [result_extension(source, result)]


def unique_output_path(path, used_paths):
    """Return path, suffixed with _1, _2, ... if it was already written this run."""
    root, ext = os.path.splitext(path)
    candidate = path
    counter = 1
    while os.path.abspath(candidate) in used_paths:
        candidate = f"{root}_{counter}{ext}"
        counter += 1

    used_paths.add(os.path.abspath(candidate))
    return candidate


def report_result(source, result, args, multiple, used_paths):
    """Write or print one successful result.

    Returns:
        int: Exit code contribution (0 or 1)
    """
    if args.data_uri:
        print(result.data_uri)
        return 0

    output_path = resolve_output_path(source, result, args.output, multiple)

    if output_path == args.output:
        try:
            validate_output_extension(output_path, accepted_extensions(source, result))
        except ValueError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1
    else:
        output_path = unique_output_path(output_path, used_paths)

    write_result(output_path, result)

    if args.json:
        summary = {"input": describe_input(source), "output": output_path}
        summary.update(result.to_dict())
        print(json.dumps(summary))
        return 0

    status = "Optimized" if result.optimized else "Unchanged"
    print(f"{status}: {describe_input(source)}")
    print(f"  Size: {result.original_bytes} -> {result.output_bytes} bytes")
    print(f"  Dimensions: {result.width}x{result.height} ({result.mime_type})")
    print(f"  Output file: {output_path}")
    return 0


async def optimize_inputs(args, options):
    """Optimize all inputs concurrently and report each as it completes.

    Returns:
        int: Exit code (0 when every input succeeded)
    """
    inputs = args.inputs
    multiple = len(inputs) > 1
    tasks = [asyncio.ensure_future(process_input(source, options)) for source in inputs]

    used_paths = set()
    exit_code = 0
    for next_done in tqdm(
        asyncio.as_completed(tasks),
        total=len(tasks),
        desc="Optimizing",
        disable=not multiple,
        file=sys.stderr,
    ):
        source, result, error = await next_done

        if error is not None:
            print(f"Error processing {describe_input(source)}: {error}", file=sys.stderr)
            exit_code = 1
            continue

        try:
            exit_code |= report_result(source, result, args, multiple, used_paths)
        except OSError as e:
            print(f"Error writing result for {describe_input(source)}: {e}", file=sys.stderr)
            exit_code = 1

    return exit_code


def run_optimize(args):
    """Run the optimization with provided arguments.

    Args:
        args: Parsed command-line arguments

    Returns:
        int: Exit code (0 for success, non-zero for error)
    """
    try:
        options = build_options(args)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return asyncio.run(optimize_inputs(args, options))

