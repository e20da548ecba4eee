"""Utilities for input validation."""

import os
import functools


def validate_file_exists(func):
    """Decorator to validate that input file exists before processing."""

    @functools.wraps(func)
    def wrapper(input_path, *args, **kwargs):
        if not os.path.isfile(input_path):
            raise FileNotFoundError(f"Input file not found: {input_path}")
        return func(input_path, *args, **kwargs)

    return wrapper


def validate_positive_int(name, value):
    """Validate that an option is a positive integer.

    Args:
        name: Option name used in the error message
        value: Value to validate

    Raises:
        ValueError: If value is not a positive integer
    """
    # bool is an int subclass but never a meaningful limit
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ValueError(f"{name} must be a positive integer, got {value!r}")


def validate_output_extension(output_path, extensions):
    """Validate an output file name against the extensions of the chosen format.

    Args:
        output_path: Requested output file path
        extensions: Accepted extensions without the dot

    Raises:
        ValueError: If the extension does not match
    """
    ext = os.path.splitext(output_path)[1].lower()[1:]

    if ext not in extensions:
        raise ValueError(
            f"Output extension '.{ext}' does not match format "
            f"(expected one of: {', '.join(extensions)})"
        )

