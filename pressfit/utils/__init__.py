"""Utility functions for pressfit."""

# Import key functions to make them available at the utils package level
from pressfit.utils.subprocess_utils import (
    run_command,
    check_command_exists,
    check_dependencies,
)

from pressfit.utils.data_uri import (
    estimate_bytes_from_data_uri,
    build_data_uri,
    parse_data_uri,
)

from pressfit.utils.image import download_image

from pressfit.utils.validation import (
    validate_file_exists,
    validate_positive_int,
    validate_output_extension,
)

# Define what's available when doing "from pressfit.utils import *"
__all__ = [
    # Subprocess utilities
    "run_command",
    "check_command_exists",
    "check_dependencies",
    # Data URI utilities
    "estimate_bytes_from_data_uri",
    "build_data_uri",
    "parse_data_uri",
    # Image utilities
    "download_image",
    # Validation utilities
    "validate_file_exists",
    "validate_positive_int",
    "validate_output_extension",
]
