"""Fit images into byte and dimension budgets with minimal quality loss."""

__version__ = "0.1.0"

from pressfit.core import (
    DecodeError,
    ContextUnavailableError,
    EncodeError,
    ImageBuffer,
    OptimizeOptions,
    OptimizedResult,
    OutputFormat,
    optimize_image,
    optimize_image_bytes,
    optimize_image_file,
    optimize_image_data_uri,
)
from pressfit.utils.data_uri import estimate_bytes_from_data_uri

__all__ = [
    "__version__",
    "DecodeError",
    "ContextUnavailableError",
    "EncodeError",
    "ImageBuffer",
    "OptimizeOptions",
    "OptimizedResult",
    "OutputFormat",
    "optimize_image",
    "optimize_image_bytes",
    "optimize_image_file",
    "optimize_image_data_uri",
    "estimate_bytes_from_data_uri",
]
