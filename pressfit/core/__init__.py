"""Core functionality for pressfit."""

from pressfit.core.errors import (
    OptimizationError,
    DecodeError,
    ContextUnavailableError,
    EncodeError,
    MissingDependencyError,
)

from pressfit.core.buffer import ImageBuffer

from pressfit.core.options import OptimizeOptions, OutputFormat, clamp_quality

from pressfit.core.result import Attempt, OptimizedResult

from pressfit.core.decoders import (
    RasterHandle,
    decode,
    decode_bitmap,
    decode_with_magick,
)

from pressfit.core.encoders import create_canvas, encode_canvas, get_encoder

from pressfit.core.optimizer import run_optimizer

from pressfit.core.compression import (
    optimize_image,
    optimize_image_bytes,
    optimize_image_file,
    optimize_image_data_uri,
)

# Define what's available when doing "from pressfit.core import *"
__all__ = [
    # Errors
    "OptimizationError",
    "DecodeError",
    "ContextUnavailableError",
    "EncodeError",
    "MissingDependencyError",
    # Data model
    "ImageBuffer",
    "OptimizeOptions",
    "OutputFormat",
    "clamp_quality",
    "Attempt",
    "OptimizedResult",
    # Decoding
    "RasterHandle",
    "decode",
    "decode_bitmap",
    "decode_with_magick",
    # Encoding
    "create_canvas",
    "encode_canvas",
    "get_encoder",
    # Optimization
    "run_optimizer",
    "optimize_image",
    "optimize_image_bytes",
    "optimize_image_file",
    "optimize_image_data_uri",
]
