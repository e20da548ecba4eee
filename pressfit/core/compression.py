"""Entry points for optimizing images from bytes, files and data URIs."""

import logging
import mimetypes

from pressfit.core.buffer import ImageBuffer
from pressfit.core.decoders import decode
from pressfit.core.optimizer import run_blocking, run_optimizer
from pressfit.core.options import OptimizeOptions
from pressfit.utils.data_uri import parse_data_uri
from pressfit.utils.validation import validate_file_exists

logger = logging.getLogger(__name__)


def read_file(path):
    with open(path, "rb") as f:
        return f.read()


async def decode_buffer(buffer):
    """Decode a buffer off the event loop.

    A raster decoded after the caller was cancelled is released before the
    cancellation propagates.
    """
    return await run_blocking(decode, buffer.data, on_cancel=release_raster)


def release_raster(raster):
    raster.release()


async def optimize_image(buffer, options=None):
    """Decode an image buffer and fit it into the given constraints.

    Args:
        buffer: ImageBuffer with the encoded image
        options: OptimizeOptions, mapping of option names, or None for defaults

    Returns:
        OptimizedResult

    Raises:
        DecodeError: If the bytes cannot be decoded
        ContextUnavailableError: If a canvas cannot be created
        EncodeError: If encoding a candidate fails
    """
    # Validate options before spending time on the decode
    options = OptimizeOptions.coerce(options)

    raster = await decode_buffer(buffer)
    try:
        result = await run_optimizer(raster, buffer, options)
    finally:
        raster.release()

    logger.info(
        "Optimized %dx%d image: %d -> %d bytes (optimized=%s)",
        result.width,
        result.height,
        result.original_bytes,
        result.output_bytes,
        result.optimized,
    )
    return result


async def optimize_image_bytes(data, mime_type=None, options=None):
    """Optimize raw encoded bytes with an optional declared MIME type."""
    return await optimize_image(ImageBuffer(data, mime_type), options)


@validate_file_exists
async def optimize_image_file(input_path, options=None):
    """Optimize an image file.

    The MIME type is guessed from the file name.

    Args:
        input_path: Path to input image
        options: OptimizeOptions, mapping or None

    Returns:
        OptimizedResult

    Raises:
        FileNotFoundError: If the file does not exist
    """
    mime_type, _ = mimetypes.guess_type(str(input_path))
    data = await run_blocking(read_file, input_path)
    return await optimize_image(ImageBuffer(data, mime_type), options)


async def optimize_image_data_uri(data_uri, options=None):
    """Optimize an image given as a ``data:<mime>;base64,...`` string."""
    return await optimize_image(parse_data_uri(data_uri), options)
