"""Canvas creation and encoders for the supported output formats."""

import io

from PIL import Image

from pressfit.core.errors import ContextUnavailableError, EncodeError
from pressfit.core.options import OutputFormat, clamp_quality

# Opaque fill for formats without an alpha channel
BACKGROUND_COLOR = (255, 255, 255)

# libwebp effort level (0-6). Every search attempt re-encodes, so the
# slowest levels cost more than the few bytes they save
WEBP_METHOD = 4


def create_canvas(width, height, output_format):
    """Create a blank canvas suitable for the output format.

    JPEG canvases are opaque white so transparent source pixels do not turn
    black on re-encode. WEBP canvases start fully transparent.

    Args:
        width: Canvas width in pixels
        height: Canvas height in pixels
        output_format: OutputFormat the canvas will be encoded to

    Returns:
        PIL.Image.Image: The canvas

    Raises:
        ContextUnavailableError: If the canvas cannot be allocated
    """
    try:
        if output_format.has_alpha:
            return Image.new("RGBA", (width, height), (0, 0, 0, 0))
        return Image.new("RGB", (width, height), BACKGROUND_COLOR)
    except (ValueError, MemoryError) as e:
        raise ContextUnavailableError(
            f"Canvas {width}x{height} not available: {e}"
        ) from e


def quality_to_pil(quality):
    """Map a [0, 1] quality onto Pillow's integer 0-100 scale."""
    return int(round(clamp_quality(quality) * 100))


def encode_jpeg(canvas, quality):
    """Encode canvas to JPEG.

    Args:
        canvas: RGB canvas
        quality: Compression quality (0-1)

    Returns:
        bytes: Encoded image
    """
    buffer = io.BytesIO()
    canvas.save(buffer, format="JPEG", quality=quality_to_pil(quality), optimize=True)
    return buffer.getvalue()


def encode_webp(canvas, quality):
    """Encode canvas to WebP.

    Args:
        canvas: RGBA canvas
        quality: Compression quality (0-1)

    Returns:
        bytes: Encoded image
    """
    buffer = io.BytesIO()
    canvas.save(
        buffer, format="WEBP", quality=quality_to_pil(quality), method=WEBP_METHOD
    )
    return buffer.getvalue()


ENCODERS = {
    OutputFormat.JPEG: encode_jpeg,
    OutputFormat.WEBP: encode_webp,
}


def get_encoder(output_format):
    """Get an encoder function for an output format.

    Raises:
        ValueError: If the format is not supported
    """
    output_format = OutputFormat.parse(output_format)
    return ENCODERS[output_format]


def encode_canvas(canvas, output_format, quality):
    """Encode a rendered canvas.

    Args:
        canvas: Canvas from ``create_canvas``
        output_format: OutputFormat to encode to
        quality: Compression quality (0-1), clamped before use

    Returns:
        bytes: Encoded image

    Raises:
        EncodeError: If the encoder fails or produces no data
    """
    output_format = OutputFormat.parse(output_format)
    encoder = get_encoder(output_format)

    try:
        data = encoder(canvas, quality)
    except (OSError, KeyError, ValueError) as e:
        raise EncodeError(f"Failed to encode canvas as {output_format.name}: {e}") from e

    if not data:
        raise EncodeError(f"Encoder returned no data for {output_format.name}")

    return data
