"""Decoders turning encoded image bytes into renderable rasters.

Two decode paths are available. The bitmap path decodes the buffer in memory
with Pillow. When Pillow cannot read the bytes and ImageMagick is installed,
the universal path spills the bytes to a temporary directory, converts them
to PNG with ``magick`` and opens the result lazily. Both paths return a
``RasterHandle`` and callers never need to know which one ran.
"""

import io
import logging
import os
import shutil
import subprocess
import tempfile

from PIL import Image, ImageOps, UnidentifiedImageError

from pressfit.core.errors import DecodeError
from pressfit.utils.subprocess_utils import (
    run_command,
    check_command_exists,
    check_dependencies,
)

logger = logging.getLogger(__name__)

MAGICK = "magick"

# Seconds allowed for a single magick conversion
MAGICK_TIMEOUT = 60

# Errors Pillow raises for unreadable, truncated or hostile input
PIL_DECODE_ERRORS = (
    UnidentifiedImageError,
    OSError,
    SyntaxError,
    ValueError,
    Image.DecompressionBombError,
)


class RasterHandle:
    """A decoded image that can be drawn into a canvas at any size.

    The handle owns decoder-side resources and must be released exactly once
    after the last render. Use it as a context manager to get that for free.
    """

    def __init__(self, image, cleanup=None, mime_type=None):
        self._image = image
        self._cleanup = cleanup
        self._released = False
        # RGBA view of the image, converted on first render
        self._rgba = None
        self.width, self.height = image.size
        self.mime_type = mime_type

    @property
    def released(self):
        return self._released

    def render(self, canvas, width, height):
        """Draw the raster into the top-left ``width`` x ``height`` area of canvas."""
        if self._released:
            raise RuntimeError("Cannot render a released raster")

        if self._rgba is None:
            self._rgba = (
                self._image if self._image.mode == "RGBA" else self._image.convert("RGBA")
            )

        source = self._rgba
        if source.size != (width, height):
            source = source.resize((width, height), Image.Resampling.LANCZOS)

        if canvas.mode == "RGBA":
            canvas.alpha_composite(source)
        else:
            # Alpha acts as the paste mask so transparent pixels keep the canvas fill
            canvas.paste(source, (0, 0), source)

    def release(self):
        """Free the decoded image and any temporary resources. Idempotent."""
        if self._released:
            return
        self._released = True

        try:
            if self._rgba is not None and self._rgba is not self._image:
                self._rgba.close()
            self._image.close()
        finally:
            if self._cleanup is not None:
                self._cleanup()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.release()


def decode_bitmap(data):
    """Decode bytes in memory with Pillow.

    EXIF orientation is applied so the reported dimensions match what a
    viewer would display.

    Raises:
        DecodeError: If Pillow cannot read the bytes
    """
    try:
        with Image.open(io.BytesIO(data)) as opened:
            mime_type = Image.MIME.get(opened.format)
            image = ImageOps.exif_transpose(opened)
            image.load()
    except PIL_DECODE_ERRORS as e:
        raise DecodeError(f"Failed to decode image: {e}") from e

    return RasterHandle(image, mime_type=mime_type)


def decode_with_magick(data):
    """Decode bytes through an ImageMagick conversion to a temporary PNG.

    The temporary directory lives as long as the returned handle and is
    removed by ``RasterHandle.release``.

    Raises:
        MissingDependencyError: If ``magick`` is not installed
        DecodeError: If the conversion fails
    """
    check_dependencies([MAGICK])

    temp_dir = tempfile.mkdtemp(prefix="pressfit_")

    def cleanup():
        shutil.rmtree(temp_dir, ignore_errors=True)

    source_path = os.path.join(temp_dir, "source")
    reference_png = os.path.join(temp_dir, "reference.png")

    try:
        with open(source_path, "wb") as f:
            f.write(data)

        # [0] keeps only the first frame of animated or layered inputs
        run_command(
            [MAGICK, f"{source_path}[0]", "-auto-orient", reference_png],
            check=True,
            timeout=MAGICK_TIMEOUT,
        )
        image = Image.open(reference_png)
    except (subprocess.CalledProcessError, subprocess.TimeoutExpired) as e:
        cleanup()
        raise DecodeError(f"Failed to decode image with {MAGICK}: {e}") from e
    except PIL_DECODE_ERRORS as e:
        cleanup()
        raise DecodeError(f"Failed to decode image: {e}") from e
    except BaseException:
        cleanup()
        raise

    return RasterHandle(image, cleanup=cleanup)


def magick_available():
    """Feature probe for the universal decode path."""
    return check_command_exists(MAGICK)


def decode(data):
    """Decode bytes into a ``RasterHandle``, preferring the in-memory path.

    Args:
        data: Encoded image bytes

    Returns:
        RasterHandle: Decoded raster, to be released by the caller

    Raises:
        DecodeError: If no available decoder can read the bytes
    """
    try:
        return decode_bitmap(data)
    except DecodeError as e:
        if not magick_available():
            raise
        logger.debug("Bitmap decode failed (%s), falling back to %s", e, MAGICK)

    return decode_with_magick(data)
