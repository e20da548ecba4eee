"""Quality and scale search for fitting an image into a byte budget."""

import asyncio
import functools
import logging
import math

from pressfit.core.encoders import create_canvas, encode_canvas
from pressfit.core.options import OptimizeOptions, clamp_quality
from pressfit.core.result import Attempt, OptimizedResult
from pressfit.utils.data_uri import FALLBACK_MIME_TYPE

logger = logging.getLogger(__name__)

MAX_ATTEMPTS = 6

# Quality is lowered in QUALITY_STEP decrements while above the threshold
QUALITY_STEP = 0.1
QUALITY_STEP_THRESHOLD = 0.65
MIN_STEPPED_QUALITY = 0.5

# Once quality is low enough, each rejected attempt shrinks the scale instead
SCALE_STEP = 0.85
MIN_LONGEST_SIDE = 512


async def run_blocking(func, *args, on_cancel=None):
    """Run a blocking call in the default executor.

    If the awaiting task is cancelled, the call is still allowed to finish
    before the cancellation propagates, so callers may release resources the
    call is reading from. When the call succeeds after the cancellation, its
    result is handed to ``on_cancel`` since no caller will receive it.
    """
    loop = asyncio.get_running_loop()
    future = loop.run_in_executor(None, functools.partial(func, *args))
    try:
        return await asyncio.shield(future)
    except asyncio.CancelledError:
        await asyncio.wait([future])
        if on_cancel is not None and not future.cancelled() and future.exception() is None:
            on_cancel(future.result())
        raise


def round_half_up(value):
    return int(math.floor(value + 0.5))


def target_size(width, height, scale):
    """Scaled dimensions, never smaller than one pixel per side."""
    return (
        max(1, round_half_up(width * scale)),
        max(1, round_half_up(height * scale)),
    )


def initial_scale(width, height, max_dimension):
    """Scale bringing the longest side down to max_dimension, or 1."""
    longest_side = max(width, height)
    if longest_side > max_dimension:
        return max_dimension / longest_side
    return 1.0


def render_and_encode(raster, width, height, output_format, quality):
    """Render raster into a fresh canvas and encode it.

    Returns:
        bytes: Encoded candidate
    """
    canvas = create_canvas(width, height, output_format)
    try:
        raster.render(canvas, width, height)
        return encode_canvas(canvas, output_format, quality)
    finally:
        canvas.close()


async def run_optimizer(raster, original, options=None):
    """Fit a decoded raster into the constraints of ``options``.

    When the original is within both the dimension and byte limits it is
    returned untouched. Otherwise the raster is re-encoded up to
    ``MAX_ATTEMPTS`` times, lowering quality first and then resolution,
    until an encoding fits ``max_bytes``. If none fits, the last encoding is
    returned anyway.

    The raster is not released here; that is the caller's job.

    Args:
        raster: RasterHandle of the decoded original
        original: ImageBuffer the raster was decoded from
        options: OptimizeOptions, mapping or None

    Returns:
        OptimizedResult
    """
    options = OptimizeOptions.coerce(options)
    width, height = raster.width, raster.height
    original_bytes = original.size

    scale = initial_scale(width, height, options.max_dimension)
    needs_resize = scale < 1
    needs_reencode = original_bytes > options.max_bytes

    if not needs_resize and not needs_reencode:
        logger.debug(
            "%dx%d, %d bytes within limits, passing through", width, height, original_bytes
        )
        return OptimizedResult(
            data=original.data,
            width=width,
            height=height,
            mime_type=original.mime_type or raster.mime_type or FALLBACK_MIME_TYPE,
            original_bytes=original_bytes,
            output_bytes=original_bytes,
            optimized=False,
        )

    quality = options.quality
    attempts = []
    candidate = None
    final_width, final_height = width, height

    for attempt in range(MAX_ATTEMPTS):
        final_width, final_height = target_size(width, height, scale)

        candidate = await run_blocking(
            render_and_encode,
            raster,
            final_width,
            final_height,
            options.output_format,
            quality,
        )
        attempts.append(
            Attempt(final_width, final_height, clamp_quality(quality), len(candidate))
        )
        logger.debug(
            "Attempt %d: %dx%d quality=%.2f size=%d",
            attempt + 1,
            final_width,
            final_height,
            clamp_quality(quality),
            len(candidate),
        )

        if len(candidate) <= options.max_bytes:
            break

        # Try reducing quality first, then reduce dimensions
        if quality > QUALITY_STEP_THRESHOLD:
            quality = max(MIN_STEPPED_QUALITY, round(quality - QUALITY_STEP, 10))
            continue

        if max(final_width, final_height) <= MIN_LONGEST_SIDE:
            break

        scale *= SCALE_STEP

    if len(candidate) > options.max_bytes:
        logger.warning(
            "Could not fit %d bytes after %d attempts, returning %d bytes",
            options.max_bytes,
            len(attempts),
            len(candidate),
        )

    return OptimizedResult(
        data=candidate,
        width=final_width,
        height=final_height,
        mime_type=options.output_format.mime_type,
        original_bytes=original_bytes,
        output_bytes=len(candidate),
        optimized=True,
        attempts=tuple(attempts),
    )
