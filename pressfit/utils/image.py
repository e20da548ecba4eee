"""Utilities for fetching images from outside the process."""

import logging

import requests

from pressfit.core.buffer import ImageBuffer

logger = logging.getLogger(__name__)


def download_image(url, timeout=10):
    """Download an image over HTTP(S).

    Args:
        url: Image URL
        timeout: Download timeout in seconds

    Returns:
        ImageBuffer: Downloaded bytes tagged with the response Content-Type

    Raises:
        requests.RequestException: If the download fails
    """
    logger.debug("Downloading %s", url)

    response = requests.get(url, timeout=timeout)
    response.raise_for_status()

    content_type = response.headers.get("Content-Type", "")
    mime_type = content_type.split(";")[0].strip().lower() or None
    if mime_type is not None and not mime_type.startswith("image/"):
        mime_type = None

    return ImageBuffer(response.content, mime_type)
