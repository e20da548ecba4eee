"""Helpers for self-describing ``data:<mime>;base64,<payload>`` strings."""

import base64
import binascii
import re

from pressfit.core.buffer import ImageBuffer
from pressfit.core.errors import DecodeError

BASE64_MARKER = "base64,"
FALLBACK_MIME_TYPE = "image/png"

_HEADER_RE = re.compile(r"^data:([^;,]+)")


def estimate_bytes_from_data_uri(data_uri):
    """Return the decoded byte length of a base64 data URI without decoding it.

    Args:
        data_uri: String containing a ``base64,`` marker followed by the payload

    Returns:
        int: Number of bytes the payload decodes to, or None if there is no marker
    """
    index = data_uri.find(BASE64_MARKER)
    if index == -1:
        return None

    payload = data_uri[index + len(BASE64_MARKER):].strip()
    if not payload:
        return 0

    if payload.endswith("=="):
        padding = 2
    elif payload.endswith("="):
        padding = 1
    else:
        padding = 0

    # len*3 is exact in integers, so the floor matches a real decode
    return max(0, (len(payload) * 3) // 4 - padding)


def build_data_uri(mime_type, data):
    """Serialize bytes as ``data:<mime_type>;base64,<payload>``."""
    payload = base64.b64encode(data).decode("ascii")
    return f"data:{mime_type};base64,{payload}"


def parse_data_uri(data_uri):
    """Decode a data URI into an ``ImageBuffer``.

    A string without the ``base64,`` marker is treated as a bare base64
    payload of an unspecified PNG image.

    Raises:
        DecodeError: If the payload is not valid base64
    """
    index = data_uri.find(BASE64_MARKER)
    if index == -1:
        header, payload = "", data_uri
    else:
        header, payload = data_uri[:index], data_uri[index + len(BASE64_MARKER):]

    match = _HEADER_RE.match(header.strip())
    mime_type = match.group(1).strip().lower() if match else FALLBACK_MIME_TYPE

    try:
        data = base64.b64decode("".join(payload.split()), validate=True)
    except (binascii.Error, ValueError) as e:
        raise DecodeError(f"Invalid base64 payload in data URI: {e}") from e

    return ImageBuffer(data, mime_type)
