"""Encoded image input."""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class ImageBuffer:
    """Encoded image bytes and the MIME type the caller declared for them."""

    data: bytes
    mime_type: Optional[str] = None

    def __post_init__(self):
        if not isinstance(self.data, bytes):
            object.__setattr__(self, "data", bytes(self.data))

    @property
    def size(self):
        return len(self.data)
