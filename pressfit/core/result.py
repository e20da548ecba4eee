"""Records returned by the optimizer."""

from dataclasses import dataclass, field
from typing import Tuple

from pressfit.utils.data_uri import build_data_uri


@dataclass(frozen=True)
class Attempt:
    """One render and encode pass of the search loop."""

    width: int
    height: int
    quality: float
    size: int


@dataclass(frozen=True)
class OptimizedResult:
    """Output of one optimization call.

    When ``optimized`` is False, ``data`` is the caller's original buffer and
    the dimensions are the natural dimensions of the image.
    """

    data: bytes
    width: int
    height: int
    mime_type: str
    original_bytes: int
    output_bytes: int
    optimized: bool
    attempts: Tuple[Attempt, ...] = field(default=(), repr=False)

    @property
    def data_uri(self):
        return build_data_uri(self.mime_type, self.data)

    def to_dict(self):
        """Summary of the result without the encoded payload."""
        return {
            "width": self.width,
            "height": self.height,
            "mime_type": self.mime_type,
            "original_bytes": self.original_bytes,
            "output_bytes": self.output_bytes,
            "optimized": self.optimized,
            "attempts": [
                {
                    "width": a.width,
                    "height": a.height,
                    "quality": round(a.quality, 2),
                    "size": a.size,
                }
                for a in self.attempts
            ],
        }
