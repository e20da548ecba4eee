"""Optimization options and their defaults."""

import math
from dataclasses import dataclass, fields
from enum import Enum

from pressfit.utils.validation import validate_positive_int

DEFAULT_MAX_DIMENSION = 2048
DEFAULT_MAX_BYTES = 6 * 1024 * 1024
DEFAULT_QUALITY = 0.85

MIN_QUALITY = 0.3
MAX_QUALITY = 0.95


class OutputFormat(Enum):
    """Output formats the optimizer can encode to."""

    JPEG = "image/jpeg"
    WEBP = "image/webp"

    @property
    def mime_type(self):
        return self.value

    @property
    def pil_format(self):
        """Format name understood by ``PIL.Image.save``."""
        return self.name

    @property
    def extension(self):
        return FORMAT_EXTENSIONS[self]

    @property
    def has_alpha(self):
        return self is OutputFormat.WEBP

    @classmethod
    def parse(cls, value):
        """Resolve a format from an enum member, a name, an extension or a MIME type.

        Raises:
            ValueError: If the value does not name a supported format
        """
        if isinstance(value, cls):
            return value

        key = str(value).strip().lower()
        if key in FORMAT_ALIASES:
            return FORMAT_ALIASES[key]

        raise ValueError(f"Unsupported output format: {value}")


# File extensions for each output format
FORMAT_EXTENSIONS = {
    OutputFormat.JPEG: "jpg",
    OutputFormat.WEBP: "webp",
}

FORMAT_ALIASES = {
    "jpeg": OutputFormat.JPEG,
    "jpg": OutputFormat.JPEG,
    "image/jpeg": OutputFormat.JPEG,
    "webp": OutputFormat.WEBP,
    "image/webp": OutputFormat.WEBP,
}

# camelCase names accepted by OptimizeOptions.from_mapping
OPTION_ALIASES = {
    "maxDimension": "max_dimension",
    "maxBytes": "max_bytes",
    "outputFormat": "output_format",
    "outputMimeType": "output_format",
}


def clamp_quality(value):
    """Clamp an encoder quality to [0.30, 0.95], replacing NaN with the default.

    Args:
        value: Quality as a real number

    Returns:
        float: Clamped quality
    """
    value = float(value)
    if math.isnan(value):
        return DEFAULT_QUALITY
    return min(MAX_QUALITY, max(MIN_QUALITY, value))


@dataclass(frozen=True)
class OptimizeOptions:
    """Constraints and starting parameters for one optimization call."""

    max_dimension: int = DEFAULT_MAX_DIMENSION
    max_bytes: int = DEFAULT_MAX_BYTES
    output_format: OutputFormat = OutputFormat.JPEG
    quality: float = DEFAULT_QUALITY

    def __post_init__(self):
        validate_positive_int("max_dimension", self.max_dimension)
        validate_positive_int("max_bytes", self.max_bytes)
        # frozen dataclass, so normalized values go through object.__setattr__
        object.__setattr__(self, "output_format", OutputFormat.parse(self.output_format))
        object.__setattr__(self, "quality", clamp_quality(self.quality))

    @classmethod
    def from_mapping(cls, mapping):
        """Build options from any subset of option names.

        Both snake_case field names and the camelCase names used by web
        callers are accepted. Missing keys fall back to their defaults and
        ``None`` values are treated as missing.

        Raises:
            ValueError: On unknown option names
        """
        known = {f.name for f in fields(cls)}
        kwargs = {}

        for key, value in mapping.items():
            name = OPTION_ALIASES.get(key, key)
            if name not in known:
                raise ValueError(f"Unknown option: {key}")
            if value is not None:
                kwargs[name] = value

        return cls(**kwargs)

    @classmethod
    def coerce(cls, options):
        """Accept ``None``, a mapping or an existing ``OptimizeOptions``."""
        if options is None:
            return cls()
        if isinstance(options, cls):
            return options
        return cls.from_mapping(options)
