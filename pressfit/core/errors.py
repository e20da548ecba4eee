"""Exceptions raised by the optimization core."""


class OptimizationError(RuntimeError):
    """Base class for fatal optimization failures."""


class DecodeError(OptimizationError):
    """The input bytes could not be read as any supported raster format."""


class ContextUnavailableError(OptimizationError):
    """A rendering canvas of the requested size could not be created."""


class EncodeError(OptimizationError):
    """The encoder produced no output for a rendered canvas."""


class MissingDependencyError(RuntimeError):
    """Custom exception for missing required dependencies."""
