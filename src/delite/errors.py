"""Exception types raised by the delite adjustment pipeline."""


class AdjustmentError(Exception):
    """Base class for every error reported by the pipeline stages."""


class InvalidArgumentError(AdjustmentError, ValueError):
    """Raised for out-of-range parameters or unusable input buffers."""


class EmptyInputError(AdjustmentError, ValueError):
    """Raised when there are too few samples to form a preview square."""


class InvalidGeometryError(AdjustmentError, ValueError):
    """Raised when bitmap dimensions violate the row alignment rule."""


class EncodingError(AdjustmentError):
    """Raised when bitmap fields disagree with each other."""


class AllocationError(AdjustmentError, MemoryError):
    """Raised when an output buffer cannot be reserved."""
