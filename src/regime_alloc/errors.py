"""Error kinds raised by the regime/allocation core."""


class RegimeAllocError(ValueError):
    """Base class for precondition violations in the core computations."""


class DegenerateDistributionError(RegimeAllocError):
    """Filter posterior cannot be normalized (zero or non-finite mass)."""


class DegenerateAllocationError(RegimeAllocError):
    """Strategy raw weights cannot be normalized (zero or non-finite sum)."""


class LengthMismatchError(RegimeAllocError):
    """Parallel input sequences have different lengths."""
