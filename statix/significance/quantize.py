"""
Quantization of probabilities onto a fixed band grid.

Both elicited marks and persisted hints are snapped onto the same grid so
that the stored weights stay stable between runs.
"""

import math


def round_weight(value: float, granularity: int) -> float:
    """Round a probability respecting the specified granularity.

    N delimiters split the unit interval into N+1 bands, where the first and
    the last bands are spans. Rounding requires (N - 1) delimiters to produce
    a value in the range N.

    Args:
        value: Probability to be rounded, E [0, 1]
        granularity: Granularity range, 0 means skip the rounding

    Returns:
        Rounded value in (0, 1), or the value itself for zero granularity

    Raises:
        ValueError: If the value or granularity is out of range
    """
    if not 0 <= value <= 1 or granularity < 0:
        raise ValueError(
            f"The value or granularity is invalid, value: {value}, "
            f"granularity: {granularity}"
        )
    if granularity == 0:
        return value
    if granularity == 1:
        # Infinite fold step: the remainder is the value itself
        return 0.5
    step = 1.0 / (granularity - 1)
    return 1.0 / (granularity + 1) + (value - math.remainder(value, step)) * (
        granularity - 1
    ) / (granularity + 1)


def tolerance(granularity: int) -> float:
    """Quantization tolerance (eps) of the granularity."""
    return 0.5 / (granularity + 1)
