"""Half-up rounding shared by the scoring functions."""

import math


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves towards positive infinity."""
    return math.floor(value + 0.5)


def round_tenth(value: float) -> float:
    """Round to one decimal place, halves towards positive infinity."""
    return math.floor(value * 10 + 0.5) / 10
