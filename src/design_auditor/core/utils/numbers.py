import math


def round_half_up(value: float) -> int:
    """
    Rounds .5 towards positive infinity (2.5 -> 3, -2.5 -> -2).
    Scores and pixel sizes use this instead of Python's banker's rounding.
    """
    return int(math.floor(value + 0.5))


def round_to(value: float, digits: int = 1) -> float:
    """Half-up rounding to a number of decimals, e.g. for averages."""
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor
