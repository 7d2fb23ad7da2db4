"""
Numeric helpers that reproduce the browser's arithmetic.

Python's ``round()`` rounds half to even, JavaScript's ``Math.round`` rounds
half toward positive infinity and the reference client rounds half away from
zero. Each convention gets its own helper so call sites say which one they mean.
"""

from math import ceil, copysign, cos, floor, radians, sin, trunc
from typing import List, Sequence

from .errors import MismatchedArgumentsError

HEX_DIGITS = "0123456789ABCDEF"
MAX_HEX_LENGTH = 20


def round_half_away(value: float) -> float:
    """Round to the nearest integer, ties away from zero."""
    whole = trunc(value)
    if abs(value - whole) >= 0.5:
        whole += int(copysign(1, value))
    return float(whole)


def js_round(value: float) -> float:
    """Round like JavaScript's ``Math.round``.

    ``js_round(-0.5) == 0`` and ``js_round(-1.5) == -1``; every other case
    matches :func:`round_half_away`.
    """
    if value - trunc(value) == -0.5:
        return float(ceil(value))
    return round_half_away(value)


def float_to_hex(value: float) -> str:
    """Render a non-negative float as uppercase hex, e.g. 10.0 -> "A", 0.5 -> "0.8"."""
    if value == 0.0:
        return "0"

    quotient = int(floor(value))
    fraction = value - quotient

    if quotient == 0:
        result = "0"
    else:
        digits = []
        while quotient > 0:
            quotient, remainder = divmod(quotient, 16)
            digits.insert(0, HEX_DIGITS[remainder])
        result = "".join(digits)

    if fraction > 0.0:
        result += "."
        while fraction > 0.0:
            fraction *= 16.0
            digit = int(floor(fraction))
            fraction -= digit
            result += HEX_DIGITS[digit]
            if len(result) > MAX_HEX_LENGTH:
                break

    return result


def lerp(start: float, end: float, factor: float) -> float:
    return start * (1.0 - factor) + end * factor


def interpolate(start: Sequence[float], end: Sequence[float], factor: float) -> List[float]:
    """Interpolate two equal-length sequences element by element."""
    if len(start) != len(end):
        raise MismatchedArgumentsError()
    return [lerp(a, b, factor) for a, b in zip(start, end)]


def rotation_matrix(degrees: float) -> List[float]:
    """2x2 rotation matrix flattened as ``[cos, -sin, sin, cos]``."""
    rad = radians(degrees)
    return [cos(rad), -sin(rad), sin(rad), cos(rad)]


def solve(value: float, min_val: float, max_val: float, rounding: bool) -> float:
    """Scale a 0-255 byte into ``[min_val, max_val]``."""
    result = value * (max_val - min_val) / 255.0 + min_val
    if rounding:
        return float(floor(result))
    return round_half_away(result * 100.0) / 100.0


def odd_coefficient(index: int) -> float:
    return -1.0 if index % 2 == 1 else 0.0
