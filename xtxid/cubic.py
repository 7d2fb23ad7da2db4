"""
Single-axis cubic bezier timing curve, the same family as CSS ``cubic-bezier()``.
"""

import sys
from typing import List, Sequence

X_TOLERANCE = 0.00001


class CubicCurve:
    """Timing curve with endpoints fixed at (0, 0) and (1, 1).

    ``curves`` holds the two interior control points as ``[x1, y1, x2, y2]``.
    """

    def __init__(self, curves: Sequence[float]):
        self.curves: List[float] = [float(c) for c in curves]

    def value(self, time: float) -> float:
        """Return the eased progress for a time fraction."""
        x1, y1, x2, y2 = self.curves[:4]

        # Outside [0, 1] the curve continues along its end tangents.
        if time <= 0.0:
            if x1 > 0.0:
                start_gradient = y1 / x1
            elif y1 == 0.0 and x2 > 0.0:
                start_gradient = y2 / x2
            else:
                start_gradient = 0.0
            return start_gradient * time

        if time >= 1.0:
            if x2 < 1.0:
                end_gradient = (y2 - 1.0) / (x2 - 1.0)
            elif x2 == 1.0 and x1 < 1.0:
                end_gradient = (y1 - 1.0) / (x1 - 1.0)
            else:
                end_gradient = 0.0
            return 1.0 + end_gradient * (time - 1.0)

        low, high = 0.0, 1.0
        while True:
            mid = (low + high) / 2.0
            x_estimate = self.bezier(x1, x2, mid)

            if abs(time - x_estimate) < X_TOLERANCE:
                return self.bezier(y1, y2, mid)

            if abs(high - low) < sys.float_info.epsilon:
                break

            if x_estimate < time:
                low = mid
            else:
                high = mid

        return self.bezier(y1, y2, mid)

    @staticmethod
    def bezier(p1: float, p2: float, param: float) -> float:
        """``3*p1*(1-t)^2*t + 3*p2*(1-t)*t^2 + t^3``"""
        complement = 1.0 - param
        return (
            3.0 * p1 * complement * complement * param
            + 3.0 * p2 * complement * param * param
            + param * param * param
        )
