"""Half-up rounding helpers for reproducible published figures."""

from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Decimal


def round_half_up(value: float, places: int) -> float:
    """Round the exact binary value of `value` half-up to `places` decimals."""
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP))


def round_to_int(value: float) -> int:
    """Round to the nearest integer with .5 going toward positive infinity."""
    return math.floor(value + 0.5)
