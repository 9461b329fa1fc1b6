"""Rounding helpers shared by aggregates and display values.

Stored estimates and displayed targets were produced with half-up rounding
(``2.5 -> 3``, ``-2.5 -> -2``), not Python's round-half-to-even.
"""

from __future__ import annotations

import math


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def round_to_tenth(value: float) -> float:
    return round_half_up(value * 10) / 10


def format_number(value: float) -> str:
    """Render a number without a trailing ``.0`` (``7.0 -> '7'``, ``8.5 -> '8.5'``)."""
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))
