"""Domain service: Vehicle antiquity.

A vehicle's age in whole years, derived from its model year at the moment
the vehicle record is written.
"""

from __future__ import annotations

from datetime import date


def derive_antiquity(year: int, as_of: date) -> int:
    return as_of.year - year
