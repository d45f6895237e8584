"""Boundary checks for incoming readings.

Two levels:

- :func:`validate_reading` enforces the numeric preconditions of the pipeline
  (finite inputs, ``frequency > 0``, ``amplitude != 0``).  A violation raises
  :class:`InvalidReading` before any filter memory is touched.
- :func:`check_ranges` reports readings outside the plausible operating
  envelope of the device.  It only returns messages; processing continues.
"""

from __future__ import annotations

import math
from typing import List, Tuple

from emi_reading_processor.models.reading import Reading


class InvalidReading(ValueError):
    """A reading violates a precondition of the processing pipeline."""


_RAW_FIELDS = ("signal_strength", "phase", "amplitude", "frequency", "temperature")

# (field, low, high, unit)
PLAUSIBLE_RANGES: Tuple[Tuple[str, float, float, str], ...] = (
    ("signal_strength", 0.0, 2000.0, ""),
    ("frequency", 1.0, 10000.0, " Hz"),
    ("phase", -360.0, 360.0, " deg"),
    ("amplitude", 0.0, 2000.0, ""),
    ("temperature", -40.0, 85.0, " degC"),
)


def validate_reading(reading: Reading) -> None:
    """Raise :class:`InvalidReading` if the pipeline cannot process ``reading``."""
    for name in _RAW_FIELDS:
        value = getattr(reading, name)
        if not math.isfinite(value):
            raise InvalidReading(f"{name} must be finite, got {value!r}")

    if reading.frequency <= 0.0:
        raise InvalidReading(f"frequency must be > 0, got {reading.frequency!r}")
    if reading.amplitude == 0.0:
        raise InvalidReading("amplitude must be non-zero")


def check_ranges(reading: Reading) -> Tuple[str, ...]:
    """Return one message per raw field outside its plausible range."""
    warnings: List[str] = []
    for name, lo, hi, unit in PLAUSIBLE_RANGES:
        value = getattr(reading, name)
        if value < lo or value > hi:
            warnings.append(f"{name}={value:g}{unit} outside plausible range [{lo:g}, {hi:g}]")
    return tuple(warnings)
