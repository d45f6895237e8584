from __future__ import annotations

"""Calibration and temperature compensation stages.

Calibration
-----------
  signal' = (signal - offset) * gain * c(f)
  c(f)    = 1 / sqrt(f / f_ref)          (f_ref = 100 Hz by default)

The frequency correction is an attenuation-curve heuristic that normalises
the gain to the reference frequency.  It requires f > 0; the processor
rejects readings that violate this before they get here.

Temperature compensation
------------------------
  delta   = T - T_ref
  factor  = 1 + delta * 0.002
  signal' = signal / factor
  phase'  = phase - delta * 0.1
"""

from dataclasses import replace
import math

from emi_reading_processor.models.profile import Calibration
from emi_reading_processor.models.reading import Reading

from .validation import InvalidReading


def frequency_correction(frequency: float, reference_hz: float = 100.0) -> float:
    """Gain correction factor ``1 / sqrt(frequency / reference_hz)``.

    Precondition: ``frequency > 0``.
    """
    return 1.0 / math.sqrt(float(frequency) / float(reference_hz))


def apply_calibration(
    reading: Reading,
    calibration: Calibration,
    *,
    frequency_reference_hz: float = 100.0,
) -> Reading:
    """Apply offset, gain and frequency correction to the signal.

    The offset used is recorded on the output as ``calibration_offset``.
    """
    corrected = (reading.signal_strength - calibration.offset) * calibration.gain
    corrected *= frequency_correction(reading.frequency, frequency_reference_hz)

    return replace(
        reading,
        signal_strength=corrected,
        calibration_offset=calibration.offset,
    )


def compensation_factor(delta_c: float, coefficient: float = 0.002) -> float:
    return 1.0 + float(delta_c) * float(coefficient)


def apply_temperature_compensation(
    reading: Reading,
    temperature_reference: float,
    *,
    temperature_coefficient: float = 0.002,
    phase_coefficient: float = 0.1,
    min_factor: float = 1e-12,
) -> Reading:
    """Rescale signal and shift phase by the deviation from ``temperature_reference``.

    Raises
    ------
    InvalidReading
        If ``|factor|`` falls below ``min_factor`` (delta near -500 deg C with
        the default coefficient), since dividing by it would overflow.
    """
    delta = reading.temperature - float(temperature_reference)
    factor = compensation_factor(delta, temperature_coefficient)
    if abs(factor) < float(min_factor):
        raise InvalidReading(
            f"temperature compensation factor {factor!r} is too close to zero "
            f"(temperature={reading.temperature}, reference={temperature_reference})"
        )

    return replace(
        reading,
        signal_strength=reading.signal_strength / factor,
        phase=reading.phase - delta * float(phase_coefficient),
    )
