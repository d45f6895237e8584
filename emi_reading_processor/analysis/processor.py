from __future__ import annotations

"""Stateful reading processor.

Stage ordering (per reading)
----------------------------
0) Boundary validation (finite inputs, frequency > 0, amplitude != 0).
1) Noise filter: history update, median of the newest samples, noise level.
2) Calibration: offset, gain, frequency correction.
3) Temperature compensation.
4) Exponential smoothing.
5) Parameter enhancement: complex plane, conductivity, skin depth, depth.
6) Quality score.

Each stage returns a new :class:`~emi_reading_processor.models.reading.Reading`.

State and concurrency
---------------------
A processor owns its noise history, smoothing memory and calibration.  None
of it is shared, and there is no internal locking: ``process``,
``set_calibration`` and ``reset_filters`` must be called by a single writer
(typically one processor per acquisition session).  Every call runs to
completion in time bounded by the history capacity.

A rejected reading (:class:`InvalidReading`) leaves the state untouched.
"""

import logging
from typing import Optional

from emi_reading_processor.models.profile import Calibration, ProcessingProfile
from emi_reading_processor.models.reading import Reading
from emi_reading_processor.models.results import ProcessedReading, ProcessingStats

from .calibration import apply_calibration, apply_temperature_compensation, compensation_factor
from .enhance import enhance_parameters
from .noise import NoiseHistory, apply_noise_filter, noise_level
from .quality import score_quality
from .smoothing import ExponentialSmoother
from .validation import InvalidReading, check_ranges, validate_reading

logger = logging.getLogger(__name__)


class ReadingProcessor:
    """Six-stage EMI reading pipeline with session-scoped filter memory."""

    def __init__(
        self,
        profile: Optional[ProcessingProfile] = None,
        calibration: Optional[Calibration] = None,
    ) -> None:
        self._profile = profile if profile is not None else ProcessingProfile()
        self._profile.validate()
        self._calibration = calibration if calibration is not None else Calibration()

        self._history = NoiseHistory(self._profile.history_size)
        self._smoother = ExponentialSmoother(
            alpha=self._profile.smoothing_factor,
            cold_start=self._profile.cold_start,
        )

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def profile(self) -> ProcessingProfile:
        return self._profile

    @property
    def calibration(self) -> Calibration:
        return self._calibration

    @property
    def history(self) -> NoiseHistory:
        return self._history

    @property
    def smoother(self) -> ExponentialSmoother:
        return self._smoother

    # ------------------------------------------------------------------
    # Processing
    # ------------------------------------------------------------------

    def _check_temperature(self, reading: Reading) -> None:
        # Reject before stage 1 so the histories stay consistent.
        delta = reading.temperature - self._calibration.temperature_reference
        factor = compensation_factor(delta, self._profile.temperature_coefficient)
        if abs(factor) < self._profile.min_compensation_factor:
            raise InvalidReading(
                f"temperature {reading.temperature!r} gives a compensation factor "
                f"of {factor!r} against reference {self._calibration.temperature_reference!r}"
            )

    def process_detailed(self, reading: Reading) -> ProcessedReading:
        """Run the full pipeline and return the reading with its diagnostics.

        Raises
        ------
        InvalidReading
            If the reading violates a pipeline precondition.  Filter memory
            is not modified in that case.
        """
        validate_reading(reading)
        self._check_temperature(reading)
        warnings = check_ranges(reading)
        for msg in warnings:
            logger.warning("Implausible reading: %s", msg)

        p = self._profile
        cal = self._calibration

        r = apply_noise_filter(reading, self._history, median_window=p.median_window)
        r = apply_calibration(r, cal, frequency_reference_hz=p.frequency_reference_hz)
        r = apply_temperature_compensation(
            r,
            cal.temperature_reference,
            temperature_coefficient=p.temperature_coefficient,
            phase_coefficient=p.phase_temperature_coefficient,
            min_factor=p.min_compensation_factor,
        )
        r = self._smoother.apply(r)
        r, params = enhance_parameters(
            r,
            reference_signal=p.depth_reference_signal,
            attenuation_coefficient=p.depth_attenuation_coefficient,
        )
        r, quality = score_quality(r, p)

        logger.debug(
            "Processed reading: signal=%g -> %g, depth=%g, quality=%.3f",
            reading.signal_strength,
            r.signal_strength,
            r.depth,
            r.quality_score,
        )
        return ProcessedReading(reading=r, parameters=params, quality=quality, warnings=warnings)

    def process(self, reading: Reading) -> Reading:
        """Run the full pipeline on one reading."""
        return self.process_detailed(reading).reading

    # ------------------------------------------------------------------
    # Control surface
    # ------------------------------------------------------------------

    def set_calibration(self, offset: float, gain: float, temperature_reference: float) -> None:
        """Replace all three calibration values at once.

        No validation is performed; a negative or zero gain is used as given.
        """
        self._calibration = Calibration(
            offset=float(offset),
            gain=float(gain),
            temperature_reference=float(temperature_reference),
        )
        logger.info(
            "Calibration set: offset=%g, gain=%g, temperature_reference=%g",
            offset,
            gain,
            temperature_reference,
        )

    def reset_filters(self) -> None:
        """Clear the histories and smoothing memory.  Calibration is kept."""
        self._history.clear()
        self._smoother.reset()
        logger.info("Filters reset")

    def get_processing_stats(self) -> ProcessingStats:
        n = len(self._history)
        return ProcessingStats(
            calibration_offset=self._calibration.offset,
            gain_correction=self._calibration.gain,
            temperature_reference=self._calibration.temperature_reference,
            history_size=n,
            average_noise_level=noise_level(self._history.signals) if n else 0.0,
        )
