from __future__ import annotations

"""Quality scoring stage.

The score is the product of four factors, each clamped to [0, 1]:

  q_snr    = min(1, (S / noise) / 20)          noise == 0 -> SNR = inf -> 1
  q_signal = min(1, S / 1000)
  q_freq   = min(1, 100 / f)   if f > 0, else 0
  q_temp   = 1 - min(0.5, |T - 25| / 50)

All four factors are always evaluated, so the diagnostics are complete even
when one of them is zero.  A non-positive frequency is the only way for a
single factor to force the score to exactly 0 independently of the others.
"""

from dataclasses import replace
import math
from typing import Tuple

from emi_reading_processor.models.profile import ProcessingProfile
from emi_reading_processor.models.reading import Reading
from emi_reading_processor.models.results import QualityFactors


def _clamp01(x: float) -> float:
    return max(0.0, min(1.0, x))


def signal_to_noise(signal_strength: float, noise_level: float) -> float:
    """``signal / noise``; unbounded (``inf``) when there is no noise estimate."""
    if noise_level > 0.0:
        return signal_strength / noise_level
    return math.inf


def quality_factors(reading: Reading, profile: ProcessingProfile = ProcessingProfile()) -> QualityFactors:
    snr = signal_to_noise(reading.signal_strength, reading.noise_level)
    q_snr = _clamp01(min(1.0, snr / profile.snr_reference))
    q_signal = _clamp01(min(1.0, reading.signal_strength / profile.signal_reference))

    if reading.frequency > 0.0:
        q_freq = _clamp01(min(1.0, profile.frequency_reference_hz / reading.frequency))
    else:
        q_freq = 0.0

    deviation = abs(reading.temperature - profile.quality_temperature_reference)
    penalty = min(profile.quality_temperature_max_penalty, deviation / profile.quality_temperature_span)
    q_temp = _clamp01(1.0 - penalty)

    score = 1.0
    for factor in (q_snr, q_signal, q_freq, q_temp):
        score *= factor

    return QualityFactors(
        snr=snr,
        snr_quality=q_snr,
        signal_quality=q_signal,
        frequency_quality=q_freq,
        temperature_quality=q_temp,
        score=_clamp01(score),
    )


def score_quality(
    reading: Reading,
    profile: ProcessingProfile = ProcessingProfile(),
) -> Tuple[Reading, QualityFactors]:
    """Return ``reading`` with ``quality_score`` set, plus the factors."""
    factors = quality_factors(reading, profile)
    return replace(reading, quality_score=factors.score), factors
