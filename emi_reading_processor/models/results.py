from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict

from .reading import Reading


@dataclass(frozen=True)
class EnhancedParameters:
    """Intermediate values of the parameter-enhancement stage.

    These are diagnostics only.  The :class:`Reading` contract carries
    ``real_part``, ``imaginary_part``, ``magnitude`` and ``depth``; the rest
    is exposed here for inspection and tests.

    Attributes
    ----------
    phase_rad:
        Phase converted to radians.
    real_part, imaginary_part, magnitude:
        Complex-plane decomposition of ``amplitude * exp(i * phase)``.
    conductivity:
        Skin-effect conductivity estimate (S/m).  May be inf/nan for
        degenerate signals.
    permeability:
        Magnetic permeability estimate (H/m).
    skin_depth:
        Skin depth derived from conductivity and permeability (m).
    impedance_real, impedance_imaginary:
        Unit-magnitude impedance direction.
    depth:
        Empirical depth estimate.
    """

    phase_rad: float
    real_part: float
    imaginary_part: float
    magnitude: float
    conductivity: float
    permeability: float
    skin_depth: float
    impedance_real: float
    impedance_imaginary: float
    depth: float

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class QualityFactors:
    """The four quality factors and their product, each in [0, 1]."""

    snr: float
    snr_quality: float
    signal_quality: float
    frequency_quality: float
    temperature_quality: float
    score: float

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class ProcessingStats:
    """Read-only snapshot of a processor for diagnostics/telemetry."""

    calibration_offset: float
    gain_correction: float
    temperature_reference: float
    history_size: int
    average_noise_level: float

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class ProcessedReading:
    """Final reading plus the diagnostics gathered while producing it.

    ``warnings`` holds soft plausibility messages (out-of-range inputs).  They
    never stop processing.
    """

    reading: Reading
    parameters: EnhancedParameters
    quality: QualityFactors
    warnings: tuple[str, ...] = ()
