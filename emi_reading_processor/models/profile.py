"""Processing profile -- bundles every tunable constant of the reading pipeline.

A ProcessingProfile groups the parameters that affect the processed output
into one frozen dataclass.  It can be:

- Constructed with defaults that reproduce the reference device behaviour
- Overridden field-by-field via ``dataclasses.replace()``
- Serialized to/from a dict for JSON provenance

Calibration values are kept apart in :class:`Calibration` because they are
replaced at run time (``ReadingProcessor.set_calibration``), while the
profile is fixed for the lifetime of a processor.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, Literal

ColdStart = Literal["legacy", "explicit"]


@dataclass(frozen=True)
class Calibration:
    """Externally configured sensor calibration.

    Attributes
    ----------
    offset : float
        Subtracted from the signal before the gain is applied.
    gain : float
        Multiplies the offset-corrected signal.  Not validated: negative or
        zero gains are accepted as given.
    temperature_reference : float
        Temperature (deg C) at which no compensation is applied.
    """

    offset: float = 0.0
    gain: float = 1.0
    temperature_reference: float = 25.0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class ProcessingProfile:
    """Frozen configuration for the reading pipeline.

    Noise filter
    ------------
    history_size : int
        Capacity of the signal/phase histories (strict FIFO).
    median_window : int
        Number of newest samples the median filter looks at.

    Calibration / temperature
    -------------------------
    frequency_reference_hz : float
        Frequency at which the frequency correction is 1 and above which
        frequency quality starts to drop.
    temperature_coefficient : float
        Relative signal change per deg C.
    phase_temperature_coefficient : float
        Phase shift (degrees) per deg C.
    min_compensation_factor : float
        Smallest accepted ``|1 + delta * temperature_coefficient|``.

    Smoothing
    ---------
    smoothing_factor : float
        EMA weight of the newest sample (alpha).
    cold_start : str
        "legacy": a previous value <= 0 means "no history yet" (reference
        device behaviour).  "explicit": only a missing previous value does.

    Depth model
    -----------
    depth_reference_signal : float
        Signal level corresponding to zero depth.
    depth_attenuation_coefficient : float
        Empirical decay coefficient of the signal with depth.

    Quality
    -------
    snr_reference, signal_reference : float
        Values at which the SNR and signal factors saturate at 1.
    quality_temperature_reference, quality_temperature_span,
    quality_temperature_max_penalty : float
        Nominal temperature, deviation scale and penalty cap of the
        temperature factor.
    """

    history_size: int = 10
    median_window: int = 3

    frequency_reference_hz: float = 100.0
    temperature_coefficient: float = 0.002
    phase_temperature_coefficient: float = 0.1
    min_compensation_factor: float = 1e-12

    smoothing_factor: float = 0.1
    cold_start: ColdStart = "legacy"

    depth_reference_signal: float = 1000.0
    depth_attenuation_coefficient: float = 0.1

    snr_reference: float = 20.0
    signal_reference: float = 1000.0
    quality_temperature_reference: float = 25.0
    quality_temperature_span: float = 50.0
    quality_temperature_max_penalty: float = 0.5

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def validate(self) -> None:
        """Raise ``ValueError`` if the profile cannot drive the pipeline."""
        if int(self.history_size) < 1:
            raise ValueError(f"history_size must be >= 1, got {self.history_size}")
        if not 1 <= int(self.median_window) <= int(self.history_size):
            raise ValueError(
                f"median_window must be in [1, history_size={self.history_size}], got {self.median_window}"
            )
        if not 0.0 < float(self.smoothing_factor) <= 1.0:
            raise ValueError(f"smoothing_factor must be in (0, 1], got {self.smoothing_factor}")
        if self.cold_start not in ("legacy", "explicit"):
            raise ValueError(f"Unknown cold_start mode: {self.cold_start!r}")

        positive = (
            "frequency_reference_hz",
            "min_compensation_factor",
            "depth_reference_signal",
            "depth_attenuation_coefficient",
            "snr_reference",
            "signal_reference",
            "quality_temperature_span",
        )
        for name in positive:
            value = float(getattr(self, name))
            if not value > 0.0:
                raise ValueError(f"{name} must be > 0, got {value}")

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def to_dict(self) -> Dict[str, Any]:
        """Return a JSON-friendly dict."""
        return asdict(self)

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> ProcessingProfile:
        """Reconstruct from a dict (e.g. loaded from JSON)."""
        return cls(**dict(d))
