from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class Reading:
    """
    One EMI sensor sample plus every field derived from it by the pipeline.

    Notes
    - Raw inputs are signal_strength, phase (degrees), amplitude, frequency (Hz)
      and temperature (deg C).
    - Derived fields start at their neutral defaults and are filled in stage by
      stage. A stage only overwrites the fields it owns; everything else is
      carried forward unchanged.
    - timestamp and session_id are pass-through metadata.
    """
    signal_strength: float
    phase: float
    amplitude: float
    frequency: float
    temperature: float

    noise_level: float = 0.0
    calibration_offset: float = 0.0
    real_part: float = 0.0
    imaginary_part: float = 0.0
    magnitude: float = 0.0
    depth: float = 0.0
    quality_score: float = 1.0

    timestamp: Optional[float] = None
    session_id: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        """Return a flat dict, one key per field."""
        return asdict(self)

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> Reading:
        """Reconstruct from a dict produced by :meth:`to_dict`.

        Unknown keys are rejected so that typos in column names do not go
        unnoticed.
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(d) - known)
        if unknown:
            raise ValueError(f"Unknown Reading field(s): {', '.join(unknown)}")
        return cls(**d)
