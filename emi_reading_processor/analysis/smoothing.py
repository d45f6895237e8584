from __future__ import annotations

"""Exponential smoothing stage.

First-order IIR per field (signal, phase, amplitude):

  y_k = alpha * x_k + (1 - alpha) * y_{k-1}

Cold start
----------
The reference device marks "no previous sample" with 0 and only blends when
the previous value is strictly positive.  A previous value that is zero or
negative is therefore treated as no history, and the current value passes
through.  This is kept as the "legacy" mode.

The "explicit" mode stores "no sample yet" as ``None`` and blends whenever a
previous value exists, including zero and negative ones.

In both modes each memory cell is overwritten with the output value after
every call.
"""

from dataclasses import replace
from typing import Dict, Optional

from emi_reading_processor.models.profile import ColdStart
from emi_reading_processor.models.reading import Reading

_FIELDS = ("signal_strength", "phase", "amplitude")


class ExponentialSmoother:
    """Smoothing memory for one processor."""

    def __init__(self, alpha: float = 0.1, cold_start: ColdStart = "legacy") -> None:
        if cold_start not in ("legacy", "explicit"):
            raise ValueError(f"Unknown cold_start mode: {cold_start!r}")
        self.alpha = float(alpha)
        self.cold_start: ColdStart = cold_start
        self._previous: Dict[str, Optional[float]] = {}
        self.reset()

    def reset(self) -> None:
        self._previous = {name: None for name in _FIELDS}

    def _has_history(self, previous: Optional[float]) -> bool:
        if previous is None:
            return False
        if self.cold_start == "legacy":
            return previous > 0.0
        return True

    def smooth_value(self, name: str, current: float) -> float:
        """Smooth one field and update its memory cell."""
        previous = self._previous[name]
        if self._has_history(previous):
            out = self.alpha * current + (1.0 - self.alpha) * previous
        else:
            out = float(current)
        self._previous[name] = out
        return out

    def apply(self, reading: Reading) -> Reading:
        return replace(
            reading,
            signal_strength=self.smooth_value("signal_strength", reading.signal_strength),
            phase=self.smooth_value("phase", reading.phase),
            amplitude=self.smooth_value("amplitude", reading.amplitude),
        )

    def state(self) -> Dict[str, Optional[float]]:
        """Current memory cells, keyed by field name.

        In legacy mode an empty cell is reported as 0.0, matching the
        device's own representation.
        """
        if self.cold_start == "legacy":
            return {k: (0.0 if v is None else v) for k, v in self._previous.items()}
        return dict(self._previous)

    @property
    def previous_signal_strength(self) -> Optional[float]:
        return self.state()["signal_strength"]

    @property
    def previous_phase(self) -> Optional[float]:
        return self.state()["phase"]

    @property
    def previous_amplitude(self) -> Optional[float]:
        return self.state()["amplitude"]
