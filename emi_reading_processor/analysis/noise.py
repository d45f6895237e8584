from __future__ import annotations

"""Noise filter stage.

The filter keeps a short history of raw signal and phase values and applies
two operations per reading:

1) Median filter

   Once the history holds at least ``median_window`` samples, signal and
   phase are replaced by the median of the newest ``median_window`` entries.
   Before that the raw values pass through unchanged.

2) Noise level

   The noise level is the population standard deviation of the *entire*
   signal history:

     noise = sqrt(mean((x - mean(x))**2))

   It is 0 until at least two samples exist.

Both histories are bounded (strict FIFO) and evicted in lockstep, so the
phase history is always aligned with the signal history.
"""

from collections import deque
from dataclasses import replace
from typing import Deque, Iterable

import numpy as np

from emi_reading_processor.models.reading import Reading


class NoiseHistory:
    """Bounded signal/phase histories owned by one processor."""

    def __init__(self, capacity: int = 10) -> None:
        capacity = int(capacity)
        if capacity < 1:
            raise ValueError(f"capacity must be >= 1, got {capacity}")
        self._capacity = capacity
        self._signal: Deque[float] = deque(maxlen=capacity)
        self._phase: Deque[float] = deque(maxlen=capacity)

    @property
    def capacity(self) -> int:
        return self._capacity

    def __len__(self) -> int:
        return len(self._signal)

    def append(self, signal: float, phase: float) -> None:
        # deque(maxlen) drops the oldest entry of each history on overflow.
        self._signal.append(float(signal))
        self._phase.append(float(phase))

    def clear(self) -> None:
        self._signal.clear()
        self._phase.clear()

    @property
    def signals(self) -> np.ndarray:
        return np.fromiter(self._signal, dtype=float, count=len(self._signal))

    @property
    def phases(self) -> np.ndarray:
        return np.fromiter(self._phase, dtype=float, count=len(self._phase))


def median_filter(values: Iterable[float]) -> float:
    """Median with the reference device conventions.

    - no values: 0.0
    - one value: that value
    - two values: their average
    - otherwise: element ``n // 2`` of the sorted values (upper middle for
      even counts)
    """
    v = np.sort(np.asarray(list(values), dtype=float))
    n = v.size
    if n == 0:
        return 0.0
    if n == 1:
        return float(v[0])
    if n == 2:
        return float((v[0] + v[1]) / 2.0)
    return float(v[n // 2])


def noise_level(values: Iterable[float]) -> float:
    """Population standard deviation, 0.0 for fewer than two samples."""
    x = np.asarray(list(values), dtype=float)
    if x.size < 2:
        return 0.0
    return float(np.sqrt(np.mean((x - np.mean(x)) ** 2)))


def apply_noise_filter(reading: Reading, history: NoiseHistory, *, median_window: int = 3) -> Reading:
    """Push the reading into ``history`` and return the filtered reading.

    Parameters
    ----------
    reading:
        Raw input reading.
    history:
        Processor-owned history.  Mutated: the reading's signal and phase are
        appended (oldest entries evicted beyond capacity).
    median_window:
        Number of newest samples used by the median filter.

    Returns
    -------
    Reading
        Copy of ``reading`` with ``signal_strength``, ``phase`` and
        ``noise_level`` replaced.
    """
    history.append(reading.signal_strength, reading.phase)

    w = int(median_window)
    if len(history) >= w:
        signal = median_filter(history.signals[-w:])
        phase = median_filter(history.phases[-w:])
    else:
        signal = reading.signal_strength
        phase = reading.phase

    return replace(
        reading,
        signal_strength=signal,
        phase=phase,
        noise_level=noise_level(history.signals),
    )
