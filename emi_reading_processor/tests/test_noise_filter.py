from __future__ import annotations

import numpy as np
import pytest

from emi_reading_processor.analysis.noise import (
    NoiseHistory,
    apply_noise_filter,
    median_filter,
    noise_level,
)
from emi_reading_processor.models.reading import Reading


def _reading(signal: float, phase: float = 10.0) -> Reading:
    return Reading(signal_strength=signal, phase=phase, amplitude=500.0, frequency=100.0, temperature=25.0)


def test_median_filter_conventions() -> None:
    assert median_filter([]) == 0.0
    assert median_filter([4.0]) == 4.0
    assert median_filter([2.0, 6.0]) == 4.0
    assert median_filter([9.0, 1.0, 5.0]) == 5.0
    # Even count > 2 picks the upper middle element.
    assert median_filter([4.0, 1.0, 3.0, 2.0]) == 3.0


def test_noise_level_is_population_std() -> None:
    x = [1.0, 2.0, 3.0, 4.0]
    assert noise_level(x) == pytest.approx(np.std(x, ddof=0))
    assert noise_level([]) == 0.0
    assert noise_level([7.0]) == 0.0


def test_raw_values_pass_through_until_window_is_full() -> None:
    h = NoiseHistory(10)
    out1 = apply_noise_filter(_reading(100.0, 1.0), h)
    out2 = apply_noise_filter(_reading(300.0, 3.0), h)

    assert out1.signal_strength == 100.0
    assert out1.noise_level == 0.0
    assert out2.signal_strength == 300.0
    assert out2.phase == 3.0
    assert out2.noise_level == pytest.approx(100.0)


def test_median_of_last_three_once_available() -> None:
    h = NoiseHistory(10)
    for s, p in [(100.0, 5.0), (900.0, 1.0), (200.0, 3.0)]:
        out = apply_noise_filter(_reading(s, p), h)
    assert out.signal_strength == 200.0
    assert out.phase == 3.0

    # Only the newest three count: [900, 200, 150] -> 200
    out = apply_noise_filter(_reading(150.0, 2.0), h)
    assert out.signal_strength == 200.0
    assert out.phase == 2.0


def test_median_is_stable_for_repeated_triplet() -> None:
    h = NoiseHistory(10)
    outputs = []
    for _ in range(5):
        for s in (10.0, 30.0, 20.0):
            outputs.append(apply_noise_filter(_reading(s), h).signal_strength)
    # From the third sample on, every window holds {10, 20, 30}.
    assert all(v == 20.0 for v in outputs[2:])


def test_history_evicts_oldest_in_lockstep() -> None:
    h = NoiseHistory(10)
    sizes = []
    for i in range(11):
        out = apply_noise_filter(_reading(float(i) ** 2, float(i)), h)
        sizes.append(len(h))

    assert max(sizes) == 10
    assert h.signals[0] == 1.0
    assert h.phases[0] == 1.0
    assert 0.0 not in h.signals.tolist()

    # The first sample (0) no longer contributes to the noise level.
    kept = np.arange(1, 11, dtype=float) ** 2
    assert out.noise_level == pytest.approx(np.std(kept))
    assert out.noise_level != pytest.approx(np.std(np.arange(0, 11, dtype=float) ** 2))


def test_other_fields_are_carried_forward() -> None:
    h = NoiseHistory(10)
    r = Reading(
        signal_strength=10.0, phase=1.0, amplitude=3.0, frequency=50.0, temperature=20.0,
        depth=1.5, timestamp=12.0, session_id=4,
    )
    out = apply_noise_filter(r, h)
    assert out.amplitude == 3.0
    assert out.frequency == 50.0
    assert out.depth == 1.5
    assert out.timestamp == 12.0
    assert out.session_id == 4
    assert r.noise_level == 0.0  # input untouched


def test_history_capacity_must_be_positive() -> None:
    with pytest.raises(ValueError):
        NoiseHistory(0)
