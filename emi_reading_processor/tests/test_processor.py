"""End-to-end tests for ReadingProcessor and its control surface."""

from __future__ import annotations

import dataclasses
import logging
import math

import pytest

from emi_reading_processor import InvalidReading, ProcessingProfile, Reading, ReadingProcessor


def _reading(**kw) -> Reading:
    base = dict(signal_strength=800.0, phase=30.0, amplitude=900.0, frequency=100.0, temperature=25.0)
    base.update(kw)
    return Reading(**base)


# -----------------------------------------------------------------------
# Full pipeline
# -----------------------------------------------------------------------


def test_end_to_end_defaults() -> None:
    proc = ReadingProcessor()
    out = proc.process(_reading())

    assert out.noise_level == 0.0
    assert out.calibration_offset == 0.0
    assert out.signal_strength == pytest.approx(800.0)
    assert out.phase == pytest.approx(30.0)
    assert out.amplitude == pytest.approx(900.0)
    assert out.real_part == pytest.approx(779.4, abs=0.05)
    assert out.imaginary_part == pytest.approx(450.0)
    assert out.magnitude == pytest.approx(900.0)
    assert out.depth == pytest.approx(2.23, abs=0.01)
    # snr 1 * signal 0.8 * frequency 1 * temperature 1
    assert out.quality_score == pytest.approx(0.8)


def test_process_detailed_exposes_diagnostics() -> None:
    proc = ReadingProcessor()
    res = proc.process_detailed(_reading(timestamp=1.5, session_id=7))
    assert res.reading.timestamp == 1.5
    assert res.reading.session_id == 7
    assert res.quality.score == res.reading.quality_score
    assert res.quality.snr == math.inf
    assert res.parameters.magnitude == pytest.approx(900.0)
    assert res.warnings == ()


def test_calibration_flows_through_pipeline() -> None:
    proc = ReadingProcessor()
    proc.set_calibration(offset=10.0, gain=2.0, temperature_reference=25.0)
    out = proc.process(_reading(signal_strength=110.0))
    assert out.signal_strength == pytest.approx(200.0)
    assert out.calibration_offset == 10.0


def test_second_reading_is_smoothed() -> None:
    proc = ReadingProcessor()
    proc.process(_reading(signal_strength=800.0))
    out = proc.process(_reading(signal_strength=900.0))
    # Fewer than three samples: no median; noise filter passes 900 through.
    assert out.signal_strength == pytest.approx(0.1 * 900.0 + 0.9 * 800.0)
    assert out.noise_level == pytest.approx(50.0)


def test_quality_in_bounds_for_sequence() -> None:
    proc = ReadingProcessor()
    for i in range(30):
        out = proc.process(_reading(signal_strength=100.0 + 37.0 * (i % 7), temperature=10.0 + i))
        assert 0.0 <= out.quality_score <= 1.0


# -----------------------------------------------------------------------
# Control surface
# -----------------------------------------------------------------------


def test_stats_defaults() -> None:
    stats = ReadingProcessor().get_processing_stats()
    assert stats.calibration_offset == 0.0
    assert stats.gain_correction == 1.0
    assert stats.temperature_reference == 25.0
    assert stats.history_size == 0
    assert stats.average_noise_level == 0.0


def test_history_never_exceeds_capacity() -> None:
    proc = ReadingProcessor()
    for i in range(11):
        proc.process(_reading(signal_strength=100.0 * (i + 1)))
        assert proc.get_processing_stats().history_size <= 10
    stats = proc.get_processing_stats()
    assert stats.history_size == 10
    assert 100.0 not in proc.history.signals.tolist()


def test_reset_behaves_like_fresh_session_and_keeps_calibration() -> None:
    proc = ReadingProcessor()
    proc.set_calibration(offset=5.0, gain=1.5, temperature_reference=20.0)
    for s in (300.0, 500.0, 700.0, 900.0):
        proc.process(_reading(signal_strength=s))

    proc.reset_filters()
    stats = proc.get_processing_stats()
    assert stats.history_size == 0
    assert stats.average_noise_level == 0.0
    assert stats.calibration_offset == 5.0
    assert stats.gain_correction == 1.5
    assert stats.temperature_reference == 20.0

    fresh = ReadingProcessor()
    fresh.set_calibration(offset=5.0, gain=1.5, temperature_reference=20.0)
    r = _reading(signal_strength=420.0)
    assert proc.process(r) == fresh.process(r)


def test_set_calibration_accepts_any_values() -> None:
    proc = ReadingProcessor()
    proc.set_calibration(offset=-3.0, gain=-2.0, temperature_reference=0.0)
    assert proc.calibration.gain == -2.0
    assert proc.get_processing_stats().temperature_reference == 0.0


def test_average_noise_level_matches_history() -> None:
    proc = ReadingProcessor()
    proc.process(_reading(signal_strength=100.0))
    proc.process(_reading(signal_strength=300.0))
    assert proc.get_processing_stats().average_noise_level == pytest.approx(100.0)


# -----------------------------------------------------------------------
# Boundary validation
# -----------------------------------------------------------------------


@pytest.mark.parametrize(
    "kw",
    [
        dict(frequency=0.0),
        dict(frequency=-10.0),
        dict(amplitude=0.0),
        dict(signal_strength=float("nan")),
        dict(temperature=float("inf")),
    ],
)
def test_invalid_readings_are_rejected_without_side_effects(kw) -> None:
    proc = ReadingProcessor()
    proc.process(_reading())
    before = proc.smoother.state()

    with pytest.raises(InvalidReading):
        proc.process(_reading(**kw))

    assert proc.get_processing_stats().history_size == 1
    assert proc.smoother.state() == before


def test_degenerate_temperature_rejected_before_history_update() -> None:
    proc = ReadingProcessor()
    with pytest.raises(InvalidReading):
        proc.process(_reading(temperature=-475.0))
    assert proc.get_processing_stats().history_size == 0


def test_invalid_reading_is_a_value_error() -> None:
    with pytest.raises(ValueError):
        ReadingProcessor().process(_reading(amplitude=0.0))


# -----------------------------------------------------------------------
# Profile and logging
# -----------------------------------------------------------------------


def test_invalid_profile_rejected_at_construction() -> None:
    with pytest.raises(ValueError):
        ReadingProcessor(profile=dataclasses.replace(ProcessingProfile(), median_window=20))


def test_explicit_cold_start_profile_blends_after_zero() -> None:
    profile = dataclasses.replace(ProcessingProfile(), cold_start="explicit")
    proc = ReadingProcessor(profile=profile)
    proc.process(_reading(phase=0.0))
    out = proc.process(_reading(phase=0.0))
    assert out.phase == 0.0
    assert proc.smoother.previous_phase == 0.0


def test_implausible_reading_logs_warning(caplog) -> None:
    proc = ReadingProcessor()
    with caplog.at_level(logging.WARNING, logger="emi_reading_processor.analysis.processor"):
        res = proc.process_detailed(_reading(signal_strength=5000.0))
    assert len(res.warnings) == 1
    assert "signal_strength" in res.warnings[0]
    assert any("Implausible reading" in rec.getMessage() for rec in caplog.records)


def test_calibration_change_is_logged(caplog) -> None:
    proc = ReadingProcessor()
    with caplog.at_level(logging.INFO, logger="emi_reading_processor.analysis.processor"):
        proc.set_calibration(1.0, 2.0, 3.0)
        proc.reset_filters()
    messages = [rec.getMessage() for rec in caplog.records]
    assert any(m.startswith("Calibration set") for m in messages)
    assert "Filters reset" in messages
