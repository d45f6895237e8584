"""Reading-processing package.

Design principle:
  - Each stage is a plain function ``Reading -> Reading`` (plus diagnostics
    where useful) and never mutates its input.
  - State lives only in :class:`~emi_reading_processor.analysis.processor.ReadingProcessor`
    (noise history, smoothing memory, calibration).

Stage modules are usable on their own for testing and offline analysis.
"""

from .batch import process_readings, readings_from_frame
from .calibration import apply_calibration, apply_temperature_compensation, frequency_correction
from .enhance import depth_estimate, enhance_parameters
from .noise import NoiseHistory, apply_noise_filter, median_filter, noise_level
from .processor import ReadingProcessor
from .quality import quality_factors, score_quality
from .smoothing import ExponentialSmoother
from .validation import InvalidReading, check_ranges, validate_reading

__all__ = [
    "ExponentialSmoother",
    "InvalidReading",
    "NoiseHistory",
    "ReadingProcessor",
    "apply_calibration",
    "apply_noise_filter",
    "apply_temperature_compensation",
    "check_ranges",
    "depth_estimate",
    "enhance_parameters",
    "frequency_correction",
    "median_filter",
    "noise_level",
    "process_readings",
    "quality_factors",
    "readings_from_frame",
    "score_quality",
    "validate_reading",
]
