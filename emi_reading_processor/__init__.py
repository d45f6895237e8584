"""EMI Reading Processor -- Python tooling for handheld electromagnetic-induction readings.

This package turns one raw sensor reading (signal strength, phase, amplitude,
frequency, temperature) into a calibrated, noise-reduced, physically enriched
reading with a quality score.

The processing chain is strictly ordered and stateful:
- Noise filter (median of the newest samples, rolling noise level)
- Calibration (offset, gain, frequency correction)
- Temperature compensation
- Exponential smoothing
- Parameter enhancement (complex plane, conductivity, skin depth, depth)
- Quality scoring

Key principles:
- One processor per acquisition session: filter memory is never shared
- Readings are immutable: every stage returns a new value
- Preconditions are checked at the pipeline boundary, not patched downstream

Main subpackages:
- analysis: Pipeline stages, the stateful processor, batch helpers
- models: Data models (Reading, ProcessingProfile, result containers)
"""

from .analysis.processor import ReadingProcessor
from .analysis.validation import InvalidReading
from .models import Calibration, ProcessingProfile, Reading

__all__ = [
    "Calibration",
    "InvalidReading",
    "ProcessingProfile",
    "Reading",
    "ReadingProcessor",
]
