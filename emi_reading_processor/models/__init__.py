from .profile import Calibration, ProcessingProfile
from .reading import Reading
from .results import EnhancedParameters, ProcessedReading, ProcessingStats, QualityFactors

__all__ = [
    "Calibration",
    "EnhancedParameters",
    "ProcessedReading",
    "ProcessingProfile",
    "ProcessingStats",
    "QualityFactors",
    "Reading",
]
