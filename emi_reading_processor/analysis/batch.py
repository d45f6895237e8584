"""Session-level helpers: run many readings through one processor.

These functions let notebooks and scripts go from a table of raw readings to
a table of processed readings without hand-written loops.

Functions
---------
readings_from_frame
    Convert a DataFrame of raw columns into :class:`Reading` objects.
build_reading_row
    Flatten a :class:`ProcessedReading` into one dict, ready for
    ``pd.DataFrame()``.
process_readings
    Process an ordered iterable of readings and return a DataFrame.
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Literal, Optional

import numpy as np
import pandas as pd

from emi_reading_processor.models.profile import ProcessingProfile
from emi_reading_processor.models.reading import Reading
from emi_reading_processor.models.results import ProcessedReading

from .processor import ReadingProcessor
from .validation import InvalidReading

logger = logging.getLogger(__name__)

RAW_COLUMNS = ("signal_strength", "phase", "amplitude", "frequency", "temperature")
OnInvalid = Literal["raise", "skip"]


def readings_from_frame(df: pd.DataFrame) -> List[Reading]:
    """Build readings from the raw columns of ``df``.

    Optional ``timestamp`` and ``session_id`` columns are carried over; other
    columns are ignored.
    """
    missing = [c for c in RAW_COLUMNS if c not in df.columns]
    if missing:
        raise ValueError(f"Missing raw column(s): {', '.join(missing)}")

    has_ts = "timestamp" in df.columns
    has_sid = "session_id" in df.columns

    readings: List[Reading] = []
    for row in df.itertuples(index=False):
        ts = getattr(row, "timestamp") if has_ts else None
        sid = getattr(row, "session_id") if has_sid else None
        readings.append(
            Reading(
                signal_strength=float(row.signal_strength),
                phase=float(row.phase),
                amplitude=float(row.amplitude),
                frequency=float(row.frequency),
                temperature=float(row.temperature),
                timestamp=None if ts is None or pd.isna(ts) else float(ts),
                session_id=None if sid is None or pd.isna(sid) else int(sid),
            )
        )
    return readings


def build_reading_row(processed: ProcessedReading) -> dict:
    """One row per reading: reading fields, ``diag_*``, ``q_*`` and ``warnings``."""
    row = processed.reading.to_dict()
    for k, v in processed.parameters.to_dict().items():
        row[f"diag_{k}"] = v
    for k, v in processed.quality.to_dict().items():
        if k == "score":
            continue  # already present as quality_score
        row[f"q_{k}"] = v
    row["warnings"] = "; ".join(processed.warnings)
    return row


def process_readings(
    readings: Iterable[Reading],
    processor: Optional[ReadingProcessor] = None,
    *,
    profile: Optional[ProcessingProfile] = None,
    on_invalid: OnInvalid = "raise",
) -> pd.DataFrame:
    """Process ``readings`` in order through a single processor.

    Parameters
    ----------
    readings:
        Ordered readings of one session.
    processor:
        Processor to use.  Its state carries over from earlier calls and is
        updated by this one.  A fresh processor is created if omitted.
    profile:
        Profile for the fresh processor.  Ignored when ``processor`` is given.
    on_invalid:
        "raise" re-raises :class:`InvalidReading`; "skip" logs and omits the
        reading.

    Returns
    -------
    pandas.DataFrame
        Indexed by the position of each reading in the input.
    """
    if on_invalid not in ("raise", "skip"):
        raise ValueError(f"Unknown on_invalid mode: {on_invalid!r}")

    proc = processor if processor is not None else ReadingProcessor(profile=profile)

    rows: list[dict] = []
    index: list[int] = []
    n_skipped = 0
    for i, reading in enumerate(readings):
        try:
            processed = proc.process_detailed(reading)
        except InvalidReading as exc:
            if on_invalid == "raise":
                raise
            n_skipped += 1
            logger.warning("Skipping reading %d: %s", i, exc)
            continue
        rows.append(build_reading_row(processed))
        index.append(i)

    if n_skipped:
        logger.info("Processed %d reading(s), skipped %d invalid", len(rows), n_skipped)

    return pd.DataFrame(rows, index=pd.Index(np.asarray(index, dtype=int), name="input_index"))
