# esynclist/core/trim.py
"""
Trim segments to a time window.

The tolerance liberally matches sample times to the window:
  - the first sample may be at the window start minus the tolerance
  - the last sample may be at the window end plus the tolerance
"""
from __future__ import annotations

import logging

from .config import SelectionCriteria, ToleranceConfig
from .exceptions import TrimError
from .nstime import NSTMODULUS
from .segment import TraceSegment
from .tolerance import effective_tolerance_ns, sample_period_ns
from .tracelist import TraceList

logger = logging.getLogger(__name__)


def _steps(distance_ns: int, delta_ns: int) -> int:
    # Whole sample periods needed to cover distance_ns (ceiling division)
    if distance_ns <= 0:
        return 0
    return -(-distance_ns // delta_ns)


def leading_trim_count(
    segment: TraceSegment, start_ns: int, delta_ns: int, tol_ns: int
) -> int:
    """Samples before `start_ns - tol_ns`, stepping from the segment start."""
    if segment.start_ns >= start_ns or delta_ns <= 0:
        return 0
    return _steps((start_ns - tol_ns) - segment.start_ns, delta_ns)


def trailing_trim_count(
    segment: TraceSegment, end_ns: int, delta_ns: int, tol_ns: int
) -> int:
    """Samples after `end_ns + tol_ns`, stepping back from the segment end."""
    if segment.end_ns <= end_ns or delta_ns <= 0:
        return 0
    return _steps(segment.end_ns - (end_ns + tol_ns), delta_ns)


def trim_segment(
    segment: TraceSegment,
    start_ns: int | None,
    end_ns: int | None,
    tolerance: ToleranceConfig | None = None,
    *,
    sid: str = "",
) -> int:
    """
    Drop leading/trailing samples of `segment` outside [start_ns, end_ns].

    The segment is modified in place. Only integer, float and double
    segments are trimmed; a trim that would remove every sample is not
    performed. Returns the number of samples removed.
    """
    if not segment.is_numeric or segment.samples is None:
        return 0

    tolerance = tolerance or ToleranceConfig()
    delta_ns = sample_period_ns(segment.samprate)
    tol_ns = effective_tolerance_ns(segment.samprate, tolerance.time)
    removed = 0

    if start_ns is not None:
        count = leading_trim_count(segment, start_ns, delta_ns, tol_ns)
        if 0 < count < segment.numsamples:
            logger.info("Trimming %d samples from beginning of trace for %s", count, sid)
            try:
                kept = segment.samples[count:].copy()
            except MemoryError as e:
                raise TrimError(f"Cannot reallocate sample buffer for {sid}") from e

            segment.samples = kept
            segment.start_ns += round(count * NSTMODULUS / segment.samprate)
            segment.samplecnt -= count
            removed += count

    if end_ns is not None:
        count = trailing_trim_count(segment, end_ns, delta_ns, tol_ns)
        if 0 < count < segment.numsamples:
            logger.info("Trimming %d samples from end of trace for %s", count, sid)
            try:
                kept = segment.samples[:-count].copy()
            except MemoryError as e:
                raise TrimError(f"Cannot reallocate sample buffer for {sid}") from e

            segment.samples = kept
            segment.end_ns -= round(count * NSTMODULUS / segment.samprate)
            segment.samplecnt -= count
            removed += count

    return removed


def trim_tracelist(
    tracelist: TraceList,
    selection: SelectionCriteria,
    tolerance: ToleranceConfig | None = None,
) -> int:
    """Trim every segment to the selection window. Returns samples removed."""
    if not selection.has_window:
        return 0

    removed = 0
    for tid, seg in tracelist.segments():
        removed += trim_segment(
            seg, selection.start_ns, selection.end_ns, tolerance, sid=tid.sid
        )
    return removed
