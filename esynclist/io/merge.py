from __future__ import annotations

from typing import Protocol

import logging

import numpy as np

from esynclist.core.config import DERIVE_TOLERANCE, ToleranceConfig
from esynclist.core.segment import TraceSegment
from esynclist.core.tolerance import effective_tolerance_ns, sample_period_ns
from esynclist.core.tracelist import TraceID, TraceList
from esynclist.io.mseed_reader import DecodedRecord

logger = logging.getLogger(__name__)

# Default relative sample rate tolerance
RATE_TOLERANCE = 0.0001


class RecordMerger(Protocol):
    """Protocol for the collaborator that folds records into a TraceList."""

    def add(
        self, tracelist: TraceList, record: DecodedRecord, tolerance: ToleranceConfig
    ) -> TraceSegment:
        ...


def rates_tolerable(r1: float, r2: float, samprate_tolerance: float | None) -> bool:
    """Sample rate agreement: relative by default, absolute when configured."""
    if samprate_tolerance is None or samprate_tolerance == DERIVE_TOLERANCE:
        if r1 == r2:
            return True
        if r2 == 0.0:
            return False
        return abs(1.0 - r1 / r2) < RATE_TOLERANCE
    return abs(r1 - r2) <= samprate_tolerance


class TraceListMerger:
    """Default RecordMerger.

    A record extends an existing segment when it starts one sample period
    after the segment end (or ends one period before its start) within the
    time tolerance, with a tolerable rate and the same sample type.
    Otherwise it becomes a new segment. Segments bridged by a record are
    joined.

    With split_version=True, each publication version is its own TraceID;
    otherwise TraceIDs are keyed by sid and carry the highest version seen.
    """

    def __init__(self, split_version: bool = True):
        self.split_version = split_version

    def add(
        self, tracelist: TraceList, record: DecodedRecord, tolerance: ToleranceConfig
    ) -> TraceSegment:
        tid = self._traceid(tracelist, record)

        delta_ns = sample_period_ns(record.samprate)
        time_tolerance = DERIVE_TOLERANCE if tolerance.time is None else tolerance.time
        tol_ns = effective_tolerance_ns(record.samprate, time_tolerance)

        if delta_ns > 0:
            for idx, seg in enumerate(tid.segments):
                if not self._compatible(seg, record, tolerance):
                    continue

                if abs(record.start_ns - seg.end_ns - delta_ns) <= tol_ns:
                    self._append(seg, record)
                    return self._bridge(tid, idx, tolerance)

                if abs(seg.start_ns - record.end_ns - delta_ns) <= tol_ns:
                    self._prepend(seg, record)
                    return self._bridge(tid, idx, tolerance)

        return tid.add_segment(record.to_segment())

    # ------------------------------------------------------------------
    # helpers
    # ------------------------------------------------------------------
    def _traceid(self, tracelist: TraceList, record: DecodedRecord) -> TraceID:
        if self.split_version:
            return tracelist.get_or_create(record.sid, record.pubversion)

        tid = tracelist.find(record.sid)
        if tid is None:
            return tracelist.add(TraceID(sid=record.sid, pubversion=record.pubversion))
        if record.pubversion > tid.pubversion:
            tid.pubversion = record.pubversion
        return tid

    @staticmethod
    def _compatible(
        seg: TraceSegment, other: TraceSegment | DecodedRecord, tolerance: ToleranceConfig
    ) -> bool:
        return (
            seg.sampletype == other.sampletype
            and (seg.samples is None) == (other.samples is None)
            and rates_tolerable(seg.samprate, other.samprate, tolerance.samprate)
        )

    @staticmethod
    def _append(seg: TraceSegment, record: DecodedRecord | TraceSegment) -> None:
        if seg.samples is not None:
            seg.samples = np.concatenate([seg.samples, record.samples])
        seg.end_ns = record.end_ns
        seg.samplecnt += record.samplecnt

    @staticmethod
    def _prepend(seg: TraceSegment, record: DecodedRecord) -> None:
        if seg.samples is not None:
            seg.samples = np.concatenate([record.samples, seg.samples])
        seg.start_ns = record.start_ns
        seg.samplecnt += record.samplecnt

    def _bridge(self, tid: TraceID, idx: int, tolerance: ToleranceConfig) -> TraceSegment:
        """Join the segment at `idx` with neighbours it now touches."""
        segments = tid.segments
        seg = segments[idx]

        if idx + 1 < len(segments) and self._touches(seg, segments[idx + 1], tolerance):
            self._append(seg, segments.pop(idx + 1))
            logger.debug("Joined adjacent segments for %s", tid.sid)

        if idx > 0 and self._touches(segments[idx - 1], seg, tolerance):
            prev = segments[idx - 1]
            self._append(prev, segments.pop(idx))
            logger.debug("Joined adjacent segments for %s", tid.sid)
            return prev

        return seg

    def _touches(self, first: TraceSegment, second: TraceSegment, tolerance: ToleranceConfig) -> bool:
        if not self._compatible(first, second, tolerance):
            return False
        delta_ns = sample_period_ns(first.samprate)
        if delta_ns <= 0:
            return False
        time_tolerance = DERIVE_TOLERANCE if tolerance.time is None else tolerance.time
        tol_ns = effective_tolerance_ns(first.samprate, time_tolerance)
        return abs(second.start_ns - first.end_ns - delta_ns) <= tol_ns
