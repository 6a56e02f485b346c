# esynclist/core/compare.py
"""
All-pairs comparison of segment sample values.

Every unordered pair of segments in the trace list is compared once.
This is a diagnostic for finding duplicated or diverging data and is
quadratic in the number of segments.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

import numpy as np

from .nstime import format_time
from .segment import TraceSegment
from .tracelist import TraceID, TraceList

logger = logging.getLogger(__name__)


class Outcome(Enum):
    NO_DATA = "no data"
    TYPE_MISMATCH = "sample type mismatch"
    COUNT_MISMATCH = "sample count mismatch"
    DIFFERENT = "different"
    IDENTICAL = "identical"


@dataclass(frozen=True, slots=True)
class SegmentRef:
    sid: str
    start_ns: int
    end_ns: int
    sampletype: str
    numsamples: int
    has_data: bool

    @classmethod
    def of(cls, tid: TraceID, seg: TraceSegment) -> "SegmentRef":
        return cls(
            sid=tid.sid,
            start_ns=seg.start_ns,
            end_ns=seg.end_ns,
            sampletype=seg.sampletype,
            numsamples=seg.numsamples,
            has_data=seg.has_data,
        )

    def describe(self) -> str:
        return f"  {self.sid}  {format_time(self.start_ns)}  {format_time(self.end_ns)}"


@dataclass(frozen=True, slots=True)
class ComparisonResult:
    source: SegmentRef
    target: SegmentRef
    outcome: Outcome
    compared: int = 0
    index: int | None = None  # 1-based index of the first differing sample
    values: tuple[object, object] | None = None

    @property
    def identical(self) -> bool:
        return self.outcome is Outcome.IDENTICAL

    @property
    def different(self) -> bool:
        return self.outcome is Outcome.DIFFERENT

    @property
    def diagnostic(self) -> bool:
        """True for pairs whose samples were not compared."""
        return self.outcome in (Outcome.NO_DATA, Outcome.TYPE_MISMATCH, Outcome.COUNT_MISMATCH)


def first_difference(a: np.ndarray, b: np.ndarray) -> int | None:
    """0-based index of the first differing element, None when equal."""
    diff = np.flatnonzero(a != b)
    return int(diff[0]) if diff.size else None


def compare_segments(
    tid: TraceID, seg: TraceSegment, ttid: TraceID, tseg: TraceSegment
) -> ComparisonResult:
    source = SegmentRef.of(tid, seg)
    target = SegmentRef.of(ttid, tseg)

    if seg.samples is None or tseg.samples is None:
        return ComparisonResult(source, target, Outcome.NO_DATA)

    if seg.sampletype != tseg.sampletype:
        return ComparisonResult(source, target, Outcome.TYPE_MISMATCH)

    if seg.numsamples != tseg.numsamples:
        return ComparisonResult(source, target, Outcome.COUNT_MISMATCH)

    idx = first_difference(seg.samples, tseg.samples)
    if idx is not None:
        return ComparisonResult(
            source,
            target,
            Outcome.DIFFERENT,
            compared=idx + 1,
            index=idx + 1,
            values=(seg.samples[idx].item(), tseg.samples[idx].item()),
        )

    return ComparisonResult(source, target, Outcome.IDENTICAL, compared=seg.numsamples)


def compare_tracelist(tracelist: TraceList) -> tuple[bool, list[ComparisonResult]]:
    """
    Compare every segment against every later segment in the trace list.

    Returns (all_match, results); all_match is False as soon as any pair
    differs at some sample. Type and count mismatches are reported but do
    not clear all_match.
    """
    items = list(tracelist.segments())
    results: list[ComparisonResult] = []
    all_match = True

    for i, (tid, seg) in enumerate(items):
        for ttid, tseg in items[i + 1:]:
            result = compare_segments(tid, seg, ttid, tseg)
            if result.different:
                all_match = False
            logger.debug("%s vs %s: %s", tid.sid, ttid.sid, result.outcome.value)
            results.append(result)

    return all_match, results


def _format_value(value: object, sampletype: str) -> str:
    if sampletype == "i":
        return f"{value:d}"
    if sampletype in ("f", "d"):
        return f"{value:f}"
    if isinstance(value, bytes):
        return value.decode("latin-1")
    return str(value)


def format_result(result: ComparisonResult) -> list[str]:
    """Human-readable report lines for one pair.

    Pairs whose samples were compared get the outcome followed by both
    segments; the other outcomes are a single line.
    """
    src, tgt = result.source, result.target

    if result.outcome is Outcome.NO_DATA:
        missing = src if not src.has_data else tgt
        head = (
            f"{missing.sid}, {format_time(missing.start_ns)}, "
            f"{format_time(missing.end_ns)} :: No data samples"
        )
    elif result.outcome is Outcome.TYPE_MISMATCH:
        head = f"{src.sid} and {tgt.sid} :: Sample type mismatch"
    elif result.outcome is Outcome.COUNT_MISMATCH:
        head = (
            f"{src.sid} ({src.numsamples}) and {tgt.sid} ({tgt.numsamples}) "
            ":: Sample count mismatch"
        )
    elif result.outcome is Outcome.DIFFERENT:
        a, b = result.values
        head = (
            "Time series are NOT the same, differing at sample "
            f"{result.index} ({_format_value(a, src.sampletype)} versus "
            f"{_format_value(b, tgt.sampletype)})"
        )
    else:
        head = f"Time series are the same, {result.compared} samples compared"

    if result.diagnostic:
        return [head]
    return [head, src.describe(), tgt.describe()]
