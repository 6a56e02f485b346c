# esynclist/core/tracelist.py
from __future__ import annotations

from bisect import insort
from dataclasses import dataclass, field
from typing import Iterable, Iterator

from .exceptions import InvalidTraceList, TraceNotFound
from .segment import TraceSegment


@dataclass(slots=True)
class TraceID:
    """
    One channel identity: source identifier + publication version, owning
    its segments in start-time order.
    """
    sid: str
    pubversion: int = 0
    segments: list[TraceSegment] = field(default_factory=list, repr=False)

    def __post_init__(self) -> None:
        if not isinstance(self.sid, str) or not self.sid.strip():
            raise InvalidTraceList("TraceID.sid must be a non-empty string.")
        if not isinstance(self.pubversion, int) or self.pubversion < 0:
            raise InvalidTraceList("TraceID.pubversion must be a non-negative int.")

        segments = list(self.segments)
        for seg in segments:
            if not isinstance(seg, TraceSegment):
                raise InvalidTraceList("TraceID.segments values must be TraceSegment instances.")
        segments.sort(key=_start_key)
        self.segments = segments

    @property
    def key(self) -> tuple[str, int]:
        return self.sid, self.pubversion

    def __len__(self) -> int:
        return len(self.segments)

    def __iter__(self) -> Iterator[TraceSegment]:
        return iter(self.segments)

    def add_segment(self, segment: TraceSegment) -> TraceSegment:
        """Insert `segment` keeping start-time order."""
        if not isinstance(segment, TraceSegment):
            raise InvalidTraceList("add_segment() expects a TraceSegment instance.")
        insort(self.segments, segment, key=_start_key)
        return segment


def _start_key(seg: TraceSegment) -> int:
    return seg.start_ns


def _id_key(tid: TraceID) -> tuple[str, int]:
    return tid.key


class TraceList:
    """
    Ordered collection of TraceIDs (by source identifier, then publication
    version).

    The list itself is built by a merge collaborator; the core only reads
    it and trims segments in place.
    """

    __slots__ = ("_ids",)

    def __init__(self, traceids: Iterable[TraceID] = ()) -> None:
        self._ids: list[TraceID] = []
        for tid in traceids:
            self.add(tid)

    # ---- container API ----
    def __len__(self) -> int:
        return len(self._ids)

    def __iter__(self) -> Iterator[TraceID]:
        return iter(self._ids)

    def __contains__(self, sid: object) -> bool:
        return any(tid.sid == sid for tid in self._ids)

    def __getitem__(self, sid: str) -> TraceID:
        tid = self.find(sid)
        if tid is None:
            raise TraceNotFound(sid)
        return tid

    def find(self, sid: str, pubversion: int | None = None) -> TraceID | None:
        """First TraceID with `sid` (and `pubversion`, when given)."""
        for tid in self._ids:
            if tid.sid == sid and (pubversion is None or tid.pubversion == pubversion):
                return tid
        return None

    # ---- derived counts ----
    @property
    def numsegments(self) -> int:
        return sum(len(tid) for tid in self._ids)

    def segments(self) -> Iterator[tuple[TraceID, TraceSegment]]:
        """All (TraceID, TraceSegment) pairs in identity, then time order."""
        for tid in self._ids:
            for seg in tid.segments:
                yield tid, seg

    # ---- construction ----
    def add(self, traceid: TraceID) -> TraceID:
        if not isinstance(traceid, TraceID):
            raise InvalidTraceList("add() expects a TraceID instance.")
        if any(tid.key == traceid.key for tid in self._ids):
            raise InvalidTraceList(
                f"TraceID {traceid.sid} (version {traceid.pubversion}) already exists."
            )
        insort(self._ids, traceid, key=_id_key)
        return traceid

    def get_or_create(self, sid: str, pubversion: int = 0) -> TraceID:
        tid = self.find(sid, pubversion)
        if tid is None:
            tid = self.add(TraceID(sid=sid, pubversion=pubversion))
        return tid
