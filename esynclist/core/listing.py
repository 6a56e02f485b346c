# esynclist/core/listing.py
"""
Enhanced SYNC (ESYNC) listing.

One header line ``LABEL|YYYY,DDD`` followed by one line per segment:

    NET|STA|LOC|CHAN|START|END||RATE|COUNT|||QUALITY|MD5|||YYYY,DDD
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import TextIO

from .config import DEFAULT_DCC_LABEL
from .digest import hexdigest
from .nstime import format_time, yearday
from .segment import TraceSegment
from .sid import sid_to_nslc
from .tracelist import TraceID, TraceList

DELIMITER = "|"

# Publication version -> legacy SEED data quality code
QUALITY_CODES: dict[int, str] = {1: "D", 2: "R", 3: "Q", 4: "M"}


def quality_code(pubversion: int | None) -> str:
    if not pubversion:
        return ""
    return QUALITY_CODES.get(pubversion, str(pubversion))


def header_line(dcc_label: str | None, modified: str) -> str:
    return f"{dcc_label or DEFAULT_DCC_LABEL}{DELIMITER}{modified}"


@dataclass(frozen=True, slots=True)
class EsyncRecord:
    network: str
    station: str
    location: str
    channel: str
    start: str
    end: str
    samprate: float
    samplecnt: int
    quality: str
    digest: str
    modified: str

    @classmethod
    def from_segment(cls, tid: TraceID, seg: TraceSegment, modified: str) -> "EsyncRecord":
        network, station, location, channel = sid_to_nslc(tid.sid)
        return cls(
            network=network,
            station=station,
            location=location,
            channel=channel,
            start=format_time(seg.start_ns),
            end=format_time(seg.end_ns),
            samprate=seg.samprate,
            samplecnt=seg.samplecnt,
            quality=quality_code(tid.pubversion),
            digest=hexdigest(seg.samples),
            modified=modified,
        )

    def fields(self) -> list[str]:
        return [
            self.network,
            self.station,
            self.location,
            self.channel,
            self.start,
            self.end,
            "",  # max clock drift
            f"{self.samprate:.10g}",
            str(self.samplecnt),
            "",  # channel flag
            "",  # station volume
            self.quality,
            self.digest[:32],
            "",
            "",
            self.modified,
        ]

    def to_line(self) -> str:
        return DELIMITER.join(self.fields())


def iter_records(tracelist: TraceList, modified: str):
    for tid, seg in tracelist.segments():
        yield EsyncRecord.from_segment(tid, seg, modified)


def build_listing(
    tracelist: TraceList,
    dcc_label: str | None = None,
    *,
    today: date | None = None,
) -> list[str]:
    """Header line plus one ESYNC line per segment, in trace list order."""
    modified = yearday(today)
    lines = [header_line(dcc_label, modified)]
    lines.extend(rec.to_line() for rec in iter_records(tracelist, modified))
    return lines


def write_listing(
    tracelist: TraceList,
    stream: TextIO,
    dcc_label: str | None = None,
    *,
    today: date | None = None,
) -> int:
    """Write the listing to `stream`; returns the number of segment lines."""
    lines = build_listing(tracelist, dcc_label, today=today)
    for line in lines:
        stream.write(line + "\n")
    return len(lines) - 1
