from __future__ import annotations

import io
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, Protocol

import numpy as np
import obspy  # pivotal dependency for miniSEED decoding
from obspy.io.mseed.util import get_record_information

from esynclist.core.exceptions import DecodeError
from esynclist.core.segment import TraceSegment
from esynclist.core.sid import nslc_to_sid

logger = logging.getLogger(__name__)

# SEED data quality indicator -> publication version
PUBVERSIONS: dict[str, int] = {"D": 1, "R": 2, "Q": 3, "M": 4}

# miniSEED encoding name -> sample type, used when samples are not decoded
_ENCODING_TYPES: dict[str, str] = {
    "ASCII": "a",
    "FLOAT32": "f",
    "FLOAT64": "d",
}


@dataclass(frozen=True)
class DecodedRecord:
    """
    One decoded unit handed over by the decoder: a contiguous run of
    samples for a single source identifier.

    samples is None when sample decoding was disabled.
    """

    sid: str
    start_ns: int
    end_ns: int
    samprate: float
    samplecnt: int
    sampletype: str
    pubversion: int = 0
    samples: np.ndarray | None = field(default=None, repr=False)

    def to_segment(self) -> TraceSegment:
        """New segment owning a private copy of the sample buffer."""
        return TraceSegment(
            start_ns=self.start_ns,
            end_ns=self.end_ns,
            samprate=self.samprate,
            samplecnt=self.samplecnt,
            sampletype=self.sampletype,
            samples=None if self.samples is None else np.array(self.samples, copy=True),
        )


class RecordReader(Protocol):
    """Protocol for archive decoders.

    Implementations yield decoded records in file order.
    """

    def read(self, path: str) -> Iterator[DecodedRecord]:
        ...


def _sample_type_and_data(data: np.ndarray) -> tuple[str, np.ndarray]:
    """Map a decoded numpy buffer to (sample type, native buffer)."""
    kind, size = data.dtype.kind, data.dtype.itemsize
    if kind in ("i", "u"):
        return "i", data.astype(np.int32, copy=False)
    if kind == "f" and size == 4:
        return "f", data
    if kind == "f" and size == 8:
        return "d", data
    if kind == "S":
        return "a", data.astype("S1", copy=False)
    raise ValueError(f"Unsupported sample dtype {data.dtype}")


def _pubversion(stats) -> int:
    mseed = getattr(stats, "mseed", None)
    quality = getattr(mseed, "dataquality", None) if mseed is not None else None
    return PUBVERSIONS.get(quality, 0)


def trace_to_record(trace: obspy.Trace, *, unpack_data: bool = True) -> DecodedRecord:
    """Convert an ObsPy Trace into a DecodedRecord."""
    stats = trace.stats
    sid = nslc_to_sid(stats.network, stats.station, stats.location, stats.channel)

    if unpack_data:
        sampletype, samples = _sample_type_and_data(np.asarray(trace.data))
    else:
        encoding = getattr(getattr(stats, "mseed", None), "encoding", None)
        sampletype, samples = _ENCODING_TYPES.get(encoding, "i"), None

    return DecodedRecord(
        sid=sid,
        start_ns=stats.starttime.ns,
        end_ns=stats.endtime.ns,
        samprate=float(stats.sampling_rate),
        samplecnt=int(stats.npts),
        sampletype=sampletype,
        pubversion=_pubversion(stats),
        samples=samples,
    )


def split_records(path: str, data: bytes) -> Iterator[bytes]:
    """Split the bytes of a miniSEED file into its records, in file order."""
    buf = io.BytesIO(data)
    offset = 0
    while offset < len(data):
        try:
            info = get_record_information(buf, offset=offset)
        except Exception as e:  # obspy raises format-specific errors
            raise DecodeError(path, e) from e

        reclen = info.get("record_length")
        if not reclen or offset + reclen > len(data):
            raise DecodeError(path, f"invalid record length at offset {offset}")

        yield data[offset:offset + reclen]
        offset += reclen


class ObspyMiniseedReader:
    """Concrete RecordReader backed by obspy.read(format="MSEED").

    Each miniSEED record is decoded on its own and handed over as one
    DecodedRecord; joining records is left to the RecordMerger.
    """

    def __init__(self, unpack_data: bool = True):
        self.unpack_data = unpack_data

    def read(self, path: str) -> Iterator[DecodedRecord]:
        try:
            data = Path(path).read_bytes()
        except OSError as e:
            raise DecodeError(path, e) from e

        count = 0
        for chunk in split_records(path, data):
            try:
                stream = obspy.read(
                    io.BytesIO(chunk), format="MSEED", headonly=not self.unpack_data
                )
            except Exception as e:  # obspy raises format-specific errors
                raise DecodeError(path, e) from e

            for trace in stream:
                if trace.stats.npts == 0:
                    continue
                try:
                    yield trace_to_record(trace, unpack_data=self.unpack_data)
                except ValueError as e:
                    raise DecodeError(path, e) from e
            count += 1

        logger.debug("Read %d records from %s", count, path)
