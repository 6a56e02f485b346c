# esynclist/core/segment.py
from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np

from .exceptions import InvalidSegment

# Sample type tag -> native numpy dtype of the decoded buffer
SAMPLE_DTYPES: dict[str, np.dtype] = {
    "i": np.dtype(np.int32),
    "f": np.dtype(np.float32),
    "d": np.dtype(np.float64),
    "a": np.dtype("S1"),
}

NUMERIC_TYPES = frozenset({"i", "f", "d"})


def sample_size(sampletype: str) -> int:
    """Element size in bytes for a sample type, 0 when unknown."""
    dtype = SAMPLE_DTYPES.get(sampletype)
    return 0 if dtype is None else dtype.itemsize


@dataclass(slots=True)
class TraceSegment:
    """
    A run of regularly-sampled values with one start/end time and one rate.

    - start_ns / end_ns: first and last sample time, ns since the epoch
    - samprate: nominal samples per second, 0 when there is no fixed rate
    - samplecnt: sample count reported by the record headers
    - sampletype: "i", "f", "d" or "a"
    - samples: decoded 1D buffer, or None when samples were not decoded

    Segments are mutable: trimming shrinks the buffer and moves the
    boundaries in place.
    """
    start_ns: int
    end_ns: int
    samprate: float = 0.0
    samplecnt: int = 0
    sampletype: str = "i"
    samples: np.ndarray | None = field(default=None, repr=False)

    def __post_init__(self) -> None:
        self.start_ns = int(self.start_ns)
        self.end_ns = int(self.end_ns)
        if self.start_ns > self.end_ns:
            raise InvalidSegment(
                f"start_ns ({self.start_ns}) must not be after end_ns ({self.end_ns})."
            )

        self.samprate = float(self.samprate)
        if not np.isfinite(self.samprate) or self.samprate < 0:
            raise InvalidSegment(f"samprate must be finite and >= 0, got {self.samprate}")

        if not isinstance(self.sampletype, str) or len(self.sampletype) != 1:
            raise InvalidSegment("sampletype must be a single character tag.")

        if self.samples is not None:
            self.samples = self._normalize(self.samples)
            if self.samplecnt == 0:
                self.samplecnt = int(self.samples.size)

        if self.samplecnt < 0:
            raise InvalidSegment("samplecnt must be >= 0.")
        self.samplecnt = int(self.samplecnt)

    def _normalize(self, samples) -> np.ndarray:
        v = np.asarray(samples)
        if v.ndim != 1:
            raise InvalidSegment(f"`samples` must be 1D, got shape {v.shape}")

        dtype = SAMPLE_DTYPES.get(self.sampletype)
        if dtype is None:
            return np.ascontiguousarray(v)

        if v.dtype.kind != dtype.kind or v.dtype.itemsize != dtype.itemsize:
            raise InvalidSegment(
                f"`samples` dtype {v.dtype} does not match sample type '{self.sampletype}'."
            )
        # Native byte order, contiguous: digests are computed over these bytes
        return np.ascontiguousarray(v, dtype=dtype)

    # ---- derived values ----
    @property
    def numsamples(self) -> int:
        """Number of decoded samples held in the buffer."""
        return 0 if self.samples is None else int(self.samples.size)

    @property
    def has_data(self) -> bool:
        return self.samples is not None

    @property
    def sample_size(self) -> int:
        if self.samples is not None:
            return int(self.samples.dtype.itemsize)
        return sample_size(self.sampletype)

    @property
    def is_numeric(self) -> bool:
        return self.sampletype in NUMERIC_TYPES

    def raw_bytes(self) -> bytes | None:
        """Raw native-encoding bytes of the sample buffer."""
        return None if self.samples is None else self.samples.tobytes()
