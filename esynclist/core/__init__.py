# esynclist/core/__init__.py
"""
Core segment-curation objects for esynclist.

This module defines the decoder-agnostic data model and operations:
- TraceSegment: regularly-sampled run with an owned sample buffer
- TraceID / TraceList: identity buckets and the ordered collection
- trimming, ESYNC listing, all-pairs comparison and record selection

The core layer is independent from miniSEED decoding.
"""

from .segment import TraceSegment, SAMPLE_DTYPES, sample_size
from .tracelist import TraceID, TraceList
from .config import (
    DERIVE_TOLERANCE,
    EsyncConfig,
    SelectionCriteria,
    ToleranceConfig,
    contains_pattern,
)
from .globmatch import globmatch
from .tolerance import effective_tolerance_ns, sample_period_ns
from .trim import trim_segment, trim_tracelist
from .digest import hexdigest, segment_digest
from .listing import EsyncRecord, build_listing, quality_code, write_listing
from .compare import ComparisonResult, Outcome, compare_tracelist, format_result
from .selection import admit
from .nstime import NSTMODULUS, format_time, parse_time
from .sid import nslc_to_sid, sid_to_nslc
from .exceptions import (
    CoreError,
    InvalidSegment,
    InvalidTraceList,
    TraceNotFound,
    ConfigError,
    InvalidTimeString,
    DecodeError,
    TrimError,
)


__all__ = [
    # data model
    "TraceSegment",
    "SAMPLE_DTYPES",
    "sample_size",
    "TraceID",
    "TraceList",

    # configuration
    "DERIVE_TOLERANCE",
    "EsyncConfig",
    "SelectionCriteria",
    "ToleranceConfig",
    "contains_pattern",

    # operations
    "globmatch",
    "effective_tolerance_ns",
    "sample_period_ns",
    "trim_segment",
    "trim_tracelist",
    "hexdigest",
    "segment_digest",
    "EsyncRecord",
    "build_listing",
    "quality_code",
    "write_listing",
    "ComparisonResult",
    "Outcome",
    "compare_tracelist",
    "format_result",
    "admit",

    # time and identifiers
    "NSTMODULUS",
    "format_time",
    "parse_time",
    "nslc_to_sid",
    "sid_to_nslc",

    # exceptions
    "CoreError",
    "InvalidSegment",
    "InvalidTraceList",
    "TraceNotFound",
    "ConfigError",
    "InvalidTimeString",
    "DecodeError",
    "TrimError",
]
