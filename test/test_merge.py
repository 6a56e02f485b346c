# test/test_merge.py
import numpy as np
import pytest

from esynclist.core import NSTMODULUS, ToleranceConfig, TraceList
from esynclist.io.merge import TraceListMerger, rates_tolerable
from esynclist.io.mseed_reader import DecodedRecord

S = NSTMODULUS
T0 = 1_262_304_000 * S
SID = "FDSN:IU_ANMO_00_B_H_Z"
UNSET = ToleranceConfig()


def _rec(start_s, n=5, rate=1.0, first=0, sampletype="i", pubversion=1, sid=SID, data=True):
    start = T0 + int(start_s * S)
    samples = np.arange(first, first + n, dtype=np.int32) if data else None
    if data and sampletype == "d":
        samples = samples.astype(np.float64)
    return DecodedRecord(
        sid=sid,
        start_ns=start,
        end_ns=start + int((n - 1) * S / rate),
        samprate=rate,
        samplecnt=n,
        sampletype=sampletype,
        pubversion=pubversion,
        samples=samples,
    )


@pytest.fixture
def merger():
    return TraceListMerger()


def test_first_record_creates_traceid_and_segment(merger):
    tl = TraceList()
    seg = merger.add(tl, _rec(0), UNSET)

    assert len(tl) == 1
    assert tl.numsegments == 1
    assert tl[SID].pubversion == 1
    assert seg.start_ns == T0
    assert seg.samplecnt == 5


def test_contiguous_record_is_appended(merger):
    tl = TraceList()
    merger.add(tl, _rec(0, first=0), UNSET)
    seg = merger.add(tl, _rec(5, first=5), UNSET)

    assert tl.numsegments == 1
    assert seg.start_ns == T0
    assert seg.end_ns == T0 + 9 * S
    assert seg.samplecnt == 10
    np.testing.assert_array_equal(seg.samples, np.arange(10))


def test_preceding_record_is_prepended(merger):
    tl = TraceList()
    merger.add(tl, _rec(5, first=5), UNSET)
    seg = merger.add(tl, _rec(0, first=0), UNSET)

    assert tl.numsegments == 1
    assert seg.start_ns == T0
    np.testing.assert_array_equal(seg.samples, np.arange(10))


def test_gap_starts_new_segment_in_time_order(merger):
    tl = TraceList()
    merger.add(tl, _rec(20), UNSET)
    merger.add(tl, _rec(0), UNSET)

    starts = [seg.start_ns for seg in tl[SID]]
    assert starts == [T0, T0 + 20 * S]


def test_record_bridging_two_segments_joins_them(merger):
    tl = TraceList()
    merger.add(tl, _rec(0, first=0), UNSET)
    merger.add(tl, _rec(10, first=10), UNSET)
    assert tl.numsegments == 2

    seg = merger.add(tl, _rec(5, first=5), UNSET)

    assert tl.numsegments == 1
    assert seg.start_ns == T0
    assert seg.end_ns == T0 + 14 * S
    assert seg.samplecnt == 15
    np.testing.assert_array_equal(seg.samples, np.arange(15))


def test_jitter_within_derived_half_period_is_merged(merger):
    tl = TraceList()
    merger.add(tl, _rec(0), UNSET)
    merger.add(tl, _rec(5.4), UNSET)
    assert tl.numsegments == 1


def test_explicit_time_tolerance(merger):
    tl = TraceList()
    strict = ToleranceConfig(time=0.0)
    merger.add(tl, _rec(0), strict)
    merger.add(tl, _rec(5.1), strict)
    assert tl.numsegments == 2

    tl = TraceList()
    loose = ToleranceConfig(time=0.2)
    merger.add(tl, _rec(0), loose)
    merger.add(tl, _rec(5.1), loose)
    assert tl.numsegments == 1


def test_sample_type_mismatch_is_not_merged(merger):
    tl = TraceList()
    merger.add(tl, _rec(0), UNSET)
    merger.add(tl, _rec(5, sampletype="d"), UNSET)
    assert tl.numsegments == 2


def test_rate_mismatch_is_not_merged(merger):
    tl = TraceList()
    merger.add(tl, _rec(0, rate=1.0), UNSET)
    merger.add(tl, _rec(5, rate=2.0), UNSET)
    assert tl.numsegments == 2


def test_versions_are_split_by_default(merger):
    tl = TraceList()
    merger.add(tl, _rec(0, pubversion=1), UNSET)
    merger.add(tl, _rec(5, pubversion=2), UNSET)

    assert len(tl) == 2
    assert [tid.pubversion for tid in tl] == [1, 2]


def test_versions_combined_keep_highest():
    merger = TraceListMerger(split_version=False)
    tl = TraceList()
    merger.add(tl, _rec(0, pubversion=1), UNSET)
    merger.add(tl, _rec(5, pubversion=3), UNSET)

    assert len(tl) == 1
    assert tl[SID].pubversion == 3
    assert tl.numsegments == 1


def test_segment_owns_its_samples(merger):
    rec = _rec(0)
    tl = TraceList()
    seg = merger.add(tl, rec, UNSET)
    rec.samples[0] = 99
    assert seg.samples[0] == 0


def test_records_without_samples_merge_by_header(merger):
    tl = TraceList()
    merger.add(tl, _rec(0, data=False), UNSET)
    seg = merger.add(tl, _rec(5, data=False), UNSET)

    assert tl.numsegments == 1
    assert seg.samples is None
    assert seg.samplecnt == 10


def test_zero_rate_records_never_merge(merger):
    tl = TraceList()
    rec = DecodedRecord(sid=SID, start_ns=T0, end_ns=T0, samprate=0.0,
                        samplecnt=1, sampletype="a", samples=np.array([b"x"], dtype="S1"))
    merger.add(tl, rec, UNSET)
    merger.add(tl, rec, UNSET)
    assert tl.numsegments == 2


@pytest.mark.parametrize(
    "r1, r2, tol, expected",
    [
        (100.0, 100.0, None, True),
        (100.0, 100.005, None, True),
        (100.0, 101.0, None, False),
        (100.0, 0.0, None, False),
        (100.0, 100.5, 1.0, True),
        (100.0, 102.0, 1.0, False),
    ],
)
def test_rates_tolerable(r1, r2, tol, expected):
    assert rates_tolerable(r1, r2, tol) is expected
