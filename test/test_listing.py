# test/test_listing.py
import hashlib
import io
from datetime import date

import numpy as np

from esynclist.core import (
    NSTMODULUS,
    EsyncRecord,
    TraceID,
    TraceList,
    TraceSegment,
    build_listing,
    quality_code,
    write_listing,
)

TODAY = date(2024, 2, 3)  # day 034
S = NSTMODULUS
T0 = 1_262_304_000 * S  # 2010-01-01T00:00:00


def _seg(start, n=4, rate=1.0, samples=True):
    data = np.arange(n, dtype=np.int32) if samples else None
    return TraceSegment(start_ns=start, end_ns=start + int((n - 1) * S / rate),
                        samprate=rate, samplecnt=n, sampletype="i", samples=data)


def test_empty_tracelist_yields_only_header():
    assert build_listing(TraceList(), today=TODAY) == ["DCC|2024,034"]


def test_header_uses_dcc_label():
    assert build_listing(TraceList(), "IRISDMC", today=TODAY)[0] == "IRISDMC|2024,034"


def test_segment_line_layout():
    seg = _seg(T0 + S // 2, n=4, rate=1.0)
    tl = TraceList([TraceID(sid="FDSN:IU_ANMO_00_B_H_Z", pubversion=1, segments=[seg])])

    lines = build_listing(tl, "DMC", today=TODAY)
    assert len(lines) == 2

    digest = hashlib.md5(np.arange(4, dtype=np.int32).tobytes()).hexdigest()
    assert lines[1] == (
        "IU|ANMO|00|BHZ|2010,001,00:00:00.500000|2010,001,00:00:03.500000"
        f"||1|4|||D|{digest}|||2024,034"
    )
    fields = lines[1].split("|")
    assert len(fields) == 16


def test_fields_without_samples_or_version():
    seg = _seg(T0, n=10, rate=40.0, samples=False)
    tl = TraceList([TraceID(sid="FDSN:XX_STA__L_H_Z", pubversion=0, segments=[seg])])

    fields = build_listing(tl, today=TODAY)[1].split("|")
    assert fields[:4] == ["XX", "STA", "", "LHZ"]
    assert fields[7] == "40"
    assert fields[8] == "10"
    assert fields[11] == ""  # no publication version
    assert fields[12] == ""  # no samples, no digest
    assert fields[15] == "2024,034"


def test_sample_rate_general_format():
    for rate, text in [(20.0, "20"), (0.1, "0.1"), (1.0 / 3.0, "0.3333333333")]:
        seg = _seg(T0, n=2, rate=rate)
        tl = TraceList([TraceID(sid="FDSN:XX_STA__B_H_Z", pubversion=1, segments=[seg])])
        assert build_listing(tl, today=TODAY)[1].split("|")[7] == text


def test_quality_codes():
    assert quality_code(1) == "D"
    assert quality_code(2) == "R"
    assert quality_code(3) == "Q"
    assert quality_code(4) == "M"
    assert quality_code(7) == "7"
    assert quality_code(0) == ""
    assert quality_code(None) == ""


def test_lines_follow_identity_then_time_order():
    tl = TraceList([
        TraceID(sid="FDSN:XX_B__B_H_Z", pubversion=1, segments=[_seg(T0)]),
        TraceID(sid="FDSN:XX_A__B_H_Z", pubversion=1,
                segments=[_seg(T0 + 100 * S), _seg(T0)]),
    ])
    lines = build_listing(tl, today=TODAY)[1:]
    keys = [(f[1], f[4]) for f in (line.split("|") for line in lines)]
    assert keys == [
        ("A", "2010,001,00:00:00.000000"),
        ("A", "2010,001,00:01:40.000000"),
        ("B", "2010,001,00:00:00.000000"),
    ]


def test_record_fields_truncate_digest():
    rec = EsyncRecord(
        network="XX", station="STA", location="", channel="BHZ",
        start="s", end="e", samprate=1.0, samplecnt=1, quality="D",
        digest="a" * 40, modified="2024,034",
    )
    assert rec.fields()[12] == "a" * 32


def test_write_listing_to_stream():
    tl = TraceList([TraceID(sid="FDSN:XX_STA__B_H_Z", pubversion=2, segments=[_seg(T0)])])
    out = io.StringIO()
    count = write_listing(tl, out, "DMC", today=TODAY)

    assert count == 1
    text = out.getvalue()
    assert text.startswith("DMC|2024,034\n")
    assert text.endswith("|||2024,034\n")
    assert "|R|" in text
