# esynclist/core/nstime.py
"""
Nanosecond time helpers.

All instants are plain ints: nanoseconds since 1970-01-01T00:00:00Z.
Calendar arithmetic is delegated to obspy.UTCDateTime.
"""
from __future__ import annotations

import calendar
import re
from datetime import date, datetime

from obspy import UTCDateTime

from .exceptions import InvalidTimeString

NSTMODULUS = 1_000_000_000

# YYYY[,DDD,HH,MM,SS,FFFFFFFFF] with any of ",:." as delimiter
_SEED_TIME_RE = re.compile(
    r"^(?P<year>\d{4})"
    r"(?:[,:.](?P<doy>\d{1,3})"
    r"(?:[,:.](?P<hour>\d{1,2})"
    r"(?:[,:.](?P<minute>\d{1,2})"
    r"(?:[,:.](?P<second>\d{1,2})"
    r"(?:[,:.](?P<frac>\d{1,9}))?)?)?)?)?$"
)


def parse_time(text: str) -> int:
    """Parse a time string into nanoseconds since the epoch.

    Accepts the SEED ordinal form ``YYYY[,DDD,HH,MM,SS,FFFFFFFFF]`` and
    anything ``obspy.UTCDateTime`` understands (ISO 8601 month-day or
    ordinal dates, for example).
    """
    if not isinstance(text, str) or not text.strip():
        raise InvalidTimeString(f"Empty time string: {text!r}")

    text = text.strip()
    m = _SEED_TIME_RE.match(text)
    if m:
        return _seed_fields_to_ns(text, m)

    try:
        return UTCDateTime(text).ns
    except (TypeError, ValueError) as e:
        raise InvalidTimeString(f"Cannot parse time string: {text!r}") from e


def _seed_fields_to_ns(text: str, m: re.Match) -> int:
    fields = {k: int(v) for k, v in m.groupdict().items() if v is not None and k != "frac"}
    frac = m.group("frac") or ""
    frac_ns = int(frac.ljust(9, "0")) if frac else 0

    year = fields["year"]
    days = 366 if calendar.isleap(year) else 365
    if not (
        1 <= fields.get("doy", 1) <= days
        and fields.get("hour", 0) < 24
        and fields.get("minute", 0) < 60
        and fields.get("second", 0) < 60
    ):
        raise InvalidTimeString(f"Time value out of range: {text!r}")

    try:
        base = UTCDateTime(
            year=fields["year"],
            julday=fields.get("doy", 1),
            hour=fields.get("hour", 0),
            minute=fields.get("minute", 0),
            second=fields.get("second", 0),
        )
    except (TypeError, ValueError) as e:
        raise InvalidTimeString(f"Cannot parse time string: {text!r}") from e

    return base.ns + frac_ns


def format_time(ns: int) -> str:
    """Format as ``YYYY,DDD,HH:MM:SS.ffffff``.

    Nine fractional digits are used only when the instant has
    sub-microsecond content.
    """
    seconds, frac = divmod(int(ns), NSTMODULUS)
    t = UTCDateTime(ns=seconds * NSTMODULUS)
    if frac % 1000:
        subsec = f"{frac:09d}"
    else:
        subsec = f"{frac // 1000:06d}"
    return (
        f"{t.year:04d},{t.julday:03d},"
        f"{t.hour:02d}:{t.minute:02d}:{t.second:02d}.{subsec}"
    )


def yearday(today: date | None = None) -> str:
    """Local date as ``YYYY,DDD``."""
    if today is None:
        today = datetime.now().date()
    return f"{today.year:04d},{today.timetuple().tm_yday:03d}"
