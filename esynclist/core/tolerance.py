# esynclist/core/tolerance.py
from __future__ import annotations

from .config import DERIVE_TOLERANCE
from .nstime import NSTMODULUS


def sample_period_ns(samprate: float) -> int:
    """Nominal sample period in nanoseconds, 0 when there is no fixed rate."""
    return int(NSTMODULUS / samprate) if samprate > 0 else 0


def effective_tolerance_ns(samprate: float, time_tolerance: float | None) -> int:
    """
    Time tolerance in nanoseconds for a segment sampled at `samprate`.

    DERIVE_TOLERANCE yields half the sample period; negative or unset
    values yield no tolerance.
    """
    if time_tolerance is None:
        return 0
    if time_tolerance == DERIVE_TOLERANCE:
        return int(0.5 * sample_period_ns(samprate))
    if time_tolerance >= 0:
        return int(time_tolerance * NSTMODULUS)
    return 0
