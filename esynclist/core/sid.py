# esynclist/core/sid.py
"""FDSN source identifier helpers (``FDSN:NET_STA_LOC_B_S_SS``)."""
from __future__ import annotations

from .exceptions import InvalidTraceList

SID_PREFIX = "FDSN:"


def nslc_to_sid(network: str, station: str, location: str, channel: str) -> str:
    """Build a source identifier; 3-character SEED channels become ``B_S_SS``."""
    if len(channel) == 3:
        channel = "_".join(channel)
    return f"{SID_PREFIX}{network}_{station}_{location}_{channel}"


def sid_to_nslc(sid: str) -> tuple[str, str, str, str]:
    """Split a source identifier into (network, station, location, channel)."""
    if not sid.startswith(SID_PREFIX):
        raise InvalidTraceList(f"Unrecognized source identifier: {sid!r}")

    parts = sid[len(SID_PREFIX):].split("_", 3)
    if len(parts) != 4:
        raise InvalidTraceList(f"Unrecognized source identifier: {sid!r}")

    network, station, location, channel = parts

    # Collapse band, source and subsource codes when all are single characters
    codes = channel.split("_")
    if len(codes) == 3 and all(len(c) == 1 for c in codes):
        channel = "".join(codes)

    return network, station, location, channel
