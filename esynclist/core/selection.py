# esynclist/core/selection.py
from __future__ import annotations

import logging

from .config import SelectionCriteria
from .globmatch import globmatch
from .nstime import format_time

logger = logging.getLogger(__name__)


def overlaps_window(start_ns: int, end_ns: int, selection: SelectionCriteria) -> bool:
    """True unless the span lies entirely before or after the window."""
    ws, we = selection.start_ns, selection.end_ns

    # Entirely before the window start, without spanning it
    if ws is not None and start_ns < ws and not (start_ns <= ws <= end_ns):
        return False

    # Entirely after the window end, without spanning it
    if we is not None and end_ns > we and not (start_ns <= we <= end_ns):
        return False

    return True


def admit(start_ns: int, end_ns: int, sid: str, selection: SelectionCriteria) -> bool:
    """Decide whether a decoded record enters the trace list."""
    if selection.has_window and not overlaps_window(start_ns, end_ns, selection):
        _log_skip("time", sid, start_ns)
        return False

    if selection.match is not None and not globmatch(sid, selection.match):
        _log_skip("match", sid, start_ns)
        return False

    if selection.reject is not None and globmatch(sid, selection.reject):
        _log_skip("reject", sid, start_ns)
        return False

    return True


def _log_skip(reason: str, sid: str, start_ns: int) -> None:
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug("Skipping (%s) %s, %s", reason, sid, format_time(start_ns))
