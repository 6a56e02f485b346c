# esynclist/core/digest.py
"""Content fingerprints of sample buffers (MD5, as the SYNC format expects)."""
from __future__ import annotations

import hashlib

import numpy as np


def segment_digest(samples: np.ndarray | None) -> bytes | None:
    """MD5 of the raw native-encoding sample bytes, None without samples."""
    if samples is None:
        return None
    return hashlib.md5(np.ascontiguousarray(samples).tobytes(), usedforsecurity=False).digest()


def hexdigest(samples: np.ndarray | None) -> str:
    """Lowercase hex form of segment_digest(), empty without samples."""
    digest = segment_digest(samples)
    return "" if digest is None else digest.hex()
