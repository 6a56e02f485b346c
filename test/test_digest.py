# test/test_digest.py
import hashlib

import numpy as np

from esynclist.core import hexdigest, segment_digest


def test_digest_is_md5_of_native_bytes():
    data = np.arange(10, dtype=np.int32)
    assert segment_digest(data) == hashlib.md5(data.tobytes()).digest()
    assert hexdigest(data) == hashlib.md5(data.tobytes()).hexdigest()


def test_digest_is_deterministic_and_fixed_width():
    data = np.linspace(0.0, 1.0, 50, dtype=np.float64)
    h1 = hexdigest(data)
    h2 = hexdigest(data.copy())
    assert h1 == h2
    assert len(h1) == 32
    assert h1 == h1.lower()


def test_digest_changes_with_a_single_byte():
    a = np.arange(100, dtype=np.int32)
    b = a.copy()
    b[57] += 1
    assert hexdigest(a) != hexdigest(b)


def test_digest_depends_on_encoding_not_values():
    ints = np.arange(5, dtype=np.int32)
    floats = ints.astype(np.float32)
    assert hexdigest(ints) != hexdigest(floats)


def test_no_samples_no_digest():
    assert segment_digest(None) is None
    assert hexdigest(None) == ""
