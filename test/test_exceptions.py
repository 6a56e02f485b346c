# test/test_exceptions.py
import pytest

from esynclist.core import (
    CoreError,
    InvalidSegment,
    InvalidTraceList,
    TraceNotFound,
    ConfigError,
    InvalidTimeString,
    DecodeError,
    TrimError,
)


def test_exception_inheritance_validation():
    assert issubclass(InvalidSegment, CoreError)
    assert issubclass(InvalidTraceList, CoreError)
    assert issubclass(ConfigError, CoreError)
    assert issubclass(TrimError, CoreError)


def test_time_string_errors_are_config_errors():
    assert issubclass(InvalidTimeString, ConfigError)


def test_exception_inheritance_lookup_keyerror():
    assert issubclass(TraceNotFound, KeyError)
    assert issubclass(TraceNotFound, CoreError)


def test_lookup_errors_can_be_raised_and_caught_as_keyerror():
    with pytest.raises(KeyError):
        raise TraceNotFound("FDSN:IU_ANMO_00_B_H_Z")


def test_decode_error_carries_path_and_cause():
    cause = OSError("truncated record")
    err = DecodeError("day.mseed", cause)
    assert err.path == "day.mseed"
    assert err.cause is cause
    assert str(err) == "Cannot read day.mseed: truncated record"
