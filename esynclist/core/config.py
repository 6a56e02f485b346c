# esynclist/core/config.py
from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Iterable

from .exceptions import ConfigError
from .nstime import parse_time

# Time tolerance sentinel: use half of the nominal sample period
DERIVE_TOLERANCE = -1.0

DEFAULT_DCC_LABEL = "DCC"


def contains_pattern(pattern: str | None) -> str | None:
    """Wrap a glob pattern with `*` so it matches anywhere in the identifier."""
    if pattern is None:
        return None
    return f"*{pattern}*"


@dataclass(frozen=True, slots=True)
class ToleranceConfig:
    """
    Tolerances applied while merging records and trimming segments.

    - time: seconds; DERIVE_TOLERANCE (-1) means half a sample period,
      None means not configured
    - samprate: absolute sample rate difference; None means the default
      relative test is used while merging
    """
    time: float | None = None
    samprate: float | None = None

    def __post_init__(self) -> None:
        for name in ("time", "samprate"):
            value = getattr(self, name)
            if value is None:
                continue
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ConfigError(f"ToleranceConfig.{name} must be a number or None.")
            if not math.isfinite(value):
                raise ConfigError(f"ToleranceConfig.{name} must be finite.")
            object.__setattr__(self, name, float(value))

    @property
    def derives_time(self) -> bool:
        return self.time == DERIVE_TOLERANCE


@dataclass(frozen=True, slots=True)
class SelectionCriteria:
    """
    Record admission criteria.

    - start_ns / end_ns: optional time window, ns since the epoch
    - match / reject: optional glob patterns applied to the source identifier
    """
    start_ns: int | None = None
    end_ns: int | None = None
    match: str | None = None
    reject: str | None = None

    def __post_init__(self) -> None:
        if (
            self.start_ns is not None
            and self.end_ns is not None
            and self.start_ns > self.end_ns
        ):
            raise ConfigError("Selection start time must not be after end time.")
        for name in ("match", "reject"):
            value = getattr(self, name)
            if value is not None and not isinstance(value, str):
                raise ConfigError(f"SelectionCriteria.{name} must be a string or None.")

    @property
    def has_window(self) -> bool:
        return self.start_ns is not None or self.end_ns is not None

    @property
    def has_patterns(self) -> bool:
        return self.match is not None or self.reject is not None


@dataclass(frozen=True, slots=True)
class EsyncConfig:
    """Immutable run configuration, built once at startup."""
    files: tuple[str, ...] = ()
    dcc_label: str | None = None
    selection: SelectionCriteria = field(default_factory=SelectionCriteria)
    tolerance: ToleranceConfig = field(default_factory=ToleranceConfig)
    verbose: int = 0
    compare: bool = False
    unpack_data: bool = True

    def __post_init__(self) -> None:
        object.__setattr__(self, "files", tuple(self.files))
        if not isinstance(self.selection, SelectionCriteria):
            raise ConfigError("EsyncConfig.selection must be a SelectionCriteria instance.")
        if not isinstance(self.tolerance, ToleranceConfig):
            raise ConfigError("EsyncConfig.tolerance must be a ToleranceConfig instance.")

    @property
    def label(self) -> str:
        return self.dcc_label if self.dcc_label else DEFAULT_DCC_LABEL

    @classmethod
    def from_args(cls, args: Any, files: Iterable[str]) -> "EsyncConfig":
        """Build from an argparse namespace and the expanded input file list."""
        files = tuple(files)
        if not files:
            raise ConfigError("No input files were specified")

        start_ns = parse_time(args.starttime) if args.starttime is not None else None
        end_ns = parse_time(args.endtime) if args.endtime is not None else None

        return cls(
            files=files,
            dcc_label=args.dcc,
            selection=SelectionCriteria(
                start_ns=start_ns,
                end_ns=end_ns,
                match=contains_pattern(args.match),
                reject=contains_pattern(args.reject),
            ),
            tolerance=ToleranceConfig(time=args.timetol, samprate=args.sampratetol),
            verbose=args.verbose or 0,
            compare=args.compare,
            unpack_data=not args.no_data,
        )
