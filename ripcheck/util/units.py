"""Time and volume values with units, and their conversion to the sample domain.

Values are parsed from user input once and resolved against a file's format
exactly once per scan, before the first sample is decoded.
"""

from __future__ import annotations

import argparse
import enum
import math
import re
from dataclasses import dataclass
from typing import Any, Union

from ripcheck.wave.container import FormatDescriptor

_NUMBER_RE = re.compile(r"^\s*(\d+(?:\.\d*)?|\.\d+)(?:[eE]([+-]?\d+))?\s*(.*?)\s*$")


class TimeUnit(str, enum.Enum):
    SAMPLES = "samples"
    SECONDS = "seconds"
    MILLISECONDS = "milliseconds"


class VolumeUnit(str, enum.Enum):
    RATIO = "ratio"
    ABSOLUTE = "absolute"


_TIME_SUFFIXES = {
    "": TimeUnit.SAMPLES,
    "samp": TimeUnit.SAMPLES,
    "sample": TimeUnit.SAMPLES,
    "samples": TimeUnit.SAMPLES,
    "ms": TimeUnit.MILLISECONDS,
    "msec": TimeUnit.MILLISECONDS,
    "s": TimeUnit.SECONDS,
    "sec": TimeUnit.SECONDS,
}


@dataclass(frozen=True)
class TimeValue:
    magnitude: Union[int, float]
    unit: TimeUnit = TimeUnit.SAMPLES

    def __str__(self) -> str:
        suffix = {TimeUnit.SAMPLES: "", TimeUnit.SECONDS: "s", TimeUnit.MILLISECONDS: "ms"}[self.unit]
        return f"{self.magnitude:g}{suffix}"


@dataclass(frozen=True)
class Volume:
    """Threshold given either as a share of full scale or as a raw sample value."""

    unit: VolumeUnit
    ratio: float = 0.0
    absolute: int = 0

    @classmethod
    def from_ratio(cls, ratio: float) -> "Volume":
        return cls(VolumeUnit.RATIO, ratio=float(ratio))

    @classmethod
    def from_absolute(cls, absolute: int) -> "Volume":
        return cls(VolumeUnit.ABSOLUTE, absolute=int(absolute))

    def __str__(self) -> str:
        if self.unit is VolumeUnit.RATIO:
            return f"{self.ratio * 100:g}%"
        return str(self.absolute)


def _split_number(spec: Any, what: str):
    text = str(spec)
    match = _NUMBER_RE.match(text)
    if not match:
        raise argparse.ArgumentTypeError(f"Invalid {what} '{spec}'")
    mantissa, exponent, suffix = match.groups()
    is_integral = "." not in mantissa and exponent is None
    literal = mantissa + (f"e{exponent}" if exponent is not None else "")
    value: Union[int, float] = int(mantissa) if is_integral else float(literal)
    return value, is_integral, suffix


def parse_time(spec: Any) -> TimeValue:
    """Parse strings like '400', '250ms', '5s', '1.5 sec' into a TimeValue."""

    if isinstance(spec, TimeValue):
        return spec
    if isinstance(spec, int) and spec >= 0:
        return TimeValue(spec, TimeUnit.SAMPLES)
    value, is_integral, suffix = _split_number(spec, "time")
    unit = _TIME_SUFFIXES.get(suffix.lower())
    if unit is None:
        raise argparse.ArgumentTypeError(f"Unsupported time unit '{suffix}'")
    if unit is TimeUnit.SAMPLES and not is_integral:
        if not float(value).is_integer():
            raise argparse.ArgumentTypeError(f"Sample counts must be whole numbers: '{spec}'")
        value = int(value)
    return TimeValue(value, unit)


def parse_volume(spec: Any) -> Volume:
    """Parse '33%' or '0.33' as a ratio of full scale and '1200' as an absolute value."""

    if isinstance(spec, Volume):
        return spec
    value, is_integral, suffix = _split_number(spec, "volume")
    if suffix == "%":
        return Volume.from_ratio(float(value) / 100.0)
    if suffix:
        raise argparse.ArgumentTypeError(f"Invalid volume '{spec}'")
    if is_integral:
        return Volume.from_absolute(int(value))
    return Volume.from_ratio(float(value))


def to_samples(time: TimeValue, fmt: FormatDescriptor) -> int:
    """Convert a time value into a sample count for this format."""
    magnitude = time.magnitude
    if time.unit is TimeUnit.SAMPLES:
        return int(magnitude)
    if time.unit is TimeUnit.SECONDS:
        if isinstance(magnitude, int):
            return magnitude * fmt.sample_rate
        return int(math.floor(magnitude * fmt.sample_rate + 0.5))
    if isinstance(magnitude, int):
        return magnitude * fmt.sample_rate // 1000
    return int(math.floor(magnitude * fmt.sample_rate / 1000.0))


def to_absolute(volume: Volume, fmt: FormatDescriptor) -> int:
    """Convert a threshold into the sample domain; ratios above 1.0 are kept as-is."""
    if volume.unit is VolumeUnit.RATIO:
        return int(math.floor(volume.ratio * fmt.max_value))
    return volume.absolute
