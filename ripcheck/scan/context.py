"""Scan settings (user-facing, with units) and the per-file run context."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from ripcheck import config
from ripcheck.detection.window import MIN_WINDOW_SIZE, SampleWindow
from ripcheck.util.units import TimeValue, Volume, parse_time, parse_volume, to_absolute, to_samples
from ripcheck.wave.container import FormatDescriptor, RiffHeader


def _default_max_time() -> Optional[TimeValue]:
    return parse_time(config.MAX_TIME) if config.MAX_TIME else None


@dataclass
class ScanSettings:
    """Parameters shared by every file of a run, before unit resolution."""

    max_time: Optional[TimeValue] = field(default_factory=_default_max_time)
    intro_length: TimeValue = field(default_factory=lambda: parse_time(config.INTRO_LENGTH))
    outro_length: TimeValue = field(default_factory=lambda: parse_time(config.OUTRO_LENGTH))
    pop_drop_dist: TimeValue = field(default_factory=lambda: parse_time(config.POP_DROP_DIST))
    pop_limit: Volume = field(default_factory=lambda: parse_volume(config.POP_LIMIT))
    drop_limit: Volume = field(default_factory=lambda: parse_volume(config.DROP_LIMIT))
    dupe_limit: Volume = field(default_factory=lambda: parse_volume(config.DUPE_LIMIT))
    min_dupes: int = config.MIN_DUPES
    max_bad_areas: Optional[int] = config.MAX_BAD_AREAS
    window_size: int = config.WINDOW_SIZE
    read_block_frames: int = config.READ_BLOCK_FRAMES

    def __post_init__(self) -> None:
        if self.window_size < MIN_WINDOW_SIZE:
            raise ValueError(f"window_size must be >= {MIN_WINDOW_SIZE}")
        if self.max_bad_areas is not None and self.max_bad_areas < 1:
            raise ValueError("max_bad_areas must be >= 1 or None")


class ScanContext:
    """Everything one file scan knows; written only by the scan loop.

    Reporters receive it read-only. Fields fill in as the scan proceeds:
    header and format after parsing, limits once the format is known, the
    window and per-channel state once the format has been validated.
    """

    def __init__(self, filename: str, settings: ScanSettings):
        self.filename = filename
        self.settings = settings
        self.header: Optional[RiffHeader] = None
        self.fmt: Optional[FormatDescriptor] = None

        self.pop_limit = 0
        self.drop_limit = 0
        self.dupe_limit = 0
        self.max_sample: Optional[int] = None
        self.intro_length = 0
        self.outro_length = 0
        self.pop_drop_dist = 0
        self.min_dupes = settings.min_dupes
        self.max_bad_areas = settings.max_bad_areas
        self.window_size = max(settings.window_size, MIN_WINDOW_SIZE)

        self.data_size: Optional[int] = None
        self.total_samples = 0
        self.window: Optional[SampleWindow] = None
        self.dupe_counts: List[int] = []
        self.pop_locations: List[int] = []
        self.dupe_locations: List[int] = []
        self.bad_areas = 0
        self.samples_scanned = 0
        self.stopped_early = False
        self.error: Optional[BaseException] = None

    def resolve(self, header: RiffHeader, fmt: FormatDescriptor) -> None:
        """Convert every unit-bearing setting into the sample domain of ``fmt``."""
        settings = self.settings
        self.header = header
        self.fmt = fmt
        self.pop_limit = to_absolute(settings.pop_limit, fmt)
        self.drop_limit = to_absolute(settings.drop_limit, fmt)
        self.dupe_limit = to_absolute(settings.dupe_limit, fmt)
        self.max_sample = to_samples(settings.max_time, fmt) if settings.max_time is not None else None
        self.intro_length = to_samples(settings.intro_length, fmt)
        self.outro_length = to_samples(settings.outro_length, fmt)
        self.pop_drop_dist = to_samples(settings.pop_drop_dist, fmt)

    def allocate(self) -> None:
        assert self.fmt is not None
        channels = self.fmt.channels
        self.window = SampleWindow(self.window_size, channels)
        self.dupe_counts = [0] * channels
        self.pop_locations = [0] * channels
        self.dupe_locations = [0] * channels

    def start_data(self, data_size: int) -> None:
        assert self.fmt is not None
        self.data_size = data_size
        self.total_samples = data_size // self.fmt.block_align

    @property
    def intro_end(self) -> int:
        return min(self.intro_length, self.total_samples)

    @property
    def outro_start(self) -> int:
        if self.total_samples > self.outro_length:
            return self.total_samples - self.outro_length
        return 0

    @property
    def scan_samples(self) -> int:
        """Number of frames the scan loop will evaluate."""
        if self.max_sample is None:
            return self.total_samples
        return min(self.max_sample, self.total_samples)

    @property
    def limit_reached(self) -> bool:
        return self.max_bad_areas is not None and self.bad_areas >= self.max_bad_areas

    @property
    def ok(self) -> bool:
        return self.error is None
