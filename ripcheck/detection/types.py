"""Dataclasses shared between the detectors and the reporters."""

from __future__ import annotations

import enum
from dataclasses import dataclass


class EventKind(str, enum.Enum):
    POP = "pop"
    DROP = "drop"
    DUPES = "dupes"


@dataclass(frozen=True)
class Event:
    kind: EventKind
    channel: int
    sample: int  # newest sample in the window when the event fired
    first_sample: int
    last_sample: int

    @property
    def run_length(self) -> int:
        return self.last_sample - self.first_sample + 1
