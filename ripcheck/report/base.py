"""Reporting interface the scan loop calls into.

Reporters get the ScanContext read-only: they may inspect the format, the
resolved limits, the window and the per-channel locations, but must not
change any of them.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from ripcheck.detection.types import Event, EventKind
from ripcheck.errors import ErrorKind

if TYPE_CHECKING:  # pragma: no cover - type hint only
    from ripcheck.scan.context import ScanContext


class Reporter:
    """Base reporter; every callback defaults to doing nothing."""

    def begin(self, context: "ScanContext") -> None:
        """Header and format record have been read; limits are resolved."""

    def sample_data(self, context: "ScanContext", data_size: int) -> None:
        """The data chunk was found; scanning is about to start."""

    def possible_pop(self, context: "ScanContext", channel: int, sample: int) -> None:
        """A pop at ``context.pop_locations[channel]``; ``sample`` is the newest sample in the window."""

    def possible_drop(self, context: "ScanContext", channel: int, sample: int, dropped_sample: int) -> None:
        """A dropped sample at ``dropped_sample``."""

    def dupes(self, context: "ScanContext", channel: int, sample: int) -> None:
        """A run of duplicates starting at ``context.dupe_locations[channel]`` and ending at ``sample - 1``."""

    def complete(self, context: "ScanContext") -> None:
        """The file was scanned without a fatal error."""

    def error(self, context: "ScanContext", error_kind: ErrorKind, message: str) -> None:
        """The scan of this file was aborted."""

    def warning(self, context: "ScanContext", message: str) -> None:
        """Something is off with the file but scanning continues."""

    def dispatch(self, context: "ScanContext", event: Event) -> None:
        """Route an event to the matching callback."""
        if event.kind is EventKind.POP:
            self.possible_pop(context, event.channel, event.sample)
        elif event.kind is EventKind.DROP:
            self.possible_drop(context, event.channel, event.sample, event.first_sample)
        else:
            self.dupes(context, event.channel, event.sample)

    def close(self) -> None:
        """Release whatever the reporter holds open."""
