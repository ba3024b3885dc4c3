"""Forward every callback to several reporters, in order."""

from __future__ import annotations

from typing import TYPE_CHECKING, List

from ripcheck.detection.types import Event
from ripcheck.errors import ErrorKind
from ripcheck.report.base import Reporter

if TYPE_CHECKING:  # pragma: no cover - type hint only
    from ripcheck.scan.context import ScanContext


class FanoutReporter(Reporter):
    def __init__(self, *reporters: Reporter):
        self.reporters: List[Reporter] = list(reporters)

    def begin(self, context: "ScanContext") -> None:
        for reporter in self.reporters:
            reporter.begin(context)

    def sample_data(self, context: "ScanContext", data_size: int) -> None:
        for reporter in self.reporters:
            reporter.sample_data(context, data_size)

    def dispatch(self, context: "ScanContext", event: Event) -> None:
        for reporter in self.reporters:
            reporter.dispatch(context, event)

    def possible_pop(self, context: "ScanContext", channel: int, sample: int) -> None:
        for reporter in self.reporters:
            reporter.possible_pop(context, channel, sample)

    def possible_drop(self, context: "ScanContext", channel: int, sample: int, dropped_sample: int) -> None:
        for reporter in self.reporters:
            reporter.possible_drop(context, channel, sample, dropped_sample)

    def dupes(self, context: "ScanContext", channel: int, sample: int) -> None:
        for reporter in self.reporters:
            reporter.dupes(context, channel, sample)

    def complete(self, context: "ScanContext") -> None:
        for reporter in self.reporters:
            reporter.complete(context)

    def error(self, context: "ScanContext", error_kind: ErrorKind, message: str) -> None:
        for reporter in self.reporters:
            reporter.error(context, error_kind, message)

    def warning(self, context: "ScanContext", message: str) -> None:
        for reporter in self.reporters:
            reporter.warning(context, message)

    def close(self) -> None:
        for reporter in self.reporters:
            reporter.close()
