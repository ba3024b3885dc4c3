"""Reporter that keeps everything it is told, for tests and embedding."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, List, Optional, Tuple

from ripcheck.detection.types import Event, EventKind
from ripcheck.errors import ErrorKind
from ripcheck.report.base import Reporter

if TYPE_CHECKING:  # pragma: no cover - type hint only
    from ripcheck.scan.context import ScanContext


@dataclass
class RecordingReporter(Reporter):
    events: List[Event] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    errors: List[Tuple[ErrorKind, str]] = field(default_factory=list)
    begun: int = 0
    data_size: Optional[int] = None
    completed: int = 0

    def begin(self, context: "ScanContext") -> None:
        self.begun += 1

    def sample_data(self, context: "ScanContext", data_size: int) -> None:
        self.data_size = data_size

    def dispatch(self, context: "ScanContext", event: Event) -> None:
        self.events.append(event)
        super().dispatch(context, event)

    def complete(self, context: "ScanContext") -> None:
        self.completed += 1

    def error(self, context: "ScanContext", error_kind: ErrorKind, message: str) -> None:
        self.errors.append((error_kind, message))

    def warning(self, context: "ScanContext", message: str) -> None:
        self.warnings.append(message)

    def of_kind(self, kind: EventKind) -> List[Event]:
        return [event for event in self.events if event.kind is kind]
