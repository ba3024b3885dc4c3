"""Line-delimited JSON scan log."""

from __future__ import annotations

import json
import os
import time
from pathlib import Path
from typing import TYPE_CHECKING, Any, Union

from ripcheck.errors import ErrorKind
from ripcheck.report.base import Reporter
from ripcheck.util.time import utc_now_str

if TYPE_CHECKING:  # pragma: no cover - type hint only
    from ripcheck.scan.context import ScanContext


class JsonlReporter(Reporter):
    """Append one JSON object per callback to ``log_path``."""

    def __init__(self, log_path: Union[str, Path]):
        self.log_path = Path(log_path).expanduser()
        self.log_path.parent.mkdir(parents=True, exist_ok=True)
        self.run_id = f"run-{int(time.time() * 1000)}-pid{os.getpid()}"

    def log(self, context: "ScanContext", event: str, **fields: Any) -> None:
        record = {
            "ts": utc_now_str(),
            "run_id": self.run_id,
            "file": context.filename,
            "event": event,
            **fields,
        }
        with self.log_path.open("a", encoding="utf-8") as fh:
            fh.write(json.dumps(record) + "\n")

    def begin(self, context: "ScanContext") -> None:
        fmt = context.fmt
        self.log(
            context,
            "begin",
            audio_format=fmt.audio_format,
            channels=fmt.channels,
            sample_rate=fmt.sample_rate,
            byte_rate=fmt.byte_rate,
            block_align=fmt.block_align,
            bits_per_sample=fmt.bits_per_sample,
            pop_limit=context.pop_limit,
            drop_limit=context.drop_limit,
            dupe_limit=context.dupe_limit,
            settings={
                "pop_limit": str(context.settings.pop_limit),
                "intro_length": str(context.settings.intro_length),
                "outro_length": str(context.settings.outro_length),
                "pop_drop_dist": str(context.settings.pop_drop_dist),
            },
        )

    def sample_data(self, context: "ScanContext", data_size: int) -> None:
        self.log(context, "sample_data", data_size=data_size, total_samples=context.total_samples)

    def _defect(self, context: "ScanContext", kind: str, channel: int, sample: int, first: int, last: int) -> None:
        self.log(
            context,
            kind,
            channel=channel,
            sample=sample,
            first_sample=first,
            last_sample=last,
            window=context.window.history(channel),
            bad_areas=context.bad_areas,
        )

    def possible_pop(self, context: "ScanContext", channel: int, sample: int) -> None:
        location = context.pop_locations[channel]
        self._defect(context, "pop", channel, sample, location, location)

    def possible_drop(self, context: "ScanContext", channel: int, sample: int, dropped_sample: int) -> None:
        self._defect(context, "drop", channel, sample, dropped_sample, dropped_sample)

    def dupes(self, context: "ScanContext", channel: int, sample: int) -> None:
        self._defect(context, "dupes", channel, sample, context.dupe_locations[channel], sample - 1)

    def complete(self, context: "ScanContext") -> None:
        self.log(
            context,
            "complete",
            bad_areas=context.bad_areas,
            samples_scanned=context.samples_scanned,
            stopped_early=context.stopped_early,
        )

    def error(self, context: "ScanContext", error_kind: ErrorKind, message: str) -> None:
        self.log(context, "error", error_kind=error_kind.value, message=message)

    def warning(self, context: "ScanContext", message: str) -> None:
        self.log(context, "warning", message=message)
