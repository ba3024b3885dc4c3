"""Human-readable scan report.

File information, warnings and errors go to ``err``; events and the final
verdict go to ``out`` so the report can be piped on its own.
"""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING, Optional, TextIO

from ripcheck.errors import ErrorKind
from ripcheck.report.base import Reporter
from ripcheck.util.time import samples_to_ms

if TYPE_CHECKING:  # pragma: no cover - type hint only
    from ripcheck.scan.context import ScanContext


def format_event(
    context: "ScanContext",
    what: str,
    channel: int,
    last_window_sample: int,
    first_sample: int,
    last_sample: int,
) -> str:
    rate = context.fmt.sample_rate
    start_ms = samples_to_ms(first_sample, rate)
    if first_sample == last_sample:
        span = f"{what}: sample = {first_sample} (time = {start_ms:g} ms)"
    else:
        end_ms = samples_to_ms(last_sample, rate)
        span = (
            f"{what}: samples = {first_sample} ... {last_sample} "
            f"({last_sample - first_sample + 1} samples, time = {start_ms:g} ms ... {end_ms:g} ms)"
        )
    values = ", ".join(str(v) for v in context.window.history(channel))
    first_window_sample = last_window_sample - context.window_size + 1
    return f"{span}, channel = {channel}, samples[{first_window_sample} ... {last_window_sample}] = {{{values}}}"


class TextReporter(Reporter):
    def __init__(self, out: Optional[TextIO] = None, err: Optional[TextIO] = None):
        self.out = out if out is not None else sys.stdout
        self.err = err if err is not None else sys.stderr

    def _print(self, text: str) -> None:
        print(text, file=self.out)

    def _eprint(self, text: str) -> None:
        print(text, file=self.err)

    def begin(self, context: "ScanContext") -> None:
        fmt = context.fmt
        self._eprint(f"File: {context.filename}")
        self._eprint(f"[RIFF] ({context.header.riff_size} bytes)")
        self._eprint(f"[WAVEfmt ] ({context.header.fmt_size} bytes)")
        self._eprint(f"  Audio format = {fmt.audio_format} (1 = PCM)")
        self._eprint(f"  Number of channels = {fmt.channels} (1 = mono, 2 = stereo)")
        self._eprint(f"  Sample rate = {fmt.sample_rate}Hz")
        self._eprint(f"  Bytes / second = {fmt.byte_rate}")
        self._eprint(f"  Block alignment = {fmt.block_align}")
        self._eprint(f"  Bits / sample = {fmt.bits_per_sample}")

    def sample_data(self, context: "ScanContext", data_size: int) -> None:
        byte_rate = context.fmt.byte_rate
        duration = data_size / byte_rate if byte_rate else 0.0
        self._eprint(f"  Data size = {data_size} bytes")
        self._eprint(f"  Duration = {duration:g} sec")

    def possible_pop(self, context: "ScanContext", channel: int, sample: int) -> None:
        location = context.pop_locations[channel]
        self._print(format_event(context, "pop", channel, sample, location, location))

    def possible_drop(self, context: "ScanContext", channel: int, sample: int, dropped_sample: int) -> None:
        self._print(format_event(context, "drop", channel, sample, dropped_sample, dropped_sample))

    def dupes(self, context: "ScanContext", channel: int, sample: int) -> None:
        self._print(format_event(context, "dupes", channel, sample, context.dupe_locations[channel], sample - 1))

    def complete(self, context: "ScanContext") -> None:
        if context.bad_areas == 0:
            self._print("done: all ok")
        else:
            self._print(f"done: {context.bad_areas} bad areas found")

    def error(self, context: "ScanContext", error_kind: ErrorKind, message: str) -> None:
        self._eprint(f"error: {message}")

    def warning(self, context: "ScanContext", message: str) -> None:
        self._eprint(f"warning: {message}")
