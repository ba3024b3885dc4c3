"""Pop, drop and dupe detection over the sliding window.

Each detector is evaluated once per channel for every newly decoded frame,
in the order pop, drop, dupe. Per-channel state lives in the ScanContext so
reporters can read it when an event is dispatched.
"""

from __future__ import annotations

from typing import Callable, List, Optional, Sequence

from ripcheck.detection.types import Event, EventKind
from ripcheck.scan.context import ScanContext


class PopDetector:
    """Single loud sample after at least four samples of digital silence."""

    kind = EventKind.POP

    def check(self, ctx: ScanContext, channel: int, sample: int) -> Optional[Event]:
        window = ctx.window
        if sample <= 4:
            return None
        x2 = window[2, channel]
        if not (x2 > ctx.pop_limit or x2 < -ctx.pop_limit):
            return None
        if window[3, channel] or window[4, channel] or window[5, channel] or window[6, channel]:
            return None
        location = sample - 2
        if location >= ctx.outro_start:
            return None
        ctx.pop_locations[channel] = location
        return Event(self.kind, channel, sample, location, location)


class DropDetector:
    """Zero sample between two loud samples of the same sign."""

    kind = EventKind.DROP

    def check(self, ctx: ScanContext, channel: int, sample: int) -> Optional[Event]:
        window = ctx.window
        if window[1, channel] != 0:
            return None
        x0 = window[0, channel]
        x2 = window[2, channel]
        limit = ctx.drop_limit
        if not ((x2 > limit and x0 > limit) or (x2 < -limit and x0 < -limit)):
            return None
        location = sample - 1
        if location <= ctx.pop_locations[channel] + ctx.pop_drop_dist:
            return None
        if not ctx.intro_end < location < ctx.outro_start:
            return None
        return Event(self.kind, channel, sample, location, location)


class DupeDetector:
    """Run of identical, non-quiet samples of at least ``min_dupes`` length."""

    kind = EventKind.DUPES

    def check(self, ctx: ScanContext, channel: int, sample: int) -> Optional[Event]:
        window = ctx.window
        x0 = window[0, channel]
        x1 = window[1, channel]
        if x0 == x1:
            ctx.dupe_counts[channel] += 1
            return None

        run_length = ctx.dupe_counts[channel] + 1
        ctx.dupe_counts[channel] = 0
        start = sample - run_length
        if run_length < ctx.min_dupes:
            return None
        if -ctx.dupe_limit < x1 < ctx.dupe_limit:
            return None
        if start >= ctx.outro_start or start <= ctx.dupe_locations[channel] + ctx.intro_end:
            return None
        ctx.dupe_locations[channel] = start
        return Event(self.kind, channel, sample, start, sample - 1)


class DefectScanner:
    """Feed decoded frames through the window and the three detectors.

    ``dispatch`` receives every event as soon as it fires. ``feed`` returns
    False once the bad area ceiling is reached; no detector runs after that.
    """

    def __init__(self, ctx: ScanContext, dispatch: Callable[[Event], None]):
        if ctx.window is None:
            raise ValueError("context has no window; call allocate() first")
        self.ctx = ctx
        self.dispatch = dispatch
        self.detectors: List = [PopDetector(), DropDetector(), DupeDetector()]

    def feed(self, sample: int, row: Sequence[int]) -> bool:
        ctx = self.ctx
        ctx.window.push(row)
        ctx.samples_scanned = sample + 1
        for channel in range(ctx.window.channels):
            for detector in self.detectors:
                event = detector.check(ctx, channel, sample)
                if event is None:
                    continue
                ctx.bad_areas += 1
                self.dispatch(event)
                if ctx.limit_reached:
                    ctx.stopped_early = True
                    return False
        return True
