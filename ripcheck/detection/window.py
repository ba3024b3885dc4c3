"""Fixed-depth per-channel sample history."""

from __future__ import annotations

from typing import List, Sequence, Tuple

import numpy as np

MIN_WINDOW_SIZE = 7


class SampleWindow:
    """Ring buffer of the last ``size`` decoded frames, newest at index 0.

    ``window[k, channel]`` is the value ``k`` samples before the newest one.
    Rows that predate the stream read as zero.
    """

    def __init__(self, size: int, channels: int):
        if size < MIN_WINDOW_SIZE:
            raise ValueError(f"window size must be at least {MIN_WINDOW_SIZE}, got {size}")
        self.size = int(size)
        self.channels = int(channels)
        self._rows: List[List[int]] = [[0] * self.channels for _ in range(self.size)]
        self._head = 0

    def push(self, row: Sequence[int]) -> None:
        """Make ``row`` the newest entry, evicting the oldest."""
        self._head = (self._head - 1) % self.size
        slot = self._rows[self._head]
        for channel in range(self.channels):
            slot[channel] = row[channel]

    def __getitem__(self, key: Tuple[int, int]) -> int:
        k, channel = key
        if not 0 <= k < self.size:
            raise IndexError(f"window offset {k} out of range 0..{self.size - 1}")
        return self._rows[(self._head + k) % self.size][channel]

    def __len__(self) -> int:
        return self.size

    def column(self, channel: int) -> List[int]:
        """Values of one channel, newest first."""
        return [self._rows[(self._head + k) % self.size][channel] for k in range(self.size)]

    def history(self, channel: int) -> List[int]:
        """Values of one channel in time order, oldest first."""
        return self.column(channel)[::-1]

    def as_array(self) -> np.ndarray:
        """Copy of the window as a (size, channels) array, newest row first."""
        order = [(self._head + k) % self.size for k in range(self.size)]
        return np.asarray(self._rows, dtype=np.int64).reshape(self.size, self.channels)[order]
