"""PCM frame decoding into centered signed integers."""

from __future__ import annotations

from typing import BinaryIO, Iterator, List

import numpy as np

from ripcheck.errors import ShortReadError
from ripcheck.wave.container import FormatDescriptor


def decode_frames(raw: bytes, fmt: FormatDescriptor) -> np.ndarray:
    """Decode whole frames of interleaved PCM into an (n_frames, channels) int64 array.

    Each channel occupies ``bytes_per_sample`` little-endian bytes at offset
    ``channel * bytes_per_sample`` within its frame; padding bits below the
    significant ones are shifted away. Up to 8 bits are unsigned and get
    re-centered around zero, wider samples are two's complement.
    """
    block_align = fmt.block_align
    channels = fmt.channels
    n_frames = len(raw) // block_align
    if n_frames == 0:
        return np.zeros((0, channels), dtype=np.int64)

    bits = fmt.bits_per_sample
    bytes_per_sample = fmt.bytes_per_sample
    shift = bytes_per_sample * 8 - bits
    mid = 1 << (bits - 1)

    frames = np.frombuffer(raw, dtype=np.uint8, count=n_frames * block_align).reshape(n_frames, block_align)
    out = np.zeros((n_frames, channels), dtype=np.int64)
    for channel in range(channels):
        offset = channel * bytes_per_sample
        value = np.zeros(n_frames, dtype=np.int64)
        for byte in range(bytes_per_sample):
            value |= frames[:, offset + byte].astype(np.int64) << (8 * byte)
        value >>= shift
        if bits > 8:
            out[:, channel] = np.where(value & mid, value - (1 << bits), value)
        else:
            out[:, channel] = value - mid
    return out


class FrameReader:
    """Read and decode ``frame_count`` frames from a stream, a block at a time.

    Iterating yields one list of ints per frame. When the stream ends early the
    whole frames that did arrive are yielded first, then ShortReadError is
    raised.
    """

    def __init__(self, stream: BinaryIO, fmt: FormatDescriptor, frame_count: int, block_frames: int = 4096):
        self.stream = stream
        self.fmt = fmt
        self.frame_count = max(0, int(frame_count))
        self.block_frames = max(1, int(block_frames))
        self.frames_read = 0

    def __iter__(self) -> Iterator[List[int]]:
        block_align = self.fmt.block_align
        while self.frames_read < self.frame_count:
            wanted = min(self.block_frames, self.frame_count - self.frames_read)
            raw = self.stream.read(wanted * block_align) or b""
            rows = decode_frames(raw, self.fmt).tolist()
            for row in rows:
                self.frames_read += 1
                yield row
            if len(rows) < wanted:
                raise ShortReadError(block_align, len(raw) - len(rows) * block_align, "frame")
