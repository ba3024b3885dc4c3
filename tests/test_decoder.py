import io

import numpy as np
import pytest

from ripcheck.errors import ShortReadError
from ripcheck.wave.container import FormatDescriptor
from ripcheck.wave.decoder import FrameReader, decode_frames
from wavdata import encode_frames


def _fmt(bits: int, channels: int = 1, block_align=None) -> FormatDescriptor:
    bytes_per_sample = (bits + 7) // 8
    if block_align is None:
        block_align = bytes_per_sample * channels
    return FormatDescriptor(1, channels, 44100, 44100 * block_align, block_align, bits)


def _first(raw: bytes, fmt: FormatDescriptor) -> list:
    return decode_frames(raw, fmt).tolist()[0]


def test_eight_bit_is_unsigned_and_centered() -> None:
    fmt = _fmt(8)
    assert _first(b"\x80", fmt) == [0]
    assert _first(b"\x00", fmt) == [-128]
    assert _first(b"\xff", fmt) == [127]


def test_sixteen_bit_is_twos_complement() -> None:
    fmt = _fmt(16)
    assert _first(b"\x00\x80", fmt) == [-32768]
    assert _first(b"\xff\x7f", fmt) == [32767]
    assert _first(b"\xff\xff", fmt) == [-1]
    assert _first(b"\x01\x00", fmt) == [1]


def test_twenty_four_bit_sign_extension() -> None:
    fmt = _fmt(24)
    assert _first(b"\x00\x00\x80", fmt) == [-8388608]
    assert _first(b"\xff\xff\x7f", fmt) == [8388607]
    assert _first(b"\xfe\xff\xff", fmt) == [-2]


def test_padding_bits_are_shifted_away() -> None:
    fmt = _fmt(12)
    # -1 in 12 bits, left-justified in a 16-bit container
    assert _first(b"\xf0\xff", fmt) == [-1]
    assert _first(b"\xf0\x7f", fmt) == [2047]


def test_channels_use_their_own_slot() -> None:
    fmt = _fmt(24, channels=2)
    raw = encode_frames([[100000, -7]], 24)
    assert _first(raw, fmt) == [100000, -7]


@pytest.mark.parametrize("bits", [8, 16, 24, 32])
def test_synthetic_frames_decode_to_their_values(bits: int) -> None:
    top = (1 << (bits - 1)) - 1
    rows = [[0, 1], [-1, top], [-top - 1, top // 3], [-(top // 2), 42]]
    fmt = _fmt(bits, channels=2)
    decoded = decode_frames(encode_frames(rows, bits), fmt)
    assert decoded.dtype == np.int64
    assert decoded.tolist() == rows


def test_trailing_partial_frame_is_ignored() -> None:
    fmt = _fmt(16, channels=2)
    raw = encode_frames([[1, 2], [3, 4]], 16) + b"\x01\x02"
    assert decode_frames(raw, fmt).shape == (2, 2)


def test_frame_reader_yields_rows_across_blocks() -> None:
    fmt = _fmt(16)
    values = list(range(-5, 5))
    stream = io.BytesIO(encode_frames([[v] for v in values], 16))
    reader = FrameReader(stream, fmt, frame_count=len(values), block_frames=3)
    assert [row[0] for row in reader] == values
    assert reader.frames_read == len(values)


def test_frame_reader_stops_at_frame_count() -> None:
    fmt = _fmt(16)
    stream = io.BytesIO(encode_frames([[v] for v in range(10)], 16))
    assert len(list(FrameReader(stream, fmt, frame_count=4))) == 4


def test_frame_reader_short_read_yields_whole_frames_then_raises() -> None:
    fmt = _fmt(16)
    stream = io.BytesIO(encode_frames([[7], [8], [9]], 16) + b"\x01")
    reader = FrameReader(stream, fmt, frame_count=5)
    seen = []
    with pytest.raises(ShortReadError):
        for row in reader:
            seen.append(row[0])
    assert seen == [7, 8, 9]
