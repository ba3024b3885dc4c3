import io

import pytest

from ripcheck.errors import (
    BadBitsError,
    BadMagicError,
    BitsExceedBlockError,
    BitsTooWideError,
    InconsistentSizesError,
    ShortReadError,
    UnsupportedFormatError,
)
from ripcheck.wave.container import (
    FormatDescriptor,
    find_data_chunk,
    read_format,
    read_riff_header,
    to_full_byte,
    validate_format,
)
from wavdata import make_wav, mono


def _fmt(**overrides) -> FormatDescriptor:
    params = dict(audio_format=1, channels=2, sample_rate=44100, byte_rate=176400, block_align=4, bits_per_sample=16)
    params.update(overrides)
    return FormatDescriptor(**params)


def test_reads_header_and_format_record() -> None:
    stream = io.BytesIO(make_wav([[1, -1], [2, -2]], sample_rate=48000))
    header = read_riff_header(stream)
    fmt = read_format(stream, header)
    assert header.fmt_size == 16
    assert fmt.channels == 2
    assert fmt.sample_rate == 48000
    assert fmt.block_align == 4
    assert fmt.bits_per_sample == 16
    assert fmt.max_value == 32767
    assert find_data_chunk(stream, header) == 8


def test_extra_fmt_bytes_and_unknown_chunks_are_skipped() -> None:
    raw = make_wav(
        mono([5, 6, 7]),
        fmt_extra=b"\x00\x00",
        chunks_before=[(b"LIST", b"INFOabcdefgh"), (b"fact", b"\x03\x00\x00\x00")],
    )
    stream = io.BytesIO(raw)
    header = read_riff_header(stream)
    assert header.fmt_size == 18
    read_format(stream, header)
    assert find_data_chunk(stream, header) == 6
    assert stream.read(6) == b"\x05\x00\x06\x00\x07\x00"


def test_odd_sized_chunk_is_skipped_by_its_declared_size() -> None:
    stream = io.BytesIO(make_wav(mono([9, 8]), chunks_before=[(b"LIST", b"abc")]))
    header = read_riff_header(stream)
    read_format(stream, header)
    assert find_data_chunk(stream, header) == 4
    assert stream.read(4) == b"\x09\x00\x08\x00"


def test_missing_data_chunk_is_not_an_error() -> None:
    stream = io.BytesIO(make_wav(include_data=False, chunks_before=[(b"LIST", b"1234")]))
    header = read_riff_header(stream)
    read_format(stream, header)
    assert find_data_chunk(stream, header) is None


@pytest.mark.parametrize(
    "kwargs, fragment",
    [
        ({"riff_id": b"RIFX"}, "Not a 'RIFF' file: 'RIFX'"),
        ({"form_type": b"AVI "}, "Not a 'WAVE' format"),
        ({"fmt_id": b"junk"}, "does not start with a 'fmt ' chunk"),
    ],
)
def test_bad_magic(kwargs, fragment) -> None:
    stream = io.BytesIO(make_wav(mono([0]), **kwargs))
    with pytest.raises(BadMagicError) as excinfo:
        read_riff_header(stream)
    assert fragment in str(excinfo.value)


def test_riff_size_smaller_than_fmt_chunk_is_inconsistent() -> None:
    stream = io.BytesIO(make_wav(mono([0]), riff_size=20))
    with pytest.raises(InconsistentSizesError):
        read_riff_header(stream)


def test_short_fmt_chunk_is_inconsistent() -> None:
    raw = bytearray(make_wav(mono([0])))
    raw[16:20] = (12).to_bytes(4, "little")
    with pytest.raises(InconsistentSizesError):
        read_riff_header(io.BytesIO(bytes(raw)))


def test_truncated_header_is_a_short_read() -> None:
    with pytest.raises(ShortReadError):
        read_riff_header(io.BytesIO(b"RIFF\x10\x00"))


def test_validate_rejects_non_pcm() -> None:
    with pytest.raises(UnsupportedFormatError):
        validate_format(_fmt(audio_format=3))


def test_validate_rejects_zero_bits() -> None:
    with pytest.raises(BadBitsError):
        validate_format(_fmt(bits_per_sample=0))


def test_validate_rejects_bits_exceeding_block() -> None:
    with pytest.raises(BitsExceedBlockError):
        validate_format(_fmt(block_align=2))


def test_validate_rejects_bits_wider_than_working_integer() -> None:
    with pytest.raises(BitsTooWideError):
        validate_format(_fmt(channels=1, block_align=5, bits_per_sample=40))


def test_full_scale_is_zero_for_depths_the_decoder_cannot_hold() -> None:
    assert _fmt(channels=1, bits_per_sample=32).max_value == 2**31 - 1
    assert _fmt(channels=1, bits_per_sample=33).max_value == 0
    assert _fmt(channels=1, bits_per_sample=2000).max_value == 0


def test_validate_accepts_padded_depths() -> None:
    validate_format(_fmt(channels=1, block_align=2, bits_per_sample=12))
    validate_format(_fmt(channels=2, block_align=6, bits_per_sample=20))
    validate_format(_fmt(channels=1, block_align=4, bits_per_sample=32))


def test_to_full_byte() -> None:
    assert to_full_byte(8) == 8
    assert to_full_byte(12) == 16
    assert to_full_byte(17) == 24
