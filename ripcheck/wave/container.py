"""RIFF/WAVE container walk: header validation, format record, data chunk lookup."""

from __future__ import annotations

import struct
from dataclasses import dataclass
from typing import BinaryIO, Optional

from ripcheck.errors import (
    BadBitsError,
    BadMagicError,
    BitsExceedBlockError,
    BitsTooWideError,
    InconsistentSizesError,
    ShortReadError,
    UnsupportedFormatError,
)
from ripcheck.util.logging import get_logger

RIFF_HEADER_SIZE = 20
WAVE_FMT_SIZE = 16
CHUNK_HEADER_SIZE = 8
FORM_TYPE_SIZE = 4
PCM = 1
# Width of the integer each decoded sample must fit into.
WORKING_BITS = 32

_RIFF_HEADER = struct.Struct("<4sI4s4sI")
_WAVE_FMT = struct.Struct("<HHIIHH")
_CHUNK_HEADER = struct.Struct("<4sI")

_SKIP_BLOCK = 64 * 1024

log = get_logger(__name__)


@dataclass(frozen=True)
class RiffHeader:
    riff_size: int
    fmt_size: int


@dataclass(frozen=True)
class FormatDescriptor:
    audio_format: int
    channels: int
    sample_rate: int
    byte_rate: int
    block_align: int
    bits_per_sample: int

    @property
    def max_value(self) -> int:
        """Full-scale magnitude used as the reference for ratio thresholds.

        0 for depths outside 1..WORKING_BITS; validate_format rejects those.
        """
        if not 0 < self.bits_per_sample <= WORKING_BITS:
            return 0
        return (1 << (self.bits_per_sample - 1)) - 1

    @property
    def bytes_per_sample(self) -> int:
        return to_full_byte(self.bits_per_sample) // 8


def to_full_byte(bits: int) -> int:
    """Round a bit count up to a whole number of bytes (still in bits)."""
    rem = bits % 8
    return bits if rem == 0 else bits + (8 - rem)


def _printable_id(raw: bytes) -> str:
    return raw.decode("latin-1")


def read_exact(stream: BinaryIO, size: int, what: str) -> bytes:
    data = stream.read(size)
    if data is None:
        data = b""
    if len(data) != size:
        raise ShortReadError(size, len(data), what)
    return data


def skip_bytes(stream: BinaryIO, size: int, what: str) -> None:
    """Advance past ``size`` bytes, seeking when possible."""
    if size <= 0:
        return
    seekable = False
    try:
        seekable = stream.seekable()
    except (AttributeError, ValueError):
        seekable = False
    if seekable:
        stream.seek(size, 1)
        return
    remaining = size
    while remaining > 0:
        chunk = stream.read(min(remaining, _SKIP_BLOCK))
        if not chunk:
            raise ShortReadError(size, size - remaining, what)
        remaining -= len(chunk)


def read_riff_header(stream: BinaryIO) -> RiffHeader:
    """Read and validate the RIFF header and the header of the first chunk."""
    raw = read_exact(stream, RIFF_HEADER_SIZE, "RIFF header")
    riff_id, riff_size, form_type, chunk_id, fmt_size = _RIFF_HEADER.unpack(raw)

    if riff_id != b"RIFF":
        raise BadMagicError(f"Not a 'RIFF' file: '{_printable_id(riff_id)}'")
    if form_type != b"WAVE":
        raise BadMagicError(f"Not a 'WAVE' format: '{_printable_id(form_type)}'")
    if chunk_id != b"fmt ":
        raise BadMagicError(f"WAVE file does not start with a 'fmt ' chunk: '{_printable_id(chunk_id)}'")

    if riff_size < fmt_size + CHUNK_HEADER_SIZE or fmt_size < WAVE_FMT_SIZE:
        raise InconsistentSizesError(
            f"WAVE file has illegal chunk sizes. RIFF size: {riff_size}, fmt size: {fmt_size}"
        )
    return RiffHeader(riff_size=riff_size, fmt_size=fmt_size)


def read_format(stream: BinaryIO, header: RiffHeader) -> FormatDescriptor:
    """Read the minimal format record and skip whatever else the fmt chunk declares."""
    raw = read_exact(stream, WAVE_FMT_SIZE, "'fmt ' chunk")
    fmt = FormatDescriptor(*_WAVE_FMT.unpack(raw))
    extra = header.fmt_size - WAVE_FMT_SIZE
    if extra > 0:
        log.debug("Skipping %d extra bytes of the 'fmt ' chunk", extra)
        skip_bytes(stream, extra, "'fmt ' chunk")
    return fmt


def validate_format(fmt: FormatDescriptor) -> None:
    """Reject formats the decoder cannot handle."""
    if fmt.audio_format != PCM:
        raise UnsupportedFormatError(f"Not a PCM WAVE file. audio format: {fmt.audio_format}")
    if fmt.channels == 0:
        raise InconsistentSizesError("WAVE file declares zero channels")
    if fmt.bits_per_sample == 0:
        raise BadBitsError(f"Illegal value of bits per sample: {fmt.bits_per_sample}")

    frame_bits = to_full_byte(fmt.bits_per_sample * fmt.channels)
    if frame_bits > 8 * fmt.block_align:
        raise BitsExceedBlockError(
            "WAVE file specifies more bits per sample than fit into one sample. "
            f"bits per sample: {fmt.bits_per_sample}, block alignment: {fmt.block_align}"
        )
    if frame_bits > WORKING_BITS * fmt.channels:
        raise BitsTooWideError(f"Too many bits per sample: {fmt.bits_per_sample}")
    if fmt.bytes_per_sample * fmt.channels > fmt.block_align:
        # Per-channel slots are whole bytes, which can need more room than the
        # packed bit count checked above.
        raise BitsExceedBlockError(
            "WAVE file specifies more bits per sample than fit into one sample. "
            f"bits per sample: {fmt.bits_per_sample}, block alignment: {fmt.block_align}"
        )


def find_data_chunk(stream: BinaryIO, header: RiffHeader) -> Optional[int]:
    """Walk the chunks after 'fmt ' and stop at the first 'data' chunk.

    Returns the declared size of the data chunk with the stream positioned at
    its first byte, or None when the RIFF body ends without one.
    """
    # Offsets count from the form type, like the RIFF size does.
    pos = FORM_TYPE_SIZE + CHUNK_HEADER_SIZE + header.fmt_size
    while pos < header.riff_size:
        raw = read_exact(stream, CHUNK_HEADER_SIZE, "chunk header")
        chunk_id, chunk_size = _CHUNK_HEADER.unpack(raw)
        if chunk_id == b"data":
            log.debug("Found 'data' chunk of %d bytes at offset %d", chunk_size, pos + 8 + CHUNK_HEADER_SIZE)
            return chunk_size
        # Skipped by declared size only; no RIFF pad byte is assumed.
        log.debug("Skipping '%s' chunk of %d bytes", _printable_id(chunk_id), chunk_size)
        skip_bytes(stream, chunk_size, f"'{_printable_id(chunk_id)}' chunk")
        pos += CHUNK_HEADER_SIZE + chunk_size
    log.debug("No 'data' chunk before end of RIFF body (%d bytes)", header.riff_size)
    return None
