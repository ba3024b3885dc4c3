"""Error taxonomy for a single file scan.

Every exception here is fatal for the file being scanned and nothing else;
the scan runner catches them at the file boundary and reports them.
"""

from __future__ import annotations

import enum


class ErrorKind(str, enum.Enum):
    BAD_MAGIC = "bad_magic"
    INCONSISTENT_SIZES = "inconsistent_sizes"
    UNSUPPORTED_FORMAT = "unsupported_format"
    BAD_BITS = "bad_bits"
    BITS_EXCEED_BLOCK = "bits_exceed_block"
    BITS_TOO_WIDE = "bits_too_wide"
    IO = "io"
    RESOURCE = "resource"


class RipcheckError(Exception):
    kind: ErrorKind = ErrorKind.IO


class ContainerError(RipcheckError):
    """Malformed RIFF/WAVE structure."""


class BadMagicError(ContainerError):
    kind = ErrorKind.BAD_MAGIC


class InconsistentSizesError(ContainerError):
    kind = ErrorKind.INCONSISTENT_SIZES


class UnsupportedFormatError(ContainerError):
    kind = ErrorKind.UNSUPPORTED_FORMAT


class BadBitsError(ContainerError):
    kind = ErrorKind.BAD_BITS


class BitsExceedBlockError(ContainerError):
    kind = ErrorKind.BITS_EXCEED_BLOCK


class BitsTooWideError(ContainerError):
    kind = ErrorKind.BITS_TOO_WIDE


class ShortReadError(RipcheckError):
    """The stream ended before a structure or frame it declared."""

    kind = ErrorKind.IO

    def __init__(self, expected: int, got: int, what: str = "data"):
        super().__init__(f"Unexpected end of file while reading {what}: expected {expected} bytes, got {got}")
        self.expected = expected
        self.got = got
        self.what = what


def classify(exc: BaseException) -> ErrorKind:
    """Map any exception caught at the file boundary to an ErrorKind."""
    if isinstance(exc, RipcheckError):
        return exc.kind
    if isinstance(exc, MemoryError):
        return ErrorKind.RESOURCE
    return ErrorKind.IO
