"""Per-file scan operation and the sequential multi-file run."""

from __future__ import annotations

import sys
from typing import BinaryIO, Iterable, Optional

from ripcheck.detection.detectors import DefectScanner
from ripcheck.errors import ErrorKind, classify
from ripcheck.report.base import Reporter
from ripcheck.scan.context import ScanContext, ScanSettings
from ripcheck.util.exit_codes import ExitCode
from ripcheck.util.logging import get_logger, log_exception
from ripcheck.wave.container import find_data_chunk, read_format, read_riff_header, validate_format
from ripcheck.wave.decoder import FrameReader

STDIN_NAME = "<stdin>"

log = get_logger(__name__)


def _scan(stream: BinaryIO, ctx: ScanContext, reporter: Reporter) -> None:
    header = read_riff_header(stream)
    fmt = read_format(stream, header)
    ctx.resolve(header, fmt)

    reporter.begin(ctx)

    validate_format(fmt)
    ctx.allocate()

    data_size = find_data_chunk(stream, header)
    if data_size is None:
        return

    ctx.start_data(data_size)
    reporter.sample_data(ctx, data_size)

    if ctx.total_samples * fmt.block_align < data_size:
        reporter.warning(
            ctx,
            f"The size of the 'data' chunk ({data_size}) is not a multiple of the block alignment ({fmt.block_align}).",
        )

    scanner = DefectScanner(ctx, lambda event: reporter.dispatch(ctx, event))
    frames = FrameReader(stream, fmt, ctx.scan_samples, ctx.settings.read_block_frames)
    for sample, row in enumerate(frames):
        if not scanner.feed(sample, row):
            log.debug(
                "Stopping %s after %d bad areas at sample %d",
                ctx.filename,
                ctx.bad_areas,
                sample,
                extra={"wav_file": ctx.filename, "sample": sample},
            )
            break


def scan_stream(
    stream: BinaryIO,
    filename: str,
    settings: Optional[ScanSettings],
    reporter: Reporter,
) -> ScanContext:
    """Scan one WAVE stream, reporting through ``reporter``.

    Fatal errors never escape: they are passed to ``reporter.error`` and kept
    on the returned context.
    """
    ctx = ScanContext(filename, settings or ScanSettings())
    try:
        _scan(stream, ctx, reporter)
    except Exception as exc:
        kind = classify(exc)
        message = str(exc) or exc.__class__.__name__
        if isinstance(exc, OSError) and exc.strerror:
            message = exc.strerror
        ctx.error = exc
        log_exception(
            log,
            f"Scan of {filename} failed: {message}",
            error_type=kind.value,
            wav_file=filename,
        )
        reporter.error(ctx, kind, message)
        return ctx

    reporter.complete(ctx)
    return ctx


def scan_file(path: str, settings: Optional[ScanSettings], reporter: Reporter) -> ScanContext:
    """Open ``path`` and scan it; a file that cannot be opened is reported as an I/O error."""
    try:
        stream = open(path, "rb")
    except OSError as exc:
        ctx = ScanContext(path, settings or ScanSettings())
        ctx.error = exc
        message = f"{path}: {exc.strerror or exc}"
        log.debug("Cannot open %s: %s", path, exc, extra={"wav_file": path})
        reporter.error(ctx, ErrorKind.IO, message)
        return ctx
    with stream:
        return scan_stream(stream, path, settings, reporter)


def run_files(paths: Iterable[str], settings: Optional[ScanSettings], reporter: Reporter) -> int:
    """Scan every path in turn (standard input when there are none) and return an exit code."""
    settings = settings or ScanSettings()
    paths = list(paths)
    failures = 0
    if not paths:
        ctx = scan_stream(sys.stdin.buffer, STDIN_NAME, settings, reporter)
        failures += 0 if ctx.ok else 1
    for path in paths:
        ctx = scan_file(path, settings, reporter)
        failures += 0 if ctx.ok else 1
    code = ExitCode.SUCCESS if failures == 0 else ExitCode.SCAN_ERROR
    log.debug("Scanned %d file(s), %d failed: %s", max(len(paths), 1), failures, ExitCode.message(code))
    return code
