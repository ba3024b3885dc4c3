import io
from pathlib import Path

from ripcheck.errors import BitsTooWideError, ErrorKind, ShortReadError, classify
from ripcheck.report.recorder import RecordingReporter
from ripcheck.scan.runner import run_files, scan_file, scan_stream
from ripcheck.util.exit_codes import ExitCode
from ripcheck.util.units import Volume
from wavdata import make_settings, make_wav, mono, spike, wav_stream


def _scan_bytes(raw: bytes, **overrides):
    reporter = RecordingReporter()
    ctx = scan_stream(io.BytesIO(raw), "test.wav", make_settings(**overrides), reporter)
    return ctx, reporter


def test_data_size_not_multiple_of_block_warns_and_scans_whole_frames() -> None:
    ctx, rec = _scan_bytes(make_wav(data=b"\x00" * 7))
    assert len(rec.warnings) == 1
    assert "not a multiple" in rec.warnings[0]
    assert ctx.total_samples == 3
    assert ctx.samples_scanned == 3
    assert rec.completed == 1
    assert ctx.ok


def test_non_pcm_file_begins_then_fails() -> None:
    ctx, rec = _scan_bytes(make_wav(mono([0] * 10), audio_format=3))
    assert rec.begun == 1
    assert rec.completed == 0
    assert [kind for kind, _ in rec.errors] == [ErrorKind.UNSUPPORTED_FORMAT]
    assert not ctx.ok


def test_bad_magic_fails_before_begin() -> None:
    ctx, rec = _scan_bytes(make_wav(mono([0] * 10), riff_id=b"RIFX"))
    assert rec.begun == 0
    assert rec.errors[0][0] is ErrorKind.BAD_MAGIC
    assert "RIFX" in rec.errors[0][1]


def test_zero_channels_is_inconsistent() -> None:
    _, rec = _scan_bytes(make_wav(channels=0, data=b""))
    assert rec.errors[0][0] is ErrorKind.INCONSISTENT_SIZES


def test_too_wide_samples_are_rejected() -> None:
    _, rec = _scan_bytes(make_wav(bits=40, channels=1, data=b"\x00" * 10))
    assert rec.errors[0][0] is ErrorKind.BITS_TOO_WIDE


def test_truncated_data_is_an_io_error_after_scanning_what_arrived() -> None:
    raw = make_wav(mono(spike(30, 10)), data_size=200)
    ctx, rec = _scan_bytes(raw)
    assert [kind for kind, _ in rec.errors] == [ErrorKind.IO]
    assert rec.completed == 0
    assert ctx.samples_scanned == 30
    assert len(rec.events) == 1


def test_missing_data_chunk_completes_without_scanning() -> None:
    ctx, rec = _scan_bytes(make_wav(mono([1, 2, 3]), include_data=False))
    assert rec.begun == 1
    assert rec.data_size is None
    assert rec.completed == 1
    assert ctx.samples_scanned == 0
    assert rec.errors == []


def test_scan_file_reports_unopenable_path(tmp_path: Path) -> None:
    rec = RecordingReporter()
    ctx = scan_file(str(tmp_path / "missing.wav"), make_settings(), rec)
    assert not ctx.ok
    assert rec.errors[0][0] is ErrorKind.IO
    assert rec.errors[0][1].startswith(str(tmp_path / "missing.wav"))
    assert rec.begun == 0


def test_scan_file_reads_from_disk(tmp_path: Path) -> None:
    path = tmp_path / "track.wav"
    path.write_bytes(wav_stream(spike(100, 40)).getvalue())
    rec = RecordingReporter()
    ctx = scan_file(str(path), make_settings(), rec)
    assert ctx.filename == str(path)
    assert [e.first_sample for e in rec.events] == [40]


def test_run_files_continues_after_a_failure(tmp_path: Path) -> None:
    good = tmp_path / "good.wav"
    good.write_bytes(wav_stream([0] * 50).getvalue())
    rec = RecordingReporter()
    code = run_files([str(tmp_path / "nope.wav"), str(good)], make_settings(), rec)
    assert code == ExitCode.SCAN_ERROR
    assert len(rec.errors) == 1
    assert rec.completed == 1


def test_run_files_all_clean(tmp_path: Path) -> None:
    paths = []
    for name in ("a.wav", "b.wav"):
        path = tmp_path / name
        path.write_bytes(wav_stream([0] * 50).getvalue())
        paths.append(str(path))
    rec = RecordingReporter()
    assert run_files(paths, make_settings(), rec) == ExitCode.SUCCESS
    assert rec.completed == 2


class _FailingStream(io.RawIOBase):
    def readable(self) -> bool:
        return True

    def read(self, size=-1):
        raise OSError(5, "Input/output error")


def test_stream_failure_reports_the_os_reason() -> None:
    rec = RecordingReporter()
    ctx = scan_stream(_FailingStream(), "dev.wav", make_settings(), rec)
    assert rec.errors == [(ErrorKind.IO, "Input/output error")]
    assert isinstance(ctx.error, OSError)


def test_error_classification() -> None:
    assert classify(MemoryError()) is ErrorKind.RESOURCE
    assert classify(OSError("boom")) is ErrorKind.IO
    assert classify(ShortReadError(8, 3)) is ErrorKind.IO
    assert classify(BitsTooWideError("x")) is ErrorKind.BITS_TOO_WIDE


def test_oversized_depth_is_reported_as_too_wide_not_as_io() -> None:
    raw = make_wav(bits=2000, channels=1, data=b"")
    ctx, rec = _scan_bytes(raw, pop_limit=Volume.from_ratio(0.5))
    assert rec.begun == 1
    assert [kind for kind, _ in rec.errors] == [ErrorKind.BITS_TOO_WIDE]
    assert ctx.pop_limit == 0


def test_failed_file_is_reported_and_the_next_one_still_scanned(tmp_path: Path) -> None:
    bad = tmp_path / "bad.wav"
    bad.write_bytes(make_wav(mono([0] * 20), riff_id=b"RIFX"))
    good = tmp_path / "good.wav"
    good.write_bytes(wav_stream(spike(100, 40)).getvalue())
    rec = RecordingReporter()
    assert run_files([str(bad), str(good)], make_settings(), rec) == ExitCode.SCAN_ERROR
    assert [kind for kind, _ in rec.errors] == [ErrorKind.BAD_MAGIC]
    assert rec.completed == 1
    assert [e.first_sample for e in rec.events] == [40]
