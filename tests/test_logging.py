import json
from pathlib import Path

from ripcheck.report.recorder import RecordingReporter
from ripcheck.scan.runner import run_files
from ripcheck.util.exit_codes import ExitCode
from ripcheck.util.logging import configure_logging, get_logger
from wavdata import make_settings, make_wav, mono, spike, wav_stream


def test_debug_logging_carries_the_scanned_file(tmp_path: Path) -> None:
    log_path = tmp_path / "diag.jsonl"
    bad = tmp_path / "bad.wav"
    bad.write_bytes(make_wav(mono([0] * 20), audio_format=3))
    good = tmp_path / "good.wav"
    good.write_bytes(wav_stream(spike(200, 20) + spike(200, 60)).getvalue())
    configure_logging(level="DEBUG", json_file=str(log_path))
    try:
        rec = RecordingReporter()
        code = run_files([str(bad), str(tmp_path / "missing.wav"), str(good)], make_settings(max_bad_areas=1), rec)
    finally:
        configure_logging()

    assert code == ExitCode.SCAN_ERROR
    assert len(rec.errors) == 2
    assert rec.completed == 1
    records = [json.loads(line) for line in log_path.read_text().splitlines()]
    failed = [r for r in records if r["level"] == "ERROR"]
    assert failed[0]["wav_file"] == str(bad)
    assert failed[0]["error_type"] == "unsupported_format"
    assert "traceback" in failed[0]
    assert any(r.get("wav_file") == str(tmp_path / "missing.wav") for r in records)
    assert any(r.get("wav_file") == str(good) and r.get("sample") == 22 for r in records)


def test_get_logger_nests_under_the_package_logger() -> None:
    assert get_logger("wave.container").name == "ripcheck.wave.container"
    assert get_logger("ripcheck.cli").name == "ripcheck.cli"
