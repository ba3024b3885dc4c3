"""
ripcheck: detect defects in CD rips stored as PCM WAVE files.

Scans the sample stream of each file for pops (isolated spikes after
silence), drops (a zero sample between two loud samples of the same sign)
and dupes (long runs of one identical sample value).

Usage:
    from ripcheck.scan.runner import scan_file
    from ripcheck.report.text import TextReporter

    ctx = scan_file("track01.wav", None, TextReporter())
"""
from __future__ import annotations

__version__ = "1.0.0"

__all__ = ["__version__"]
