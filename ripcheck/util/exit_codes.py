"""Documented exit codes for the ripcheck CLI.

- 0: every file was scanned (defects found or not)
- 1: at least one file could not be scanned
- 255: invalid command-line arguments or usage

Usage:
    from ripcheck.util.exit_codes import ExitCode
    sys.exit(ExitCode.SCAN_ERROR)
"""

from __future__ import annotations


class ExitCode:
    """Exit code constants for ripcheck processes.

    Attributes:
        SUCCESS: All scans completed.
        SCAN_ERROR: A file was malformed, truncated or unreadable.
        USAGE_ERROR: Command-line argument validation failed.
    """

    SUCCESS: int = 0
    SCAN_ERROR: int = 1
    USAGE_ERROR: int = 255

    @classmethod
    def message(cls, code: int) -> str:
        """Return a human-readable message for an exit code."""
        messages = {
            cls.SUCCESS: "Success",
            cls.SCAN_ERROR: "Scan error",
            cls.USAGE_ERROR: "Invalid arguments",
        }
        return messages.get(code, f"Unknown exit code {code}")
