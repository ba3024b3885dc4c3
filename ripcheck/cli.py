#!/usr/bin/env python3
"""ripcheck CLI entrypoint: scan WAVE files for pops, drops and dupes."""

from __future__ import annotations

import argparse
import sys
from typing import List, NoReturn, Optional

from ripcheck import __version__, config
from ripcheck.detection.window import MIN_WINDOW_SIZE
from ripcheck.report.base import Reporter
from ripcheck.report.fanout import FanoutReporter
from ripcheck.report.image import ImageReporter, parse_image_options
from ripcheck.report.jsonl import JsonlReporter
from ripcheck.report.text import TextReporter
from ripcheck.scan.context import ScanSettings
from ripcheck.scan.runner import run_files
from ripcheck.util.exit_codes import ExitCode
from ripcheck.util.logging import configure_logging
from ripcheck.util.units import parse_time, parse_volume


class _ArgumentParser(argparse.ArgumentParser):
    def error(self, message: str) -> NoReturn:
        self.print_usage(sys.stderr)
        self.exit(ExitCode.USAGE_ERROR, f"{self.prog}: error: {message}\nSee --help for usage information.\n")


def _count(text: str) -> int:
    try:
        value = int(text)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"Invalid count '{text}'") from exc
    if value < 0:
        raise argparse.ArgumentTypeError(f"Count must not be negative: '{text}'")
    return value


def build_parser() -> argparse.ArgumentParser:
    p = _ArgumentParser(
        prog="ripcheck",
        description="Detect pops, drops and runs of duplicate samples in PCM WAVE files (e.g. faulty CD rips).",
        epilog=(
            "TIME values take an optional unit: samples (default), ms, s. "
            "VOLUME values are absolute sample values, or a share of full scale when given "
            "as a percentage (33%%) or a fraction (0.33)."
        ),
    )
    p.add_argument("files", nargs="*", metavar="FILE", help="WAVE files to check (standard input if none)")
    p.add_argument("-v", "--version", action="version", version=f"%(prog)s {__version__}")

    p.add_argument("-t", "--max-time", dest="max_time", type=parse_time, metavar="TIME",
                   default=parse_time(config.MAX_TIME) if config.MAX_TIME else None,
                   help="Analyse at most this much audio per file (default: everything)")
    p.add_argument("-b", "--max-bad-areas", dest="max_bad_areas", type=_count, metavar="N",
                   default=config.MAX_BAD_AREAS,
                   help="Stop checking a file after N bad areas (default: unlimited)")
    p.add_argument("-i", "--intro-length", dest="intro_length", type=parse_time, metavar="TIME",
                   default=parse_time(config.INTRO_LENGTH),
                   help=f"Ignore drops and dupes in the first TIME of the file (default {config.INTRO_LENGTH})")
    p.add_argument("-o", "--outro-length", dest="outro_length", type=parse_time, metavar="TIME",
                   default=parse_time(config.OUTRO_LENGTH),
                   help=f"Ignore defects in the last TIME of the file (default {config.OUTRO_LENGTH})")
    p.add_argument("-p", "--pop-limit", dest="pop_limit", type=parse_volume, metavar="VOLUME",
                   default=parse_volume(config.POP_LIMIT),
                   help=f"Minimum magnitude of a pop (default {config.POP_LIMIT})")
    p.add_argument("-d", "--drop-limit", dest="drop_limit", type=parse_volume, metavar="VOLUME",
                   default=parse_volume(config.DROP_LIMIT),
                   help=f"Minimum magnitude around a dropped sample (default {config.DROP_LIMIT})")
    p.add_argument("-u", "--dupe-limit", dest="dupe_limit", type=parse_volume, metavar="VOLUME",
                   default=parse_volume(config.DUPE_LIMIT),
                   help=f"Minimum magnitude of duplicated samples (default {config.DUPE_LIMIT})")
    p.add_argument("-D", "--pop-drop-dist", dest="pop_drop_dist", type=parse_time, metavar="TIME",
                   default=parse_time(config.POP_DROP_DIST),
                   help=f"Ignore drops this close after a pop (default {config.POP_DROP_DIST})")
    p.add_argument("-m", "--min-dupes", dest="min_dupes", type=_count, metavar="N",
                   default=config.MIN_DUPES,
                   help=f"Minimum length of a run of identical samples (default {config.MIN_DUPES})")
    p.add_argument("-w", "--window-size", dest="window_size", type=_count, metavar="N",
                   default=config.WINDOW_SIZE,
                   help=f"Samples of context kept for reports, at least {MIN_WINDOW_SIZE} (default {config.WINDOW_SIZE})")

    viz = p.add_argument_group("visualization")
    viz.add_argument("-V", "--visualize", action="store_true", help="Also write a PNG image of every defect")
    viz.add_argument("--image-size", dest="image_options", type=parse_image_options, metavar="WIDTH[xHEIGHT]",
                     default=parse_image_options(None),
                     help=f"Pixels per sample (default {config.IMAGE_SAMPLE_WIDTH}x{config.IMAGE_SAMPLE_HEIGHT})")
    viz.add_argument("--image-dir", dest="image_dir", default=config.IMAGE_DIR, metavar="DIR",
                     help="Directory for PNG images (default: current directory)")

    out = p.add_argument_group("output")
    out.add_argument("--jsonl", type=str, metavar="PATH", default=None,
                     help="Also append every report event as line-delimited JSON to PATH")
    out.add_argument("--log-level", dest="log_level", default=None,
                     choices=["DEBUG", "INFO", "WARNING", "ERROR"], type=str.upper,
                     help="Diagnostic log level (default WARNING, or $RIPCHECK_LOG_LEVEL)")
    out.add_argument("--log-json", dest="log_json", default=None, metavar="PATH",
                     help="Also write diagnostics as JSON lines to PATH")
    return p


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    if argv is None:
        argv = sys.argv[1:]

    p = build_parser()
    args = p.parse_args(argv)

    if args.min_dupes <= 1:
        p.error(f"Illegal value for --min-dupes: {args.min_dupes}")
    if args.max_bad_areas is not None and args.max_bad_areas == 0:
        p.error("Illegal value for --max-bad-areas: 0")
    if args.window_size < MIN_WINDOW_SIZE:
        p.error(f"Illegal value for --window-size (minimum is {MIN_WINDOW_SIZE}): {args.window_size}")

    return args


def settings_from_args(args: argparse.Namespace) -> ScanSettings:
    return ScanSettings(
        max_time=args.max_time,
        intro_length=args.intro_length,
        outro_length=args.outro_length,
        pop_drop_dist=args.pop_drop_dist,
        pop_limit=args.pop_limit,
        drop_limit=args.drop_limit,
        dupe_limit=args.dupe_limit,
        min_dupes=args.min_dupes,
        max_bad_areas=args.max_bad_areas,
        window_size=args.window_size,
    )


def build_reporter(args: argparse.Namespace) -> Reporter:
    reporters: List[Reporter] = [TextReporter()]
    if args.visualize:
        reporters.append(ImageReporter(args.image_options, args.image_dir))
    if args.jsonl:
        reporters.append(JsonlReporter(args.jsonl))
    if len(reporters) == 1:
        return reporters[0]
    return FanoutReporter(*reporters)


def run(args: argparse.Namespace) -> int:
    """Scan every file named on the command line and return the exit code."""
    configure_logging(level=args.log_level, json_file=args.log_json)
    reporter = build_reporter(args)
    try:
        return run_files(args.files, settings_from_args(args), reporter)
    finally:
        reporter.close()


def main(argv: Optional[List[str]] = None) -> int:
    return run(parse_args(argv))


if __name__ == "__main__":
    sys.exit(main())
