"""PNG rendering of the sample window around each detected event."""

from __future__ import annotations

import argparse
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Optional, TextIO, Tuple, Union

import numpy as np
from PIL import Image

from ripcheck import config
from ripcheck.report.base import Reporter
from ripcheck.util.logging import get_logger

if TYPE_CHECKING:  # pragma: no cover - type hint only
    from ripcheck.scan.context import ScanContext

DEFAULT_FILENAME_TEMPLATE = "{basename}_sample_{sample}_channel_{channel}_{kind}.png"

BACKGROUND = (255, 255, 255)
MARK_BACKGROUND = (255, 220, 96)
MARK_BAR = (255, 0, 0)
BAR = (0, 0, 255)
ZERO_LINE = (127, 127, 127)

log = get_logger(__name__)


@dataclass(frozen=True)
class ImageOptions:
    sample_width: int = config.IMAGE_SAMPLE_WIDTH
    sample_height: int = config.IMAGE_SAMPLE_HEIGHT
    filename_template: str = DEFAULT_FILENAME_TEMPLATE


def parse_image_options(spec: Optional[str]) -> ImageOptions:
    """Parse 'WIDTH' or 'WIDTHxHEIGHT' (pixels per sample); empty means defaults."""
    if spec is None or not str(spec).strip():
        return ImageOptions()
    text = str(spec).strip().lower()
    width_text, sep, height_text = text.partition("x")
    try:
        width = int(width_text)
        height = int(height_text) if sep else config.IMAGE_SAMPLE_HEIGHT
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"Invalid image size '{spec}'") from exc
    if width <= 0 or height <= 0:
        raise argparse.ArgumentTypeError(f"Image size must be positive: '{spec}'")
    return ImageOptions(sample_width=width, sample_height=height)


def image_filename(template: str, filename: str, sample: int, channel: int, kind: str, first_sample: int) -> str:
    """Expand the output file name template for one event."""
    basename = os.path.basename(filename.replace("\\", "/")) or "stdin"
    stem, _ = os.path.splitext(basename)
    return template.format(
        basename=basename,
        stem=stem,
        sample=sample,
        first_sample=first_sample,
        channel=channel,
        kind=kind,
    )


def render_window(
    values: np.ndarray,
    max_value: int,
    mark: Tuple[int, int],
    sample_width: int,
    sample_height: int,
) -> np.ndarray:
    """Rasterize one channel of the window as an RGB array.

    ``values`` is newest first, the way the window stores it; the image puts
    the oldest sample on the left. ``mark`` is an inclusive range of window
    offsets drawn highlighted.
    """
    size = len(values)
    zero = sample_height
    height = sample_height * 2 + 1
    width = sample_width * size
    img = np.empty((height, width, 3), dtype=np.uint8)
    img[:, :] = BACKGROUND
    scale = max(max_value, 1)

    for offset in range(size):
        x = (size - 1 - offset) * sample_width
        columns = slice(x, x + sample_width)
        marked = mark[0] <= offset <= mark[1]
        if marked:
            img[:, columns] = MARK_BACKGROUND
        bar = int(int(values[offset]) * sample_height / scale)
        bar = max(-sample_height, min(sample_height, bar))
        if bar >= 0:
            rows = slice(zero - bar, zero + 1)
        else:
            rows = slice(zero, zero - bar + 1)
        img[rows, columns] = MARK_BAR if marked else BAR

    img[zero, :] = ZERO_LINE
    return img


class ImageReporter(Reporter):
    """Write a PNG of the affected channel's window for every event."""

    def __init__(
        self,
        options: Optional[ImageOptions] = None,
        output_dir: Union[str, Path, None] = None,
        out: Optional[TextIO] = None,
    ):
        self.options = options or ImageOptions()
        self.output_dir = Path(output_dir if output_dir is not None else config.IMAGE_DIR)
        self.out = out if out is not None else sys.stdout
        self.written: list = []

    def _write(self, context: "ScanContext", channel: int, sample: int, kind: str, mark: Tuple[int, int], first: int) -> None:
        opts = self.options
        values = context.window.as_array()[:, channel]
        img = render_window(values, context.fmt.max_value, mark, opts.sample_width, opts.sample_height)
        name = image_filename(opts.filename_template, context.filename, sample, channel, kind, first)
        path = self.output_dir / name
        try:
            self.output_dir.mkdir(parents=True, exist_ok=True)
            Image.fromarray(img).save(path, "PNG")
        except OSError as exc:
            log.warning("Cannot write image %s: %s", path, exc, extra={"wav_file": context.filename})
            return
        self.written.append(path)
        print(f"written image: {path}", file=self.out)

    def possible_pop(self, context: "ScanContext", channel: int, sample: int) -> None:
        location = context.pop_locations[channel]
        self._write(context, channel, sample, "pop", (2, 2), location)

    def possible_drop(self, context: "ScanContext", channel: int, sample: int, dropped_sample: int) -> None:
        self._write(context, channel, sample, "drop", (1, 1), dropped_sample)

    def dupes(self, context: "ScanContext", channel: int, sample: int) -> None:
        start = context.dupe_locations[channel]
        self._write(context, channel, sample, "dupes", (1, sample - start), start)
