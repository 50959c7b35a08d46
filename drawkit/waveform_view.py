"""Guide lines and labels drawn over a waveform display."""

from __future__ import annotations

from typing import List, Sequence, Tuple

import numpy as np

_LINE_COUNT = 11
_LABEL_STEP = 10


def get_lines(image_height: int, vertical_scale: float) -> np.ndarray:
    """Row of each guide line, 0 % at the bottom, in 10 % steps of the levels.

    Lines pushed above the top of the image by the vertical scale are dropped.
    """
    height = np.float32(image_height - 1)
    scale = np.float32(vertical_scale)

    lines = np.linspace(
        np.float32(0.0), scale * height, _LINE_COUNT, dtype=np.float32)

    kept = lines[lines < height + np.float32(1.0)]
    flipped = kept * np.float32(-1.0) + height
    rounded = np.sign(flipped) * np.floor(np.abs(flipped) + np.float32(0.5))
    return rounded.astype(np.int64)


def partition_lines(lines: Sequence[int]) -> Tuple[List[int], List[int]]:
    """Split guide lines into the even ones (drawn heavy) and the odd ones."""
    values = [int(line) for line in lines]
    return values[0::2], values[1::2]


def line_labels(
        lines: Sequence[int],
        offset: int,
        text_height: int,
        height: int) -> List[Tuple[str, int]]:
    """Percentage labels and the top of their boxes, centred on each line.

    A label whose box would reach the bottom edge is left out.
    """
    half_height = text_height // 2
    labels = []

    for index, line in enumerate(lines):
        top = int(line) + offset - half_height
        bottom = top + text_height - 1

        if bottom >= height:
            # There is not enough room to draw this label.
            continue

        labels.append((str(index * _LABEL_STEP), top))

    return labels