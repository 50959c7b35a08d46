"""Building waveform level maps from image data and fitting them to a display."""

from __future__ import annotations

import math
import warnings

import numpy as np

from drawkit.geometry import Size


def float_to_index(value: float) -> int:
    """Round to the nearest index, halves away from zero."""
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def _round_half_away(values: np.ndarray) -> np.ndarray:
    return np.sign(values) * np.floor(np.abs(values) + 0.5)


def resize(source: np.ndarray, display_size: Size, vertical_scale: float) -> np.ndarray:
    """Stretch a waveform to the display size.

    Rows are anchored at the bottom of the display; a vertical scale above one
    pushes the top levels off the display.
    """
    source = np.asarray(source)
    source_rows, source_cols = source.shape

    if source_rows == 0 or source_cols == 0:
        raise ValueError("source waveform must not be empty")

    result = np.zeros(
        (int(display_size.height), int(display_size.width)), dtype=np.uint16)

    result_rows, result_cols = result.shape
    width_factor = result_cols / source_cols
    height_factor = vertical_scale * result_rows / source_rows

    column_spans = [
        (
            float_to_index(column * width_factor),
            min(float_to_index((column + 1) * width_factor), result_cols),
        )
        for column in range(source_cols)
    ]

    for row, values in enumerate(source):
        logical_row = source_rows - row - 1
        result_row = float_to_index(logical_row * height_factor)
        next_row = min(
            result_rows, float_to_index((logical_row + 1) * height_factor))

        if result_row >= next_row:
            # The vertical scale has pushed this row off of the display.
            continue

        target = result_rows - next_row
        block_height = next_row - result_row

        for (begin, end), value in zip(column_spans, values):
            if end > begin:
                result[target:target + block_height, begin:end] = value

    return result


def generate_waveform(
        data: np.ndarray,
        maximum_value: int,
        level_count: int,
        column_count: int) -> np.ndarray:
    """Count, for each output column, how many data values fall on each level.

    Row zero of the result holds the highest level, the last row level zero.
    """
    data = np.asarray(data)

    if data.ndim != 2:
        raise ValueError("data must be two-dimensional")

    if column_count < 2 or data.shape[1] < 2:
        raise ValueError("data and column_count need at least two columns")

    if level_count < 2:
        raise ValueError("level_count must be at least 2")

    maximum = level_count - 1

    column_divisor = np.float32(data.shape[1] - 1) / np.float32(column_count - 1)
    column_multiplier = np.float32(1.0) / column_divisor

    maximum_data = int(data.max())

    if maximum_data > maximum_value:
        warnings.warn(
            "data exceeds expected maximum value: "
            f"maximumValue: {maximum_value}, maximumData: {maximum_data}",
            RuntimeWarning,
            stacklevel=2)

        maximum_value = maximum_data

    if maximum == maximum_value:
        scaled = data.astype(np.int64)
    else:
        value_divisor = np.float32(maximum_value) / np.float32(maximum)
        value_multiplier = np.float32(1.0) / value_divisor
        scaled = _round_half_away(
            data.astype(np.float32) * value_multiplier).astype(np.int64)

    columns = np.arange(data.shape[1], dtype=np.float32) * column_multiplier
    column_indices = _round_half_away(columns).astype(np.int64)

    rows = maximum - scaled
    target_columns = np.broadcast_to(column_indices, scaled.shape)

    if rows.size and (rows.min() < 0 or rows.max() > maximum):
        raise IndexError("data value out of range of the waveform levels")

    result = np.zeros((level_count, column_count), dtype=np.uint16)
    np.add.at(result, (rows.ravel(), target_columns.ravel()), 1)

    return result