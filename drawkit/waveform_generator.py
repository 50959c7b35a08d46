"""Colouring waveform level maps and generating them on a worker thread."""

from __future__ import annotations

import colorsys
import threading
from collections import deque
from dataclasses import dataclass, field, replace
from typing import Callable, Optional

import numpy as np

from drawkit.geometry import Size
from drawkit.waveform import float_to_index, generate_waveform, resize


@dataclass(frozen=True)
class Hsv:
    """A colour as hue in degrees, saturation and value in [0, 1]."""

    hue: float = 0.0
    saturation: float = 1.0
    value: float = 1.0

    def to_vector(self) -> np.ndarray:
        return np.array([self.hue, self.saturation, self.value], dtype=np.float64)


@dataclass(frozen=True)
class ColorRange:
    """The span of the value channel used by a waveform gradient."""

    low: float = 0.2
    high: float = 1.0


@dataclass(frozen=True)
class WaveformColor:
    """Colours of the waveform and of highlighted columns."""

    color: Hsv = Hsv(hue=120.0, saturation=1.0, value=1.0)
    highlight_color: Hsv = Hsv(hue=0.0, saturation=1.0, value=1.0)
    range: ColorRange = ColorRange()
    count: int = 256


@dataclass(frozen=True)
class WaveformSettings:
    """Parameters of waveform generation and display."""

    enable: bool = False
    maximum_value: int = 255
    level_count: int = 256
    column_count: int = 256
    vertical_scale: float = 1.0
    color: WaveformColor = WaveformColor()


def _hsv_gradient(count: int, first: np.ndarray, last: np.ndarray) -> np.ndarray:
    steps = np.linspace(0.0, 1.0, count)[:, np.newaxis]
    hsv = first + (last - first) * steps
    rgb = np.array(
        [colorsys.hsv_to_rgb((hue / 360.0) % 1.0, sat, val) for hue, sat, val in hsv],
        dtype=np.float64).reshape(count, 3)
    return np.clip(np.round(rgb * 255.0), 0, 255).astype(np.uint8)


def make_waveform_color_range(waveform_color: WaveformColor, hsv: Hsv) -> np.ndarray:
    """A (count, 3) RGB gradient over the value range; entry zero is black."""
    if waveform_color.count < 1:
        raise ValueError("color count must be at least 1")

    first = replace(hsv, value=waveform_color.range.low)
    last = replace(hsv, value=waveform_color.range.high)

    gradient = _hsv_gradient(
        waveform_color.count, first.to_vector(), last.to_vector())

    # Zero will be black
    gradient[0] = 0
    return gradient


def make_waveform_colors(waveform_color: WaveformColor) -> np.ndarray:
    """The normal gradient stacked above the highlight gradient."""
    normal = make_waveform_color_range(waveform_color, waveform_color.color)
    highlight = make_waveform_color_range(
        waveform_color, waveform_color.highlight_color)
    return np.vstack((normal, highlight))


class WaveformColormap:
    """Turns data into an RGB waveform image."""

    def __init__(self, waveform_color: WaveformColor):
        self._map = make_waveform_colors(waveform_color)
        self._high = waveform_color.count - 1

    def _rescale(self, level_map: np.ndarray) -> np.ndarray:
        peak = int(level_map.max()) if level_map.size else 0

        if peak == 0:
            return np.zeros_like(level_map, dtype=np.uint16)

        scaled = np.round(level_map.astype(np.float64) * (self._high / peak))
        return scaled.astype(np.uint16)

    def filter(
            self,
            waveform_settings: WaveformSettings,
            displayed_size: Size,
            data: np.ndarray,
            highlights: Optional[np.ndarray] = None) -> np.ndarray:
        """Return a (height, width, 3) uint8 image of the waveform of data."""
        level_map = generate_waveform(
            data,
            waveform_settings.maximum_value,
            waveform_settings.level_count,
            waveform_settings.column_count)

        rescaled = self._rescale(level_map)

        if highlights is not None:
            highlights = np.asarray(highlights, dtype=bool).ravel()

            if highlights.any():
                per_column = (
                    np.float32(highlights.size)
                    / np.float32(waveform_settings.column_count))
                offset = np.uint16(waveform_settings.color.count)

                for column in range(rescaled.shape[1]):
                    begin = float_to_index(float(per_column * np.float32(column)))
                    end = min(
                        float_to_index(float(per_column * np.float32(column + 1))),
                        highlights.size)

                    if highlights[begin:end].any():
                        # Change this column to the highlight color.
                        rescaled[:, column] += offset

        resized = resize(rescaled, displayed_size, waveform_settings.vertical_scale)
        return self._map[resized]


@dataclass
class WaveformInput:
    """One frame queued for waveform generation."""

    waveform_settings: WaveformSettings = field(default_factory=WaveformSettings)
    image_size: Size = field(default_factory=Size)
    data: Optional[np.ndarray] = None
    highlights: Optional[np.ndarray] = None

    def __post_init__(self) -> None:
        if self.data is not None:
            self.data = np.array(self.data, copy=True)
        if self.highlights is not None:
            self.highlights = np.array(self.highlights, dtype=bool, copy=True)


class WaveformGenerator:
    """Generates waveform images on a worker thread and hands them to a callback."""

    def __init__(
            self,
            waveform_settings: WaveformSettings,
            image_size: Size,
            on_pixels: Callable[[np.ndarray], None]):
        self._condition = threading.Condition()
        self._settings = waveform_settings
        self._image_size = image_size
        self._on_pixels = on_pixels
        self._running = True
        self._inputs: deque[WaveformInput] = deque()
        self._colormap = WaveformColormap(waveform_settings.color)
        self._error: Optional[BaseException] = None
        self._thread = threading.Thread(target=self._run, daemon=True)
        self._thread.start()

    def __call__(self, data: np.ndarray, highlights: Optional[np.ndarray] = None) -> None:
        """Queue data for generation with the current settings and image size."""
        with self._condition:
            self._inputs.append(
                WaveformInput(self._settings, self._image_size, data, highlights))
            self._condition.notify()

    def shutdown(self) -> None:
        """Stop the worker; re-raise any error it met."""
        if self._thread.is_alive():
            with self._condition:
                self._running = False
                self._condition.notify()
            self._thread.join()

        error, self._error = self._error, None

        if error is not None:
            raise error

    def enabled(self) -> bool:
        with self._condition:
            return self._settings.enable

    def set_color(self, waveform_color: WaveformColor) -> None:
        colormap = WaveformColormap(waveform_color)
        with self._condition:
            self._colormap = colormap
            self._settings = replace(self._settings, color=waveform_color)

    def set_waveform_settings(self, waveform_settings: WaveformSettings) -> None:
        with self._condition:
            color_changed = waveform_settings.color != self._settings.color
            self._settings = waveform_settings

        if color_changed:
            self.set_color(waveform_settings.color)

    def set_image_size(self, image_size: Size) -> None:
        with self._condition:
            self._image_size = image_size

    def __enter__(self) -> WaveformGenerator:
        return self

    def __exit__(self, *args) -> None:
        self.shutdown()

    def _run(self) -> None:
        try:
            while True:
                with self._condition:
                    self._condition.wait_for(
                        lambda: bool(self._inputs) or not self._running)

                    if not self._running:
                        return

                    item = self._inputs.popleft()
                    colormap = self._colormap

                if item.image_size.width == 0 or item.image_size.height == 0:
                    continue

                pixels = colormap.filter(
                    item.waveform_settings,
                    item.image_size,
                    item.data,
                    item.highlights)

                if pixels.size == 0:
                    raise RuntimeError("Must not be empty")

                self._on_pixels(pixels)
        except BaseException as error:  # noqa: BLE001 - reported by shutdown
            with self._condition:
                self._error = error
                self._running = False