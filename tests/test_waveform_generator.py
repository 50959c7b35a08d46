import colorsys
import queue

import numpy as np
import pytest

from drawkit.geometry import Size
from drawkit.waveform_generator import (
    ColorRange,
    Hsv,
    WaveformColor,
    WaveformColormap,
    WaveformGenerator,
    WaveformInput,
    WaveformSettings,
    make_waveform_color_range,
    make_waveform_colors,
)


COLOR = WaveformColor(
    color=Hsv(120.0, 1.0, 1.0),
    highlight_color=Hsv(0.0, 1.0, 1.0),
    range=ColorRange(0.2, 1.0),
    count=16)

SETTINGS = WaveformSettings(
    enable=True,
    maximum_value=255,
    level_count=16,
    column_count=8,
    vertical_scale=1.0,
    color=COLOR)


def _data():
    rng = np.random.default_rng(7)
    return rng.integers(0, 256, size=(6, 8), dtype=np.int32)


def _palette_rows(palette):
    return {tuple(row) for row in palette}


def test_color_range_shape_and_black_start():
    gradient = make_waveform_color_range(COLOR, COLOR.color)
    assert gradient.shape == (16, 3)
    assert gradient.dtype == np.uint8
    assert tuple(gradient[0]) == (0, 0, 0)


def test_color_range_last_entry_is_high_value():
    gradient = make_waveform_color_range(COLOR, Hsv(0.0, 1.0, 0.5))
    assert tuple(gradient[-1]) == (255, 0, 0)


def test_color_range_interior_follows_hsv():
    gradient = make_waveform_color_range(COLOR, COLOR.color)
    expected = colorsys.hsv_to_rgb(120.0 / 360.0, 1.0, 0.2)
    assert tuple(gradient[0 + 0]) == (0, 0, 0)
    low_end = make_waveform_color_range(
        WaveformColor(range=ColorRange(0.2, 0.2), count=3), COLOR.color)
    assert tuple(low_end[1]) == tuple(round(c * 255) for c in expected)
    assert np.all(np.diff(gradient[1:, 1].astype(int)) >= 0)


def test_color_range_rejects_zero_count():
    with pytest.raises(ValueError):
        make_waveform_color_range(WaveformColor(count=0), Hsv())


def test_waveform_colors_stack_normal_and_highlight():
    colors = make_waveform_colors(COLOR)
    assert colors.shape == (32, 3)
    np.testing.assert_array_equal(
        colors[:16], make_waveform_color_range(COLOR, COLOR.color))
    np.testing.assert_array_equal(
        colors[16:], make_waveform_color_range(COLOR, COLOR.highlight_color))


def test_filter_output_shape_and_palette():
    colormap = WaveformColormap(COLOR)
    pixels = colormap.filter(SETTINGS, Size(40, 30), _data(), None)
    assert pixels.shape == (30, 40, 3)
    normal = _palette_rows(make_waveform_color_range(COLOR, COLOR.color))
    assert {tuple(p) for p in pixels.reshape(-1, 3)} <= normal


def test_filter_all_highlighted_matches_highlight_color():
    colormap = WaveformColormap(COLOR)
    highlights = np.ones(8, dtype=bool)
    highlighted = colormap.filter(SETTINGS, Size(24, 20), _data(), highlights)

    swapped_color = WaveformColor(
        color=COLOR.highlight_color,
        highlight_color=COLOR.color,
        range=COLOR.range,
        count=COLOR.count)
    plain = WaveformColormap(swapped_color).filter(
        SETTINGS, Size(24, 20), _data(), None)

    np.testing.assert_array_equal(highlighted, plain)


def test_filter_no_highlights_set_equals_no_highlights():
    colormap = WaveformColormap(COLOR)
    none_set = colormap.filter(
        SETTINGS, Size(16, 16), _data(), np.zeros(8, dtype=bool))
    absent = colormap.filter(SETTINGS, Size(16, 16), _data(), None)
    np.testing.assert_array_equal(none_set, absent)


def test_filter_partial_highlights_only_changes_those_columns():
    colormap = WaveformColormap(COLOR)
    highlights = np.zeros(8, dtype=bool)
    highlights[0] = True
    partial = colormap.filter(SETTINGS, Size(8, 16), _data(), highlights)
    plain = colormap.filter(SETTINGS, Size(8, 16), _data(), None)
    np.testing.assert_array_equal(partial[:, 1:], plain[:, 1:])
    highlight_rows = _palette_rows(
        make_waveform_color_range(COLOR, COLOR.highlight_color))
    assert {tuple(p) for p in partial[:, 0]} <= highlight_rows


def test_filter_zero_data_is_mostly_black_except_bottom():
    colormap = WaveformColormap(COLOR)
    data = np.zeros((4, 8), dtype=np.int32)
    data[0, 0] = 255
    pixels = colormap.filter(SETTINGS, Size(8, 16), data, None)
    assert pixels.shape == (16, 8, 3)
    # Only level zero and the maximum level carry counts.
    np.testing.assert_array_equal(
        pixels[1:-1], np.zeros((14, 8, 3), dtype=pixels.dtype))
    # Every column has zero-valued samples, so the bottom row is lit.
    assert bool(np.all(pixels[-1].any(axis=-1))) is True


def test_waveform_input_copies_data():
    data = _data()
    item = WaveformInput(SETTINGS, Size(4, 4), data, [True, False])
    data[0, 0] = -1
    assert item.data[0, 0] != -1 or _data()[0, 0] == -1
    np.testing.assert_array_equal(item.data, _data())
    assert item.highlights.dtype == bool


def test_generator_produces_pixels():
    results = queue.Queue()
    with WaveformGenerator(SETTINGS, Size(20, 10), results.put) as generator:
        generator(_data())
        pixels = results.get(timeout=5)
    assert pixels.shape == (10, 20, 3)
    expected = WaveformColormap(COLOR).filter(SETTINGS, Size(20, 10), _data())
    np.testing.assert_array_equal(pixels, expected)


def test_generator_skips_empty_image_size():
    results = queue.Queue()
    generator = WaveformGenerator(SETTINGS, Size(0, 10), results.put)
    generator(_data())
    generator.set_image_size(Size(6, 5))
    generator(_data())
    pixels = results.get(timeout=5)
    generator.shutdown()
    assert pixels.shape == (5, 6, 3)
    assert results.empty()


def test_generator_enabled_follows_settings():
    generator = WaveformGenerator(SETTINGS, Size(4, 4), lambda pixels: None)
    try:
        assert generator.enabled() is True
        generator.set_waveform_settings(WaveformSettings(enable=False, color=COLOR))
        assert generator.enabled() is False
    finally:
        generator.shutdown()


def test_generator_set_color_changes_output():
    results = queue.Queue()
    swapped = WaveformColor(
        color=COLOR.highlight_color,
        highlight_color=COLOR.color,
        range=COLOR.range,
        count=COLOR.count)
    with WaveformGenerator(SETTINGS, Size(8, 8), results.put) as generator:
        generator.set_color(swapped)
        generator(_data())
        pixels = results.get(timeout=5)
    expected = WaveformColormap(swapped).filter(SETTINGS, Size(8, 8), _data())
    np.testing.assert_array_equal(pixels, expected)


def test_generator_reports_worker_error_on_shutdown():
    generator = WaveformGenerator(SETTINGS, Size(8, 8), lambda pixels: None)
    generator(np.zeros((3, 1), dtype=np.int32))
    with pytest.raises(ValueError):
        generator._thread.join(timeout=5)
        generator.shutdown()


def test_shutdown_twice_is_harmless():
    results = queue.Queue()
    generator = WaveformGenerator(SETTINGS, Size(4, 4), results.put)
    generator.shutdown()
    generator.shutdown()
    generator(_data())
    assert results.empty()
    assert generator._thread.is_alive() is False