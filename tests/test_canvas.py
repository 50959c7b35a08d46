import pytest

from drawkit.canvas import (
    PIXELS_PER_SCROLL_UNIT,
    CanvasViewOptions,
    Modifier,
    canvas_window_size,
    constrain_scroll,
    correct_center_pixel,
    logical_position,
    scroll_units,
)
from drawkit.geometry import Point, Scale, Size, get_maximum_view_position
from drawkit.view_settings import ViewSettings


def test_modifier_add_and_remove():
    held = Modifier(Modifier.CONTROL.value | Modifier.SHIFT.value)
    assert Modifier.CONTROL in held
    assert Modifier.SHIFT in held
    released = held & ~Modifier.CONTROL
    assert released == Modifier.SHIFT
    assert Modifier.CONTROL not in released


def test_canvas_view_options_defaults_and_chaining():
    options = CanvasViewOptions()
    assert options.use_dual_zoom is False
    assert options.display_controls is True

    result = options.set_use_dual_zoom(True).set_display_controls(False)
    assert result is options
    assert options.use_dual_zoom is True
    assert options.display_controls is False


def test_constrain_scroll_within_limits_unchanged():
    dx, dy = constrain_scroll(
        Point(50, 50), 10, -20, Size(100, 100), Size(300, 300))
    assert (dx, dy) == (10, -20)


def test_constrain_scroll_stops_at_origin():
    position = Point(50, 40)
    dx, dy = constrain_scroll(position, 80, 90, Size(100, 100), Size(300, 300))
    assert position.x - dx == 0
    assert position.y - dy == 0


def test_constrain_scroll_stops_at_maximum():
    position = Point(50, 40)
    view, virtual = Size(100, 100), Size(300, 250)
    dx, dy = constrain_scroll(position, -500, -500, view, virtual)
    maximum = get_maximum_view_position(view, virtual)
    assert Point(position.x - dx, position.y - dy) == maximum


@pytest.mark.parametrize("dx", [-400, -30, 0, 25, 400])
@pytest.mark.parametrize("dy", [-400, -10, 0, 15, 400])
def test_constrain_scroll_result_in_range(dx, dy):
    position = Point(60, 70)
    view, virtual = Size(120, 80), Size(400, 300)
    cdx, cdy = constrain_scroll(position, dx, dy, view, virtual)
    maximum = get_maximum_view_position(view, virtual)
    assert 0 <= position.x - cdx <= maximum.x
    assert 0 <= position.y - cdy <= maximum.y


def test_scroll_units_bounds():
    virtual = Size(1925, 1083)
    position = Point(347, 58)
    units, position_units = scroll_units(virtual, position)
    step = PIXELS_PER_SCROLL_UNIT
    assert units.width * step <= virtual.width < (units.width + 1) * step
    assert units.height * step <= virtual.height < (units.height + 1) * step
    assert position_units.x * step <= position.x < (position_units.x + 1) * step
    assert position_units.y * step <= position.y < (position_units.y + 1) * step


def test_scroll_units_truncate_toward_zero():
    _, position_units = scroll_units(Size(100, 100), Point(-15, 0))
    assert position_units == Point(-1, 0)


def test_correct_center_pixel_no_error():
    correction = correct_center_pixel(
        Point(10, 10), Size(20, 20), Point(20.0, 20.0), Scale(3.0, 3.0))
    assert correction == Point(0, 0)


def test_correct_center_pixel_small_error():
    correction = correct_center_pixel(
        Point(10, 10), Size(20, 20), Point(19.5, 20.0), Scale(2.0, 2.0))
    assert correction == Point(1, 0)


def test_correct_center_pixel_large_error_ignored():
    correction = correct_center_pixel(
        Point(10, 10), Size(20, 20), Point(25.0, 25.0), Scale(2.0, 2.0))
    assert correction == Point(0, 0)


def _extra():
    options = CanvasViewOptions().set_display_controls(False)
    return canvas_window_size(Size(0, 0), options)


def test_window_size_without_controls_adds_same_padding():
    extra = _extra()
    assert extra.width == extra.height
    assert extra.width > 0
    options = CanvasViewOptions().set_display_controls(False)
    result = canvas_window_size(Size(640, 480), options)
    assert result == Size(640, 480) + extra.width


def test_window_size_single_zoom():
    extra = _extra().width
    result = canvas_window_size(
        Size(100, 50), CanvasViewOptions(), controls_size=Size(200, 30))
    assert result == Size(200, 50 + 30) + extra


def test_window_size_dual_zoom():
    extra = _extra().width
    options = CanvasViewOptions().set_use_dual_zoom(True)
    result = canvas_window_size(
        Size(300, 40), options,
        controls_size=Size(200, 30),
        vertical_zoom_size=Size(25, 150))
    assert result == Size(300 + 25, 150 + 30) + extra


def test_window_size_requires_controls_size():
    with pytest.raises(ValueError):
        canvas_window_size(Size(100, 100), CanvasViewOptions())


def test_window_size_dual_zoom_requires_vertical_zoom_size():
    options = CanvasViewOptions().set_use_dual_zoom(True)
    with pytest.raises(ValueError):
        canvas_window_size(Size(100, 100), options, controls_size=Size(10, 10))


def test_logical_position_unit_scale_is_identity():
    settings = ViewSettings(image_size=Size(100, 100), view_size=Size(100, 100))
    assert logical_position(settings, Point(10, 20)) == Point(10, 20)


def test_logical_position_of_view_centre_is_image_centre():
    settings = ViewSettings(image_size=Size(100, 100), view_size=Size(100, 100))
    settings.set_horizontal_zoom(2.0)
    centre = settings.view_size.to_point() // 2
    result = logical_position(settings, centre)
    expected = settings.image_center_pixel
    assert result == Point(int(expected.x), int(expected.y))