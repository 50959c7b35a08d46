"""Canvas geometry: scrolling limits, centre correction and window sizing."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Optional, Tuple

from drawkit.geometry import Point, Scale, Size, get_maximum_view_position
from drawkit.view_settings import ViewSettings

PIXELS_PER_SCROLL_UNIT = 10

_MARGIN = 3
_GRID_SPACING = 3
_SCROLLBAR_PADDING = 20


class Modifier(enum.IntFlag):
    """Keyboard modifiers held while interacting with a canvas."""

    NONE = 0x00
    ALT = 0x01
    CONTROL = 0x02
    SHIFT = 0x04
    RAW_CONTROL = 0x10


@dataclass
class CanvasViewOptions:
    """How the controls around a canvas are laid out."""

    use_dual_zoom: bool = False
    display_controls: bool = True

    def set_use_dual_zoom(self, value: bool) -> CanvasViewOptions:
        self.use_dual_zoom = bool(value)
        return self

    def set_display_controls(self, value: bool) -> CanvasViewOptions:
        self.display_controls = bool(value)
        return self


def constrain_scroll(
        position: Point,
        dx: int,
        dy: int,
        view_size: Size,
        virtual_size: Size) -> Tuple[int, int]:
    """Limit a scroll by (dx, dy) so the view stays inside the virtual area.

    Scrolling by dx moves the view position by -dx.
    """
    maximum = get_maximum_view_position(view_size, virtual_size)

    if position.x - dx < 0:
        dx = position.x
    elif position.x - dx > maximum.x:
        dx = position.x - maximum.x

    if position.y - dy < 0:
        dy = position.y
    elif position.y - dy > maximum.y:
        dy = position.y - maximum.y

    return dx, dy


def scroll_units(virtual_size: Size, view_position: Point) -> Tuple[Size, Point]:
    """Scrollbar extent and position measured in scroll units."""
    return (
        virtual_size // PIXELS_PER_SCROLL_UNIT,
        view_position // PIXELS_PER_SCROLL_UNIT)


def correct_center_pixel(
        source_top_left: Point,
        source_size: Size,
        actual_center: Point,
        scale: Scale) -> Point:
    """Shift for the blit target that keeps the centre pixel steady while zooming.

    Rounding of the source region makes the apparent centre drift; when that
    drift is at most one pixel it is scaled and returned, otherwise no
    correction is made.
    """
    apparent = (
        source_top_left.as_float()
        + source_size.to_point().as_float() / 2.0)

    error = apparent - actual_center.as_float()

    if error.magnitude() <= 1.0:
        return (error * scale).rounded()

    return Point(0, 0)


def canvas_window_size(
        canvas_size: Size,
        options: CanvasViewOptions,
        controls_size: Optional[Size] = None,
        vertical_zoom_size: Optional[Size] = None) -> Size:
    """Window size needed to show a canvas of canvas_size with its controls."""
    if options.display_controls:
        if controls_size is None:
            raise ValueError("controls_size is required when controls are displayed")

        if options.use_dual_zoom:
            if vertical_zoom_size is None:
                raise ValueError(
                    "vertical_zoom_size is required with dual zoom")

            size = Size(
                max(canvas_size.width, controls_size.width)
                + vertical_zoom_size.width,
                max(canvas_size.height, vertical_zoom_size.height)
                + controls_size.height)
        else:
            size = Size(
                max(canvas_size.width, controls_size.width),
                canvas_size.height + controls_size.height)
    else:
        size = Size(canvas_size.width, canvas_size.height)

    extra = _GRID_SPACING + _MARGIN * 2 + _SCROLLBAR_PADDING
    return size + extra


def logical_position(view_settings: ViewSettings, point: Point) -> Point:
    """Image coordinates under a mouse position, using the current zoom."""
    return view_settings.get_logical_position(point)