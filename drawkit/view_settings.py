"""The view model shared by a canvas: zoom, scrolling and image geometry."""

from __future__ import annotations

import math
from contextlib import contextmanager
from dataclasses import replace
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple

from drawkit.geometry import Point, Scale, Size

DEFAULT_WIDTH = 1920
DEFAULT_HEIGHT = 1080

_FIELDS: Dict[str, Tuple[str, ...]] = {
    "screen_position": ("x", "y"),
    "image_size": ("width", "height"),
    "view_size": ("width", "height"),
    "window_size": ("width", "height"),
    "virtual_size": ("width", "height"),
    "view_position": ("x", "y"),
    "image_center_pixel": ("x", "y"),
    "scale": ("horizontal", "vertical"),
    "link_zoom": (),
    "bypass": (),
}

_NAMES = frozenset(
    list(_FIELDS)
    + [f"{name}.{part}" for name, parts in _FIELDS.items() for part in parts])

Callback = Callable[[Any], None]


class ViewSettings:
    """Keeps view position, zoom and virtual size consistent with each other.

    Observers subscribe to a field ("view_position") or to one of its
    components ("view_position.x"); they are called with the new value each
    time it is set.
    """

    def __init__(
            self,
            image_size: Optional[Size] = None,
            view_size: Optional[Size] = None,
            window_size: Optional[Size] = None,
            minimum_scale: Optional[Scale] = None):
        default = Size(DEFAULT_WIDTH, DEFAULT_HEIGHT)

        self._screen_position = Point(0, 0)
        self._image_size = image_size or default
        self._view_size = view_size or default
        self._window_size = window_size or default
        self._virtual_size = default
        self._view_position = Point(0, 0)
        self._image_center_pixel = Point(DEFAULT_WIDTH / 2.0, DEFAULT_HEIGHT / 2.0)
        self._scale = Scale(1.0, 1.0)
        self._link_zoom = True
        self._bypass = False
        self._minimum_scale = minimum_scale or Scale(0.1, 0.1)

        self._ignore_zoom = False
        self._ignore_view_position = False
        self._ignore_size = False

        self._observers: Dict[str, List[Callback]] = {}

        self._component_handlers: Dict[Tuple[str, str], Callback] = {
            ("view_position", "x"): self._on_view_position_x,
            ("view_position", "y"): self._on_view_position_y,
            ("view_size", "width"): self._on_view_width,
            ("view_size", "height"): self._on_view_height,
            ("scale", "horizontal"): self._on_horizontal_zoom,
            ("scale", "vertical"): self._on_vertical_zoom,
        }

        self._group_handlers: Dict[str, Callback] = {
            "image_size": self._on_image_size,
            "link_zoom": self._on_link_zoom,
        }

        self._reset_view(self._image_size, self._view_size)

    # Read-only state

    @property
    def screen_position(self) -> Point:
        return self._screen_position

    @property
    def image_size(self) -> Size:
        return self._image_size

    @property
    def view_size(self) -> Size:
        return self._view_size

    @property
    def window_size(self) -> Size:
        return self._window_size

    @property
    def virtual_size(self) -> Size:
        return self._virtual_size

    @property
    def view_position(self) -> Point:
        return self._view_position

    @property
    def image_center_pixel(self) -> Point:
        return self._image_center_pixel

    @property
    def scale(self) -> Scale:
        return self._scale

    @property
    def link_zoom(self) -> bool:
        return self._link_zoom

    @property
    def bypass(self) -> bool:
        return self._bypass

    @property
    def minimum_scale(self) -> Scale:
        return self._minimum_scale

    # Observers

    def subscribe(self, name: str, callback: Callback) -> Callable[[], None]:
        """Call callback whenever the named value is set; returns an unsubscriber."""
        if name not in _NAMES:
            raise ValueError(f"unknown view setting: {name}")

        callbacks = self._observers.setdefault(name, [])
        callbacks.append(callback)

        def unsubscribe() -> None:
            if callback in callbacks:
                callbacks.remove(callback)

        return unsubscribe

    def _notify(self, name: str, value: Any) -> None:
        for callback in list(self._observers.get(name, ())):
            callback(value)

    def _announce(self, name: str, components: Optional[Tuple[str, ...]] = None) -> None:
        value = getattr(self, "_" + name)

        for component in (_FIELDS[name] if components is None else components):
            part = getattr(value, component)
            handler = self._component_handlers.get((name, component))

            if handler is not None:
                handler(part)

            self._notify(f"{name}.{component}", part)

        group_handler = self._group_handlers.get(name)

        if group_handler is not None:
            group_handler(value)

        self._notify(name, value)

    def _assign(self, name: str, value: Any) -> None:
        setattr(self, "_" + name, value)
        self._announce(name)

    def _assign_component(self, name: str, component: str, part: Any) -> None:
        value = replace(getattr(self, "_" + name), **{component: part})
        setattr(self, "_" + name, value)
        self._announce(name, (component,))

    @contextmanager
    def _flag(self, attribute: str) -> Iterator[None]:
        setattr(self, attribute, True)
        try:
            yield
        finally:
            setattr(self, attribute, False)

    # Queries

    def get_logical_position(self, point: Point) -> Point:
        """The unscaled image coordinates of a point in the view."""
        logical = (point + self._view_position) / self._scale
        return Point(int(logical.x), int(logical.y))

    def _centered_view_position(self, view_size: Size) -> Point:
        scaled_center = self._image_center_pixel * self._scale
        half_view = view_size.to_point().as_float() / 2.0
        return (scaled_center - half_view).rounded()

    def _compute_image_center_pixel(self) -> Point:
        view_center = (
            self._view_position.as_float()
            + self._view_size.to_point().as_float() / 2.0)

        center = view_center / self._scale
        as_integers = center.floored()
        x, y = center.x, center.y

        if as_integers.x >= self._image_size.width:
            x = float(self._image_size.width - 1)
        elif as_integers.x < 0:
            x = 0.0

        if as_integers.y >= self._image_size.height:
            y = float(self._image_size.height - 1)
        elif as_integers.y < 0:
            y = 0.0

        return Point(x, y)

    # Commands

    def reset_zoom(self) -> None:
        """Return to unit zoom, centred on the image."""
        self._assign("scale", Scale(1.0, 1.0))
        self._reset_view(self._image_size, self._view_size)

    def fit_zoom(self) -> None:
        """Zoom so that the whole image fits the window."""
        image = self._image_size.as_float()
        window = self._window_size.as_float()
        ratio = window / image
        horizontal, vertical = ratio.width, ratio.height

        if self._link_zoom:
            horizontal = vertical = min(horizontal, vertical)

        with self._flag("_ignore_zoom"):
            minimum = self._minimum_scale
            self._minimum_scale = Scale(
                min(minimum.horizontal, horizontal),
                min(minimum.vertical, vertical))

            self._scale = Scale(horizontal, vertical)

            # Reset the image centre before the zoom is announced.
            self._reset_view(self._image_size, self._window_size)
            self._announce("scale")

    def recenter(self) -> None:
        """Centre the view on the middle of the image."""
        self._reset_view(self._image_size, self._window_size)

        with self._flag("_ignore_zoom"):
            self._announce("scale")

    def recenter_view(self, view_size: Optional[Size] = None) -> None:
        """Move the view so the image centre pixel is in its middle."""
        if self._ignore_view_position:
            return

        position = self._centered_view_position(
            self._view_size if view_size is None else view_size)

        with self._flag("_ignore_view_position"):
            self._assign("view_position", position)
            self.update_virtual_size()

    def recenter_horizontal_view(self) -> None:
        if self._ignore_view_position:
            return

        position = self._centered_view_position(self._view_size)

        with self._flag("_ignore_view_position"):
            self._assign_component("view_position", "x", position.x)
            self.update_virtual_size()

    def recenter_vertical_view(self) -> None:
        if self._ignore_view_position:
            return

        position = self._centered_view_position(self._view_size)

        with self._flag("_ignore_view_position"):
            self._assign_component("view_position", "y", position.y)
            self.update_virtual_size()

    def update_virtual_size(self) -> None:
        """Size the scrollable area to the scaled image and the view position."""
        width = int(math.floor(self._image_size.width * self._scale.horizontal))
        height = int(math.floor(self._image_size.height * self._scale.vertical))

        def adjust(position: int, virtual: int, view: int) -> int:
            if position > 0:
                # Off screen to the left or top; it must scroll back into view.
                return max(position + view, virtual)
            return virtual

        self._assign(
            "virtual_size",
            Size(
                adjust(self._view_position.x, width, self._view_size.width),
                adjust(self._view_position.y, height, self._view_size.height)))

    # Setters

    def set_view_position(self, point: Point) -> None:
        self._assign("view_position", Point(int(point.x), int(point.y)))

    def set_view_position_x(self, x: int) -> None:
        self._assign_component("view_position", "x", int(x))

    def set_view_position_y(self, y: int) -> None:
        self._assign_component("view_position", "y", int(y))

    def set_view_size(self, size: Size) -> None:
        self._assign("view_size", Size(int(size.width), int(size.height)))

    def set_view_width(self, width: int) -> None:
        self._assign_component("view_size", "width", int(width))

    def set_view_height(self, height: int) -> None:
        self._assign_component("view_size", "height", int(height))

    def set_image_size(self, size: Size) -> None:
        self._assign("image_size", Size(int(size.width), int(size.height)))

    def set_window_size(self, size: Size) -> None:
        self._assign("window_size", Size(int(size.width), int(size.height)))

    def set_screen_position(self, point: Point) -> None:
        self._assign("screen_position", Point(int(point.x), int(point.y)))

    def set_horizontal_zoom(self, value: float) -> None:
        value = max(float(value), self._minimum_scale.horizontal)
        self._assign_component("scale", "horizontal", value)

    def set_vertical_zoom(self, value: float) -> None:
        value = max(float(value), self._minimum_scale.vertical)
        self._assign_component("scale", "vertical", value)

    def set_link_zoom(self, linked: bool) -> None:
        self._assign("link_zoom", bool(linked))

    @contextmanager
    def bypassed(self) -> Iterator[ViewSettings]:
        """Suspend automatic recentring while the block runs."""
        self._assign("bypass", True)
        try:
            yield self
        finally:
            self._assign("bypass", False)

    # Handlers

    def _reset_view(self, image_size: Size, view_size: Size) -> None:
        if self._bypass:
            return

        self._assign("image_center_pixel", image_size.to_point().as_float() / 2.0)
        self.recenter_view(view_size)

    def _on_horizontal_zoom(self, value: float) -> None:
        if self._ignore_zoom or self._bypass:
            return

        if self._link_zoom:
            with self._flag("_ignore_zoom"):
                self._assign_component("scale", "vertical", value)

        self.recenter_view()

    def _on_vertical_zoom(self, value: float) -> None:
        if self._ignore_zoom or self._bypass:
            return

        if self._link_zoom:
            with self._flag("_ignore_zoom"):
                self._assign_component("scale", "horizontal", value)

        self.recenter_view()

    def _on_link_zoom(self, linked: bool) -> None:
        if linked:
            with self._flag("_ignore_zoom"):
                self._assign_component("scale", "vertical", self._scale.horizontal)

    def _on_view_position_x(self, _: int) -> None:
        if self._ignore_view_position:
            return

        center = self._compute_image_center_pixel()
        self._assign_component("image_center_pixel", "x", center.x)

        with self._flag("_ignore_view_position"):
            self.update_virtual_size()

    def _on_view_position_y(self, _: int) -> None:
        if self._ignore_view_position:
            return

        center = self._compute_image_center_pixel()
        self._assign_component("image_center_pixel", "y", center.y)

        with self._flag("_ignore_view_position"):
            self.update_virtual_size()

    def _on_image_size(self, image_size: Size) -> None:
        self._reset_view(image_size, self._view_size)

    def _on_view_width(self, _: int) -> None:
        center = self._compute_image_center_pixel()
        self._assign_component("image_center_pixel", "x", center.x)

        if self._ignore_size:
            return

        with self._flag("_ignore_size"):
            self.update_virtual_size()

    def _on_view_height(self, _: int) -> None:
        center = self._compute_image_center_pixel()
        self._assign_component("image_center_pixel", "y", center.y)

        if self._ignore_size:
            return

        with self._flag("_ignore_size"):
            self.update_virtual_size()