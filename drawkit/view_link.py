"""Keeping two views in step: size, zoom and scroll position."""

from __future__ import annotations

import enum
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Callable, Iterator, List

from drawkit.view_settings import ViewSettings


class Link(enum.IntFlag):
    """Which axes of a view property are shared."""

    NONE = 0x00
    VERTICAL = 0x01
    HORIZONTAL = 0x02
    BOTH = 0x03


def is_horizontal(link: Link) -> bool:
    return bool(Link(link) & Link.HORIZONTAL)


def is_vertical(link: Link) -> bool:
    return bool(Link(link) & Link.VERTICAL)


@dataclass
class LinkOptions:
    """The axes on which scale, position and size are linked."""

    scale: Link = Link.BOTH
    position: Link = Link.BOTH
    size: Link = Link.BOTH

    def set_all(self, link: Link) -> LinkOptions:
        self.scale = link
        self.position = link
        self.size = link
        return self

    def set_scale(self, link: Link) -> LinkOptions:
        self.scale = link
        return self

    def set_position(self, link: Link) -> LinkOptions:
        self.position = link
        return self

    def set_size(self, link: Link) -> LinkOptions:
        self.size = link
        return self


class ViewLink:
    """Mirrors changes of one view's settings onto another, both ways."""

    def __init__(
            self,
            first: ViewSettings,
            second: ViewSettings,
            options: LinkOptions | None = None):
        self._first = first
        self._second = second
        self._options = options if options is not None else LinkOptions()

        self._ignore_size = False
        self._ignore_scale = False
        self._ignore_position = False

        self._unsubscribers: List[Callable[[], None]] = []

        options = self._options

        if is_horizontal(options.size):
            self._watch("view_size.width", self._on_first_view_width,
                        self._on_second_view_width)

        if is_horizontal(options.scale):
            self._watch("scale.horizontal", self._on_first_scale_horizontal,
                        self._on_second_scale_horizontal)

        if is_horizontal(options.position):
            self._watch("view_position.x", self._on_first_position_x,
                        self._on_second_position_x)

        if is_vertical(options.size):
            self._watch("view_size.height", self._on_first_view_height,
                        self._on_second_view_height)

        if is_vertical(options.scale):
            self._watch("scale.vertical", self._on_first_scale_vertical,
                        self._on_second_scale_vertical)

        if is_vertical(options.position):
            self._watch("view_position.y", self._on_first_position_y,
                        self._on_second_position_y)

    def close(self) -> None:
        """Stop linking the two views."""
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers.clear()

    def __enter__(self) -> ViewLink:
        return self

    def __exit__(self, *args) -> None:
        self.close()

    def _watch(
            self,
            name: str,
            on_first: Callable[[object], None],
            on_second: Callable[[object], None]) -> None:
        self._unsubscribers.append(self._first.subscribe(name, on_first))
        self._unsubscribers.append(self._second.subscribe(name, on_second))

    @contextmanager
    def _guard(self, attribute: str, target: ViewSettings) -> Iterator[None]:
        setattr(self, attribute, True)
        try:
            with target.bypassed():
                yield
        finally:
            setattr(self, attribute, False)

    # Size

    def _copy_width(self, target: ViewSettings, width: int) -> None:
        if self._ignore_size:
            return
        with self._guard("_ignore_size", target):
            if width != target.view_size.width:
                target.set_view_width(width)

    def _copy_height(self, target: ViewSettings, height: int) -> None:
        if self._ignore_size:
            return
        with self._guard("_ignore_size", target):
            if height != target.view_size.height:
                target.set_view_height(height)

    def _on_first_view_width(self, width: int) -> None:
        self._copy_width(self._second, width)

    def _on_second_view_width(self, width: int) -> None:
        self._copy_width(self._first, width)

    def _on_first_view_height(self, height: int) -> None:
        self._copy_height(self._second, height)

    def _on_second_view_height(self, height: int) -> None:
        self._copy_height(self._first, height)

    # Scale

    def _copy_horizontal_scale(self, target: ViewSettings, scale: float) -> None:
        if self._ignore_scale:
            return
        with self._guard("_ignore_scale", target):
            if scale != target.scale.horizontal:
                target.set_horizontal_zoom(scale)
                if not is_horizontal(self._options.position):
                    # The horizontal position of the linked view is not
                    # adjusted by the link, so recentre it.
                    target.recenter_horizontal_view()

    def _copy_vertical_scale(self, target: ViewSettings, scale: float) -> None:
        if self._ignore_scale:
            return
        with self._guard("_ignore_scale", target):
            if scale != target.scale.vertical:
                target.set_vertical_zoom(scale)
                if not is_vertical(self._options.position):
                    # The vertical position of the linked view is not
                    # adjusted by the link, so recentre it.
                    target.recenter_vertical_view()

    def _on_first_scale_horizontal(self, scale: float) -> None:
        self._copy_horizontal_scale(self._second, scale)

    def _on_second_scale_horizontal(self, scale: float) -> None:
        self._copy_horizontal_scale(self._first, scale)

    def _on_first_scale_vertical(self, scale: float) -> None:
        self._copy_vertical_scale(self._second, scale)

    def _on_second_scale_vertical(self, scale: float) -> None:
        self._copy_vertical_scale(self._first, scale)

    # Position

    def _copy_position_x(
            self, source: ViewSettings, target: ViewSettings, position: int) -> None:
        if self._ignore_position:
            return
        with self._guard("_ignore_position", target):
            difference = target.screen_position.x - source.screen_position.x
            value = position + difference
            if value != target.view_position.x:
                target.set_view_position_x(value)

    def _copy_position_y(
            self, source: ViewSettings, target: ViewSettings, position: int) -> None:
        if self._ignore_position:
            return
        with self._guard("_ignore_position", target):
            difference = target.screen_position.y - source.screen_position.y
            value = position + difference
            if value != target.view_position.y:
                target.set_view_position_y(value)

    def _on_first_position_x(self, position: int) -> None:
        self._copy_position_x(self._first, self._second, position)

    def _on_second_position_x(self, position: int) -> None:
        self._copy_position_x(self._second, self._first, position)

    def _on_first_position_y(self, position: int) -> None:
        self._copy_position_y(self._first, self._second, position)

    def _on_second_position_y(self, position: int) -> None:
        self._copy_position_y(self._second, self._first, position)