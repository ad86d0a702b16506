"""Drag, lock, and visibility state for the floating timer widget."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Optional

DEFAULT_POSITION: tuple[int, int] = (20, 80)
DEFAULT_WIDGET_SIZE: tuple[int, int] = (200, 200)
DEFAULT_VIEWPORT: tuple[int, int] = (1280, 800)


@dataclass(frozen=True)
class WidgetState:
    """Immutable presentation state published to the UI."""
    x: int
    y: int
    dragging: bool
    locked: bool
    visible: bool
    viewport_width: int
    viewport_height: int
    widget_width: int
    widget_height: int

    def to_dict(self) -> dict[str, object]:
        return {
            "x": self.x,
            "y": self.y,
            "dragging": self.dragging,
            "locked": self.locked,
            "visible": self.visible,
            "viewport_width": self.viewport_width,
            "viewport_height": self.viewport_height,
            "widget_width": self.widget_width,
            "widget_height": self.widget_height,
        }


def _clamp(value: int, upper: int) -> int:
    # A viewport smaller than the widget pins it to the origin.
    return max(0, min(value, max(0, upper)))


class FloatingWidgetController:
    """Tracks the widget's on-screen position; has no effect on timing."""

    def __init__(
        self,
        *,
        viewport: tuple[int, int] = DEFAULT_VIEWPORT,
        widget_size: tuple[int, int] = DEFAULT_WIDGET_SIZE,
        position: tuple[int, int] = DEFAULT_POSITION,
        logger: Optional[logging.Logger] = None,
    ):
        self._viewport_width, self._viewport_height = (int(v) for v in viewport)
        self._widget_width, self._widget_height = (int(v) for v in widget_size)
        if self._widget_width <= 0 or self._widget_height <= 0:
            raise ValueError("widget_size must be positive")
        self._logger = logger or logging.getLogger("widget")
        self._lock = threading.Lock()
        self._x, self._y = self._clamped(int(position[0]), int(position[1]))
        self._pointer: Optional[tuple[int, int]] = None
        self._locked = False
        self._visible = True

    def state(self) -> WidgetState:
        with self._lock:
            return self._state_locked()

    def drag_start(self, x: int, y: int) -> WidgetState:
        with self._lock:
            if not self._locked:
                self._pointer = (int(x), int(y))
            return self._state_locked()

    def drag_move(self, x: int, y: int) -> WidgetState:
        with self._lock:
            if self._pointer is None:
                return self._state_locked()
            last_x, last_y = self._pointer
            x, y = int(x), int(y)
            self._pointer = (x, y)
            self._x, self._y = self._clamped(self._x + x - last_x, self._y + y - last_y)
            return self._state_locked()

    def drag_end(self) -> WidgetState:
        with self._lock:
            self._pointer = None
            return self._state_locked()

    def toggle_lock(self) -> WidgetState:
        with self._lock:
            self._locked = not self._locked
            if self._locked:
                self._pointer = None
            self._logger.debug("Widget %s", "locked" if self._locked else "unlocked")
            return self._state_locked()

    def toggle_visible(self) -> WidgetState:
        with self._lock:
            self._visible = not self._visible
            if not self._visible:
                self._pointer = None
            self._logger.debug("Widget %s", "shown" if self._visible else "hidden")
            return self._state_locked()

    def resize_viewport(self, width: int, height: int) -> WidgetState:
        with self._lock:
            self._viewport_width = max(0, int(width))
            self._viewport_height = max(0, int(height))
            self._x, self._y = self._clamped(self._x, self._y)
            return self._state_locked()

    def _clamped(self, x: int, y: int) -> tuple[int, int]:
        return (
            _clamp(x, self._viewport_width - self._widget_width),
            _clamp(y, self._viewport_height - self._widget_height),
        )

    def _state_locked(self) -> WidgetState:
        return WidgetState(
            x=self._x,
            y=self._y,
            dragging=self._pointer is not None,
            locked=self._locked,
            visible=self._visible,
            viewport_width=self._viewport_width,
            viewport_height=self._viewport_height,
            widget_width=self._widget_width,
            widget_height=self._widget_height,
        )
