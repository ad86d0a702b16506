from .controller import (
    DEFAULT_POSITION,
    DEFAULT_VIEWPORT,
    DEFAULT_WIDGET_SIZE,
    FloatingWidgetController,
    WidgetState,
)

__all__ = [
    "DEFAULT_POSITION",
    "DEFAULT_VIEWPORT",
    "DEFAULT_WIDGET_SIZE",
    "FloatingWidgetController",
    "WidgetState",
]
