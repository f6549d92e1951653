# surface.py
"""
The drawing target the frame engine renders into.

Coordinates passed to every method are logical pixels; the surface owns the
logical-to-physical scale. Colors are HSLA tuples with hue in degrees (any
value, wrapped by the surface), saturation and lightness in percent and alpha
in [0, 1]. `fill_rect` takes RGBA with alpha in [0, 1].
"""
from typing import Protocol, Tuple

HSLA = Tuple[float, float, float, float]
RGBA = Tuple[int, int, int, float]


class DrawingSurface(Protocol):
    def configure(self, width: float, height: float, device_pixel_ratio: float) -> None:
        """Resizes the physical buffer to logical size * ratio and sets the scale."""

    def fill_rect(self, x: float, y: float, width: float, height: float, rgba: RGBA) -> None:
        ...

    def fill_circle(self, x: float, y: float, radius: float, hsla: HSLA) -> None:
        ...

    def stroke_line(self, x1: float, y1: float, x2: float, y2: float, hsla: HSLA, width: float) -> None:
        ...

    def flush(self) -> None:
        """Completes the frame; called once after all draw calls of a tick."""

    def export_image(self, fmt: str = "png") -> bytes:
        ...
