# visualization.py
"""
Handles the presentation of the plexus field using Pygame.

PygameSurface is the off-screen drawing target the frame engine renders into.
Visualizer owns the window: it presents the surface, draws the parameter
overlay and turns keyboard input into parameter edits.
"""
import io
import logging
import os
import time
import pygame
from typing import Optional, Tuple

from constants import (
    BACKGROUND_COLOR, TITLE, EXPORT_PREFIX, HUD_BACKGROUND_RGBA,
    HUD_TEXT_COLOR, HUD_SELECTED_COLOR
)
from parameters import PARAMETER_SPECS, ParameterStore, Parameters
from surface import HSLA, RGBA

# --- Data Contracts ---
#
# class PygameSurface (implements surface.DrawingSurface):
#   - canvas: pygame.Surface at physical resolution (logical size * ratio).
#   - Draw calls take logical coordinates and are scaled by the ratio.
#   - Connection lines go to an alpha layer that flush() composites.
#
# class Visualizer:
#   - __init__(self, width: int, height: int, fullscreen: bool = False):
#     - Side Effects: Initializes Pygame and creates the display window.
#       Raises SurfaceUnavailableError if no window can be created.
#
#   - handle_events(self, store: ParameterStore) -> bool:
#     - Outputs: False if the user has quit, True otherwise.
#     - Side Effects: Edits the store, records pending resize/export requests.


class SurfaceUnavailableError(RuntimeError):
    """Raised when no drawing surface can be acquired at startup."""


def _clamp(value: float, low: float, high: float) -> float:
    return min(max(float(value), low), high)


def hsla_to_color(hsla: HSLA) -> pygame.Color:
    hue, saturation, lightness, alpha = hsla
    hue = float(hue) % 360.0
    if hue >= 360.0:
        hue = 0.0
    color = pygame.Color(0, 0, 0)
    color.hsla = (
        hue,
        _clamp(saturation, 0, 100),
        _clamp(lightness, 0, 100),
        _clamp(alpha, 0, 1) * 100,
    )
    return color


class PygameSurface:
    """
    Off-screen raster target with a logical-to-physical pixel scale.
    """
    def __init__(self):
        self.scale = 1.0
        self.logical_size: Tuple[float, float] = (0.0, 0.0)
        self.canvas = pygame.Surface((1, 1), 0, 32)
        self.link_layer = pygame.Surface((1, 1), pygame.SRCALPHA, 32)
        self._overlays = {}

    def configure(self, width: float, height: float, device_pixel_ratio: float) -> None:
        size = (max(1, round(width * device_pixel_ratio)), max(1, round(height * device_pixel_ratio)))
        if size != self.canvas.get_size():
            # Like a browser canvas, resizing the buffer discards its contents.
            self.canvas = pygame.Surface(size, 0, 32)
            self.canvas.fill(BACKGROUND_COLOR)
            self.link_layer = pygame.Surface(size, pygame.SRCALPHA, 32)
            self._overlays.clear()
        self.scale = device_pixel_ratio
        self.logical_size = (width, height)
        logging.debug(f"Drawing buffer is {size[0]}x{size[1]} physical pixels (scale {device_pixel_ratio:g}).")

    def _point(self, x: float, y: float) -> Tuple[float, float]:
        return (x * self.scale, y * self.scale)

    def fill_rect(self, x: float, y: float, width: float, height: float, rgba: RGBA) -> None:
        left, top = self._point(x, y)
        size = (max(0, round(width * self.scale)), max(0, round(height * self.scale)))
        if size[0] == 0 or size[1] == 0:
            return
        key = (size, tuple(rgba))
        overlay = self._overlays.get(key)
        if overlay is None:
            r, g, b, alpha = rgba
            overlay = pygame.Surface(size, pygame.SRCALPHA, 32)
            overlay.fill((r, g, b, round(_clamp(alpha, 0, 1) * 255)))
            self._overlays[key] = overlay
        self.canvas.blit(overlay, (round(left), round(top)))

    def fill_circle(self, x: float, y: float, radius: float, hsla: HSLA) -> None:
        pygame.draw.circle(self.canvas, hsla_to_color(hsla), self._point(x, y), max(1.0, radius * self.scale))

    def stroke_line(self, x1: float, y1: float, x2: float, y2: float, hsla: HSLA, width: float) -> None:
        pygame.draw.line(
            self.link_layer, hsla_to_color(hsla),
            self._point(x1, y1), self._point(x2, y2),
            max(1, round(width * self.scale))
        )

    def flush(self) -> None:
        self.canvas.blit(self.link_layer, (0, 0))
        self.link_layer.fill((0, 0, 0, 0))

    def export_image(self, fmt: str = "png") -> bytes:
        buffer = io.BytesIO()
        pygame.image.save(self.canvas, buffer, f"frame.{fmt}")
        return buffer.getvalue()


def save_frame(surface: PygameSurface, directory: str) -> str:
    """Writes the current frame as a PNG and returns its path."""
    os.makedirs(directory, exist_ok=True)
    path = os.path.join(directory, f"{EXPORT_PREFIX}-{int(time.time() * 1000)}.png")
    with open(path, "wb") as f:
        f.write(surface.export_image("png"))
    logging.info(f"Exported current frame to {path}.")
    return path


class Visualizer:
    """
    Presents the field in a window and provides keyboard controls.
    """
    def __init__(self, width: int, height: int, fullscreen: bool = False):
        try:
            pygame.init()
            pygame.font.init()
            if fullscreen:
                display_info = pygame.display.Info()
                width, height = display_info.current_w, display_info.current_h
                self.screen = pygame.display.set_mode((width, height), pygame.FULLSCREEN)
            else:
                self.screen = pygame.display.set_mode((width, height), pygame.RESIZABLE)
        except pygame.error as e:
            logging.critical(f"Could not acquire a drawing surface: {e}")
            raise SurfaceUnavailableError(f"Could not create a {width}x{height} window: {e}") from e

        pygame.display.set_caption(TITLE)

        try:
            self.font_main = pygame.font.SysFont("Segoe UI", 14)
            self.font_main_bold = pygame.font.SysFont("Segoe UI", 14, bold=True)
        except pygame.error:
            logging.warning("Segoe UI font not found, falling back to default sans-serif.")
            self.font_main = pygame.font.SysFont(None, 18)
            self.font_main_bold = pygame.font.SysFont(None, 18, bold=True)

        self.parameter_names = list(PARAMETER_SPECS)
        self.selected = 0
        self.show_overlay = True
        self.pending_resize: Optional[Tuple[int, int]] = None
        self.export_requested = False

        logging.info(f"Visualizer initialized with Pygame display ({width}x{height}).")

    @property
    def window_size(self) -> Tuple[int, int]:
        return self.screen.get_size()

    def handle_events(self, store: ParameterStore) -> bool:
        """
        Processes pending window and keyboard events.

        Returns:
            bool: False if the application should exit, True otherwise.
        """
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                logging.info("Quit event received. Shutting down visualizer.")
                return False

            if event.type == pygame.VIDEORESIZE:
                self.pending_resize = (event.w, event.h)

            if event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    logging.info("ESC key pressed. Shutting down visualizer.")
                    return False
                elif event.key == pygame.K_h:
                    self.show_overlay = not self.show_overlay
                elif event.key == pygame.K_s:
                    self.export_requested = True
                elif event.key == pygame.K_UP:
                    self.selected = (self.selected - 1) % len(self.parameter_names)
                elif event.key == pygame.K_DOWN:
                    self.selected = (self.selected + 1) % len(self.parameter_names)
                elif event.key in (pygame.K_LEFT, pygame.K_RIGHT):
                    name = self.parameter_names[self.selected]
                    step = PARAMETER_SPECS[name].step
                    if event.mod & pygame.KMOD_SHIFT:
                        step *= 10
                    store.adjust(name, step if event.key == pygame.K_RIGHT else -step)
        return True

    def present(self, surface: PygameSurface, params: Parameters) -> None:
        frame = surface.canvas
        if frame.get_size() != self.window_size:
            frame = pygame.transform.smoothscale(frame, self.window_size)
        self.screen.blit(frame, (0, 0))
        if self.show_overlay:
            self._draw_overlay(params)
        pygame.display.flip()

    def _draw_overlay(self, params: Parameters):
        """Renders each parameter in its own transparent box, top-left."""
        padding = 8
        line_height = self.font_main.get_linesize()
        box_width = 240
        current_y = 20

        for index, name in enumerate(self.parameter_names):
            knob = PARAMETER_SPECS[name]
            value = getattr(params, name)
            if name == "gravity":
                display_value = f"{value:.0f} ({'Falling' if params.is_falling else 'Floating'})"
            else:
                display_value = f"{value:.0f}{knob.unit}"

            box = pygame.Surface((box_width, line_height + padding * 2), pygame.SRCALPHA)
            box.fill(HUD_BACKGROUND_RGBA)
            self.screen.blit(box, (20, current_y))

            color = HUD_SELECTED_COLOR if index == self.selected else HUD_TEXT_COLOR
            key_surf = self.font_main_bold.render(knob.label, True, color)
            value_surf = self.font_main.render(display_value, True, HUD_TEXT_COLOR)
            self.screen.blit(key_surf, (20 + padding, current_y + padding))
            self.screen.blit(value_surf, value_surf.get_rect(topright=(20 + box_width - padding, current_y + padding)))

            current_y += line_height + padding * 2 + 4

    def close(self):
        """Shuts down Pygame."""
        pygame.quit()
