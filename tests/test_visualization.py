import logging
import os

import pygame
import pytest

from parameters import ParameterStore
from visualization import (
    PygameSurface, SurfaceUnavailableError, Visualizer, hsla_to_color, save_frame
)


def test_configure_sizes_physical_buffer():
    surface = PygameSurface()

    surface.configure(100, 50, 2.0)

    assert surface.canvas.get_size() == (200, 100)
    assert surface.link_layer.get_size() == (200, 100)
    assert surface.scale == 2.0
    assert surface.logical_size == (100, 50)


def test_circle_is_drawn_in_logical_coordinates():
    surface = PygameSurface()
    surface.configure(100, 50, 2.0)

    surface.fill_circle(50, 25, 3, (0, 100, 50, 1.0))

    r, g, b, _ = surface.canvas.get_at((100, 50))
    assert r > 240 and g < 15 and b < 15
    assert surface.canvas.get_at((10, 10))[:3] == (0, 0, 0)


def test_lines_appear_only_after_flush():
    surface = PygameSurface()
    surface.configure(100, 50, 2.0)

    surface.stroke_line(10, 10, 90, 10, (120, 100, 50, 1.0), 0.5)
    assert surface.canvas.get_at((100, 20))[:3] == (0, 0, 0)

    surface.flush()
    r, g, b, _ = surface.canvas.get_at((100, 20))
    assert g > 200 and r < 50 and b < 50
    assert surface.link_layer.get_at((100, 20)).a == 0


def test_fill_rect_blends_with_alpha():
    surface = PygameSurface()
    surface.configure(10, 10, 1.0)
    surface.canvas.fill((255, 255, 255))

    surface.fill_rect(0, 0, 10, 10, (0, 0, 0, 0.5))

    value = surface.canvas.get_at((5, 5)).r
    assert 120 <= value <= 136


def test_hue_wraps_around_the_color_wheel():
    assert hsla_to_color((480, 100, 50, 1.0)) == hsla_to_color((120, 100, 50, 1.0))
    assert hsla_to_color((-240, 100, 50, 1.0)) == hsla_to_color((120, 100, 50, 1.0))


def test_export_image_is_png():
    surface = PygameSurface()
    surface.configure(20, 20, 1.0)

    assert surface.export_image("png").startswith(b"\x89PNG")


def test_save_frame_writes_timestamped_png(tmp_path):
    surface = PygameSurface()
    surface.configure(20, 20, 1.0)

    path = save_frame(surface, str(tmp_path / "exports"))

    assert os.path.basename(path).startswith("geoflux-art-")
    assert path.endswith(".png")
    with open(path, "rb") as f:
        assert f.read(4) == b"\x89PNG"


@pytest.fixture
def visualizer():
    vis = Visualizer(320, 200)
    yield vis
    vis.close()


def _post_key(key, mod=0):
    pygame.event.post(pygame.event.Event(pygame.KEYDOWN, key=key, mod=mod))


def test_keyboard_adjusts_selected_parameter(visualizer):
    store = ParameterStore()

    _post_key(pygame.K_RIGHT)
    _post_key(pygame.K_DOWN)
    _post_key(pygame.K_LEFT, pygame.KMOD_LSHIFT)
    assert visualizer.handle_events(store) is True

    assert store.snapshot().density == 51
    assert store.snapshot().speed == 40


def test_export_and_resize_requests_are_recorded(visualizer):
    store = ParameterStore()

    _post_key(pygame.K_s)
    pygame.event.post(pygame.event.Event(pygame.VIDEORESIZE, w=400, h=300, size=(400, 300)))
    visualizer.handle_events(store)

    assert visualizer.export_requested is True
    assert visualizer.pending_resize == (400, 300)


def test_escape_quits(visualizer):
    _post_key(pygame.K_ESCAPE)

    assert visualizer.handle_events(ParameterStore()) is False


def test_present_scales_canvas_to_window(visualizer):
    surface = PygameSurface()
    surface.configure(160, 100, 1.0)
    store = ParameterStore()

    visualizer.present(surface, store.snapshot())
    visualizer.show_overlay = False
    visualizer.present(surface, store.snapshot())


def test_missing_display_raises_and_logs_critical(monkeypatch, caplog):
    def refuse(*args, **kwargs):
        raise pygame.error("no display")

    monkeypatch.setattr(pygame.display, "set_mode", refuse)

    with caplog.at_level(logging.CRITICAL):
        with pytest.raises(SurfaceUnavailableError, match="320x200"):
            Visualizer(320, 200)
    pygame.quit()

    critical = [r for r in caplog.records if r.levelno == logging.CRITICAL]
    assert critical
    assert "no display" in critical[0].getMessage()
