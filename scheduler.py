# scheduler.py
"""
Schedulers that repeatedly invoke a frame callback.

A tick callback advances the field by one frame and returns False once the
host surface is gone. The scheduler decides only when the next call happens.
"""
import logging
import pygame
from typing import Callable, Optional

Tick = Callable[[], bool]


class ClockScheduler:
    """
    Paces ticks to a target frame rate using pygame's clock.
    """
    def __init__(self, fps: int, max_frames: Optional[int] = None):
        self.fps = fps
        self.max_frames = max_frames
        self.clock = pygame.time.Clock()

    def run(self, tick: Tick) -> int:
        frames = 0
        while self.max_frames is None or frames < self.max_frames:
            if not tick():
                break
            frames += 1
            self.clock.tick(self.fps)
        logging.info(f"Clock scheduler stopped after {frames} frames.")
        return frames


class ManualScheduler:
    """Runs a fixed number of ticks back to back. Used headless and in tests."""
    def __init__(self, frames: int):
        self.frames = frames

    def run(self, tick: Tick) -> int:
        frames = 0
        while frames < self.frames and tick():
            frames += 1
        return frames
