# visualization.py
"""
Hosts the particle background in a pygame window.

Three pieces live here:
- PygameSurface: the DrawableSurface the Renderer paints on. It owns an
  off-screen per-pixel-alpha band that is composited onto the window.
- PygameFrameScheduler: a FrameQueue paced by pygame.time.Clock.
- PygameHost: opens the window, turns pygame events into resize /
  pointermove / pointerleave notifications for registered listeners and
  runs the main loop.
"""
import logging
import math
import pygame
from typing import Any, Callable, Dict, List, Optional, Tuple

from constants import (
    FULLSCREEN, DEFAULT_WINDOW_SIZE, FPS, BACKGROUND_COLOR, ANCHOR,
    EVENT_RESIZE, EVENT_POINTER_MOVE, EVENT_POINTER_LEAVE
)
from scheduler import FrameQueue

# --- Data Contracts ---
#
# class PygameSurface (implements renderer.DrawableSurface):
#   - __init__(self, anchor: str = ANCHOR,
#              screen_getter: Callable[[], Optional[pygame.Surface]] = pygame.display.get_surface)
#   - self.band: pygame.Surface with SRCALPHA, sized by set_size().
#   - configure_paint(color, blur_amount, blur_color): colours are RGBA
#     tuples with alpha in 0..1. Invalidates the stamp cache.
#   - draw_filled_circle(x, y, radius, alpha): blits a pre-rendered stamp
#     (halo + disc) with surface alpha = alpha * 255.
#
# class PygameHost (implements lifecycle.EventSource):
#   - acquire_surface() -> Optional[PygameSurface]: None if the display
#     cannot be opened.
#   - run(max_steps: Optional[int] = None) -> int: runs frames until quit
#     or max_steps, returns the number of frames run.
#   - close() -> None: shuts down pygame.

VALID_ANCHORS = ("top", "bottom")

# Stamp radii are quantized to this many steps per pixel.
STAMP_RESOLUTION = 4


def _to_pygame_color(rgba: tuple) -> pygame.Color:
    """Converts an (r, g, b, a) colour with a in 0..1 to a pygame.Color."""
    r, g, b = rgba[:3]
    a = rgba[3] if len(rgba) > 3 else 1.0
    return pygame.Color(int(r), int(g), int(b), int(round(max(0.0, min(1.0, a)) * 255)))


class PygameSurface:
    """
    Drawable band backed by an off-screen pygame surface.
    """
    def __init__(self, anchor: str = ANCHOR,
                 screen_getter: Callable[[], Optional[pygame.Surface]] = pygame.display.get_surface):
        if anchor not in VALID_ANCHORS:
            raise ValueError(f"anchor must be one of {VALID_ANCHORS}, got {anchor!r}.")
        self.anchor = anchor
        self.screen_getter = screen_getter
        self.band = pygame.Surface((0, 0), pygame.SRCALPHA)

        self.fill_color = pygame.Color(255, 255, 255, 255)
        self.blur_amount = 0.0
        self.blur_color = pygame.Color(0, 0, 0, 0)
        self._stamps: Dict[int, Tuple[pygame.Surface, int]] = {}

    def get_width(self) -> int:
        return self.band.get_width()

    def get_height(self) -> int:
        return self.band.get_height()

    def set_size(self, width: int, height: int) -> None:
        self.band = pygame.Surface((max(int(width), 0), max(int(height), 0)), pygame.SRCALPHA)
        logging.debug(f"Drawable band resized to {self.band.get_size()}.")

    def get_offset(self) -> Tuple[float, float]:
        screen = self.screen_getter()
        if screen is None or self.anchor == "top":
            return 0.0, 0.0
        return 0.0, float(screen.get_height() - self.band.get_height())

    def get_rect(self) -> pygame.Rect:
        left, top = self.get_offset()
        return pygame.Rect(int(left), int(top), self.get_width(), self.get_height())

    def clear(self) -> None:
        self.band.fill((0, 0, 0, 0))

    def configure_paint(self, color: tuple, blur_amount: float, blur_color: tuple) -> None:
        self.fill_color = _to_pygame_color(color)
        self.blur_amount = max(float(blur_amount), 0.0)
        self.blur_color = _to_pygame_color(blur_color)
        self._stamps.clear()

    def _stamp(self, radius: float) -> Tuple[pygame.Surface, int]:
        """
        Returns a cached (surface, pad) pair for a disc of `radius`, where
        pad is the distance from the stamp's corner to its centre.
        """
        key = int(round(radius * STAMP_RESOLUTION))
        cached = self._stamps.get(key)
        if cached is not None:
            return cached

        r = key / STAMP_RESOLUTION
        pad = int(math.ceil(r + self.blur_amount)) + 1
        stamp = pygame.Surface((pad * 2, pad * 2), pygame.SRCALPHA)
        if self.blur_amount > 0:
            pygame.draw.circle(stamp, self.blur_color, (pad, pad), r + self.blur_amount)
        pygame.draw.circle(stamp, self.fill_color, (pad, pad), r)

        self._stamps[key] = (stamp, pad)
        return stamp, pad

    def draw_filled_circle(self, x: float, y: float, radius: float, alpha: float) -> None:
        stamp, pad = self._stamp(radius)
        stamp.set_alpha(int(round(max(0.0, min(1.0, alpha)) * 255)))
        self.band.blit(stamp, (int(round(x)) - pad, int(round(y)) - pad))


class PygameFrameScheduler(FrameQueue):
    """Runs queued frame callbacks at most `fps` times per second."""

    def __init__(self, fps: int = FPS):
        super().__init__()
        self.fps = fps
        self.clock = pygame.time.Clock()

    def run_frame(self) -> int:
        ran = super().run_frame()
        self.clock.tick(self.fps)
        return ran


class PygameHost:
    """
    Window, event translation and main loop for the particle background.
    """
    def __init__(self, vis_params: Optional[Dict[str, Any]] = None):
        params = vis_params or {}
        self.fullscreen = params.get('fullscreen', FULLSCREEN)
        self.window_size = tuple(params.get('window_size', DEFAULT_WINDOW_SIZE))
        self.fps = params.get('fps', FPS)
        self.anchor = params.get('anchor', ANCHOR)
        self.background_color = pygame.Color(*params.get('background_color', BACKGROUND_COLOR))

        if self.anchor not in VALID_ANCHORS:
            msg = (
                f"Configuration error: anchor {self.anchor!r} is not one of "
                f"{VALID_ANCHORS}."
            )
            logging.critical(msg)
            raise ValueError(msg)

        self.frames = PygameFrameScheduler(self.fps)
        self.screen: Optional[pygame.Surface] = None
        self.surface: Optional[PygameSurface] = None
        self.running = False
        self._listeners: Dict[str, List[Callable[..., None]]] = {}
        self._pointer_inside = False

    # --- EventSource ---

    def add_listener(self, name: str, fn: Callable[..., None]) -> None:
        self._listeners.setdefault(name, []).append(fn)

    def remove_listener(self, name: str, fn: Callable[..., None]) -> None:
        listeners = self._listeners.get(name, [])
        if fn in listeners:
            listeners.remove(fn)

    def listener_count(self, name: Optional[str] = None) -> int:
        if name is not None:
            return len(self._listeners.get(name, []))
        return sum(len(fns) for fns in self._listeners.values())

    def viewport_size(self) -> Tuple[int, int]:
        screen = pygame.display.get_surface()
        if screen is None:
            return 0, 0
        return screen.get_size()

    def dispatch(self, name: str, *args) -> None:
        for fn in list(self._listeners.get(name, [])):
            fn(*args)

    # --- Window ---

    def acquire_surface(self) -> Optional[PygameSurface]:
        """
        Opens the window and returns the drawable band, or None if no
        display is available.
        """
        try:
            pygame.init()
            if self.fullscreen:
                display_info = pygame.display.Info()
                size = (display_info.current_w, display_info.current_h)
                self.screen = pygame.display.set_mode(size, pygame.FULLSCREEN)
            else:
                self.screen = pygame.display.set_mode(self.window_size, pygame.RESIZABLE)
        except pygame.error as e:
            logging.warning(f"Could not open a display surface: {e}")
            return None

        pygame.display.set_caption("Particle Background")
        self.surface = PygameSurface(self.anchor)
        logging.info(f"Pygame display opened ({self.screen.get_width()}x{self.screen.get_height()}).")
        return self.surface

    def handle_event(self, event: pygame.event.Event) -> bool:
        """
        Translates one pygame event. Returns False when the user quits.
        """
        if event.type == pygame.QUIT:
            logging.info("Quit event received.")
            return False
        if event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
            logging.info("ESC key pressed.")
            return False

        if event.type == pygame.VIDEORESIZE:
            logging.debug(f"Window resized to {event.w}x{event.h}.")
            self.dispatch(EVENT_RESIZE)
        elif event.type == pygame.MOUSEMOTION:
            self._handle_motion(event.pos)
        elif event.type == pygame.WINDOWLEAVE:
            self._handle_leave()
        return True

    def _handle_motion(self, pos: Tuple[int, int]) -> None:
        if self.surface is not None and self.surface.get_rect().collidepoint(pos):
            self._pointer_inside = True
            self.dispatch(EVENT_POINTER_MOVE, pos[0], pos[1])
        elif self._pointer_inside:
            self._handle_leave()

    def _handle_leave(self) -> None:
        self._pointer_inside = False
        self.dispatch(EVENT_POINTER_LEAVE)

    def present(self) -> None:
        """Composites the band over the background and flips the display."""
        screen = pygame.display.get_surface()
        screen.fill(self.background_color)
        if self.surface is not None:
            screen.blit(self.surface.band, self.surface.get_offset())
        pygame.display.flip()

    def run(self, max_steps: Optional[int] = None) -> int:
        """
        Runs the main loop: events, due frame callbacks, present.

        Returns:
            int: Number of frames run.
        """
        self.running = True
        frames_run = 0
        while self.running:
            for event in pygame.event.get():
                if not self.handle_event(event):
                    self.running = False
                    break
            if not self.running:
                break

            self.frames.run_frame()
            self.present()
            frames_run += 1

            if max_steps and frames_run >= max_steps:
                logging.info(f"Reached max_steps ({max_steps}). Leaving the frame loop.")
                break

        self.running = False
        return frames_run

    def close(self) -> None:
        """Shuts down pygame."""
        pygame.quit()
        self.screen = None
        self.surface = None
