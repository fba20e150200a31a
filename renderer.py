# renderer.py
"""
Draws the particle field onto a drawable surface.

The Renderer knows nothing about pygame: it talks to any object that
satisfies the DrawableSurface protocol. The pygame implementation lives in
`visualization.py`; tests use a recording fake.
"""
import logging
from typing import Protocol, Tuple

from constants import PARTICLE_COLOR, BLUR_AMOUNT, BLUR_COLOR
from particle import ParticleSystem

# --- Data Contracts ---
#
# class DrawableSurface(Protocol):
#   - get_width() -> int, get_height() -> int
#   - set_size(width: int, height: int) -> None
#   - get_offset() -> Tuple[float, float]: on-screen position of the
#     surface's top-left corner, used to convert pointer coordinates.
#   - clear() -> None: erases the whole drawable area.
#   - draw_filled_circle(x, y, radius, alpha) -> None: alpha in [0, 1]
#     multiplies the configured fill opacity.
#   - configure_paint(color, blur_amount, blur_color) -> None: called once.
#
# class Renderer:
#   - configure_paint(self) -> None: applies the fixed paint settings.
#   - render(self, particles: ParticleSystem) -> None: clears the surface
#     and draws one disc per particle with radius = size, opacity = alpha.


class DrawableSurface(Protocol):
    def get_width(self) -> int: ...

    def get_height(self) -> int: ...

    def set_size(self, width: int, height: int) -> None: ...

    def get_offset(self) -> Tuple[float, float]: ...

    def clear(self) -> None: ...

    def draw_filled_circle(self, x: float, y: float, radius: float, alpha: float) -> None: ...

    def configure_paint(self, color: tuple, blur_amount: float, blur_color: tuple) -> None: ...


class Renderer:
    """Clears the surface and paints every particle, once per tick."""

    def __init__(self, surface: DrawableSurface):
        self.surface = surface
        self.frames_drawn = 0

    def configure_paint(self) -> None:
        """Sets the fill colour and soft blur. Not part of the per-tick path."""
        self.surface.configure_paint(PARTICLE_COLOR, BLUR_AMOUNT, BLUR_COLOR)
        logging.debug(
            f"Paint configured: color={PARTICLE_COLOR}, blur={BLUR_AMOUNT}, "
            f"blur_color={BLUR_COLOR}"
        )

    def render(self, particles: ParticleSystem) -> None:
        surface = self.surface
        surface.clear()
        positions = particles.positions
        sizes = particles.sizes
        alphas = particles.alphas
        for i in range(len(particles)):
            surface.draw_filled_circle(
                float(positions[i, 0]), float(positions[i, 1]),
                float(sizes[i]), float(alphas[i])
            )
        self.frames_drawn += 1
