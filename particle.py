# particle.py
"""
Manages the state of all particles in the background field.

This module defines the ParticleSystem class, which is responsible for
spawning and storing particle data (position, velocity, size, opacity) in
NumPy arrays, and the Particle class, a mutable view onto a single row of
those arrays.
"""
import logging
import numpy as np
from typing import Any, Iterator, Optional

from constants import (
    PARTICLE_COUNT, SIZE_BASE, SIZE_SPAN, ALPHA_BASE, ALPHA_SPAN,
    SPAWN_VX_SCALE, SPAWN_VY_BASE, SPAWN_VY_SPAN
)

# --- Data Contracts ---
#
# make_rng(seed: Optional[int] = None) -> np.random.Generator:
#   - Outputs: a generator whose `random(size)` yields uniform values in
#     [0, 1). Any object with that method can be passed where an `rng` is
#     expected, which lets tests feed exact values.
#
# class ParticleSystem:
#   - __init__(self, width: float, height: float,
#              count: int = PARTICLE_COUNT, rng: Optional[Any] = None):
#     - Side Effects: Draws `count * 6` uniform values from `rng`, one row
#       per particle in the order x, y, vx, vy, size, alpha.
#     - Invariants:
#       - self.positions is a float64 array of shape (count, 2).
#       - self.velocities is a float64 array of shape (count, 2).
#       - self.sizes, self.alphas are float64 arrays of shape (count,).
#       - sizes in [1.0, 2.5), alphas in [0.2, 0.6), vy in (-0.15, -0.05].
#     - Errors: None. A zero width or height yields particles stacked on 0.
#
# class Particle:
#   - A view (system, index). Reading and writing x, y, vx, vy goes
#     straight to the owning arrays. size and alpha are read-only.

def make_rng(seed: Optional[int] = None) -> np.random.Generator:
    """Creates the uniform random source used when spawning particles."""
    return np.random.default_rng(seed)


class Particle:
    """A single particle, backed by one row of a ParticleSystem."""

    __slots__ = ("_system", "index")

    def __init__(self, system: "ParticleSystem", index: int):
        self._system = system
        self.index = index

    @property
    def x(self) -> float:
        return float(self._system.positions[self.index, 0])

    @x.setter
    def x(self, value: float):
        self._system.positions[self.index, 0] = value

    @property
    def y(self) -> float:
        return float(self._system.positions[self.index, 1])

    @y.setter
    def y(self, value: float):
        self._system.positions[self.index, 1] = value

    @property
    def vx(self) -> float:
        return float(self._system.velocities[self.index, 0])

    @vx.setter
    def vx(self, value: float):
        self._system.velocities[self.index, 0] = value

    @property
    def vy(self) -> float:
        return float(self._system.velocities[self.index, 1])

    @vy.setter
    def vy(self, value: float):
        self._system.velocities[self.index, 1] = value

    @property
    def size(self) -> float:
        return float(self._system.sizes[self.index])

    @property
    def alpha(self) -> float:
        return float(self._system.alphas[self.index])

    def __repr__(self) -> str:
        return (
            f"Particle(x={self.x:.3f}, y={self.y:.3f}, vx={self.vx:.4f}, "
            f"vy={self.vy:.4f}, size={self.size:.3f}, alpha={self.alpha:.3f})"
        )


class ParticleSystem:
    """
    A fixed-size container for all particles, managing their state via
    NumPy arrays.
    """
    def __init__(self, width: float, height: float,
                 count: int = PARTICLE_COUNT, rng: Optional[Any] = None):
        """
        Spawns `count` particles uniformly over a width x height area.

        Args:
            width (float): The width of the spawn area.
            height (float): The height of the spawn area.
            count (int): Number of particles.
            rng: Source of uniform values in [0, 1) exposing `random(size)`.
                A fresh unseeded generator is used when omitted.
        """
        if rng is None:
            rng = make_rng()
        self.particle_count = count

        # Column order of the draw matters for reproducible layouts.
        u = np.asarray(rng.random((count, 6)), dtype=np.float64).reshape(count, 6)

        self.positions = np.empty((count, 2), dtype=np.float64)
        self.positions[:, 0] = u[:, 0] * width
        self.positions[:, 1] = u[:, 1] * height

        self.velocities = np.empty((count, 2), dtype=np.float64)
        self.velocities[:, 0] = (u[:, 2] - 0.5) * SPAWN_VX_SCALE
        self.velocities[:, 1] = SPAWN_VY_BASE - u[:, 3] * SPAWN_VY_SPAN

        self.sizes = SIZE_BASE + u[:, 4] * SIZE_SPAN
        self.alphas = ALPHA_BASE + u[:, 5] * ALPHA_SPAN

        logging.debug(
            f"ParticleSystem spawned {count} particles over {width}x{height}. "
            f"Positions shape: {self.positions.shape}, "
            f"Velocities shape: {self.velocities.shape}"
        )

    @classmethod
    def from_state(cls, positions, velocities, sizes=None, alphas=None) -> "ParticleSystem":
        """
        Builds a system from explicit state instead of random spawning.
        Missing sizes and alphas default to the low end of their ranges.
        """
        positions = np.array(positions, dtype=np.float64).reshape(-1, 2)
        velocities = np.array(velocities, dtype=np.float64).reshape(-1, 2)
        if positions.shape != velocities.shape:
            raise ValueError(
                f"positions {positions.shape} and velocities {velocities.shape} "
                "must have the same shape."
            )
        count = positions.shape[0]

        system = cls.__new__(cls)
        system.particle_count = count
        system.positions = positions
        system.velocities = velocities
        system.sizes = (
            np.full(count, SIZE_BASE) if sizes is None
            else np.array(sizes, dtype=np.float64).reshape(count)
        )
        system.alphas = (
            np.full(count, ALPHA_BASE) if alphas is None
            else np.array(alphas, dtype=np.float64).reshape(count)
        )
        return system

    def __len__(self) -> int:
        return self.particle_count

    def __getitem__(self, index: int) -> Particle:
        if index < 0:
            index += self.particle_count
        if not 0 <= index < self.particle_count:
            raise IndexError(f"particle index {index} out of range")
        return Particle(self, index)

    def __iter__(self) -> Iterator[Particle]:
        for i in range(self.particle_count):
            yield Particle(self, i)
