# simulation.py
"""
Handles the per-tick physics of the particle field.

This module defines the pointer force field, the single-particle physics
step and the Simulation class, which owns the particle system together
with the surface dimensions it lives in and advances every particle by one
tick. The arithmetic runs in Numba-jitted scalar kernels shared by the
per-particle API and the whole-field loop, so both paths produce
identical numbers.
"""
import logging
import math
import numpy as np
from typing import Any, Optional, Tuple
from numba import jit

from constants import PARTICLE_COUNT, POINTER_RADIUS_SQ, POINTER_STRENGTH, DAMPING, DRIFT
from particle import Particle, ParticleSystem

# --- Data Contracts ---
#
# Pointer = Optional[Tuple[float, float]]  (surface-local; None = no force)
#
# force_on(particle: Particle, pointer: Pointer) -> Tuple[float, float]:
#   - Outputs: velocity delta (dvx, dvy) to add to the particle.
#   - Invariants: (0.0, 0.0) when pointer is None, when the squared
#     distance is >= POINTER_RADIUS_SQ, or when the particle sits exactly
#     on the pointer. Never NaN or infinite.
#
# step(particle: Particle, pointer: Pointer, width: float, height: float) -> None:
#   - Side Effects: Mutates the particle in place, in this order:
#     force, integrate, damp, drift, wrap y (only below 0), wrap x (both
#     sides).
#
# class Simulation:
#   - __init__(self, width, height, count=PARTICLE_COUNT, rng=None)
#   - reset(self, width, height) -> None: discards all particles and spawns
#     a fresh set over the new dimensions.
#   - step(self, pointer) -> None: advances every particle one tick.
#   - Invariants: particle count stays constant across steps and resets.

Pointer = Optional[Tuple[float, float]]


@jit(nopython=True)
def _pointer_force_numba(px, py, mx, my):
    """
    Numba-jitted repulsion from a pointer at (mx, my) on a particle at
    (px, py). Linear falloff from POINTER_STRENGTH at the pointer to zero at
    the radius, with a hard cutoff beyond it.
    """
    dx = px - mx
    dy = py - my
    dist_sq = dx * dx + dy * dy
    if dist_sq >= POINTER_RADIUS_SQ:
        return 0.0, 0.0

    strength = (POINTER_RADIUS_SQ - dist_sq) / POINTER_RADIUS_SQ * POINTER_STRENGTH
    # +1 keeps the direction finite when the particle is on the pointer.
    norm = math.sqrt(dist_sq + 1.0)
    return dx / norm * strength, dy / norm * strength


@jit(nopython=True)
def _advance_numba(x, y, vx, vy, has_pointer, mx, my, width, height):
    """
    Numba-jitted single-particle tick. Returns the new (x, y, vx, vy).
    The operation order is fixed; reordering changes trajectories.
    """
    # 1. Pointer force
    if has_pointer:
        dvx, dvy = _pointer_force_numba(x, y, mx, my)
        vx += dvx
        vy += dvy

    # 2. Integrate
    x += vx
    y += vy

    # 3. Damp
    vx *= DAMPING
    vy *= DAMPING

    # 4. Constant upward drift
    vy += DRIFT

    # 5. Vertical wrap is one-sided: only the top edge recycles.
    if y < 0.0:
        y = height

    # 6. Horizontal wrap on both edges
    if x < 0.0:
        x = width
    if x > width:
        x = 0.0

    return x, y, vx, vy


@jit(nopython=True)
def _step_all_numba(positions, velocities, has_pointer, mx, my, width, height):
    """Numba-jitted loop applying `_advance_numba` to every particle in place."""
    for i in range(positions.shape[0]):
        x, y, vx, vy = _advance_numba(
            positions[i, 0], positions[i, 1],
            velocities[i, 0], velocities[i, 1],
            has_pointer, mx, my, width, height
        )
        positions[i, 0] = x
        positions[i, 1] = y
        velocities[i, 0] = vx
        velocities[i, 1] = vy


def _unpack_pointer(pointer: Pointer) -> Tuple[bool, float, float]:
    if pointer is None:
        return False, 0.0, 0.0
    return True, float(pointer[0]), float(pointer[1])


def force_on(particle: Particle, pointer: Pointer) -> Tuple[float, float]:
    """
    Computes the velocity delta the pointer imposes on `particle`.

    Returns:
        Tuple[float, float]: (dvx, dvy), pointing away from the pointer.
    """
    if pointer is None:
        return 0.0, 0.0
    dvx, dvy = _pointer_force_numba(
        particle.x, particle.y, float(pointer[0]), float(pointer[1])
    )
    return float(dvx), float(dvy)


def step(particle: Particle, pointer: Pointer, width: float, height: float) -> None:
    """Advances a single particle by one tick, mutating it in place."""
    has_pointer, mx, my = _unpack_pointer(pointer)
    x, y, vx, vy = _advance_numba(
        particle.x, particle.y, particle.vx, particle.vy,
        has_pointer, mx, my, float(width), float(height)
    )
    particle.x = x
    particle.y = y
    particle.vx = vx
    particle.vy = vy


class Simulation:
    """
    Owns the particle field and the dimensions it wraps around. Both are
    replaced together on every reset.
    """
    def __init__(self, width: float, height: float,
                 count: int = PARTICLE_COUNT, rng: Optional[Any] = None):
        """
        Initializes the simulation and spawns the first particle set.

        Args:
            width (float): Surface width in surface-local units.
            height (float): Surface height in surface-local units.
            count (int): Number of particles kept in the field.
            rng: Uniform random source handed to every ParticleSystem.
        """
        self.count = count
        self.rng = rng
        self.width = 0.0
        self.height = 0.0
        self.particles: Optional[ParticleSystem] = None
        self.reset(width, height)

    def reset(self, width: float, height: float) -> None:
        """Drops the current particles and respawns over new dimensions."""
        self.width = float(width)
        self.height = float(height)
        self.particles = ParticleSystem(self.width, self.height, self.count, self.rng)
        logging.info(
            f"Particle field reset to {self.particle_count} particles "
            f"over {self.width:.0f}x{self.height:.0f}."
        )

    @property
    def particle_count(self) -> int:
        return len(self.particles)

    def step(self, pointer: Pointer = None) -> None:
        """
        Executes one tick of physics for every particle.
        """
        has_pointer, mx, my = _unpack_pointer(pointer)
        _step_all_numba(
            self.particles.positions, self.particles.velocities,
            has_pointer, mx, my, self.width, self.height
        )

    def mean_speed(self) -> float:
        """Average particle speed, for throttled debug logging."""
        if self.particle_count == 0:
            return 0.0
        return float(np.mean(np.linalg.norm(self.particles.velocities, axis=1)))
