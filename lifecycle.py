# lifecycle.py
"""
Lifecycle of the particle background effect.

The LifecycleController is the single owner of all mutable state: the
pointer position, the simulation (particles plus surface dimensions), the
renderer and the running frame loop. The host feeds it events through
listeners it registers on an EventSource; the host never touches the
state directly.
"""
import enum
import logging
from typing import Any, Callable, List, Optional, Protocol, Tuple

from constants import (
    PARTICLE_COUNT, HEIGHT_FRACTION,
    EVENT_RESIZE, EVENT_POINTER_MOVE, EVENT_POINTER_LEAVE
)
from renderer import DrawableSurface, Renderer
from scheduler import FrameLoop, FramePrimitive, Scheduler
from simulation import Pointer, Simulation

# --- Data Contracts ---
#
# class EventSource(Protocol):
#   - add_listener(name: str, fn: Callable) -> None
#   - remove_listener(name: str, fn: Callable) -> None: unknown listeners
#     are ignored.
#   - viewport_size() -> Tuple[int, int]: current size of the host viewport.
#
# class LifecycleController:
#   - __init__(self, surface_provider, frames, events, rng=None,
#              particle_count=PARTICLE_COUNT, height_fraction=HEIGHT_FRACTION,
#              log_throttle=600)
#     - surface_provider: zero-argument callable returning a
#       DrawableSurface, or None when no surface can be acquired.
#   - start() -> bool: UNINITIALIZED -> RUNNING. Returns False and stays
#     UNINITIALIZED when no surface is available.
#   - on_resize(), on_pointer_move(client_x, client_y), on_pointer_leave():
#     RUNNING -> RUNNING. Ignored in any other state.
#   - stop() -> None: RUNNING -> STOPPED. Safe to call in any state and
#     any number of times.
#   - Invariants: while RUNNING exactly one frame loop is active and
#     exactly three listeners are registered. Outside RUNNING neither is.


class LifecycleState(enum.Enum):
    UNINITIALIZED = "uninitialized"
    RUNNING = "running"
    STOPPED = "stopped"


class EventSource(Protocol):
    def add_listener(self, name: str, fn: Callable[..., None]) -> None: ...

    def remove_listener(self, name: str, fn: Callable[..., None]) -> None: ...

    def viewport_size(self) -> Tuple[int, int]: ...


class LifecycleController:
    """
    Starts, feeds and tears down the particle loop.
    """
    def __init__(
        self,
        surface_provider: Callable[[], Optional[DrawableSurface]],
        frames: FramePrimitive,
        events: EventSource,
        rng: Optional[Any] = None,
        particle_count: int = PARTICLE_COUNT,
        height_fraction: float = HEIGHT_FRACTION,
        log_throttle: int = 600,
    ):
        self.surface_provider = surface_provider
        self.scheduler = Scheduler(frames)
        self.events = events
        self.rng = rng
        self.particle_count = particle_count
        self.height_fraction = height_fraction
        self.log_throttle = log_throttle

        self.state = LifecycleState.UNINITIALIZED
        self.pointer: Pointer = None
        self.surface: Optional[DrawableSurface] = None
        self.simulation: Optional[Simulation] = None
        self.renderer: Optional[Renderer] = None
        self.loop: Optional[FrameLoop] = None
        self.tick_count = 0
        self._listeners: List[Tuple[str, Callable[..., None]]] = []

    @property
    def running(self) -> bool:
        return self.state is LifecycleState.RUNNING

    def start(self) -> bool:
        """
        Acquires the surface and starts the loop.

        Returns:
            bool: True if the controller is running after the call.
        """
        if self.state is not LifecycleState.UNINITIALIZED:
            logging.warning(f"start() ignored: controller is {self.state.value}.")
            return self.running

        surface = self.surface_provider()
        if surface is None:
            logging.info("No drawable surface available. Particle background stays inactive.")
            return False
        self.surface = surface

        width, height = self._fit_surface()
        self.simulation = Simulation(width, height, self.particle_count, self.rng)
        self.renderer = Renderer(surface)
        self.renderer.configure_paint()

        self.state = LifecycleState.RUNNING
        self.loop = self.scheduler.start(self._tick)

        for name, fn in (
            (EVENT_RESIZE, self.on_resize),
            (EVENT_POINTER_MOVE, self.on_pointer_move),
            (EVENT_POINTER_LEAVE, self.on_pointer_leave),
        ):
            self.events.add_listener(name, fn)
            self._listeners.append((name, fn))

        logging.info(f"Particle background running on a {width}x{height} surface.")
        return True

    def _fit_surface(self) -> Tuple[int, int]:
        """Sizes the surface to the viewport and returns the resulting size."""
        viewport_w, viewport_h = self.events.viewport_size()
        self.surface.set_size(int(viewport_w), int(viewport_h * self.height_fraction))
        return self.surface.get_width(), self.surface.get_height()

    def _tick(self) -> None:
        self.simulation.step(self.pointer)
        self.renderer.render(self.simulation.particles)
        self.tick_count += 1

        if self.log_throttle and self.tick_count % self.log_throttle == 0:
            logging.info(f"Particle background tick {self.tick_count}")
            logging.debug(
                f"Tick {self.tick_count} | Mean speed: {self.simulation.mean_speed():.4f} "
                f"| Pointer: {self.pointer}"
            )

    def on_resize(self) -> None:
        if not self.running:
            return
        width, height = self._fit_surface()
        self.simulation.reset(width, height)

    def on_pointer_move(self, client_x: float, client_y: float) -> None:
        if not self.running:
            return
        left, top = self.surface.get_offset()
        self.pointer = (client_x - left, client_y - top)

    def on_pointer_leave(self) -> None:
        if not self.running:
            return
        self.pointer = None

    def stop(self) -> None:
        """
        Cancels the loop and removes every listener in one step. Repeated
        calls, or calls before a successful start, do nothing.
        """
        if self.state is not LifecycleState.RUNNING:
            if self.state is LifecycleState.UNINITIALIZED:
                logging.debug("stop() before start: nothing to tear down.")
            return

        self.scheduler.cancel(self.loop)
        self.loop = None
        for name, fn in self._listeners:
            self.events.remove_listener(name, fn)
        self._listeners = []

        self.state = LifecycleState.STOPPED
        self.pointer = None
        self.simulation = None
        self.renderer = None
        self.surface = None
        logging.info(f"Particle background stopped after {self.tick_count} ticks.")
