import pytest

from constants import EVENT_POINTER_LEAVE, EVENT_POINTER_MOVE, EVENT_RESIZE
from lifecycle import LifecycleController, LifecycleState
from tests.conftest import RecordingSurface


@pytest.fixture
def controller(surface, frames, events, rng):
    return LifecycleController(lambda: surface, frames, events, rng=rng, height_fraction=0.6)


def test_start_runs_and_registers(controller, surface, frames, events):
    assert controller.start() is True

    assert controller.state is LifecycleState.RUNNING
    assert surface.calls[0] == ("set_size", 800, 480)
    assert surface.paint_calls == 1
    assert controller.simulation.particle_count == 250
    assert controller.tick_count == 1
    assert len(surface.circles) == 250
    assert frames.pending == 1
    assert events.count() == 3
    assert {EVENT_RESIZE, EVENT_POINTER_MOVE, EVENT_POINTER_LEAVE} <= set(events.listeners)


def test_each_frame_is_one_tick(controller, surface, frames):
    controller.start()
    for _ in range(10):
        frames.run_frame()

    assert controller.tick_count == 11
    assert surface.paint_calls == 1
    assert len(surface.circles) == 250


def test_missing_surface_leaves_controller_inert(frames, events, rng):
    controller = LifecycleController(lambda: None, frames, events, rng=rng)

    assert controller.start() is False
    assert controller.state is LifecycleState.UNINITIALIZED
    assert controller.simulation is None
    assert frames.pending == 0
    assert events.count() == 0

    controller.stop()
    assert controller.state is LifecycleState.UNINITIALIZED


def test_resize_reinitializes_particles(controller, surface, frames, events):
    controller.start()
    old_particles = controller.simulation.particles
    frames.run_frame()

    events.viewport = (1024, 768)
    events.fire(EVENT_RESIZE)

    assert surface.calls[-1] == ("set_size", 1024, 460)
    assert controller.simulation.particles is not old_particles
    assert controller.simulation.particle_count == 250
    assert (controller.simulation.width, controller.simulation.height) == (1024.0, 460.0)
    assert frames.pending == 1


def test_pointer_move_converts_to_surface_coordinates(frames, events, rng):
    surface = RecordingSurface(offset=(0.0, 320.0))
    controller = LifecycleController(lambda: surface, frames, events, rng=rng)
    controller.start()

    events.fire(EVENT_POINTER_MOVE, 150, 400)
    assert controller.pointer == (150.0, 80.0)

    events.fire(EVENT_POINTER_LEAVE)
    assert controller.pointer is None


def test_pointer_pushes_nearby_particles(controller, frames, events):
    controller.start()
    particles = controller.simulation.particles
    particles.positions[0] = (410.0, 240.0)
    particles.velocities[0] = (0.0, 0.0)

    events.fire(EVENT_POINTER_MOVE, 400, 240)
    frames.run_frame()

    assert particles.positions[0, 0] > 410.0


def test_stop_cancels_and_detaches(controller, frames, events):
    controller.start()
    frames.run_frame()
    ticks = controller.tick_count

    controller.stop()

    assert controller.state is LifecycleState.STOPPED
    assert frames.pending == 0
    assert events.count() == 0

    for _ in range(3):
        frames.run_frame()
    for callback in frames.history:
        callback()
    assert controller.tick_count == ticks


def test_events_after_stop_do_not_mutate(controller, events):
    controller.start()
    controller.stop()

    events.fire(EVENT_POINTER_MOVE, 10, 10)
    controller.on_pointer_move(10, 10)
    controller.on_resize()
    assert controller.pointer is None
    assert controller.simulation is None


def test_stop_is_idempotent(controller, events):
    controller.start()
    controller.stop()
    controller.stop()
    assert controller.state is LifecycleState.STOPPED
    assert events.count() == 0


def test_start_after_stop_is_ignored(controller, frames):
    controller.start()
    controller.stop()

    assert controller.start() is False
    assert controller.state is LifecycleState.STOPPED
    assert frames.pending == 0


def test_second_start_while_running_is_ignored(controller, frames, events):
    controller.start()
    assert controller.start() is True
    assert frames.pending == 1
    assert events.count() == 3
