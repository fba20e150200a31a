import pygame
import pytest

from constants import EVENT_POINTER_LEAVE, EVENT_POINTER_MOVE, EVENT_RESIZE
from lifecycle import LifecycleController, LifecycleState
from particle import make_rng
from visualization import PygameHost, PygameSurface


def make_surface(anchor="bottom", screen_size=(200, 100)):
    screen = pygame.Surface(screen_size)
    surface = PygameSurface(anchor, screen_getter=lambda: screen)
    surface.set_size(screen_size[0], 60)
    return surface


def test_set_size():
    surface = make_surface()
    assert (surface.get_width(), surface.get_height()) == (200, 60)


def test_offset_depends_on_anchor():
    assert make_surface("bottom").get_offset() == (0.0, 40.0)
    assert make_surface("top").get_offset() == (0.0, 0.0)


def test_invalid_anchor():
    with pytest.raises(ValueError):
        PygameSurface("left")


def test_draw_and_clear():
    surface = make_surface()
    surface.configure_paint((255, 255, 255, 0.6), 2.0, (255, 255, 255, 0.3))

    surface.draw_filled_circle(50.0, 30.0, 2.0, 0.5)
    assert surface.band.get_at((50, 30)).a > 0
    assert surface.band.get_at((150, 30)).a == 0

    surface.clear()
    assert surface.band.get_at((50, 30)).a == 0


def test_stamps_are_cached_per_quantized_radius():
    surface = make_surface()
    surface.configure_paint((255, 255, 255, 0.6), 2.0, (255, 255, 255, 0.3))
    surface.draw_filled_circle(10, 10, 1.5, 0.5)
    surface.draw_filled_circle(20, 10, 1.51, 0.3)
    surface.draw_filled_circle(30, 10, 2.0, 0.3)
    assert len(surface._stamps) == 2

    surface.configure_paint((255, 0, 0, 1.0), 0.0, (0, 0, 0, 0.0))
    assert surface._stamps == {}


def test_invalid_host_anchor():
    with pytest.raises(ValueError):
        PygameHost({"anchor": "middle"})


def test_listener_registry():
    host = PygameHost()
    calls = []

    def listener():
        calls.append(1)

    host.add_listener(EVENT_RESIZE, listener)
    host.dispatch(EVENT_RESIZE)
    host.remove_listener(EVENT_RESIZE, listener)
    host.remove_listener(EVENT_RESIZE, listener)
    host.remove_listener("unknown", listener)
    host.dispatch(EVENT_RESIZE)

    assert calls == [1]
    assert host.listener_count() == 0


def test_event_translation():
    host = PygameHost()
    host.surface = make_surface("bottom")
    received = []
    host.add_listener(EVENT_POINTER_MOVE, lambda x, y: received.append(("move", x, y)))
    host.add_listener(EVENT_POINTER_LEAVE, lambda: received.append(("leave",)))
    host.add_listener(EVENT_RESIZE, lambda: received.append(("resize",)))

    assert host.handle_event(pygame.event.Event(pygame.MOUSEMOTION, pos=(10, 20))) is True
    assert host.handle_event(pygame.event.Event(pygame.MOUSEMOTION, pos=(10, 90))) is True
    assert host.handle_event(pygame.event.Event(pygame.MOUSEMOTION, pos=(10, 5))) is True
    assert host.handle_event(pygame.event.Event(pygame.VIDEORESIZE, w=300, h=200, size=(300, 200))) is True
    assert host.handle_event(pygame.event.Event(pygame.WINDOWLEAVE)) is True

    assert received == [("move", 10, 90), ("leave",), ("resize",), ("leave",)]


def test_quit_events_end_the_loop():
    host = PygameHost()
    assert host.handle_event(pygame.event.Event(pygame.QUIT)) is False
    assert host.handle_event(pygame.event.Event(pygame.KEYDOWN, key=pygame.K_ESCAPE)) is False
    assert host.handle_event(pygame.event.Event(pygame.KEYDOWN, key=pygame.K_a)) is True


def test_headless_run_smoke():
    host = PygameHost({"window_size": [200, 100], "fps": 1000, "height_fraction": 0.6})
    controller = LifecycleController(
        host.acquire_surface, host.frames, host, rng=make_rng(3), height_fraction=0.6
    )
    try:
        assert controller.start() is True
        assert (host.surface.get_width(), host.surface.get_height()) == (200, 60)
        assert host.listener_count() == 3

        frames_run = host.run(max_steps=3)

        assert frames_run == 3
        assert controller.tick_count == 4
    finally:
        controller.stop()
        host.close()

    assert controller.state is LifecycleState.STOPPED
    assert host.listener_count() == 0
