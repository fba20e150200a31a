import os

# pygame must never try to open a real window or audio device in tests.
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

import numpy as np
import pytest

from particle import make_rng
from scheduler import FrameQueue


class RecordingSurface:
    """DrawableSurface fake that records every call."""

    def __init__(self, offset=(0.0, 0.0)):
        self.width = 0
        self.height = 0
        self.offset = offset
        self.calls = []
        self.circles = []
        self.paint = None
        self.paint_calls = 0

    def get_width(self):
        return self.width

    def get_height(self):
        return self.height

    def set_size(self, width, height):
        self.width = width
        self.height = height
        self.calls.append(("set_size", width, height))

    def get_offset(self):
        return self.offset

    def clear(self):
        self.circles = []
        self.calls.append(("clear",))

    def draw_filled_circle(self, x, y, radius, alpha):
        self.circles.append((x, y, radius, alpha))

    def configure_paint(self, color, blur_amount, blur_color):
        self.paint = (color, blur_amount, blur_color)
        self.paint_calls += 1


class FakeEvents:
    """EventSource fake with a settable viewport."""

    def __init__(self, viewport=(800, 800)):
        self.viewport = viewport
        self.listeners = {}

    def add_listener(self, name, fn):
        self.listeners.setdefault(name, []).append(fn)

    def remove_listener(self, name, fn):
        fns = self.listeners.get(name, [])
        if fn in fns:
            fns.remove(fn)

    def viewport_size(self):
        return self.viewport

    def fire(self, name, *args):
        for fn in list(self.listeners.get(name, [])):
            fn(*args)

    def count(self):
        return sum(len(fns) for fns in self.listeners.values())


class CapturingFrames(FrameQueue):
    """FrameQueue that remembers every callback ever scheduled."""

    def __init__(self):
        super().__init__()
        self.history = []

    def schedule_next(self, callback):
        self.history.append(callback)
        return super().schedule_next(callback)


class FixedRandom:
    """Uniform source that repeats one row of six values for every particle."""

    def __init__(self, row):
        self.row = np.asarray(row, dtype=np.float64)

    def random(self, size):
        count, width = size
        assert width == self.row.shape[0]
        return np.tile(self.row, (count, 1))


@pytest.fixture
def rng():
    return make_rng(1234)


@pytest.fixture
def surface():
    return RecordingSurface()


@pytest.fixture
def events():
    return FakeEvents()


@pytest.fixture
def frames():
    return CapturingFrames()
