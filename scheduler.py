# scheduler.py
"""
Frame scheduling for the particle loop.

The loop never blocks or recurses: every tick runs to completion and then
asks a "next frame" primitive to call it again later. The primitive is an
injected dependency. FrameQueue is a host-agnostic implementation that
simply holds callbacks until `run_frame()` is called, which makes it both
the base of the pygame frame pacer and a synchronous test double.
"""
import itertools
import logging
from typing import Callable, Dict, Optional, Protocol

# --- Data Contracts ---
#
# class FramePrimitive(Protocol):
#   - schedule_next(callback) -> int: queues `callback` for the next frame
#     and returns a handle. Each request fires at most once.
#   - cancel(handle) -> None: drops a pending request. Unknown or already
#     fired handles are ignored.
#
# class FrameQueue(FramePrimitive):
#   - run_frame() -> int: runs every callback queued before the call and
#     returns how many ran. Callbacks queued while running wait for the
#     next frame.
#
# class Scheduler:
#   - start(tick_fn) -> FrameLoop: runs the first tick immediately, then
#     one tick per frame.
#   - cancel(loop: Optional[FrameLoop]) -> None: idempotent. Afterwards no
#     tick runs, even if the primitive still invokes a stale callback.

TickFn = Callable[[], None]


class FramePrimitive(Protocol):
    def schedule_next(self, callback: TickFn) -> int: ...

    def cancel(self, handle: int) -> None: ...


class FrameQueue:
    """A next-frame primitive driven explicitly by `run_frame()`."""

    def __init__(self):
        self._handles = itertools.count(1)
        self._pending: Dict[int, TickFn] = {}
        self.frame_count = 0

    def schedule_next(self, callback: TickFn) -> int:
        handle = next(self._handles)
        self._pending[handle] = callback
        return handle

    def cancel(self, handle: int) -> None:
        self._pending.pop(handle, None)

    @property
    def pending(self) -> int:
        return len(self._pending)

    def run_frame(self) -> int:
        due = self._pending
        self._pending = {}
        self.frame_count += 1
        for callback in due.values():
            callback()
        return len(due)


class FrameLoop:
    """
    Handle for a running tick loop. Holds the primitive handle of the one
    outstanding frame request, if any.
    """
    def __init__(self, frames: FramePrimitive, tick_fn: TickFn):
        self.frames = frames
        self.tick_fn = tick_fn
        self.active = False
        self.ticks = 0
        self.pending_handle: Optional[int] = None

    def _run(self) -> None:
        self.pending_handle = None
        if not self.active:
            return
        self.tick_fn()
        self.ticks += 1
        # The tick itself may have cancelled the loop.
        if self.active:
            self.pending_handle = self.frames.schedule_next(self._run)


class Scheduler:
    """Starts and cancels tick loops on top of a next-frame primitive."""

    def __init__(self, frames: FramePrimitive):
        self.frames = frames

    def start(self, tick_fn: TickFn) -> FrameLoop:
        loop = FrameLoop(self.frames, tick_fn)
        loop.active = True
        logging.debug("Frame loop starting.")
        loop._run()
        return loop

    def cancel(self, loop: Optional[FrameLoop]) -> None:
        if loop is None or not loop.active:
            return
        loop.active = False
        if loop.pending_handle is not None:
            self.frames.cancel(loop.pending_handle)
            loop.pending_handle = None
        logging.debug(f"Frame loop cancelled after {loop.ticks} ticks.")
