"""Read/write batching scheduler.

Collects layout reads and widget writes and runs them in frames: every read
queued for a frame runs before any write of that frame, so measurements never
observe half-applied mutations and never force an extra layout pass between
writes.

Public API
----------
class FrameScheduler:
    schedule_read(fn) -> None
    schedule_write(fn) -> None
    pending_count() -> int
    flush() -> None      # run frames until both queues are empty

Writes queued by a read run in the same frame's write phase. Reads queued by
a write wait for the next frame.
"""

import logging
from typing import Callable, List, Optional

from PyQt6.QtCore import QTimer

logger = logging.getLogger(__name__)

# Upper bound on frames run by one flush(); guards against callbacks that
# keep rescheduling themselves.
MAX_FRAMES_PER_FLUSH = 100


def _qt_defer(fn: Callable[[], None]) -> None:
    QTimer.singleShot(0, fn)


class FrameScheduler:
    """
    Frame-batched read/write scheduler.

    Usage:
        scheduler = FrameScheduler()
        scheduler.schedule_read(lambda: measure())
        scheduler.schedule_write(lambda: widget.hide())

    By default the next frame is requested with a zero-interval QTimer. Pass
    ``defer`` to drive frames from another loop (e.g. ``loop.call_soon``), or
    a no-op and call flush() yourself.
    """

    def __init__(self, defer: Optional[Callable[[Callable[[], None]], None]] = None):
        self._defer = defer or _qt_defer
        self._reads: List[Callable[[], None]] = []
        self._writes: List[Callable[[], None]] = []
        self._frame_requested = False

    def schedule_read(self, fn: Callable[[], None]) -> None:
        self._reads.append(fn)
        self._request_frame()

    def schedule_write(self, fn: Callable[[], None]) -> None:
        self._writes.append(fn)
        self._request_frame()

    def pending_count(self) -> int:
        return len(self._reads) + len(self._writes)

    def flush(self) -> None:
        """Run frames until nothing is queued."""
        frames = 0
        while self._reads or self._writes:
            if frames >= MAX_FRAMES_PER_FLUSH:
                logger.warning(f"FrameScheduler: stopped after {frames} frames, "
                               f"{self.pending_count()} callbacks still queued")
                return
            self._run_frame()
            frames += 1

    def _request_frame(self) -> None:
        if self._frame_requested:
            return
        self._frame_requested = True
        self._defer(self._on_frame)

    def _on_frame(self) -> None:
        self._frame_requested = False
        self._run_frame()
        if self._reads or self._writes:
            self._request_frame()

    def _run_frame(self) -> None:
        reads, self._reads = self._reads, []
        for fn in reads:
            self._run(fn, "read")
        # Includes writes queued by the reads above.
        writes, self._writes = self._writes, []
        for fn in writes:
            self._run(fn, "write")

    @staticmethod
    def _run(fn: Callable[[], None], phase: str) -> None:
        try:
            fn()
        except Exception:
            logger.exception(f"FrameScheduler: {phase} callback {fn!r} failed")
