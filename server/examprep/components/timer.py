"""
Exam timer.

Counts elapsed seconds while running and not paused. The update callback is
held in a mutable slot and read when each tick fires, so replacing it never
restarts the ticking task.
"""
import asyncio
import logging
from typing import Callable, Optional

logger = logging.getLogger(__name__)

TimeUpdateCallback = Callable[[int], None]


def _loop_running() -> bool:
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return False
    return True


def format_time(seconds: int) -> str:
    """``H:MM:SS`` from one hour up, ``M:SS`` below."""
    hours = seconds // 3600
    minutes = (seconds % 3600) // 60
    secs = seconds % 60
    if hours > 0:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes}:{secs:02d}"


class ExamTimer:
    """Elapsed-time counter with pause/resume."""

    def __init__(self, on_time_update: Optional[TimeUpdateCallback] = None, interval: float = 1.0):
        self.elapsed_seconds = 0
        self.is_paused = False
        self.interval = interval
        self._on_time_update = on_time_update
        self._task: Optional[asyncio.Task] = None

    @property
    def display(self) -> str:
        return format_time(self.elapsed_seconds)

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def set_on_time_update(self, callback: Optional[TimeUpdateCallback]) -> None:
        """Swap the callback; the next tick uses the new one."""
        self._on_time_update = callback

    def tick(self) -> int:
        """Advance by one second and notify the current callback."""
        self.elapsed_seconds += 1
        new_time = self.elapsed_seconds
        if _loop_running():
            # Deliver after the tick completes, not inside it
            asyncio.get_running_loop().call_soon(self._notify, new_time)
        else:
            self._notify(new_time)
        return new_time

    def _notify(self, seconds: int) -> None:
        callback = self._on_time_update
        if callback is None:
            return
        try:
            callback(seconds)
        except Exception:
            logger.exception("Timer update callback failed")

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            self.tick()

    def start(self) -> None:
        """Begin ticking on the running event loop. No-op when paused or already ticking."""
        if self.is_paused or self.is_running:
            return
        self._task = asyncio.get_running_loop().create_task(self._run())

    def stop(self) -> None:
        """Cancel the ticking task (teardown)."""
        if self._task is not None:
            self._task.cancel()
            self._task = None

    def toggle_pause(self) -> bool:
        """Pause or resume. Returns the new paused state."""
        self.is_paused = not self.is_paused
        self.stop()
        # Without a running loop, ticking resumes on the next start()
        if not self.is_paused and _loop_running():
            self.start()
        return self.is_paused

    @property
    def toggle_label(self) -> str:
        return "Resume Timer" if self.is_paused else "Pause Timer"
