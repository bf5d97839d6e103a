import threading
from typing import Callable

from oca_web.ports.scheduler import ScheduledCall, Scheduler


class _TimerCall(ScheduledCall):
    def __init__(self, timer: threading.Timer):
        self._timer = timer

    def cancel(self) -> None:
        self._timer.cancel()


class ThreadingScheduler(Scheduler):
    def schedule(self, delay_seconds: float, fn: Callable[[], None]) -> ScheduledCall:
        timer = threading.Timer(delay_seconds, fn)
        timer.daemon = True
        timer.start()
        return _TimerCall(timer)
