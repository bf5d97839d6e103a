from typing import Callable


class ScheduledCall:
    def cancel(self) -> None:
        raise NotImplementedError


class Scheduler:
    """Runs `fn` once after `delay_seconds` unless the returned call is cancelled."""
    def schedule(self, delay_seconds: float, fn: Callable[[], None]) -> ScheduledCall:
        raise NotImplementedError
