from __future__ import annotations

import secrets
import threading
import time
from typing import Callable, Dict, Tuple

from oca_web.domain.models import AppStatus
from oca_web.state.controller import FlowController

_BUSY = (AppStatus.AWAITING_PAYMENT_CONFIRMATION, AppStatus.ANALYZING)


class FlowRegistry:
    """
    One FlowController per browser session, keyed by an id kept in the session cookie.
    Idle controllers are dropped after `max_idle_seconds` unless they are mid-analysis.
    """

    def __init__(
        self,
        controller_factory: Callable[[], FlowController],
        max_idle_seconds: float = 6 * 3600,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._factory = controller_factory
        self._max_idle_seconds = max_idle_seconds
        self._clock = clock
        self._flows: Dict[str, Tuple[FlowController, float]] = {}
        self._lock = threading.Lock()

    @staticmethod
    def new_id() -> str:
        return secrets.token_urlsafe(16)

    def get_or_create(self, flow_id: str) -> FlowController:
        with self._lock:
            now = self._clock()
            self._purge_idle(now)
            entry = self._flows.get(flow_id)
            controller = entry[0] if entry else self._factory()
            self._flows[flow_id] = (controller, now)
            return controller

    def _purge_idle(self, now: float) -> None:
        stale = [
            fid
            for fid, (ctrl, seen) in self._flows.items()
            if now - seen > self._max_idle_seconds and ctrl.state.status not in _BUSY
        ]
        for fid in stale:
            self._flows.pop(fid)[0].close()

    def __len__(self) -> int:
        with self._lock:
            return len(self._flows)
