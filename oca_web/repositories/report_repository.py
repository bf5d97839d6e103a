from __future__ import annotations

import secrets
import threading
import time
from typing import Callable, Dict, Optional, Tuple

from oca_web.ports.storage import ReportRepository


class InMemoryReportRepository(ReportRepository):
    """
    Repository pattern: shared reports held in process memory.
    Entries expire `ttl_seconds` after creation; expired ones are purged lazily.
    """

    def __init__(self, ttl_seconds: float, clock: Callable[[], float] = time.monotonic):
        self._ttl_seconds = ttl_seconds
        self._clock = clock
        self._reports: Dict[str, Tuple[str, float]] = {}
        self._lock = threading.Lock()

    def _purge(self, now: float) -> None:
        expired = [rid for rid, (_, created) in self._reports.items() if now - created >= self._ttl_seconds]
        for rid in expired:
            del self._reports[rid]

    def save(self, report_text: str) -> str:
        report_id = secrets.token_hex(8)
        with self._lock:
            now = self._clock()
            self._purge(now)
            self._reports[report_id] = (report_text, now)
        return report_id

    def get(self, report_id: str) -> Optional[str]:
        with self._lock:
            self._purge(self._clock())
            entry = self._reports.get(report_id)
        return entry[0] if entry else None

    def __len__(self) -> int:
        with self._lock:
            return len(self._reports)
