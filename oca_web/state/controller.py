from __future__ import annotations

import logging
import threading
import time
from typing import Callable, Optional

from oca_web.domain.errors import (
    MISSING_INFORMATION_MESSAGE,
    UNEXPECTED_FAILURE_MESSAGE,
    AnalysisError,
)
from oca_web.domain.models import (
    INITIAL_STATE,
    Action,
    AnalysisFailed,
    AnalysisSucceeded,
    ApplicationState,
    AppStatus,
    StartAnalysis,
)
from oca_web.domain.tiers import find_tier
from oca_web.ports.notifier import Notifier, NullNotifier
from oca_web.ports.scheduler import ScheduledCall, Scheduler
from oca_web.state import progress
from oca_web.state.flow import transition

logger = logging.getLogger(__name__)


class FlowController:
    """
    Owns one ApplicationState and applies actions to it through `transition`.

    Side effects live here, not in the transition function:
    - entering awaitingPaymentConfirmation schedules the payment timer
    - leaving that status cancels the timer
    - the timer starts the analysis and feeds its outcome back as an action
    """

    def __init__(
        self,
        analysis_service,
        scheduler: Scheduler,
        *,
        payment_delay_seconds: float,
        notifier: Optional[Notifier] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._analysis_service = analysis_service
        self._scheduler = scheduler
        self._payment_delay_seconds = payment_delay_seconds
        self._notifier = notifier or NullNotifier()
        self._clock = clock

        self._lock = threading.RLock()
        self._state: ApplicationState = INITIAL_STATE
        self._entered_at = clock()
        self._generation = 0
        self._payment_timer: Optional[ScheduledCall] = None

    @property
    def state(self) -> ApplicationState:
        with self._lock:
            return self._state

    def dispatch(self, action: Action) -> ApplicationState:
        with self._lock:
            before = self._state
            after = transition(before, action)
            self._state = after
            if after.status is not before.status:
                self._on_status_change(before.status, after.status)
            return after

    def status_message(self) -> str:
        with self._lock:
            status = self._state.status
            elapsed = self._clock() - self._entered_at
        if status is AppStatus.AWAITING_PAYMENT_CONFIRMATION:
            return progress.payment_message(elapsed)
        if status is AppStatus.ANALYZING:
            return progress.analysis_message(progress.analysis_progress(elapsed))
        return ""

    def progress_percent(self) -> int:
        with self._lock:
            status = self._state.status
            elapsed = self._clock() - self._entered_at
        if status is AppStatus.ANALYZING:
            return progress.analysis_progress(elapsed)
        if status is AppStatus.COMPLETE:
            return 100
        return 0

    def close(self) -> None:
        with self._lock:
            self._cancel_payment_timer()

    # -----------------------------
    # Internals
    # -----------------------------
    def _on_status_change(self, old: AppStatus, new: AppStatus) -> None:
        logger.info("Flow status %s -> %s", old.value, new.value)
        self._generation += 1
        self._entered_at = self._clock()
        self._cancel_payment_timer()

        if new is AppStatus.AWAITING_PAYMENT_CONFIRMATION:
            generation = self._generation
            self._payment_timer = self._scheduler.schedule(
                self._payment_delay_seconds,
                lambda: self._payment_confirmed(generation),
            )

    def _cancel_payment_timer(self) -> None:
        if self._payment_timer is not None:
            self._payment_timer.cancel()
            self._payment_timer = None

    def _payment_confirmed(self, generation: int) -> None:
        with self._lock:
            # stale timer: the state moved on after it was scheduled
            if generation != self._generation:
                return
            if self._state.status is not AppStatus.AWAITING_PAYMENT_CONFIRMATION:
                return
            self._payment_timer = None

            state = self._state
            if not state.billing_files or not state.selected_tier or state.pending_params is None:
                self.dispatch(AnalysisFailed(MISSING_INFORMATION_MESSAGE))
                return

            self.dispatch(StartAnalysis())
            files = state.billing_files
            params = state.pending_params
            tier = find_tier(state.selected_tier)
            tier_name = tier.name if tier else state.selected_tier

        # admin notice runs off the analysis path
        self._scheduler.schedule(0, lambda: self._notify_admin(tier_name, files, params.provider))
        self._run_analysis(files, params)

    def _run_analysis(self, files, params) -> None:
        started = self._clock()
        try:
            report = self._analysis_service.analyze(files, params)
        except AnalysisError as e:
            logger.warning("Analysis failed: %s", e.user_message)
            self.dispatch(AnalysisFailed(e.user_message))
            return
        except Exception:
            logger.exception("Unexpected failure during analysis")
            self.dispatch(AnalysisFailed(UNEXPECTED_FAILURE_MESSAGE))
            return

        logger.info("Analysis complete in %.1fs (%d chars)", self._clock() - started, len(report))
        self.dispatch(AnalysisSucceeded(report))

    def _notify_admin(self, tier_name, files, provider: str) -> None:
        try:
            self._notifier.notify_admin(
                {
                    "tier_name": tier_name,
                    "file_name": ", ".join(f.name for f in files),
                    "cloud_provider": provider,
                }
            )
        except Exception:
            logger.exception("Admin notification failed")
