from __future__ import annotations

from dataclasses import replace

from oca_web.domain.models import (
    INITIAL_STATE,
    Action,
    AnalysisFailed,
    AnalysisParams,
    AnalysisSucceeded,
    ApplicationState,
    AppStatus,
    CancelPayment,
    ProceedToPayment,
    Rerun,
    Reset,
    SelectTier,
    SetFiles,
    StartAnalysis,
    SubmitParameters,
)
from oca_web.domain.tiers import TIER_IDS

MISSING_TIER_MESSAGE = "Please choose a plan before starting the analysis."
MISSING_FILE_MESSAGE = "Please upload at least one billing document."
MISSING_PARAMS_MESSAGE = "Please fill in the cloud provider, expected budget and core services."

_FINISHED = (AppStatus.COMPLETE, AppStatus.ERROR)


def submission_problem(state: ApplicationState, params: AnalysisParams) -> str:
    """Returns the first validation message for a parameter submission, or ""."""
    if not state.selected_tier:
        return MISSING_TIER_MESSAGE
    if not state.billing_files:
        return MISSING_FILE_MESSAGE
    if not params.is_complete():
        return MISSING_PARAMS_MESSAGE
    return ""


def transition(state: ApplicationState, action: Action) -> ApplicationState:
    """
    Pure transition function. Pairs not listed in the flow table
    return `state` unchanged.
    """
    status = state.status

    if isinstance(action, SelectTier):
        if status is not AppStatus.INITIAL or action.tier_id not in TIER_IDS:
            return state
        return replace(state, selected_tier=action.tier_id, validation_message="")

    if isinstance(action, SetFiles):
        if status is not AppStatus.INITIAL:
            return state
        return replace(state, billing_files=tuple(action.files), validation_message="")

    if isinstance(action, SubmitParameters):
        if status is not AppStatus.INITIAL:
            return state
        problem = submission_problem(state, action.params)
        if problem:
            return replace(state, validation_message=problem, draft_params=action.params)
        return replace(
            state,
            status=AppStatus.PENDING_PAYMENT,
            pending_params=action.params,
            draft_params=None,
            validation_message="",
        )

    if isinstance(action, CancelPayment):
        if status is not AppStatus.PENDING_PAYMENT:
            return state
        return replace(state, status=AppStatus.INITIAL, pending_params=None)

    if isinstance(action, ProceedToPayment):
        if status is not AppStatus.PENDING_PAYMENT:
            return state
        return replace(state, status=AppStatus.AWAITING_PAYMENT_CONFIRMATION)

    if isinstance(action, StartAnalysis):
        if status is not AppStatus.AWAITING_PAYMENT_CONFIRMATION:
            return state
        return replace(state, status=AppStatus.ANALYZING, analysis_result="", error_message="")

    if isinstance(action, AnalysisSucceeded):
        if status is not AppStatus.ANALYZING:
            return state
        return replace(
            state,
            status=AppStatus.COMPLETE,
            analysis_result=action.result,
            last_analysis_params=state.pending_params,
        )

    if isinstance(action, AnalysisFailed):
        # the pre-flight check fails before analysis starts
        if status not in (AppStatus.AWAITING_PAYMENT_CONFIRMATION, AppStatus.ANALYZING):
            return state
        return replace(state, status=AppStatus.ERROR, error_message=action.message, analysis_result="")

    if isinstance(action, Reset):
        if status not in _FINISHED:
            return state
        return INITIAL_STATE

    if isinstance(action, Rerun):
        if status not in _FINISHED:
            return state
        return replace(INITIAL_STATE, last_analysis_params=state.last_analysis_params)

    return state
