######## models.py
########

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple, Union


class AppStatus(str, Enum):
    INITIAL = "initial"
    PENDING_PAYMENT = "pendingPayment"
    AWAITING_PAYMENT_CONFIRMATION = "awaitingPaymentConfirmation"
    ANALYZING = "analyzing"
    COMPLETE = "complete"
    ERROR = "error"


@dataclass(frozen=True)
class AnalysisParams:
    provider: str
    budget: str
    services: str

    def is_complete(self) -> bool:
        return all((v or "").strip() for v in (self.provider, self.budget, self.services))


@dataclass(frozen=True)
class BillingFile:
    name: str
    mime_type: str
    data: bytes = field(repr=False)

    @property
    def size(self) -> int:
        return len(self.data)


@dataclass(frozen=True)
class ApplicationState:
    status: AppStatus = AppStatus.INITIAL
    selected_tier: Optional[str] = None
    billing_files: Tuple[BillingFile, ...] = ()
    pending_params: Optional[AnalysisParams] = None
    last_analysis_params: Optional[AnalysisParams] = None
    analysis_result: str = ""          # only set in "complete"
    error_message: str = ""            # only set in "error"
    validation_message: str = ""       # only set in "initial"
    draft_params: Optional[AnalysisParams] = None  # rejected submission, echoed back into the form


INITIAL_STATE = ApplicationState()


# -----------------------------
# Actions (tagged variants)
# -----------------------------
@dataclass(frozen=True)
class SelectTier:
    tier_id: str


@dataclass(frozen=True)
class SetFiles:
    files: Tuple[BillingFile, ...]


@dataclass(frozen=True)
class SubmitParameters:
    params: AnalysisParams


@dataclass(frozen=True)
class CancelPayment:
    pass


@dataclass(frozen=True)
class ProceedToPayment:
    pass


@dataclass(frozen=True)
class StartAnalysis:
    pass


@dataclass(frozen=True)
class AnalysisSucceeded:
    result: str


@dataclass(frozen=True)
class AnalysisFailed:
    message: str


@dataclass(frozen=True)
class Reset:
    pass


@dataclass(frozen=True)
class Rerun:
    pass


Action = Union[
    SelectTier,
    SetFiles,
    SubmitParameters,
    CancelPayment,
    ProceedToPayment,
    StartAnalysis,
    AnalysisSucceeded,
    AnalysisFailed,
    Reset,
    Rerun,
]


# -----------------------------
# Outbound request to the AI collaborator
# -----------------------------
@dataclass(frozen=True)
class DocumentPayload:
    content: str        # plain text, or base64 when is_base64
    mime_type: str
    is_base64: bool = False


@dataclass(frozen=True)
class AnalysisRequest:
    documents: Tuple[DocumentPayload, ...]
    provider: str
    budget: str
    services: str
