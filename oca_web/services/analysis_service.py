from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

from oca_web.domain.errors import ReportParseError, SubmissionValidationError
from oca_web.domain.models import AnalysisParams, AnalysisRequest, BillingFile
from oca_web.ports.llm import ReportGenerator
from oca_web.services.file_ingestion import to_documents

logger = logging.getLogger(__name__)


@dataclass
class AnalysisService:
    """
    Service layer: turns uploaded files + parameters into one AI request
    and returns the raw report text.
    """
    report_generator: ReportGenerator

    def analyze(self, files: Sequence[BillingFile], params: AnalysisParams) -> str:
        if not files:
            raise SubmissionValidationError("At least one billing document is required.")

        documents = to_documents(files)
        request = AnalysisRequest(
            documents=tuple(documents),
            provider=params.provider.strip(),
            budget=params.budget.strip(),
            services=params.services.strip(),
        )

        logger.info(
            "Requesting analysis: %d file(s), %d document part(s), provider=%s",
            len(files),
            len(documents),
            request.provider,
        )
        report = self.report_generator.generate_report(request)

        if not (report or "").strip():
            raise ReportParseError()
        return report
