from oca_web.domain.models import AnalysisRequest


class ReportGenerator:
    """
    Port for the AI collaborator.
    Implementations return the raw report text or raise
    UpstreamError / ReportParseError.
    """
    def generate_report(self, request: AnalysisRequest) -> str:
        raise NotImplementedError
