from .analysis_service import AnalysisService
from .report_sectionizer import SectionKey, render_sections, sectionize

__all__ = [
    "AnalysisService",
    "SectionKey",
    "render_sections",
    "sectionize",
]
