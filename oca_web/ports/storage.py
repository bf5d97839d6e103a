from typing import Optional


class ReportRepository:
    """Shared reports, addressable by an opaque id until they expire."""

    def save(self, report_text: str) -> str:
        raise NotImplementedError

    def get(self, report_id: str) -> Optional[str]:
        raise NotImplementedError


class PreferenceStore:
    """Per-visitor UI preferences (theme)."""

    def get_theme(self) -> Optional[str]:
        raise NotImplementedError

    def set_theme(self, theme: str) -> None:
        raise NotImplementedError
