from __future__ import annotations

MISSING_INFORMATION_MESSAGE = "Missing required information for analysis. Please start over."
UPSTREAM_FAILURE_MESSAGE = "An error occurred during analysis. Please try again later."
EMPTY_RESPONSE_MESSAGE = "Received an unexpected or empty response from the analysis service."
UNEXPECTED_FAILURE_MESSAGE = "An unexpected error occurred while processing your analysis. Please try again."


class AnalysisError(Exception):
    """Base for failures that end an analysis. `user_message` is safe to display."""

    def __init__(self, user_message: str):
        super().__init__(user_message)
        self.user_message = user_message


class SubmissionValidationError(AnalysisError):
    """Tier, file or parameters missing."""


class UnsupportedFileTypeError(AnalysisError):
    def __init__(self, mime_type: str):
        super().__init__(f"Unsupported file type: {mime_type or 'unknown'}")
        self.mime_type = mime_type


class FileReadError(AnalysisError):
    def __init__(self, file_name: str):
        super().__init__(f"Failed to read file: {file_name}.")
        self.file_name = file_name


class UpstreamError(AnalysisError):
    """The AI service failed, timed out or answered with a non-success status."""

    def __init__(self, detail: str = ""):
        super().__init__(UPSTREAM_FAILURE_MESSAGE)
        # server-side only; never rendered
        self.detail = detail


class ReportParseError(AnalysisError):
    """The AI answered, but without extractable report text."""

    def __init__(self):
        super().__init__(EMPTY_RESPONSE_MESSAGE)
