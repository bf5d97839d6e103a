from __future__ import annotations

import base64
import logging
from typing import Any, Optional

from google import genai
from google.genai import types

from oca_web.domain.errors import ReportParseError, UpstreamError
from oca_web.domain.models import AnalysisRequest, DocumentPayload
from oca_web.ports.llm import ReportGenerator
from oca_web.services.prompt_builder import build_parts

logger = logging.getLogger(__name__)


class GeminiReportGenerator(ReportGenerator):
    """Gemini adapter (google-genai). The API key never leaves the server."""

    def __init__(self, api_key: str, model_name: str, system_prompt: str, timeout_seconds: int = 120):
        if not api_key:
            raise ValueError("Gemini requires an API key (set API_KEY or [gemini] api_key)")
        self.model_name = model_name
        self.system_prompt = system_prompt
        self.timeout_seconds = timeout_seconds
        self._api_key = api_key
        self._client: Optional[genai.Client] = None

    def _get_client(self) -> genai.Client:
        if self._client is None:
            self._client = genai.Client(
                api_key=self._api_key,
                http_options=types.HttpOptions(timeout=self.timeout_seconds * 1000),
            )
        return self._client

    @staticmethod
    def _to_content(part: Any) -> Any:
        if isinstance(part, DocumentPayload):
            return types.Part.from_bytes(data=base64.b64decode(part.content), mime_type=part.mime_type)
        return part

    def generate_report(self, request: AnalysisRequest) -> str:
        contents = [self._to_content(p) for p in build_parts(request)]

        try:
            response = self._get_client().models.generate_content(
                model=self.model_name,
                contents=contents,
                config=types.GenerateContentConfig(
                    system_instruction=self.system_prompt,
                    response_mime_type="text/plain",
                ),
            )
        except Exception as e:
            logger.error("Gemini call failed (%s): %s", self.model_name, e, exc_info=True)
            raise UpstreamError(str(e)) from e

        text = getattr(response, "text", None) or ""
        if not text.strip():
            logger.error("Gemini returned no text (model=%s)", self.model_name)
            raise ReportParseError()
        return text
