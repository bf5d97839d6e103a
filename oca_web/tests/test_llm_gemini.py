from __future__ import annotations

import pytest

pytest.importorskip("google.genai")

from oca_web.adapters.llm_gemini import GeminiReportGenerator  # noqa: E402
from oca_web.domain.errors import ReportParseError, UpstreamError  # noqa: E402
from oca_web.domain.models import AnalysisRequest, DocumentPayload  # noqa: E402


class FakeResponse:
    def __init__(self, text):
        self.text = text


class FakeModels:
    def __init__(self, text="🔍 Cloud Cost Anomaly Summary\nok", error=None):
        self.text = text
        self.error = error
        self.calls = []

    def generate_content(self, **kwargs):
        self.calls.append(kwargs)
        if self.error:
            raise self.error
        return FakeResponse(self.text)


class FakeClient:
    def __init__(self, models: FakeModels):
        self.models = models


REQUEST = AnalysisRequest(
    documents=(
        DocumentPayload(content="a,1", mime_type="text/csv"),
        DocumentPayload(content="JVBERi0xLjQ=", mime_type="application/pdf", is_base64=True),
    ),
    provider="AWS",
    budget="$5,000",
    services="EC2",
)


def make_generator(models: FakeModels) -> GeminiReportGenerator:
    gen = GeminiReportGenerator(api_key="k", model_name="gemini-2.5-pro", system_prompt="SYSTEM")
    gen._client = FakeClient(models)
    return gen


def test_requires_api_key():
    with pytest.raises(ValueError):
        GeminiReportGenerator(api_key="", model_name="m", system_prompt="s")


def test_generate_report_sends_ordered_parts_and_system_prompt():
    models = FakeModels()
    text = make_generator(models).generate_report(REQUEST)

    assert text.startswith("🔍")
    call = models.calls[0]
    assert call["model"] == "gemini-2.5-pro"
    assert call["config"].system_instruction == "SYSTEM"

    contents = call["contents"]
    assert contents[0].startswith("---INPUTS RECEIVED:")
    assert contents[1].startswith("Client-defined parameters:")
    assert contents[2].inline_data.mime_type == "application/pdf"
    assert contents[2].inline_data.data == b"%PDF-1.4"


def test_transport_errors_become_upstream_errors():
    models = FakeModels(error=RuntimeError("503 unavailable"))
    with pytest.raises(UpstreamError) as ei:
        make_generator(models).generate_report(REQUEST)
    assert "503" in ei.value.detail
    assert "503" not in ei.value.user_message


@pytest.mark.parametrize("text", [None, "", "  "])
def test_empty_text_is_a_parse_error(text):
    with pytest.raises(ReportParseError):
        make_generator(FakeModels(text=text)).generate_report(REQUEST)
