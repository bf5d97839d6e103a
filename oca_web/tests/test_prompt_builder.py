from oca_web.domain.models import AnalysisRequest, DocumentPayload
from oca_web.services.prompt_builder import (
    build_csv_block,
    build_parameter_prompt,
    build_parts,
    load_master_prompt,
)


def test_master_prompt_names_every_report_section():
    prompt = load_master_prompt()
    for heading in (
        "Cloud Cost Anomaly Summary",
        "Detected Anomalies",
        "Estimated Monthly Cost Exposure",
        "Likely Causes",
        "Next-Step Signals",
        "Confidence & Limitations",
    ):
        assert heading in prompt


def test_parameter_prompt():
    text = build_parameter_prompt("AWS", "$5,000", "EC2,S3")
    assert text.startswith("Client-defined parameters:\n- Cloud provider(s): AWS\n")
    assert "- Expected monthly budget range: $5,000\n" in text
    assert "- Core services in use: EC2,S3\n" in text
    assert text.endswith("OUTPUT FORMAT specified in your system role.")


def test_csv_block_is_fenced():
    assert build_csv_block("a,1") == "---INPUTS RECEIVED:\nBilling Data (CSV Content):\n```csv\na,1\n```\n"


def test_parts_order_csv_then_parameters_then_binaries():
    pdf = DocumentPayload(content="JVBERi0=", mime_type="application/pdf", is_base64=True)
    request = AnalysisRequest(
        documents=(pdf, DocumentPayload(content="a,1", mime_type="text/csv")),
        provider="GCP",
        budget="1000",
        services="BigQuery",
    )
    parts = build_parts(request)
    assert len(parts) == 3
    assert parts[0].startswith("---INPUTS RECEIVED:")
    assert parts[1].startswith("Client-defined parameters:")
    assert parts[2] is pdf
