import pytest

from oca_web.services import report_sectionizer
from oca_web.services.report_sectionizer import (
    SPECS_BY_KEY,
    SectionKey,
    match_marker,
    render_sections,
    sectionize,
)

REPORT = """Here is your report.

🔍 Cloud Cost Anomaly Summary
Two anomalies were detected.

⚠️ Detected Anomalies
* **Service:** EC2
* What Changed: spend doubled

💰 Estimated Monthly Cost Exposure
Low estimate: $100
High estimate: $300
"""


def test_only_present_sections_are_returned_in_order():
    sections = sectionize(REPORT)
    assert list(sections) == [SectionKey.SUMMARY, SectionKey.ANOMALIES, SectionKey.EXPOSURE]
    assert sections[SectionKey.SUMMARY] == "Two anomalies were detected."
    assert sections[SectionKey.EXPOSURE] == "Low estimate: $100\nHigh estimate: $300"


def test_preamble_is_dropped():
    sections = sectionize(REPORT)
    assert all("Here is your report" not in body for body in sections.values())


def test_text_without_markers_has_no_sections():
    assert sectionize("Just some prose.\nNo headings at all.") == {}
    assert sectionize("") == {}


def test_sectionize_is_stable_on_its_own_output():
    sections = sectionize(REPORT)
    assert sectionize(REPORT) == sections

    rebuilt = "\n".join(f"{SPECS_BY_KEY[k].heading}\n{body}" for k, body in sections.items())
    assert sectionize(rebuilt) == sections


def test_marker_closes_the_previous_section_mid_body():
    text = (
        "⚠️ Detected Anomalies\n"
        "* S3 egress spiked\n"
        "💡 Recommended Actions (General Guidance)\n"
        "* Review lifecycle rules\n"
    )
    sections = sectionize(text)
    assert sections[SectionKey.ANOMALIES] == "* S3 egress spiked"
    assert sections[SectionKey.RECOMMENDATIONS] == "* Review lifecycle rules"


def test_empty_section_is_present_with_empty_body():
    text = "🔍 Cloud Cost Anomaly Summary\n💰 Estimated Monthly Cost Exposure\nLow estimate: $0"
    sections = sectionize(text)
    assert sections[SectionKey.SUMMARY] == ""
    assert SectionKey.EXPOSURE in sections


def test_repeated_heading_line_is_not_part_of_the_body():
    text = "🔍\nCloud Cost Anomaly Summary\nNothing unusual."
    assert sectionize(text) == {SectionKey.SUMMARY: "Nothing unusual."}


def test_reopened_section_appends():
    text = "🧠 Likely Causes (Non-Speculative)\nfirst\n✅ Next-Step Signals (NOT Instructions)\ncheck tags\n🧠 Likely Causes\nsecond"
    sections = sectionize(text)
    assert sections[SectionKey.CAUSES] == "first\nsecond"


@pytest.mark.parametrize(
    "line, key",
    [
        ("### **🔍 Cloud Cost Anomaly Summary**", SectionKey.SUMMARY),
        ("⚠ Detected Anomalies", SectionKey.ANOMALIES),
        ("⚠️ DETECTED ANOMALIES", SectionKey.ANOMALIES),
        ("⚠️ Confidence & Limitations", SectionKey.LIMITATIONS),
        ("## 💡 Recommended Actions", SectionKey.RECOMMENDATIONS),
    ],
)
def test_marker_matching_tolerates_markdown_and_emoji_variants(line, key):
    spec = match_marker(line)
    assert spec is not None
    assert spec.key is key


def test_lines_merely_mentioning_a_marker_do_not_open_sections():
    assert match_marker("Total exposure 💰 is low") is None
    assert match_marker("⚠️ Something else entirely") is None


def test_render_sections_carries_titles_and_html():
    rendered = render_sections(REPORT)
    assert [r.title for r in rendered] == [
        "Cloud Cost Anomaly Summary",
        "Detected Anomalies",
        "Estimated Monthly Cost Exposure",
    ]
    assert "<ul>" in rendered[1].html
    assert "<strong>Service:</strong> EC2" in rendered[1].html


def test_render_failure_falls_back_to_plain_text(monkeypatch):
    def boom(body):
        raise ValueError("bad markup")

    monkeypatch.setattr(report_sectionizer, "render_html", boom)
    rendered = render_sections(REPORT)
    assert len(rendered) == 3
    assert rendered[0].html == "<p>Two anomalies were detected.</p>"
