from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional

from markupsafe import Markup

from oca_web.renderers.markdown_renderer import plain_html, render_html

logger = logging.getLogger(__name__)

_VARIATION_SELECTOR = "\ufe0f"


class SectionKey(str, Enum):
    SUMMARY = "summary"
    ANOMALIES = "anomalies"
    EXPOSURE = "exposure"
    CAUSES = "causes"
    SIGNALS = "signals"
    RECOMMENDATIONS = "recommendations"
    LIMITATIONS = "limitations"


@dataclass(frozen=True)
class SectionSpec:
    key: SectionKey
    marker: str     # prefix that opens the section
    heading: str    # full heading line as the model writes it
    title: str      # display title
    icon: str


SECTION_SPECS = (
    SectionSpec(SectionKey.SUMMARY, "🔍", "🔍 Cloud Cost Anomaly Summary", "Cloud Cost Anomaly Summary", "🔍"),
    SectionSpec(SectionKey.ANOMALIES, "⚠️ Detected Anomalies", "⚠️ Detected Anomalies", "Detected Anomalies", "⚠️"),
    SectionSpec(SectionKey.EXPOSURE, "💰", "💰 Estimated Monthly Cost Exposure", "Estimated Monthly Cost Exposure", "💰"),
    SectionSpec(SectionKey.CAUSES, "🧠", "🧠 Likely Causes (Non-Speculative)", "Likely Causes (Non-Speculative)", "🧠"),
    SectionSpec(SectionKey.SIGNALS, "✅", "✅ Next-Step Signals (NOT Instructions)", "Next-Step Signals", "✅"),
    SectionSpec(SectionKey.RECOMMENDATIONS, "💡", "💡 Recommended Actions (General Guidance)", "Recommended Actions (General Guidance)", "💡"),
    SectionSpec(SectionKey.LIMITATIONS, "⚠️ Confidence & Limitations", "⚠️ Confidence & Limitations", "Confidence & Limitations", "⚠️"),
)

SPECS_BY_KEY = {s.key: s for s in SECTION_SPECS}


def _normalize(line: str) -> str:
    s = line.strip().replace(_VARIATION_SELECTOR, "")
    s = s.lstrip("#").strip()
    if s.startswith("**"):
        s = s[2:].lstrip()
    return s


def _plain(text: str) -> str:
    return text.replace(_VARIATION_SELECTOR, "").strip().lower()


def match_marker(line: str) -> Optional[SectionSpec]:
    s = _normalize(line)
    for spec in SECTION_SPECS:
        if s.lower().startswith(_normalize(spec.marker).lower()):
            return spec
    return None


def _heading_remainder(line: str, spec: SectionSpec) -> str:
    s = _normalize(line)
    heading = _normalize(spec.heading)
    if not s.lower().startswith(heading.lower()):
        return ""
    return s[len(heading):].strip().lstrip(":*-").strip()


def _is_heading_repeat(line: str, spec: SectionSpec) -> bool:
    s = _plain(_normalize(line).strip("*").strip().rstrip(":"))
    return s in (_plain(spec.title), _plain(_normalize(spec.heading)))


def sectionize(text: str) -> Dict[SectionKey, str]:
    """
    Splits a report into {section key: body text}.

    Lines before the first marker are preamble and dropped. A marker line
    always opens (or re-opens) its section, even in the middle of another
    one. Only sections whose marker was seen appear in the result, in
    canonical order.
    """
    bodies: Dict[SectionKey, List[str]] = {}
    current: Optional[SectionSpec] = None

    for line in (text or "").splitlines():
        spec = match_marker(line)
        if spec is not None:
            current = spec
            lines = bodies.setdefault(spec.key, [])
            rest = _heading_remainder(line, spec)
            if rest:
                lines.append(rest)
            continue
        if current is None:
            continue
        if _is_heading_repeat(line, current):
            continue
        bodies[current.key].append(line.rstrip())

    return {
        spec.key: "\n".join(bodies[spec.key]).strip("\n")
        for spec in SECTION_SPECS
        if spec.key in bodies
    }


@dataclass(frozen=True)
class RenderedSection:
    key: SectionKey
    title: str
    icon: str
    body: str
    html: Markup


def render_sections(text: str) -> List[RenderedSection]:
    out: List[RenderedSection] = []
    for key, body in sectionize(text).items():
        spec = SPECS_BY_KEY[key]
        try:
            html = render_html(body)
        except Exception:
            # one bad section must not take the whole report down
            logger.exception("Failed to render section %s; falling back to plain text", key.value)
            html = plain_html(body)
        out.append(RenderedSection(key=key, title=spec.title, icon=spec.icon, body=body, html=html))
    return out
