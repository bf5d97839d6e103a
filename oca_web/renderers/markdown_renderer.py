"""
Best-effort renderer for the markdown subset the AI uses inside a section:
**bold**, *italic*, "* " / "- " bullet lines, labelled "Key:" lines and
plain paragraphs. Anything unrecognised falls back to a plain paragraph,
so malformed markup never raises.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Tuple, Union

from markupsafe import Markup, escape

KEY_LABELS = (
    "Service",
    "What Changed",
    "When It Started",
    "Magnitude of Change",
    "Why This Is Unusual",
    "Low estimate",
    "High estimate",
)

_INLINE_RE = re.compile(
    r"\*\*\*(?=[^\s*])(?P<bold_italic>.+?)(?<=[^\s*])\*\*\*"
    r"|\*\*(?=\S)(?P<bold>.+?)(?<=\S)\*\*"
    r"|\*(?=[^\s*])(?P<italic>.+?)(?<=[^\s*])\*"
)
_KEY_VALUE_RE = re.compile(
    r"^(?:\*\*)?(" + "|".join(re.escape(k) for k in KEY_LABELS) + r")(?:\s*\([^)]*\))?(?:\*\*)?\s*:(?:\*\*)?\s*(.*)$",
    re.IGNORECASE,
)
_BULLET_PREFIXES = ("* ", "- ")


@dataclass(frozen=True)
class Span:
    kind: str  # "text" | "bold" | "italic" | "bold_italic"
    text: str


Spans = Tuple[Span, ...]


@dataclass(frozen=True)
class Paragraph:
    spans: Spans


@dataclass(frozen=True)
class KeyValue:
    key: str
    spans: Spans


@dataclass(frozen=True)
class BulletList:
    items: Tuple[Spans, ...]


Block = Union[Paragraph, KeyValue, BulletList]


def parse_inline(text: str) -> Spans:
    spans: List[Span] = []
    pos = 0
    for m in _INLINE_RE.finditer(text):
        if m.start() > pos:
            spans.append(Span("text", text[pos:m.start()]))
        kind = m.lastgroup
        spans.append(Span(kind, m.group(kind)))
        pos = m.end()
    if pos < len(text):
        spans.append(Span("text", text[pos:]))
    return tuple(spans)


def _bullet_text(stripped: str):
    for prefix in _BULLET_PREFIXES:
        if stripped.startswith(prefix):
            return stripped[len(prefix):].strip()
    return None


def parse_blocks(body: str) -> List[Block]:
    blocks: List[Block] = []
    lines = (body or "").splitlines()
    i = 0
    while i < len(lines):
        stripped = lines[i].strip()

        # consecutive bullet lines form one list
        if _bullet_text(stripped) is not None:
            items: List[Spans] = []
            while i < len(lines):
                item = _bullet_text(lines[i].strip())
                if item is None:
                    break
                items.append(parse_inline(item))
                i += 1
            blocks.append(BulletList(tuple(items)))
            continue

        i += 1
        if not stripped:
            continue

        kv = _KEY_VALUE_RE.match(stripped)
        if kv:
            blocks.append(KeyValue(key=kv.group(1), spans=parse_inline(kv.group(2).strip())))
            continue

        blocks.append(Paragraph(parse_inline(stripped)))
    return blocks


def _spans_html(spans: Spans) -> str:
    out = []
    for s in spans:
        if s.kind == "bold":
            out.append(f"<strong>{escape(s.text)}</strong>")
        elif s.kind == "italic":
            out.append(f"<em>{escape(s.text)}</em>")
        elif s.kind == "bold_italic":
            out.append(f"<strong><em>{escape(s.text)}</em></strong>")
        else:
            out.append(str(escape(s.text)))
    return "".join(out)


def blocks_to_html(blocks: List[Block]) -> Markup:
    html = []
    for b in blocks:
        if isinstance(b, BulletList):
            items = "".join(f"<li>{_spans_html(item)}</li>" for item in b.items)
            html.append(f"<ul>{items}</ul>")
        elif isinstance(b, KeyValue):
            html.append(f"<p><strong>{escape(b.key)}:</strong> {_spans_html(b.spans)}</p>")
        else:
            html.append(f"<p>{_spans_html(b.spans)}</p>")
    return Markup("\n".join(html))


def render_html(body: str) -> Markup:
    return blocks_to_html(parse_blocks(body))


def plain_html(body: str) -> Markup:
    """Fallback: every non-blank line as an escaped paragraph."""
    return Markup("\n".join(f"<p>{escape(line.strip())}</p>" for line in (body or "").splitlines() if line.strip()))
