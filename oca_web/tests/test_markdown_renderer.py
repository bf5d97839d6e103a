from oca_web.renderers.markdown_renderer import (
    BulletList,
    KeyValue,
    Paragraph,
    Span,
    parse_blocks,
    parse_inline,
    plain_html,
    render_html,
)


def test_consecutive_bullets_form_one_list():
    blocks = parse_blocks("* first\n* second")
    assert blocks == [BulletList(((Span("text", "first"),), (Span("text", "second"),)))]


def test_dash_bullets_are_accepted():
    blocks = parse_blocks("- one\n- two\n\nafter")
    assert isinstance(blocks[0], BulletList)
    assert len(blocks[0].items) == 2
    assert blocks[1] == Paragraph((Span("text", "after"),))


def test_unterminated_bold_stays_literal():
    assert parse_inline("**unterminated") == (Span("text", "**unterminated"),)


def test_bold_and_italic_spans():
    assert parse_inline("*italic* and **bold**") == (
        Span("italic", "italic"),
        Span("text", " and "),
        Span("bold", "bold"),
    )


def test_key_value_lines():
    blocks = parse_blocks("**Service:** EC2\nLow estimate (monthly): $100\nmagnitude of change: +120%")
    assert blocks == [
        KeyValue("Service", (Span("text", "EC2"),)),
        KeyValue("Low estimate", (Span("text", "$100"),)),
        KeyValue("magnitude of change", (Span("text", "+120%"),)),
    ]


def test_blank_lines_produce_no_blocks():
    assert parse_blocks("\n\n   \n") == []
    assert parse_blocks("") == []


def test_render_html_escapes_content():
    html = render_html("Alert <script>alert(1)</script> **now**")
    assert "<script>" not in html
    assert "&lt;script&gt;" in html
    assert "<strong>now</strong>" in html


def test_render_html_shapes():
    html = render_html("Service: S3\n* a\n* b\nplain")
    assert html == "<p><strong>Service:</strong> S3</p>\n<ul><li>a</li><li>b</li></ul>\n<p>plain</p>"


def test_plain_html_is_escaped_lines():
    assert plain_html("a < b\n\nc") == "<p>a &lt; b</p>\n<p>c</p>"


def test_triple_asterisks_are_bold_italic():
    assert parse_inline("Severity: ***critical*** now") == (
        Span("text", "Severity: "),
        Span("bold_italic", "critical"),
        Span("text", " now"),
    )
    assert render_html("***critical***") == "<p><strong><em>critical</em></strong></p>"
