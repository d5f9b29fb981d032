import pytest

from markdown_html import markdown
from markdown_html.emphasis import do_italics_and_bold, is_marker_token
from markdown_html.protector import unprotect


def _convert(ctx, text: str) -> str:
    return unprotect(ctx, do_italics_and_bold(ctx, text, lambda inner: inner))


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("*a*", "<em>a</em>"),
        ("_a_", "<em>a</em>"),
        ("**a**", "<strong>a</strong>"),
        ("__a__", "<strong>a</strong>"),
        ("***a***", "<strong><em>a</em></strong>"),
        ("___a___", "<strong><em>a</em></strong>"),
        ("*a* and *b*", "<em>a</em> and <em>b</em>"),
        ("**a *b***", "<strong>a <em>b</em></strong>"),
        ("*a **b***", "<em>a <strong>b</strong></em>"),
        ("***a** b*", "<em><strong>a</strong> b</em>"),
        ("***a* b**", "<strong><em>a</em> b</strong>"),
        ("*a **b** c*", "<em>a <strong>b</strong> c</em>"),
        ("**a _b_ c**", "<strong>a <em>b</em> c</strong>"),
    ],
)
def test_emphasis(ctx, text: str, expected: str):
    assert _convert(ctx, text) == expected


@pytest.mark.parametrize(
    "text",
    [
        "*unclosed",
        "2 * 3 * 4",
        "snake_case_name",
        "* not emphasis*",
        "*a_",
        "****a****",
        "a*, b*",
    ],
)
def test_literal_markers(ctx, text: str):
    assert _convert(ctx, text) == text


def test_dangling_emphasis_inside_strong_is_literal(ctx):
    assert _convert(ctx, "**strong *dangling**") == "<strong>strong *dangling</strong>"


def test_text_without_markers_is_untouched(ctx):
    assert do_italics_and_bold(ctx, "plain", lambda inner: inner) == "plain"
    assert ctx.regions == {}


def test_content_goes_through_span_gamut(ctx):
    result = do_italics_and_bold(ctx, "*a*", lambda inner: inner.upper())

    assert unprotect(ctx, result) == "<em>A</em>"


@pytest.mark.parametrize(
    ("text", "start", "end", "em", "strong", "expected"),
    [
        ("*a*", 0, 1, "", "", True),
        ("a * b", 2, 3, "", "", False),
        ("*a*", 2, 3, "*", "", True),
        ("*a *", 3, 4, "*", "", False),
        ("*a_", 2, 3, "*", "", False),
        ("a_b", 1, 2, "", "", False),
        ("**a", 0, 2, "", "", True),
        ("a **b", 2, 4, "", "**", False),
        ("****", 0, 4, "", "", False),
    ],
)
def test_is_marker_token(text, start, end, em, strong, expected):
    assert is_marker_token(text, start, end, em, strong) is expected


def test_emphasis_in_paragraph():
    assert markdown("This is *very* **nice**.") == (
        "<p>This is <em>very</em> <strong>nice</strong>.</p>\n"
    )


def test_emphasis_does_not_cross_code_spans():
    assert markdown("*a `b*` c*") == "<p><em>a <code>b*</code> c</em></p>\n"
