import pytest

from markdown_html.config import MarkdownConfig
from markdown_html.models import (
    Boundary,
    ConversionContext,
    EmphasisFrame,
    EmphasisKind,
    LinkReference,
)


def test_boundary_members():
    assert [boundary.value for boundary in Boundary] == ["B", ":", "X"]


@pytest.mark.parametrize(
    ("marker", "kind"),
    [
        ("*", EmphasisKind.EMPHASIS),
        ("__", EmphasisKind.STRONG),
        ("***", EmphasisKind.EMPHASIS_STRONG),
    ],
)
def test_emphasis_kind_from_marker(marker, kind):
    assert EmphasisKind.from_marker(marker) is kind


def test_emphasis_kind_wrap():
    assert EmphasisKind.EMPHASIS.wrap("a") == "<em>a</em>"
    assert EmphasisKind.STRONG.wrap("a") == "<strong>a</strong>"
    assert EmphasisKind.EMPHASIS_STRONG.wrap("a") == "<strong><em>a</em></strong>"


def test_emphasis_frame_defaults():
    frame = EmphasisFrame()

    assert frame.marker == ""
    assert frame.text == ""


def test_link_reference_title_is_optional():
    assert LinkReference("/url").title is None
    assert LinkReference("/url", "").title == ""


def test_conversion_context_defaults():
    ctx = ConversionContext()

    assert ctx.config == MarkdownConfig()
    assert ctx.links == {}
    assert ctx.regions == {}
    assert ctx.counter == 0
    assert ctx.list_level == 0
    assert ctx.quote_level == 0
    assert ctx.inside_anchor is False


def test_from_config_seeds_predefined_links():
    config = MarkdownConfig(
        predefined_urls={"Home": "https://example.com/", "docs": "/docs"},
        predefined_titles={"Home": "Home page"},
    )

    ctx = ConversionContext.from_config(config)

    assert ctx.links == {
        "home": LinkReference("https://example.com/", "Home page"),
        "docs": LinkReference("/docs", None),
    }


def test_from_config_matches_titles_case_insensitively():
    config = MarkdownConfig(
        predefined_urls={"Home": "https://example.com/"},
        predefined_titles={"home": "Start here"},
    )

    ctx = ConversionContext.from_config(config)

    assert ctx.links == {"home": LinkReference("https://example.com/", "Start here")}


def test_reset_discards_document_state():
    config = MarkdownConfig(predefined_urls={"home": "/"})
    ctx = ConversionContext.from_config(config)
    ctx.links["extra"] = LinkReference("/extra")
    ctx.regions["X\x1a1X"] = "<b>"
    ctx.counter = 1
    ctx.list_level = 2
    ctx.quote_level = 3
    ctx.inside_anchor = True

    ctx.reset()

    assert set(ctx.links) == {"home"}
    assert ctx.regions == {}
    assert ctx.counter == 0
    assert ctx.list_level == 0
    assert ctx.quote_level == 0
    assert ctx.inside_anchor is False


def test_clear_empties_tables():
    ctx = ConversionContext.from_config(MarkdownConfig(predefined_urls={"home": "/"}))
    ctx.regions["X\x1a1X"] = "<b>"
    ctx.counter = 1

    ctx.clear()

    assert ctx.links == {}
    assert ctx.regions == {}
    assert ctx.counter == 0
