import logging

import pytest

from markdown_html.link_refs import strip_link_definitions
from markdown_html.models import LinkReference


def test_collects_definition_with_title(ctx):
    result = strip_link_definitions(ctx, '[Home]: /index.html "Start"\n')

    assert result == ""
    assert ctx.links["home"] == LinkReference("/index.html", "Start")


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("[id]: /url\n", LinkReference("/url", None)),
        ("[id]: <http://example.com/a b>\n", LinkReference("http://example.com/a b", None)),
        ("[id]: /url (Paren title)\n", LinkReference("/url", "Paren title")),
        ('[id]: /url\n    "Next line"\n', LinkReference("/url", "Next line")),
        ('[id]:\n  /url "T"\n', LinkReference("/url", "T")),
        ('   [id]: /url ""\n', LinkReference("/url", "")),
    ],
)
def test_definition_forms(ctx, text: str, expected: LinkReference):
    assert strip_link_definitions(ctx, text) == ""
    assert ctx.links["id"] == expected


def test_keeps_surrounding_text(ctx):
    result = strip_link_definitions(ctx, "Intro\n\n[id]: /url\n\nMore\n\n")

    assert "[id]" not in result
    assert result.startswith("Intro\n")
    assert "More" in result


def test_indented_by_tab_width_is_not_a_definition(ctx):
    text = "    [id]: /url\n"

    assert strip_link_definitions(ctx, text) == text
    assert "id" not in ctx.links


def test_later_definition_wins(ctx):
    strip_link_definitions(ctx, "[a]: /one\n[A]: /two\n")

    assert ctx.links["a"].url == "/two"


def test_logs_collected_definitions(ctx, caplog):
    caplog.set_level(logging.DEBUG, logger="markdown_html")

    strip_link_definitions(ctx, "[a]: /one\n[b]: /two\n")

    assert "Collected 2 link definition(s)" in caplog.text
