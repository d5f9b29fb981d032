"""Ordered and unordered lists, including nested lists."""

from __future__ import annotations

import re
from collections.abc import Callable
from functools import lru_cache

from .constants import MAX_LIST_DEPTH, OL_MARKER, UL_MARKER
from .models import ConversionContext
from .normalizer import outdent
from .protector import protect_block

Gamut = Callable[[str], str]

TRAILING_BLANK_LINES_PATTERN = re.compile(r"\n{2,}\Z")
BLANK_LINE_PATTERN = re.compile(r"\n{2,}")

_OTHER_MARKER = {UL_MARKER: OL_MARKER, OL_MARKER: UL_MARKER}


@lru_cache(maxsize=16)
def _whole_list_pattern(tab_width: int, marker: str, nested: bool) -> re.Pattern[str]:
    # Top-level lists must start the text or follow a blank line; this keeps
    # "version\n8. Oops" inside its paragraph.
    prefix = r"^" if nested else r"(?:(?<=\n)\n|\A\n?)"
    return re.compile(
        rf"""
        {prefix}
        (                               # whole list
          (
            ([ ]{{0,{tab_width - 1}}})  # indentation
            ({marker})                  # first marker
            [ ]+
          )
          (?s:.+?)
          (
              \Z
            |
              \n{{2,}}
              (?=\S)
              (?![ ]*{marker}[ ]+)      # not followed by another item
            |
              (?=\n\3{_OTHER_MARKER[marker]}[ ]+)   # other kind of list
          )
        )
        """,
        re.M | re.X,
    )


@lru_cache(maxsize=4)
def _list_item_pattern(marker: str) -> re.Pattern[str]:
    return re.compile(
        rf"""
        (\n)?                           # leading blank line
        (^[ ]*)                         # indentation
        ({marker}(?:[ ]+|(?=\n)))       # marker; empty items need no space
        ((?s:.*?))                      # item text
        (?:(\n+(?=\n))|\n)              # trailing blank line
        (?=\n*(\Z|\2({marker})(?:[ ]+|(?=\n))))
        """,
        re.M | re.X,
    )


def do_lists(ctx: ConversionContext, text: str, block_gamut: Gamut, span_gamut: Gamut) -> str:
    """Convert Markdown lists into ``<ul>`` and ``<ol>`` blocks.

    Unordered lists are found first, then ordered ones. A list ends at the end
    of the text, at a blank line followed by something other than an item, or
    where a list of the other kind starts at the same indentation. Lists nested
    deeper than `MAX_LIST_DEPTH` are left as text.

    Args:
        ctx: Conversion context; its `list_level` tells nested lists apart.
        text: Block text.
        block_gamut: Converter for the content of loose items.
        span_gamut: Converter for the content of tight items.

    Returns:
        str: Text with each list replaced by a block placeholder.

    Examples:
        do_lists(ctx, "- a\\n- b\\n", block, span)  # "\\nB\\x1a1B\\n\\n"
    """
    if ctx.list_level >= MAX_LIST_DEPTH:
        return text

    for marker in (UL_MARKER, OL_MARKER):
        pattern = _whole_list_pattern(ctx.config.tab_width, marker, ctx.list_level > 0)

        def _replace(match: re.Match[str], marker: str = marker) -> str:
            tag = "ul" if marker == UL_MARKER else "ol"
            items = process_list_items(ctx, match.group(1) + "\n", marker, block_gamut, span_gamut)
            html = f"<{tag}>\n{items}</{tag}>"
            return f"\n{protect_block(ctx, html)}\n\n"

        text = pattern.sub(_replace, text)

    return text


def process_list_items(
    ctx: ConversionContext, list_text: str, marker: str, block_gamut: Gamut, span_gamut: Gamut
) -> str:
    """Split one list into ``<li>`` elements.

    An item separated from its neighbours by a blank line, or holding one, is
    loose: its content is converted as blocks and gets paragraphs. Other items
    are tight and only get span conversion, after any sub-list is converted.

    Args:
        ctx: Conversion context.
        list_text: Text of a whole list, ending with a newline.
        marker: Marker pattern of the list kind.
        block_gamut: Converter for loose items.
        span_gamut: Converter for tight items.

    Returns:
        str: Concatenated ``<li>...</li>`` lines.
    """
    tab_width = ctx.config.tab_width

    def _item(match: re.Match[str]) -> str:
        leading_line, leading_space, marker_space, item, trailing_blank = match.group(1, 2, 3, 4, 5)

        if leading_line or trailing_blank or BLANK_LINE_PATTERN.search(item):
            item = leading_space + " " * len(marker_space) + item
            item = block_gamut(outdent(item, tab_width) + "\n")
        else:
            item = do_lists(ctx, outdent(item, tab_width), block_gamut, span_gamut)
            item = span_gamut(item.rstrip("\n"))

        return f"<li>{item}</li>\n"

    ctx.list_level += 1
    try:
        list_text = TRAILING_BLANK_LINES_PATTERN.sub("\n", list_text)
        return _list_item_pattern(marker).sub(_item, list_text)
    finally:
        ctx.list_level -= 1
