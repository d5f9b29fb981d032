"""Block-level conversion: headers, rules, code blocks, blockquotes and paragraphs."""

from __future__ import annotations

import re
from functools import lru_cache, partial

from .constants import (
    ATX_HEADER_PATTERN,
    BLOCKQUOTE_MARKER_PATTERN,
    BLOCKQUOTE_PATTERN,
    EMPTY_LIST_ITEM_PATTERN,
    HORIZONTAL_RULE_PATTERN,
    MAX_BLOCKQUOTE_DEPTH,
    PARAGRAPH_SPLIT_PATTERN,
    PRE_BLOCK_PATTERN,
    SETEXT_HEADER_PATTERN,
    SURROUNDING_NEWLINES_PATTERN,
)
from .encoding import encode_code
from .html_blocks import hash_html_blocks
from .lists import do_lists
from .models import ConversionContext
from .normalizer import outdent
from .protector import is_block_placeholder, protect_block, restore_block, unprotect
from .spans import run_span_gamut

PARAGRAPH_INDENT_PATTERN = re.compile(r"^([ ]*)")
PRE_INDENT_PATTERN = re.compile(r"^  ", re.M)


@lru_cache(maxsize=8)
def _code_block_pattern(tab_width: int) -> re.Pattern[str]:
    return re.compile(
        rf"""
        (?:\n\n|\A\n?)
        (                                   # code block
          (?>
            [ ]{{{tab_width}}}              # indented by a full tab width
            .*\n+
          )+
        )
        ((?=^[ ]{{0,{tab_width}}}\S)|\Z)    # next unindented line or end
        """,
        re.M | re.X,
    )


def do_headers(ctx: ConversionContext, text: str) -> str:
    """Convert setext (underlined) and atx (``#``-prefixed) headers.

    A ``-`` underline of length one below a line starting with ``- `` is an
    empty list item, not a header.

    Examples:
        unprotect(ctx, do_headers(ctx, "Title\\n=====\\n"))  # "\\n<h1>Title</h1>\\n\\n"
    """

    def _setext(match: re.Match[str]) -> str:
        title, underline = match.group(1, 2)
        if underline == "-" and EMPTY_LIST_ITEM_PATTERN.match(title):
            return match.group(0)
        level = 1 if underline[0] == "=" else 2
        return _header_block(ctx, level, title)

    def _atx(match: re.Match[str]) -> str:
        return _header_block(ctx, len(match.group(1)), match.group(2))

    text = SETEXT_HEADER_PATTERN.sub(_setext, text)
    return ATX_HEADER_PATTERN.sub(_atx, text)


def _header_block(ctx: ConversionContext, level: int, title: str) -> str:
    html = f"<h{level}>{run_span_gamut(ctx, title)}</h{level}>"
    return f"\n{protect_block(ctx, html)}\n\n"


def do_horizontal_rules(ctx: ConversionContext, text: str) -> str:
    """Replace lines of three or more ``-``, ``*`` or ``_`` with ``<hr>``."""
    rule = f"<hr{ctx.config.empty_element_suffix}"
    return HORIZONTAL_RULE_PATTERN.sub(lambda _match: f"\n{protect_block(ctx, rule)}\n", text)


def do_code_blocks(ctx: ConversionContext, text: str) -> str:
    """Convert runs of lines indented by `tab_width` spaces into code blocks.

    The content is outdented one level and entity-escaped; no other Markdown
    processing happens inside.

    Examples:
        do_code_blocks(ctx, "    a < b\\n")  # "\\n\\nB\\x1a1B\\n\\n" for "<pre><code>a &lt; b\\n</code></pre>"
    """
    tab_width = ctx.config.tab_width

    def _replace(match: re.Match[str]) -> str:
        code = encode_code(outdent(match.group(1), tab_width))
        code = SURROUNDING_NEWLINES_PATTERN.sub("", code)
        html = f"<pre><code>{code}\n</code></pre>"
        return f"\n\n{protect_block(ctx, html)}\n\n"

    return _code_block_pattern(tab_width).sub(_replace, text)


def do_block_quotes(ctx: ConversionContext, text: str) -> str:
    """Convert ``>``-prefixed runs of lines into ``<blockquote>`` blocks.

    One level of ``>`` markers is stripped and the content is converted as a
    document of its own, so quotes nest and may hold any block element.
    Quotes nested deeper than `MAX_BLOCKQUOTE_DEPTH` are left as text.
    """

    def _replace(match: re.Match[str]) -> str:
        if ctx.quote_level >= MAX_BLOCKQUOTE_DEPTH:
            return match.group(0)
        quote = BLOCKQUOTE_MARKER_PATTERN.sub("", match.group(1))
        ctx.quote_level += 1
        try:
            quote = run_block_gamut(ctx, quote)
        finally:
            ctx.quote_level -= 1
        quote = "\n".join(f"  {line}" for line in quote.split("\n"))
        # Indentation would leak into <pre> content
        quote = PRE_BLOCK_PATTERN.sub(lambda pre: PRE_INDENT_PATTERN.sub("", pre.group(1)), quote)
        html = f"<blockquote>\n{quote}\n</blockquote>"
        return f"\n{protect_block(ctx, html)}\n\n"

    return BLOCKQUOTE_PATTERN.sub(_replace, text)


def form_paragraphs(ctx: ConversionContext, text: str) -> str:
    """Wrap text chunks in ``<p>`` tags and restore block placeholders.

    Chunks are separated by blank lines. A chunk that is exactly one block
    placeholder is replaced by its stored HTML; every other chunk goes through
    the span gamut.

    Args:
        ctx: Conversion context.
        text: Block text after every other block transformation.

    Returns:
        str: HTML chunks joined by blank lines.

    Examples:
        form_paragraphs(ctx, "one\\n\\ntwo")  # "<p>one</p>\\n\\n<p>two</p>"
    """
    text = SURROUNDING_NEWLINES_PATTERN.sub("", text)

    paragraphs = []
    for chunk in PARAGRAPH_SPLIT_PATTERN.split(text):
        if not chunk:
            continue
        if is_block_placeholder(chunk):
            paragraphs.append(restore_block(ctx, chunk))
            continue
        chunk = run_span_gamut(ctx, chunk)
        chunk = PARAGRAPH_INDENT_PATTERN.sub("<p>", chunk, count=1) + "</p>"
        paragraphs.append(unprotect(ctx, chunk))

    return "\n\n".join(paragraphs)


def run_basic_block_gamut(ctx: ConversionContext, text: str) -> str:
    """Apply the block transformations to text whose HTML blocks are already protected."""
    text = do_headers(ctx, text)
    text = do_horizontal_rules(ctx, text)
    text = do_lists(ctx, text, partial(run_block_gamut, ctx), partial(run_span_gamut, ctx))
    text = do_code_blocks(ctx, text)
    text = do_block_quotes(ctx, text)
    return form_paragraphs(ctx, text)


def run_block_gamut(ctx: ConversionContext, text: str) -> str:
    """Convert a nested block of Markdown, such as a blockquote or a loose list item."""
    text = hash_html_blocks(ctx, text)
    return run_basic_block_gamut(ctx, text)
