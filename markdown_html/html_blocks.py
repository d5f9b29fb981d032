"""Detection and protection of raw block-level HTML."""

from __future__ import annotations

import logging
import re

from .constants import BLOCK_TAGS, LINE_BLOCK_TAGS, NESTED_TAG_LEVEL, TAG_ATTRIBUTES
from .models import ConversionContext
from .protector import protect_block

logger = logging.getLogger(__name__)

BLOCK_OPEN_TAG_PATTERN = re.compile(rf"<({BLOCK_TAGS}){TAG_ATTRIBUTES}>", re.I)
LINE_BLOCK_OPEN_TAG_PATTERN = re.compile(rf"<({LINE_BLOCK_TAGS}){TAG_ATTRIBUTES}>[ ]*\n", re.I)
HR_TAG_PATTERN = re.compile(rf"<(hr){TAG_ATTRIBUTES}/?>[ ]*(?=\n{{2,}}|\n?\Z)", re.I)
COMMENT_BLOCK_PATTERN = re.compile(r"<!--.*?-->[ ]*(?=\n{2,}|\n?\Z)", re.S)
PROCESSING_INSTRUCTION_PATTERN = re.compile(r"<([?%]).*?\1>[ ]*(?=\n{2,}|\n?\Z)", re.S)
LINE_END_PATTERN = re.compile(r"[ ]*(?=\n|\Z)")
LEADING_SPACES_PATTERN = re.compile(r"[ ]*")


def hash_html_blocks(ctx: ConversionContext, text: str) -> str:
    """Protect top-level HTML blocks so Markdown rules leave them alone.

    Blocks must start the document or follow a blank line, with fewer than
    `tab_width` leading spaces. Each block is replaced by a block placeholder
    surrounded by blank lines. Nothing happens when markup is disabled.

    Args:
        ctx: Conversion context.
        text: Normalized document or block text.

    Returns:
        str: Text with HTML blocks replaced by placeholders.

    Examples:
        hash_html_blocks(ctx, "<div>\\nraw\\n</div>\\n\\n")  # "\\n\\nB\\x1a1B\\n\\n\\n\\n"
    """
    if ctx.config.no_markup or "<" not in text:
        return text

    max_indent = ctx.config.tab_width - 1
    parts = []
    last = 0
    pos = 0
    found = 0

    while True:
        start = _next_block_start(text, pos)
        if start is None:
            break

        body_start = start + 1 if start == 0 and text.startswith("\n") else start
        tag_start = LEADING_SPACES_PATTERN.match(text, body_start).end()
        if tag_start - body_start > max_indent or not text.startswith("<", tag_start):
            pos = start + 1
            continue

        end = _match_block(text, tag_start)
        if end is None:
            pos = start + 1
            continue

        parts.append(text[last:start])
        parts.append(f"\n\n{protect_block(ctx, text[body_start:end])}\n\n")
        last = end
        pos = end
        found += 1

    if not found:
        return text

    logger.debug("Protected %d HTML block(s)", found)
    parts.append(text[last:])
    return "".join(parts)


def _next_block_start(text: str, pos: int) -> int | None:
    """Find the next position that starts the document or follows a blank line."""
    if pos == 0:
        return 0
    index = text.find("\n\n", max(pos - 2, 0))
    if index == -1:
        return None
    return index + 2


def _match_block(text: str, pos: int) -> int | None:
    """Match any kind of HTML block at `pos` and return its end."""
    opening = BLOCK_OPEN_TAG_PATTERN.match(text, pos)
    if opening is None:
        opening = LINE_BLOCK_OPEN_TAG_PATTERN.match(text, pos)
    if opening is not None:
        end = _match_tag_block(text, opening)
        if end is not None:
            return end

    for pattern in (HR_TAG_PATTERN, COMMENT_BLOCK_PATTERN, PROCESSING_INSTRUCTION_PATTERN):
        match = pattern.match(text, pos)
        if match is not None:
            return match.end()

    return None


def _match_tag_block(text: str, opening: re.Match[str]) -> int | None:
    """Match from an opening tag to its closing tag at the end of a line.

    Returns:
        int | None: End of the block including trailing spaces, or None when
            the closing tag is missing or followed by more text on its line.
    """
    tag = opening.group(1)
    closing_at = _find_closing_tag(text, opening.end(), tag, level=1)
    if closing_at is None:
        return None

    closing_tag = f"</{tag}>"
    if text[closing_at : closing_at + len(closing_tag)].lower() != closing_tag.lower():
        return None

    trailer = LINE_END_PATTERN.match(text, closing_at + len(closing_tag))
    if trailer is None:
        return None
    return trailer.end()


def _find_closing_tag(text: str, pos: int, tag: str, level: int) -> int | None:
    """Locate the closing tag that ends the content starting at `pos`.

    Same-name tags opened inside the content must be closed before the content
    ends; this nesting is followed `NESTED_TAG_LEVEL` levels deep, below which
    the first closing tag is taken.

    Args:
        text: Text being scanned.
        pos: Position right after the opening tag.
        tag: Tag name to balance.
        level: Current nesting level, starting at 1.

    Returns:
        int | None: Position of the closing ``</tag`` or None when absent.
    """
    closing_pattern = re.compile(rf"</{re.escape(tag)}\s*>", re.I)

    if level > NESTED_TAG_LEVEL:
        closing = closing_pattern.search(text, pos)
        return closing.start() if closing else None

    nested_pattern = re.compile(rf"<{re.escape(tag)}{TAG_ATTRIBUTES}(/?)>", re.I)

    while True:
        index = text.find("<", pos)
        if index == -1:
            return None

        if closing_pattern.match(text, index):
            return index

        nested = nested_pattern.match(text, index)
        if nested is None:
            pos = index + 1
            continue

        if nested.group(1):
            pos = nested.end()
            continue

        inner_close = _find_closing_tag(text, nested.end(), tag, level + 1)
        if inner_close is None:
            # Nothing after this point closes the tag either
            return None

        pos = closing_pattern.match(text, inner_close).end()
