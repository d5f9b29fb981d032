"""Inline and reference-style links and images."""

from __future__ import annotations

import re
from collections.abc import Callable

from .constants import LINK_ID_NEWLINE_PATTERN, MAX_BRACKET_DEPTH, MAX_URL_PAREN_DEPTH
from .encoding import encode_attribute
from .models import ConversionContext, LinkReference
from .protector import protect

SpanGamut = Callable[[str], str]
Handler = Callable[[int, int], tuple[str | None, int] | None]

BRACKET_PATTERN = re.compile(r"[\[\]]")
URL_BOUNDARY_PATTERN = re.compile(r"[()\s]")
REFERENCE_TAIL_PATTERN = re.compile(r"[ ]?(?:\n[ ]*)?\[(.*?)\]", re.S)
SHORTCUT_PATTERN = re.compile(r"\[([^\[\]]+)\]")
ANCHOR_OPEN_PATTERN = re.compile(r"\([ \n]*")
IMAGE_OPEN_PATTERN = re.compile(r"\s?\([ \n]*")
ANCHOR_ANGLE_URL_PATTERN = re.compile(r"<(.+?)>", re.S)
IMAGE_ANGLE_URL_PATTERN = re.compile(r"<(\S*)>")
TITLE_TAIL_PATTERN = re.compile(r"""[ \n]*(?:(['"])(.*?)\1[ \n]*)?\)""", re.S)


def find_closing_bracket(text: str, open_pos: int) -> int | None:
    """Return the index of the ``]`` matching the ``[`` at `open_pos`.

    Brackets inside the link text must balance and may nest
    `MAX_BRACKET_DEPTH` levels deep.

    Examples:
        find_closing_bracket("[a [b] c] d", 0)  # 8
        find_closing_bracket("[a [b c", 0)  # None
    """
    depth = 0
    for match in BRACKET_PATTERN.finditer(text, open_pos):
        if match.group() == "[":
            depth += 1
            if depth > MAX_BRACKET_DEPTH + 1:
                return None
        else:
            depth -= 1
            if depth == 0:
                return match.start()
    return None


def scan_url(text: str, pos: int) -> int | None:
    """Return the end of a bare link destination starting at `pos`.

    The destination holds no whitespace; parentheses are allowed when they
    balance, up to `MAX_URL_PAREN_DEPTH` levels. Scanning stops before the
    first unmatched ``)``.

    Examples:
        scan_url("/wiki/Foo_(bar))", 0)  # 15
    """
    depth = 0
    index = pos
    while True:
        boundary = URL_BOUNDARY_PATTERN.search(text, index)
        if boundary is None:
            return len(text) if depth == 0 else None

        char = boundary.group()
        index = boundary.end()
        if char == "(":
            depth += 1
            if depth > MAX_URL_PAREN_DEPTH:
                return None
        elif char == ")" and depth > 0:
            depth -= 1
        else:
            return boundary.start() if depth == 0 else None


def do_images(ctx: ConversionContext, text: str) -> str:
    """Turn ``![alt][id]`` and ``![alt](src "title")`` into ``<img>`` tags.

    Reference images whose id is unknown are left as they are.

    Args:
        ctx: Conversion context holding the link table.
        text: Span text.

    Returns:
        str: Text with each image replaced by a placeholder.

    Examples:
        do_images(ctx, "![logo](/logo.png)")  # token for '<img src="/logo.png" alt="logo" />'
    """

    def _reference(start: int, close: int):
        tail = REFERENCE_TAIL_PATTERN.match(text, close + 1)
        if tail is None:
            return None
        alt_text = text[start + 2 : close]
        reference = _lookup(ctx, tail.group(1) or alt_text)
        if reference is None:
            return None, tail.end()
        return _render_image(ctx, reference.url, alt_text, reference.title), tail.end()

    text = _replace_bracketed(text, "![", _reference)

    def _inline(start: int, close: int):
        opening = IMAGE_OPEN_PATTERN.match(text, close + 1)
        if opening is None:
            return None
        destination = _match_destination(text, opening.end(), IMAGE_ANGLE_URL_PATTERN)
        if destination is None:
            return None
        url, title, end = destination
        return _render_image(ctx, url, text[start + 2 : close], title), end

    return _replace_bracketed(text, "![", _inline)


def do_anchors(ctx: ConversionContext, text: str, span_gamut: SpanGamut) -> str:
    """Turn Markdown links into ``<a>`` tags.

    Three forms are recognized, in this order: ``[text][id]`` (an empty id
    reuses the text), ``[text](url "title")`` and the ``[text]`` shortcut.
    Links are never nested; link text is converted with `span_gamut` while
    further anchor processing is disabled.

    Args:
        ctx: Conversion context holding the link table.
        text: Span text.
        span_gamut: Converter applied to the link text.

    Returns:
        str: Text with each link replaced by a placeholder.

    Examples:
        do_anchors(ctx, "[home](/ 'Start')", gamut)  # token for '<a href="/" title="Start">home</a>'
    """
    if ctx.inside_anchor:
        return text

    ctx.inside_anchor = True
    try:
        text = _reference_anchors(ctx, text, span_gamut)
        text = _inline_anchors(ctx, text, span_gamut)
        return _shortcut_anchors(ctx, text, span_gamut)
    finally:
        ctx.inside_anchor = False


def _reference_anchors(ctx: ConversionContext, text: str, span_gamut: SpanGamut) -> str:
    def _handle(start: int, close: int):
        tail = REFERENCE_TAIL_PATTERN.match(text, close + 1)
        if tail is None:
            return None
        link_text = text[start + 1 : close]
        reference = _lookup(ctx, tail.group(1) or link_text)
        if reference is None:
            return None, tail.end()
        anchor = _render_anchor(ctx, reference.url, reference.title, link_text, span_gamut)
        return anchor, tail.end()

    return _replace_bracketed(text, "[", _handle)


def _inline_anchors(ctx: ConversionContext, text: str, span_gamut: SpanGamut) -> str:
    def _handle(start: int, close: int):
        opening = ANCHOR_OPEN_PATTERN.match(text, close + 1)
        if opening is None:
            return None
        destination = _match_destination(text, opening.end(), ANCHOR_ANGLE_URL_PATTERN)
        if destination is None:
            return None
        url, title, end = destination
        return _render_anchor(ctx, url, title, text[start + 1 : close], span_gamut), end

    return _replace_bracketed(text, "[", _handle)


def _shortcut_anchors(ctx: ConversionContext, text: str, span_gamut: SpanGamut) -> str:
    def _handle(match: re.Match[str]) -> str:
        reference = _lookup(ctx, match.group(1))
        if reference is None:
            return match.group(0)
        return _render_anchor(ctx, reference.url, reference.title, match.group(1), span_gamut)

    return SHORTCUT_PATTERN.sub(_handle, text)


def _replace_bracketed(text: str, opener: str, handler: Handler) -> str:
    """Scan `text` for bracketed constructs and splice in handler results.

    `handler` receives the start of `opener` and the index of the matching
    ``]``. It returns None when nothing matches there, so scanning resumes one
    character later, or a ``(replacement, end)`` pair. A None replacement keeps
    the matched text literally and resumes scanning at `end`.
    """
    parts = []
    last = 0
    pos = 0

    while True:
        start = text.find(opener, pos)
        if start == -1:
            break

        close = find_closing_bracket(text, start + len(opener) - 1)
        outcome = handler(start, close) if close is not None else None
        if outcome is None:
            pos = start + 1
            continue

        replacement, end = outcome
        if replacement is not None:
            parts.append(text[last:start])
            parts.append(replacement)
            last = end
        pos = end

    if not parts:
        return text
    parts.append(text[last:])
    return "".join(parts)


def _match_destination(
    text: str, pos: int, angle_pattern: re.Pattern[str]
) -> tuple[str, str | None, int] | None:
    """Match ``url "title")`` at `pos`, returning the url, title and end."""
    angle = angle_pattern.match(text, pos)
    if angle is not None:
        tail = TITLE_TAIL_PATTERN.match(text, angle.end())
        if tail is not None:
            return angle.group(1), tail.group(2), tail.end()

    url_end = scan_url(text, pos)
    if url_end is None:
        return None
    tail = TITLE_TAIL_PATTERN.match(text, url_end)
    if tail is None:
        return None
    return text[pos:url_end], tail.group(2), tail.end()


def _lookup(ctx: ConversionContext, link_id: str) -> LinkReference | None:
    link_id = LINK_ID_NEWLINE_PATTERN.sub(" ", link_id.lower())
    return ctx.links.get(link_id)


def _render_anchor(
    ctx: ConversionContext,
    url: str,
    title: str | None,
    link_text: str,
    span_gamut: SpanGamut,
) -> str:
    no_entities = ctx.config.no_entities
    result = f'<a href="{encode_attribute(url, no_entities)}"'
    if title is not None:
        result += f' title="{encode_attribute(title, no_entities)}"'
    result += f">{span_gamut(link_text)}</a>"
    return protect(ctx, result)


def _render_image(ctx: ConversionContext, url: str, alt_text: str, title: str | None) -> str:
    no_entities = ctx.config.no_entities
    result = (
        f'<img src="{encode_attribute(url, no_entities)}"'
        f' alt="{encode_attribute(alt_text, no_entities)}"'
    )
    if title is not None:
        result += f' title="{encode_attribute(title, no_entities)}"'
    result += ctx.config.empty_element_suffix
    return protect(ctx, result)
