"""Span-level conversion: code spans, inline HTML, escapes and the span gamut."""

from __future__ import annotations

import re
from functools import lru_cache, partial

from .constants import (
    EMAIL_AUTOLINK_PATTERN,
    ESCAPE_CHARS,
    HARD_BREAK_PATTERN,
    URL_AUTOLINK_PATTERN,
)
from .emphasis import do_italics_and_bold
from .encoding import encode_amps_and_angles, encode_attribute, encode_code, encode_email_address
from .links import do_anchors, do_images
from .models import ConversionContext
from .protector import protect

CODE_SPAN_TRIM_CHARS = " \t\n\r\0\x0b"


@lru_cache(maxsize=2)
def _span_token_pattern(no_markup: bool) -> re.Pattern[str]:
    escape = rf"\\[{re.escape(ESCAPE_CHARS)}]"
    code = r"`+"
    if no_markup:
        return re.compile(rf"{escape}|{code}")

    html = r"""
        <!--.*?-->                                  # comment
      | <\?.*?\?> | <%.*?%>                         # processing instruction
      | <[/!$]?[-a-zA-Z0-9:_]+                      # tag
        (?>\s(?>[^"'>]+|"[^"]*"|'[^']*')*)?
        >
    """
    return re.compile(rf"{escape} | {code} | {html}", re.S | re.X)


@lru_cache(maxsize=32)
def _code_span_closer(marker: str) -> re.Pattern[str]:
    return re.compile(rf"(.*?[^`]){re.escape(marker)}(?!`)", re.S)


def parse_span(ctx: ConversionContext, text: str) -> str:
    """Protect escapes, code spans and inline HTML in a single left-to-right scan.

    A backslash before one of ``\\`*_{}[]()>#+-.!`` yields the character as a
    numeric entity. A backtick run opens a code span closed by the next run of
    the same length; without a closer the backticks stay literal. Inline tags,
    comments and processing instructions pass through untouched unless markup
    is disabled.

    Args:
        ctx: Conversion context.
        text: Span text.

    Returns:
        str: Text with every recognized token replaced by a placeholder.

    Examples:
        parse_span(ctx, "Use `a < b` \\\\*here\\\\*")  # tokens for "<code>a &lt; b</code>" and "&#42;"
    """
    pattern = _span_token_pattern(ctx.config.no_markup)
    parts = []
    pos = 0

    while True:
        match = pattern.search(text, pos)
        if match is None:
            break

        parts.append(text[pos : match.start()])
        token = match.group()
        pos = match.end()

        if token[0] == "\\":
            parts.append(protect(ctx, f"&#{ord(token[1])};"))
        elif token[0] == "`":
            closer = _code_span_closer(token).match(text, pos)
            if closer is None:
                parts.append(token)
                continue
            code = encode_code(closer.group(1).strip(CODE_SPAN_TRIM_CHARS))
            parts.append(protect(ctx, f"<code>{code}</code>"))
            pos = closer.end()
        else:
            parts.append(protect(ctx, token))

    parts.append(text[pos:])
    return "".join(parts)


def do_auto_links(ctx: ConversionContext, text: str) -> str:
    """Link ``<http://...>`` style URLs and ``<user@host>`` addresses.

    Email addresses are rendered with `encode_email_address` to deter address
    harvesting.
    """

    def _url(match: re.Match[str]) -> str:
        url = encode_attribute(match.group(1), ctx.config.no_entities)
        return protect(ctx, f'<a href="{url}">{url}</a>')

    def _email(match: re.Match[str]) -> str:
        return protect(ctx, encode_email_address(match.group(1)))

    text = URL_AUTOLINK_PATTERN.sub(_url, text)
    return EMAIL_AUTOLINK_PATTERN.sub(_email, text)


def do_hard_breaks(ctx: ConversionContext, text: str) -> str:
    """Turn two or more trailing spaces before a newline into a line break."""
    line_break = f"<br{ctx.config.empty_element_suffix}\n"
    return HARD_BREAK_PATTERN.sub(lambda _match: protect(ctx, line_break), text)


def run_span_gamut(ctx: ConversionContext, text: str) -> str:
    """Apply every span-level transformation to `text`.

    Order matters: escapes and code spans are protected before links are
    resolved, links before autolinks, and entity encoding happens before
    emphasis so that generated markup is never encoded.

    Args:
        ctx: Conversion context.
        text: Inline text of a paragraph, header or list item.

    Returns:
        str: Text whose generated markup is held in placeholders.

    Examples:
        unprotect(ctx, run_span_gamut(ctx, "*a* & b"))  # "<em>a</em> &amp; b"
    """
    span_gamut = partial(run_span_gamut, ctx)

    text = parse_span(ctx, text)
    text = do_images(ctx, text)
    text = do_anchors(ctx, text, span_gamut)
    text = do_auto_links(ctx, text)
    text = encode_amps_and_angles(text, ctx.config.no_entities)
    text = do_italics_and_bold(ctx, text, span_gamut)
    return do_hard_breaks(ctx, text)
