"""Placeholder protection for regions that later passes must not touch.

Generated HTML, raw HTML and escaped characters are swapped for opaque tokens
of the form ``<boundary>\\x1A<counter><boundary>``. The marker character is
stripped from the input during normalization, so a token can only come from
`protect`. Stored values are always fully restored text, which is why a single
`unprotect` pass recovers the final output.
"""

from __future__ import annotations

from .constants import BLOCK_PLACEHOLDER_PATTERN, PLACEHOLDER_MARKER, PLACEHOLDER_PATTERN
from .exceptions import PlaceholderError
from .models import Boundary, ConversionContext


def protect(ctx: ConversionContext, content: str, boundary: Boundary = Boundary.GENERIC) -> str:
    """Store `content` and return the placeholder that stands for it.

    Placeholders already present in `content` are restored first, so nested
    protection never has to be unwound more than once.

    Args:
        ctx: Conversion context owning the region table and counter.
        content: Text to protect.
        boundary: Boundary kind of the placeholder.

    Returns:
        str: A token unique for the lifetime of the conversion.

    Examples:
        token = protect(ctx, "<hr />", Boundary.BLOCK)  # "B\\x1a1B"
    """
    content = unprotect(ctx, content)

    ctx.counter += 1
    token = f"{boundary.value}{PLACEHOLDER_MARKER}{ctx.counter}{boundary.value}"
    ctx.regions[token] = content
    return token


def protect_block(ctx: ConversionContext, content: str) -> str:
    return protect(ctx, content, Boundary.BLOCK)


def unprotect(ctx: ConversionContext, text: str) -> str:
    """Replace every placeholder in `text` with its stored content.

    Raises:
        PlaceholderError: If a token was never issued by this context.
    """
    if PLACEHOLDER_MARKER not in text:
        return text
    return PLACEHOLDER_PATTERN.sub(lambda match: _lookup(ctx, match.group(0)), text)


def is_block_placeholder(text: str) -> bool:
    return BLOCK_PLACEHOLDER_PATTERN.fullmatch(text) is not None


def restore_block(ctx: ConversionContext, token: str) -> str:
    """Return the content stored for a block placeholder."""
    return _lookup(ctx, token)


def _lookup(ctx: ConversionContext, token: str) -> str:
    try:
        return ctx.regions[token]
    except KeyError as error:
        raise PlaceholderError(token) from error
