"""Emphasis and strong emphasis from ``*`` and ``_`` marker runs."""

from __future__ import annotations

import re
from collections.abc import Callable

from .models import ConversionContext, EmphasisFrame, EmphasisKind
from .protector import protect

MARKER_RUN_PATTERN = re.compile(r"\*+|_+")
PUNCTUATION_BEFORE_SPACE_PATTERN = re.compile(r"[.,:;]\s")


def do_italics_and_bold(
    ctx: ConversionContext, text: str, span_gamut: Callable[[str], str]
) -> str:
    """Convert ``*em*``, ``**strong**`` and ``***both***`` into HTML.

    Marker runs are read left to right once. Whether a run opens, closes or
    stays literal depends on its length, the emphasis currently open and the
    characters around it (see `is_marker_token`). A triple run opens both
    kinds at once; closing it with a shorter run closes the matching half and
    leaves the other open. Markers still open at the end are emitted as text.

    Args:
        ctx: Conversion context used to protect the generated markup.
        text: Span text with links, code and raw HTML already protected.
        span_gamut: Converter applied to the content of each emphasis span.

    Returns:
        str: Text with every closed emphasis replaced by a placeholder.

    Examples:
        do_italics_and_bold(ctx, "*a* **b**", gamut)  # tokens for "<em>a</em> <strong>b</strong>"
        do_italics_and_bold(ctx, "2 * 3 * 4", gamut)  # "2 * 3 * 4"
    """
    if "*" not in text and "_" not in text:
        return text

    stack = [EmphasisFrame()]
    em = ""
    strong = ""
    inside_triple = False
    pos = 0

    def _close(kind: EmphasisKind) -> None:
        frame = stack.pop()
        stack[-1].text += protect(ctx, kind.wrap(span_gamut(frame.text)))

    for run in MARKER_RUN_PATTERN.finditer(text):
        if not is_marker_token(text, run.start(), run.end(), em, strong):
            continue

        stack[-1].text += text[pos : run.start()]
        pos = run.end()
        token = run.group()
        char = token[0]

        if inside_triple:
            if len(token) == 3:
                _close(EmphasisKind.EMPHASIS_STRONG)
                em = strong = ""
            else:
                # Close one half; the frame now stands for the other half
                top = stack[-1]
                kind = EmphasisKind.from_marker(token)
                top.marker = char * (3 - len(token))
                top.text = protect(ctx, kind.wrap(span_gamut(top.text)))
                if kind is EmphasisKind.STRONG:
                    strong = ""
                else:
                    em = ""
            inside_triple = False

        elif len(token) == 3:
            if em:
                for _ in range(2):
                    kind = EmphasisKind.from_marker(stack[-1].marker)
                    _close(kind)
                    if kind is EmphasisKind.STRONG:
                        strong = ""
                    else:
                        em = ""
            else:
                em, strong = char, char * 2
                stack.append(EmphasisFrame(marker=token))
                inside_triple = True

        elif len(token) == 2:
            if strong:
                if len(stack[-1].marker) == 1:
                    _flush(stack)
                    em = ""
                _close(EmphasisKind.STRONG)
                strong = ""
            else:
                stack.append(EmphasisFrame(marker=token))
                strong = token

        elif em:
            if len(stack[-1].marker) == 1:
                _close(EmphasisKind.EMPHASIS)
                em = ""
            else:
                stack[-1].text += token
        else:
            stack.append(EmphasisFrame(marker=token))
            em = token

    stack[-1].text += text[pos:]
    while len(stack) > 1:
        _flush(stack)
    return stack[0].text


def is_marker_token(text: str, start: int, end: int, em: str, strong: str) -> bool:
    """Decide whether the marker run ``text[start:end]`` acts as emphasis.

    Only runs of one to three characters count. A run that may open must be
    followed by non-whitespace (or the end of text) and not by punctuation
    and a space; a run that may close must follow non-whitespace. Underscore
    runs must also not touch a word character on their outer side.

    Args:
        text: Span text being scanned.
        start: Start of the marker run.
        end: End of the marker run.
        em: Marker of the open emphasis, or ``""``.
        strong: Marker of the open strong emphasis, or ``""``.

    Returns:
        bool: True when the run opens or closes emphasis in the current state.

    Examples:
        is_marker_token("*a*", 0, 1, "", "")  # True
        is_marker_token("a * b", 2, 3, "", "")  # False
    """
    length = end - start
    char = text[start]

    if length == 3:
        if not em and not strong:
            return _can_open(text, start, end)
        if em == char and strong == char * 2:
            return _can_close(text, start, end)
        return False

    if length == 2:
        if not strong:
            return _can_open(text, start, end)
        return strong == char * 2 and _can_close(text, start, end)

    if length == 1:
        if not em:
            return _can_open(text, start, end)
        return em == char and _can_close(text, start, end)

    return False


def _can_open(text: str, start: int, end: int) -> bool:
    if end < len(text) and text[end].isspace() and text[end:] != "\n":
        return False
    if PUNCTUATION_BEFORE_SPACE_PATTERN.match(text, end):
        return False
    if text[start] == "_" and start > 0 and _is_word_char(text[start - 1]):
        return False
    return True


def _can_close(text: str, start: int, end: int) -> bool:
    if start > 0 and text[start - 1].isspace():
        return False
    if text[start] == "_" and end < len(text) and _is_word_char(text[end]):
        return False
    return True


def _is_word_char(char: str) -> bool:
    return char.isalnum() or char == "_"


def _flush(stack: list[EmphasisFrame]) -> None:
    """Give up on the innermost open marker and keep it as literal text."""
    frame = stack.pop()
    stack[-1].text += frame.marker + frame.text
