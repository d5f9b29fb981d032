"""Input canonicalization applied before any Markdown parsing."""

from __future__ import annotations

import re

from .constants import BOM_PATTERN, LINE_ENDING_PATTERN, WHITESPACE_LINE_PATTERN


def normalize(text: str, tab_width: int) -> str:
    """Canonicalize line endings, tabs and blank lines.

    Removes a leading byte-order mark and any ``\\x1A`` characters (the
    placeholder marker), converts DOS and Mac line endings to ``\\n``, expands
    tabs, and empties lines holding only spaces so that blank lines can be
    found with a plain ``\\n\\n`` pattern later on.

    Args:
        text: Raw Markdown text.
        tab_width: Number of spaces substituted for each tab.

    Returns:
        str: Normalized text ending with exactly two newlines.

    Examples:
        normalize("a\\r\\n\\tb", 4)  # "a\\n    b\\n\\n"
    """
    text = BOM_PATTERN.sub("", text)
    text = LINE_ENDING_PATTERN.sub("\n", text)
    text = text.replace("\t", " " * tab_width)
    text = WHITESPACE_LINE_PATTERN.sub("", text)
    return text.rstrip("\n") + "\n\n"


def outdent(text: str, tab_width: int) -> str:
    """Remove one level of line-leading indentation from every line.

    Examples:
        outdent("    code\\n  more", 4)  # "code\\nmore"
    """
    return re.sub(rf"^(?:\t|[ ]{{1,{tab_width}}})", "", text, flags=re.M)
