"""Collection of reference-style link definitions."""

from __future__ import annotations

import logging
import re
from functools import lru_cache

from .models import ConversionContext, LinkReference

logger = logging.getLogger(__name__)


@lru_cache(maxsize=8)
def _definition_pattern(tab_width: int) -> re.Pattern[str]:
    return re.compile(
        rf"""
        ^[ ]{{0,{tab_width - 1}}}\[(.+)\][ ]?:   # id
          [ ]*
          \n?                                 # at most one newline
          [ ]*
        (?:
          <(.+?)>                             # url in angle brackets
        |
          (\S+?)                              # bare url
        )
          [ ]*
          \n?
          [ ]*
        (?:
          (?<=\s)                             # title needs whitespace before it
          ["(]
          (.*?)                               # title
          [")]
          [ ]*
        )?
        (?:\n+|\Z)
        """,
        re.M | re.X,
    )


def strip_link_definitions(ctx: ConversionContext, text: str) -> str:
    """Record link definitions in the context and remove them from the text.

    A definition reads ``[id]: url "optional title"`` and may be indented by
    fewer than `tab_width` spaces. The URL may be wrapped in angle brackets and
    the title may sit on the following line, delimited by double quotes or
    parentheses. Ids are matched case-insensitively; a later
    definition replaces an earlier one with the same id.

    Args:
        ctx: Conversion context receiving the definitions.
        text: Normalized document text.

    Returns:
        str: Text without the definition lines.

    Examples:
        strip_link_definitions(ctx, '[Home]: /index.html "Start"\\n')  # ""
        ctx.links["home"]  # LinkReference(url="/index.html", title="Start")
    """
    found = 0

    def _record(match: re.Match[str]) -> str:
        nonlocal found
        link_id = match.group(1).lower()
        url = match.group(2) if match.group(2) is not None else match.group(3)
        ctx.links[link_id] = LinkReference(url=url, title=match.group(4))
        found += 1
        return ""

    text = _definition_pattern(ctx.config.tab_width).sub(_record, text)
    if found:
        logger.debug("Collected %d link definition(s)", found)
    return text
