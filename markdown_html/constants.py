"""Constants used across the markdown-html package."""

from __future__ import annotations

import re

from .config import MarkdownConfig

DEFAULT_CONFIG = MarkdownConfig()
DEFAULT_MAX_FILE_SIZE = DEFAULT_CONFIG.max_file_size

# Placeholders: <boundary>\x1A<counter><boundary>
PLACEHOLDER_MARKER = "\x1a"
PLACEHOLDER_PATTERN = re.compile(r"([BX:])\x1a[0-9]+\1")
BLOCK_PLACEHOLDER_PATTERN = re.compile(r"B\x1a[0-9]+B")

# Nesting limits; deeper structures fall back to literal text.
MAX_BRACKET_DEPTH = 6
MAX_URL_PAREN_DEPTH = 4
NESTED_TAG_LEVEL = 4
MAX_BLOCKQUOTE_DEPTH = 32
MAX_LIST_DEPTH = 32

# Characters that can be backslash-escaped
ESCAPE_CHARS = "\\`*_{}[]()>#+-.!"

# Block-level HTML tags. "Always block" tags may carry content on the opening
# line; the "line block" tags are blocks only when the start tag stands alone.
BLOCK_TAGS = (
    "p|div|h[1-6]|blockquote|pre|table|dl|ol|ul|address|"
    "script|noscript|form|fieldset|iframe|math"
)
LINE_BLOCK_TAGS = "ins|del"

# Tag attributes: quoted values may contain ">", a lone "/" may not close the tag.
TAG_ATTRIBUTES = r"""(?>\s(?>[^>"/]+|/+(?!>)|"[^"]*"|'[^']*')*)?"""

# Normalization
BOM_PATTERN = re.compile(r"^\ufeff|\x1a")
LINE_ENDING_PATTERN = re.compile(r"\r\n?")
WHITESPACE_LINE_PATTERN = re.compile(r"^[ \t]+$", re.M)

# List markers
UL_MARKER = r"[*+-]"
OL_MARKER = r"\d+[.]"

# Block patterns
SETEXT_HEADER_PATTERN = re.compile(r"^(.+?)[ ]*\n(=+|-+)[ ]*\n+", re.M)
ATX_HEADER_PATTERN = re.compile(r"^(#{1,6})[ ]*(.+?)[ ]*#*\n+", re.M)
EMPTY_LIST_ITEM_PATTERN = re.compile(r"^-(?: |$)")
HORIZONTAL_RULE_PATTERN = re.compile(r"^[ ]{0,3}([-*_])(?:[ ]{0,2}\1){2,}[ ]*$", re.M)
BLOCKQUOTE_PATTERN = re.compile(
    r"""
    (                       # whole quote
      (?>
        ^[ ]*>[ ]?          # ">" at the start of a line
          .+\n              # rest of the first line
        (?:.+\n)*           # subsequent consecutive lines
        \n*                 # blanks
      )+
    )
    """,
    re.M | re.X,
)
BLOCKQUOTE_MARKER_PATTERN = re.compile(r"^[ ]*>[ ]?|^[ ]+$", re.M)
PRE_BLOCK_PATTERN = re.compile(r"(\s*<pre>.+?</pre>)", re.S)
PARAGRAPH_SPLIT_PATTERN = re.compile(r"\n{2,}")
SURROUNDING_NEWLINES_PATTERN = re.compile(r"\A\n+|\n+\Z")

# Span patterns
HARD_BREAK_PATTERN = re.compile(r" {2,}\n")
UNESCAPED_AMPERSAND_PATTERN = re.compile(r"&(?!#?[xX]?(?:[0-9a-fA-F]+|\w+);)")
URL_AUTOLINK_PATTERN = re.compile(r"""<((?:https?|ftp|dict):[^'">\s]+)>""", re.I)
EMAIL_AUTOLINK_PATTERN = re.compile(
    r"""
    <
    (?:mailto:)?
    (
      (?:
        [-!#$%&'*+/=?^_`.{|}~\w]+
      |
        ".*?"
      )
      @
      (?:
        [-a-z0-9\u0080-\uffff]+(?:\.[-a-z0-9\u0080-\uffff]+)*\.[a-z]+
      |
        \[[\d.a-fA-F:]+\]   # IPv4 & IPv6
      )
    )
    >
    """,
    re.I | re.X,
)
LINK_ID_NEWLINE_PATTERN = re.compile(r"[ ]?\n")

# File handling
MARKDOWN_EXTENSIONS = (".md", ".markdown", ".mdown", ".mkd", ".mkdn", ".text", ".txt")
