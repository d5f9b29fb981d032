"""Data models for markdown-html."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto

from .config import MarkdownConfig


class Boundary(Enum):
    """Boundary characters surrounding a placeholder token.

    Attributes:
        BLOCK: Block-level element; never wrapped in a paragraph.
        WORD_SEPARATOR: Element acting as a word separator in inline text.
        GENERIC: Default inline substitution.
    """

    BLOCK = "B"
    WORD_SEPARATOR = ":"
    GENERIC = "X"


class EmphasisKind(Enum):
    """Kinds of emphasis produced by `*` and `_` runs.

    Attributes:
        EMPHASIS: Single-character run, rendered as ``<em>``.
        STRONG: Double-character run, rendered as ``<strong>``.
        EMPHASIS_STRONG: Triple-character run, rendered as ``<strong><em>``.
    """

    EMPHASIS = auto()
    STRONG = auto()
    EMPHASIS_STRONG = auto()

    @classmethod
    def from_marker(cls, marker: str) -> EmphasisKind:
        return _KINDS_BY_LENGTH[len(marker)]

    def wrap(self, text: str) -> str:
        if self is EmphasisKind.EMPHASIS:
            return f"<em>{text}</em>"
        if self is EmphasisKind.STRONG:
            return f"<strong>{text}</strong>"
        return f"<strong><em>{text}</em></strong>"


_KINDS_BY_LENGTH = {
    1: EmphasisKind.EMPHASIS,
    2: EmphasisKind.STRONG,
    3: EmphasisKind.EMPHASIS_STRONG,
}


@dataclass
class EmphasisFrame:
    """An open emphasis marker and the text gathered since it opened.

    Attributes:
        marker: The marker run (``"*"``, ``"__"``, ...); empty for the root frame.
        text: Text accumulated after the marker.
    """

    marker: str = ""
    text: str = ""


@dataclass
class LinkReference:
    """A link definition collected from the document or the configuration.

    Attributes:
        url: Destination URL, stored raw.
        title: Optional title, stored raw; encoded when the link is rendered.
    """

    url: str
    title: str | None = None


@dataclass
class ConversionContext:
    """Mutable state owned by a single conversion.

    Attributes:
        config: Configuration in effect for the conversion.
        links: Link reference table keyed by lower-cased id.
        regions: Protected regions keyed by placeholder token.
        counter: Last number used to mint a placeholder.
        list_level: Current list nesting depth; zero outside lists.
        quote_level: Current blockquote nesting depth; zero outside quotes.
        inside_anchor: Set while resolving the text of a link.
    """

    config: MarkdownConfig = field(default_factory=MarkdownConfig)
    links: dict[str, LinkReference] = field(default_factory=dict)
    regions: dict[str, str] = field(default_factory=dict)
    counter: int = 0
    list_level: int = 0
    quote_level: int = 0
    inside_anchor: bool = False

    @classmethod
    def from_config(cls, config: MarkdownConfig) -> ConversionContext:
        ctx = cls(config=config)
        ctx.reset()
        return ctx

    def reset(self) -> None:
        """Clear per-call tables and re-seed the predefined links."""
        titles = {
            link_id.lower(): title for link_id, title in self.config.predefined_titles.items()
        }
        self.links = {
            link_id.lower(): LinkReference(url, titles.get(link_id.lower()))
            for link_id, url in self.config.predefined_urls.items()
        }
        self.regions = {}
        self.counter = 0
        self.list_level = 0
        self.quote_level = 0
        self.inside_anchor = False

    def clear(self) -> None:
        self.links.clear()
        self.regions.clear()
        self.counter = 0
        self.list_level = 0
        self.quote_level = 0
        self.inside_anchor = False
