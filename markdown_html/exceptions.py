"""Package-specific exception types."""

from __future__ import annotations


class MarkdownError(Exception):
    """Base class for errors raised by markdown-html.

    Conversion itself never fails on text input; these errors signal
    programming mistakes or problems around the conversion (files, settings).
    """


class PlaceholderError(MarkdownError):
    """Raised when a placeholder token has no stored content.

    This points at a protect/unprotect pairing bug inside the engine, never at
    malformed input.

    Args:
        token: The placeholder that could not be restored.
    """

    def __init__(self, token: str):
        self.token = token
        super().__init__(self._build_message())

    def _build_message(self) -> str:
        printable = self.token.replace("\x1a", "\\x1a")
        return f"Unknown placeholder {printable!r}; protected regions are out of sync"


class ConvertFileError(MarkdownError):
    """Raised when converting a Markdown file fails."""
