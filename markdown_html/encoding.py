"""HTML entity encoding helpers."""

from __future__ import annotations

import html
import zlib

from .constants import UNESCAPED_AMPERSAND_PATTERN


def encode_amps_and_angles(text: str, no_entities: bool = False) -> str:
    """Encode ``&`` and ``<`` without double-encoding valid entities.

    Args:
        text: Text to encode.
        no_entities: Encode every ampersand, including those starting an entity.

    Returns:
        str: Encoded text.

    Examples:
        encode_amps_and_angles("AT&T &copy; <3")  # "AT&amp;T &copy; &lt;3"
    """
    if no_entities:
        text = text.replace("&", "&amp;")
    else:
        text = UNESCAPED_AMPERSAND_PATTERN.sub("&amp;", text)
    return text.replace("<", "&lt;")


def encode_attribute(text: str, no_entities: bool = False) -> str:
    """Encode text for use inside a double-quoted HTML attribute."""
    return encode_amps_and_angles(text, no_entities).replace('"', "&quot;")


def encode_code(text: str) -> str:
    """Escape code so that it renders literally.

    Examples:
        encode_code("a < b && c")  # "a &lt; b &amp;&amp; c"
    """
    return html.escape(text, quote=False)


def encode_email_address(address: str) -> str:
    """Render an email address as an obfuscated ``mailto:`` anchor.

    Each ASCII character of ``mailto:<address>`` becomes a decimal or
    hexadecimal entity (roughly 45% each) or stays raw (about 10%); ``@`` is
    always encoded. The choice is deterministic for a given address.

    Args:
        address: Email address such as ``"foo@example.com"``.

    Returns:
        str: An ``<a href="mailto:...">`` element with encoded text.

    Examples:
        html.unescape(encode_email_address("a@b.c"))  # '<a href="mailto:a@b.c">a@b.c</a>'
    """
    address = f"mailto:{address}"
    seed = int(abs(zlib.crc32(address.encode("utf-8")) / len(address)))

    chars = list(address)
    for index, char in enumerate(chars):
        code = ord(char)
        if code >= 128:
            continue
        roll = (seed * (1 + index)) % 100
        if roll > 90 and char != "@":
            continue
        if roll < 45:
            chars[index] = f"&#x{code:x};"
        else:
            chars[index] = f"&#{code};"

    encoded = "".join(chars)
    text = "".join(chars[len("mailto:") :])
    return f'<a href="{encoded}">{text}</a>'
