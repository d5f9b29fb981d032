import html

import pytest

from markdown_html.encoding import (
    encode_amps_and_angles,
    encode_attribute,
    encode_code,
    encode_email_address,
)


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("AT&T", "AT&amp;T"),
        ("&copy; &#169; &#xA9;", "&copy; &#169; &#xA9;"),
        ("4 < 5", "4 &lt; 5"),
        ("a > b", "a > b"),
        ("& alone", "&amp; alone"),
    ],
)
def test_encode_amps_and_angles(text: str, expected: str):
    assert encode_amps_and_angles(text) == expected


def test_encode_amps_and_angles_without_entities():
    assert encode_amps_and_angles("&copy; &", no_entities=True) == "&amp;copy; &amp;"


def test_encode_attribute_escapes_quotes():
    assert encode_attribute('say "hi" & <bye>') == "say &quot;hi&quot; &amp; &lt;bye>"


def test_encode_code_escapes_everything():
    assert encode_code("a < b && c > d &copy;") == "a &lt; b &amp;&amp; c &gt; d &amp;copy;"


def test_encode_email_address_round_trips_through_entities():
    encoded = encode_email_address("foo@example.com")

    assert html.unescape(encoded) == '<a href="mailto:foo@example.com">foo@example.com</a>'


def test_encode_email_address_always_hides_at_sign():
    encoded = encode_email_address("someone.with.a.long.name@example.org")

    assert "@" not in encoded


def test_encode_email_address_is_deterministic():
    assert encode_email_address("a@b.c") == encode_email_address("a@b.c")
