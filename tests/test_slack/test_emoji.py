"""Tests for emoji shortcode resolution."""

from incident_bridge.slack.emoji import replace_shortcodes, shortcode_to_unicode


def test_known_shortcode():
    """Known names map to their glyph."""
    assert shortcode_to_unicode("red_circle") == "\U0001f534"
    assert shortcode_to_unicode("white_check_mark") == "✅"


def test_unknown_shortcode_returns_none():
    """Unknown names have no glyph."""
    assert shortcode_to_unicode("party_parrot") is None


def test_replace_in_text():
    """Known shortcodes inside text are replaced, the rest is untouched."""
    assert replace_shortcodes(":red_circle: CPU :alert:") == "\U0001f534 CPU \U0001f6a8"


def test_unknown_shortcode_kept_literally():
    """Unknown shortcodes pass through as written."""
    assert replace_shortcodes("hi :party_parrot:") == "hi :party_parrot:"


def test_lookup_is_case_sensitive():
    """Shortcode names are lowercase; other casing is left alone."""
    assert replace_shortcodes(":Warning:") == ":Warning:"


def test_empty_text():
    """None and empty strings resolve to empty strings."""
    assert replace_shortcodes("") == ""
    assert replace_shortcodes(None) == ""
