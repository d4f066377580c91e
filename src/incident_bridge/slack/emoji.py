"""Slack emoji shortcode resolution.

Covers the shortcodes alerting integrations put in their messages. Anything
not in the table is left as the literal ``:shortcode:``.
"""

import re

SLACK_EMOJI_MAP: dict[str, str] = {
    "red_circle": "\U0001f534",
    "link": "\U0001f517",
    "mag": "\U0001f50e",
    "alert": "\U0001f6a8",
    "warning": "⚠️",
    "info": "ℹ️",
    "white_check_mark": "✅",
    "heavy_check_mark": "✔️",
}

SHORTCODE_PATTERN = re.compile(r":([a-z0-9_+-]+):", re.IGNORECASE)


def shortcode_to_unicode(name: str) -> str | None:
    """Return the glyph for a shortcode name (no colons), or None if unknown."""
    return SLACK_EMOJI_MAP.get(name)


def replace_shortcodes(text: str) -> str:
    """Replace every known ``:shortcode:`` in text with its glyph."""
    return SHORTCODE_PATTERN.sub(
        lambda m: shortcode_to_unicode(m.group(1)) or m.group(0),
        text or "",
    )
