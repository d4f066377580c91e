"""Slack ingress: channel history, message normalization and image extraction."""

from incident_bridge.slack.client import get_slack_client, reset_client
from incident_bridge.slack.emoji import replace_shortcodes, shortcode_to_unicode
from incident_bridge.slack.history import fetch_history, get_permalink
from incident_bridge.slack.normalizer import extract_images, extract_text, normalize

__all__ = [
    "extract_images",
    "extract_text",
    "fetch_history",
    "get_permalink",
    "get_slack_client",
    "normalize",
    "replace_shortcodes",
    "reset_client",
    "shortcode_to_unicode",
]
