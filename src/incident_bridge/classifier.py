"""Decide which messages are new incident alerts and derive their summary.

Recovery notices are suppressed outright. Everything else qualifies only when
it announces a trigger. Severity is not read from the message: every
qualifying alert is filed as ``DEFAULT_SEVERITY``.
"""

import re

from incident_bridge.models.slack import RawMessage
from incident_bridge.models.ticket import Classification
from incident_bridge.slack.normalizer import extract_text

DEFAULT_SEVERITY = "High"
SUMMARY_MAX_LENGTH = 120

_TRIGGERED_WORD = re.compile(r"\btriggered\b", re.IGNORECASE)
_TRIGGERED_LABEL = re.compile(r"triggered:", re.IGNORECASE)
_SLACK_LINK = re.compile(r"<([^|>]+)\|([^>]+)>")
_WHITESPACE = re.compile(r"\s+")
_LINE_BREAK = re.compile(r"\r?\n")


def sanitize_summary(text: str | None) -> str:
    """Collapse whitespace to single spaces, trim, and cap at 120 characters."""
    return _WHITESPACE.sub(" ", text or "").strip()[:SUMMARY_MAX_LENGTH]


def is_qualifying(text: str) -> bool:
    """True for trigger announcements that are not recovery notices."""
    if not text or "recovered" in text.lower():
        return False
    return bool(_TRIGGERED_WORD.search(text)) or "Triggered:" in text


def summary_from_text(text: str) -> str:
    """Summary from canonical text.

    Returns the first line containing ``triggered:`` starting at that token,
    else the first non-blank line. Slack link markup is reduced to its label.
    """
    lines = [line.strip() for line in _LINE_BREAK.split(text or "")]
    lines = [_SLACK_LINK.sub(r"\2", line) for line in lines if line]
    for line in lines:
        idx = line.lower().find("triggered:")
        if idx >= 0:
            return sanitize_summary(line[idx:])
    return sanitize_summary(lines[0] if lines else "")


def summary_from_message(message: RawMessage) -> str:
    """Summary preferring attachment titles over the message text.

    An attachment title or fallback mentioning ``triggered:`` wins, then the
    first attachment title of any kind, then ``summary_from_text``.
    """
    for attachment in message.attachments:
        if attachment.title and _TRIGGERED_LABEL.search(attachment.title):
            return sanitize_summary(attachment.title)
        if attachment.fallback and _TRIGGERED_LABEL.search(attachment.fallback):
            return sanitize_summary(attachment.fallback)
    first_title = next((a.title for a in message.attachments if a.title), None)
    if first_title:
        return sanitize_summary(first_title)
    return summary_from_text(extract_text(message))


def classify(text: str, message: RawMessage | None = None) -> Classification:
    """Classify canonical text; ``message`` supplies richer summary sources."""
    if not is_qualifying(text):
        return Classification(qualifies=False, severity=DEFAULT_SEVERITY)
    summary = summary_from_message(message) if message is not None else summary_from_text(text)
    return Classification(qualifies=True, summary=summary, severity=DEFAULT_SEVERITY)
