"""Data models for the alert-to-ticket pipeline."""

from incident_bridge.models.document import Document, MediaSingle, Paragraph, TextNode
from incident_bridge.models.slack import Attachment, AttachmentField, RawMessage, SlackFile
from incident_bridge.models.ticket import Classification, ImageRef, PollResult, TicketRequest

__all__ = [
    "Attachment",
    "AttachmentField",
    "Classification",
    "Document",
    "ImageRef",
    "MediaSingle",
    "Paragraph",
    "PollResult",
    "RawMessage",
    "SlackFile",
    "TextNode",
    "TicketRequest",
]
