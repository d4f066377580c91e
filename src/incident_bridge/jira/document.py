"""Pure functions converting Slack message content into an ADF description.

Slack mrkdwn links (``<url|label>``) become text runs carrying a link mark,
emoji shortcodes are resolved in every run, and up to ``MAX_IMAGES`` images
are appended as external media after the text.
"""

import re

from incident_bridge.models.document import (
    Document,
    LinkAttrs,
    LinkMark,
    Media,
    MediaAttrs,
    MediaSingle,
    Paragraph,
    TextNode,
)
from incident_bridge.models.slack import Attachment, AttachmentField, RawMessage
from incident_bridge.models.ticket import ImageRef
from incident_bridge.slack.emoji import replace_shortcodes
from incident_bridge.slack.normalizer import extract_images

MAX_IMAGES = 5

_SLACK_LINK = re.compile(r"<([^|>]+)\|([^>]+)>")


def _text_node(text: str, href: str | None = None) -> TextNode:
    """A run with emoji shortcodes resolved and an optional link mark."""
    marks = [LinkMark(attrs=LinkAttrs(href=href))] if href else None
    return TextNode(text=replace_shortcodes(text), marks=marks)


def line_runs(line: str) -> list[TextNode]:
    """Split one line into plain and linked runs, resolving emoji in each."""
    runs: list[TextNode] = []
    pos = 0
    for m in _SLACK_LINK.finditer(line):
        # Text before the link
        if m.start() > pos:
            runs.append(_text_node(line[pos : m.start()]))
        runs.append(_text_node(m.group(2), href=m.group(1)))
        pos = m.end()
    # Remaining text after last link
    if pos < len(line):
        runs.append(_text_node(line[pos:]))
    return runs


def split_links(text: str) -> list[Paragraph]:
    """Link-aware line splitter: one paragraph per line, blank lines kept empty."""
    return [Paragraph(content=line_runs(line)) for line in (text or "").split("\n")]


def _title_paragraph(attachment: Attachment) -> Paragraph | None:
    if attachment.title:
        return Paragraph(content=[_text_node(attachment.title, href=attachment.title_link)])
    if attachment.fallback:
        return Paragraph(content=[_text_node(attachment.fallback)])
    return None


def _field_paragraphs(field: AttachmentField) -> list[Paragraph]:
    """Render one field as ``Title: value`` on a single paragraph.

    Value lines after the first continue as their own paragraphs.
    """
    value_paragraphs = split_links(field.value) if field.value else []
    if not field.title:
        return value_paragraphs

    label = _text_node(f"{field.title}: " if value_paragraphs else field.title)
    if not value_paragraphs:
        return [Paragraph(content=[label])]
    first, *rest = value_paragraphs
    return [Paragraph(content=[label, *first.content]), *rest]


def attachment_paragraphs(attachment: Attachment) -> list[Paragraph]:
    """Title, body and field paragraphs of a single attachment, in order."""
    paragraphs: list[Paragraph] = []
    title = _title_paragraph(attachment)
    if title is not None:
        paragraphs.append(title)
    if attachment.text:
        paragraphs.extend(split_links(attachment.text))
    for field in attachment.fields:
        paragraphs.extend(_field_paragraphs(field))
    return paragraphs


def image_nodes(images: list[ImageRef]) -> list[MediaSingle]:
    """Wrap the first ``MAX_IMAGES`` images in one media group each."""
    return [
        MediaSingle(content=[Media(attrs=MediaAttrs(url=image.url))])
        for image in images[:MAX_IMAGES]
    ]


def build_description(text: str, message: RawMessage) -> Document:
    """Build the ticket description document.

    With attachments, the body comes from the first attachment only;
    otherwise the canonical text is split line by line. Images follow all
    text paragraphs in extraction order.
    """
    if message.attachments:
        paragraphs = attachment_paragraphs(message.attachments[0])
    else:
        paragraphs = split_links(text)
    return Document(content=[*paragraphs, *image_nodes(extract_images(message))])
