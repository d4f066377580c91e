"""Flatten Slack messages into canonical text and collect embedded images.

A message can carry flat text, Block Kit blocks, legacy attachments and
uploaded files, often several at once. Attachments win when present: alerting
integrations put their authoritative payload there and repeat a shorter
version in ``text``. Nothing here raises on odd input; missing pieces
contribute empty strings or nothing at all.
"""

from incident_bridge.models.slack import (
    Attachment,
    ChannelElement,
    ContextBlock,
    EmojiElement,
    ImageBlock,
    ImageElement,
    LinkElement,
    OtherBlock,
    OtherContextElement,
    OtherElement,
    OtherRichTextChild,
    RawMessage,
    RichTextBlock,
    RichTextSection,
    SectionBlock,
    TextElement,
    UserElement,
)
from incident_bridge.models.ticket import ImageRef
from incident_bridge.slack.emoji import shortcode_to_unicode


def attachment_lines(attachment: Attachment) -> list[str]:
    """Reading-order lines of one attachment: heading, body, then each field.

    The heading is the title, or the fallback text when there is no title.
    Each field contributes its title line followed by its value line.
    """
    lines: list[str] = []
    if attachment.title:
        lines.append(attachment.title)
    elif attachment.fallback:
        lines.append(attachment.fallback)
    if attachment.text:
        lines.append(attachment.text)
    for field in attachment.fields:
        if field.title:
            lines.append(field.title)
        if field.value:
            lines.append(field.value)
    return lines


def normalize(message: RawMessage) -> str:
    """Return the canonical text of a message.

    Only the first attachment is read when attachments exist; later ones are
    ignored. Messages without attachments fall through to ``extract_text``.
    """
    if message.attachments:
        return "\n".join(attachment_lines(message.attachments[0]))
    return extract_text(message)


def extract_text(message: RawMessage) -> str:
    """Flatten text, blocks or attachment bodies, in that order of preference."""
    if message.text:
        return message.text
    if message.blocks:
        lines: list[str] = []
        for block in message.blocks:
            lines.extend(_block_lines(block))
        return "\n".join(lines).strip()
    if message.attachments:
        return "\n".join(a.text or a.fallback or "" for a in message.attachments).strip()
    return ""


def _block_lines(block) -> list[str]:
    if isinstance(block, SectionBlock):
        return [block.text.text] if block.text and block.text.text else []
    if isinstance(block, RichTextBlock):
        lines = []
        for child in block.elements:
            if isinstance(child, RichTextSection):
                lines.append("".join(_inline_text(el) for el in child.elements))
            elif not isinstance(child, OtherRichTextChild):
                raise TypeError(f"Unhandled rich text child: {type(child).__name__}")
        return lines
    if isinstance(block, (ImageBlock, ContextBlock, OtherBlock)):
        return []
    raise TypeError(f"Unhandled block variant: {type(block).__name__}")


def _inline_text(element) -> str:
    """Text contributed by one rich-text inline element."""
    if isinstance(element, TextElement):
        return element.text
    if isinstance(element, LinkElement):
        return element.text or element.url
    if isinstance(element, EmojiElement):
        if not element.name:
            return ""
        return shortcode_to_unicode(element.name) or f":{element.name}:"
    if isinstance(element, UserElement):
        return f"@{element.user_id}" if element.user_id else ""
    if isinstance(element, ChannelElement):
        return f"#{element.channel_id}" if element.channel_id else ""
    if isinstance(element, OtherElement):
        return element.text or ""
    raise TypeError(f"Unhandled inline element: {type(element).__name__}")


def extract_images(message: RawMessage) -> list[ImageRef]:
    """Collect image references from files, attachments and blocks.

    Order is files first, then attachment ``image_url``s, then image blocks
    and context-block images, each in message order. Duplicates are kept.
    """
    images: list[ImageRef] = []

    for f in message.files:
        if (f.mimetype or "").startswith("image/") and f.url_private:
            images.append(
                ImageRef(url=f.url_private, filename=f.name or f"{f.id}.png", is_private=True)
            )

    for attachment in message.attachments:
        if attachment.image_url:
            images.append(
                ImageRef(url=attachment.image_url, filename="attachment.png", is_private=False)
            )

    for block in message.blocks:
        if isinstance(block, ImageBlock):
            if block.image_url:
                images.append(_public_image(block.image_url, block.alt_text))
        elif isinstance(block, ContextBlock):
            for element in block.elements:
                if isinstance(element, ImageElement):
                    if element.image_url:
                        images.append(_public_image(element.image_url, element.alt_text))
                elif not isinstance(element, OtherContextElement):
                    raise TypeError(f"Unhandled context element: {type(element).__name__}")
        elif not isinstance(block, (SectionBlock, RichTextBlock, OtherBlock)):
            raise TypeError(f"Unhandled block variant: {type(block).__name__}")

    return images


def _public_image(url: str, alt_text: str | None) -> ImageRef:
    return ImageRef(url=url, filename=alt_text or "image.png", is_private=False)
