"""Slack message model: text, blocks, legacy attachments and files.

Blocks and their inner elements are tagged unions discriminated on ``type``.
Kinds this service does not interpret are parsed into the ``Other*`` arms so
a new Slack block kind is carried through as data instead of failing
validation.
"""

from typing import Annotated, Any, Callable, Literal, Union

from pydantic import AliasChoices, BaseModel, Discriminator, Field, Tag, field_validator


def _discriminate(known: frozenset[str], fallback: str) -> Callable[[Any], str]:
    """Build a discriminator mapping unknown ``type`` values to ``fallback``."""

    def discriminate(value: Any) -> str:
        if isinstance(value, dict):
            kind = value.get("type")
        else:
            kind = getattr(value, "type", None)
        return kind if kind in known else fallback

    return discriminate


def _scalar_text(value: Any) -> str | None:
    """Integrations send numbers and booleans in text slots; render them as text.

    Objects, lists and other shapes become None.
    """
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    return None


def _text_or_empty(value: Any) -> str:
    return _scalar_text(value) or ""


# -- Rich-text inline elements --


class TextElement(BaseModel):
    type: Literal["text"] = "text"
    text: str = ""

    _coerce_text = field_validator("text", mode="before")(_text_or_empty)


class LinkElement(BaseModel):
    type: Literal["link"] = "link"
    url: str = ""
    text: str | None = None  # Label, when the author gave one

    _coerce_url = field_validator("url", mode="before")(_text_or_empty)
    _coerce_text = field_validator("text", mode="before")(_scalar_text)


class EmojiElement(BaseModel):
    type: Literal["emoji"] = "emoji"
    name: str = ""  # Shortcode without colons, e.g. "red_circle"

    _coerce_name = field_validator("name", mode="before")(_text_or_empty)


class UserElement(BaseModel):
    type: Literal["user"] = "user"
    user_id: str = ""

    _coerce_id = field_validator("user_id", mode="before")(_text_or_empty)


class ChannelElement(BaseModel):
    type: Literal["channel"] = "channel"
    channel_id: str = ""

    _coerce_id = field_validator("channel_id", mode="before")(_text_or_empty)


class OtherElement(BaseModel):
    """Any other inline element (usergroup, broadcast, date, ...)."""

    type: str
    text: str | None = None

    _coerce_type = field_validator("type", mode="before")(_text_or_empty)
    _coerce_text = field_validator("text", mode="before")(_scalar_text)


InlineElement = Annotated[
    Union[
        Annotated[TextElement, Tag("text")],
        Annotated[LinkElement, Tag("link")],
        Annotated[EmojiElement, Tag("emoji")],
        Annotated[UserElement, Tag("user")],
        Annotated[ChannelElement, Tag("channel")],
        Annotated[OtherElement, Tag("other")],
    ],
    Discriminator(
        _discriminate(frozenset({"text", "link", "emoji", "user", "channel"}), "other")
    ),
]


# -- Rich-text block children --


class RichTextSection(BaseModel):
    type: Literal["rich_text_section"] = "rich_text_section"
    elements: list[InlineElement] = []


class OtherRichTextChild(BaseModel):
    """Lists, quotes and preformatted runs. Not flattened into text."""

    type: str

    _coerce_type = field_validator("type", mode="before")(_text_or_empty)


RichTextChild = Annotated[
    Union[
        Annotated[RichTextSection, Tag("rich_text_section")],
        Annotated[OtherRichTextChild, Tag("other")],
    ],
    Discriminator(_discriminate(frozenset({"rich_text_section"}), "other")),
]


# -- Context block elements --


class ImageElement(BaseModel):
    type: Literal["image"] = "image"
    image_url: str | None = None
    alt_text: str | None = Field(default=None, validation_alias=AliasChoices("alt_text", "alt"))

    _coerce_text = field_validator("image_url", "alt_text", mode="before")(_scalar_text)


class OtherContextElement(BaseModel):
    """mrkdwn / plain_text context elements."""

    type: str

    _coerce_type = field_validator("type", mode="before")(_text_or_empty)


ContextElement = Annotated[
    Union[Annotated[ImageElement, Tag("image")], Annotated[OtherContextElement, Tag("other")]],
    Discriminator(_discriminate(frozenset({"image"}), "other")),
]


# -- Blocks --


class TextObject(BaseModel):
    type: str = "mrkdwn"
    text: str = ""

    _coerce_text = field_validator("text", mode="before")(_text_or_empty)


class SectionBlock(BaseModel):
    type: Literal["section"] = "section"
    text: TextObject | None = None


class RichTextBlock(BaseModel):
    type: Literal["rich_text"] = "rich_text"
    elements: list[RichTextChild] = []


class ImageBlock(BaseModel):
    type: Literal["image"] = "image"
    image_url: str | None = None
    alt_text: str | None = Field(default=None, validation_alias=AliasChoices("alt_text", "alt"))

    _coerce_text = field_validator("image_url", "alt_text", mode="before")(_scalar_text)


class ContextBlock(BaseModel):
    type: Literal["context"] = "context"
    elements: list[ContextElement] = []


class OtherBlock(BaseModel):
    """Any block kind not interpreted here (header, divider, actions, ...)."""

    type: str

    _coerce_type = field_validator("type", mode="before")(_text_or_empty)


Block = Annotated[
    Union[
        Annotated[SectionBlock, Tag("section")],
        Annotated[RichTextBlock, Tag("rich_text")],
        Annotated[ImageBlock, Tag("image")],
        Annotated[ContextBlock, Tag("context")],
        Annotated[OtherBlock, Tag("other")],
    ],
    Discriminator(
        _discriminate(frozenset({"section", "rich_text", "image", "context"}), "other")
    ),
]


# -- Legacy attachments and files --


class AttachmentField(BaseModel):
    title: str | None = None
    value: str | None = None

    _coerce_text = field_validator("title", "value", mode="before")(_scalar_text)


class Attachment(BaseModel):
    """Legacy secondary attachment, the payload most alerting integrations post."""

    title: str | None = None
    title_link: str | None = None
    fallback: str | None = None
    text: str | None = None
    image_url: str | None = None
    fields: list[AttachmentField] = []

    _coerce_text = field_validator(
        "title", "title_link", "fallback", "text", "image_url", mode="before"
    )(_scalar_text)

    @field_validator("fields", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return [] if value is None else value


class SlackFile(BaseModel):
    id: str = ""
    mimetype: str | None = None
    url_private: str | None = None
    name: str | None = None

    _coerce_id = field_validator("id", mode="before")(_text_or_empty)
    _coerce_text = field_validator("mimetype", "url_private", "name", mode="before")(_scalar_text)


class RawMessage(BaseModel):
    """A channel history message as returned by conversations.history."""

    ts: str = ""  # Slack message ts, e.g., "1234567890.123456"
    text: str | None = None
    blocks: list[Block] = []
    attachments: list[Attachment] = []
    files: list[SlackFile] = []

    _coerce_ts = field_validator("ts", mode="before")(_text_or_empty)
    _coerce_text = field_validator("text", mode="before")(_scalar_text)

    @field_validator("blocks", "attachments", "files", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return [] if value is None else value
