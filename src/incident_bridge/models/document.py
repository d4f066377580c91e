"""Atlassian Document Format (ADF) nodes used in ticket descriptions.

Only the subset the bridge emits is modelled: paragraphs of text runs (each
run optionally carrying one link mark) and single external-image media
groups. ``Document.to_adf()`` produces the JSON Jira accepts.
"""

from typing import Annotated, Literal

from pydantic import BaseModel, Field


class LinkAttrs(BaseModel):
    href: str


class LinkMark(BaseModel):
    type: Literal["link"] = "link"
    attrs: LinkAttrs


class TextNode(BaseModel):
    """A text run. ADF rejects empty runs, so callers never build one."""

    type: Literal["text"] = "text"
    text: str
    marks: list[LinkMark] | None = None

    @property
    def href(self) -> str | None:
        """Link target of the run, if any."""
        return self.marks[0].attrs.href if self.marks else None


class Paragraph(BaseModel):
    type: Literal["paragraph"] = "paragraph"
    content: list[TextNode] = []  # Empty keeps a blank line in place


class MediaAttrs(BaseModel):
    type: Literal["external"] = "external"
    url: str


class Media(BaseModel):
    type: Literal["media"] = "media"
    attrs: MediaAttrs


class MediaSingleAttrs(BaseModel):
    layout: str = "center"


class MediaSingle(BaseModel):
    """Media group wrapping exactly one external image."""

    type: Literal["mediaSingle"] = "mediaSingle"
    attrs: MediaSingleAttrs = MediaSingleAttrs()
    content: list[Media] = Field(min_length=1, max_length=1)


DocumentNode = Annotated[Paragraph | MediaSingle, Field(discriminator="type")]


class Document(BaseModel):
    type: Literal["doc"] = "doc"
    version: int = 1
    content: list[DocumentNode] = []

    @property
    def paragraphs(self) -> list[Paragraph]:
        return [node for node in self.content if isinstance(node, Paragraph)]

    @property
    def media(self) -> list[MediaSingle]:
        return [node for node in self.content if isinstance(node, MediaSingle)]

    def to_adf(self) -> dict:
        """Serialize to the ADF JSON shape, omitting absent marks."""
        return self.model_dump(exclude_none=True)
