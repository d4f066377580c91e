"""Tests for the ADF document models."""

import pytest
from pydantic import ValidationError

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


def test_to_adf_shape():
    """Documents serialize to the ADF JSON Jira expects."""
    doc = Document(
        content=[
            Paragraph(
                content=[
                    TextNode(text="see "),
                    TextNode(
                        text="details",
                        marks=[LinkMark(attrs=LinkAttrs(href="https://x.test"))],
                    ),
                ]
            ),
            Paragraph(),
            MediaSingle(content=[Media(attrs=MediaAttrs(url="https://img.test/a.png"))]),
        ]
    )
    assert doc.to_adf() == {
        "type": "doc",
        "version": 1,
        "content": [
            {
                "type": "paragraph",
                "content": [
                    {"type": "text", "text": "see "},
                    {
                        "type": "text",
                        "text": "details",
                        "marks": [{"type": "link", "attrs": {"href": "https://x.test"}}],
                    },
                ],
            },
            {"type": "paragraph", "content": []},
            {
                "type": "mediaSingle",
                "attrs": {"layout": "center"},
                "content": [
                    {"type": "media", "attrs": {"type": "external", "url": "https://img.test/a.png"}}
                ],
            },
        ],
    }


def test_text_node_href():
    """href exposes the link target of a marked run."""
    assert TextNode(text="plain").href is None
    linked = TextNode(text="x", marks=[LinkMark(attrs=LinkAttrs(href="https://x.test"))])
    assert linked.href == "https://x.test"


def test_media_single_holds_exactly_one_media():
    """A media group with zero or two media nodes is rejected."""
    media = Media(attrs=MediaAttrs(url="https://img.test/a.png"))
    with pytest.raises(ValidationError):
        MediaSingle(content=[])
    with pytest.raises(ValidationError):
        MediaSingle(content=[media, media])


def test_document_parses_node_types():
    """ADF JSON parses back into paragraph and media nodes."""
    doc = Document.model_validate(
        {
            "type": "doc",
            "version": 1,
            "content": [
                {"type": "paragraph", "content": [{"type": "text", "text": "a"}]},
                {
                    "type": "mediaSingle",
                    "attrs": {"layout": "center"},
                    "content": [{"type": "media", "attrs": {"type": "external", "url": "u"}}],
                },
            ],
        }
    )
    assert len(doc.paragraphs) == 1
    assert len(doc.media) == 1
