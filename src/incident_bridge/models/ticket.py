"""Alert classification, image references and ticket request models."""

from pydantic import BaseModel

from incident_bridge.models.document import Document


class ImageRef(BaseModel):
    """An image embedded in a Slack message."""

    url: str
    filename: str
    is_private: bool  # True for Slack-hosted files that need a bot token to fetch


class Classification(BaseModel):
    """Outcome of classifying a normalized message."""

    qualifies: bool
    summary: str = ""
    severity: str = "High"


class TicketRequest(BaseModel):
    """Everything needed to create one Jira ticket. Built per qualifying alert."""

    summary: str
    description: Document
    priority_label: str
    category_label: str


class PollResult(BaseModel):
    """Counts for one poll cycle."""

    fetched: int = 0
    created: int = 0
    skipped: int = 0  # Empty, non-qualifying or unparseable messages
    failed: int = 0
