"""Jira output: ADF description building, metadata resolution and issue creation."""

from incident_bridge.jira.client import close_client, get_jira_client, reset_client
from incident_bridge.jira.document import build_description, split_links
from incident_bridge.jira.metadata import (
    MetadataResolver,
    get_metadata_resolver,
    normalize_label,
    reset_resolver,
)
from incident_bridge.jira.models import CategoryOption, MetadataCache, PriorityOption
from incident_bridge.jira.service import create_ticket

__all__ = [
    "build_description",
    "CategoryOption",
    "close_client",
    "create_ticket",
    "get_jira_client",
    "get_metadata_resolver",
    "MetadataCache",
    "MetadataResolver",
    "normalize_label",
    "PriorityOption",
    "reset_client",
    "reset_resolver",
    "split_links",
]
