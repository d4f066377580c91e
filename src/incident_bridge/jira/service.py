"""Ticket creation service orchestrating metadata resolution and the Jira API.

Resolves priority and category labels to ids, builds the issue fields and
creates the issue. Some Jira configurations only accept a priority by name,
so a rejection that blames the priority is retried once by name.
"""

import logging
import re

from incident_bridge.classifier import sanitize_summary
from incident_bridge.config import get_settings
from incident_bridge.errors import ConfigurationError, RemoteError
from incident_bridge.jira.client import create_issue
from incident_bridge.jira.metadata import MetadataResolver, get_metadata_resolver
from incident_bridge.models.ticket import TicketRequest

logger = logging.getLogger(__name__)

_INVALID_PRIORITY = re.compile(r"inválid|invalid", re.IGNORECASE)


def is_invalid_priority_error(exc: RemoteError) -> bool:
    """True when Jira's rejection names the priority as invalid.

    Looks at the ``errors.priority`` entry first, then the first general
    error message.
    """
    payload = exc.payload or {}
    errors = payload.get("errors")
    detail = errors.get("priority") if isinstance(errors, dict) else None
    if not detail:
        messages = payload.get("errorMessages") or []
        detail = messages[0] if messages else ""
    return bool(_INVALID_PRIORITY.search(str(detail)))


async def create_ticket(
    request: TicketRequest, resolver: MetadataResolver | None = None
) -> str:
    """Create a Jira issue for a qualifying alert and return its key.

    Explicit ids from settings (``jira_priority_id``, ``jira_category_id``)
    bypass label resolution. Raises ConfigurationError when a label does not
    resolve, listing the available options. Raises RemoteError for any other
    rejection, or when the by-name retry also fails.
    """
    settings = get_settings()
    resolver = resolver or get_metadata_resolver()
    await resolver.ensure_loaded()

    priority_id = settings.jira_priority_id.strip() or resolver.resolve_priority_id(
        request.priority_label
    )
    if not priority_id:
        available = ", ".join(resolver.available_priorities()) or "none"
        raise ConfigurationError(
            f'Invalid priority "{request.priority_label}". Available: {available}'
        )

    category_id = settings.jira_category_id.strip() or resolver.resolve_category_option_id(
        request.category_label
    )
    if not category_id:
        available = ", ".join(resolver.available_categories()) or "none"
        raise ConfigurationError(
            f'Invalid category "{request.category_label}" for '
            f"{settings.jira_category_field}. Available: {available}"
        )

    fields = {
        "project": {"key": settings.jira_project_key},
        "issuetype": {"name": settings.jira_issue_type},
        "summary": sanitize_summary(request.summary),
        "description": request.description.to_adf(),
        settings.jira_category_field: {"id": category_id},
    }

    try:
        return await create_issue({**fields, "priority": {"id": priority_id}})
    except RemoteError as exc:
        if not is_invalid_priority_error(exc):
            raise
        priority_name = resolver.priority_name(priority_id) or request.priority_label
        logger.warning(
            "Jira rejected priority id %s, retrying by name %r", priority_id, priority_name
        )
        return await create_issue({**fields, "priority": {"name": priority_name}})
