"""Tests for the ticket creation service."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from incident_bridge.errors import ConfigurationError, RemoteError
from incident_bridge.jira.metadata import MetadataResolver
from incident_bridge.jira.models import CategoryOption, MetadataCache, PriorityOption
from incident_bridge.jira.service import create_ticket, is_invalid_priority_error
from incident_bridge.models.document import Document, Paragraph, TextNode
from incident_bridge.models.ticket import TicketRequest

CATEGORY_FIELD = "customfield_13712"


def _settings(**overrides) -> MagicMock:
    values = {
        "jira_project_key": "TDS",
        "jira_issue_type": "Incident",
        "jira_category_field": CATEGORY_FIELD,
        "jira_priority_id": "",
        "jira_category_id": "",
    }
    values.update(overrides)
    return MagicMock(**values)


def _resolver() -> MetadataResolver:
    cache = MetadataCache(
        priorities=[PriorityOption(id="2", name="Alta"), PriorityOption(id="3", name="Média")],
        category_options=[CategoryOption(id="100", value="Plantão - API / Transportadoras")],
    )
    return MetadataResolver("TDS", "Incident", CATEGORY_FIELD, cache=cache)


def _request(**overrides) -> TicketRequest:
    values = {
        "summary": "Triggered: CPU high",
        "description": Document(content=[Paragraph(content=[TextNode(text="body")])]),
        "priority_label": "High",
        "category_label": "Plantão - API / Transportadoras",
    }
    values.update(overrides)
    return TicketRequest(**values)


def _invalid_priority() -> RemoteError:
    return RemoteError(
        "rejected",
        status_code=400,
        payload={"errorMessages": [], "errors": {"priority": "Prioridade inválida"}},
    )


# -- is_invalid_priority_error --


def test_invalid_priority_detected_in_errors():
    assert is_invalid_priority_error(_invalid_priority())


def test_invalid_priority_detected_in_error_messages():
    exc = RemoteError("x", payload={"errorMessages": ["Priority id is INVALID"]})
    assert is_invalid_priority_error(exc)


def test_other_rejections_not_priority_errors():
    assert not is_invalid_priority_error(
        RemoteError("x", payload={"errors": {"summary": "too long"}})
    )
    assert not is_invalid_priority_error(RemoteError("x"))


# -- create_ticket --


@patch("incident_bridge.jira.service.create_issue", new_callable=AsyncMock)
@patch("incident_bridge.jira.service.get_settings")
async def test_create_ticket_builds_fields(mock_settings, mock_create):
    mock_settings.return_value = _settings()
    mock_create.return_value = "TDS-1"

    key = await create_ticket(_request(summary="Triggered:\n  CPU   high"), _resolver())

    assert key == "TDS-1"
    fields = mock_create.await_args.args[0]
    assert fields == {
        "project": {"key": "TDS"},
        "issuetype": {"name": "Incident"},
        "summary": "Triggered: CPU high",
        "description": {
            "type": "doc",
            "version": 1,
            "content": [{"type": "paragraph", "content": [{"type": "text", "text": "body"}]}],
        },
        CATEGORY_FIELD: {"id": "100"},
        "priority": {"id": "2"},
    }


@patch("incident_bridge.jira.service.create_issue", new_callable=AsyncMock)
@patch("incident_bridge.jira.service.get_settings")
async def test_create_ticket_explicit_ids_bypass_resolution(mock_settings, mock_create):
    mock_settings.return_value = _settings(jira_priority_id=" 77 ", jira_category_id="555")
    mock_create.return_value = "TDS-2"

    await create_ticket(_request(priority_label="Nonsense", category_label="Nope"), _resolver())

    fields = mock_create.await_args.args[0]
    assert fields["priority"] == {"id": "77"}
    assert fields[CATEGORY_FIELD] == {"id": "555"}


@patch("incident_bridge.jira.service.create_issue", new_callable=AsyncMock)
@patch("incident_bridge.jira.service.get_settings")
async def test_create_ticket_unknown_priority(mock_settings, mock_create):
    """An unresolvable priority names the label and lists the options."""
    mock_settings.return_value = _settings()

    with pytest.raises(ConfigurationError) as exc_info:
        await create_ticket(_request(priority_label="Urgent"), _resolver())

    assert 'Invalid priority "Urgent"' in str(exc_info.value)
    assert "Alta, Média" in str(exc_info.value)
    mock_create.assert_not_awaited()


@patch("incident_bridge.jira.service.create_issue", new_callable=AsyncMock)
@patch("incident_bridge.jira.service.get_settings")
async def test_create_ticket_unknown_category(mock_settings, mock_create):
    mock_settings.return_value = _settings()

    with pytest.raises(ConfigurationError) as exc_info:
        await create_ticket(_request(category_label="Plantão - Infra"), _resolver())

    message = str(exc_info.value)
    assert 'Invalid category "Plantão - Infra"' in message
    assert CATEGORY_FIELD in message
    assert "Plantão - API / Transportadoras" in message
    mock_create.assert_not_awaited()


@patch("incident_bridge.jira.service.create_issue", new_callable=AsyncMock)
@patch("incident_bridge.jira.service.get_settings")
async def test_create_ticket_retries_priority_by_name_once(mock_settings, mock_create):
    """An invalid-priority rejection is retried exactly once with the name."""
    mock_settings.return_value = _settings()
    mock_create.side_effect = [_invalid_priority(), "TDS-3"]

    key = await create_ticket(_request(), _resolver())

    assert key == "TDS-3"
    assert mock_create.await_count == 2
    first, second = (call.args[0] for call in mock_create.await_args_list)
    assert first["priority"] == {"id": "2"}
    assert second["priority"] == {"name": "Alta"}
    assert second["summary"] == first["summary"]


@patch("incident_bridge.jira.service.create_issue", new_callable=AsyncMock)
@patch("incident_bridge.jira.service.get_settings")
async def test_create_ticket_retry_failure_propagates(mock_settings, mock_create):
    mock_settings.return_value = _settings()
    mock_create.side_effect = [_invalid_priority(), _invalid_priority()]

    with pytest.raises(RemoteError):
        await create_ticket(_request(), _resolver())

    assert mock_create.await_count == 2


@patch("incident_bridge.jira.service.create_issue", new_callable=AsyncMock)
@patch("incident_bridge.jira.service.get_settings")
async def test_create_ticket_other_rejection_not_retried(mock_settings, mock_create):
    mock_settings.return_value = _settings()
    mock_create.side_effect = RemoteError(
        "rejected", status_code=400, payload={"errors": {"summary": "required"}}
    )

    with pytest.raises(RemoteError):
        await create_ticket(_request(), _resolver())

    assert mock_create.await_count == 1


@patch("incident_bridge.jira.service.create_issue", new_callable=AsyncMock)
@patch("incident_bridge.jira.service.get_settings")
async def test_create_ticket_retry_uses_label_when_id_unknown(mock_settings, mock_create):
    """With an explicit id absent from the cache, the retry falls back to the label."""
    mock_settings.return_value = _settings(jira_priority_id="77")
    mock_create.side_effect = [_invalid_priority(), "TDS-4"]

    await create_ticket(_request(priority_label="High"), _resolver())

    assert mock_create.await_args_list[1].args[0]["priority"] == {"name": "High"}


@patch("incident_bridge.jira.service.get_metadata_resolver")
@patch("incident_bridge.jira.service.create_issue", new_callable=AsyncMock)
@patch("incident_bridge.jira.service.get_settings")
async def test_create_ticket_uses_shared_resolver(mock_settings, mock_create, mock_get_resolver):
    mock_settings.return_value = _settings()
    mock_create.return_value = "TDS-5"
    mock_get_resolver.return_value = _resolver()

    assert await create_ticket(_request()) == "TDS-5"
    mock_get_resolver.assert_called_once()
