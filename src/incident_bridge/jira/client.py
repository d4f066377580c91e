"""Async Jira REST client singleton.

Creates a cached httpx.AsyncClient bound to the Jira base URL with basic auth
(account email + API token) and a request timeout from settings. Transport
failures and non-2xx answers surface as RemoteError with the decoded error
body attached.
"""

import logging

import httpx

from incident_bridge.config import get_settings
from incident_bridge.errors import RemoteError

logger = logging.getLogger(__name__)

_client: httpx.AsyncClient | None = None

_HEADERS = {"Content-Type": "application/json", "Accept": "application/json"}


async def get_jira_client() -> httpx.AsyncClient:
    """Return a cached async HTTP client for the configured Jira site."""
    global _client
    if _client is None:
        settings = get_settings()
        _client = httpx.AsyncClient(
            base_url=settings.jira_base_url.rstrip("/"),
            auth=(settings.jira_email, settings.jira_api_token),
            headers=_HEADERS,
            timeout=httpx.Timeout(settings.jira_timeout_seconds),
        )
    return _client


async def close_client() -> None:
    """Close and forget the cached client. Called on application shutdown."""
    global _client
    if _client is not None:
        await _client.aclose()
        _client = None


def reset_client() -> None:
    """Reset the cached client instance. Used for testing."""
    global _client
    _client = None


def _decode_error(response: httpx.Response) -> dict | None:
    try:
        body = response.json()
    except ValueError:
        return None
    return body if isinstance(body, dict) else None


async def _request(method: str, path: str, **kwargs) -> dict | list:
    client = await get_jira_client()
    try:
        response = await client.request(method, path, **kwargs)
    except httpx.HTTPError as exc:
        raise RemoteError(f"Jira {method} {path} failed: {exc}") from exc

    if response.is_error:
        raise RemoteError(
            f"Jira {method} {path} returned {response.status_code}",
            status_code=response.status_code,
            payload=_decode_error(response),
        )
    try:
        return response.json()
    except ValueError as exc:
        raise RemoteError(
            f"Jira {method} {path} returned a non-JSON body",
            status_code=response.status_code,
        ) from exc


async def jira_get(path: str, params: dict | None = None) -> dict | list:
    """GET a Jira REST path and return the decoded JSON body."""
    return await _request("GET", path, params=params)


async def jira_post(path: str, payload: dict) -> dict | list:
    """POST a JSON payload to a Jira REST path and return the decoded body."""
    return await _request("POST", path, json=payload)


async def fetch_create_meta_fields(project_key: str, issue_type: str) -> dict:
    """Return the field schema for creating ``issue_type`` issues in ``project_key``.

    Empty dict when Jira knows no such project or issue type.
    """
    meta = await jira_get(
        "/rest/api/3/issue/createmeta",
        params={
            "projectKeys": project_key,
            "issuetypeNames": issue_type,
            "expand": "projects.issuetypes.fields",
        },
    )
    projects = (meta.get("projects") or []) if isinstance(meta, dict) else []
    issue_types = (projects[0].get("issuetypes") or []) if projects else []
    return (issue_types[0].get("fields") or {}) if issue_types else {}


async def fetch_global_priorities() -> list[dict]:
    """Return every priority defined on the Jira site."""
    priorities = await jira_get("/rest/api/3/priority")
    return priorities if isinstance(priorities, list) else []


async def create_issue(fields: dict) -> str:
    """Create an issue from a ``fields`` mapping and return its key."""
    created = await jira_post("/rest/api/3/issue", {"fields": fields})
    key = created.get("key") if isinstance(created, dict) else None
    if not key:
        raise RemoteError("Jira issue creation returned no key")
    logger.debug("Jira accepted issue %s", key)
    return key
