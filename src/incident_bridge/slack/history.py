"""Channel history and permalink lookups against the Slack Web API."""

import asyncio
import logging

import aiohttp
from slack_sdk.errors import SlackApiError

from incident_bridge.errors import RemoteError
from incident_bridge.slack.client import get_slack_client

logger = logging.getLogger(__name__)


async def fetch_history(channel_id: str, oldest: str, limit: int = 200) -> list[dict]:
    """Return raw messages posted strictly after ``oldest``.

    Slack does not promise an order, so callers sort. Raises RemoteError when
    the API call fails or answers ``ok: false``.
    """
    client = await get_slack_client()
    try:
        response = await client.conversations_history(
            channel=channel_id,
            oldest=oldest,
            inclusive=False,
            limit=limit,
        )
    except SlackApiError as exc:
        error_code = exc.response.get("error", "") if exc.response else ""
        raise RemoteError(
            f"conversations.history failed for {channel_id}: {error_code or exc}",
            status_code=getattr(exc.response, "status_code", None),
        ) from exc
    except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
        raise RemoteError(f"conversations.history failed for {channel_id}: {exc!r}") from exc

    if not response.get("ok"):
        raise RemoteError(
            f"conversations.history failed for {channel_id}: {response.get('error', 'unknown')}"
        )
    return list(response.get("messages") or [])


async def get_permalink(channel_id: str, ts: str) -> str | None:
    """Return the message permalink, or None on any Slack failure."""
    try:
        client = await get_slack_client()
        response = await client.chat_getPermalink(channel=channel_id, message_ts=ts)
    except (SlackApiError, aiohttp.ClientError, asyncio.TimeoutError):
        logger.warning("Permalink lookup failed for %s/%s", channel_id, ts, exc_info=True)
        return None
    if not response.get("ok"):
        return None
    return response.get("permalink")
