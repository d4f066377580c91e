"""Cached Slack Web API client for channel reads.

``conversations.history`` is rate limited per workspace; the client waits out
a 429 once (honouring ``Retry-After``) before the error reaches the caller.
"""

from slack_sdk.http_retry.builtin_async_handlers import AsyncRateLimitErrorRetryHandler
from slack_sdk.web.async_client import AsyncWebClient

from incident_bridge.config import get_settings

RATE_LIMIT_RETRIES = 1

_client: AsyncWebClient | None = None


async def get_slack_client() -> AsyncWebClient:
    """Return the bot-token client, created from settings on first use."""
    global _client
    if _client is None:
        _client = AsyncWebClient(
            token=get_settings().slack_bot_token,
            retry_handlers=[AsyncRateLimitErrorRetryHandler(max_retry_count=RATE_LIMIT_RETRIES)],
        )
    return _client


def reset_client() -> None:
    """Forget the cached client. Used for testing."""
    global _client
    _client = None
