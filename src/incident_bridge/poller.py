"""Poll cycle: Slack history -> classification -> Jira tickets.

One cycle runs at a time. Each new message is handled independently and in
chronological order; a failure on one message is logged and the batch goes
on. The cursor moves past every observed message, ticket or not, so a failed
ticket is not retried on a later cycle.
"""

import asyncio
import logging

from pydantic import ValidationError

from incident_bridge.classifier import classify
from incident_bridge.config import Settings
from incident_bridge.cursor import CursorStore, ts_value
from incident_bridge.jira.document import build_description
from incident_bridge.jira.service import create_ticket
from incident_bridge.models.slack import RawMessage
from incident_bridge.models.ticket import PollResult, TicketRequest
from incident_bridge.slack.history import fetch_history, get_permalink
from incident_bridge.slack.normalizer import normalize

logger = logging.getLogger(__name__)

_CREATED = "created"
_SKIPPED = "skipped"
_FAILED = "failed"


def _ts(payload: dict) -> float:
    return ts_value(payload.get("ts"))


class Poller:
    """Runs poll cycles for one channel, never two at once."""

    def __init__(
        self,
        channel_id: str,
        cursor: CursorStore,
        category_label: str,
        history_limit: int = 200,
    ) -> None:
        self.channel_id = channel_id
        self.cursor = cursor
        self.category_label = category_label
        self.history_limit = history_limit
        self.last_message: dict | None = None
        self._lock = asyncio.Lock()

    @property
    def in_flight(self) -> bool:
        return self._lock.locked()

    async def poll_once(self) -> PollResult | None:
        """Run one cycle. Returns None without doing anything if one is running."""
        if self._lock.locked():
            logger.warning("Poll cycle already in progress, skipping")
            return None
        async with self._lock:
            return await self._cycle()

    async def _cycle(self) -> PollResult:
        oldest = self.cursor.get(self.channel_id)
        payloads = await fetch_history(self.channel_id, oldest, self.history_limit)
        if not payloads:
            return PollResult()

        oldest_value = ts_value(oldest)
        messages = sorted((p for p in payloads if _ts(p) > oldest_value), key=_ts)
        result = PollResult(fetched=len(messages))

        for payload in messages:
            self.last_message = payload
            ts = str(payload.get("ts", ""))
            self.cursor.advance(self.channel_id, ts)
            try:
                outcome = await self.process_message(payload)
            except Exception as exc:
                logger.error("Processing failed for message %s: %s", ts, exc, exc_info=True)
                outcome = _FAILED

            if outcome == _CREATED:
                result.created += 1
            elif outcome == _FAILED:
                result.failed += 1
            else:
                result.skipped += 1

        self.cursor.save()
        logger.info(
            "Poll cycle done: %d fetched, %d created, %d skipped, %d failed",
            result.fetched,
            result.created,
            result.skipped,
            result.failed,
        )
        return result

    async def process_message(self, payload: dict) -> str:
        """Turn one raw message into a ticket if it is a qualifying alert."""
        try:
            message = RawMessage.model_validate(payload)
        except ValidationError as exc:
            logger.warning("Skipping unparseable message %s: %s", payload.get("ts"), exc)
            return _SKIPPED

        text = normalize(message)
        if not text:
            return _SKIPPED

        classification = classify(text, message)
        if not classification.qualifies:
            logger.debug("Message %s is not a new alert", message.ts)
            return _SKIPPED

        permalink = await get_permalink(self.channel_id, message.ts)
        request = TicketRequest(
            summary=classification.summary,
            description=build_description(text, message),
            priority_label=classification.severity,
            category_label=self.category_label,
        )

        try:
            key = await create_ticket(request)
        except Exception as exc:
            logger.error(
                "Ticket creation failed for message %s: %s", message.ts, exc, exc_info=True
            )
            return _FAILED

        logger.info(
            "Created issue %s (priority %s) for message %s %s",
            key,
            classification.severity,
            message.ts,
            permalink or "",
        )
        return _CREATED

    async def run_forever(self, interval_seconds: float) -> None:
        """Single-worker loop: run a cycle, then sleep. Cancel the task to stop."""
        logger.info("Polling %s every %.1fs", self.channel_id, interval_seconds)
        while True:
            try:
                await self.poll_once()
            except Exception as exc:
                logger.error("Poll cycle failed: %s", exc, exc_info=True)
            await asyncio.sleep(interval_seconds)


def build_poller(settings: Settings) -> Poller:
    """Create a Poller with a loaded cursor store from settings."""
    cursor = CursorStore(settings.state_file, backfill_seconds=settings.backfill_seconds)
    cursor.load()
    return Poller(
        channel_id=settings.slack_channel_id,
        cursor=cursor,
        category_label=settings.jira_category_default,
        history_limit=settings.history_limit,
    )
