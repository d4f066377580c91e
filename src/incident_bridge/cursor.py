"""Per-channel read cursor persisted as a small JSON file.

The file maps channel ids to the ts of the last processed message::

    {"C0123456789": {"last_ts": "1718000000.000100"}}

A channel seen for the first time starts ``backfill_seconds`` in the past, so
a fresh deployment picks up alerts posted just before it started.
"""

import json
import logging
import time
from pathlib import Path

from incident_bridge.errors import TransientReadError

logger = logging.getLogger(__name__)


def ts_value(ts: str | None) -> float:
    """Numeric value of a Slack ts; 0.0 when it is not a number."""
    try:
        return float(ts)
    except (TypeError, ValueError):
        return 0.0


class CursorStore:
    """Monotonic per-channel timestamps with JSON persistence."""

    def __init__(self, path: str | Path, backfill_seconds: int = 300) -> None:
        self.path = Path(path)
        self.backfill_seconds = backfill_seconds
        self._state: dict[str, dict[str, str]] = {}

    def load(self) -> None:
        """Read the state file. Missing or unreadable files mean empty state."""
        try:
            self._state = self._read()
        except TransientReadError as exc:
            logger.info("Starting with empty cursor state: %s", exc)
            self._state = {}

    def _read(self) -> dict[str, dict[str, str]]:
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            raise TransientReadError(f"cannot read {self.path}: {exc}") from exc
        if not isinstance(raw, dict):
            raise TransientReadError(f"unexpected cursor state in {self.path}")
        return {
            channel: {"last_ts": str(entry["last_ts"])}
            for channel, entry in raw.items()
            if isinstance(entry, dict) and entry.get("last_ts") is not None
        }

    def get(self, channel_id: str) -> str:
        """Return the channel's cursor, initializing and persisting it if new."""
        entry = self._state.get(channel_id)
        if entry is None:
            start = f"{time.time() - self.backfill_seconds:.6f}"
            self._state[channel_id] = {"last_ts": start}
            self.save()
            return start
        return entry["last_ts"]

    def advance(self, channel_id: str, ts: str) -> None:
        """Move the cursor to ``ts`` unless it is older than the current one."""
        current = self._state.get(channel_id)
        if current is None or ts_value(ts) > ts_value(current["last_ts"]):
            self._state[channel_id] = {"last_ts": ts}

    def save(self) -> None:
        """Write the state file. Failures are logged, not raised."""
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(self._state, indent=2), encoding="utf-8")
        except OSError:
            logger.error("Failed to persist cursor state to %s", self.path, exc_info=True)

    def snapshot(self) -> dict[str, str]:
        """Channel id -> last processed ts."""
        return {channel: entry["last_ts"] for channel, entry in self._state.items()}
