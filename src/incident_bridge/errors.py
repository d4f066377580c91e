"""Error taxonomy shared by the Slack and Jira collaborators."""


class IncidentBridgeError(Exception):
    """Base class for errors raised by the bridge."""


class ConfigurationError(IncidentBridgeError):
    """A priority or category label cannot be resolved to a Jira id.

    The operator must fix the label or configure an explicit id. Never retried.
    """


class RemoteError(IncidentBridgeError):
    """Transport failure or API-side rejection from Slack or Jira."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        payload: dict | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.payload = payload

    @property
    def detail(self) -> dict | str:
        """Decoded error body when the remote sent one, else the message."""
        return self.payload if self.payload is not None else str(self)


class TransientReadError(IncidentBridgeError):
    """The cursor state file could not be read. Treated as empty state."""
