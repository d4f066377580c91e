"""Application configuration via pydantic-settings."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables and .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Slack
    slack_bot_token: str = ""
    slack_channel_id: str = ""

    # Polling
    poll_interval_seconds: float = 15.0
    backfill_seconds: int = 300  # Look-back window for a channel seen for the first time
    history_limit: int = 200
    state_file: str = "./state.json"

    # Jira
    jira_base_url: str = ""
    jira_email: str = ""
    jira_api_token: str = ""
    jira_project_key: str = "TDS"
    jira_issue_type: str = "Incident"
    jira_priority_id: str = ""  # Explicit id, bypasses label resolution
    jira_category_id: str = ""  # Explicit id, bypasses label resolution
    jira_category_default: str = "Plantão - API / Transportadoras"
    jira_category_field: str = "customfield_13712"
    jira_timeout_seconds: float = 30.0

    # Scheduler
    scheduler_secret: str = ""

    # App
    environment: str = "development"
    log_level: str = "INFO"
    port: int = 8080

    def missing_credentials(self) -> list[str]:
        """Return the names of required settings that are empty."""
        required = {
            "slack_bot_token": self.slack_bot_token,
            "slack_channel_id": self.slack_channel_id,
            "jira_base_url": self.jira_base_url,
            "jira_email": self.jira_email,
            "jira_api_token": self.jira_api_token,
        }
        return [name for name, value in required.items() if not value.strip()]


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings. Lazy initialization to avoid import-time errors."""
    return Settings()
