"""Shared test fixtures."""

import pytest
from fastapi.testclient import TestClient

from incident_bridge.app import app
from incident_bridge.jira.client import reset_client as reset_jira_client
from incident_bridge.jira.metadata import reset_resolver
from incident_bridge.slack.client import reset_client as reset_slack_client


@pytest.fixture(scope="session")
def client() -> TestClient:
    """Create a TestClient for the FastAPI app."""
    return TestClient(app)


@pytest.fixture(autouse=True)
def _reset_singletons():
    """Ensure clean client and resolver singletons for every test."""
    reset_jira_client()
    reset_slack_client()
    reset_resolver()
    yield
    reset_jira_client()
    reset_slack_client()
    reset_resolver()
