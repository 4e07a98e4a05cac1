"""Shared test fixtures."""

from pathlib import Path
import sys
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest
import requests


REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from jira_directory.dispatcher import RequestDispatcher  # noqa: E402


SERVER = "https://example.atlassian.net"


class FakeResponse:
    """Just enough of requests.Response for the dispatcher."""

    def __init__(self, payload=None, status_code=200, text=None, json_error=False):
        self._payload = payload
        self._json_error = json_error
        self.status_code = status_code
        self.text = text if text is not None else ""
        self.headers = {"Content-Type": "application/json"}

    def json(self):
        if self._json_error:
            raise ValueError("No JSON object could be decoded")
        return self._payload

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(f"{self.status_code} Error", response=self)


@pytest.fixture
def jira_client():
    return SimpleNamespace(_options={"server": SERVER + "/"}, _session=MagicMock())


@pytest.fixture
def dispatcher(jira_client):
    return RequestDispatcher(jira_client)


@pytest.fixture
def sink():
    return MagicMock()


@pytest.fixture
def respond(jira_client):
    """Makes the fake session answer every GET with the given response(s)."""

    def _respond(*responses):
        if len(responses) == 1:
            jira_client._session.get.return_value = responses[0]
        else:
            jira_client._session.get.side_effect = list(responses)
        return jira_client._session.get

    return _respond
