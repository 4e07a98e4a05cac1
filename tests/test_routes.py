"""Tests for the typeahead HTTP endpoints."""

from unittest.mock import patch

import pytest

from jira_directory import create_app
from jira_directory.routes import ClientUnavailable

from conftest import FakeResponse


pytestmark = pytest.mark.unit


@pytest.fixture
def app():
    return create_app({
        "TESTING": True,
        "JIRA_SERVER": "https://example.atlassian.net",
        "JIRA_EMAIL": "someone@example.com",
        "JIRA_API_TOKEN": "token",
        "USER_SELECT_GROUP": "PMO",
    })


@pytest.fixture
def client(app, dispatcher):
    with patch("jira_directory.routes.get_dispatcher", return_value=dispatcher):
        yield app.test_client()


def test_health(app):
    assert app.test_client().get("/health").get_json() == {"status": "ok"}


def test_user_search(client, respond):
    get = respond(FakeResponse([{"name": "alice", "displayName": "Alice", "accountId": "a-1"}]))

    response = client.get("/api/users/search?term=ali&maxResults=5&minimal=true")

    assert response.status_code == 200
    assert response.get_json() == [
        {"name": "alice", "displayName": "Alice", "accountId": "a-1", "usernameOrAccountId": "a-1"}
    ]
    assert get.call_args[1]["params"] == {"username": "ali", "maxResults": 5}


def test_user_search_with_method_override(client, respond):
    get = respond(FakeResponse([]))

    client.get("/api/users/search?term=ali&method=userSearchByQuery")

    assert get.call_args[1]["params"] == {"query": "ali", "maxResults": 100}


def test_invalid_max_results_uses_default(client, respond):
    get = respond(FakeResponse({"groups": []}))

    client.get("/api/groups/search?term=%25dev%25&maxResults=-1")

    assert get.call_args[1]["params"] == {"query": "dev", "maxResults": 100}


def test_group_search_failure_returns_empty_list(client, respond):
    respond(FakeResponse({"errorMessages": ["bad request"]}, status_code=500))

    response = client.get("/api/groups/search?term=dev")

    assert response.status_code == 200
    assert response.get_json() == []


def test_group_members_dropdown(client, respond):
    respond(FakeResponse({
        "values": [
            {"accountId": "b-2", "displayName": "bob"},
            {"accountId": "a-1", "displayName": "Alice"},
        ],
        "isLast": True,
    }))

    response = client.get("/api/dropdown/users")

    assert response.get_json() == [{"id": "a-1", "text": "Alice"}, {"id": "b-2", "text": "bob"}]


@pytest.mark.parametrize("method", ["/rest/api/2/project", "noSuchOperation"])
def test_unregistered_method_is_rejected(client, jira_client, method):
    response = client.get("/api/users/search", query_string={"term": "x", "method": method})

    assert response.status_code == 400
    assert method in response.get_json()["error"]
    jira_client._session.get.assert_not_called()


def test_group_members_failure_is_empty_list(client, respond):
    respond(FakeResponse({"errorMessages": ["Group 'PMO' does not exist."]}, status_code=404))

    response = client.get("/api/groups/PMO/members")

    assert response.status_code == 200
    assert response.get_json() == []


def test_app_keeps_no_session_secret(monkeypatch):
    monkeypatch.setenv("FLASK_SECRET_KEY", "from-env")

    app = create_app({"TESTING": True})

    assert app.secret_key is None


def test_missing_credentials_is_503():
    app = create_app({"TESTING": True, "JIRA_SERVER": None, "JIRA_EMAIL": None, "JIRA_API_TOKEN": None})

    response = app.test_client().get("/api/users/search?term=x")

    assert response.status_code == 503
    assert "JIRA_SERVER" in response.get_json()["error"]


def test_get_dispatcher_requires_configuration():
    app = create_app({"TESTING": True, "JIRA_SERVER": None})

    with app.app_context():
        from jira_directory.routes import get_dispatcher
        with pytest.raises(ClientUnavailable):
            get_dispatcher()
