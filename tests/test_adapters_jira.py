"""Unit tests for Jira adapter (mocked API)."""

from datetime import date
from unittest.mock import Mock, patch

import pytest
import requests

from ticketgate.adapters.base import IssueTrackerError, TransportError
from ticketgate.adapters.jira import JiraAdapter, normalize_base_url
from ticketgate.models import Ticket


@pytest.fixture
def adapter() -> JiraAdapter:
    return JiraAdapter(
        base_url="https://acme.atlassian.net/",
        user_email="bot@acme.test",
        api_token="jira-token",
        timeout=7,
    )


def _issue_payload() -> dict:
    return {
        "id": "10001",
        "key": "DPBUG-1234",
        "fields": {
            "issuetype": {"name": "Bug"},
            "status": {"name": "Ready For Deployment"},
            "created": "2024-01-15T10:00:00.000-0700",
            "fixVersions": [
                {"name": "2024.1", "releaseDate": "2024-02-01", "released": True},
                {"name": "2024.2", "released": False},
            ],
        },
    }


def test_normalize_base_url() -> None:
    """Bare hostnames get https; trailing slash is dropped."""
    assert normalize_base_url("acme.atlassian.net") == "https://acme.atlassian.net"
    assert normalize_base_url("https://acme.atlassian.net/") == "https://acme.atlassian.net"
    assert normalize_base_url("http://jira.local:8080") == "http://jira.local:8080"


def test_uses_basic_auth(adapter: JiraAdapter) -> None:
    assert adapter._session.auth == ("bot@acme.test", "jira-token")


def test_get_ticket_success(adapter: JiraAdapter) -> None:
    """get_ticket maps issue type, status, created and fix versions."""
    mock_resp = Mock()
    mock_resp.status_code = 200
    mock_resp.json.return_value = _issue_payload()
    with patch.object(adapter._session, "request", return_value=mock_resp) as req:
        ticket = adapter.get_ticket("DPBUG-1234")
    assert isinstance(ticket, Ticket)
    assert ticket.id == "DPBUG-1234"
    assert ticket.issue_type == "Bug"
    assert ticket.status == "Ready For Deployment"
    assert ticket.created is not None
    assert ticket.created.date() == date(2024, 1, 15)
    assert ticket.created.utcoffset().total_seconds() == -7 * 3600
    assert len(ticket.fix_versions) == 2
    assert ticket.fix_versions[0].release_date == date(2024, 2, 1)
    assert ticket.fix_versions[0].released is True
    assert ticket.fix_versions[1].release_date is None
    assert ticket.fix_versions[1].released is False
    assert req.call_args[0][0] == "GET"
    assert req.call_args[0][1] == "https://acme.atlassian.net/rest/api/latest/issue/DPBUG-1234"
    assert req.call_args[1]["timeout"] == 7


def test_get_ticket_missing_fields_default_to_empty(adapter: JiraAdapter) -> None:
    """Absent issuetype/status/fixVersions do not crash the parse."""
    mock_resp = Mock()
    mock_resp.status_code = 200
    mock_resp.json.return_value = {"key": "dpbug-5", "fields": {}}
    with patch.object(adapter._session, "request", return_value=mock_resp):
        ticket = adapter.get_ticket("DPBUG-5")
    assert ticket.id == "DPBUG-5"
    assert ticket.issue_type == ""
    assert ticket.status == ""
    assert ticket.fix_versions == []
    assert ticket.created is None


def test_get_ticket_404_raises_with_error_messages(adapter: JiraAdapter) -> None:
    mock_resp = Mock()
    mock_resp.status_code = 404
    mock_resp.text = "{}"
    mock_resp.json.return_value = {"errorMessages": ["Issue does not exist or you do not have permission to see it."]}
    with patch.object(adapter._session, "request", return_value=mock_resp):
        with pytest.raises(IssueTrackerError) as exc_info:
            adapter.get_ticket("DPBUG-1")
    assert "404" in str(exc_info.value)
    assert "Issue does not exist" in str(exc_info.value)


def test_get_ticket_invalid_json_raises(adapter: JiraAdapter) -> None:
    """Unparsable body is a transport failure."""
    mock_resp = Mock()
    mock_resp.status_code = 200
    mock_resp.json.side_effect = ValueError("Expecting value")
    with patch.object(adapter._session, "request", return_value=mock_resp):
        with pytest.raises(IssueTrackerError, match="Invalid JSON"):
            adapter.get_ticket("DPBUG-1")


def test_get_ticket_bad_release_date_raises(adapter: JiraAdapter) -> None:
    payload = _issue_payload()
    payload["fields"]["fixVersions"] = [{"releaseDate": "not-a-date", "released": True}]
    mock_resp = Mock()
    mock_resp.status_code = 200
    mock_resp.json.return_value = payload
    with patch.object(adapter._session, "request", return_value=mock_resp):
        with pytest.raises(IssueTrackerError, match="Malformed"):
            adapter.get_ticket("DPBUG-1234")


def test_get_ticket_timeout_is_transport_error(adapter: JiraAdapter) -> None:
    with patch.object(adapter._session, "request", side_effect=requests.Timeout("slow")) as req:
        with pytest.raises(TransportError, match="timed out after 7s"):
            adapter.get_ticket("DPBUG-1")
    req.assert_called_once()


def test_get_ticket_error_with_non_object_body_keeps_status(adapter: JiraAdapter) -> None:
    """A 500 whose body is a JSON list is still an IssueTrackerError."""
    mock_resp = Mock()
    mock_resp.status_code = 500
    mock_resp.text = '["boom"]'
    mock_resp.json.return_value = ["boom"]
    with patch.object(adapter._session, "request", return_value=mock_resp):
        with pytest.raises(IssueTrackerError) as exc_info:
            adapter.get_ticket("DPBUG-1")
    assert str(exc_info.value) == '500: ["boom"]'


def test_get_ticket_non_list_error_messages_ignored(adapter: JiraAdapter) -> None:
    mock_resp = Mock()
    mock_resp.status_code = 400
    mock_resp.text = "Bad Request"
    mock_resp.json.return_value = {"errorMessages": "not a list"}
    with patch.object(adapter._session, "request", return_value=mock_resp):
        with pytest.raises(IssueTrackerError, match="^400: Bad Request$"):
            adapter.get_ticket("DPBUG-1")


def test_get_ticket_non_object_payload_raises(adapter: JiraAdapter) -> None:
    mock_resp = Mock()
    mock_resp.status_code = 200
    mock_resp.json.return_value = ["DPBUG-1234"]
    with patch.object(adapter._session, "request", return_value=mock_resp):
        with pytest.raises(IssueTrackerError, match="Unexpected payload"):
            adapter.get_ticket("DPBUG-1234")


def test_get_ticket_non_object_fields_raises(adapter: JiraAdapter) -> None:
    payload = _issue_payload()
    payload["fields"] = ["issuetype", "status"]
    mock_resp = Mock()
    mock_resp.status_code = 200
    mock_resp.json.return_value = payload
    with patch.object(adapter._session, "request", return_value=mock_resp):
        with pytest.raises(IssueTrackerError, match="Malformed ticket payload for DPBUG-1234"):
            adapter.get_ticket("DPBUG-1234")


def test_get_ticket_unparsable_created_is_none(adapter: JiraAdapter) -> None:
    """created is informational; a bad timestamp does not fail the lookup."""
    payload = _issue_payload()
    payload["fields"]["created"] = "yesterday"
    mock_resp = Mock()
    mock_resp.status_code = 200
    mock_resp.json.return_value = payload
    with patch.object(adapter._session, "request", return_value=mock_resp):
        ticket = adapter.get_ticket("DPBUG-1234")
    assert ticket.created is None
    assert ticket.status == "Ready For Deployment"
