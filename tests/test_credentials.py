import base64

import pytest
import requests
import responses

from jiraflow.credentials import (
    CredentialStore,
    Credentials,
    JiraError,
    auth_header,
    normalize_url,
    validate_credentials,
)

CREDS = Credentials(
    jira_url="https://jira.example.com", email="user@example.com", api_token="token"
)
MYSELF = "https://jira.example.com/rest/api/3/myself"


def test_auth_header_round_trip():
    decoded = base64.b64decode(auth_header(CREDS)).decode()
    assert decoded == f"{CREDS.email}:{CREDS.api_token}"


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("jira.example.com", "https://jira.example.com"),
        ("  https://jira.example.com/  ", "https://jira.example.com"),
        ("https://jira.example.com", "https://jira.example.com"),
        ("", "https://"),
    ],
)
def test_normalize_url(raw, expected):
    assert normalize_url(raw) == expected


def test_store_round_trip(tmp_path):
    store = CredentialStore(tmp_path / "nested" / "credentials.json")
    store.save(CREDS)
    assert store.load() == CREDS


def test_load_missing_raises(tmp_path):
    with pytest.raises(JiraError):
        CredentialStore(tmp_path / "none.json").load()


def test_clear_removes(tmp_path):
    store = CredentialStore(tmp_path / "credentials.json")
    store.save(CREDS)
    store.clear()
    assert not store.path.exists()
    with pytest.raises(JiraError):
        store.load()


def test_clear_missing_leaves_nothing(tmp_path):
    store = CredentialStore(tmp_path / "credentials.json")
    store.clear()
    assert not store.path.exists()


def test_load_corrupt_raises(tmp_path):
    path = tmp_path / "credentials.json"
    path.write_text("{broken")
    with pytest.raises(JiraError):
        CredentialStore(path).load()


def test_validate_sends_auth_header():
    with responses.RequestsMock() as rsps:
        rsps.add(responses.GET, MYSELF, json={}, status=200)
        validate_credentials(CREDS, requests.Session())
        request = rsps.calls[0].request
        assert request.headers["Authorization"] == "Basic " + auth_header(CREDS)
        assert request.headers["Accept"] == "application/json"


def test_validate_unauthorized():
    with responses.RequestsMock() as rsps:
        rsps.add(responses.GET, MYSELF, status=401)
        with pytest.raises(JiraError, match="invalid credentials"):
            validate_credentials(CREDS)


def test_validate_unexpected_status():
    with responses.RequestsMock() as rsps:
        rsps.add(responses.GET, MYSELF, status=500)
        with pytest.raises(JiraError, match="unexpected response from Jira API: 500"):
            validate_credentials(CREDS)


def test_validate_connection_error():
    with responses.RequestsMock() as rsps:
        rsps.add(responses.GET, MYSELF, body=requests.ConnectionError("down"))
        with pytest.raises(JiraError, match="failed to connect to Jira"):
            validate_credentials(CREDS)