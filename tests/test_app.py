import pytest
import responses

from jiraflow.app import App, main
from jiraflow.credentials import CredentialStore, Credentials, JiraError
from jiraflow.gitops import GitError
from jiraflow.state import (
    AppState,
    CheckCredentials,
    LoadTickets,
    Quit,
    SignOut,
    SubmitBranch,
    View,
)

BASE = "https://jira.example.com"
CREDS = Credentials(BASE, "user@example.com", "token")
SEARCH = {
    "issues": [
        {
            "key": "ABC-1",
            "fields": {
                "summary": "Fix login page",
                "status": {"name": "To Do"},
                "issuetype": {"name": "Bug"},
                "created": "2024-01-01T00:00:00.000+0000",
            },
        }
    ]
}


@pytest.fixture
def app(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("GIT_DIR", str(tmp_path / "missing"))
    store = CredentialStore(tmp_path / "creds.json")
    return App(state=AppState(width=100, height=30, env={}), store=store)


def test_start_with_stored_credentials_loads_tickets(app):
    app.store.save(CREDS)
    with responses.RequestsMock() as rsps:
        rsps.add(responses.GET, f"{BASE}/rest/api/3/myself", json={}, status=200)
        rsps.add(responses.GET, f"{BASE}/rest/api/3/search", json=SEARCH, status=200)
        app.start()
    assert app.state.is_logged_in
    assert not app.state.is_loading
    assert [t.key for t in app.state.tickets] == ["ABC-1"]
    assert app.state.view is View.LIST


def test_start_without_credentials_asks_for_them(app):
    app.start()
    assert app.state.view is View.CREDENTIALS
    assert len(app.state.credential_inputs) == 3


def test_start_with_rejected_credentials_asks_for_them(app):
    app.store.save(CREDS)
    with responses.RequestsMock() as rsps:
        rsps.add(responses.GET, f"{BASE}/rest/api/3/myself", status=401)
        app.start()
    assert app.state.view is View.CREDENTIALS


def test_check_credentials_stores_and_loads(app):
    with responses.RequestsMock() as rsps:
        rsps.add(responses.GET, f"{BASE}/rest/api/3/myself", json={}, status=200)
        rsps.add(responses.GET, f"{BASE}/rest/api/3/search", json=SEARCH, status=200)
        app.perform(CheckCredentials(CREDS))
    assert app.store.load() == CREDS
    assert app.state.credentials == CREDS
    assert [t.summary for t in app.state.tickets] == ["Fix login page"]


def test_check_credentials_failure_sets_error(app):
    with responses.RequestsMock() as rsps:
        rsps.add(responses.GET, f"{BASE}/rest/api/3/myself", status=401)
        app.perform(CheckCredentials(CREDS))
    assert str(app.state.error) == "invalid credentials: check your email and API token"
    assert app.state.is_loading is False
    with pytest.raises(JiraError):
        app.store.load()


def test_load_tickets_error(app):
    app.state.credentials = CREDS
    with responses.RequestsMock() as rsps:
        rsps.add(responses.GET, f"{BASE}/rest/api/3/search", status=500)
        app.perform(LoadTickets())
    assert str(app.state.error) == "jira API error: 500"


def test_sign_out_clears_store(app):
    app.store.save(CREDS)
    app.perform(SignOut())
    with pytest.raises(JiraError):
        app.store.load()


def test_quit_stops_running(app):
    app.perform(Quit())
    assert app.running is False


def test_submit_branch_reports_jira_failure(app):
    app.state.credentials = CREDS
    app.state.is_submitting_form = True
    with responses.RequestsMock() as rsps:
        rsps.add(
            responses.GET, f"{BASE}/rest/api/3/issue/ABC-1/transitions", status=401
        )
        app.perform(SubmitBranch("feature/ABC-1-x", True, "ABC-1"))
    assert str(app.state.error) == "authentication failed: check your credentials"
    assert app.state.is_submitting_form is False
    assert app.running is True


def test_submit_branch_reports_git_failure(app):
    app.state.credentials = CREDS
    app.perform(SubmitBranch("feature/ABC-1-x", False, "ABC-1"))
    assert isinstance(app.state.error, GitError)
    assert "failed to checkout branch feature/ABC-1-x" in str(app.state.error)
    assert app.running is True


def test_main_help_exits_cleanly():
    with pytest.raises(SystemExit) as excinfo:
        main(["--help"])
    assert excinfo.value.code == 0