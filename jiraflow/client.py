"""Jira REST client: listing assigned tickets and moving them to In Progress."""

from __future__ import annotations

import json
from dataclasses import dataclass

import requests

from jiraflow.credentials import Credentials, JiraError, auth_header

_SEARCH_FIELDS = "summary,status,issuetype,assignee,created"
_BASE_JQL = "assignee = currentUser() AND status != Done order by createdDate"


@dataclass(frozen=True)
class JiraTicket:
    """A Jira issue as shown in the ticket list."""

    key: str
    summary: str
    issue_type: str
    status: str
    created: str


@dataclass(frozen=True)
class Transition:
    """A workflow transition available on an issue."""

    id: str
    name: str = ""


def build_jql(project_key: str = "") -> str:
    """Return the query for open tickets assigned to the current user."""
    prefix = f"project = {project_key} AND " if project_key else ""
    return prefix + _BASE_JQL


def _mapping(value) -> dict:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise JiraError("unexpected response from Jira: expected an object")
    return value


def _list(value) -> list:
    if value is None:
        return []
    if not isinstance(value, list):
        raise JiraError("unexpected response from Jira: expected a list")
    return value


def _text(mapping: dict, key: str) -> str:
    value = mapping.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise JiraError(f"unexpected response from Jira: {key} is not a string")
    return value


def _ticket(issue) -> JiraTicket:
    issue = _mapping(issue)
    fields = _mapping(issue.get("fields"))
    return JiraTicket(
        key=_text(issue, "key"),
        summary=_text(fields, "summary"),
        issue_type=_text(_mapping(fields.get("issuetype")), "name"),
        status=_text(_mapping(fields.get("status")), "name"),
        created=_text(fields, "created"),
    )


def parse_tickets(payload) -> list[JiraTicket]:
    """Turn a decoded search response into tickets."""
    return [_ticket(issue) for issue in _list(_mapping(payload).get("issues"))]


class JiraClient:
    """Talks to one Jira site with one set of credentials."""

    def __init__(
        self,
        credentials: Credentials,
        session: requests.Session | None = None,
        timeout: float = 30.0,
    ) -> None:
        self.credentials = credentials
        self.session = session if session is not None else requests.Session()
        self.timeout = timeout

    def url(self, endpoint: str) -> str:
        """Return the REST API URL for *endpoint*."""
        return f"{self.credentials.jira_url}/rest/api/3/{endpoint}"

    def _send(self, method: str, endpoint: str, *, params=None, body=None):
        headers = {
            "Authorization": "Basic " + auth_header(self.credentials),
            "Accept": "application/json",
        }
        data = None
        if body is not None:
            headers["Content-Type"] = "application/json"
            data = json.dumps(body, separators=(",", ":"))
        try:
            return self.session.request(
                method,
                self.url(endpoint),
                params=params,
                data=data,
                headers=headers,
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            raise JiraError(str(exc)) from exc

    @staticmethod
    def _check(response, expected: int) -> None:
        if response.status_code == 401:
            raise JiraError("authentication failed: check your credentials")
        if response.status_code != expected:
            raise JiraError(f"jira API error: {response.status_code}")

    @staticmethod
    def _json(response):
        try:
            return response.json()
        except ValueError as exc:
            raise JiraError(f"invalid response from Jira: {exc}") from exc

    def get_tickets(self, project_key: str = "") -> list[JiraTicket]:
        """Return up to 100 open tickets assigned to the current user."""
        params = {
            "fields": _SEARCH_FIELDS,
            "jql": build_jql(project_key),
            "maxResults": "100",
        }
        response = self._send("GET", "search", params=params)
        self._check(response, 200)
        return parse_tickets(self._json(response))

    def get_in_progress_transition(self, issue_key: str) -> str:
        """Return the id of the issue's "In Progress" transition."""
        response = self._send("GET", f"issue/{issue_key}/transitions")
        self._check(response, 200)
        payload = _mapping(self._json(response))
        for item in _list(payload.get("transitions")):
            item = _mapping(item)
            transition = Transition(id=_text(item, "id"), name=_text(item, "name"))
            if transition.name == "In Progress":
                return transition.id
        raise JiraError("transition not found")

    def mark_as_in_progress(self, issue_key: str) -> None:
        """Move the issue to "In Progress"."""
        transition = Transition(id=self.get_in_progress_transition(issue_key))
        body = {"transition": {"id": transition.id, "name": transition.name}}
        response = self._send("POST", f"issue/{issue_key}/transitions", body=body)
        self._check(response, 204)