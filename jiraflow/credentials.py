"""Jira credentials: storage, authentication header and validation."""

from __future__ import annotations

import base64
import json
import os
from dataclasses import asdict, dataclass
from pathlib import Path

import platformdirs
import requests

_APP_NAME = "jira-branch"
_TIMEOUT = 30.0


class JiraError(Exception):
    """Raised when talking to Jira or handling credentials fails."""


@dataclass(frozen=True)
class Credentials:
    """What is needed to authenticate against a Jira site."""

    jira_url: str
    email: str
    api_token: str


class CredentialStore:
    """Keeps credentials as JSON in a file readable only by the user."""

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)

    def save(self, credentials: Credentials) -> None:
        """Write *credentials* to the store."""
        data = json.dumps(asdict(credentials))
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd = os.open(self.path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(data)
        except OSError as exc:
            raise JiraError(str(exc)) from exc

    def load(self) -> Credentials:
        """Read the stored credentials; raise JiraError if there are none."""
        try:
            text = self.path.read_text(encoding="utf-8")
        except FileNotFoundError as exc:
            raise JiraError("credentials not found") from exc
        except OSError as exc:
            raise JiraError(str(exc)) from exc
        try:
            data = json.loads(text)
        except ValueError as exc:
            raise JiraError(f"stored credentials are invalid: {exc}") from exc
        if not isinstance(data, dict):
            raise JiraError("stored credentials are invalid")
        values = {}
        for name in ("jira_url", "email", "api_token"):
            value = data.get(name)
            if value is None:
                value = ""
            if not isinstance(value, str):
                raise JiraError(f"stored credentials are invalid: {name}")
            values[name] = value
        return Credentials(**values)

    def clear(self) -> None:
        """Remove the stored credentials, if any."""
        try:
            self.path.unlink(missing_ok=True)
        except OSError as exc:
            raise JiraError(str(exc)) from exc


def default_store() -> CredentialStore:
    """Return the store in the user's configuration directory."""
    base = Path(platformdirs.user_config_dir(_APP_NAME, appauthor=False))
    return CredentialStore(base / "credentials.json")


def auth_header(credentials: Credentials) -> str:
    """Return the base64 value for HTTP basic authentication."""
    raw = f"{credentials.email}:{credentials.api_token}".encode()
    return base64.b64encode(raw).decode("ascii")


def normalize_url(url: str) -> str:
    """Trim *url*, force an https scheme and drop one trailing slash."""
    url = url.strip()
    if not url.startswith("https://"):
        url = "https://" + url
    return url.removesuffix("/")


def validate_credentials(
    credentials: Credentials, session: requests.Session | None = None
) -> None:
    """Check the credentials against Jira; raise JiraError if they fail."""
    http = session if session is not None else requests.Session()
    headers = {
        "Authorization": "Basic " + auth_header(credentials),
        "Accept": "application/json",
    }
    try:
        response = http.get(
            f"{credentials.jira_url}/rest/api/3/myself", headers=headers, timeout=_TIMEOUT
        )
    except (
        requests.exceptions.InvalidURL,
        requests.exceptions.MissingSchema,
        requests.exceptions.InvalidSchema,
    ) as exc:
        raise JiraError(f"failed to create request: {exc}") from exc
    except requests.RequestException as exc:
        raise JiraError(f"failed to connect to Jira: {exc}") from exc

    if response.status_code == 401:
        raise JiraError("invalid credentials: check your email and API token")
    if response.status_code != 200:
        raise JiraError(f"unexpected response from Jira API: {response.status_code}")