"""Application state and how it reacts to keys and results."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum

from jiraflow.client import JiraTicket
from jiraflow.credentials import Credentials, JiraError, normalize_url
from jiraflow.gitops import branch_name_error, format_branch_name
from jiraflow.widgets import CHAR_LIMIT, TextField, create_search_input

_LOGGER = logging.getLogger("jiraflow")

KEY_WIDTH = 10
TYPE_WIDTH = 10
STATUS_WIDTH = 25
CREATED_WIDTH = 15
MIN_SUMMARY_WIDTH = 25


class View(Enum):
    """The screen being shown."""

    LIST = "list"
    CREDENTIALS = "credentials"
    FORM = "form"


@dataclass(frozen=True)
class LoadTickets:
    """Fetch the user's tickets and replace the full ticket list."""


@dataclass(frozen=True)
class CheckCredentials:
    """Validate the credentials and store them when they work."""

    credentials: Credentials


@dataclass(frozen=True)
class SubmitBranch:
    """Optionally mark the issue in progress, then check out the branch."""

    branch_name: str
    mark_in_progress: bool
    issue_key: str


@dataclass(frozen=True)
class SignOut:
    """Forget the stored credentials."""


@dataclass(frozen=True)
class Quit:
    """Leave the application."""


def _is_printable(key: str) -> bool:
    return len(key) == 1 and key.isprintable()


def _edit(text_field: TextField, key: str) -> None:
    if key == "backspace":
        text_field.backspace()
    elif _is_printable(key):
        text_field.insert(key)


@dataclass
class BranchForm:
    """The branch name field and the optional "mark as in progress" choice."""

    branch_name: str
    ask_in_progress: bool = True
    mark_in_progress: bool = field(init=False)
    focus: int = 0
    completed: bool = False

    def __post_init__(self) -> None:
        self.mark_in_progress = self.ask_in_progress

    @property
    def field_count(self) -> int:
        return 2 if self.ask_in_progress else 1

    def error(self) -> str | None:
        """Return why the branch name is not acceptable, or None."""
        return branch_name_error(self.branch_name)

    def _next(self) -> None:
        if self.focus == 0 and self.error() is not None:
            return
        if self.focus >= self.field_count - 1:
            self.completed = True
        else:
            self.focus += 1

    def handle_key(self, key: str) -> bool:
        """Apply a key press; return True once the form is submitted."""
        if self.completed:
            return True
        if key in ("enter", "tab", "down"):
            self._next()
        elif key in ("shift+tab", "up"):
            self.focus = max(0, self.focus - 1)
        elif self.focus == 0:
            if key == "backspace":
                self.branch_name = self.branch_name[:-1]
            elif _is_printable(key):
                self.branch_name += key
        elif key in ("left", "right", "h", "l"):
            self.mark_in_progress = not self.mark_in_progress
        elif key in ("y", "Y"):
            self.mark_in_progress = True
            self._next()
        elif key in ("n", "N"):
            self.mark_in_progress = False
            self._next()
        return self.completed


def ticket_matches(search: str, ticket: JiraTicket) -> bool:
    """Return whether key, summary, type or status contains *search*, ignoring case."""
    needle = search.lower()
    return any(
        needle in value.lower()
        for value in (ticket.key, ticket.summary, ticket.issue_type, ticket.status)
    )


def filter_tickets(tickets: list[JiraTicket], search: str) -> list[JiraTicket]:
    """Return the tickets that match *search*, in their original order."""
    return [ticket for ticket in tickets if ticket_matches(search, ticket)]


def table_columns(width: int) -> list[tuple[str, int]]:
    """Return the ticket table's column titles and widths for a screen width."""
    summary = max(
        MIN_SUMMARY_WIDTH,
        width - KEY_WIDTH - TYPE_WIDTH - STATUS_WIDTH - CREATED_WIDTH - 12,
    )
    return [
        ("Key", KEY_WIDTH),
        ("Type", TYPE_WIDTH),
        ("Summary", summary),
        ("Status", STATUS_WIDTH),
        ("Created", CREATED_WIDTH),
    ]


def create_credential_inputs(
    width: int, env: Mapping[str, str] | None = None
) -> list[TextField]:
    """Return the URL, email and token fields, prefilled from the environment."""
    if env is None:
        env = os.environ

    def make(prompt: str, placeholder: str, variable: str, **extra) -> TextField:
        return TextField(
            prompt=prompt,
            placeholder=placeholder,
            value=env.get(variable, "")[:CHAR_LIMIT],
            char_limit=CHAR_LIMIT,
            width=width,
            **extra,
        )

    inputs = [
        make("Atlassian URL: ", "your-company.atlassian.net", "JIRA_URL"),
        make("Email: ", "[email]", "JIRA_EMAIL"),
        make("API Token: ", "Your JIRA API token", "JIRA_API_TOKEN", password=True),
    ]
    inputs[0].focused = True
    return inputs


@dataclass
class AppState:
    """Everything the screens show; key handlers return effects to perform."""

    width: int = 0
    height: int = 0
    env: Mapping[str, str] | None = None
    is_loading: bool = True
    is_logged_in: bool = False
    error: Exception | None = None
    view: View = View.LIST
    credential_inputs: list[TextField] = field(default_factory=list)
    current_field: int = 0
    credentials: Credentials | None = None
    all_tickets: list[JiraTicket] = field(default_factory=list)
    tickets: list[JiraTicket] = field(default_factory=list)
    cursor: int = 0
    show_search: bool = False
    search: str = ""
    search_input: TextField = field(default_factory=lambda: create_search_input(0))
    form: BranchForm | None = None
    is_submitting_form: bool = False

    @property
    def table_height(self) -> int:
        """Rows available to the ticket table."""
        height = self.height - 3
        if self.show_search:
            height -= 1
        return max(1, height)

    def selected_ticket(self) -> JiraTicket | None:
        """Return the ticket under the cursor, if any."""
        if 0 <= self.cursor < len(self.tickets):
            return self.tickets[self.cursor]
        return None

    def handle_key(self, key: str) -> list:
        """Apply a key press and return the effects it asks for."""
        if self.is_logged_in and key == "q" and self.view is View.LIST:
            return [Quit()]
        if key == "ctrl+c":
            return [Quit()]
        if self.view is View.LIST:
            if self.show_search:
                return self._search_key(key)
            return self._list_key(key)
        if self.view is View.CREDENTIALS:
            return self._credentials_key(key)
        return self._form_key(key)

    def on_credentials(self, credentials: Credentials) -> list:
        """Accept working credentials and ask for the tickets."""
        self.credentials = credentials
        self.is_logged_in = True
        self.is_loading = True
        self.view = View.LIST
        return [LoadTickets()]

    def on_credentials_needed(self) -> None:
        """Show the credentials screen."""
        if self.view is not View.LIST or self.show_search:
            return
        self._open_credentials()

    def on_tickets(
        self,
        tickets: list[JiraTicket],
        error: Exception | None = None,
        overwrite: bool = True,
    ) -> None:
        """Accept the result of loading tickets."""
        if self.view is not View.LIST or self.show_search:
            return
        if error is not None:
            self.error = error
            self.is_loading = False
            return
        if overwrite:
            self.all_tickets = list(tickets)
        self.tickets = list(tickets)
        self._refilter()
        self.is_loading = False
        self.is_logged_in = True

    def on_error(self, error: Exception) -> None:
        """Record a failure and stop any loading."""
        self.error = error
        self.is_loading = False
        self.is_submitting_form = False

    def on_resize(self, width: int, height: int) -> None:
        """Record the new screen size."""
        self.width = width
        self.height = height

    def _open_credentials(self) -> None:
        self.view = View.CREDENTIALS
        self.credential_inputs = create_credential_inputs(self.width, self.env)
        self.current_field = 0

    def _refilter(self) -> None:
        self.tickets = filter_tickets(self.all_tickets, self.search_input.value)
        _LOGGER.info("filteredTickets: %d", len(self.tickets))
        self.cursor = 0

    def _move(self, delta: int) -> None:
        last = max(0, len(self.tickets) - 1)
        self.cursor = min(max(self.cursor + delta, 0), last)

    def _list_key(self, key: str) -> list:
        if key == "r":
            self.is_loading = True
            return [LoadTickets()]
        if key == "S":
            self._open_credentials()
            self.is_logged_in = False
            return [SignOut()]
        if key == "enter":
            ticket = self.selected_ticket()
            if ticket is not None:
                in_progress = ticket.status.casefold() == "in progress"
                self.form = BranchForm(format_branch_name(ticket), not in_progress)
                self.view = View.FORM
            return []
        if key == "/":
            self.search_input = create_search_input(self.width)
            self.search_input.value = self.search
            self.search_input.focused = True
            self.show_search = True
            return []
        page = self.table_height
        moves = {
            "up": -1, "k": -1,
            "down": 1, "j": 1,
            "pgup": -page, "b": -page,
            "pgdown": page, "f": page, " ": page,
            "u": -(page // 2), "d": page // 2,
        }
        if key in moves:
            self._move(moves[key])
        elif key in ("home", "g"):
            self.cursor = 0
        elif key in ("end", "G"):
            self.cursor = max(0, len(self.tickets) - 1)
        return []

    def _search_key(self, key: str) -> list:
        if key == "enter":
            self.show_search = False
            self.search = self.search_input.value
            self.cursor = 0
            return []
        if key == "esc":
            self.show_search = False
            self.search_input.value = ""
            self.search = ""
            self._refilter()
            return []
        if not self.is_loading and self.is_logged_in:
            _edit(self.search_input, key)
            self._refilter()
        return []

    def _credentials_key(self, key: str) -> list:
        if not self.credential_inputs:
            return []
        last = len(self.credential_inputs) - 1
        if key in ("tab", "shift+tab", "enter", "up", "down"):
            if key == "enter" and self.current_field == last:
                url, email, token = (f.value for f in self.credential_inputs[:3])
                self.credentials = Credentials(
                    jira_url=normalize_url(url),
                    email=email.strip(),
                    api_token=token.strip(),
                )
                if not all(
                    (self.credentials.jira_url, self.credentials.email,
                     self.credentials.api_token)
                ):
                    self.error = JiraError("all fields are required")
                    return []
                self.is_loading = True
                self.error = None
                return [CheckCredentials(self.credentials)]
            step = -1 if key in ("up", "shift+tab") else 1
            self.current_field = (self.current_field + step) % (last + 1)
            for index, text_field in enumerate(self.credential_inputs):
                text_field.focused = index == self.current_field
            return []
        _edit(self.credential_inputs[self.current_field], key)
        return []

    def _form_key(self, key: str) -> list:
        if self.is_submitting_form or self.form is None:
            return []
        if key == "esc":
            self.view = View.LIST
            return []
        if not self.form.handle_key(key):
            return []
        ticket = self.selected_ticket()
        self.is_submitting_form = True
        return [
            SubmitBranch(
                branch_name=self.form.branch_name,
                mark_in_progress=self.form.mark_in_progress,
                issue_key=ticket.key if ticket is not None else "",
            )
        ]