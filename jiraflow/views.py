"""Turning the application state into screens of plain text."""

from __future__ import annotations

import textwrap

from jiraflow.state import AppState, BranchForm, View, table_columns
from jiraflow.timefmt import format_relative_time
from jiraflow.widgets import HelpItem, help_line, loading_view

SIDEBAR_WIDTH = 34
TOKEN_URL = "https://id.atlassian.com/manage-profile/security/api-tokens"
_QUIT_HELP = [HelpItem("q/ctrl+c", "Quit")]


def _fit(text: str, width: int) -> str:
    if width <= 0:
        return ""
    if len(text) > width:
        return text[: width - 1] + "…"
    return text.ljust(width)


def _box(lines: list[str], inner_width: int | None = None) -> list[str]:
    width = inner_width if inner_width is not None else max(map(len, lines), default=0)
    return [
        "╭" + "─" * width + "╮",
        *("│" + line.ljust(width) + "│" for line in lines),
        "╰" + "─" * width + "╯",
    ]


def _block(lines: list[str], width: int, top: int = 0, left: int = 0,
           height: int = 0) -> list[str]:
    body = [""] * top + [" " * left + line for line in lines]
    body += [""] * max(0, height - len(body))
    width = max([width, *map(len, body)])
    return [line.ljust(width) for line in body]


def _join_horizontal(left: list[str], right: list[str]) -> list[str]:
    left_width = max(map(len, left), default=0)
    right_width = max(map(len, right), default=0)
    rows = max(len(left), len(right))
    left = left + [""] * (rows - len(left))
    right = right + [""] * (rows - len(right))
    return [a.ljust(left_width) + b.ljust(right_width) for a, b in zip(left, right)]


def view_error(state: AppState) -> str:
    """Show the error and how to quit."""
    return f"❌ {state.error}\n\n" + help_line(_QUIT_HELP)


def view_credentials(state: AppState) -> str:
    """Show the sign-in screen with its three fields."""
    lines = [
        f"Generate an API token at: {TOKEN_URL}",
        'Do NOT use the "API token with scopes" option.',
        "",
    ]
    if state.error is not None:
        lines += [f"❌ {state.error}", ""]
    lines += [text_field.render() for text_field in state.credential_inputs]
    lines += [
        "",
        help_line([
            HelpItem("tab", "Navigate"),
            HelpItem("enter", "Submit"),
            HelpItem("ctrl+c", "Quit"),
        ]),
    ]
    block = _block(lines, state.width, top=1, left=3, height=state.height)
    return "\n".join(block)


def _table_lines(state: AppState) -> list[str]:
    columns = table_columns(state.width)
    header = "".join(f" {_fit(title, width)} " for title, width in columns)
    visible = max(1, state.table_height - 2)
    start = max(0, state.cursor - visible + 1)
    lines = [header, "─" * len(header)]
    for index, ticket in enumerate(state.tickets[start:start + visible], start):
        cells = (
            ticket.key,
            ticket.issue_type,
            ticket.summary,
            ticket.status,
            format_relative_time(ticket.created),
        )
        row = "".join(f" {_fit(value, width)} " for value, (_, width) in zip(cells, columns))
        if index == state.cursor:
            row = ">" + row[1:]
        lines.append(row)
    lines += [" " * len(header)] * (visible + 2 - len(lines))
    return lines


def view_list(state: AppState) -> str:
    """Show the ticket table, the search field when open, and key help."""
    helper = help_line([
        HelpItem("j/k", "↓/↑"),
        HelpItem("enter", "Select ticket"),
        HelpItem("/", "Search"),
        HelpItem("r", "Refresh"),
        HelpItem("S", "Sign out"),
        HelpItem("q/ctrl+c", "Quit"),
    ])
    prefix = ""
    if state.show_search:
        prefix = state.search_input.render() + "\n"
        helper = help_line([HelpItem("esc", "Clear"), HelpItem("enter", "Confirm")])
    if state.search and not state.show_search:
        available = state.width - len(helper)
        helper += f"/{state.search}".rjust(available - 1)
    table = "\n".join(_box(_table_lines(state)))
    return prefix + table + "\n" + helper


def _form_lines(form: BranchForm) -> list[str]:
    marker = "┃ " if form.focus == 0 else "  "
    lines = [marker + "Branch name", marker + "> " + form.branch_name]
    error = form.error()
    if error is not None and form.focus == 0:
        lines.append(marker + "* " + error)
    if form.ask_in_progress:
        marker = "┃ " if form.focus == 1 else "  "
        yes = "[Yes]" if form.mark_in_progress else " Yes "
        no = "[No]" if not form.mark_in_progress else " No "
        lines += ["", f"{marker}Mark as in progress? {yes} {no}"]
    return lines


def create_sidebar(state: AppState) -> str:
    """Show the selected ticket's summary, type, status and age in a box."""
    inner = SIDEBAR_WIDTH - 6
    ticket = state.selected_ticket()
    content: list[str] = []
    if ticket is not None:
        parts = [
            ticket.summary,
            ticket.issue_type,
            ticket.status,
            format_relative_time(ticket.created),
        ]
        for index, part in enumerate(parts):
            if index:
                content.append("─" * inner)
            content.extend(textwrap.wrap(part, inner) or [""])
    body = [" " * SIDEBAR_WIDTH]
    body += ["   " + line.ljust(inner) + "   " for line in content]
    height = max(state.height - 3, len(body) + 1)
    body += [" " * SIDEBAR_WIDTH] * (height - len(body))
    return "\n".join(_box(body, SIDEBAR_WIDTH))


def view_form(state: AppState, spinner_frame: str = "") -> str:
    """Show the branch form next to the selected ticket's details."""
    if state.is_submitting_form:
        return loading_view(
            "Creating branch and updating Jira...", state.width, state.height, spinner_frame
        )
    form = state.form
    if form is None:
        return view_list(state)
    form_width = state.width - SIDEBAR_WIDTH - 5
    lines = _form_lines(form)
    if len(form.branch_name) > form_width - 8:
        return "\n".join(_block(lines, state.width, top=2, left=2))
    form_block = _block(lines, form_width, top=2, left=2)
    sidebar = create_sidebar(state).split("\n")
    return "\n".join(_join_horizontal(form_block, sidebar))


def render(state: AppState, spinner_frame: str = "") -> str:
    """Return the whole screen for the current state."""
    if state.view is View.CREDENTIALS:
        return view_credentials(state)
    if state.error is not None:
        return view_error(state)
    if not state.is_logged_in and state.is_loading:
        return loading_view(
            "Validating credentials...", state.width, state.height, spinner_frame
        )
    if state.is_loading:
        return loading_view(
            "Loading Jira tickets...", state.width, state.height, spinner_frame
        )
    if state.view is View.FORM:
        return view_form(state, spinner_frame)
    return view_list(state)