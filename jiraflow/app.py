"""The interactive terminal application and its command-line entry point."""

from __future__ import annotations

import argparse
import curses
import logging
import os
import subprocess
from pathlib import Path

import requests
from dotenv import load_dotenv

from jiraflow.client import JiraClient
from jiraflow.config import read_config_file
from jiraflow.credentials import (
    CredentialStore,
    JiraError,
    default_store,
    validate_credentials,
)
from jiraflow.gitops import GitError, checkout_branch
from jiraflow.logs import init_logging
from jiraflow.state import (
    AppState,
    CheckCredentials,
    LoadTickets,
    Quit,
    SignOut,
    SubmitBranch,
)
from jiraflow.views import render
from jiraflow.widgets import Spinner

_LOGGER = logging.getLogger("jiraflow")

_SPECIAL_KEYS = {
    "\n": "enter",
    "\r": "enter",
    "\t": "tab",
    "\x1b": "esc",
    "\x03": "ctrl+c",
    "\x7f": "backspace",
    "\b": "backspace",
    curses.KEY_ENTER: "enter",
    curses.KEY_BTAB: "shift+tab",
    curses.KEY_UP: "up",
    curses.KEY_DOWN: "down",
    curses.KEY_LEFT: "left",
    curses.KEY_RIGHT: "right",
    curses.KEY_BACKSPACE: "backspace",
    curses.KEY_PPAGE: "pgup",
    curses.KEY_NPAGE: "pgdown",
    curses.KEY_HOME: "home",
    curses.KEY_END: "end",
}


def _key_name(ch) -> str | None:
    if ch in _SPECIAL_KEYS:
        return _SPECIAL_KEYS[ch]
    if isinstance(ch, str) and ch.isprintable():
        return ch
    return None


class App:
    """Runs the state's effects against Jira, git and the credential store."""

    def __init__(
        self,
        state: AppState | None = None,
        store: CredentialStore | None = None,
        session: requests.Session | None = None,
    ) -> None:
        self.state = state if state is not None else AppState()
        self.store = store if store is not None else default_store()
        self.session = session if session is not None else requests.Session()
        self.spinner = Spinner()
        self.running = True
        self._redraw = lambda: None

    def _perform_all(self, effects) -> None:
        for effect in effects:
            self.perform(effect)

    def start(self) -> None:
        """Sign in with stored credentials, or ask for new ones."""
        try:
            credentials = self.store.load()
            validate_credentials(credentials, self.session)
        except JiraError as exc:
            _LOGGER.info("Credentials needed: %s", exc)
            self.state.on_credentials_needed()
            return
        self._perform_all(self.state.on_credentials(credentials))

    def perform(self, effect) -> None:
        """Carry out one effect and feed its outcome back into the state."""
        if isinstance(effect, Quit):
            self.running = False
        elif isinstance(effect, SignOut):
            try:
                self.store.clear()
            except JiraError as exc:
                _LOGGER.error("Failed to clear credentials: %s", exc)
        elif isinstance(effect, LoadTickets):
            self._redraw()
            self._load_tickets()
        elif isinstance(effect, CheckCredentials):
            self._redraw()
            self._check_credentials(effect)
        elif isinstance(effect, SubmitBranch):
            self._redraw()
            self._submit_branch(effect)

    def _load_tickets(self) -> None:
        credentials = self.state.credentials
        if credentials is None:
            self.state.on_tickets([], JiraError("credentials not found"))
            return
        try:
            project_key = read_config_file().project_key
        except (OSError, subprocess.CalledProcessError, ValueError) as exc:
            _LOGGER.info("Failed to read config file: %s", exc)
            project_key = ""
        try:
            tickets = JiraClient(credentials, self.session).get_tickets(project_key)
        except JiraError as exc:
            self.state.on_tickets([], exc)
            return
        self.state.on_tickets(tickets)

    def _check_credentials(self, effect: CheckCredentials) -> None:
        try:
            validate_credentials(effect.credentials, self.session)
        except JiraError as exc:
            self.state.on_error(exc)
            return
        try:
            self.store.save(effect.credentials)
        except JiraError as exc:
            self.state.on_error(JiraError(f"failed to store credentials: {exc}"))
            return
        self._perform_all(self.state.on_credentials(effect.credentials))

    def _submit_branch(self, effect: SubmitBranch) -> None:
        try:
            if effect.mark_in_progress:
                credentials = self.state.credentials
                if credentials is None:
                    raise JiraError("credentials not found")
                JiraClient(credentials, self.session).mark_as_in_progress(effect.issue_key)
            checkout_branch(effect.branch_name)
        except (JiraError, GitError) as exc:
            self.state.on_error(exc)
            return
        self.running = False

    def _draw(self, stdscr) -> None:
        height, width = stdscr.getmaxyx()
        stdscr.erase()
        text = render(self.state, self.spinner.frame())
        for y, line in enumerate(text.split("\n")[:height]):
            try:
                stdscr.addstr(y, 0, line[:width])
            except curses.error:
                pass
        stdscr.refresh()

    def _resize(self, stdscr) -> None:
        height, width = stdscr.getmaxyx()
        self.state.on_resize(width, height)

    def run(self, stdscr) -> None:
        """Drive the application on a curses screen until it quits."""
        try:
            curses.curs_set(0)
        except curses.error:
            pass
        stdscr.timeout(1000 // Spinner.fps)
        self._redraw = lambda: self._draw(stdscr)
        self._resize(stdscr)
        self._draw(stdscr)
        self.start()
        while self.running:
            self._draw(stdscr)
            try:
                ch = stdscr.get_wch()
            except curses.error:
                if self.state.is_loading or self.state.is_submitting_form:
                    self.spinner.tick()
                continue
            if ch == curses.KEY_RESIZE:
                self._resize(stdscr)
                continue
            key = _key_name(ch)
            if key is not None:
                self._perform_all(self.state.handle_key(key))


def main(argv=None) -> int:
    """Start the ticket picker; return the exit status."""
    parser = argparse.ArgumentParser(
        prog="jira-branch",
        description="Pick one of your Jira tickets and check out a branch for it.",
    )
    parser.parse_args(argv)

    env_loaded = load_dotenv(Path.cwd() / ".env")
    try:
        init_logging()
    except OSError:
        pass
    if not env_loaded:
        _LOGGER.info("No .env file found, continuing with environment variables")
    _LOGGER.info("Starting application")

    os.environ.setdefault("ESCDELAY", "25")
    app = App()
    try:
        curses.wrapper(app.run)
    except curses.error as exc:
        print("Error running program:", exc)
        return 1
    return 0