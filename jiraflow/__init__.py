"""Pick one of your open Jira tickets in a curses UI and check out a git branch for it."""

__version__ = "0.1.0"