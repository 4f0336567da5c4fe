"""Git branch naming and checkout."""

from __future__ import annotations

import re
import subprocess

from jiraflow.client import JiraTicket

BRANCH_NAME_PATTERN = re.compile(r"[^a-zA-Z0-9\-_./]")


class GitError(Exception):
    """Raised when a git command fails."""


def format_branch_name(ticket: JiraTicket) -> str:
    """Build a branch name such as ``feature/KEY-summary_words``."""
    prefix = "bugfix/" if ticket.issue_type == "Bug" else "feature/"
    name = f"{prefix}{ticket.key}-{ticket.summary.lower()}".replace(" ", "_")
    return BRANCH_NAME_PATTERN.sub("", name)


def branch_name_error(value: str) -> str | None:
    """Return why *value* is not an acceptable branch name, or None."""
    if not value:
        return "branch name is required"
    if BRANCH_NAME_PATTERN.search(value):
        return "branch name can only contain letters, numbers, '-', '_', '/' and '.'"
    return None


def branch_exists(branch_name: str) -> bool:
    """Return whether a local branch called *branch_name* exists."""
    try:
        result = subprocess.run(
            ["git", "show-ref", "--verify", "--quiet", f"refs/heads/{branch_name}"],
            capture_output=True,
        )
    except OSError:
        return False
    return result.returncode == 0


def checkout_branch(branch_name: str) -> None:
    """Switch to *branch_name*, creating it if it does not exist."""
    if branch_exists(branch_name):
        cmd = ["git", "checkout", branch_name]
    else:
        cmd = ["git", "checkout", "-b", branch_name]
    try:
        result = subprocess.run(
            cmd, stdout=subprocess.PIPE, stderr=subprocess.STDOUT, text=True
        )
    except OSError as exc:
        raise GitError(
            f"failed to checkout branch {branch_name}: {exc}\n\nOutput: "
        ) from exc
    if result.returncode != 0:
        raise GitError(
            f"failed to checkout branch {branch_name}: exit status {result.returncode}"
            f"\n\nOutput: {result.stdout or ''}"
        )