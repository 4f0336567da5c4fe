"""Reading the per-repository configuration file."""

from __future__ import annotations

import json
import subprocess
from dataclasses import dataclass
from pathlib import Path

CONFIG_FILENAME = "jira-branch.config.json"


@dataclass(frozen=True)
class JiraBranchConfig:
    """Settings read from the repository's configuration file."""

    project_key: str = ""


def get_git_root() -> str:
    """Return the top-level directory of the current git repository."""
    result = subprocess.run(
        ["git", "rev-parse", "--show-toplevel"],
        capture_output=True,
        text=True,
        check=True,
    )
    return result.stdout.strip()


def read_file_from_git_root(filename: str) -> bytes:
    """Read *filename* relative to the repository root."""
    return (Path(get_git_root()) / filename).read_bytes()


def read_config_file() -> JiraBranchConfig:
    """Load the configuration file from the repository root.

    Raises an ``OSError`` or ``subprocess.CalledProcessError`` when the file
    cannot be found and ``ValueError`` when its contents are malformed.
    """
    data = json.loads(read_file_from_git_root(CONFIG_FILENAME))
    if not isinstance(data, dict):
        raise ValueError("configuration must be a JSON object")
    project_key = data.get("projectKey")
    if project_key is None:
        project_key = ""
    if not isinstance(project_key, str):
        raise ValueError("projectKey must be a string")
    return JiraBranchConfig(project_key=project_key)