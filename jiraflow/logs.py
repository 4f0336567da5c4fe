"""File logging for the application."""

from __future__ import annotations

import dataclasses
import json
import logging
import os
from pathlib import Path

import platformdirs

_APP_NAME = "jira-branch"
_LOGGER = logging.getLogger("jiraflow")
_TRACE = 5


def _is_dev() -> bool:
    return os.environ.get("DEV") == "true"


def log_file_path() -> Path:
    """Return the log file path, creating its directory when needed."""
    if _is_dev():
        return Path("app.log")
    base = Path(platformdirs.user_data_dir(_APP_NAME, appauthor=False))
    base.mkdir(parents=True, exist_ok=True)
    return base / "app.log"


def init_logging() -> Path:
    """Send the package's log records to the log file and return its path."""
    path = log_file_path()
    handler = logging.FileHandler(path, mode="a", encoding="utf-8")
    handler.setFormatter(
        logging.Formatter("%(asctime)s %(levelname)s %(message)s", datefmt="%H:%M:%S")
    )
    for old in list(_LOGGER.handlers):
        _LOGGER.removeHandler(old)
        old.close()
    _LOGGER.addHandler(handler)
    _LOGGER.setLevel(_TRACE if _is_dev() else logging.DEBUG)
    return path


def _plain(value):
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return dataclasses.asdict(value)
    raise TypeError(f"{type(value).__name__} is not JSON serializable")


def log_object(obj, msg: str) -> None:
    """Log *obj* as indented JSON under the heading *msg*."""
    try:
        text = json.dumps(obj, indent=2, default=_plain, ensure_ascii=False)
    except (TypeError, ValueError) as exc:
        _LOGGER.error("Failed to marshal object: %s", exc)
        return
    _LOGGER.info("%s:\n%s", msg, text)