import logging
from dataclasses import dataclass
from pathlib import Path

import pytest

from jiraflow.logs import init_logging, log_file_path, log_object


@pytest.fixture(autouse=True)
def clean_logger():
    yield
    logger = logging.getLogger("jiraflow")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)


def test_dev_path(monkeypatch):
    monkeypatch.setenv("DEV", "true")
    assert log_file_path() == Path("app.log")


def test_user_path_directory_created(tmp_path, monkeypatch):
    monkeypatch.delenv("DEV", raising=False)
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    monkeypatch.setenv("LOCALAPPDATA", str(tmp_path / "local"))
    path = log_file_path()
    assert path.name == "app.log"
    assert path.parent.name == "jira-branch"
    assert path.parent.is_dir()


def test_init_logging_writes_file(tmp_path, monkeypatch):
    monkeypatch.setenv("DEV", "true")
    monkeypatch.chdir(tmp_path)
    path = init_logging()
    logging.getLogger("jiraflow").info("Starting application")
    for handler in logging.getLogger("jiraflow").handlers:
        handler.flush()
    assert "Starting application" in (tmp_path / path).read_text(encoding="utf-8")


def test_init_logging_twice_keeps_one_handler(tmp_path, monkeypatch):
    monkeypatch.setenv("DEV", "true")
    monkeypatch.chdir(tmp_path)
    first = init_logging()
    second = init_logging()
    assert Path(first).name == "app.log"
    assert Path(second) == Path(first)
    assert len(logging.getLogger("jiraflow").handlers) == 1


def test_log_object_pretty_json(caplog):
    caplog.set_level(logging.INFO, logger="jiraflow")
    log_object({"a": 1}, "obj")
    assert caplog.records[-1].getMessage() == 'obj:\n{\n  "a": 1\n}'


def test_log_object_dataclass(caplog):
    @dataclass
    class Point:
        x: int

    caplog.set_level(logging.INFO, logger="jiraflow")
    log_object(Point(x=3), "point")
    assert '"x": 3' in caplog.records[-1].getMessage()


def test_log_object_unserializable(caplog):
    caplog.set_level(logging.INFO, logger="jiraflow")
    log_object(object(), "thing")
    record = caplog.records[-1]
    assert record.levelno == logging.ERROR
    assert "Failed to marshal object" in record.getMessage()