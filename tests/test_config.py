import json
import subprocess

import pytest

from jiraflow.config import (
    JiraBranchConfig,
    get_git_root,
    read_config_file,
    read_file_from_git_root,
)


@pytest.fixture
def repo(tmp_path, monkeypatch):
    calls = []

    def fake_run(cmd, **kwargs):
        calls.append(cmd)
        return subprocess.CompletedProcess(cmd, 0, stdout=f"{tmp_path}\n", stderr="")

    monkeypatch.setattr(subprocess, "run", fake_run)
    return tmp_path, calls


def test_git_root_is_stripped(repo):
    root, calls = repo
    assert get_git_root() == str(root)
    assert calls == [["git", "rev-parse", "--show-toplevel"]]


def test_read_file_from_root(repo):
    root, _ = repo
    (root / "notes.txt").write_bytes(b"hello")
    assert read_file_from_git_root("notes.txt") == b"hello"


def test_read_config(repo):
    root, _ = repo
    (root / "jira-branch.config.json").write_text(json.dumps({"projectKey": "ABC"}))
    assert read_config_file() == JiraBranchConfig(project_key="ABC")


def test_missing_key_gives_empty_project(repo):
    root, _ = repo
    (root / "jira-branch.config.json").write_text("{}")
    assert read_config_file().project_key == ""


def test_missing_file_raises(repo):
    with pytest.raises(FileNotFoundError):
        read_config_file()


def test_invalid_json_raises(repo):
    root, _ = repo
    (root / "jira-branch.config.json").write_text("{not json")
    with pytest.raises(ValueError):
        read_config_file()


def test_wrong_type_raises(repo):
    root, _ = repo
    (root / "jira-branch.config.json").write_text(json.dumps({"projectKey": 5}))
    with pytest.raises(ValueError):
        read_config_file()


def test_outside_repository_raises(monkeypatch):
    def fake_run(cmd, **kwargs):
        raise subprocess.CalledProcessError(128, cmd)

    monkeypatch.setattr(subprocess, "run", fake_run)
    with pytest.raises(subprocess.CalledProcessError):
        read_config_file()