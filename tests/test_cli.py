"""Tests for the runr command-line entry point."""

import pytest

from runr import cli
from runr.errors import AuthCheckFailed, ConfigNotFound
from runr.session import SessionState


CONFIG = """\
repos:
  - name: owner/repo
    branches: [main]
    replays:
      - nickname: nightly
        repo: owner/repo
        branch: main
        workflow: Deploy
        inputs:
          environment: prod
"""


@pytest.fixture(autouse=True)
def quiet_logging(monkeypatch):
    monkeypatch.setattr(cli, "setup_logging", lambda **kwargs: None)


class StubSession:
    """Replaces WorkflowSession; returns or raises whatever the test sets."""

    outcome = SessionState.DONE
    created = []

    def __init__(self, config_path, replay_nickname=None):
        StubSession.created.append((config_path, replay_nickname))

    def run(self):
        if isinstance(self.outcome, Exception):
            raise self.outcome
        return self.outcome


@pytest.fixture
def stub_session(monkeypatch):
    StubSession.created = []
    StubSession.outcome = SessionState.DONE
    monkeypatch.setattr(cli, "WorkflowSession", StubSession)
    return StubSession


def test_done_exits_zero(stub_session, tmp_path):
    path = tmp_path / "config.yml"
    assert cli.main(["--config", str(path), "--replay", "nightly"]) == cli.EXIT_OK
    assert stub_session.created == [(path, "nightly")]


def test_cancel_exits_non_zero(stub_session):
    stub_session.outcome = SessionState.CANCELLED
    assert cli.main([]) == cli.EXIT_CANCELLED


@pytest.mark.parametrize("error", [
    AuthCheckFailed("You are not logged in to GitHub"),
    ConfigNotFound("Config file not found: config.yml", hint="Create one"),
])
def test_errors_are_one_line_and_exit_one(stub_session, capsys, error):
    stub_session.outcome = error
    assert cli.main([]) == cli.EXIT_ERROR

    err = capsys.readouterr().err
    assert str(error) in err
    assert error.hint in err
    assert "Traceback" not in err


def test_list_replays(tmp_path, capsys):
    path = tmp_path / "config.yml"
    path.write_text(CONFIG)

    assert cli.main(["--config", str(path), "--list-replays"]) == cli.EXIT_OK
    out = capsys.readouterr().out
    assert "nightly" in out
    assert "Deploy" in out
    assert "environment" in out


def test_list_replays_missing_config(tmp_path, capsys):
    assert cli.main(["--config", str(tmp_path / "missing.yml"), "--list-replays"]) == cli.EXIT_ERROR
    assert "Config file not found" in capsys.readouterr().err
