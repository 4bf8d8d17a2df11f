#!/usr/bin/env python3
"""
gh - Thin wrapper over the GitHub CLI.

Every call shells out to `gh`, waits for it to finish, and either returns
its stdout or raises GHError. No timeouts are applied: a hung gh hangs
the session.
"""

from __future__ import annotations

import json
import logging
import subprocess
from dataclasses import dataclass
from typing import Any, List

from runr.errors import AuthCheckFailed, GHError

log = logging.getLogger(__name__)

ACTIVE_STATE = "active"


@dataclass(frozen=True)
class Workflow:
    name: str
    path: str
    id: int
    state: str


def _gh(*args: str, check: bool = True) -> str:
    """Run a `gh` command; return stdout or raise GHError."""
    log.debug("gh " + " ".join(args))
    try:
        r = subprocess.run(
            ["gh", *args],
            capture_output=True, text=True, check=False,
        )
    except FileNotFoundError:
        raise GHError("GitHub CLI ('gh') not found", hint="Install it from https://cli.github.com")
    if check and r.returncode != 0:
        message = r.stderr.strip() or r.stdout.strip() or f"gh exited with status {r.returncode}"
        raise GHError(message.splitlines()[0])
    return r.stdout.strip()


def _gh_json(*args: str) -> Any:
    raw = _gh(*args)
    if not raw:
        return []
    try:
        return json.loads(raw)
    except json.JSONDecodeError as e:
        raise GHError(f"gh JSON parse error: {e}")


def check_auth() -> str:
    """Return gh's status text, or raise AuthCheckFailed when logged out."""
    try:
        r = subprocess.run(["gh", "auth", "status"], capture_output=True, text=True, check=False)
    except FileNotFoundError:
        raise GHError("GitHub CLI ('gh') not found", hint="Install it from https://cli.github.com")
    # gh < 2.40 prints status on stderr
    output = (r.stdout + r.stderr).strip()
    if r.returncode != 0:
        raise AuthCheckFailed("You are not logged in to GitHub")
    return output


def list_workflows(repo: str) -> List[Workflow]:
    data = _gh_json("workflow", "list", "-R", repo, "--all", "--json", "name,path,id,state")
    return [
        Workflow(name=w.get("name", ""), path=w.get("path", ""),
                 id=w.get("id", 0), state=w.get("state", ""))
        for w in data
    ]


def filter_active_workflows(workflows: List[Workflow]) -> List[Workflow]:
    """Keep workflows whose state is 'active', preserving order."""
    return [w for w in workflows if w.state == ACTIVE_STATE]


def view_workflow_yaml(workflow_name: str, repo: str, branch: str) -> str:
    return _gh("workflow", "view", workflow_name, "-R", repo, "--ref", branch, "--yaml")


def run_workflow(args: List[str]) -> str:
    """Run the assembled `gh workflow run ...` arguments; return stdout."""
    return _gh(*args)


def open_in_browser(workflow_name: str, repo: str) -> None:
    _gh("workflow", "view", workflow_name, "-R", repo, "--web")


def actions_url(repo: str) -> str:
    return f"https://github.com/{repo}/actions"
