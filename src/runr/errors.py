"""
errors - Exception taxonomy for runr.

Every user-visible failure is a RunrError carrying a one-line message and an
optional remediation hint. Cancellation is not an exception; see
runr.prompts.CANCEL.
"""

from __future__ import annotations

from typing import Optional


class RunrError(Exception):
    """Base class for reportable runr failures."""

    hint: str = ""

    def __init__(self, message: str, hint: Optional[str] = None):
        super().__init__(message)
        if hint is not None:
            self.hint = hint


class GHError(RunrError):
    """The gh CLI exited non-zero or could not be started."""


class AuthCheckFailed(RunrError):
    hint = "Run: gh auth login"


class ConfigNotFound(RunrError):
    pass


class ConfigParseError(RunrError):
    pass


class ConfigWriteError(RunrError):
    pass


class RepoNotFound(RunrError):
    """A replay targets a repository that has no entry in the config."""

    def __init__(self, repo_name: str):
        super().__init__(
            f"Repository '{repo_name}' is not in the config",
            hint="Add it under 'repos:' in your config.yml to save replays for it",
        )
        self.repo_name = repo_name


class WorkflowParseError(RunrError):
    pass


class InvalidInputDeclaration(RunrError):
    """A workflow_dispatch input is declared in a shape runr cannot prompt for."""

    def __init__(self, input_name: str, reason: str):
        super().__init__(f"Input '{input_name}': {reason}")
        self.input_name = input_name


class UnrecognizedInputType(InvalidInputDeclaration):
    def __init__(self, input_name: str, type_tag: object):
        super().__init__(input_name, f"unrecognized input type {type_tag!r}")
        self.type_tag = type_tag


class NoActiveWorkflows(RunrError):
    def __init__(self, repo_name: str):
        super().__init__(
            f"No active workflows found in {repo_name}",
            hint="Enable a workflow in the repository's Actions tab",
        )
