"""Tests for the gh workflow run argument assembler."""

import pytest

from runr.invocation import (
    RunTarget,
    build_args,
    build_args_for_target,
    build_summary,
    build_summary_for_target,
)


def test_build_args_with_inputs():
    answers = {"environment": "staging", "version": "2.0.0", "debug": "true"}
    assert build_args("Deploy", "owner/repo", "main", answers) == [
        "workflow", "run", "Deploy", "-R", "owner/repo", "--ref", "main",
        "-f", "environment=staging",
        "-f", "version=2.0.0",
        "-f", "debug=true",
    ]


@pytest.mark.parametrize("workflow,repo,branch", [
    ("Deploy", "owner/repo", "main"),
    ("CI Pipeline", "org/service", "feature/x"),
])
def test_build_args_without_inputs(workflow, repo, branch):
    assert build_args(workflow, repo, branch, {}) == [
        "workflow", "run", workflow, "-R", repo, "--ref", branch,
    ]


def test_values_keep_their_text():
    args = build_args("Deploy", "owner/repo", "main", {"message": "a=b c", "empty": ""})
    assert args[-4:] == ["-f", "message=a=b c", "-f", "empty="]


def test_build_summary():
    summary = build_summary("Deploy", "owner/repo", "main",
                            {"environment": "staging", "debug": "true"})
    assert summary == "\n".join([
        "Running Workflow : Deploy",
        "Repo             : owner/repo",
        "Branch           : main",
        "",
        "Inputs :",
        "  environment     : staging",
        "  debug           : true",
    ])


def test_build_summary_long_names_are_not_truncated():
    summary = build_summary("Deploy", "owner/repo", "main", {"a_very_long_input_name": "x"})
    assert summary.splitlines()[-1] == "  a_very_long_input_name : x"


def test_build_summary_without_inputs():
    assert build_summary("Deploy", "owner/repo", "main", {}).splitlines()[-1] == "Inputs :"


def test_target_helpers():
    target = RunTarget(repo="owner/repo", branch="main", workflow="Deploy")
    answers = {"environment": "dev"}
    assert build_args_for_target(target, answers) == build_args("Deploy", "owner/repo", "main", answers)
    assert build_summary_for_target(target, answers) == build_summary("Deploy", "owner/repo", "main", answers)
