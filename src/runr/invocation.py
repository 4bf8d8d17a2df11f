"""
invocation - Assemble the `gh workflow run` command line and its summary.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Mapping

LABEL_WIDTH = 15


@dataclass(frozen=True)
class RunTarget:
    repo: str
    branch: str
    workflow: str


def build_args(workflow_name: str, repo: str, branch: str,
               answers: Mapping[str, object]) -> List[str]:
    """gh arguments: fixed prefix, then one `-f key=value` pair per answer."""
    args = ["workflow", "run", workflow_name, "-R", repo, "--ref", branch]
    for key, value in answers.items():
        args += ["-f", f"{key}={value}"]
    return args


def build_summary(workflow_name: str, repo: str, branch: str,
                  answers: Mapping[str, object]) -> str:
    """Human-readable confirmation text; never parsed back."""
    lines = [
        f"Running Workflow : {workflow_name}",
        f"Repo             : {repo}",
        f"Branch           : {branch}",
        "",
        "Inputs :",
    ]
    lines += [f"  {key:<{LABEL_WIDTH}} : {value}" for key, value in answers.items()]
    return "\n".join(lines)


def build_args_for_target(target: RunTarget, answers: Mapping[str, object]) -> List[str]:
    return build_args(target.workflow, target.repo, target.branch, answers)


def build_summary_for_target(target: RunTarget, answers: Mapping[str, object]) -> str:
    return build_summary(target.workflow, target.repo, target.branch, answers)
