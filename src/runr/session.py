#!/usr/bin/env python3
"""
session - The guided workflow-dispatch wizard.

  INIT → TARGET_SELECTED → INPUTS_PLANNED → ANSWERS_COLLECTED
       → CONFIRMED → REPLAY_OFFERED → DONE

A CANCEL from any prompt moves straight to CANCELLED; nothing after that
point runs. A workflow run that was already triggered stays triggered.

Collaborators are passed in: `gh` (runr.gh by default) talks to GitHub,
`prompts` (runr.prompts by default) talks to the operator.
"""

from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional, Union

from runr import gh as default_gh
from runr import prompts as default_prompts
from runr import replays
from runr.errors import ConfigWriteError, GHError, NoActiveWorkflows, RepoNotFound, RunrError
from runr.gh import actions_url, filter_active_workflows
from runr.inputs import normalize_yaml
from runr.invocation import RunTarget, build_args_for_target, build_summary_for_target
from runr.plan import build_plan
from runr.prompts import CANCEL, is_cancel
from runr.ui import bold, green, grey, header, yellow

log = logging.getLogger(__name__)

NEW_RUN = "new"
REPLAY_RUN = "replay"


class SessionState(str, Enum):
    INIT = "init"
    TARGET_SELECTED = "target_selected"
    INPUTS_PLANNED = "inputs_planned"
    ANSWERS_COLLECTED = "answers_collected"
    CONFIRMED = "confirmed"
    REPLAY_OFFERED = "replay_offered"
    DONE = "done"
    CANCELLED = "cancelled"


class WorkflowSession:
    """One wizard run: owns the loaded config and the collected answers."""

    def __init__(
        self,
        config_path: Union[str, Path],
        gh: Any = None,
        prompts: Any = None,
        replay_nickname: Optional[str] = None,
    ):
        self.config_path = Path(config_path)
        self.gh = gh or default_gh
        self.prompts = prompts or default_prompts
        self.replay_nickname = replay_nickname

        self.state = SessionState.INIT
        self.config: Optional[replays.RepoConfig] = None
        self.target: Optional[RunTarget] = None
        self.plan: Dict[str, Any] = {}
        self.answers: Dict[str, Any] = {}
        self.source_replay: Optional[replays.Replay] = None
        self.run_output = ""
        self.run_triggered = False
        self.replay_saved = False

    # ── driver ───────────────────────────────────────────────

    def run(self) -> SessionState:
        header("⚡  runr", "GitHub Actions workflow dispatch")

        self.check_login()
        self.config = replays.load(self.config_path)
        log.info(f"Config loaded from {self.config_path}")

        if is_cancel(self.select_target()):
            return self.cancel()

        if self.source_replay is None:
            self.plan_inputs()
        else:
            self.state = SessionState.INPUTS_PLANNED

        if is_cancel(self.collect_answers()):
            return self.cancel()

        confirmed = self.confirm_and_run()
        if is_cancel(confirmed):
            return self.cancel()
        if not confirmed:
            print(grey("\n  Run skipped. Nothing was triggered.\n"))
            self.state = SessionState.DONE
            return self.state

        if is_cancel(self.offer_replay_save()):
            return self.cancel()

        if is_cancel(self.offer_web_view()):
            return self.cancel()

        print(f"\n  {green('✓')}  Done! View your workflow in the web ui: "
              f"{bold(actions_url(self.target.repo))}\n")
        self.state = SessionState.DONE
        return self.state

    def cancel(self) -> SessionState:
        print(yellow("\n  Operation cancelled.\n"))
        self.state = SessionState.CANCELLED
        return self.state

    # ── stages ───────────────────────────────────────────────

    def check_login(self) -> None:
        """Hard stop when gh is not authenticated (AuthCheckFailed propagates)."""
        self.gh.check_auth()
        log.info("Logged in to GitHub")

    def select_target(self):
        if self.replay_nickname:
            replay = replays.find_replay(self.config, self.replay_nickname)
            if replay is None:
                raise RunrError(
                    f"No replay named '{self.replay_nickname}'",
                    hint="List saved replays with: runr --list-replays",
                )
            return self._use_replay(replay)

        saved = replays.all_replays(self.config)
        if saved:
            mode = self.prompts.select("What do you want to do?", [
                (NEW_RUN, "Start a new workflow run", ""),
                (REPLAY_RUN, "Replay a saved run", f"{len(saved)} saved"),
            ])
            if is_cancel(mode):
                return CANCEL
            if mode == REPLAY_RUN:
                return self._pick_replay(saved)

        return self._select_new_target()

    def _pick_replay(self, saved: list):
        options = [
            (i, r.nickname, f"{r.workflow} · {r.repo}@{r.branch}")
            for i, r in enumerate(saved)
        ]
        idx = self.prompts.select("Pick a replay:", options)
        if is_cancel(idx):
            return CANCEL
        return self._use_replay(saved[idx])

    def _use_replay(self, replay: replays.Replay) -> RunTarget:
        self.source_replay = replay
        self.target = replay.target
        self.state = SessionState.TARGET_SELECTED
        log.info(f"Replaying '{replay.nickname}'")
        return self.target

    def _select_new_target(self):
        repos = replays.get_repos(self.config)
        if not repos:
            raise RunrError(
                f"No repositories configured in {self.config_path}",
                hint="Add at least one entry under 'repos:'",
            )
        repo = self.prompts.select("Pick a repository:", repos)
        if is_cancel(repo):
            return CANCEL

        branches = replays.get_branches_from_repo(self.config, repo)
        if branches:
            branch = self.prompts.select("Pick a branch:", branches)
        else:
            log.warning(f"No branches configured for {repo}")
            branch = self.prompts.text("Branch", initial="main", required=True)
        if is_cancel(branch):
            return CANCEL

        workflows = filter_active_workflows(self.gh.list_workflows(repo))
        if not workflows:
            raise NoActiveWorkflows(repo)
        workflow_id = self.prompts.select(
            "Pick a workflow:",
            [(w.id, w.name, w.path) for w in workflows],
        )
        if is_cancel(workflow_id):
            return CANCEL
        workflow = next(w for w in workflows if w.id == workflow_id)

        self.target = RunTarget(repo=repo, branch=branch, workflow=workflow.name)
        self.state = SessionState.TARGET_SELECTED
        log.info(f"Selected workflow: {workflow.name} ({repo}@{branch})")
        return self.target

    def plan_inputs(self) -> Dict[str, Any]:
        definition = self.gh.view_workflow_yaml(
            self.target.workflow, self.target.repo, self.target.branch
        )
        self.plan = build_plan(normalize_yaml(definition))
        if not self.plan:
            log.warning("Workflow has no inputs defined")
        self.state = SessionState.INPUTS_PLANNED
        return self.plan

    def collect_answers(self):
        if self.source_replay is not None:
            answers = dict(self.source_replay.inputs)
        elif self.plan:
            answers = self.prompts.group(self.plan)
            if is_cancel(answers):
                return CANCEL
        else:
            answers = {}
        self.answers = answers
        self.state = SessionState.ANSWERS_COLLECTED
        return self.answers

    def confirm_and_run(self):
        """Show the summary, ask, then trigger. Returns True/False or CANCEL."""
        summary = build_summary_for_target(self.target, self.answers)
        print()
        for line in summary.splitlines():
            print(f"  {line}")
        print()

        ok = self.prompts.confirm("Do you want to continue?")
        if is_cancel(ok):
            return CANCEL
        self.state = SessionState.CONFIRMED
        if not ok:
            return False

        self.run_output = self.gh.run_workflow(build_args_for_target(self.target, self.answers))
        self.run_triggered = True
        log.info(f"Triggered {self.target.workflow} on {self.target.branch}")
        if self.run_output:
            log.info(self.run_output)
        return True

    def offer_replay_save(self):
        # A replayed run is already saved
        if self.source_replay is not None:
            self.state = SessionState.REPLAY_OFFERED
            return False

        wants = self.prompts.confirm("Save this run as a replay?", default=False)
        if is_cancel(wants):
            return CANCEL
        if wants:
            nickname = self._ask_nickname()
            if is_cancel(nickname):
                return CANCEL
            self._save_replay(nickname)
        self.state = SessionState.REPLAY_OFFERED
        return self.replay_saved

    def _ask_nickname(self):
        existing = {r.nickname for r in replays.all_replays(self.config)}
        while True:
            nickname = self.prompts.text("Replay nickname", required=True)
            if is_cancel(nickname) or nickname not in existing:
                return nickname
            shadow = self.prompts.confirm(
                f"A replay named '{nickname}' already exists; the new one will "
                f"take precedence. Save anyway?",
                default=False,
            )
            if is_cancel(shadow):
                return CANCEL
            if shadow:
                return nickname

    def _save_replay(self, nickname: str) -> None:
        replay = replays.Replay.from_answers(nickname, self.target, self.answers)
        try:
            updated = replays.append_replay(self.config, self.target.repo, replay)
            replays.save(self.config_path, updated)
        except (RepoNotFound, ConfigWriteError) as e:
            log.error(f"Replay not saved: {e}")
            if e.hint:
                log.error(e.hint)
            return
        self.config = updated
        self.replay_saved = True
        log.info(f"Saved replay '{nickname}' to {self.config_path}")

    def offer_web_view(self):
        wants = self.prompts.confirm("Do you want to open the workflow in the web ui?",
                                     default=False)
        if is_cancel(wants):
            return CANCEL
        if wants:
            try:
                self.gh.open_in_browser(self.target.workflow, self.target.repo)
            except GHError as e:
                log.error(f"Could not open the web ui: {e}")
        return wants
