#!/usr/bin/env python3
"""
replays - Config document and saved-run ("replay") store.

The config is a YAML document:

    repos:
      - name: owner/repo
        branches: [main, dev]
        replays:
          - nickname: staging-deploy
            repo: owner/repo
            branch: main
            workflow: Deploy
            inputs:
              environment: staging

Safety / fidelity
─────────────────
  - ruamel.yaml round-trip mode: comments, key order, quoting and unknown
    keys survive a load → save cycle
  - RepoConfig keeps the document it came from; save() merges the typed
    model back into a copy of it (append-only for replays)
  - .runr.bak backup, file lock, atomic temp-file write
"""

from __future__ import annotations

import copy
import logging
import os
import shutil
import tempfile
from dataclasses import dataclass, field, replace
from io import StringIO
from pathlib import Path
from typing import Any, List, Mapping, Optional, Union

from filelock import FileLock, Timeout as FileLockTimeout
from ruamel.yaml import YAML
from ruamel.yaml.comments import CommentedMap, CommentedSeq
from ruamel.yaml.error import YAMLError
from ruamel.yaml.util import load_yaml_guess_indent

from runr.config import candidate_paths
from runr.errors import ConfigNotFound, ConfigParseError, ConfigWriteError, RepoNotFound
from runr.inputs import as_text
from runr.invocation import RunTarget

log = logging.getLogger(__name__)

LOCK_TIMEOUT = 10

# (mapping, sequence, offset) for documents with no block sequence to go by
DEFAULT_INDENT = (2, 4, 2)


# ─────────────────────────────────────────────────────────────
# Model
# ─────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Replay:
    nickname: str
    repo: str
    branch: str
    workflow: str
    inputs: Mapping[str, str] = field(default_factory=dict)

    @classmethod
    def from_answers(cls, nickname: str, target: RunTarget,
                     answers: Mapping[str, object]) -> "Replay":
        """Snapshot a completed run; the answers are copied, not shared."""
        return cls(
            nickname=nickname,
            repo=target.repo,
            branch=target.branch,
            workflow=target.workflow,
            inputs={k: as_text(v) for k, v in answers.items()},
        )

    @property
    def target(self) -> RunTarget:
        return RunTarget(repo=self.repo, branch=self.branch, workflow=self.workflow)

    def to_node(self) -> CommentedMap:
        node = CommentedMap()
        node["nickname"] = self.nickname
        node["repo"] = self.repo
        node["branch"] = self.branch
        node["workflow"] = self.workflow
        inputs = CommentedMap()
        for k, v in self.inputs.items():
            inputs[k] = v
        node["inputs"] = inputs
        return node


@dataclass(frozen=True)
class RepoEntry:
    name: str
    branches: tuple = ()
    replays: tuple = ()


@dataclass(frozen=True)
class RepoConfig:
    repos: tuple = ()
    # Round-trip document this config was loaded from (None for a fresh one)
    document: Any = field(default=None, compare=False, repr=False)
    # Block indentation detected on load, reused by save
    indent: tuple = field(default=DEFAULT_INDENT, compare=False, repr=False)


# ─────────────────────────────────────────────────────────────
# Queries
# ─────────────────────────────────────────────────────────────

def get_repos(config: RepoConfig) -> List[str]:
    return sorted(entry.name for entry in config.repos)


def find_entry(config: RepoConfig, repo_name: str) -> Optional[RepoEntry]:
    for entry in config.repos:
        if entry.name == repo_name:
            return entry
    return None


def get_branches_from_repo(config: RepoConfig, repo_name: str) -> List[str]:
    """Configured branches for repo_name; [] when the repo is unknown."""
    entry = find_entry(config, repo_name)
    return list(entry.branches) if entry else []


def all_replays(config: RepoConfig) -> List[Replay]:
    return [replay for entry in config.repos for replay in entry.replays]


def find_replay(config: RepoConfig, nickname: str) -> Optional[Replay]:
    """
    Look up a replay by nickname.

    Nicknames are not unique; the most recently saved match wins and a
    warning is logged when it shadows older ones.
    """
    matches = [r for r in all_replays(config) if r.nickname == nickname]
    if not matches:
        return None
    if len(matches) > 1:
        log.warning(f"{len(matches)} replays are named '{nickname}' - using the most recent")
    return matches[-1]


# ─────────────────────────────────────────────────────────────
# Pure transform
# ─────────────────────────────────────────────────────────────

def append_replay(config: RepoConfig, repo_name: str, replay: Replay) -> RepoConfig:
    """
    Return a new config with replay appended to repo_name's history.

    When a name is listed twice, the first entry (the one lookups use) gets it.
    """
    entry = find_entry(config, repo_name)
    if entry is None:
        raise RepoNotFound(repo_name)
    repos = list(config.repos)
    index = repos.index(entry)
    repos[index] = replace(entry, replays=entry.replays + (replay,))
    return replace(config, repos=tuple(repos))


# ─────────────────────────────────────────────────────────────
# Load
# ─────────────────────────────────────────────────────────────

def _yaml(indent: tuple = DEFAULT_INDENT) -> YAML:
    mapping, sequence, offset = indent
    ry = YAML()
    ry.preserve_quotes = True
    ry.default_flow_style = False
    ry.width = 4096
    ry.indent(mapping=mapping, sequence=sequence, offset=offset)
    return ry


def _mapping_indent(text: str) -> Optional[int]:
    """Step between a key-only line and the first nested key under it."""
    key_column = None
    for line in text.splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue
        # Column of the key itself, past any "- " sequence marker
        column = len(line) - len(line.lstrip(" -"))
        if key_column is not None and column > key_column and not stripped.startswith("-"):
            return column - key_column
        key_column = column if stripped.endswith(":") else None
    return None


def guess_indent(text: str) -> tuple:
    """
    Detect (mapping, sequence, offset) of a block-style document so that a
    save writes it back the way it was written.
    """
    try:
        _, sequence, offset = load_yaml_guess_indent(text)
    except IndexError:
        # the guesser indexes past a bare "-" line; keep the default layout
        return DEFAULT_INDENT
    if sequence is None or offset is None:
        mapping = _mapping_indent(text) or DEFAULT_INDENT[0]
        return (mapping, DEFAULT_INDENT[1], DEFAULT_INDENT[2])
    mapping = _mapping_indent(text) or max(sequence - offset, 1)
    return (mapping, sequence, offset)


def _replay_from_node(node: Any, repo_name: str, where: str) -> Replay:
    if not isinstance(node, dict):
        raise ConfigParseError(f"{where} must be a mapping")
    nickname = node.get("nickname")
    workflow = node.get("workflow")
    if not nickname or not workflow:
        raise ConfigParseError(f"{where} needs both 'nickname' and 'workflow'")
    inputs = node.get("inputs") or {}
    if not isinstance(inputs, dict):
        raise ConfigParseError(f"{where}.inputs must be a mapping")
    return Replay(
        nickname=as_text(nickname),
        repo=as_text(node.get("repo") or repo_name),
        branch=as_text(node.get("branch")),
        workflow=as_text(workflow),
        inputs={str(k): as_text(v) for k, v in inputs.items()},
    )


def _entry_from_node(node: Any, index: int) -> RepoEntry:
    where = f"repos[{index}]"
    if not isinstance(node, dict) or not node.get("name"):
        raise ConfigParseError(f"{where} needs a 'name'")
    name = as_text(node["name"])

    branches = node.get("branches") or []
    if not isinstance(branches, list):
        raise ConfigParseError(f"{where}.branches must be a list")

    replays = node.get("replays") or []
    if not isinstance(replays, list):
        raise ConfigParseError(f"{where}.replays must be a list")

    return RepoEntry(
        name=name,
        branches=tuple(as_text(b) for b in branches),
        replays=tuple(
            _replay_from_node(r, name, f"{where}.replays[{i}]") for i, r in enumerate(replays)
        ),
    )


def from_document(doc: Any) -> RepoConfig:
    if doc is None:
        return RepoConfig(document=CommentedMap())
    if not isinstance(doc, dict):
        raise ConfigParseError("Config must be a mapping with a 'repos' list")
    repos = doc.get("repos") or []
    if not isinstance(repos, list):
        raise ConfigParseError("'repos' must be a list")
    return RepoConfig(
        repos=tuple(_entry_from_node(node, i) for i, node in enumerate(repos)),
        document=doc,
    )


def load(path: Union[str, Path]) -> RepoConfig:
    """Read and parse the config document at path."""
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        searched = ", ".join(str(p) for p in candidate_paths())
        raise ConfigNotFound(
            f"Config file not found: {path}",
            hint=f"Create one at one of: {searched}",
        )
    except OSError as e:
        raise ConfigParseError(f"Could not read {path}: {e}")

    try:
        indent = guess_indent(text)
        doc = _yaml(indent).load(text)
    except YAMLError as e:
        raise ConfigParseError(f"{path} is not valid YAML: {e}".splitlines()[0])

    config = replace(from_document(doc), indent=indent)
    log.debug(f"Config loaded from {path}: {len(config.repos)} repos")
    return config


# ─────────────────────────────────────────────────────────────
# Save  (merge → backup → lock → atomic write)
# ─────────────────────────────────────────────────────────────

def _new_repo_node(entry: RepoEntry) -> CommentedMap:
    node = CommentedMap()
    node["name"] = entry.name
    node["branches"] = CommentedSeq(entry.branches)
    return node


def to_document(config: RepoConfig) -> CommentedMap:
    """Merge the typed model into a copy of the loaded document."""
    doc = copy.deepcopy(config.document) if config.document is not None else CommentedMap()
    repos_node = doc.get("repos")
    if repos_node is None:
        repos_node = CommentedSeq()
        doc["repos"] = repos_node

    # config.repos lines up with repos_node by position; names may repeat
    loaded = len(repos_node)
    for index, entry in enumerate(config.repos):
        if index < loaded:
            node = repos_node[index]
        else:
            node = _new_repo_node(entry)
            repos_node.append(node)

        replays_node = node.get("replays")
        if not replays_node:
            # Entry predates replays (or holds `replays: []`) - migrate in place
            if not entry.replays:
                continue
            replays_node = CommentedSeq()
            node["replays"] = replays_node

        for replay in entry.replays[len(replays_node):]:
            replays_node.append(replay.to_node())
    return doc


def dumps(config: RepoConfig) -> str:
    buf = StringIO()
    _yaml(config.indent).dump(to_document(config), buf)
    return buf.getvalue()


def _atomic_write_text(path: Path, text: str) -> None:
    """Write text to path atomically (no partial-write corruption)."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_path = tempfile.mkstemp(dir=path.parent, suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            fh.write(text)
        os.replace(tmp_path, path)
    except BaseException:
        try:
            os.unlink(tmp_path)
        except OSError:
            pass
        raise


def _backup(path: Path) -> Path:
    bak = path.with_suffix(path.suffix + ".runr.bak")
    shutil.copy2(path, bak)
    return bak


def save(path: Union[str, Path], config: RepoConfig) -> None:
    """Persist config to path; raises ConfigWriteError on any failure."""
    path = Path(path)
    text = dumps(config)
    try:
        if path.exists():
            _backup(path)
        with FileLock(str(path) + ".runr.lock", timeout=LOCK_TIMEOUT):
            _atomic_write_text(path, text)
    except FileLockTimeout:
        raise ConfigWriteError(
            f"Could not acquire lock on {path.name}",
            hint="Is another runr process running?",
        )
    except OSError as e:
        raise ConfigWriteError(f"Could not write {path}: {e.strerror or e}")
    log.debug(f"Config saved to {path}")
