#!/usr/bin/env python3
"""
inputs - workflow_dispatch input normalizer.

Turns the loosely-typed workflow definition printed by
`gh workflow view --yaml` into a flat, ordered list of
WorkflowInputDescriptor. All tolerance for the raw document lives here:

  - the trigger key may be "on", True (YAML 1.1 reads `on` as a boolean),
    or "true" (the same key after a JSON round trip)
  - the trigger block may be a string, a list, or a mapping
  - missing type → string, missing default → "", missing required → False

Downstream code only ever sees WorkflowInputDescriptor.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from runr.errors import InvalidInputDeclaration, UnrecognizedInputType, WorkflowParseError

log = logging.getLogger(__name__)

TRIGGER_KEYS = ("on", True, "true")
DISPATCH_EVENT = "workflow_dispatch"


class InputKind(str, Enum):
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    CHOICE = "choice"
    ENVIRONMENT = "environment"


@dataclass(frozen=True)
class WorkflowInputDescriptor:
    name: str
    kind: InputKind
    default: str = ""
    choices: Optional[tuple] = None
    required: bool = False
    description: str = ""


def as_text(value: Any) -> str:
    """Stringify a YAML scalar the way GitHub spells it."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def parse_workflow_yaml(text: str) -> dict:
    """Parse `gh workflow view --yaml` output into a plain mapping."""
    try:
        data = YAML(typ="safe", pure=True).load(text)
    except YAMLError as e:
        raise WorkflowParseError(f"Workflow definition is not valid YAML: {e}")
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise WorkflowParseError(
            f"Workflow definition must be a mapping, got {type(data).__name__}"
        )
    return data


def _trigger_block(definition: dict) -> Any:
    for key in TRIGGER_KEYS:
        if key in definition:
            return definition[key]
    return None


def declared_inputs(definition: dict) -> dict:
    """Return the raw `workflow_dispatch.inputs` mapping, or {}."""
    triggers = _trigger_block(definition)
    # A string or list trigger (`on: workflow_dispatch`) cannot carry inputs
    if not isinstance(triggers, dict):
        return {}
    dispatch = triggers.get(DISPATCH_EVENT)
    if not isinstance(dispatch, dict):
        return {}
    inputs = dispatch.get("inputs")
    if not isinstance(inputs, dict):
        return {}
    return inputs


def _resolve_kind(name: str, declaration: dict) -> InputKind:
    tag = declaration.get("type", InputKind.STRING.value)
    try:
        return InputKind(tag)
    except ValueError:
        raise UnrecognizedInputType(name, tag)


def to_descriptor(name: str, declaration: Any) -> WorkflowInputDescriptor:
    """Build one descriptor; raises InvalidInputDeclaration on bad shapes."""
    if declaration is None:
        declaration = {}
    if not isinstance(declaration, dict):
        raise InvalidInputDeclaration(name, "declaration must be a mapping")

    kind = _resolve_kind(name, declaration)

    choices = None
    if kind is InputKind.CHOICE:
        options = declaration.get("options")
        if not isinstance(options, list) or not options:
            raise InvalidInputDeclaration(name, "choice input declares no options")
        choices = tuple(as_text(o) for o in options)

    return WorkflowInputDescriptor(
        name=str(name),
        kind=kind,
        default=as_text(declaration.get("default")),
        choices=choices,
        required=bool(declaration.get("required", False)),
        description=as_text(declaration.get("description")),
    )


def normalize(definition: dict) -> list:
    """
    Flatten a workflow definition into descriptors, in declaration order.

    Zero declared inputs is a normal outcome and yields []. An input that
    cannot be prompted for is reported and left out; the rest still come back.
    """
    descriptors = []
    for name, declaration in declared_inputs(definition).items():
        try:
            descriptors.append(to_descriptor(name, declaration))
        except InvalidInputDeclaration as e:
            log.error(f"{e} - input skipped")
    return descriptors


def normalize_yaml(text: str) -> list:
    return normalize(parse_workflow_yaml(text))
