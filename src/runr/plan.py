#!/usr/bin/env python3
"""
plan - Prompt plan builder.

Maps each WorkflowInputDescriptor to a declarative PromptSpec: which widget,
which options, which initial value. Nothing here talks to the terminal;
runr.prompts executes the plan.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict

from runr.inputs import InputKind, WorkflowInputDescriptor

log = logging.getLogger(__name__)

BOOLEAN_OPTIONS = ("true", "false")


class Widget(str, Enum):
    TEXT = "text"
    SELECT = "select"


@dataclass(frozen=True)
class PromptSpec:
    name: str
    widget: Widget
    message: str
    initial: str = ""
    options: tuple = ()
    placeholder: str = ""
    required: bool = False


def _message(d: WorkflowInputDescriptor) -> str:
    if d.description:
        return f"Input: {d.name}  ({d.description})"
    return f"Input: {d.name}"


def _placeholder(d: WorkflowInputDescriptor) -> str:
    return "required" if d.required else "optional"


def _initial_option(initial: str, options: tuple) -> str:
    return initial if initial in options else options[0]


def _text_prompt(d: WorkflowInputDescriptor) -> PromptSpec:
    return PromptSpec(
        name=d.name,
        widget=Widget.TEXT,
        message=_message(d),
        initial=d.default,
        placeholder=_placeholder(d),
        required=d.required,
    )


def _boolean_prompt(d: WorkflowInputDescriptor) -> PromptSpec:
    return PromptSpec(
        name=d.name,
        widget=Widget.SELECT,
        message=_message(d),
        initial=_initial_option(d.default, BOOLEAN_OPTIONS),
        options=BOOLEAN_OPTIONS,
        placeholder=_placeholder(d),
        required=d.required,
    )


def _choice_prompt(d: WorkflowInputDescriptor) -> PromptSpec:
    options = tuple(d.choices)
    return PromptSpec(
        name=d.name,
        widget=Widget.SELECT,
        message=_message(d),
        initial=_initial_option(d.default, options),
        options=options,
        placeholder=_placeholder(d),
        required=d.required,
    )


PROMPT_BUILDERS: Dict[InputKind, Callable[[WorkflowInputDescriptor], PromptSpec]] = {
    InputKind.STRING: _text_prompt,
    InputKind.NUMBER: _text_prompt,
    InputKind.ENVIRONMENT: _text_prompt,
    InputKind.BOOLEAN: _boolean_prompt,
    InputKind.CHOICE: _choice_prompt,
}


def check_builders(builders: Dict[InputKind, Callable]) -> None:
    """Every input kind must map to a widget."""
    missing = set(InputKind) - set(builders)
    if missing:
        raise TypeError(f"No prompt builder for input kinds: {sorted(k.value for k in missing)}")


check_builders(PROMPT_BUILDERS)


def build_plan(descriptors: list) -> Dict[str, PromptSpec]:
    """Return {input name: PromptSpec}, in descriptor order."""
    plan: Dict[str, PromptSpec] = {}
    for d in descriptors:
        builder = PROMPT_BUILDERS.get(d.kind)
        if builder is None:
            log.error(f"Input '{d.name}' has unsupported kind {d.kind!r} - input skipped")
            continue
        plan[d.name] = builder(d)
    return plan
