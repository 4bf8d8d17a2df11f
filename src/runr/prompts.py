#!/usr/bin/env python3
"""
prompts - Interactive prompt widgets.

Every widget returns either the answer or CANCEL. Ctrl+C and EOF never
escape as exceptions; callers check is_cancel() and unwind themselves.
"""

from __future__ import annotations

from typing import Any, Dict, Sequence

from runr.plan import PromptSpec, Widget
from runr.ui import bold, cyan, grey, red


class Cancelled:
    """Type of the CANCEL sentinel."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "CANCEL"

    def __bool__(self) -> bool:
        return False


CANCEL = Cancelled()

# Typed at a text prompt to answer "" instead of the default
CLEAR = "-"


def is_cancel(value: Any) -> bool:
    return value is CANCEL


def _read(prompt: str):
    try:
        return input(prompt)
    except (KeyboardInterrupt, EOFError):
        print()
        return CANCEL


def _as_option(option: Any) -> tuple:
    """Normalise an option to (value, label, hint)."""
    if isinstance(option, tuple):
        value = option[0]
        label = option[1] if len(option) > 1 else str(value)
        hint = option[2] if len(option) > 2 else ""
        return value, label, hint
    return option, str(option), ""


def text(message: str, initial: str = "", placeholder: str = "",
         required: bool = False):
    """
    Free-text entry; Enter accepts the initial value.

    A lone CLEAR ("-") empties an optional answer that has a default.
    """
    suffix = f" [{initial}]" if initial else ""
    if initial and not required:
        suffix += grey(f" ({CLEAR} clears)")
    hint = f" {grey('(' + placeholder + ')')}" if placeholder else ""
    while True:
        raw = _read(f"  {cyan('?')} {message}{hint}{suffix}: ")
        if is_cancel(raw):
            return CANCEL
        value = raw.strip()
        if value == CLEAR and initial and not required:
            return ""
        value = value or initial
        if required and not value:
            print(red("    A value is required."))
            continue
        return value


def select(message: str, options: Sequence[Any], initial: Any = None):
    """Numbered single-select; Enter accepts the initial option."""
    choices = [_as_option(o) for o in options]
    if not choices:
        print(red(f"  Nothing to choose from for: {message}"))
        return CANCEL

    default_idx = 0
    for i, (value, _, _) in enumerate(choices):
        if value == initial:
            default_idx = i
            break

    print(f"\n  {cyan('?')} {message}\n")
    for i, (_, label, hint) in enumerate(choices, 1):
        marker = bold("›") if i - 1 == default_idx else " "
        suffix = f"  {grey(hint)}" if hint else ""
        print(f"  {marker} {bold(str(i)):>3}.  {label}{suffix}")
    print()

    while True:
        raw = _read(f"  Choice [{default_idx + 1}]: ")
        if is_cancel(raw):
            return CANCEL
        raw = raw.strip()
        if not raw:
            return choices[default_idx][0]
        if raw.isdigit() and 1 <= int(raw) <= len(choices):
            return choices[int(raw) - 1][0]
        print(red(f"    Enter a number between 1 and {len(choices)}."))


def confirm(message: str, default: bool = True):
    """Yes/no question; returns True, False, or CANCEL."""
    options = "[Y/n]" if default else "[y/N]"
    while True:
        raw = _read(f"  {cyan('?')} {message} {options} ")
        if is_cancel(raw):
            return CANCEL
        raw = raw.strip().lower()
        if not raw:
            return default
        if raw in ("y", "yes"):
            return True
        if raw in ("n", "no"):
            return False


def ask(spec: PromptSpec):
    """Execute one PromptSpec."""
    if spec.widget is Widget.SELECT:
        return select(spec.message, list(spec.options), initial=spec.initial)
    return text(spec.message, initial=spec.initial, placeholder=spec.placeholder,
                required=spec.required)


def group(plan: Dict[str, PromptSpec]):
    """Ask every prompt in order; returns {name: answer} or CANCEL."""
    answers: Dict[str, Any] = {}
    for name, spec in plan.items():
        value = ask(spec)
        if is_cancel(value):
            return CANCEL
        answers[name] = value
    return answers
