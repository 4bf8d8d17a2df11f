"""Tests for the interactive prompt widgets (input() is scripted)."""

import builtins

import pytest

from runr import prompts
from runr.plan import PromptSpec, Widget
from runr.prompts import CANCEL, is_cancel


@pytest.fixture
def typed(monkeypatch):
    """Feed scripted lines to input(); an exception instance is raised instead."""
    def install(*lines):
        queue = list(lines)

        def fake_input(prompt=""):
            item = queue.pop(0)
            if isinstance(item, BaseException):
                raise item
            return item

        monkeypatch.setattr(builtins, "input", fake_input)
        return queue
    return install


def test_cancel_is_a_singleton():
    assert prompts.Cancelled() is CANCEL
    assert is_cancel(CANCEL)
    assert not is_cancel(None)
    assert not CANCEL


class TestText:

    def test_enter_accepts_initial(self, typed):
        typed("")
        assert prompts.text("Version", initial="1.0") == "1.0"

    def test_typed_value(self, typed):
        typed("  2.0.0  ")
        assert prompts.text("Version", initial="1.0") == "2.0.0"

    def test_required_reasks(self, typed):
        remaining = typed("", "", "filled")
        assert prompts.text("Version", required=True) == "filled"
        assert remaining == []

    def test_optional_may_be_empty(self, typed):
        typed("")
        assert prompts.text("Notes") == ""

    def test_dash_clears_optional_default(self, typed):
        typed("-")
        assert prompts.text("Suffix", initial="rc1") == ""

    def test_dash_is_literal_without_default(self, typed):
        typed(" - ")
        assert prompts.text("Separator") == "-"

    def test_dash_cannot_clear_required(self, typed):
        typed("-")
        assert prompts.text("Version", initial="1.0", required=True) == "-"

    @pytest.mark.parametrize("interrupt", [KeyboardInterrupt(), EOFError()])
    def test_cancel(self, typed, interrupt):
        typed(interrupt)
        assert prompts.text("Version") is CANCEL


class TestSelect:

    def test_enter_accepts_initial(self, typed):
        typed("")
        assert prompts.select("Env", ["dev", "staging", "prod"], initial="staging") == "staging"

    def test_enter_without_initial_picks_first(self, typed):
        typed("")
        assert prompts.select("Env", ["dev", "prod"]) == "dev"

    def test_number(self, typed):
        typed("3")
        assert prompts.select("Env", ["dev", "staging", "prod"]) == "prod"

    def test_invalid_then_valid(self, typed):
        remaining = typed("9", "abc", "2")
        assert prompts.select("Env", ["dev", "prod"]) == "prod"
        assert remaining == []

    def test_tuple_options_return_value(self, typed):
        typed("2")
        options = [(10, "CI", "ci.yml"), (20, "Deploy", "deploy.yml")]
        assert prompts.select("Workflow", options) == 20

    def test_no_options_cancels(self):
        assert prompts.select("Env", []) is CANCEL

    def test_cancel(self, typed):
        typed(KeyboardInterrupt())
        assert prompts.select("Env", ["dev"]) is CANCEL


class TestConfirm:

    @pytest.mark.parametrize("answer,expected", [
        ("y", True), ("yes", True), ("N", False), ("no", False),
    ])
    def test_answers(self, typed, answer, expected):
        typed(answer)
        assert prompts.confirm("Continue?") is expected

    def test_default(self, typed):
        typed("")
        assert prompts.confirm("Continue?", default=False) is False

    def test_reasks_on_garbage(self, typed):
        typed("maybe", "y")
        assert prompts.confirm("Continue?") is True

    def test_cancel(self, typed):
        typed(EOFError())
        assert prompts.confirm("Continue?") is CANCEL


class TestGroup:

    PLAN = {
        "environment": PromptSpec(
            name="environment", widget=Widget.SELECT, message="Input: environment",
            initial="dev", options=("dev", "staging", "prod"),
        ),
        "version": PromptSpec(
            name="version", widget=Widget.TEXT, message="Input: version",
            placeholder="required", required=True,
        ),
    }

    def test_collects_in_order(self, typed):
        typed("2", "2.0.0")
        answers = prompts.group(self.PLAN)
        assert answers == {"environment": "staging", "version": "2.0.0"}
        assert list(answers) == ["environment", "version"]

    def test_cancel_mid_group(self, typed):
        typed("", KeyboardInterrupt())
        assert prompts.group(self.PLAN) is CANCEL

    def test_empty_plan(self):
        assert prompts.group({}) == {}
