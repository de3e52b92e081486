"""Tests for TerminalPrompter with typer's prompt functions patched out."""

from unittest.mock import patch

import pytest

from jira_new.prompts import TerminalPrompter


def _needs_http(value: str) -> str | None:
    return None if value.startswith("http") else "Must be a valid URL"


class TestText:
    def test_returns_answer(self) -> None:
        with patch("jira_new.prompts.typer.prompt", return_value="hello") as prompt:
            assert TerminalPrompter().text("Say something") == "hello"
        assert prompt.call_args.kwargs["default"] == ""
        assert prompt.call_args.kwargs["show_default"] is False

    def test_reasks_until_valid(self, capsys: pytest.CaptureFixture[str]) -> None:
        with patch("jira_new.prompts.typer.prompt", side_effect=["nope", "https://ok"]) as prompt:
            assert TerminalPrompter().text("URL", validate=_needs_http) == "https://ok"
        assert prompt.call_count == 2
        assert "Must be a valid URL" in capsys.readouterr().out

    def test_offers_default(self) -> None:
        with patch("jira_new.prompts.typer.prompt", return_value="me@example.com") as prompt:
            TerminalPrompter().text("Email", default="me@example.com")
        assert prompt.call_args.kwargs["default"] == "me@example.com"
        assert prompt.call_args.kwargs["show_default"] is True

    def test_secret_hides_input_and_default(self) -> None:
        with patch("jira_new.prompts.typer.prompt", return_value="tok") as prompt:
            TerminalPrompter().text("Token", default="old_tok", secret=True)
        assert prompt.call_args.kwargs["hide_input"] is True
        assert prompt.call_args.kwargs["show_default"] is False


class TestSelect:
    def test_returns_chosen_value(self, capsys: pytest.CaptureFixture[str]) -> None:
        choices = [("ABC — Alpha", "abc"), ("XYZ — Zeta", "xyz")]
        with patch("jira_new.prompts.typer.prompt", return_value=2):
            assert TerminalPrompter().select("Select a project:", choices) == "xyz"
        out = capsys.readouterr().out
        assert "Select a project:" in out
        assert "XYZ — Zeta" in out

    def test_reasks_out_of_range(self, capsys: pytest.CaptureFixture[str]) -> None:
        choices = [("ABC — Alpha", "abc"), ("XYZ — Zeta", "xyz")]
        with patch("jira_new.prompts.typer.prompt", side_effect=[5, 0, 1]) as prompt:
            assert TerminalPrompter().select("Select a project:", choices) == "abc"
        assert prompt.call_count == 3
        assert "Pick a number from 1 to 2" in capsys.readouterr().out

    def test_no_choices(self) -> None:
        with pytest.raises(ValueError):
            TerminalPrompter().select("Pick", [])


def test_confirm_delegates() -> None:
    with patch("jira_new.prompts.typer.confirm", return_value=False) as confirm:
        assert TerminalPrompter().confirm("Sure?", default=True) is False
    confirm.assert_called_once_with("Sure?", default=True)
