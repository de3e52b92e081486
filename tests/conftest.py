"""Shared test fixtures."""

from collections.abc import Sequence
from pathlib import Path
from typing import Any

import pytest

import jira_new.settings as settings_module
from jira_new.models import Comment, CreatedIssue, IssueDetail, Project, Subtask
from jira_new.prompts import Prompter
from jira_new.settings import JiraSettings


class ScriptedPrompter(Prompter):
    """Answers prompts from pre-recorded lists; running out of answers fails the test."""

    def __init__(
        self,
        texts: Sequence[str] = (),
        selections: Sequence[int] = (),
        confirms: Sequence[bool] = (),
    ) -> None:
        self.texts = list(texts)
        self.selections = list(selections)
        self.confirms = list(confirms)
        self.asked: list[str] = []

    def text(self, message: str, default: str | None = None, validate: Any = None, secret: bool = False) -> str:
        self.asked.append(message)
        return self.texts.pop(0)

    def select(self, message: str, choices: Sequence[tuple[str, Any]]) -> Any:
        self.asked.append(message)
        return choices[self.selections.pop(0)][1]

    def confirm(self, message: str, default: bool = True) -> bool:
        self.asked.append(message)
        return self.confirms.pop(0)


@pytest.fixture(autouse=True)
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point CONFIG_PATH at a temp file and drop any JIRA_NEW_* env vars."""
    config_path = tmp_path / "jira-tool" / "config.json"
    monkeypatch.setattr(settings_module, "CONFIG_PATH", config_path)
    for var in ("JIRA_NEW_JIRA_URL", "JIRA_NEW_EMAIL", "JIRA_NEW_API_TOKEN", "JIRA_NEW_DEFAULT_PROJECT"):
        monkeypatch.delenv(var, raising=False)
    return config_path


@pytest.fixture
def scripted() -> type[ScriptedPrompter]:
    return ScriptedPrompter


@pytest.fixture
def jira_settings() -> JiraSettings:
    return JiraSettings(
        jira_url="https://example.atlassian.net",
        email="me@example.com",
        api_token="tok_123",  # type: ignore[arg-type]
    )


@pytest.fixture
def sample_project() -> Project:
    return Project(id="10000", key="ABC", name="Alpha")


@pytest.fixture
def created_issue() -> CreatedIssue:
    return CreatedIssue(id="10001", key="ABC-7")


@pytest.fixture
def issue_detail() -> IssueDetail:
    return IssueDetail(
        key="ABC-1",
        summary="Fix login redirect",
        status="In Progress",
        status_category="In Progress",
        description="Users land on /home.\n• check the referrer",
        subtasks=[Subtask(key="ABC-2", summary="Write a test", status="To Do")],
        comments=[Comment(author="Jane Doe", body="On it.", created="2024-01-15T10:30:00.000+0000")],
    )
