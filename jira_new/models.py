"""Frozen value types that JiraClient hands back to the CLI."""

from pydantic import BaseModel, ConfigDict


class Project(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    key: str  # short prefix used in issue keys, e.g. ABC
    name: str


class CreatedIssue(BaseModel):
    """Key and id of a newly created issue; the CLI prints the key and builds the browse URL from it."""

    model_config = ConfigDict(frozen=True)

    id: str
    key: str


class Subtask(BaseModel):
    model_config = ConfigDict(frozen=True)

    key: str
    summary: str
    status: str


class Comment(BaseModel):
    model_config = ConfigDict(frozen=True)

    author: str
    body: str  # plain text, already rendered from ADF
    created: str  # timestamp as returned by Jira


class IssueDetail(BaseModel):
    model_config = ConfigDict(frozen=True)

    key: str
    summary: str
    status: str
    status_category: str
    description: str  # plain text, already rendered from ADF
    subtasks: list[Subtask] = []
    comments: list[Comment] = []
