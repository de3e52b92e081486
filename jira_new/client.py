"""Jira Cloud REST API v3 client."""

import base64
import logging
from collections.abc import Callable
from typing import Any, TypeVar
from urllib.parse import quote

import httpx

from jira_new.adf import render, text_to_adf
from jira_new.errors import ApiError, EmptyResultError, NetworkError
from jira_new.models import Comment, CreatedIssue, IssueDetail, Project, Subtask
from jira_new.settings import JiraSettings

logger = logging.getLogger("jira_new.client")

API_PATH = "/rest/api/3"
ISSUE_FIELDS = "summary,status,description,subtasks,comment"
ISSUE_TYPE = "Task"
TIMEOUT = 30
MAX_BODY_IN_ERROR = 200

T = TypeVar("T")


class JiraClient:
    def __init__(self, settings: JiraSettings) -> None:
        if not settings.is_complete:
            raise RuntimeError("jira_url, email and api_token are required")
        self.base_url: str = settings.jira_url  # type: ignore[assignment]
        token = settings.api_token.get_secret_value()  # type: ignore[union-attr]
        credentials = base64.b64encode(f"{settings.email}:{token}".encode()).decode()
        self._headers = {
            "Authorization": f"Basic {credentials}",
            "Accept": "application/json",
            "Content-Type": "application/json",
        }

    def _request(self, method: str, path: str, action: str, parse: Callable[[Any], T], **kwargs: Any) -> T:
        """Send one request and map its JSON body with parse.

        Non-2xx replies, bodies that are not JSON and JSON of the wrong shape all
        surface as ApiError.
        """
        url = f"{self.base_url}{API_PATH}{path}"
        logger.debug("%s %s", method, url)
        try:
            response = httpx.request(method, url, headers=self._headers, timeout=TIMEOUT, **kwargs)
        except httpx.HTTPError as exc:
            logger.warning("%s %s failed: %s", method, url, exc)
            raise NetworkError(f"Failed to {action}: could not reach {self.base_url} ({exc})") from exc
        logger.debug("%s %s -> %s", method, url, response.status_code)
        if not response.is_success:
            raise ApiError(action, response.status_code, response.text)
        try:
            return parse(response.json())
        except (ValueError, KeyError, TypeError, AttributeError) as exc:
            # ValueError covers both JSONDecodeError and pydantic.ValidationError
            logger.debug("%s %s returned an unexpected body: %s", method, url, exc)
            body = response.text[:MAX_BODY_IN_ERROR]
            raise ApiError(action, response.status_code, f"unexpected response from Jira: {body}") from exc

    def browse_url(self, issue_key: str) -> str:
        return f"{self.base_url}/browse/{issue_key}"

    def list_projects(self) -> list[Project]:
        return self._request("GET", "/project", "fetch projects", self._projects_from)

    def create_issue(self, project_key: str, summary: str, description: str | None = None) -> CreatedIssue:
        fields: dict[str, Any] = {
            "project": {"key": project_key},
            "summary": summary,
            "issuetype": {"name": ISSUE_TYPE},
        }
        if description and description.strip():
            fields["description"] = text_to_adf(description)
        return self._request(
            "POST",
            "/issue",
            "create issue",
            lambda data: CreatedIssue(id=str(data["id"]), key=data["key"]),
            json={"fields": fields},
        )

    def fetch_issue(self, issue_key: str) -> IssueDetail:
        return self._request(
            "GET",
            f"/issue/{quote(issue_key, safe='')}",
            f"fetch issue {issue_key}",
            lambda data: self._issue_from(data, issue_key),
            params={"fields": ISSUE_FIELDS},
        )

    def _projects_from(self, data: list) -> list[Project]:
        if not isinstance(data, list):
            raise TypeError(f"expected a list of projects, got {type(data).__name__}")
        if not data:
            raise EmptyResultError(
                "No projects found. Make sure your API token has access to read projects "
                "and that you have at least one project set up."
            )
        return [Project(id=str(p["id"]), key=p["key"], name=p["name"]) for p in data]

    def _issue_from(self, data: dict, issue_key: str) -> IssueDetail:
        fields = data.get("fields") or {}
        status = fields.get("status") or {}

        subtasks = [
            Subtask(
                key=st.get("key", ""),
                summary=(st.get("fields") or {}).get("summary") or "",
                status=((st.get("fields") or {}).get("status") or {}).get("name") or "Unknown",
            )
            for st in fields.get("subtasks") or []
        ]
        comments = [
            Comment(
                author=(c.get("author") or {}).get("displayName") or "Unknown",
                body=render(c.get("body")),
                created=c.get("created") or "",
            )
            for c in (fields.get("comment") or {}).get("comments") or []
        ]
        return IssueDetail(
            key=data.get("key", issue_key),
            summary=fields.get("summary") or "",
            status=status.get("name") or "Unknown",
            status_category=(status.get("statusCategory") or {}).get("name") or "Unknown",
            description=render(fields.get("description")),
            subtasks=subtasks,
            comments=comments,
        )
