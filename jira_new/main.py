"""jira-new CLI — create a Jira ticket from the terminal, or read one back."""

import logging
import os
from datetime import datetime
from textwrap import indent
from typing import Annotated

import typer
from pydantic import SecretStr
from rich import print as rprint
from rich.console import Console
from rich.markup import escape
from typer.core import TyperCommand

from jira_new import clipboard
from jira_new.client import JiraClient
from jira_new.errors import JiraNewError, UsageError, ValidationError
from jira_new.models import IssueDetail, Project
from jira_new.prompts import Prompter, TerminalPrompter
from jira_new.settings import JiraSettings, get_settings, save_config

logger = logging.getLogger("jira_new.main")

console = Console(emoji=False)  # no :shortcode: substitution in issue text
err_console = Console(stderr=True)

TOKEN_URL = "https://id.atlassian.com/manage-profile/security/api-tokens"

_STATUS_COLOUR = {"To Do": "blue", "In Progress": "yellow", "Done": "green"}


class _Command(TyperCommand):
    """Single command whose usage errors exit 1, like every other failure."""

    def parse_args(self, ctx: typer.Context, args: list[str]) -> list[str]:
        try:
            return super().parse_args(ctx, args)
        except Exception as exc:
            # usage errors carry exit_code 2, whichever click typer runs on
            if getattr(exc, "exit_code", None) == 2:
                exc.exit_code = 1  # type: ignore[attr-defined]
            raise


app = typer.Typer(help="Create and read Jira Cloud tickets from the terminal.", add_completion=False)


# ---------------------------------------------------------------------------
# Factories (patched in tests)
# ---------------------------------------------------------------------------


def get_prompter() -> Prompter:
    return TerminalPrompter()


def get_client(settings: JiraSettings) -> JiraClient:
    return JiraClient(settings)


def _configure_logging(verbose: bool) -> None:
    level = "DEBUG" if verbose else os.environ.get("JIRA_NEW_LOG_LEVEL")
    if not level:
        return
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
    )


# ---------------------------------------------------------------------------
# Input checks — each returns an error message, or None when the value is fine
# ---------------------------------------------------------------------------


def _check_url(value: str) -> str | None:
    return None if value.strip().startswith("http") else "Must be a valid URL"


def _check_email(value: str) -> str | None:
    return None if "@" in value else "Must be a valid email"


def _check_token(value: str) -> str | None:
    return None if value.strip() else "Required"


def _check_title(value: str) -> str | None:
    return None if value.strip() else "Title is required"


def _issue_key(raw: str) -> str:
    if not raw.strip() or raw.startswith("-"):
        raise UsageError("--read needs an issue key, e.g. jira-new --read ABC-123")
    return raw.strip().upper()


# ---------------------------------------------------------------------------
# Setup and project selection
# ---------------------------------------------------------------------------


def run_setup(settings: JiraSettings, prompter: Prompter) -> JiraSettings:
    """Ask for URL, email and API token, save them, and return the updated settings.

    Existing values are offered as defaults. The saved default project is left alone.
    """
    rprint("\n[bold]Jira Tool Setup[/bold]\n")

    current_token = settings.api_token.get_secret_value() if settings.api_token else None
    jira_url = prompter.text(
        "Jira URL (e.g. https://company.atlassian.net)", default=settings.jira_url, validate=_check_url
    )
    email = prompter.text("Jira email", default=settings.email, validate=_check_email)
    api_token = prompter.text(
        f"API token (create at {TOKEN_URL})", default=current_token, validate=_check_token, secret=True
    )

    for value, check in ((jira_url, _check_url), (email, _check_email), (api_token, _check_token)):
        error = check(value)
        if error:
            raise ValidationError(error)

    jira_url = jira_url.strip().rstrip("/")
    save_config({"jiraUrl": jira_url, "email": email.strip(), "apiToken": api_token.strip()})
    logger.debug("Saved credentials for %s", jira_url)
    rprint("\n[green]✓[/green] Credentials saved.\n")

    return settings.model_copy(
        update={"jira_url": jira_url, "email": email.strip(), "api_token": SecretStr(api_token.strip())}
    )


def pick_project(client: JiraClient, prompter: Prompter, always_remember: bool = False) -> Project:
    """Let the user choose a project; persist it as the default if asked (or always_remember)."""
    with console.status("[dim]Fetching projects…[/dim]"):
        projects = client.list_projects()

    choices = [
        (f"[bold]{escape(p.key)}[/bold] — {escape(p.name)}", p) for p in sorted(projects, key=lambda p: p.key)
    ]
    project = prompter.select("Select a project:", choices)

    if always_remember or prompter.confirm("Remember as default project?", default=True):
        save_config({"defaultProject": project.model_dump()})

    return project


# ---------------------------------------------------------------------------
# Issue display
# ---------------------------------------------------------------------------


def _format_timestamp(created: str) -> str:
    """Jira timestamps look like 2024-01-15T10:30:00.000+0000; show them as 2024-01-15 10:30."""
    try:
        return datetime.strptime(created, "%Y-%m-%dT%H:%M:%S.%f%z").strftime("%Y-%m-%d %H:%M")
    except ValueError:
        return created


def print_issue(issue: IssueDetail, url: str) -> None:
    colour = _STATUS_COLOUR.get(issue.status_category, "white")

    console.print(f"\n[bold]{escape(issue.key)}[/bold] {escape(issue.summary)}")
    console.print(f"[{colour}]● {escape(issue.status)}[/{colour}]  [dim]{escape(url)}[/dim]")

    console.print("\n[bold]Description[/bold]")
    if issue.description:
        console.print(indent(escape(issue.description), "  "))
    else:
        console.print("  [dim]No description provided.[/dim]")

    if issue.subtasks:
        console.print(f"\n[bold]Subtasks ({len(issue.subtasks)})[/bold]")
        for st in issue.subtasks:
            console.print(f"  [cyan]{escape(st.key)}[/cyan]  [dim]{escape(f'[{st.status}]')}[/dim]  {escape(st.summary)}")

    if issue.comments:
        console.print(f"\n[bold]Comments ({len(issue.comments)})[/bold]")
        for c in issue.comments:
            console.print(f"\n  [bold]{escape(c.author)}[/bold] [dim]· {escape(_format_timestamp(c.created))}[/dim]")
            console.print(indent(escape(c.body), "  ") if c.body else "  [dim](empty)[/dim]")


# ---------------------------------------------------------------------------
# Operations
# ---------------------------------------------------------------------------


def read_issue(client: JiraClient, issue_key: str) -> None:
    with console.status(f"[dim]Fetching {escape(issue_key)}…[/dim]"):
        issue = client.fetch_issue(issue_key)
    print_issue(issue, client.browse_url(issue.key))


def create_ticket(
    client: JiraClient,
    settings: JiraSettings,
    prompter: Prompter,
    title: str | None,
    description: str | None,
) -> None:
    summary = title if title is not None else prompter.text("Ticket title", validate=_check_title)
    if not summary.strip():
        raise ValidationError("Title is required.")

    if description is None:
        description = prompter.text("Description (optional, enter to skip)", default="")

    project = settings.default_project or pick_project(client, prompter)

    with console.status("[dim]Creating ticket…[/dim]"):
        issue = client.create_issue(project.key, summary.strip(), description.strip() or None)

    rprint(f"\n[bold green]{escape(issue.key)}[/bold green]")
    rprint(f"[dim]{escape(client.browse_url(issue.key))}[/dim]\n")

    if clipboard.copy(issue.key):
        rprint("[dim]Copied to clipboard.[/dim]")


# ---------------------------------------------------------------------------
# Command
# ---------------------------------------------------------------------------


@app.command(cls=_Command)
def main(
    title: Annotated[str | None, typer.Argument(help="Ticket title (asked for when omitted)", show_default=False)] = None,
    description: Annotated[
        str | None,
        typer.Option("--description", "-d", help="Ticket description (asked for when omitted)"),
    ] = None,
    read: Annotated[
        str | None,
        typer.Option("--read", "-r", help="Show an existing issue instead, e.g. ABC-123"),
    ] = None,
    setup: Annotated[bool, typer.Option("--setup", help="Re-enter Jira URL, email and API token")] = False,
    project: Annotated[bool, typer.Option("--project", help="Pick and save a new default project")] = False,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Log HTTP requests to stderr")] = False,
) -> None:
    """Create a Jira ticket, or show one with --read."""
    _configure_logging(verbose)
    try:
        # Validate the argument shape before touching config or the network.
        issue_key = _issue_key(read) if read is not None else None

        prompter = get_prompter()
        settings = get_settings()
        if setup or not settings.is_complete:
            settings = run_setup(settings, prompter)

        client = get_client(settings)

        if project:
            pick_project(client, prompter, always_remember=True)
            rprint("[green]✓[/green] Default project updated.")
            return

        if issue_key:
            read_issue(client, issue_key)
            return

        create_ticket(client, settings, prompter, title, description)
    except JiraNewError as exc:
        err_console.print(f"[red]Error:[/red] {escape(str(exc))}")
        raise typer.Exit(1) from exc
