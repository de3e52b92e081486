"""Interactive prompting, kept behind an ABC so the CLI flow can run against a scripted prompter."""

from abc import ABC, abstractmethod
from collections.abc import Callable, Sequence
from typing import TypeVar

import typer
from rich import print as rprint
from rich.markup import escape

T = TypeVar("T")

# Returns an error message for invalid input, None when the value is acceptable.
Validator = Callable[[str], str | None]


class Prompter(ABC):
    @abstractmethod
    def text(
        self,
        message: str,
        default: str | None = None,
        validate: Validator | None = None,
        secret: bool = False,
    ) -> str: ...

    @abstractmethod
    def select(self, message: str, choices: Sequence[tuple[str, T]]) -> T: ...

    @abstractmethod
    def confirm(self, message: str, default: bool = True) -> bool: ...


class TerminalPrompter(Prompter):
    def text(
        self,
        message: str,
        default: str | None = None,
        validate: Validator | None = None,
        secret: bool = False,
    ) -> str:
        while True:
            value = typer.prompt(
                message,
                default=default if default is not None else "",
                show_default=bool(default) and not secret,
                hide_input=secret,
            )
            error = validate(value) if validate else None
            if error is None:
                return value
            rprint(f"[red]{escape(error)}[/red]")

    def select(self, message: str, choices: Sequence[tuple[str, T]]) -> T:
        if not choices:
            raise ValueError("select() needs at least one choice")
        rprint(f"[bold]{escape(message)}[/bold]")
        for i, (label, _) in enumerate(choices, start=1):
            rprint(f"  [cyan]{i:>3}[/cyan]  {label}")
        while True:
            index = typer.prompt("Number", type=int)
            if 1 <= index <= len(choices):
                return choices[index - 1][1]
            rprint(f"[red]Pick a number from 1 to {len(choices)}[/red]")

    def confirm(self, message: str, default: bool = True) -> bool:
        return typer.confirm(message, default=default)
