from __future__ import annotations

from typing import Protocol

import click
import typer


class MenuIO(Protocol):
    def echo(self, text: str = "") -> None: ...

    def prompt(self, text: str) -> str: ...

    def read_key(self) -> str: ...


class ConsoleIO:
    """Terminal I/O for the menu: line prompts and single keystrokes."""

    def echo(self, text: str = "") -> None:
        typer.echo(text)

    def prompt(self, text: str) -> str:
        return typer.prompt(text, default="", show_default=False, prompt_suffix="\n")

    def read_key(self) -> str:
        key = click.getchar(echo=True)
        if not key:
            raise EOFError("end of input")
        typer.echo()
        return key
