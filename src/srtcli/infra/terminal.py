from __future__ import annotations

import typer

CAPTION_CLEAR_LINES = 50
CLOCK_CLEAR_LINES = 40


class TerminalDisplay:
    """Caption pane on stdout, reset by scrolling blank lines."""

    def clear(self, lines: int) -> None:
        if lines > 0:
            typer.echo("\n" * (lines - 1))

    def write(self, text: str) -> None:
        typer.echo(text)
