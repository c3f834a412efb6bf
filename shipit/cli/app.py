from __future__ import annotations

import typer

from shipit.cli.commands.release_cmd import release


app = typer.Typer(
    add_completion=False,
    rich_markup_mode="rich",
)

# A single command, so typer runs it without a subcommand name.
app.command()(release)


def main() -> None:
    app()
