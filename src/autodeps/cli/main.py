"""
Main CLI entry point.
"""

import typer

from autodeps import __version__
from autodeps.cli import analyze, graph


def version_callback(value: bool):
    """Callback to display version and exit."""
    if value:
        typer.echo(f"autodeps version {__version__}")
        raise typer.Exit()


app = typer.Typer(
    name="autodeps",
    help="Autodeps - dependency ordering for declarative service models",
    add_completion=False,
)

# Register subcommands
app.add_typer(analyze.app, name="analyze")
app.add_typer(graph.app, name="graph")


@app.callback(invoke_without_command=True)
def entrypoint(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        "-v",
        callback=version_callback,
        help="Show version and exit.",
    ),
):
    """
    Autodeps - dependency ordering for declarative service models.

    Run 'autodeps <command> --help' for help on a specific command.
    """
    if ctx.invoked_subcommand is None:
        if not version:
            typer.echo(ctx.get_help())
            raise typer.Exit()


def main():
    """Main CLI entry point."""
    app()


if __name__ == "__main__":
    main()
