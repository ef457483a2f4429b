"""
autodeps graph - text views of a model's dependency graph.
"""

from pathlib import Path

import typer
from rich.console import Console

from autodeps.cli.analyze import run_analysis

console = Console()

app = typer.Typer(
    name="graph",
    help="Dependency graph views",
    no_args_is_help=True,
)


@app.command("layers")
def layers(
    model_file: Path = typer.Argument(..., help="Model definition file (YAML)"),
    project_dir: Path = typer.Option(Path("."), "--project", "-p", help="Project directory"),
    env: str | None = typer.Option(None, "--env", "-e", help="Environment"),
):
    """
    Show vertices grouped by evaluation level.

    Vertices in the same layer do not depend on each other.
    """
    analysis = run_analysis(model_file, project_dir, env, None)
    typer.echo(analysis.graph.visualize_layers())


@app.command("tree")
def tree(
    model_file: Path = typer.Argument(..., help="Model definition file (YAML)"),
    root: str | None = typer.Option(None, "--root", "-r", help="Start from this vertex"),
    project_dir: Path = typer.Option(Path("."), "--project", "-p", help="Project directory"),
    env: str | None = typer.Option(None, "--env", "-e", help="Environment"),
):
    """
    Show the graph as a tree of dependents, starting from vertices with no dependencies.
    """
    analysis = run_analysis(model_file, project_dir, env, None)
    if root and root not in analysis.graph:
        console.print(f"[red]Vertex '{root}' not found[/red]")
        raise typer.Exit(1)
    typer.echo(analysis.graph.visualize_tree(root))
