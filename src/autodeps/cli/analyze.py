"""
autodeps analyze - compute evaluation order and dependency annotations.

Loads a model definition file, runs the dependency analysis and shows the
resulting annotations or order.
"""

import json
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from autodeps.config.loader import AnalysisOptions, load_config
from autodeps.config.singleton import GlobalConfig
from autodeps.core.autodeps import ModelAutoDeps
from autodeps.core.loader import load_model
from autodeps.exceptions import AutoDepsError, SortingError
from autodeps.utils.logging import get_logger, setup_logging, setup_logging_from_config

logger = get_logger("autodeps.cli.analyze")
console = Console()

app = typer.Typer(
    name="analyze",
    help="Dependency analysis commands",
    no_args_is_help=True,
)


def _load_options(project_dir: Path, env: str | None, log_level: str | None) -> AnalysisOptions:
    """Load project configuration (if any), set up logging, return analysis options."""
    if (project_dir / "config.yaml").exists():
        config = load_config(project_dir, env=env)
        config.validate()
        GlobalConfig.set_config(config)
        if log_level:
            config.data.setdefault("logging", {})["level"] = log_level
        setup_logging_from_config(config.data, project_dir=project_dir)
        return AnalysisOptions.from_config(config)

    setup_logging(level=log_level or "WARNING")
    return AnalysisOptions()


def run_analysis(model_file: Path, project_dir: Path, env: str | None, log_level: str | None) -> ModelAutoDeps:
    """Shared driver for CLI commands; exits with code 1 on any analysis failure."""
    try:
        options = _load_options(project_dir, env, log_level)
        model = load_model(model_file)
        analysis = ModelAutoDeps(model, options)
        analysis.analyze()
    except SortingError as e:
        logger.debug(f"Analysis of {model_file} failed", exc_info=True)
        console.print(f"[red]Analysis failed:[/red] {escape(e.message)}", highlight=False, soft_wrap=True)
        raise typer.Exit(1)
    except (AutoDepsError, FileNotFoundError, ValueError) as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}", highlight=False, soft_wrap=True)
        raise typer.Exit(1)
    return analysis


@app.command("deps")
def deps(
    model_file: Path = typer.Argument(..., help="Model definition file (YAML)"),
    format: str = typer.Option("table", "--format", "-f", help="Output format: table, json"),
    project_dir: Path = typer.Option(Path("."), "--project", "-p", help="Project directory"),
    env: str | None = typer.Option(None, "--env", "-e", help="Environment"),
    log_level: str | None = typer.Option(None, "--log-level", help="Logging level"),
):
    """
    Show the dependency annotation of every entry.

    Examples:
        autodeps analyze deps model.yaml
        autodeps analyze deps model.yaml --format json
    """
    if format not in ("table", "json"):
        console.print(f"[red]Unknown format '{format}', expected table or json[/red]")
        raise typer.Exit(1)

    analysis = run_analysis(model_file, project_dir, env, log_level)
    model = analysis.model
    entries = analysis.mapper.entries

    if format == "json":
        payload = model.to_dict()
        payload.setdefault("dependencies", {})
        payload["order"] = analysis.order
        payload["unsupported_chains"] = [list(chain) for chain in analysis.unsupported_chains]
        typer.echo(json.dumps(payload, indent=2, default=str))
        return

    table = Table(title=f"Model: {model.name}")
    table.add_column("Entry", style="cyan")
    table.add_column("Kind")
    table.add_column("Result")
    table.add_column("Depends on", style="green")

    for name in analysis.order:
        entry = entries.get(name)
        if entry is None:
            continue
        rp = entry.return_path
        table.add_row(
            name,
            entry.kind.value,
            rp.name if rp else "-",
            ", ".join(model.get_dependencies(name) or []) or "-",
        )

    console.print(table)

    for entry_name, result, via in analysis.unsupported_chains:
        console.print(
            f"[yellow]Unresolved:[/yellow] {escape(entry_name)} reads {escape(via)} through {escape(result)}", highlight=False
        )


@app.command("order")
def order(
    model_file: Path = typer.Argument(..., help="Model definition file (YAML)"),
    entries_only: bool = typer.Option(False, "--entries", help="Only list entries, not result names"),
    project_dir: Path = typer.Option(Path("."), "--project", "-p", help="Project directory"),
    env: str | None = typer.Option(None, "--env", "-e", help="Environment"),
    log_level: str | None = typer.Option(None, "--log-level", help="Logging level"),
):
    """
    Print the evaluation order, one name per line.

    Examples:
        autodeps analyze order model.yaml
        autodeps analyze order model.yaml --entries
    """
    analysis = run_analysis(model_file, project_dir, env, log_level)
    for name in analysis.order:
        if entries_only and name not in analysis.mapper.entries:
            continue
        typer.echo(name)
