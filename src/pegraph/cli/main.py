"""CLI entry point for pegraph.

Invoked as::

    pegraph [OPTIONS] COMMAND [ARGS]...

or, during development::

    python -m pegraph.cli.main

Commands
--------
build       Build and close an instance graph from a scenario file
check       Build a graph and verify its structural invariants
policies    List registered placement policies
version     Show version information
"""
from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.syntax import Syntax
from rich.table import Table

if TYPE_CHECKING:
    from pegraph.model.nodes import InstanceGraph
    from pegraph.scenario import Scenario

console = Console()
err_console = Console(stderr=True)

DEFAULT_DOT_FILE = "graph-visualized.gv"


def _load_or_exit(path: str) -> "Scenario":
    """Load a scenario file, printing errors and exiting on failure."""
    from pegraph.errors import ScenarioError
    from pegraph.scenario import load_scenario

    try:
        return load_scenario(path)
    except FileNotFoundError:
        err_console.print(f"[red]Error:[/red] File not found: {path}")
        sys.exit(1)
    except OSError as exc:
        err_console.print(f"[red]Error:[/red] Cannot read {path}: {exc}")
        sys.exit(1)
    except ScenarioError as exc:
        err_console.print(f"[red]Invalid scenario[/red] {path}: {exc}")
        sys.exit(1)


def _build_or_exit(scenario: "Scenario", policy: str | None, seed: int | None) -> "InstanceGraph":
    """Build the graph, printing closure errors and exiting on failure."""
    from pegraph.errors import AllocationError, CycleDetectedError, PegraphError
    from pegraph.pipeline import build
    from pegraph.policy import PolicyNotFoundError

    try:
        return build(scenario, policy=policy, seed=seed)
    except PolicyNotFoundError as exc:
        err_console.print(f"[red]Error:[/red] {exc.args[0]}")
        sys.exit(1)
    except AllocationError as exc:
        err_console.print(f"[red]Allocation error:[/red] {exc}")
        sys.exit(1)
    except CycleDetectedError as exc:
        err_console.print(f"[red]Cycle detected:[/red] {' -> '.join(exc.chain)}")
        sys.exit(1)
    except PegraphError as exc:
        err_console.print(f"[red]Error:[/red] {exc}")
        sys.exit(1)


def _write_or_print(text: str, output: str | None, lang: str | None) -> None:
    if output:
        Path(output).write_text(text, encoding="utf-8")
        console.print(f"[green]Graph written to[/green] {output}")
    elif lang:
        console.print(Syntax(text, lang))
    else:
        console.print(text, markup=False, highlight=False, soft_wrap=True, end="")


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(package_name="pegraph")
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warning", "error"], case_sensitive=False),
    default="warning",
    help="Logging verbosity (logs go to stderr).",
)
def cli(log_level: str) -> None:
    """Policy-enriched application graphs: instantiate and close."""
    logging.basicConfig(
        level=log_level.upper(),
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


# ---------------------------------------------------------------------------
# version command
# ---------------------------------------------------------------------------


@cli.command(name="version")
def version_command() -> None:
    """Show detailed version information."""
    from pegraph import __version__

    table = Table(show_header=False, box=None)
    table.add_row("[bold]pegraph[/bold]", f"v{__version__}")
    table.add_row("Python", f"{sys.version_info.major}.{sys.version_info.minor}.{sys.version_info.micro}")
    table.add_row("Platform", sys.platform)
    console.print(table)


# ---------------------------------------------------------------------------
# policies command
# ---------------------------------------------------------------------------


@cli.command(name="policies")
def policies_command() -> None:
    """List placement policies, including those installed via entry-points."""
    from pegraph.policy import DEFAULT_POLICY, policy_registry

    policy_registry.load_entrypoints()

    table = Table(title="Placement policies")
    table.add_column("Name", style="bold")
    table.add_column("Class")
    for name in policy_registry.list_policies():
        cls = policy_registry.get(name)
        marker = " [dim](default)[/dim]" if name == DEFAULT_POLICY else ""
        table.add_row(name + marker, f"{cls.__module__}.{cls.__qualname__}")
    console.print(table)


# ---------------------------------------------------------------------------
# build command
# ---------------------------------------------------------------------------


@cli.command(name="build")
@click.argument("scenario_file", type=click.Path(exists=False))
@click.option("--seed", type=int, default=None, help="Random seed (overrides the scenario's).")
@click.option("--policy", default=None, help="Placement policy name (overrides the scenario's).")
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["text", "json", "yaml", "dot"], case_sensitive=False),
    default="text",
    help="Output format",
)
@click.option("--width", type=int, default=15, show_default=True, help="ID characters shown in text/dot output; 0 for full IDs.")
@click.option("--output", "-o", default=None, help="Output file path (defaults to stdout)")
@click.option(
    "--render",
    "render_format",
    default=None,
    metavar="FMT",
    help=f"Also rasterize with Graphviz (e.g. jpg, png); implies --format dot. Writes {DEFAULT_DOT_FILE} unless -o is given.",
)
def build_command(
    scenario_file: str,
    seed: int | None,
    policy: str | None,
    output_format: str,
    width: int,
    output: str | None,
    render_format: str | None,
) -> None:
    """Build and close an instance graph.

    SCENARIO_FILE is the path to a YAML scenario.

    Examples:

    \b
        pegraph build scenario.yaml
        pegraph build scenario.yaml --seed 7 --format json -o graph.json
        pegraph build scenario.yaml --render jpg
    """
    from pegraph.errors import RenderError
    from pegraph.exporters import DotExporter, TextExporter, render_dot
    from pegraph.model.serializer import GraphSerializer

    scenario = _load_or_exit(scenario_file)
    graph = _build_or_exit(scenario, policy, seed)

    if render_format:
        output_format = "dot"
        output = output or DEFAULT_DOT_FILE

    serializer = GraphSerializer()
    lang: str | None = None
    if output_format == "json":
        text, lang = serializer.to_json(graph), "json"
    elif output_format == "yaml":
        text, lang = serializer.to_yaml(graph), "yaml"
    elif output_format == "dot":
        text = DotExporter(width=width).export(graph)
    else:
        text = TextExporter(width=width).export(graph)

    _write_or_print(text, output, lang)

    if render_format and output:
        try:
            image = render_dot(output, render_format)
        except RenderError as exc:
            err_console.print(f"[red]Render error:[/red] {exc}")
            sys.exit(1)
        console.print(f"[green]Rendered[/green] {image}")


# ---------------------------------------------------------------------------
# check command
# ---------------------------------------------------------------------------


@cli.command(name="check")
@click.argument("scenario_file", type=click.Path(exists=False))
@click.option("--seed", type=int, default=None, help="Random seed (overrides the scenario's).")
@click.option("--policy", default=None, help="Placement policy name (overrides the scenario's).")
@click.option("--strict", is_flag=True, default=False, help="Treat warnings as errors")
def check_command(scenario_file: str, seed: int | None, policy: str | None, strict: bool) -> None:
    """Build a graph and verify its structural invariants.

    SCENARIO_FILE is the path to a YAML scenario.
    """
    from pegraph.checker import GraphChecker

    scenario = _load_or_exit(scenario_file)
    graph = _build_or_exit(scenario, policy, seed)
    diagnostics = GraphChecker(strict=strict).check(graph, scenario.template)

    if not diagnostics:
        console.print(
            f"[green]OK[/green] {scenario_file} — {len(graph)} instance(s), "
            f"{graph.edge_count} edge(s), no issues found"
        )
        sys.exit(0)

    table = Table(title=f"Check: {scenario_file}", show_lines=True)
    table.add_column("Severity", style="bold", min_width=10)
    table.add_column("Code", min_width=8)
    table.add_column("Subject")
    table.add_column("Message")
    for d in diagnostics:
        color = "red" if d.is_error else "yellow"
        table.add_row(f"[{color}]{d.severity.name}[/{color}]", d.code, d.subject, d.message)
    console.print(table)

    errors = [d for d in diagnostics if d.is_error]
    console.print(
        f"\n[bold]Summary:[/bold] {len(errors)} error(s), "
        f"{len(diagnostics) - len(errors)} warning(s)"
    )
    if errors:
        sys.exit(1)


if __name__ == "__main__":
    cli()
