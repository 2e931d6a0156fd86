import logging
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel

from probdag._config import Precision
from probdag._dag import build_dag
from probdag._errors import ModelDefinitionError
from probdag._model import model
from probdag._nodes import Role
from probdag._registry import NodeRegistry

from .config import ConfigError, ProbdagConfig, get_config
from .discover import load_registry_from_module_path, load_registry_from_script, load_registry_from_source
from .graph_query import get_component_summaries, list_nodes
from .graph_render import render_component_table, render_node_table

app = typer.Typer()

logger = logging.getLogger(__name__)
# Console for stderr (info/errors)
err_console = Console(stderr=True)
# Console for stdout (results)
out_console = Console()

PathArgument = Annotated[
    str | None,
    typer.Argument(
        help="Path to Python script or module path (e.g., examples.regression:registry). "
        "Defaults to [tool.probdag].model in pyproject.toml",
    ),
]
RegistryOption = Annotated[
    str | None,
    typer.Option("--registry", help="Name of the registry variable (for script paths only)"),
]


@app.callback()
def callback(
    *,
    verbose: bool = typer.Option(default=False, help="Enable verbose output"),
) -> None:
    """Probdag CLI."""
    log_level = logging.DEBUG if verbose else logging.INFO

    # Configure rich logging handler to output to stderr
    logging.basicConfig(
        level=log_level,
        format="%(message)s",
        handlers=[
            RichHandler(
                console=err_console,
                show_time=False,
                show_path=verbose,
                rich_tracebacks=True,
            ),
        ],
        force=True,
    )


def _get_config_or_exit() -> ProbdagConfig:
    try:
        return get_config()
    except ConfigError as e:
        err_console.print(f"[red]Configuration error:[/red] {escape(str(e))}")
        raise typer.Exit(code=1) from e


def _load_registry(path: str | None, registry_var: str | None, config: ProbdagConfig) -> NodeRegistry:
    """Load the registry named on the command line, or the one configured in pyproject.toml."""
    if path is None:
        if config.model is None:
            err_console.print(
                "[red]No model given.[/red] Pass a script or module path, or set \\[tool.probdag].model",
            )
            raise typer.Exit(code=1)
        err_console.print("[cyan]Loading registry from \\[tool.probdag].model[/cyan]")
        return load_registry_from_source(config.model)

    if ":" in path:
        # Module path format
        err_console.print(f"[cyan]Loading registry from module:[/cyan] {escape(path)}")
        return load_registry_from_module_path(path)

    # Script path format
    script_path = Path(path)
    err_console.print(f"[cyan]Loading registry from script:[/cyan] {escape(str(script_path))}")
    return load_registry_from_script(script_path, registry_var)


@app.command()
def check(
    path: PathArgument = None,
    *,
    registry_var: RegistryOption = None,
    precision: Annotated[
        Precision | None,
        typer.Option("--precision", help="Floating point precision"),
    ] = None,
    n_cores: Annotated[
        int | None,
        typer.Option("--n-cores", help="Number of cores to evaluate the model with"),
    ] = None,
    compile_graph: Annotated[
        bool | None,
        typer.Option("--compile/--no-compile", help="Prepare the evaluation plan ahead of time"),
    ] = None,
) -> None:
    """Define the model of a registry and report whether it is valid."""
    config = _get_config_or_exit()
    registry = _load_registry(path, registry_var, config)
    err_console.print()

    # Command line options take precedence over pyproject.toml
    precision = precision or config.precision or Precision.SINGLE
    n_cores = n_cores if n_cores is not None else config.n_cores
    if compile_graph is None:
        compile_graph = config.compile if config.compile is not None else True

    err_console.print("[cyan]Validating model graph...[/cyan]")
    try:
        defined = model(
            precision=precision,
            n_cores=n_cores,
            compile=compile_graph,
            registry=registry,
        )
    except ModelDefinitionError as e:
        err_console.print(f"[red]✗ {escape(str(e))}[/red]")
        raise typer.Exit(code=1) from e
    err_console.print()

    summaries = get_component_summaries(defined.dag)
    err_console.print(
        Panel.fit(
            f"{len(defined.dag.nodes)} nodes, {len(summaries)} graph(s), "
            f"precision={defined.config.precision}, n_cores={defined.config.n_cores}, "
            f"compile={defined.config.compile}",
            title="[bold]Model[/bold]",
            border_style="cyan",
        ),
    )
    render_component_table(summaries, err_console)

    err_console.print()
    err_console.print("[green]✓ Model is valid[/green]")
    err_console.print()


@app.command()
def nodes(
    path: PathArgument = None,
    *,
    registry_var: RegistryOption = None,
    role: Annotated[
        Role | None,
        typer.Option("--role", help="Only list nodes with this role"),
    ] = None,
) -> None:
    """List the nodes linked to the tracked nodes of a registry, without validating them."""
    config = _get_config_or_exit()
    registry = _load_registry(path, registry_var, config)

    try:
        dag = build_dag(registry.tracked(), registry)
    except ModelDefinitionError as e:
        err_console.print(f"[red]✗ {escape(str(e))}[/red]")
        raise typer.Exit(code=1) from e

    render_node_table(list_nodes(dag, role=role), out_console)


def main() -> None:
    app()
