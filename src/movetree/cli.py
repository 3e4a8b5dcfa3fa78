"""Command-line interface for movetree."""

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table
from rich.tree import Tree

from movetree import __version__
from movetree.core.annotations import extract_clock_annotations
from movetree.core.chess.errors import NotationError
from movetree.core.configs import MoveTreeConfig, load_tree_config
from movetree.core.tree import MoveNode, MoveTree
from movetree.core.utils.logging import setup_logging_from_config

app = typer.Typer(
    name="movetree",
    help="movetree: explore chess game records as move trees",
    add_completion=False,
)
console = Console()


def _load(config_path: Path | None, log_level: str | None) -> MoveTreeConfig:
    overrides = [f"logging.level={log_level}"] if log_level else None
    try:
        config = load_tree_config(config_path, overrides)
    except FileNotFoundError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(code=1)
    setup_logging_from_config(config.logging)
    return config


def _read_pgn(path: Path) -> str:
    if not path.is_file():
        console.print(f"[bold red]Error:[/bold red] PGN file not found: {path}")
        raise typer.Exit(code=1)
    return path.read_text(encoding="utf-8")


def _build(pgn_file: Path, config: MoveTreeConfig) -> MoveTree:
    tree = MoveTree.from_config(config)
    try:
        tree.build_from_notation(_read_pgn(pgn_file))
    except NotationError as e:
        console.print(f"[bold red]Invalid notation:[/bold red] {e}")
        raise typer.Exit(code=2)
    return tree


def _label(node: MoveNode) -> str:
    number = int(node.move_number or 0)
    prefix = f"{number}." if node.move_number == number else f"{number}..."
    label = f"{prefix} [bold]{node.san}[/bold] [dim]{node.id}[/dim]"
    if node.clock:
        label += f" [cyan]{node.clock}[/cyan]"
    if node.classification:
        label += f" [magenta]{node.classification}[/magenta]"
    return label


def _add_variation(branch: Tree, tree: MoveTree, start: MoveNode) -> None:
    variation = branch.add("[yellow]variation[/yellow]")
    for node in tree.variation_line(start.id):
        sub = variation.add(_label(node))
        # children[0] is already shown as the continuation
        for extra in tree.children_of(node.id)[1:]:
            _add_variation(sub, tree, extra)


@app.command()
def version() -> None:
    """Print version information."""
    console.print(f"[bold blue]movetree[/bold blue] v{__version__}")


@app.command()
def show(
    pgn_file: Path = typer.Argument(..., help="PGN file to load"),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="YAML config file"),
    log_level: Optional[str] = typer.Option(None, "--log-level", "-l", help="Log level override"),
) -> None:
    """Print the mainline (with clocks) and any variations as a tree."""
    settings = _load(config, log_level)
    tree = _build(pgn_file, settings)

    root = Tree(f"[bold green]{tree.root.id}[/bold green] [dim]{tree.root.fen}[/dim]")
    for node in tree.mainline:
        branch = root if node is tree.root else root.add(_label(node))
        for child in tree.children_of(node.id):
            _add_variation(branch, tree, child)
    console.print(root)
    console.print(f"[dim]{len(tree.mainline) - 1} plies, {len(tree)} nodes[/dim]")


@app.command()
def clocks(
    pgn_file: Path = typer.Argument(..., help="PGN file to scan"),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="YAML config file"),
    log_level: Optional[str] = typer.Option(None, "--log-level", "-l", help="Log level override"),
) -> None:
    """Print the clock annotations aligned with each ply."""
    settings = _load(config, log_level)
    records = extract_clock_annotations(_read_pgn(pgn_file), settings.annotations.clock_marker)

    if not records:
        console.print("[yellow]No clock annotations found[/yellow]")
        return

    table = Table(title=f"Clock annotations: {pgn_file.name}")
    table.add_column("Ply", justify="right")
    table.add_column("Side")
    table.add_column("Clock")
    table.add_column("Seconds", justify="right")
    for record in records:
        seconds = record.seconds
        table.add_row(
            str(record.move_index),
            record.side.value,
            record.clock,
            f"{seconds:.1f}" if seconds is not None else "-",
        )
    console.print(table)


@app.command()
def path(
    pgn_file: Path = typer.Argument(..., help="PGN file to load"),
    node_id: str = typer.Argument(..., help="Node id, e.g. move_2_w_Nf3"),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="YAML config file"),
    log_level: Optional[str] = typer.Option(None, "--log-level", "-l", help="Log level override"),
) -> None:
    """Print the moves leading from the start position to a node."""
    settings = _load(config, log_level)
    tree = _build(pgn_file, settings)

    node = tree.find_node(node_id)
    if node is None:
        console.print(f"[bold red]Unknown node:[/bold red] {node_id}")
        raise typer.Exit(code=1)

    sans = [san for san, _ in tree.get_moves_to_node(node_id)]
    console.print(" ".join(sans) if sans else "[dim](start position)[/dim]")
    console.print(f"[dim]{node.fen}[/dim]")


if __name__ == "__main__":
    app()
