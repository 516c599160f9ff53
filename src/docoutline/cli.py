"""CLI entrypoints for docoutline."""

from __future__ import annotations

import asyncio
from pathlib import Path

import typer
from rich.console import Console
from rich.tree import Tree

from docoutline.backends.filesystem import FilesystemTextStore
from docoutline.config import Settings, load_settings
from docoutline.errors import DocumentNotFoundError
from docoutline.logging import configure_logging, get_logger
from docoutline.models.outline import Forest, OutlineNode
from docoutline.outline import locator
from docoutline.outline.dispatcher import OutlineDispatcher
from docoutline.outline.mover import SectionMover

app = typer.Typer(add_completion=False, help="Document outline viewer and section mover")
logger = get_logger(__name__)
console = Console()


def _store(settings: Settings) -> FilesystemTextStore:
    return FilesystemTextStore(
        suffix_type_tags=settings.suffix_type_tags,
        default_type_tag=settings.default_type_tag,
        encoding=settings.file_encoding,
    )


def _setup() -> Settings:
    settings = load_settings()
    configure_logging(settings.log_level)
    return settings


async def _outline(path: Path, settings: Settings) -> Forest:
    store = _store(settings)
    document = await store.aget(str(path))
    return await OutlineDispatcher(settings=settings).build(document)


def _add_nodes(branch: Tree, nodes: list[OutlineNode]) -> None:
    for node in nodes:
        span = node.content_range
        child = branch.add(f"{node.label} [dim]({span.start + 1}-{span.end + 1})[/dim]")
        _add_nodes(child, node.children)


def _load(path: Path, settings: Settings) -> Forest:
    try:
        return asyncio.run(_outline(path, settings))
    except DocumentNotFoundError:
        raise typer.BadParameter(f"{path} is not a readable file") from None


@app.command()
def show(path: Path = typer.Argument(..., help="Document to outline")) -> None:
    """Print the outline of a document as a tree (line numbers are 1-based)."""

    settings = _setup()
    forest = _load(path, settings)
    if not forest:
        typer.echo("No outline symbols found")
        return
    tree = Tree(f"[bold]{path.name}[/bold]")
    _add_nodes(tree, forest.roots)
    console.print(tree)
    for diag in forest.skipped:
        console.print(f"[yellow]skipped[/yellow] {diag.name!r}: {diag.reason}")


@app.command()
def locate(
    path: Path = typer.Argument(..., help="Document to outline"),
    line: int = typer.Argument(..., min=1, help="1-based line number"),
) -> None:
    """Print the innermost section containing LINE."""

    settings = _setup()
    forest = _load(path, settings)
    node = locator.locate(forest, line - 1)
    if node is None:
        typer.echo("No section contains that line")
        raise typer.Exit(code=1)
    trail = []
    cursor: OutlineNode | None = node
    while cursor is not None:
        trail.append(cursor.label)
        cursor = cursor.parent
    typer.echo(" > ".join(reversed(trail)))


@app.command()
def move(
    path: Path = typer.Argument(..., help="Document to edit"),
    source: int = typer.Argument(..., min=1, help="1-based line of the section heading to move"),
    target: int = typer.Argument(..., min=1, help="1-based line the section should land before"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Validate only; do not rewrite the file"),
) -> None:
    """Move the section headed at SOURCE so it starts before TARGET."""

    settings = _setup()
    if not path.is_file():
        raise typer.BadParameter(f"{path} is not a readable file")

    if dry_run:
        forest = _load(path, settings)
        node = locator.find_by_header(forest, source - 1)
        if node is None:
            typer.echo(f"No section starts at line {source}")
            raise typer.Exit(code=1)
        typer.echo(f"Would move '{node.label}' (lines {node.content_range.start + 1}-{node.content_range.end + 1})")
        return

    store = _store(settings)
    dispatcher = OutlineDispatcher(settings=settings)
    mover = SectionMover(store, dispatcher.build)
    result = asyncio.run(mover.move_section(str(path), source - 1, target - 1))
    typer.echo(result.message)
    if not result.success:
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
