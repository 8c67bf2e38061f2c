"""Typer-based CLI for generating class diagrams from Java archives."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from . import __version__
from .analyzer import analyze
from .config_manager import load_diagram_config
from .errors import ArtifactAccessError
from .ignore_filter import parse_prefixes
from .provider import JarDescriptorProvider
from .registry import REGISTRY, render

logger = logging.getLogger(__name__)

err_console = Console(stderr=True)

app = typer.Typer(
    help="📐 ClassDiagram CLI — yUML / PlantUML class diagrams from compiled .jar files.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)


def version_callback(value: bool):
    """Print version and exit."""
    if value:
        typer.echo(f"ClassDiagram CLI v{__version__}")
        raise typer.Exit()


def notations_callback(value: bool):
    """Print registered notations and exit."""
    if value:
        for name in REGISTRY.names():
            typer.echo(f"{name}  ({REGISTRY.resolve(name).file_suffix})")
        raise typer.Exit()


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def output_path_for(artifact: Path, suffix: str) -> Path:
    """``lib/app.jar`` + ``-yuml.txt`` -> ``lib/app-yuml.txt``."""
    return artifact.with_name(artifact.stem + suffix)


@app.command()
def generate(
    artifact: Path = typer.Argument(..., help="Path to the .jar archive to analyze."),
    notation: str = typer.Argument(..., help="Diagram notation: yuml or plantuml."),
    ignore: Optional[List[str]] = typer.Option(
        None,
        "--ignore",
        help="Comma-separated type name prefixes to leave out (repeatable).",
    ),
    show_methods: bool = typer.Option(False, "--showMethods", help="Include methods and constructors."),
    show_fields: bool = typer.Option(False, "--showFields", help="Include fields."),
    fully_qualified_name: bool = typer.Option(
        False, "--fullyQualifiedName", help="Use fully qualified type names."
    ),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Output file path."),
    to_stdout: bool = typer.Option(False, "--stdout", help="Print the diagram instead of writing a file."),
    verbose: bool = typer.Option(False, "--verbose", help="Enable debug logging."),
    list_notations: Optional[bool] = typer.Option(
        None,
        "--list-notations",
        help="List available notations and exit.",
        callback=notations_callback,
        is_eager=True,
    ),
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-v",
        help="Show version and exit.",
        callback=version_callback,
        is_eager=True,
    ),
):
    """Generate a class diagram for ARTIFACT in the given NOTATION."""
    _configure_logging(verbose)

    if REGISTRY.resolve(notation) is None:
        err_console.print(f"[red]Unknown format: {escape(notation)}[/red]")
        err_console.print(f"Available: {', '.join(REGISTRY.names())}")
        raise typer.Exit(code=1)

    settings = load_diagram_config()
    prefixes = parse_prefixes(list(settings["ignore"]) + list(ignore or []))
    logger.debug("Ignore prefixes: %s", prefixes)

    try:
        descriptors = JarDescriptorProvider().load_descriptors(artifact)
    except ArtifactAccessError as exc:
        err_console.print(f"[red]{escape(str(exc))}[/red]")
        raise typer.Exit(code=1)

    graph = analyze(
        descriptors,
        ignore_prefixes=prefixes,
        show_fields=show_fields or settings["show_fields"],
        show_methods=show_methods or settings["show_methods"],
        fully_qualified_names=fully_qualified_name or settings["fully_qualified_names"],
    )
    text, suffix = render(notation, graph)

    if to_stdout:
        typer.echo(text)
        return

    target = output or output_path_for(artifact, suffix)
    try:
        target.write_text(text, encoding="utf-8")
    except OSError as exc:
        err_console.print(f"[red]Could not write {escape(str(target))}: {escape(str(exc))}[/red]")
        raise typer.Exit(code=1)

    typer.echo(f"Diagram written to {target}")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
