import json
import logging
from dataclasses import asdict
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.text import Text
from rich.tree import Tree

from foldctx import __version__
from foldctx.config import ContextConfig, load_context_config
from foldctx.models import FoldNode, FoldTree, InvalidRangeError
from foldctx.providers import BaseProvider, get_provider, get_provider_for_file
from foldctx.session import FoldContextSession

app = typer.Typer(
    help="foldctx - enclosing fold context for source files",
    no_args_is_help=True,
)

console = Console()


def _select_provider(file_path: Path, provider_name: str, config: ContextConfig) -> BaseProvider:
    """Pick the provider named on the command line, falling back to the configured one."""
    name = provider_name or config.provider
    if name == "auto":
        return get_provider_for_file(file_path, tab_size=config.tab_size)
    return get_provider(name, tab_size=config.tab_size)


def _open_session(file_path: Path, provider_name: str) -> FoldContextSession:
    """Attach a file to a new session, keyed by its resolved path."""
    if not file_path.is_file():
        raise FileNotFoundError(f"File not found: {file_path}")

    config = load_context_config()
    session = FoldContextSession(config=config)
    provider = _select_provider(file_path, provider_name, config)
    session.attach(str(file_path.resolve()), file_path.read_text(), provider=provider)
    return session


def _node_to_dict(node: FoldNode) -> dict:
    """Convert a fold node and its descendants to a JSON-friendly dict (1-indexed lines)."""
    result = {
        "start": node.start_line + 1,
        "end": node.end_line + 1,
        "children": [_node_to_dict(child) for child in node.children],
    }
    if node.kind is not None:
        result["kind"] = node.kind.value
    return result


def _add_rich_nodes(branch: Tree, node: FoldNode, lines: list[str]) -> None:
    for child in node.children:
        text = lines[child.start_line].strip() if child.start_line < len(lines) else ""
        label = f"[cyan]{child.start_line + 1}-{child.end_line + 1}[/cyan] {escape(text)}"
        if child.kind is not None:
            label += f" [dim]({child.kind.value})[/dim]"
        _add_rich_nodes(branch.add(label, highlight=False), child, lines)


def _render_tree(file_path: Path, tree: FoldTree, lines: list[str]) -> Tree:
    root = Tree(f"[bold]{escape(str(file_path))}[/bold] ({tree.line_count} lines)")
    _add_rich_nodes(root, tree.root, lines)
    return root


@app.command()
def context(
    file_path: Path = typer.Argument(..., help="Source file to inspect"),
    line: int = typer.Argument(..., help="1-indexed cursor line"),
    max_lines: Optional[int] = typer.Option(
        None, "--max-lines", "-n", help="Soft limit on context lines (default from .foldctx)"
    ),
    provider: str = typer.Option(
        "", "--provider", "-p", help="Range provider: auto, python or indent"
    ),
    as_json: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """Show the enclosing fold lines for a cursor position.

    Args:
        file_path: Source file to inspect
        line: 1-indexed cursor line
    """
    try:
        session = _open_session(file_path, provider)
        document_id = str(file_path.resolve())
        context_lines = session.context(document_id, line, max_lines)
    except (FileNotFoundError, InvalidRangeError, ValueError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)
    except Exception as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=2)

    if as_json:
        typer.echo(json.dumps([asdict(c) for c in context_lines], indent=2))
        return

    if not context_lines:
        return

    table = Table(show_header=True, header_style="bold")
    table.add_column("Line", justify="right", style="cyan")
    table.add_column("Text", overflow="fold")
    for context_line in context_lines:
        table.add_row(str(context_line.lnum), Text(context_line.text))
    console.print(table)


@app.command()
def folds(
    file_path: Path = typer.Argument(..., help="Source file to inspect"),
    provider: str = typer.Option(
        "", "--provider", "-p", help="Range provider: auto, python or indent"
    ),
    as_json: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """Show the fold tree of a file.

    Args:
        file_path: Source file to inspect
    """
    try:
        session = _open_session(file_path, provider)
        document_id = str(file_path.resolve())
        tree = session.tree(document_id)
        lines = session.get_document(document_id).lines
    except (FileNotFoundError, InvalidRangeError, ValueError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)
    except Exception as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=2)

    if as_json:
        output = {
            "line_count": tree.line_count,
            "folds": [_node_to_dict(child) for child in tree.root.children],
        }
        typer.echo(json.dumps(output, indent=2))
        return

    console.print(_render_tree(file_path, tree, lines))


def _version_callback(value: bool):
    """Show version and exit."""
    if value:
        console.print(f"foldctx version {__version__}")
        raise typer.Exit()


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-v",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Enable debug logging"),
):
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")
