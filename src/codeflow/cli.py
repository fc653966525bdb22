"""codeflow - Command Line Interface.

Analyze source files into a construct inventory, a linear flowchart and
line-by-line explanations.
"""

import time
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .analyzers import AnalysisResult, analyze as analyze_code
from .graph import EXPORT_FORMATS, export_flowchart
from .storage import HistoryStore, HistoryStoreError
from .utils.config import config
from .utils.logger import setup_from_config


console = Console()

EXTENSION_LANGUAGES = {
    ".js": "javascript",
    ".mjs": "javascript",
    ".cjs": "javascript",
    ".py": "python",
}


def _infer_language(file_path: Path, language: Optional[str]) -> str:
    """Use the explicit language, else guess from the file extension."""
    if language:
        return language
    suffix = file_path.suffix.lower()
    return EXTENSION_LANGUAGES.get(suffix, suffix.lstrip(".") or "text")


def _analyze_file(file_path: Path, language: Optional[str]) -> AnalysisResult:
    try:
        code = file_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise click.ClickException(f"Failed to read {file_path}: {e}")
    return analyze_code(code, _infer_language(file_path, language))


def _get_store() -> HistoryStore:
    return HistoryStore(
        config.history_path,
        default_limit=config.history_limit,
        max_records=config.max_records_per_owner,
    )


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
@click.option(
    "--config", "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="YAML configuration file"
)
@click.pass_context
def cli(ctx, verbose, config_path):
    """codeflow - Explain code as a step-by-step flowchart."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose

    if config_path is not None:
        config.load(config_path)

    setup_from_config(config, verbose=verbose)


@cli.command()
@click.argument("file_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--language", "-l", default=None, help="Language tag (default: from extension)")
@click.option("--json", "as_json", is_flag=True, help="Print the raw analysis as JSON")
@click.option(
    "--save", nargs=2, default=None, metavar="USER_ID FILE_ID",
    help="Store the analysis in the history"
)
def analyze(file_path, language, as_json, save):
    """Analyze a source file.

    Example:
        codeflow analyze app.js
        codeflow analyze script.txt --language python --json
    """
    result = _analyze_file(file_path, language)

    if save:
        user_id, file_id = save
        try:
            _get_store().save(user_id, file_id, result)
        except HistoryStoreError as e:
            console.print(f"[yellow]History save failed:[/yellow] {e}")

    if as_json:
        click.echo(result.to_json(indent=2))
        return

    _display_result(file_path, result)


@cli.command()
@click.argument("user_id")
@click.option("--limit", "-n", type=int, default=None, help="Number of entries")
@click.option("--clear", "clear_history", is_flag=True, help="Delete the user's stored analyses")
def history(user_id, limit, clear_history):
    """Show the most recent analyses stored for a user.

    Example:
        codeflow history alice -n 5
        codeflow history alice --clear
    """
    try:
        if clear_history:
            removed = _get_store().clear(user_id)
            console.print(f"[green]Removed {removed} analyses of '{user_id}'[/green]")
            return
        entries = _get_store().history(user_id, limit=limit)
    except HistoryStoreError as e:
        raise click.ClickException(str(e))

    if not entries:
        console.print(f"[yellow]No analyses found for '{user_id}'[/yellow]")
        return

    table = Table(title=f"History for {user_id} ({len(entries)})")
    table.add_column("Analyzed At", style="cyan")
    table.add_column("Language", style="green")
    table.add_column("Lines", style="magenta")
    table.add_column("Steps", style="blue")

    for entry in entries:
        analysis = entry["explanation"]
        table.add_row(
            entry["analyzedAt"],
            str(analysis.get("language", "?")),
            str(analysis.get("totalLines", "?")),
            str(len(analysis.get("flowchart", {}).get("nodes", []))),
        )
    console.print(table)


@cli.command()
@click.argument("file_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("output", type=click.Path(dir_okay=False, path_type=Path))
@click.option("--language", "-l", default=None, help="Language tag (default: from extension)")
@click.option("--format", "fmt", type=click.Choice(EXPORT_FORMATS), default="json")
def export(file_path, output, language, fmt):
    """Export the flowchart of a file as JSON or GraphML.

    Example:
        codeflow export app.js flow.graphml --format graphml
    """
    result = _analyze_file(file_path, language)
    export_flowchart(result, output, fmt)
    console.print(f"[green]Flowchart exported to:[/green] {output}")


@cli.command()
@click.option("--host", "-H", default=None, help="Host to bind to")
@click.option("--port", "-p", type=int, default=None, help="Port to bind to")
@click.option("--debug", is_flag=True, help="Run Flask in debug mode")
def serve(host, port, debug):
    """Run the HTTP API server."""
    from .server import run_server

    run_server(host=host, port=port, debug=debug)


@cli.command()
@click.argument("file_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--language", "-l", default=None, help="Language tag (default: from extension)")
def watch(file_path, language):
    """Re-analyze a file every time it is saved.

    Example:
        codeflow watch app.js
    """
    from watchdog.events import FileSystemEventHandler
    from watchdog.observers import Observer

    target = file_path.resolve()

    class _ChangeHandler(FileSystemEventHandler):
        def on_modified(self, event):
            if not event.is_directory and Path(event.src_path).resolve() == target:
                _display_result(file_path, _analyze_file(file_path, language))

    _display_result(file_path, _analyze_file(file_path, language))

    observer = Observer()
    observer.schedule(_ChangeHandler(), str(target.parent), recursive=False)
    observer.start()
    console.print(f"[dim]Watching {file_path} (Ctrl+C to stop)[/dim]")

    try:
        while True:
            time.sleep(1)
    except KeyboardInterrupt:
        pass
    finally:
        observer.stop()
        observer.join()


def _display_result(file_path: Path, result: AnalysisResult) -> None:
    """Display an analysis with rich formatting."""
    console.print(Panel(
        f"[bold blue]{file_path}[/bold blue]\n"
        f"Language: [cyan]{result.language}[/cyan]  "
        f"Lines: [cyan]{result.total_lines}[/cyan]",
        title="Code Flow",
        border_style="blue"
    ))

    summary = Table(title="Constructs", show_header=False)
    summary.add_column("Kind", style="cyan")
    summary.add_column("Count", style="green")
    summary.add_row("Functions", str(len(result.functions)))
    summary.add_row("Variables", str(len(result.variables)))
    summary.add_row("Classes", str(len(result.classes)))
    summary.add_row("Imports", str(len(result.imports)))
    summary.add_row("Exports", str(len(result.exports)))
    summary.add_row("Control flow", str(len(result.control_flow)))
    summary.add_row("Async operations", str(len(result.async_operations)))
    console.print(summary)

    steps = Table(title=f"Flowchart ({len(result.flowchart.nodes)} steps)")
    steps.add_column("#", style="magenta")
    steps.add_column("Type", style="cyan")
    steps.add_column("Label", style="green")
    for node in result.flowchart.nodes:
        steps.add_row(str(node.id), node.type.value, node.label)
    console.print(steps)

    if result.explanation:
        console.print("\n[bold]Explanation[/bold]")
        for entry in result.explanation:
            style = "red" if entry.startswith("Syntax Error") else "white"
            console.print(f"  {entry}", style=style, markup=False)


def main():
    cli(obj={})


if __name__ == "__main__":
    main()
