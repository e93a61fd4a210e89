from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from routelint.config import Settings
from routelint.engine.diagnostics import Severity
from routelint.orchestrator.pipeline import CheckResult, route_records, run_check, sorted_diagnostics

app = typer.Typer(no_args_is_help=True, add_completion=False)

console = Console()

_SEVERITY_STYLE = {
    Severity.ERROR: "bold red",
    Severity.MANDATORY_WARNING: "bold yellow",
    Severity.WARNING: "yellow",
}


def _setup_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _resolve_path(path: str) -> Path:
    p = Path(path).expanduser().resolve()
    if not p.exists():
        raise typer.BadParameter(f"Path does not exist: {p}")
    return p


def _check_format(format: str) -> str:
    fmt = format.lower().strip()
    if fmt not in ("table", "json"):
        raise typer.BadParameter("format must be one of: table, json")
    return fmt


def _location(file_path: str, line: int, root: str) -> str:
    try:
        rel = Path(file_path).relative_to(root)
    except ValueError:
        rel = Path(file_path)
    return f"{rel}:{line}"


def _run(path: str, max_files: Optional[int], fail_on_warning: bool, verbose: bool) -> CheckResult:
    settings = Settings()
    if fail_on_warning:
        settings = settings.model_copy(update={"fail_on_warning": True})
    _setup_logging("DEBUG" if verbose else settings.log_level)
    return run_check(_resolve_path(path), settings=settings, max_files=max_files)


@app.command()
def check(
    path: str = typer.Argument(".", help="File or directory to check"),
    format: str = typer.Option("table", help="Output format: table|json"),
    max_files: Optional[int] = typer.Option(None, help="Limit scanned files (debug)"),
    fail_on_warning: bool = typer.Option(False, "--fail-on-warning", help="Exit 1 on warnings too"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    fmt = _check_format(format)
    result = _run(path, max_files, fail_on_warning, verbose)

    if fmt == "json":
        # plain echo: rich would soft-wrap long lines
        typer.echo(result.to_report().model_dump_json(indent=2))
        raise typer.Exit(code=1 if result.has_errors else 0)

    console.print(f"[bold green]routelint[/bold green] check: {result.root}")
    console.print(f"Python files scanned: {result.files_scanned}")
    console.print(f"Routes composed: {len(result.routes)}")
    console.print("")

    if result.diagnostics:
        table = Table(show_header=True, header_style="bold")
        table.add_column("SEVERITY", no_wrap=True)
        table.add_column("FILE:LINE", no_wrap=True)
        table.add_column("DECLARATION")
        table.add_column("MESSAGE")
        for d in sorted_diagnostics(result.diagnostics):
            style = _SEVERITY_STYLE[d.severity]
            table.add_row(
                f"[{style}]{d.severity.value}[/{style}]",
                _location(d.anchor.file_path, d.anchor.line, result.root),
                d.anchor.qualname,
                # failure tracebacks are long; first line is enough here
                d.message.splitlines()[0] if d.message else "",
            )
        console.print(table)

    errors = result.count(Severity.ERROR)
    warnings = result.count(Severity.WARNING) + result.count(Severity.MANDATORY_WARNING)
    colour = "red" if result.has_errors else "green"
    console.print(f"[bold {colour}]{errors} error(s), {warnings} warning(s)[/bold {colour}]")

    if result.has_errors:
        raise typer.Exit(code=1)


@app.command()
def routes(
    path: str = typer.Argument(".", help="File or directory to inspect"),
    verb: Optional[str] = typer.Option(None, help="Filter by HTTP verb (GET/POST/...)"),
    path_contains: Optional[str] = typer.Option(None, help="Substring match on route path"),
    format: str = typer.Option("table", help="Output format: table|json"),
) -> None:
    fmt = _check_format(format)
    result = _run(path, None, False, False)

    rows = [r for route in result.routes for r in route_records(route)]
    if verb:
        rows = [r for r in rows if r.verb == verb.upper()]
    if path_contains:
        rows = [r for r in rows if path_contains in r.path]
    rows.sort(key=lambda r: (r.path, r.verb, r.handler_name))

    if fmt == "json":
        typer.echo(json.dumps([r.model_dump() for r in rows], indent=2))
        return

    console.print(f"[bold]Routes:[/bold] {len(rows)}")
    table = Table(show_header=True, header_style="bold")
    table.add_column("VERB", no_wrap=True)
    table.add_column("PATH")
    table.add_column("HANDLER")
    table.add_column("FILE:LINE", no_wrap=True)
    for r in rows:
        table.add_row(r.verb, r.path, r.handler_name, _location(r.file_path, r.line, result.root))
    console.print(table)


@app.command()
def ping() -> None:
    console.print("pong")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
