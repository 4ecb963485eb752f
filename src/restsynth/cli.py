from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.syntax import Syntax
from rich.table import Table

from restsynth.domain.models import SynthesisOptions
from restsynth.orchestrator.pipeline import inspect_descriptors, run_generate
from restsynth.synth.errors import RestSynthError


app = typer.Typer(no_args_is_help=True, add_completion=False)

console = Console()


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


@app.callback()
def main_callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log synthesis details"),
) -> None:
    _configure_logging(verbose)


def _resolve_source(path: str) -> Path:
    source = Path(path).expanduser().resolve()
    if not source.exists():
        raise typer.BadParameter(f"Descriptor path does not exist: {source}")
    return source


@app.command()
def generate(
    path: str = typer.Argument(..., help="Descriptor file, or directory of *.json descriptors"),
    out: Optional[str] = typer.Option(None, help="Output directory (default: print to stdout)"),
    transport_field: str = typer.Option("transport", help="Name of the injected transport field"),
    class_suffix: str = typer.Option("Connector", help="Suffix appended to the interface name"),
    runtime_module: str = typer.Option("restsynth.runtime", help="Module generated code imports helpers from"),
    scheme: str = typer.Option("http", help="Scheme of the computed base URL"),
    max_files: Optional[int] = typer.Option(None, help="Limit scanned descriptor files (debug)"),
    exclude_dir: Optional[List[str]] = typer.Option(None, help="Directory name to skip (repeatable)"),
) -> None:
    source = _resolve_source(path)
    options = SynthesisOptions(
        transport_field=transport_field,
        class_suffix=class_suffix,
        runtime_module=runtime_module,
        scheme=scheme,
    )
    out_dir = Path(out).expanduser() if out else None

    try:
        result = run_generate(
            source,
            out_dir=out_dir,
            options=options,
            max_files=max_files,
            exclude_dirs=exclude_dir or (),
        )
    except RestSynthError as exc:
        console.print(f"[bold red]error[/bold red] {escape(exc.message)}")
        raise typer.Exit(code=1)

    if out_dir is None:
        for rel_path, text in result.modules.items():
            console.rule(rel_path)
            console.print(Syntax(text, "python", word_wrap=False))
        return

    console.print(f"[bold green]restsynth[/bold green] generate: {source}")
    console.print(f"Descriptor files: {len(result.descriptor_files)}")
    console.print(f"Clients synthesized: [bold]{len(result.clients)}[/bold]")
    for c in result.clients:
        console.print(f"  {c.class_name:<30} {c.base_url:<40} tokens={len(c.tokens)}")
    console.print("")
    for w in result.written:
        console.print(f"[bold green]Wrote[/bold green] {w}")


@app.command()
def inspect(
    path: str = typer.Argument(..., help="Descriptor file, or directory of *.json descriptors"),
    format: str = typer.Option("table", help="Output format: table|json"),
    exclude_dir: Optional[List[str]] = typer.Option(None, help="Directory name to skip (repeatable)"),
) -> None:
    source = _resolve_source(path)
    fmt = format.lower().strip()
    if fmt not in ("table", "json"):
        raise typer.BadParameter("format must be one of: table, json")

    try:
        rows = inspect_descriptors(source, exclude_dirs=exclude_dir or ())
    except RestSynthError as exc:
        console.print(f"[bold red]error[/bold red] {escape(exc.message)}")
        raise typer.Exit(code=1)

    if fmt == "json":
        console.print(json.dumps([r.__dict__ for r in rows], indent=2))
        return

    table = Table(show_header=True, header_style="bold")
    table.add_column("INTERFACE", no_wrap=True)
    table.add_column("METHOD", no_wrap=True)
    table.add_column("VERB", no_wrap=True)
    table.add_column("PATH")
    table.add_column("PARAM", no_wrap=True)
    table.add_column("ROLE", no_wrap=True)
    table.add_column("SHAPE", no_wrap=True)

    for r in rows:
        table.add_row(r.interface, r.method, r.verb, r.path, r.parameter, r.role, r.shape)

    console.print(table)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
