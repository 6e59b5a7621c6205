#!/usr/bin/env python3
"""
cli.py — Command-line entry point for CO2DE.

Commands
--------
  analyze   Estimate energy / CO₂ and review a file or directory.
  history   List stored analyses with dashboard totals.
  grid      Show the grid carbon intensity now or for a given hour.
  check     Verify the LLM reviewer is configured and reachable.
"""

from __future__ import annotations

import sys
from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

# Ensure project root is on path when running directly:  python cli.py
sys.path.insert(0, str(Path(__file__).parent))

console = Console()


# ── CLI group ─────────────────────────────────────────────────────────────────

@click.group()
def cli() -> None:
    """CO2DE — estimate the energy and carbon footprint of your source code."""


# ── analyze ───────────────────────────────────────────────────────────────────

@cli.command()
@click.argument("path", type=click.Path(exists=True), metavar="PATH")
@click.option(
    "--llm/--no-llm", "use_llm",
    default=True, show_default=True,
    help="Try the LLM reviewer first (falls back to heuristics).",
)
@click.option("--user-id", default=None, help="Owner recorded on stored results.")
@click.option(
    "--grid-intensity", type=click.FloatRange(min=0), default=None,
    help="Fixed gCO₂/kWh instead of the time-of-day estimate.",
)
@click.option("--save/--no-save", default=True, show_default=True,
              help="Append results to the results store.")
def analyze(path: str, use_llm: bool, user_id: str | None,
            grid_intensity: float | None, save: bool) -> None:
    """
    Estimate energy and CO₂ for PATH and review it.

    PATH may be a single source file or a directory.

    \b
    Examples:
        python cli.py analyze app.js
        python cli.py analyze src/ --no-llm
        python cli.py analyze main.py --grid-intensity 120 --no-save
    """
    from estimator.energy import format_metrics_report
    from estimator.grid import FixedGridIntensity
    from pipeline.orchestrator import Analyzer

    console.rule("[bold green]CO2DE[/bold green]")
    console.print(f"  Path : [cyan]{escape(str(Path(path).resolve()))}[/cyan]")
    console.print(f"  LLM  : [cyan]{use_llm}[/cyan]")
    console.rule()

    try:
        grid = FixedGridIntensity(grid_intensity) if grid_intensity is not None else None
        analyzer = Analyzer(path, use_llm=use_llm, user_id=user_id, save=save, grid=grid)
        records = analyzer.run()
    except (FileNotFoundError, ValueError) as exc:
        console.print(f"[bold red]{escape(str(exc))}[/bold red]")
        sys.exit(1)

    if len(records) == 1:
        r = records[0]
        console.print()
        console.print(escape(format_metrics_report(r)))
        console.print(f"\n[bold]Score[/bold]        : {r.score}/10")
        console.print(f"[bold]Bottleneck[/bold]   : {escape(r.bottleneck)}")
        console.print(f"[bold]Optimization[/bold] : {escape(r.optimization)}")
        console.print(f"[bold]Improvement[/bold]  : {escape(r.improvement)}")


# ── history ───────────────────────────────────────────────────────────────────

@cli.command()
@click.option("--limit", "-n", default=20, show_default=True,
              help="Number of most recent analyses to display.")
@click.option("--user-id", default=None, help="Only show this user's analyses.")
@click.option("--clear", is_flag=True, default=False,
              help="Delete every stored analysis and exit.")
def history(limit: int, user_id: str | None, clear: bool) -> None:
    """
    List stored analyses, newest first, with totals.

    \b
    Examples:
        python cli.py history
        python cli.py history --limit 5 --user-id alice
        python cli.py history --clear
    """
    from store.results import ResultStore

    store = ResultStore()
    if clear:
        store.clear()
        console.print(f"Cleared results store [dim]{escape(str(store.path))}[/dim]")
        return

    records = store.all(user_id=user_id)
    if not records:
        console.print("[yellow]No analyses stored yet.[/yellow]")
        return

    table = Table(title=f"Last {min(limit, len(records))} Analyses", expand=True)
    table.add_column("Date",   style="dim")
    table.add_column("File",   style="cyan", no_wrap=True)
    table.add_column("Lang")
    table.add_column("kWh",    justify="right")
    table.add_column("gCO2e",  justify="right", style="bold")
    table.add_column("Score",  justify="right")

    for r in records[:limit]:
        table.add_row(
            r.created_at[:19].replace("T", " "),
            escape(r.file_name),
            r.language.upper(),
            f"{r.estimated_energy:.3f}",
            f"{r.estimated_co2:.2f}",
            f"{r.score}/10",
        )
    console.print(table)

    summary = store.summary(user_id=user_id)
    console.print(f"  Analyses      : [bold]{summary.count}[/bold]")
    console.print(f"  Total energy  : [bold]{summary.total_energy:.3f}[/bold] kWh")
    console.print(f"  Total CO₂     : [bold green]{summary.total_co2:.2f}[/bold green] gCO2e")
    console.print(f"  Average score : [bold]{summary.average_score:.1f}[/bold]/10")


# ── grid ──────────────────────────────────────────────────────────────────────

@cli.command()
@click.option("--hour", type=click.IntRange(0, 23), default=None,
              help="Hour of day (0–23); defaults to now.")
def grid(hour: int | None) -> None:
    """
    Show the grid carbon intensity used for CO₂ estimates.

    \b
    Examples:
        python cli.py grid
        python cli.py grid --hour 3
    """
    from datetime import datetime

    from estimator.energy import round_half_up
    from estimator.grid import intensity_for_hour, is_night

    if hour is None:
        hour = datetime.now().hour
    intensity = intensity_for_hour(hour)
    period = "night" if is_night(hour) else "day"
    console.print(
        f"Hour {hour:02d} ({period}): [bold]{int(round_half_up(intensity))}[/bold] gCO₂/kWh"
    )


# ── check ─────────────────────────────────────────────────────────────────────

@cli.command()
def check() -> None:
    """
    Check that the LLM reviewer is configured and reachable.

    \b
    Examples:
        python cli.py check
    """
    import requests

    from config import LLM_API_URL, LLM_MODEL
    from llm.client import is_configured, ping

    if not is_configured():
        console.print("[bold red]OPENROUTER_API_KEY is not set.[/bold red]")
        console.print("Reviews will use the heuristic reviewer only.")
        sys.exit(1)

    console.print(f"Checking {LLM_API_URL} (model: {LLM_MODEL}) …")
    try:
        ping()
    except (requests.RequestException, ConnectionError, KeyError, IndexError, ValueError) as exc:
        console.print(f"[bold red]{escape(str(exc))}[/bold red]")
        sys.exit(1)

    console.print("[bold green]LLM endpoint is reachable.[/bold green]")


# ── entry point ───────────────────────────────────────────────────────────────

if __name__ == "__main__":
    cli()
