"""Komenda: pgr runs — listowanie zapisanych przebiegów wnioskowania."""

from __future__ import annotations

import argparse

from rich import box
from rich.console import Console
from rich.table import Table

from pgr._db import get_connection

console = Console(width=200)


def _show_runs(runs) -> None:
    table = Table(
        box=box.SIMPLE_HEAD,
        show_header=True,
        header_style="bold white",
        row_styles=["", "dim"],
        expand=False,
    )
    table.add_column("ID",       justify="right", no_wrap=True, style="bold")
    table.add_column("KIEDY",    no_wrap=True)
    table.add_column("BAZA",     no_wrap=True, max_width=40)
    table.add_column("CEL",      no_wrap=True, style="cyan")
    table.add_column("WYNIK",    justify="center", no_wrap=True)
    table.add_column("PRÓBY",    justify="right", no_wrap=True)
    table.add_column("POWROTY",  justify="right", no_wrap=True)
    table.add_column("WYGEN.",   justify="right", no_wrap=True)

    for r in runs:
        result = "[green]tak[/green]" if r.achieved else "[red]nie[/red]"
        table.add_row(
            str(r.id),
            r.created_at.strftime("%Y-%m-%d %H:%M:%S"),
            r.kb_source,
            r.target,
            result,
            str(r.attempt_count),
            str(r.restarts),
            str(r.generated),
        )
    console.print()
    console.print(table)


def _show_attempts(run_id: int, attempts) -> None:
    if not attempts:
        console.print(f"[yellow]Brak prób reguł dla przebiegu {run_id}.[/yellow]")
        return
    table = Table(box=box.SIMPLE_HEAD, header_style="bold white", show_header=True)
    table.add_column("#",            justify="right", style="dim", no_wrap=True)
    table.add_column("WARSTWA",      justify="right", no_wrap=True)
    table.add_column("REGUŁA",       style="bold cyan", no_wrap=True)
    table.add_column("UŻYTA",        justify="center", no_wrap=True)
    table.add_column("WYGENEROWANO", justify="right", no_wrap=True)
    for a in attempts:
        used = "[green]tak[/green]" if a.used else "[red]nie[/red]"
        table.add_row(str(a.position + 1), str(a.tier), a.rule_idtf, used, str(a.generated))
    console.print(f"\nPrzebieg [bold]{run_id}[/bold]:")
    console.print(table)


def run(args: argparse.Namespace) -> None:
    from history import fetch_attempts, fetch_runs

    try:
        conn = get_connection()
    except Exception as e:
        console.print(f"[red]Błąd połączenia z bazą:[/red] {e}")
        raise SystemExit(1)

    try:
        if args.run is not None:
            attempts = fetch_attempts(conn, args.run)
        else:
            runs = fetch_runs(conn, args.limit)
    except Exception as e:
        console.print(f"[red]Błąd odczytu historii:[/red] {e}")
        raise SystemExit(1)
    finally:
        conn.close()

    if args.run is not None:
        _show_attempts(args.run, attempts)
        return

    if not runs:
        console.print("[yellow]Brak zapisanych przebiegów.[/yellow]")
        return
    _show_runs(runs)
    console.print(f"  [dim]{len(runs)} przebiegów (limit {args.limit})[/dim]\n")


def add_parser(subparsers: argparse._SubParsersAction) -> None:  # type: ignore[type-arg]
    p = subparsers.add_parser(
        "runs",
        help="Listuje zapisane przebiegi wnioskowania (pgr infer --record).",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description="""
Listuje przebiegi zapisane w tabeli inference_run, od najnowszego.
Z --run wyświetla próby reguł jednego przebiegu.

Przykłady:
  pgr runs
  pgr runs --limit 50
  pgr runs --run 12
        """,
    )
    p.add_argument(
        "--limit", "-n",
        type=int,
        default=20,
        metavar="N",
        help="Maksymalna liczba przebiegów (domyślnie 20).",
    )
    p.add_argument(
        "--run",
        type=int,
        metavar="ID",
        help="Pokaż próby reguł przebiegu o danym id.",
    )
    p.set_defaults(func=run)
