"""Komenda: pgr reset — usuwanie historii przebiegów z bazy danych."""

from __future__ import annotations

import argparse

from rich.console import Console

from pgr._db import get_connection

console = Console()


def _drop_schema(conn) -> None:
    from history import HISTORY_TABLES, existing_tables

    with conn, conn.cursor() as cur:
        existing = existing_tables(cur)
        # odwrotna kolejność zależności: najpierw rule_attempt
        for table in reversed(HISTORY_TABLES):
            if table in existing:
                cur.execute(f"DROP TABLE {table}")
                console.print(f"[green]Usunięto tabelę [bold]{table}[/bold][/green]")
            else:
                console.print(f"[yellow]Tabela [bold]{table}[/bold] nie istnieje, pominięto.[/yellow]")


def run(args: argparse.Namespace) -> None:
    from history import delete_runs

    try:
        conn = get_connection()
    except Exception as e:
        console.print(f"[red]Błąd połączenia z bazą:[/red] {e}")
        raise SystemExit(1)

    try:
        if args.cel == "runs":
            n = delete_runs(conn)
            console.print(f"[green]Usunięto {n} przebiegów z [bold]inference_run[/bold][/green]")
        else:
            _drop_schema(conn)
    except Exception as e:
        console.print(f"[red]Błąd czyszczenia bazy:[/red] {e}")
        raise SystemExit(1)
    finally:
        conn.close()

    console.print("[dim]Gotowe.[/dim]")


def add_parser(subparsers: argparse._SubParsersAction) -> None:  # type: ignore[type-arg]
    p = subparsers.add_parser(
        "reset",
        help="Usuwa historię przebiegów z bazy (bez potwierdzenia).",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description="""
Usuwa dane historii przebiegów. Działa natychmiast, bez pytania o potwierdzenie.

Cele:
  runs     Usuwa wszystkie przebiegi (próby reguł kaskadowo).
  schema   Usuwa tabele rule_attempt i inference_run (odtworzenie: pgr apply-schema).

Przykłady:
  pgr reset runs
  pgr reset schema
        """,
    )
    p.add_argument(
        "cel",
        metavar="CEL",
        choices=["runs", "schema"],
        help="Co usunąć: runs | schema",
    )
    p.set_defaults(func=run)
