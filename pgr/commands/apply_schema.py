"""Komenda: pgr apply-schema — zakłada tabele historii przebiegów (inference_run, rule_attempt)."""

from __future__ import annotations

import argparse

from rich.console import Console

from pgr._db import get_connection

console = Console()


def run(args: argparse.Namespace) -> None:
    from history import SCHEMA_PATH, apply_schema

    if not SCHEMA_PATH.exists():
        console.print(f"[red]Brak pliku schematu:[/red] {SCHEMA_PATH}")
        raise SystemExit(1)

    try:
        conn = get_connection()
    except Exception as e:
        console.print(f"[red]Błąd połączenia z bazą:[/red] {e}")
        raise SystemExit(1)

    try:
        report = apply_schema(conn)
    except Exception as e:
        console.print(f"[red]Błąd wykonania schematu (wycofano):[/red] {e}")
        raise SystemExit(1)
    finally:
        conn.close()

    for table in report.created:
        console.print(f"[green]Utworzono tabelę [bold]{table}[/bold][/green]")
    for table in report.existing:
        console.print(f"[yellow]Tabela [bold]{table}[/bold] już istniała.[/yellow]")
    if report.missing:
        console.print(f"[red]Schemat nie utworzył tabel:[/red] {', '.join(report.missing)}")
        raise SystemExit(1)

    console.print(f"[dim]{SCHEMA_PATH.name}: {report.statements} instrukcji. Gotowe.[/dim]")


def add_parser(subparsers: argparse._SubParsersAction) -> None:  # type: ignore[type-arg]
    p = subparsers.add_parser(
        "apply-schema",
        help="Zakłada tabele historii przebiegów (idempotentne).",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description="""
Wykonuje db/schema.sql w jednej transakcji i wypisuje, które tabele historii
przebiegów (inference_run, rule_attempt) zostały utworzone, a które już istniały.

Usunięcie tabel: pgr reset schema.

Przykład:
  pgr apply-schema
        """,
    )
    p.set_defaults(func=run)
