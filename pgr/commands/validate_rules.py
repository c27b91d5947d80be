"""Komenda: pgr validate-rules — waliduje strukturę zbioru reguł w bazie wiedzy."""

from __future__ import annotations

import argparse
import dataclasses
import json
import sys

from rich import box
from rich.console import Console
from rich.table import Table

from pgr._kb import load_kb

console = Console()


def run(args: argparse.Namespace) -> None:
    from graph_model.types import INVALID
    from validator import RuleSetValidator

    kb       = load_kb(args.kb)
    rule_set = kb.find_by_idtf(args.rules)
    if rule_set == INVALID:
        console.print(f"[yellow]Nie znaleziono zbioru reguł:[/yellow] {args.rules}")

    report = RuleSetValidator(kb).validate(rule_set)

    # --- Wynik na konsoli ------------------------------------------------
    if report.is_valid:
        n_rules = sum(len(rules) for rules in report.tiers)
        console.print(
            f"[green]OK[/green]  Zbiór reguł [bold]{args.rules}[/bold] jest poprawny "
            f"({len(report.tiers)} warstw, {n_rules} reguł)."
        )
    else:
        console.print(
            f"[red]BŁĄD[/red]  Zbiór reguł [bold]{args.rules}[/bold]: "
            f"{len(report.errors)} błąd(ów)."
        )

        table = Table(box=box.SIMPLE, show_header=True, header_style="bold")
        table.add_column("Kod",      style="yellow", no_wrap=True)
        table.add_column("Ścieżka", style="cyan",   no_wrap=True)
        table.add_column("Komunikat")
        table.add_column("Poprawka", style="dim")

        for e in report.errors:
            table.add_row(e.code, e.path, e.message, e.expected_fix)

        console.print(table)

    if report.warnings:
        console.print("[yellow]Ostrzeżenia:[/yellow]")
        for w in report.warnings:
            console.print(f"  [yellow]·[/yellow] {w}")

    # --- Wyjście JSON (opcjonalnie) --------------------------------------
    if args.json_output:
        out: dict = {
            "is_valid": report.is_valid,
            "errors": [dataclasses.asdict(e) for e in report.errors],
            "warnings": report.warnings,
        }
        print(json.dumps(out, ensure_ascii=False, indent=2))

    if not report.is_valid:
        sys.exit(1)


def add_parser(subparsers: argparse._SubParsersAction) -> None:  # type: ignore[type-arg]
    p = subparsers.add_parser(
        "validate-rules",
        help="Waliduje strukturę zbioru reguł w bazie wiedzy.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description="""\
Waliduje zbiór reguł zapisany w bazie wiedzy (etapy A–C):

  A  Zbiór reguł           (istnieje, pierwsza warstwa oznaczona rrel_1)
  B  Łańcuch warstw        (brak cykli nrel_basic_sequence, puste warstwy)
  C  Reguły                (element kluczowy, rodzaje formuł, arność negacji,
                            niepuste formuły atomowe, oznaczenie implikacji)

Przykłady:
  pgr validate-rules --kb data/example_kb.json
  pgr validate-rules --kb data/example_kb.json --rules rules --json-output
        """,
    )
    p.add_argument(
        "--kb", "-k",
        metavar="PLIK",
        required=True,
        help="Plik JSON z bazą wiedzy.",
    )
    p.add_argument(
        "--rules", "-r",
        metavar="ID",
        default="rules",
        help="Identyfikator zbioru reguł (domyślnie: rules).",
    )
    p.add_argument(
        "--json-output",
        action="store_true",
        dest="json_output",
        help="Wypisz raport również jako JSON na stdout.",
    )
    p.set_defaults(func=run)
