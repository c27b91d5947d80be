"""Komenda: pgr infer — uruchamia wnioskowanie w przód na bazie wiedzy z pliku JSON."""

from __future__ import annotations

import argparse
import json
import pathlib

from rich import box
from rich.console import Console
from rich.table import Table

from pgr._kb import find_element, load_kb

console = Console(width=200)


# ---------------------------------------------------------------------------
# Wyświetlanie wyników
# ---------------------------------------------------------------------------

def _show_attempts(solution) -> None:
    if not solution.attempts:
        console.print("[dim]Nie próbowano żadnej reguły.[/dim]")
        return

    table = Table(box=box.SIMPLE_HEAD, header_style="bold white", show_header=True)
    table.add_column("#",           justify="right", style="dim", no_wrap=True)
    table.add_column("WARSTWA",     justify="right", no_wrap=True)
    table.add_column("REGUŁA",      style="bold cyan", no_wrap=True)
    table.add_column("UŻYTA",       justify="center", no_wrap=True)
    table.add_column("WYGENEROWANO", justify="right", no_wrap=True)
    for i, attempt in enumerate(solution.attempts, 1):
        used = "[green]tak[/green]" if attempt.used else "[red]nie[/red]"
        table.add_row(str(i), str(attempt.tier), attempt.idtf, used, str(attempt.generated))
    console.print(table)


def _show_solution(solution, target_idtf: str) -> None:
    if solution.achieved:
        console.print(f"\nCel [bold cyan]{target_idtf}[/bold cyan]: [green]OSIĄGNIĘTY[/green]")
    else:
        console.print(f"\nCel [bold cyan]{target_idtf}[/bold cyan]: [red]NIEOSIĄGNIĘTY[/red]")
    console.print(
        f"  [dim]prób reguł: {len(solution.attempts)}, "
        f"użytych: {len(solution.used_rules)}, "
        f"powrotów do warstwy 0: {solution.restarts}, "
        f"wygenerowanych elementów: {len(solution.generated)}[/dim]"
    )


# ---------------------------------------------------------------------------
# Główna logika
# ---------------------------------------------------------------------------

def run(args: argparse.Namespace) -> None:
    from inference import InferenceConfig, InferenceManager
    from kb import dump_kb_dict

    # 1. Baza wiedzy i elementy wejściowe
    kb       = load_kb(args.kb)
    target   = find_element(kb, args.target, "celu")
    rule_set = find_element(kb, args.rules,  "zbioru reguł")
    input_   = find_element(kb, args.input,  "struktury wejściowej")
    output   = find_element(kb, args.output, "struktury wyjściowej")

    # 2. Konfiguracja
    try:
        config = InferenceConfig.from_env()
    except ValueError as e:
        console.print(f"[red]Błąd konfiguracji:[/red] {e}")
        raise SystemExit(1)
    if args.max_restarts is not None:
        if args.max_restarts < 0:
            console.print("[red]--max-restarts musi być nieujemne[/red]")
            raise SystemExit(1)
        config.max_restarts = args.max_restarts

    console.print(
        f"Baza wiedzy: [bold]{pathlib.Path(args.kb).name}[/bold]  "
        f"{len(kb)} elementów  "
        f"cel=[cyan]{args.target}[/cyan]  "
        f"reguły=[cyan]{args.rules}[/cyan]"
        + (f"  wejście=[cyan]{args.input}[/cyan]" if args.input else "")
    )

    # 3. Wnioskowanie
    manager  = InferenceManager(kb, config)
    solution = manager.apply_inference(target, rule_set, input_, output)

    _show_attempts(solution)
    _show_solution(solution, args.target)

    # 4. Zapis bazy po wnioskowaniu
    if args.dump:
        dump_path = pathlib.Path(args.dump)
        dump_path.write_text(
            json.dumps(dump_kb_dict(kb), ensure_ascii=False, indent=2) + "\n",
            encoding="utf-8",
        )
        console.print(f"[green]Zapisano bazę wiedzy:[/green] {dump_path}")

    # 5. Historia przebiegów
    if args.record:
        from history import RunRecord, insert_run
        from pgr._db import get_connection

        record = RunRecord.from_solution(
            solution,
            kb_source=str(args.kb),
            target=args.target,
            rule_set=args.rules,
            input_structure=args.input,
        )
        try:
            conn = get_connection()
        except Exception as e:
            console.print(f"[red]Błąd połączenia z bazą:[/red] {e}")
            raise SystemExit(1)
        try:
            run_id = insert_run(conn, record)
        except Exception as e:
            console.print(f"[red]Błąd zapisu przebiegu:[/red] {e}")
            raise SystemExit(1)
        finally:
            conn.close()
        console.print(f"[green]Zapisano przebieg[/green] id=[bold]{run_id}[/bold]")


# ---------------------------------------------------------------------------
# Rejestracja parsera
# ---------------------------------------------------------------------------

def add_parser(subparsers: argparse._SubParsersAction) -> None:  # type: ignore[type-arg]
    p = subparsers.add_parser(
        "infer",
        help="Uruchamia wnioskowanie w przód na bazie wiedzy z pliku JSON.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description="""
Wczytuje bazę wiedzy z pliku JSON, a następnie stosuje reguły zbioru reguł
warstwa po warstwie, aż szablon celu da się dopasować albo żadna reguła
nie daje postępu.

Przykłady:
  pgr infer --kb data/example_kb.json --target target_mortal_socrates
  pgr infer --kb data/example_kb.json --target target_mortal_socrates --input case
  pgr infer --kb data/example_kb.json --target target_mortal_socrates --dump wynik.json
  pgr infer --kb data/example_kb.json --target target_mortal_socrates --record
        """,
    )
    p.add_argument(
        "--kb", "-k",
        metavar="PLIK",
        required=True,
        help="Plik JSON z bazą wiedzy.",
    )
    p.add_argument(
        "--target", "-t",
        metavar="ID",
        required=True,
        help="Identyfikator struktury-szablonu celu.",
    )
    p.add_argument(
        "--rules", "-r",
        metavar="ID",
        default="rules",
        help="Identyfikator zbioru reguł (domyślnie: rules).",
    )
    p.add_argument(
        "--input", "-i",
        metavar="ID",
        help="Struktura wejściowa ograniczająca wiązania zmiennych.",
    )
    p.add_argument(
        "--output", "-o",
        metavar="ID",
        help="Struktura wyjściowa, do której trafią wygenerowane elementy.",
    )
    p.add_argument(
        "--max-restarts",
        type=int,
        metavar="N",
        dest="max_restarts",
        help="Limit powrotów do warstwy 0 (domyślnie: PGR_MAX_RESTARTS albo 1000).",
    )
    p.add_argument(
        "--dump",
        metavar="PLIK",
        help="Zapisz bazę wiedzy po wnioskowaniu do pliku JSON.",
    )
    p.add_argument(
        "--record",
        action="store_true",
        help="Zapisz przebieg w historii (PostgreSQL).",
    )
    p.set_defaults(func=run)
