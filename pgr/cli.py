"""
pgr — narzędzie CLI dla ProveGraph.

Użycie:
  pgr [--verbose] <komenda> [opcje]

Komendy:
  infer           Uruchamia wnioskowanie w przód na bazie wiedzy z pliku JSON.
  rules           Listuje warstwy i reguły zbioru reguł.
  validate-rules  Waliduje strukturę zbioru reguł (etapy A–C).
  runs            Listuje zapisane przebiegi wnioskowania.
  apply-schema    Zakłada tabele historii przebiegów (idempotentne).
  reset           Usuwa historię przebiegów z bazy danych.

Konfiguracja: plik .env w katalogu projektu (python-dotenv) oraz zmienne
PGHOST / PGPORT / PGDATABASE / PGUSER / PGPASSWORD, PGR_LOG_LEVEL,
PGR_MAX_RESTARTS, PGR_PERSIST_SATISFIABILITY.
"""

from __future__ import annotations

import argparse
import pathlib
import sys

from dotenv import load_dotenv

# Windows: terminal może używać cp1252, więc wymuszamy UTF-8, żeby polskie znaki
# w tekstach pomocy argparse były wypisywane poprawnie.
if hasattr(sys.stdout, "reconfigure"):
    sys.stdout.reconfigure(encoding="utf-8", errors="replace")
if hasattr(sys.stderr, "reconfigure"):
    sys.stderr.reconfigure(encoding="utf-8", errors="replace")

from pgr._log import setup_logging
from pgr.commands import apply_schema as cmd_apply_schema
from pgr.commands import infer as cmd_infer
from pgr.commands import reset as cmd_reset
from pgr.commands import rules as cmd_rules
from pgr.commands import runs as cmd_runs
from pgr.commands import validate_rules as cmd_validate_rules

ROOT = pathlib.Path(__file__).resolve().parent.parent


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pgr",
        description="ProveGraph — wnioskowanie w przód po grafowej bazie wiedzy.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--version", action="version", version="pgr 0.1.0"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Logowanie na poziomie DEBUG (domyślnie: PGR_LOG_LEVEL albo WARNING).",
    )

    subparsers = parser.add_subparsers(
        title="komendy",
        metavar="<komenda>",
        dest="command",
    )
    subparsers.required = True

    cmd_infer.add_parser(subparsers)
    cmd_rules.add_parser(subparsers)
    cmd_validate_rules.add_parser(subparsers)
    cmd_runs.add_parser(subparsers)
    cmd_apply_schema.add_parser(subparsers)
    cmd_reset.add_parser(subparsers)

    return parser


def main(argv: list[str] | None = None) -> None:
    load_dotenv(ROOT / ".env")
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.verbose)
    args.func(args)


if __name__ == "__main__":
    main()
