"""Komenda: pgr rules — listowanie warstw i reguł zbioru reguł."""

from __future__ import annotations

import argparse

from rich import box
from rich.console import Console
from rich.table import Table

from pgr._kb import find_element, load_kb

console = Console(width=220)


def _atoms(node) -> list:
    from logic import AndNode, AtomNode, ImplicationNode, NotNode, OrNode

    match node:
        case AtomNode():
            return [node]
        case AndNode(operands=operands) | OrNode(operands=operands):
            return [a for o in operands for a in _atoms(o)]
        case NotNode(operand=operand):
            return _atoms(operand)
        case ImplicationNode(premise=premise, conclusion=conclusion):
            return _atoms(premise) + _atoms(conclusion)
    return []


def _fmt_template(kb, atom) -> str:
    triples = [
        f"{kb.system_idtf(t.source)} → {kb.system_idtf(t.target)}"
        for t in atom.template.triples
    ]
    return f"{atom.describe()}: " + ", ".join(triples)


def run(args: argparse.Namespace) -> None:
    from graph_model import Keynodes
    from graph_model.types import INVALID, ElementType
    from inference import RuleSetStructureError, get_rule_tiers
    from kb.utils import get_all_with_type, get_any_by_out_relation
    from logic import FormulaStructureError, LogicExpression
    from matcher import ArgumentSet, TemplateGenerator, TemplateManager, TemplateSearcher

    kb       = load_kb(args.kb)
    rule_set = find_element(kb, args.rules, "zbioru reguł")
    keynodes = Keynodes.resolve(kb)

    try:
        tiers = get_rule_tiers(kb, keynodes, rule_set)
    except RuleSetStructureError as e:
        console.print(f"[red]Błąd struktury zbioru reguł:[/red] {e}")
        raise SystemExit(1)

    if not tiers:
        console.print(f"[yellow]Zbiór reguł {args.rules} nie ma żadnej warstwy.[/yellow]")
        return

    # drzewa budowane tylko do wyświetlenia, bez obliczania
    searcher   = TemplateSearcher(kb)
    expression = LogicExpression(
        kb, keynodes, searcher, TemplateGenerator(kb, searcher), TemplateManager(kb), ArgumentSet()
    )

    table = Table(
        box=box.SIMPLE_HEAD,
        show_header=True,
        header_style="bold white",
        row_styles=["", "dim"],
        expand=False,
    )
    table.add_column("WARSTWA", justify="right", no_wrap=True)
    table.add_column("REGUŁA",  no_wrap=True, style="bold")
    table.add_column("FORMUŁA", no_wrap=False, max_width=120)

    total = 0
    for index, tier in enumerate(tiers):
        for rule in get_all_with_type(kb, tier, ElementType.NODE):
            total += 1
            key = get_any_by_out_relation(kb, rule, keynodes.rrel_main_key_element)
            if key == INVALID:
                table.add_row(str(index), kb.system_idtf(rule), "[red](brak elementu kluczowego)[/red]")
                continue
            try:
                root = expression.build(key)
            except FormulaStructureError as e:
                table.add_row(str(index), kb.system_idtf(rule), f"[red]{e}[/red]")
                continue
            text = root.describe()
            if args.detail:
                text += "\n  " + "\n  ".join(_fmt_template(kb, a) for a in _atoms(root))
            table.add_row(str(index), kb.system_idtf(rule), text)

    console.print()
    console.print(table)
    _pl = "reguła" if total == 1 else ("reguły" if 2 <= total % 10 <= 4 and total % 100 not in range(11, 15) else "reguł")
    console.print(f"  [dim]{total} {_pl} w {len(tiers)} warstwach[/dim]\n")


def add_parser(subparsers: argparse._SubParsersAction) -> None:  # type: ignore[type-arg]
    p = subparsers.add_parser(
        "rules",
        help="Listuje warstwy i reguły zbioru reguł.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description="""
Listuje reguły zbioru reguł w kolejności priorytetu (warstwa 0 = najwyższy)
wraz z formułą: ∧ koniunkcja, ∨ alternatywa, ¬ negacja, → implikacja.

Przykłady:
  pgr rules --kb data/example_kb.json
  pgr rules --kb data/example_kb.json --rules rules --detail
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
        "--detail",
        action="store_true",
        help="Wyświetl łuki szablonów formuł atomowych.",
    )
    p.set_defaults(func=run)
