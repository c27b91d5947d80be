"""Wspólne dla komend: wczytanie bazy wiedzy z pliku i odszukanie elementów po id."""

from __future__ import annotations

import pathlib

from rich.console import Console

from graph_model.types import INVALID, Handle
from kb import KnowledgeBase, KnowledgeBaseFormatError, load_kb_json

console = Console()


def load_kb(path_str: str) -> KnowledgeBase:
    path = pathlib.Path(path_str)
    if not path.exists():
        console.print(f"[red]Brak pliku bazy wiedzy:[/red] {path}")
        raise SystemExit(1)
    try:
        return load_kb_json(path)
    except KnowledgeBaseFormatError as e:
        console.print(f"[red]Błąd wczytywania bazy wiedzy:[/red] {e}")
        raise SystemExit(1)


def find_element(kb: KnowledgeBase, idtf: str | None, what: str) -> Handle:
    """Handle elementu o identyfikatorze idtf; brak idtf → INVALID; nieznany idtf → SystemExit(1)."""
    if not idtf:
        return INVALID
    handle = kb.find_by_idtf(idtf)
    if handle == INVALID:
        console.print(f"[red]Nie znaleziono {what}:[/red] {idtf}")
        raise SystemExit(1)
    return handle
