"""
kb/loader.py — wczytywanie i zapis bazy wiedzy w formacie JSON.

Oczekiwany format::

    {
        "elements": [
            {"id": "concept_q", "type": "node_const"},
            {"id": "_x",        "type": "node_var"},
            {"id": "q_x",       "type": "arc_access_var_pos_perm", "src": "concept_q", "tgt": "_x"},
            {"id": "atom_q",    "type": "node_const_struct", "members": ["concept_q", "_x", "q_x"]}
        ]
    }

Zasady:
  - element bez src/tgt jest węzłem (domyślnie node_const), id wymagane
  - element z src/tgt jest łukiem (domyślnie arc_access_const_pos_perm), id opcjonalne
  - łuki mogą wskazywać łuki zdefiniowane później (referencje w przód)
  - members tworzy łuki przynależności z elementu do wymienionych elementów, w kolejności

Publiczne API:
  load_kb_json(path)  -> KnowledgeBase
  load_kb_dict(data)  -> KnowledgeBase
  dump_kb_dict(kb)    -> dict
"""

from __future__ import annotations

import functools
import json
import pathlib
from typing import Any

import jsonschema

from graph_model.types import ElementType, Handle

from .store import KnowledgeBase

SCHEMA_PATH = pathlib.Path(__file__).resolve().parent / "kb.schema.json"

_DEFAULT_NODE = ElementType.NODE_CONST
_DEFAULT_ARC  = ElementType.ARC_ACCESS_CONST_POS_PERM


class KnowledgeBaseFormatError(ValueError):
    """Nieprawidłowa zawartość pliku bazy wiedzy."""


@functools.cache
def _schema() -> dict[str, Any]:
    return json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))


# ---------------------------------------------------------------------------
# Wczytywanie
# ---------------------------------------------------------------------------

def load_kb_json(path: pathlib.Path) -> KnowledgeBase:
    """Wczytuje bazę wiedzy z pliku JSON."""
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise KnowledgeBaseFormatError(f"Błąd parsowania JSON ({path.name}): {e}") from e
    return load_kb_dict(raw)


def load_kb_dict(data: dict[str, Any]) -> KnowledgeBase:
    """
    Buduje bazę wiedzy ze słownika (po json.loads).

    Raises:
        KnowledgeBaseFormatError gdy dane nie spełniają schematu,
        zawierają zdublowane id lub nierozwiązywalne referencje.
    """
    validator = jsonschema.Draft202012Validator(_schema())
    errors = sorted(validator.iter_errors(data), key=lambda e: list(e.absolute_path))
    if errors:
        first = errors[0]
        path  = "/" + "/".join(str(p) for p in first.absolute_path)
        raise KnowledgeBaseFormatError(f"Naruszenie schematu na ścieżce {path}: {first.message}")

    kb = KnowledgeBase()
    handles: dict[str, Handle] = {}
    pending: list[dict[str, Any]] = []

    # 1. Węzły
    for item in data["elements"]:
        if "src" in item:
            pending.append(item)
            continue
        idtf = item["id"]
        if idtf in handles:
            raise KnowledgeBaseFormatError(f"Zdublowany identyfikator elementu: '{idtf}'")
        type = _parse_type(item, _DEFAULT_NODE)
        if not type.is_node:
            raise KnowledgeBaseFormatError(f"Element '{idtf}' bez src/tgt musi być węzłem, podano {item['type']}")
        handles[idtf] = kb.create_node(type, idtf)

    # 2. Łuki, do wyczerpania referencji w przód
    while pending:
        remaining: list[dict[str, Any]] = []
        for item in pending:
            if item["src"] not in handles or item["tgt"] not in handles:
                remaining.append(item)
                continue
            type = _parse_type(item, _DEFAULT_ARC)
            if not type.is_arc:
                raise KnowledgeBaseFormatError(f"Element z src/tgt musi być łukiem, podano {item['type']}")
            arc = kb.create_arc(type, handles[item["src"]], handles[item["tgt"]])
            if "id" in item:
                if item["id"] in handles:
                    raise KnowledgeBaseFormatError(f"Zdublowany identyfikator elementu: '{item['id']}'")
                kb.set_idtf(arc, item["id"])
                handles[item["id"]] = arc
        if len(remaining) == len(pending):
            missing = sorted({
                ref for item in remaining for ref in (item["src"], item["tgt"]) if ref not in handles
            })
            raise KnowledgeBaseFormatError(f"Nierozwiązane referencje łuków: {', '.join(missing)}")
        pending = remaining

    # 3. Przynależność (members)
    for item in data["elements"]:
        members = item.get("members") or []
        if not members:
            continue
        owner = handles[item["id"]] if "id" in item else None
        if owner is None:
            raise KnowledgeBaseFormatError("Element z members musi mieć id")
        for member in members:
            if member not in handles:
                raise KnowledgeBaseFormatError(f"Nieznany element '{member}' w members '{item['id']}'")
            kb.create_arc(_DEFAULT_ARC, owner, handles[member])

    return kb


def _parse_type(item: dict[str, Any], default: ElementType) -> ElementType:
    if "type" not in item:
        return default
    try:
        return ElementType.from_name(item["type"])
    except ValueError as e:
        raise KnowledgeBaseFormatError(str(e)) from e


# ---------------------------------------------------------------------------
# Zapis
# ---------------------------------------------------------------------------

def dump_kb_dict(kb: KnowledgeBase) -> dict[str, Any]:
    """
    Serializuje bazę do formatu load_kb_dict (bez members — każdy łuk jawnie).
    Elementy bez identyfikatora dostają id '_<handle>'.
    """
    def ref(handle: Handle) -> str:
        return kb.get_idtf(handle) or f"_{handle}"

    items: list[dict[str, Any]] = []
    for element in kb.elements():
        entry: dict[str, Any] = {"id": ref(element.handle), "type": element.type.to_name()}
        if element.is_arc:
            entry["src"] = ref(element.source)
            entry["tgt"] = ref(element.target)
        items.append(entry)
    return {"elements": items}
