"""
kb/store.py — grafowa baza wiedzy w pamięci.

Baza przechowuje węzły i łuki (łuk może prowadzić do innego łuku).
Każdy element ma Handle; identyfikatory systemowe (idtf) są opcjonalne i unikalne.

Iteratory:
  iterator3(src, arc, tgt)             → krotki (src, arc, tgt)
  iterator5(src, arc, tgt, attr, rel)  → krotki (src, arc, tgt, attr_arc, rel)

Każda pozycja iteratora to albo konkretny Handle, albo ElementType (filtr).
Wyniki są migawką — bezpieczne do modyfikacji bazy podczas iteracji.
"""

from __future__ import annotations

import itertools
from collections.abc import Iterable

from graph_model.types import INVALID, Element, ElementType, Handle


type Position = Handle | ElementType


class InvalidElementError(ValueError):
    """Operacja na nieistniejącym (lub usuniętym) elemencie."""


class KnowledgeBase:
    """
    Grafowa baza wiedzy: węzły, łuki, identyfikatory systemowe.

    Użycie::

        kb   = KnowledgeBase()
        cls  = kb.resolve_node("concept_person")
        john = kb.create_node(idtf="john")
        kb.create_arc(ElementType.ARC_ACCESS_CONST_POS_PERM, cls, john)
    """

    def __init__(self) -> None:
        self._elements: dict[Handle, Element]   = {}
        self._by_idtf:  dict[str, Handle]       = {}
        # łuki wychodzące / przychodzące w kolejności utworzenia
        self._out:      dict[Handle, list[Handle]] = {}
        self._in:       dict[Handle, list[Handle]] = {}
        self._counter = itertools.count(1)

    # ------------------------------------------------------------------
    # Tworzenie i usuwanie
    # ------------------------------------------------------------------

    def create_node(
        self,
        type: ElementType = ElementType.NODE_CONST,
        idtf: str | None = None,
    ) -> Handle:
        if not type.is_node:
            raise ValueError(f"Typ {type!r} nie jest typem węzła")
        handle = next(self._counter)
        self._elements[handle] = Element(handle=handle, type=type)
        self._out[handle] = []
        self._in[handle]  = []
        if idtf is not None:
            self.set_idtf(handle, idtf)
        return handle

    def create_arc(self, type: ElementType, source: Handle, target: Handle) -> Handle:
        if not type.is_arc:
            raise ValueError(f"Typ {type!r} nie jest typem łuku")
        self._require(source)
        self._require(target)
        handle = next(self._counter)
        self._elements[handle] = Element(handle=handle, type=type, source=source, target=target)
        self._out[handle] = []
        self._in[handle]  = []
        self._out[source].append(handle)
        self._in[target].append(handle)
        return handle

    def erase_element(self, handle: Handle) -> bool:
        """
        Usuwa element wraz ze wszystkimi incydentnymi łukami (rekurencyjnie).
        Zwraca False gdy element nie istnieje.
        """
        if handle not in self._elements:
            return False
        stack = [handle]
        while stack:
            current = stack.pop()
            element = self._elements.pop(current, None)
            if element is None:
                continue
            stack.extend(self._out.pop(current, []))
            stack.extend(self._in.pop(current, []))
            if element.idtf is not None:
                self._by_idtf.pop(element.idtf, None)
            if element.is_arc:
                if element.source in self._out:
                    self._out[element.source].remove(current)
                if element.target in self._in:
                    self._in[element.target].remove(current)
        return True

    # ------------------------------------------------------------------
    # Identyfikatory systemowe
    # ------------------------------------------------------------------

    def set_idtf(self, handle: Handle, idtf: str) -> None:
        element = self._require(handle)
        owner = self._by_idtf.get(idtf)
        if owner is not None and owner != handle:
            raise ValueError(f"Identyfikator '{idtf}' jest już zajęty przez element {owner}")
        if element.idtf is not None:
            self._by_idtf.pop(element.idtf, None)
        element.idtf = idtf
        self._by_idtf[idtf] = handle

    def find_by_idtf(self, idtf: str) -> Handle:
        """Zwraca Handle elementu o danym identyfikatorze lub INVALID."""
        return self._by_idtf.get(idtf, INVALID)

    def resolve_node(self, idtf: str, type: ElementType = ElementType.NODE_CONST) -> Handle:
        """Znajduje element po identyfikatorze; gdy brak — tworzy węzeł."""
        handle = self.find_by_idtf(idtf)
        if handle == INVALID:
            handle = self.create_node(type, idtf)
        return handle

    def get_idtf(self, handle: Handle) -> str | None:
        return self._require(handle).idtf

    def system_idtf(self, handle: Handle) -> str:
        """Identyfikator do komunikatów: idtf albo '#<handle>'."""
        element = self._elements.get(handle)
        if element is not None and element.idtf:
            return element.idtf
        return f"#{handle}"

    # ------------------------------------------------------------------
    # Odczyt
    # ------------------------------------------------------------------

    def is_valid(self, handle: Handle) -> bool:
        return handle != INVALID and handle in self._elements

    def get_type(self, handle: Handle) -> ElementType:
        return self._require(handle).type

    def get_source(self, handle: Handle) -> Handle:
        return self._require_arc(handle).source

    def get_target(self, handle: Handle) -> Handle:
        return self._require_arc(handle).target

    def get_element(self, handle: Handle) -> Element:
        return self._require(handle)

    def elements(self) -> Iterable[Element]:
        """Wszystkie elementy w kolejności utworzenia."""
        return list(self._elements.values())

    def __len__(self) -> int:
        return len(self._elements)

    def __contains__(self, handle: object) -> bool:
        return handle in self._elements

    # ------------------------------------------------------------------
    # Iteratory
    # ------------------------------------------------------------------

    def iterator3(
        self,
        source: Position,
        arc:    ElementType,
        target: Position,
    ) -> list[tuple[Handle, Handle, Handle]]:
        """
        Zwraca trójki (source, arc, target) pasujące do pozycji.

        source/target: Handle (ustalony element) lub ElementType (filtr typu).
        arc:           filtr typu łuku.
        """
        if not isinstance(source, ElementType):
            candidates = self._out.get(source, [])
        elif not isinstance(target, ElementType):
            candidates = self._in.get(target, [])
        else:
            candidates = [h for h, e in self._elements.items() if e.is_arc]

        result: list[tuple[Handle, Handle, Handle]] = []
        for arc_handle in candidates:
            element = self._elements[arc_handle]
            if not element.type.matches(arc):
                continue
            if not self._position_matches(element.source, source):
                continue
            if not self._position_matches(element.target, target):
                continue
            result.append((element.source, arc_handle, element.target))
        return result

    def iterator5(
        self,
        source:    Position,
        arc:       ElementType,
        target:    Position,
        attr_arc:  ElementType,
        attribute: Position,
    ) -> list[tuple[Handle, Handle, Handle, Handle, Handle]]:
        """
        Zwraca piątki (source, arc, target, attr_arc, attribute), gdzie
        attr_arc prowadzi z attribute do łuku arc.
        """
        result: list[tuple[Handle, Handle, Handle, Handle, Handle]] = []
        for src, arc_handle, tgt in self.iterator3(source, arc, target):
            for attr, attr_handle, _ in self.iterator3(attribute, attr_arc, arc_handle):
                result.append((src, arc_handle, tgt, attr_handle, attr))
        return result

    def check_arc(
        self,
        source: Handle,
        target: Handle,
        arc:    ElementType = ElementType.ANY,
    ) -> bool:
        """Czy istnieje łuk danego typu z source do target?"""
        if not (self.is_valid(source) and self.is_valid(target)):
            return False
        return any(
            self._elements[h].target == target and self._elements[h].type.matches(arc)
            for h in self._out[source]
        )

    # ------------------------------------------------------------------
    # Pomocnicze
    # ------------------------------------------------------------------

    def _position_matches(self, handle: Handle, position: Position) -> bool:
        if isinstance(position, ElementType):
            return self._elements[handle].type.matches(position)
        return handle == position

    def _require(self, handle: Handle) -> Element:
        element = self._elements.get(handle)
        if element is None:
            raise InvalidElementError(f"Element {handle} nie istnieje w bazie wiedzy")
        return element

    def _require_arc(self, handle: Handle) -> Element:
        element = self._require(handle)
        if not element.is_arc:
            raise InvalidElementError(f"Element {self.system_idtf(handle)} nie jest łukiem")
        return element
