"""
graph_model/types.py — podstawowe typy elementów grafowej bazy wiedzy.

Handle      — nieprzezroczysty identyfikator elementu (węzła lub łuku)
ElementType — flagi rodzaju elementu (węzeł / łuk, stała / zmienna, ...)
Element     — rekord elementu przechowywany przez KnowledgeBase
Bindings    — podstawienie: zmienna szablonu → element bazy
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntFlag

# ---------------------------------------------------------------------------
# Aliasy typów
# ---------------------------------------------------------------------------

type Handle = int

# Handle 0 nigdy nie jest przydzielany elementowi
INVALID: Handle = 0

type Bindings = dict[Handle, Handle]


# ---------------------------------------------------------------------------
# ElementType
# ---------------------------------------------------------------------------

class ElementType(IntFlag):
    """
    Rodzaj elementu bazy wiedzy jako zestaw flag.

    Typ elementu pasuje do filtra, gdy zawiera wszystkie bity filtra:
      ARC_ACCESS                 — dowolny łuk przynależności
      ARC_ACCESS_CONST_POS_PERM  — tylko stały, pozytywny, permanentny
      ANY (0)                    — cokolwiek
    """

    ANY        = 0
    NODE       = 1
    ARC_COMMON = 2
    ARC_ACCESS = 4
    CONST      = 8
    VAR        = 16
    POS        = 32
    NEG        = 64
    PERM       = 128
    TEMP       = 256
    STRUCT     = 512

    NODE_CONST        = NODE | CONST
    NODE_VAR          = NODE | VAR
    NODE_CONST_STRUCT = NODE | CONST | STRUCT

    ARC_COMMON_CONST = ARC_COMMON | CONST
    ARC_COMMON_VAR   = ARC_COMMON | VAR

    ARC_ACCESS_CONST_POS_PERM = ARC_ACCESS | CONST | POS | PERM
    ARC_ACCESS_VAR_POS_PERM   = ARC_ACCESS | VAR | POS | PERM
    ARC_ACCESS_CONST_POS_TEMP = ARC_ACCESS | CONST | POS | TEMP
    ARC_ACCESS_CONST_NEG_TEMP = ARC_ACCESS | CONST | NEG | TEMP

    @property
    def is_node(self) -> bool:
        return bool(self & ElementType.NODE)

    @property
    def is_arc(self) -> bool:
        return bool(self & (ElementType.ARC_COMMON | ElementType.ARC_ACCESS))

    @property
    def is_var(self) -> bool:
        return bool(self & ElementType.VAR)

    @property
    def is_const(self) -> bool:
        return bool(self & ElementType.CONST)

    def matches(self, pattern: ElementType) -> bool:
        """True gdy typ zawiera wszystkie bity wzorca (filtra)."""
        return (self & pattern) == pattern

    def as_const(self) -> ElementType:
        """Odpowiednik stały typu zmiennego (VAR → CONST); stałe bez zmian."""
        if not self.is_var:
            return self
        return (self & ~ElementType.VAR) | ElementType.CONST

    @classmethod
    def from_name(cls, name: str) -> ElementType:
        """
        Parsuje nazwę typu z plików JSON, np. "node_var", "arc_access_const_pos_perm".
        Typy nienazwane zapisywane są jako flagi złączone '|', np. "arc_access|const".

        Raises:
            ValueError gdy nazwa nie odpowiada żadnemu typowi.
        """
        result = cls.ANY
        for part in name.strip().upper().split("|"):
            try:
                result |= cls[part]
            except KeyError:
                raise ValueError(f"Nieznany typ elementu: '{name}'") from None
        return result

    def to_name(self) -> str:
        """Nazwa typu do zapisu w JSON (odwrotność from_name)."""
        for member_name, member in type(self).__members__.items():
            if member == self:
                return member_name.lower()
        return "|".join(flag.name.lower() for flag in self)


# ---------------------------------------------------------------------------
# Element
# ---------------------------------------------------------------------------

@dataclass(slots=True)
class Element:
    """
    Element bazy wiedzy.

    - handle: identyfikator elementu
    - type:   rodzaj elementu (ElementType)
    - idtf:   opcjonalny identyfikator systemowy, np. "concept_person"
    - source: początek łuku (INVALID dla węzłów)
    - target: koniec łuku (INVALID dla węzłów)
    """
    handle: Handle
    type:   ElementType
    idtf:   str | None = None
    source: Handle = INVALID
    target: Handle = INVALID

    @property
    def is_arc(self) -> bool:
        return self.type.is_arc
