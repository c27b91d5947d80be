"""
matcher/template.py — kompilacja szablonu (struktury w bazie) do postaci trójek.

Szablon to węzeł-struktura, którego elementy (łuki przynależności) tworzą wzorzec.
Każdy łuk-element struktury daje trójkę (source, arc, target). Elementy typu VAR
są zmiennymi; pozostałe są stałymi, które muszą wystąpić dokładnie.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from graph_model.types import INVALID, Bindings, ElementType, Handle
from kb.store import KnowledgeBase
from kb.utils import get_all_with_type


class TemplateError(ValueError):
    """Struktura nie daje się użyć jako szablon."""


@dataclass(frozen=True, slots=True)
class TemplateTriple:
    """
    Trójka szablonu.

    - source, arc, target: elementy szablonu (stałe lub zmienne)
    - arc_type:            typ łuku w wersji stałej — filtr przy wyszukiwaniu
                           i typ tworzonego łuku przy generowaniu
    """
    source:   Handle
    arc:      Handle
    target:   Handle
    arc_type: ElementType


@dataclass(slots=True)
class Template:
    """
    Skompilowany szablon.

    - structure: węzeł-struktura, z której zbudowano szablon
    - triples:   trójki w kolejności elementów struktury
    - variables: zmienne (węzły i łuki) w kolejności pierwszego wystąpienia
    """
    structure: Handle
    triples:   list[TemplateTriple]
    variables: list[Handle]
    _var_set:  frozenset[Handle] = field(init=False, repr=False)
    var_types: dict[Handle, ElementType] = field(default_factory=dict, repr=False)

    def __post_init__(self) -> None:
        self._var_set = frozenset(self.variables)

    def is_var(self, handle: Handle) -> bool:
        return handle in self._var_set

    def var_type(self, handle: Handle) -> ElementType:
        """Typ zmiennej (w wersji stałej) — filtr dla kandydatów."""
        return self.var_types.get(handle, ElementType.ANY)

    @property
    def var_nodes(self) -> list[Handle]:
        return [v for v in self.variables if self.var_types.get(v, ElementType.ANY).is_node]

    def value(self, handle: Handle, bindings: Bindings) -> Handle:
        """Wartość elementu szablonu przy podstawieniu: stała → ona sama, zmienna → wiązanie lub INVALID."""
        if handle in self._var_set:
            return bindings.get(handle, INVALID)
        return handle


def build_template(kb: KnowledgeBase, structure: Handle) -> Template:
    """
    Buduje szablon ze struktury.

    Raises:
        TemplateError gdy struktura nie istnieje albo nie zawiera żadnego łuku.
    """
    if not kb.is_valid(structure):
        raise TemplateError(f"Struktura szablonu {structure} nie istnieje")

    triples:   list[TemplateTriple]    = []
    variables: list[Handle]            = []
    types:     dict[Handle, ElementType] = {}

    def note(handle: Handle) -> None:
        type = kb.get_type(handle)
        if type.is_var and handle not in types:
            variables.append(handle)
            types[handle] = type.as_const()

    for member in get_all_with_type(kb, structure):
        element = kb.get_element(member)
        if not element.is_arc:
            continue
        note(element.source)
        note(member)
        note(element.target)
        triples.append(TemplateTriple(
            source=element.source,
            arc=member,
            target=element.target,
            arc_type=element.type.as_const(),
        ))

    if not triples:
        raise TemplateError(f"Szablon {kb.system_idtf(structure)} nie zawiera żadnego łuku")

    return Template(structure=structure, triples=triples, variables=variables, var_types=types)
