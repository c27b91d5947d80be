"""
matcher/arguments.py — uporządkowany zbiór argumentów przebiegu wnioskowania.

Argumenty to węzły struktury wejściowej — kandydaci do wiązań zmiennych.
Zbiór jest tylko do dopisywania: węzły utworzone przez generowanie
są dopisywane i stają się kandydatami w kolejnych próbach.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from graph_model.types import Handle


class ArgumentSet:
    """Uporządkowany zbiór Handle bez powtórzeń (tylko dopisywanie)."""

    __slots__ = ("_items", "_index")

    def __init__(self, items: Iterable[Handle] = ()) -> None:
        self._items: list[Handle] = []
        self._index: set[Handle]  = set()
        for item in items:
            self.add(item)

    def add(self, handle: Handle) -> bool:
        """Dopisuje argument; False gdy już był w zbiorze."""
        if handle in self._index:
            return False
        self._items.append(handle)
        self._index.add(handle)
        return True

    def __contains__(self, handle: object) -> bool:
        return handle in self._index

    def __iter__(self) -> Iterator[Handle]:
        return iter(list(self._items))

    def __len__(self) -> int:
        return len(self._items)

    def __bool__(self) -> bool:
        return bool(self._items)

    def __repr__(self) -> str:
        return f"ArgumentSet({self._items!r})"
