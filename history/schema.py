"""
history/schema.py — zakładanie tabel historii przebiegów z db/schema.sql.

apply_schema(conn) wykonuje wszystkie instrukcje schematu w jednej transakcji
i raportuje, które z tabel historii powstały, a które już istniały.
"""

from __future__ import annotations

import pathlib
from dataclasses import dataclass, field

SCHEMA_PATH = pathlib.Path(__file__).resolve().parent.parent / "db" / "schema.sql"

# kolejność zależności: rule_attempt wskazuje na inference_run
HISTORY_TABLES = ("inference_run", "rule_attempt")

_EXISTING_TABLES_SQL = """
    SELECT table_name FROM information_schema.tables
    WHERE table_schema = 'public' AND table_name = ANY(%s)
"""


@dataclass(slots=True)
class SchemaReport:
    """
    Wynik apply_schema.

    - statements: liczba wykonanych instrukcji
    - created:    tabele historii utworzone tym wywołaniem
    - existing:   tabele historii, które istniały już wcześniej
    - missing:    tabele historii, których nadal brak (schemat ich nie tworzy)
    """
    statements: int
    created:    list[str] = field(default_factory=list)
    existing:   list[str] = field(default_factory=list)
    missing:    list[str] = field(default_factory=list)


def split_statements(sql: str) -> list[str]:
    """Średnik na końcu linii zamyka instrukcję; linie komentarzy (--) są pomijane."""
    statements: list[str] = []
    current:    list[str] = []
    for line in sql.splitlines():
        if line.lstrip().startswith("--"):
            continue
        current.append(line)
        if line.rstrip().endswith(";"):
            statements.append("\n".join(current).strip())
            current = []
    statements.append("\n".join(current).strip())
    return [s for s in statements if s]


def existing_tables(cur) -> set[str]:
    """Które z tabel historii istnieją w schemacie public."""
    cur.execute(_EXISTING_TABLES_SQL, (list(HISTORY_TABLES),))
    return {row[0] for row in cur.fetchall()}


def apply_schema(conn, sql: str | None = None) -> SchemaReport:
    """
    Wykonuje schemat (domyślnie db/schema.sql) w jednej transakcji.

    Instrukcje schematu używają IF NOT EXISTS, więc ponowne wywołanie
    niczego nie zmienia i zwraca wszystkie tabele w `existing`.
    """
    if sql is None:
        sql = SCHEMA_PATH.read_text(encoding="utf-8")
    statements = split_statements(sql)

    with conn, conn.cursor() as cur:
        before = existing_tables(cur)
        for statement in statements:
            cur.execute(statement)
        after = existing_tables(cur)

    return SchemaReport(
        statements=len(statements),
        created=[t for t in HISTORY_TABLES if t in after and t not in before],
        existing=[t for t in HISTORY_TABLES if t in before],
        missing=[t for t in HISTORY_TABLES if t not in after],
    )
