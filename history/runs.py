"""
history/runs.py — zapis i odczyt historii przebiegów wnioskowania (PostgreSQL).

Tabele (db/schema.sql):
  inference_run  — jeden wiersz na przebieg apply_inference
  rule_attempt   — próby reguł przebiegu, w kolejności wykonania

Funkcje przyjmują otwarte połączenie psycopg2 (pgr._db.get_connection)
i same zarządzają transakcją (with conn).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from psycopg2.extras import execute_values

from inference.solution import RuleAttempt, Solution

_INSERT_RUN_SQL = """
    INSERT INTO inference_run
        (kb_source, target, rule_set, input_structure, achieved, restarts, generated)
    VALUES (%s, %s, %s, %s, %s, %s, %s)
    RETURNING id
"""

_INSERT_ATTEMPTS_SQL = """
    INSERT INTO rule_attempt (run_id, position, rule_idtf, tier, used, generated)
    VALUES %s
"""

_SELECT_RUNS_SQL = """
    SELECT r.id, r.created_at, r.kb_source, r.target, r.rule_set, r.input_structure,
           r.achieved, r.restarts, r.generated, count(a.position)
    FROM inference_run r
    LEFT JOIN rule_attempt a ON a.run_id = r.id
    GROUP BY r.id
    ORDER BY r.created_at DESC, r.id DESC
    LIMIT %s
"""

_SELECT_ATTEMPTS_SQL = """
    SELECT position, rule_idtf, tier, used, generated
    FROM rule_attempt
    WHERE run_id = %s
    ORDER BY position
"""


@dataclass(slots=True)
class RunRecord:
    """Przebieg do zapisania; elementy opisane identyfikatorami, nie uchwytami."""
    kb_source:       str
    target:          str
    achieved:        bool
    rule_set:        str | None = None
    input_structure: str | None = None
    restarts:        int = 0
    generated:       int = 0
    attempts:        list[RuleAttempt] = field(default_factory=list)

    @classmethod
    def from_solution(
        cls,
        solution:        Solution,
        kb_source:       str,
        target:          str,
        rule_set:        str | None = None,
        input_structure: str | None = None,
    ) -> RunRecord:
        return cls(
            kb_source=kb_source,
            target=target,
            achieved=solution.achieved,
            rule_set=rule_set,
            input_structure=input_structure,
            restarts=solution.restarts,
            generated=len(solution.generated),
            attempts=list(solution.attempts),
        )


@dataclass(slots=True)
class StoredRun:
    id:              int
    created_at:      datetime
    kb_source:       str
    target:          str
    rule_set:        str | None
    input_structure: str | None
    achieved:        bool
    restarts:        int
    generated:       int
    attempt_count:   int


@dataclass(slots=True)
class StoredAttempt:
    position:  int
    rule_idtf: str
    tier:      int
    used:      bool
    generated: int


def insert_run(conn, record: RunRecord) -> int:
    """Zapisuje przebieg wraz z próbami reguł. Zwraca id przebiegu."""
    with conn, conn.cursor() as cur:
        cur.execute(
            _INSERT_RUN_SQL,
            (
                record.kb_source,
                record.target,
                record.rule_set,
                record.input_structure,
                record.achieved,
                record.restarts,
                record.generated,
            ),
        )
        run_id = cur.fetchone()[0]
        rows = [
            (run_id, position, a.idtf, a.tier, a.used, a.generated)
            for position, a in enumerate(record.attempts)
        ]
        if rows:
            execute_values(cur, _INSERT_ATTEMPTS_SQL, rows)
    return run_id


def fetch_runs(conn, limit: int = 20) -> list[StoredRun]:
    """Ostatnie przebiegi, od najnowszego."""
    with conn, conn.cursor() as cur:
        cur.execute(_SELECT_RUNS_SQL, (limit,))
        rows = cur.fetchall()
    return [StoredRun(*row) for row in rows]


def fetch_attempts(conn, run_id: int) -> list[StoredAttempt]:
    with conn, conn.cursor() as cur:
        cur.execute(_SELECT_ATTEMPTS_SQL, (run_id,))
        rows = cur.fetchall()
    return [StoredAttempt(*row) for row in rows]


def delete_runs(conn) -> int:
    """Usuwa całą historię (próby kaskadowo). Zwraca liczbę usuniętych przebiegów."""
    with conn, conn.cursor() as cur:
        cur.execute("DELETE FROM inference_run")
        return cur.rowcount
