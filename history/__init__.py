"""history — historia przebiegów wnioskowania w PostgreSQL."""

from .runs import (
    RunRecord,
    StoredAttempt,
    StoredRun,
    delete_runs,
    fetch_attempts,
    fetch_runs,
    insert_run,
)
from .schema import (
    HISTORY_TABLES,
    SCHEMA_PATH,
    SchemaReport,
    apply_schema,
    existing_tables,
    split_statements,
)

__all__ = [
    "HISTORY_TABLES",
    "RunRecord",
    "SCHEMA_PATH",
    "SchemaReport",
    "StoredAttempt",
    "StoredRun",
    "apply_schema",
    "delete_runs",
    "existing_tables",
    "fetch_attempts",
    "fetch_runs",
    "insert_run",
    "split_statements",
]
