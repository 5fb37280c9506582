"""Detect database access shapes that scale badly with data size."""

from __future__ import annotations

from perfxray.severity import Severity

from . import define_rule

# Query calls reachable within a short window after a loop keyword.
LOOP_QUERY_WINDOW = 60

N_PLUS_ONE = define_rule(
    id="n-plus-one",
    name="N+1 Query Pattern",
    severity=Severity.CRITICAL,
    languages=("js", "ts", "py", "go"),
    pattern=(
        r"for[\s\S]{0,%d}"
        r"(query|findOne|findAll|find\(|select\(|\.get\(|\.fetch\(|db\.|prisma\.|orm\.)" % LOOP_QUERY_WINDOW
    ),
    message="Database query inside a loop causes N+1 queries, each iteration hits the DB.",
    suggestion=(
        "Batch the IDs, fetch once outside the loop "
        "(e.g. findMany({ where: { id: { in: ids } } })), then map results."
    ),
)

UNBOUNDED_QUERY = define_rule(
    id="unbounded-query",
    name="Unbounded SQL Query",
    severity=Severity.HIGH,
    languages=("js", "ts", "py", "go", "sql"),
    pattern=r"SELECT\s+[\w\s,*]+FROM\s+\w+(?!\s*WHERE[\s\S]*LIMIT|\s*LIMIT)",
    ignore_case=True,
    message="SELECT without LIMIT can return millions of rows and exhaust memory.",
    suggestion="Always add a LIMIT clause or paginate results. For reports, stream the result set.",
)

MISSING_INDEX_HINT = define_rule(
    id="missing-index-hint",
    name="Filter on Likely Unindexed Column",
    severity=Severity.MEDIUM,
    languages=("js", "ts", "py", "go", "sql"),
    pattern=r"WHERE\s+(?!id\b|_id\b|pk\b|uuid\b)(\w+)\s*(?:=|LIKE|IN|>|<)",
    ignore_case=True,
    message="Filtering on a column that is probably not indexed causes a full table scan.",
    suggestion="Add a database index on the filtered column: CREATE INDEX idx_table_column ON table(column).",
)
