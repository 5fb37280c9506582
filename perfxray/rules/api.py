"""Detect list endpoints that return every record."""

from __future__ import annotations

from perfxray.severity import Severity

from . import define_rule

PAGINATION_HINTS = ("limit", "take", "page", "offset", "skip")

NO_PAGINATION = define_rule(
    id="no-pagination",
    name="API Endpoint Without Pagination",
    severity=Severity.HIGH,
    languages=("js", "ts", "py"),
    pattern=(
        r"""(?:app|router)\.(get|post)\s*\(['"]/\w[\w/]*['"]\s*,[\s\S]{0,600}"""
        r"(?:find|findAll|select|query|aggregate)\s*\("
        r"(?![\s\S]{0,100}(?:%s))" % "|".join(PAGINATION_HINTS)
    ),
    message="API returns all records with no pagination, response grows unbounded with data.",
    suggestion="Accept ?page=&limit= query params, add LIMIT/OFFSET (or cursor-based pagination) to every list endpoint.",
)
