"""Ordered, read-only rule catalog and its lookups."""

from __future__ import annotations

from typing import Iterable, List, Optional, Sequence, Tuple

from perfxray.errors import RuleCatalogError

from . import Rule
from .api import NO_PAGINATION
from .complexity import BLOCKING_REGEX, NESTED_LOOPS
from .database import MISSING_INDEX_HINT, N_PLUS_ONE, UNBOUNDED_QUERY
from .frontend import CONSOLE_IN_PROD, LARGE_IMPORT, MISSING_MEMO
from .io import SYNC_IO


def build_catalog(rules: Iterable[Rule]) -> Tuple[Rule, ...]:
    """Freeze ``rules`` into a catalog, rejecting duplicate identifiers."""

    seen = set()
    catalog = []
    for rule in rules:
        if rule.id in seen:
            raise RuleCatalogError(f"Duplicate rule id: {rule.id}")
        seen.add(rule.id)
        catalog.append(rule)
    return tuple(catalog)


# Declaration order is also the emission order for same-line matches.
RULES: Tuple[Rule, ...] = build_catalog(
    [
        SYNC_IO,
        N_PLUS_ONE,
        UNBOUNDED_QUERY,
        LARGE_IMPORT,
        MISSING_MEMO,
        CONSOLE_IN_PROD,
        NESTED_LOOPS,
        NO_PAGINATION,
        BLOCKING_REGEX,
        MISSING_INDEX_HINT,
    ]
)


def rules_for(language: str, rules: Sequence[Rule] = RULES) -> List[Rule]:
    """Return the rules applicable to ``language`` in catalog order."""

    return [rule for rule in rules if rule.applies_to(language)]


def get_rule(rule_id: str, rules: Sequence[Rule] = RULES) -> Optional[Rule]:
    for rule in rules:
        if rule.id == rule_id:
            return rule
    return None


def without(rule_ids: Iterable[str], rules: Sequence[Rule] = RULES) -> Tuple[Rule, ...]:
    """Return the catalog minus ``rule_ids``; unknown ids raise ``RuleCatalogError``."""

    excluded = set(rule_ids)
    unknown = sorted(excluded - {rule.id for rule in rules})
    if unknown:
        raise RuleCatalogError(f"Unknown rule id(s): {', '.join(unknown)}")
    return tuple(rule for rule in rules if rule.id not in excluded)
