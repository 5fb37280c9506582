"""Rule model shared by every catalog module."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, FrozenSet, Iterable, Optional

from perfxray.errors import RuleCatalogError
from perfxray.severity import Severity

# Given a pattern match, return where the finding ends, or None to reject it.
MatchVerifier = Callable[["re.Match[str]"], Optional[int]]


@dataclass(frozen=True)
class Rule:
    """Static definition pairing a textual pattern with remediation metadata."""

    id: str
    name: str
    severity: Severity
    languages: FrozenSet[str]
    pattern: re.Pattern
    message: str
    suggestion: str
    verify: Optional[MatchVerifier] = None

    def applies_to(self, language: str) -> bool:
        return language in self.languages


def define_rule(
    *,
    id: str,
    name: str,
    severity: Severity,
    languages: Iterable[str],
    pattern: str,
    message: str,
    suggestion: str,
    ignore_case: bool = False,
    verify: Optional[MatchVerifier] = None,
) -> Rule:
    """Validate and compile a rule definition.

    Patterns are ASCII-only: ``\\w``, ``\\b`` and ``\\s`` never match
    non-ASCII letters or spaces. Raises ``RuleCatalogError`` for an empty
    language set or a pattern that does not compile, so a broken catalog
    fails at import time.
    """

    langs = frozenset(languages)
    if not langs:
        raise RuleCatalogError(f"Rule {id!r} must declare at least one language")
    flags = re.ASCII | (re.IGNORECASE if ignore_case else 0)
    try:
        compiled = re.compile(pattern, flags)
    except re.error as exc:
        raise RuleCatalogError(f"Rule {id!r} has an invalid pattern: {exc}") from exc
    return Rule(
        id=id,
        name=name,
        severity=Severity(severity),
        languages=langs,
        pattern=compiled,
        message=message,
        suggestion=suggestion,
        verify=verify,
    )
