"""Detect algorithmic blow-ups: quadratic loops and ReDoS-prone regex literals."""

from __future__ import annotations

import re
from typing import Optional

from perfxray.severity import Severity

from . import define_rule

ITERATION = r"(?:for|\.forEach|\.map|\.filter|\.reduce)"
MIN_QUANTIFIERS = 2

# Opening slash, then the literal body up to the next unescaped slash.
# Every body character has exactly one way to match, so a slash with no
# closing partner costs one linear pass.
REGEX_LITERAL = r"/(?=((?:[^/\\]|\\.)*)/)"

NESTED_LOOPS = define_rule(
    id="nested-loops",
    name="Nested Iteration - O(n²) Complexity",
    severity=Severity.HIGH,
    languages=("js", "ts", "py", "go"),
    pattern=ITERATION + r"\s*[\s\S]{0,200}" + ITERATION,
    message="Nested loops over arrays create O(n²) complexity, devastating at scale.",
    suggestion="Flatten with a Map/Set for O(n) lookup, or restructure data before iteration.",
)


def count_quantifiers(body: str) -> int:
    """Count ``+``, ``*`` and ``{m,n}`` tokens in a regex literal body.

    Escaped characters are skipped. A brace group counts once, unless it
    holds ``+``/``*`` tokens, which are then counted instead.
    """

    count = 0
    brace_start = None
    brace_has_operator = False
    index = 0
    while index < len(body):
        char = body[index]
        if char == "\\":
            index += 2
            continue
        if char in "+*":
            count += 1
            brace_has_operator = True
        elif char == "{" and brace_start is None:
            brace_start = index
            brace_has_operator = False
        elif char == "}" and brace_start is not None:
            if index > brace_start + 1 and not brace_has_operator:
                count += 1
            brace_start = None
        index += 1
    return count


def nested_quantifier_end(match: "re.Match[str]") -> Optional[int]:
    """Accept literals with two or more quantifiers; end after the closing slash."""

    if count_quantifiers(match.group(1)) < MIN_QUANTIFIERS:
        return None
    return match.end(1) + 1


BLOCKING_REGEX = define_rule(
    id="blocking-regex",
    name="Catastrophic Regex Backtracking",
    severity=Severity.CRITICAL,
    languages=("js", "ts", "py", "go"),
    pattern=REGEX_LITERAL,
    verify=nested_quantifier_end,
    message="Regex with nested quantifiers can backtrack exponentially on crafted input (ReDoS).",
    suggestion="Rewrite using atomic groups or possessive quantifiers. Test with redos-detector or safe-regex.",
)
