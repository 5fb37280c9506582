"""Match rules against file contents and aggregate findings across files."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace
from typing import Callable, Iterable, List, Optional, Sequence

from .result import Finding
from .rules import Rule
from .rules.catalog import RULES, rules_for
from .severity import Severity
from .utils.code import language_for

logger = logging.getLogger(__name__)

MAX_HITS_PER_RULE = 5
SNIPPET_WIDTH = 120
ELLIPSIS = "..."

# Errors a content provider may raise for a file that should be skipped.
READ_ERRORS = (OSError, UnicodeDecodeError, ValueError)


def check_file(path: str, content: str, rules: Optional[Sequence[Rule]] = None) -> List[Finding]:
    """Run every rule applicable to ``path`` against ``content``.

    Patterns run over the whole file so they can span lines. A rule's
    ``verify`` hook may reject a match or extend where it ends; later matches
    starting inside an accepted finding are skipped. Each rule stops after
    ``MAX_HITS_PER_RULE`` findings in a file.
    """

    applicable = rules_for(language_for(path), RULES if rules is None else rules)
    lines = content.split("\n")
    findings: List[Finding] = []

    for rule in applicable:
        hits = 0
        resume_at = 0
        for match in rule.pattern.finditer(content):
            start, end = match.span()
            if start < resume_at:
                continue
            if rule.verify is not None:
                end = rule.verify(match)
                if end is None:
                    continue
            if start == end:
                continue
            resume_at = end

            line_number = line_number_at(content, start)
            findings.append(
                Finding(
                    rule_id=rule.id,
                    rule_name=rule.name,
                    severity=rule.severity,
                    file=path,
                    line=line_number,
                    snippet=snippet_at(lines, line_number - 1),
                    message=rule.message,
                    suggestion=rule.suggestion,
                )
            )
            hits += 1
            if hits >= MAX_HITS_PER_RULE:
                break

    return findings


def line_number_at(content: str, offset: int) -> int:
    """Return the 1-based line number of ``offset`` within ``content``."""

    return content.count("\n", 0, offset) + 1


def snippet_at(lines: Sequence[str], index: int) -> str:
    """Return the trimmed line at ``index``, clipped to ``SNIPPET_WIDTH``."""

    raw = lines[index].strip() if 0 <= index < len(lines) else ""
    if len(raw) > SNIPPET_WIDTH:
        return raw[: SNIPPET_WIDTH - len(ELLIPSIS)] + ELLIPSIS
    return raw


def check_files(
    paths: Iterable[str],
    read_fn: Callable[[str], str],
    severity: Optional[str] = None,
    rules: Optional[Sequence[Rule]] = None,
    jobs: int = 1,
    should_stop: Optional[Callable[[], bool]] = None,
) -> List[Finding]:
    """Check many files, dropping findings below the ``severity`` floor.

    Files whose content cannot be read are skipped. Output is ordered by
    ``paths`` and then by emission order within each file, whatever ``jobs``.
    """

    paths = list(paths)
    min_rank = Severity.parse(severity).rank

    def _cancelled() -> bool:
        return should_stop is not None and should_stop()

    def _check_one(path: str) -> List[Finding]:
        if jobs > 1 and _cancelled():
            return []
        try:
            content = read_fn(path)
        except READ_ERRORS as exc:
            logger.debug("Skipping unreadable file %s: %s", path, exc)
            return []
        return check_file(path, content, rules)

    if jobs > 1 and len(paths) > 1:
        per_file: List[List[Finding]] = [[] for _ in paths]
        with ThreadPoolExecutor(max_workers=min(jobs, len(paths))) as executor:
            future_to_index = {executor.submit(_check_one, path): index for index, path in enumerate(paths)}
            for future, index in future_to_index.items():
                per_file[index] = future.result()
    else:
        per_file = []
        for path in paths:
            if _cancelled():
                logger.info("Scan cancelled after %d of %d files", len(per_file), len(paths))
                break
            per_file.append(_check_one(path))

    all_findings = [finding for findings in per_file for finding in findings if finding.severity.rank >= min_rank]
    logger.info("Checked %d files, %d findings", len(per_file), len(all_findings))
    return all_findings


def apply_filters(findings: Iterable[Finding], severity: Optional[str] = None, fix: bool = False) -> List[Finding]:
    """Apply the severity floor and the fix-display decoration.

    Decorated findings are copies; the input findings are left untouched.
    """

    min_rank = Severity.parse(severity).rank
    filtered = [finding for finding in findings if finding.severity.rank >= min_rank]
    if fix:
        filtered = [replace(finding, show_fix=True) for finding in filtered]
    return filtered
