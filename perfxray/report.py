"""Render findings as text, JSON or Markdown."""

from __future__ import annotations

import json
import os
import sys
from typing import List, Optional, Sequence

from .result import Finding, ScanResult
from .severity import SEVERITY_ORDER, Severity

FORMATS = ("text", "json", "markdown")
TOP_FILES = 5
TOOL_NAME = "perf-xray"

ANSI = {
    "reset": "\033[0m",
    "bold": "\033[1m",
    "dim": "\033[2m",
    "italic": "\033[3m",
    "red": "\033[31;1m",
    "green": "\033[32;1m",
    "yellow": "\033[33;1m",
    "blue": "\033[34;1m",
    "critical": "\033[41;37;1m",
}

SEVERITY_STYLE = {
    Severity.CRITICAL: "critical",
    Severity.HIGH: "red",
    Severity.MEDIUM: "yellow",
    Severity.LOW: "dim",
}

SEVERITY_ICON = {
    Severity.CRITICAL: "!!!",
    Severity.HIGH: "!!",
    Severity.MEDIUM: "!",
    Severity.LOW: "i",
}


def color_enabled() -> bool:
    if os.environ.get("NO_COLOR"):
        return False
    try:
        return sys.stdout.isatty()
    except (AttributeError, ValueError):
        return False


def colorize(txt: str, code: str, enable: bool) -> str:
    return f"{ANSI.get(code, '')}{txt}{ANSI['reset']}" if enable else txt


def format_findings(findings: Sequence[Finding], fmt: str = "text", color: Optional[bool] = None) -> str:
    """Render ``findings``; unknown formats fall back to text."""

    if fmt == "json":
        return json.dumps([finding.to_dict() for finding in findings], indent=2)
    if fmt == "markdown":
        return build_markdown(findings)
    return build_text(findings, color_enabled() if color is None else color)


def _plural(count: int, word: str) -> str:
    return f"{count} {word}{'' if count == 1 else 's'}"


def build_text(findings: Sequence[Finding], color: bool = False) -> str:
    if not findings:
        return colorize("  No issues found.", "green", color)

    parts: List[str] = []
    for severity, group in ScanResult.from_findings(findings).grouped().items():
        style = SEVERITY_STYLE[severity]
        parts.append(colorize(f"\n  [{severity.value.upper()}]  {_plural(len(group), 'issue')}", style, color))
        for finding in group:
            location = colorize(f"{finding.file}:{finding.line}", "dim", color)
            label = colorize(f"[{finding.rule_id}]", "blue", color)
            parts.append(f"  {SEVERITY_ICON[severity]} {location}  {label}  {finding.message}")
            if finding.snippet:
                parts.append(f"      {colorize('>', 'dim', color)} {colorize(finding.snippet, 'italic', color)}")
            if finding.show_fix:
                parts.append(f"      {colorize('fix:', 'dim', color)} {finding.suggestion}")
            parts.append("")
    return "\n".join(parts)


def build_markdown(findings: Sequence[Finding]) -> str:
    lines = [f"# {TOOL_NAME} Report", ""]
    if not findings:
        lines.append("No performance issues found.")
        return "\n".join(lines)

    result = ScanResult.from_findings(findings)
    lines.extend(["## Summary", "", "| Severity | Count |", "|----------|-------|"])
    for severity, count in result.summary.as_rows():
        lines.append(f"| {severity} | {count} |")
    lines.append(f"| **Total** | **{result.summary.total}** |")
    lines.append("")

    lines.extend(["## Top Files", ""])
    for path, count in result.top_files(TOP_FILES):
        lines.append(f"- `{path}`: {_plural(count, 'issue')}")
    lines.append("")

    lines.extend(["## Findings", ""])
    for severity, group in result.grouped().items():
        lines.extend([f"### {severity.value.capitalize()}", ""])
        for finding in group:
            lines.append(f"**{finding.rule_name}** `{finding.rule_id}`")
            lines.append(f"- **File:** `{finding.file}:{finding.line}`")
            lines.append(f"- **Issue:** {finding.message}")
            if finding.snippet:
                lines.append(f"- **Code:** `{finding.snippet}`")
            lines.append(f"- **Fix:** {finding.suggestion}")
            lines.append("")
    return "\n".join(lines)


def format_summary(findings: Sequence[Finding], color: Optional[bool] = None) -> str:
    """Create the one-line severity summary followed by the worst files."""

    color = color_enabled() if color is None else color
    if not findings:
        return colorize("\n  No performance issues found.\n", "green", color)

    result = ScanResult.from_findings(findings)
    counts = "  |  ".join(
        colorize(f"{getattr(result.summary, severity.value)} {severity.value}", SEVERITY_STYLE[severity], color)
        for severity in SEVERITY_ORDER
    )
    lines = [f"\n  {colorize(TOOL_NAME, 'blue', color)}  {counts}  ({result.summary.total} total)"]
    top = result.top_files(TOP_FILES)
    if top:
        lines.append("")
        lines.append("  Top files:")
        for path, count in top:
            lines.append(f"    {colorize(path, 'dim', color)}  {colorize(_plural(count, 'issue'), 'yellow', color)}")
    lines.append("")
    return "\n".join(lines)
