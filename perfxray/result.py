"""Core result data structures for the scanner."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field, asdict
from typing import Dict, Iterable, List, Tuple

from .severity import SEVERITY_ORDER, Severity

WIRE_KEYS = {
    "rule_id": "ruleId",
    "rule_name": "ruleName",
    "show_fix": "showFix",
}


@dataclass(frozen=True)
class Finding:
    """Capture a single rule match inside a file."""

    rule_id: str
    rule_name: str
    severity: Severity
    file: str
    line: int
    snippet: str
    message: str
    suggestion: str
    show_fix: bool = False

    def to_dict(self) -> Dict[str, object]:
        data = asdict(self)
        data["severity"] = self.severity.value
        if not self.show_fix:
            data.pop("show_fix")
        return {WIRE_KEYS.get(key, key): value for key, value in data.items()}


@dataclass
class Summary:
    """Aggregate finding counts by severity."""

    critical: int = 0
    high: int = 0
    medium: int = 0
    low: int = 0

    def increment(self, severity: Severity) -> None:
        attr = severity.value
        setattr(self, attr, getattr(self, attr) + 1)

    def as_rows(self) -> List[Tuple[str, int]]:
        """Return severity/count pairs ordered for reporting."""

        return [(severity.value, getattr(self, severity.value)) for severity in SEVERITY_ORDER]

    @property
    def total(self) -> int:
        return sum(getattr(self, severity.value) for severity in SEVERITY_ORDER)


@dataclass
class ScanResult:
    """Bundle scan summary and findings list."""

    summary: Summary = field(default_factory=Summary)
    findings: List[Finding] = field(default_factory=list)

    @classmethod
    def from_findings(cls, findings: Iterable[Finding]) -> "ScanResult":
        result = cls()
        for finding in findings:
            result.add_finding(finding)
        return result

    @property
    def passed(self) -> bool:
        return not self.findings

    def add_finding(self, finding: Finding) -> None:
        self.summary.increment(finding.severity)
        self.findings.append(finding)

    def exit_code(self) -> int:
        return 0 if self.passed else 1

    def top_files(self, limit: int = 5) -> List[Tuple[str, int]]:
        """Return the files with the most findings, worst first."""

        counts = Counter(finding.file for finding in self.findings)
        return counts.most_common(limit)

    def grouped(self) -> Dict[Severity, List[Finding]]:
        """Group findings by severity, most severe first, keeping emission order."""

        groups: Dict[Severity, List[Finding]] = {severity: [] for severity in SEVERITY_ORDER}
        for finding in self.findings:
            groups[finding.severity].append(finding)
        return {severity: items for severity, items in groups.items() if items}
