"""Severity definitions for rule findings."""

from __future__ import annotations

from enum import Enum
from typing import Optional


class Severity(str, Enum):
    """Enumerate the supported severity levels, lowest first."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

    @property
    def rank(self) -> int:
        """Return an integer ranking used for severity floors."""

        ordering = {
            Severity.LOW: 0,
            Severity.MEDIUM: 1,
            Severity.HIGH: 2,
            Severity.CRITICAL: 3,
        }
        return ordering[self]

    @classmethod
    def parse(cls, value: Optional[str]) -> "Severity":
        """Map user input to a severity, falling back to ``LOW``."""

        if isinstance(value, Severity):
            return value
        if not value:
            return cls.LOW
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.LOW


SEVERITY_ORDER = (
    Severity.CRITICAL,
    Severity.HIGH,
    Severity.MEDIUM,
    Severity.LOW,
)
