"""Detect bundle-size and render-cost problems in JavaScript/TypeScript."""

from __future__ import annotations

from perfxray.severity import Severity

from . import define_rule

HEAVY_PACKAGES = (
    "lodash",
    "moment",
    "ramda",
    "rxjs",
    "antd",
    "@mui/material",
    "date-fns",
)

LARGE_IMPORT = define_rule(
    id="large-import",
    name="Large Barrel Import",
    severity=Severity.MEDIUM,
    languages=("js", "ts"),
    pattern=r"""import\s+\w+\s+from\s+['"](?:%s)['"];?""" % "|".join(HEAVY_PACKAGES),
    message="Importing the entire library pulls in megabytes of unused code.",
    suggestion=(
        'Use subpath imports: import debounce from "lodash/debounce" '
        'or import { debounce } from "lodash-es".'
    ),
)

# Arrow-function parameters: balanced parentheses, one level of nesting.
ARROW_PARAMS = r"\((?:[^()]|\([^()]*\))*\)"

MISSING_MEMO = define_rule(
    id="missing-memo",
    name="Expensive React Render Without Memoisation",
    severity=Severity.MEDIUM,
    languages=("js", "ts"),
    pattern=(
        r"(?:export\s+(?:default\s+)?function|const\s+\w+\s*=\s*(?:%s|[\w]+)\s*=>)" % ARROW_PARAMS
        + r"\s*[\s\S]{0,400}return\s*\([\s\S]{0,600}<[\w.]+"
    ),
    message="Large component re-renders on every parent update without memoisation.",
    suggestion="Wrap with React.memo() for components or useMemo()/useCallback() for expensive values/handlers.",
)

CONSOLE_IN_PROD = define_rule(
    id="console-in-prod",
    name="console.log in Production Code",
    severity=Severity.LOW,
    languages=("js", "ts"),
    pattern=r"console\.(log|warn|error|info|debug|trace)\(",
    message="console calls add overhead and leak information in production.",
    suggestion="Remove debug logs or replace with a structured logger (pino, winston) that respects LOG_LEVEL.",
)
