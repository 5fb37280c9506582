"""Detect blocking filesystem calls in event-loop code."""

from __future__ import annotations

from perfxray.severity import Severity

from . import define_rule

SYNC_FS_CALLS = (
    "readFileSync",
    "writeFileSync",
    "appendFileSync",
    "existsSync",
    "mkdirSync",
    "readdirSync",
    "statSync",
    "unlinkSync",
    "renameSync",
    "copyFileSync",
)

SYNC_IO = define_rule(
    id="sync-io",
    name="Synchronous I/O in Async Context",
    severity=Severity.HIGH,
    languages=("js", "ts"),
    pattern=r"\b(" + "|".join(SYNC_FS_CALLS) + r")\b",
    message="Synchronous filesystem call blocks the event loop.",
    suggestion=(
        "Replace with the async equivalent (e.g. fs.promises.readFile, readdir). "
        "Use await inside an async function."
    ),
)
