"""Source tree discovery and language resolution."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Iterable, List

logger = logging.getLogger(__name__)

SKIP_DIRS = frozenset(
    {
        "node_modules",
        ".git",
        "dist",
        "build",
        "coverage",
        ".next",
        ".nuxt",
        "out",
        "__pycache__",
        ".venv",
        "venv",
        ".cache",
        "vendor",
    }
)

SUPPORTED_EXTENSIONS = frozenset({".js", ".ts", ".jsx", ".tsx", ".py", ".go", ".sql", ".mjs", ".cjs"})

LANGUAGE_BY_EXTENSION = {
    "js": "js",
    "mjs": "js",
    "cjs": "js",
    "jsx": "js",
    "ts": "ts",
    "tsx": "ts",
    "py": "py",
    "go": "go",
    "sql": "sql",
}


def language_for(path: str | os.PathLike) -> str:
    """Map a file extension to the language tag rules are keyed on.

    Unknown extensions pass through unchanged, so no rule applies to them.
    """

    ext = Path(path).suffix.lower().lstrip(".")
    return LANGUAGE_BY_EXTENSION.get(ext, ext)


def walk_files(root: str | os.PathLike, ignore: Iterable[str] = ()) -> List[str]:
    """Collect supported source files beneath ``root`` in a stable order."""

    root_path = Path(root)
    if root_path.is_file():
        return [str(root_path)] if root_path.suffix.lower() in SUPPORTED_EXTENSIONS else []

    ignored = SKIP_DIRS | set(ignore)
    results: List[str] = []
    _walk(root_path, ignored, results)
    return results


def _walk(directory: Path, ignored: frozenset | set, results: List[str]) -> None:
    try:
        entries = sorted(os.scandir(directory), key=lambda entry: entry.name)
    except OSError as exc:
        logger.debug("Skipping unreadable directory %s: %s", directory, exc)
        return

    for entry in entries:
        if entry.name.startswith("."):
            continue
        try:
            is_dir = entry.is_dir()
        except OSError:
            continue
        if is_dir:
            if entry.name not in ignored:
                _walk(Path(entry.path), ignored, results)
            continue
        if Path(entry.name).suffix.lower() in SUPPORTED_EXTENSIONS:
            results.append(entry.path)
