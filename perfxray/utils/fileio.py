"""Basic file IO helpers."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml


def read_yaml_file(path: str | os.PathLike) -> Any:
    """Return the parsed YAML if the file exists, otherwise ``None``."""

    path = Path(path)
    if not path.exists():
        return None
    with path.open("r", encoding="utf-8") as handle:
        return yaml.safe_load(handle)


def read_text_file(path: str | os.PathLike) -> str:
    """Return the file contents as UTF-8 text.

    Raises ``OSError`` or ``UnicodeDecodeError`` when the file cannot be read;
    batch callers treat either as "skip this file".
    """

    return Path(path).read_text(encoding="utf-8")
