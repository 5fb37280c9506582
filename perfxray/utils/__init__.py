"""Utility helpers for the scanner."""

from .fileio import read_yaml_file, read_text_file
from .code import language_for, walk_files

__all__ = [
    "read_yaml_file",
    "read_text_file",
    "language_for",
    "walk_files",
]
