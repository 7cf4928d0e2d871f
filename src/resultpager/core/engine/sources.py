"""
Row sources for the in-memory engine.

A source is a zero-argument callable returning ``(columns, rows)``.
"""

from __future__ import annotations

import csv
from collections.abc import Callable
from pathlib import Path
from typing import Any

import orjson

Rows = tuple[list[str], list[list[Any]]]
RowSource = Callable[[], Rows]


class SourceError(Exception):
    """Rows could not be loaded."""

    def __init__(self, message: str, path: Path | None = None):
        super().__init__(message)
        self.path = path


def _load_csv(path: Path) -> Rows:
    with open(path, "r", encoding="utf-8", newline="") as f:
        reader = csv.reader(f)
        try:
            columns = next(reader)
        except StopIteration:
            return [], []
        rows = [row for row in reader if row]
    return columns, rows


def _load_json(path: Path) -> Rows:
    try:
        data = orjson.loads(path.read_bytes())
    except orjson.JSONDecodeError as e:
        raise SourceError(f"Invalid JSON in {path}: {e}", path=path) from e

    if not isinstance(data, list) or not all(isinstance(item, dict) for item in data):
        raise SourceError(f"{path} must contain a list of objects", path=path)

    columns: list[str] = []
    for item in data:
        for key in item:
            if key not in columns:
                columns.append(key)
    rows = [[item.get(col) for col in columns] for item in data]
    return columns, rows


def load_rows(path: Path | str) -> Rows:
    """Read a .csv or .json file into columns and rows.

    Raises:
        SourceError: If the file is missing, unsupported or malformed
    """
    path = Path(path)
    if not path.exists():
        raise SourceError(f"File not found: {path}", path=path)

    suffix = path.suffix.lower()
    if suffix == ".csv":
        return _load_csv(path)
    if suffix == ".json":
        return _load_json(path)
    raise SourceError(f"Unsupported file type: {suffix or path.name}", path=path)


def file_source(path: Path | str) -> RowSource:
    """Source reading ``path`` when the call runs."""
    return lambda: load_rows(path)


def static_source(columns: list[str], rows: list[list[Any]]) -> RowSource:
    """Source returning fixed rows."""
    return lambda: (list(columns), [list(row) for row in rows])
