from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

import pandas as pd


class _NamedChoice(Enum):
    @classmethod
    def from_name(cls, text):
        key = str(text or "").strip().lower()
        for member in cls:
            if member.value == key:
                return member
        choices = ", ".join(m.value for m in cls)
        raise ValueError(f"unknown {cls.__name__} '{text}' (expected one of: {choices})")

    @classmethod
    def names(cls) -> List[str]:
        return [m.value for m in cls]


class InputFormat(_NamedChoice):
    CSV = "csv"
    JSON = "json"


class OutputFormat(_NamedChoice):
    PLAIN = "plain"
    CSV = "csv"
    JSON = "json"


class SelectionMode(_NamedChoice):
    ROW = "row"
    COLUMN = "column"
    CELL = "cell"


@dataclass(frozen=True)
class TableModel:
    """Parsed table: optional header names plus rows of cell strings.

    Rows may be ragged. Nothing here pads or truncates; consumers that need
    a rectangular view ask for ``column_count`` or ``to_frame()``.
    """

    headers: Optional[List[str]] = None
    rows: List[List[str]] = field(default_factory=list)

    @property
    def column_count(self) -> int:
        if self.headers is not None:
            return len(self.headers)
        if self.rows:
            return len(self.rows[0])
        return 0

    @property
    def row_count(self) -> int:
        return len(self.rows)

    def header_label(self, col: int) -> str:
        if self.headers is not None and 0 <= col < len(self.headers):
            return self.headers[col]
        return str(col)

    def cell(self, row: int, col: int) -> str:
        values = self.rows[row]
        if 0 <= col < len(values):
            return values[col]
        return ""

    def to_frame(self) -> pd.DataFrame:
        if not self.rows:
            return pd.DataFrame(dtype=object)
        return pd.DataFrame(self.rows, dtype=object)
