import logging
from dataclasses import dataclass, field
from typing import List, Optional

import numpy as np
import pandas as pd

from table_model import SelectionMode, TableModel

logger = logging.getLogger(__name__)


class SelectionError(Exception):
    """Raised by confirm() when nothing can be selected."""


class NoVisibleRows(SelectionError):
    def __init__(self, message="no rows match the current filter"):
        super().__init__(message)


class NoVisibleColumns(SelectionError):
    def __init__(self, message="no columns are visible"):
        super().__init__(message)


@dataclass(frozen=True)
class ConfirmResult:
    mode: SelectionMode
    row: int
    col: Optional[int]


# ---------- intents ----------


@dataclass(frozen=True)
class CycleMode:
    step: int = 1


@dataclass(frozen=True)
class SetFilter:
    text: str


@dataclass(frozen=True)
class MoveRow:
    delta: int


@dataclass(frozen=True)
class MoveCol:
    delta: int


@dataclass(frozen=True)
class Confirm:
    pass


@dataclass
class SelectionState:
    active_mode: SelectionMode
    available_modes: List[SelectionMode]
    selected_row: int = 0
    selected_col: int = 0
    filter_text: str = ""
    filtered_indices: List[int] = field(default_factory=list)
    visible_columns: List[int] = field(default_factory=list)


def _clamp(value: int, count: int) -> int:
    if count <= 0:
        return 0
    return max(0, min(value, count - 1))


class SelectionEngine:
    """Cursor, mode, filter and column visibility over a read-only table.

    Row and column positions handed in and out of the query methods are
    positions in the filtered/visible space; ``actual_row_index`` and
    ``actual_column_index`` map them back to TableModel indices.
    """

    def __init__(
        self,
        table: TableModel,
        available_modes=None,
        visible_columns=None,
        filter_text: str = "",
    ):
        self.table = table

        if available_modes is None:
            available_modes = [SelectionMode.ROW]
        modes: List[SelectionMode] = []
        for mode in available_modes:
            if not isinstance(mode, SelectionMode):
                mode = SelectionMode.from_name(mode)
            if mode not in modes:
                modes.append(mode)
        if not modes:
            raise ValueError("at least one selection mode is required")

        self.state = SelectionState(active_mode=modes[0], available_modes=modes)
        self._haystack = self._build_haystack(table)

        if visible_columns is None:
            self.show_all_columns()
        else:
            self.set_visible_columns(visible_columns)
        self.set_filter(filter_text)

    @staticmethod
    def _build_haystack(table: TableModel) -> pd.DataFrame:
        frame = table.to_frame()
        if frame.empty:
            return frame
        return frame.fillna("").apply(lambda col: col.astype(str).str.casefold())

    # ---------- mode ----------
    def cycle_mode(self, step: int = 1):
        modes = self.state.available_modes
        if len(modes) <= 1:
            return
        idx = modes.index(self.state.active_mode)
        self.state.active_mode = modes[(idx + step) % len(modes)]
        logger.debug("selection mode -> %s", self.state.active_mode.value)

    @property
    def active_mode(self) -> SelectionMode:
        return self.state.active_mode

    # ---------- filter ----------
    def _matching_indices(self, query: str) -> List[int]:
        total = self.table.row_count
        if not query:
            return list(range(total))
        if self._haystack.empty:
            return []
        needle = query.casefold()
        hits = self._haystack.apply(
            lambda col: col.str.contains(needle, regex=False)
        ).any(axis=1)
        return np.flatnonzero(hits.to_numpy(dtype=bool)).tolist()

    def set_filter(self, text: str):
        text = text or ""
        self.state.filter_text = text
        self.state.filtered_indices = self._matching_indices(text)
        self.state.selected_row = 0
        logger.debug(
            "filter %r matched %d of %d rows",
            text,
            len(self.state.filtered_indices),
            self.table.row_count,
        )

    # ---------- cursor ----------
    def move_row(self, delta: int):
        self.state.selected_row = _clamp(
            self.state.selected_row + delta, len(self.state.filtered_indices)
        )

    def move_col(self, delta: int):
        self.state.selected_col = _clamp(
            self.state.selected_col + delta, len(self.state.visible_columns)
        )

    def select_row(self, pos: int):
        self.state.selected_row = _clamp(pos, len(self.state.filtered_indices))

    def clamp_row(self):
        self.select_row(self.state.selected_row)

    def clamp_column(self):
        self.state.selected_col = _clamp(
            self.state.selected_col, len(self.state.visible_columns)
        )

    # ---------- column visibility ----------
    def set_visible_columns(self, indices):
        total = self.table.column_count
        mapping: List[int] = []
        for idx in indices:
            idx = int(idx)
            if idx < 0 or idx >= total:
                raise ValueError(f"column index {idx} out of range (0..{total - 1})")
            if idx not in mapping:
                mapping.append(idx)
        self.state.visible_columns = mapping
        self.clamp_column()

    def hide_column(self, pos: int):
        columns = self.state.visible_columns
        if 0 <= pos < len(columns):
            del columns[pos]
            self.clamp_column()

    def show_all_columns(self):
        self.state.visible_columns = list(range(self.table.column_count))
        self.clamp_column()

    # ---------- queries ----------
    def visible_row_count(self) -> int:
        return len(self.state.filtered_indices)

    def visible_column_count(self) -> int:
        return len(self.state.visible_columns)

    def actual_row_index(self, pos: int) -> int:
        return self.state.filtered_indices[pos]

    def actual_column_index(self, pos: int) -> int:
        return self.state.visible_columns[pos]

    def cell_is_selected(self, filtered_row_pos: int, visible_col_pos: int) -> bool:
        mode = self.state.active_mode
        row_hit = filtered_row_pos == self.state.selected_row
        col_hit = visible_col_pos == self.state.selected_col
        if mode is SelectionMode.ROW:
            return row_hit
        if mode is SelectionMode.COLUMN:
            return col_hit
        return row_hit and col_hit

    # ---------- confirmation ----------
    def confirm(self) -> ConfirmResult:
        state = self.state
        if not state.filtered_indices:
            raise NoVisibleRows()

        row = state.filtered_indices[_clamp(state.selected_row, len(state.filtered_indices))]
        col = None
        if state.visible_columns:
            col = state.visible_columns[
                _clamp(state.selected_col, len(state.visible_columns))
            ]
        elif state.active_mode is not SelectionMode.ROW:
            raise NoVisibleColumns()

        result = ConfirmResult(mode=state.active_mode, row=row, col=col)
        logger.info("confirmed %s row=%s col=%s", result.mode.value, row, col)
        return result

    def dispatch(self, intent):
        if isinstance(intent, CycleMode):
            self.cycle_mode(intent.step)
        elif isinstance(intent, SetFilter):
            self.set_filter(intent.text)
        elif isinstance(intent, MoveRow):
            self.move_row(intent.delta)
        elif isinstance(intent, MoveCol):
            self.move_col(intent.delta)
        elif isinstance(intent, Confirm):
            return self.confirm()
        else:
            raise TypeError(f"unknown intent: {intent!r}")
        return None
