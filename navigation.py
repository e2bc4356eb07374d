import curses

from selection_engine import CycleMode, MoveCol, MoveRow
from table_model import SelectionMode

ROW_MODES = (SelectionMode.ROW, SelectionMode.CELL)
COL_MODES = (SelectionMode.COLUMN, SelectionMode.CELL)


class NavigationController:
    """Turns decoded keys into engine intents.

    Row movement only applies in row and cell mode, column movement only in
    column and cell mode. With the filter bar disabled the letter keys are
    free, so vi-style motions are accepted as well.
    """

    def __init__(self, engine, page_size=10, filter_enabled=True):
        self.engine = engine
        self.page_size = max(1, page_size)
        self.filter_enabled = filter_enabled

    def _move_rows(self, delta):
        if self.engine.active_mode in ROW_MODES:
            self.engine.dispatch(MoveRow(delta))

    def _move_cols(self, delta):
        if self.engine.active_mode in COL_MODES:
            self.engine.dispatch(MoveCol(delta))

    def move_up(self):
        self._move_rows(-1)

    def move_down(self):
        self._move_rows(1)

    def move_left(self):
        self._move_cols(-1)

    def move_right(self):
        self._move_cols(1)

    def page_up(self):
        self._move_rows(-self.page_size)

    def page_down(self):
        self._move_rows(self.page_size)

    def jump_first_row(self):
        if self.engine.active_mode in ROW_MODES:
            self.engine.select_row(0)

    def jump_last_row(self):
        if self.engine.active_mode in ROW_MODES:
            self.engine.select_row(self.engine.visible_row_count() - 1)

    def cycle_mode(self):
        self.engine.dispatch(CycleMode())

    def cycle_mode_back(self):
        self.engine.dispatch(CycleMode(-1))

    def hide_current_column(self):
        self.engine.hide_column(self.engine.state.selected_col)

    def show_all_columns(self):
        self.engine.show_all_columns()

    def handle_key(self, ch) -> bool:
        """Returns True when the key was a navigation key."""
        actions = {
            curses.KEY_UP: self.move_up,
            curses.KEY_DOWN: self.move_down,
            curses.KEY_LEFT: self.move_left,
            curses.KEY_RIGHT: self.move_right,
            curses.KEY_PPAGE: self.page_up,
            curses.KEY_NPAGE: self.page_down,
            16: self.move_up,  # Ctrl+P
            14: self.move_down,  # Ctrl+N
            9: self.cycle_mode,  # Tab
            curses.KEY_BTAB: self.cycle_mode_back,
            18: self.show_all_columns,  # Ctrl+R
        }
        if not self.filter_enabled:
            actions.update(
                {
                    ord("k"): self.move_up,
                    ord("j"): self.move_down,
                    ord("h"): self.move_left,
                    ord("l"): self.move_right,
                    ord("g"): self.jump_first_row,
                    ord("G"): self.jump_last_row,
                    curses.KEY_HOME: self.jump_first_row,
                    curses.KEY_END: self.jump_last_row,
                    curses.KEY_DC: self.hide_current_column,
                    ord("x"): self.hide_current_column,
                }
            )
        else:
            actions[24] = self.hide_current_column  # Ctrl+X

        action = actions.get(ch)
        if action is None:
            return False
        action()
        return True
