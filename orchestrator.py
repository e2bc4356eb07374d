import curses
import logging
import time

from filter_pane import FilterPane
from grid_pane import GridPane
from navigation import NavigationController
from screen_layout import ScreenLayout
from selection_engine import Confirm, SetFilter
from status_bar import render_status

logger = logging.getLogger(__name__)


def normalize_key(ch):
    """Collapse get_wch() results: ASCII arrives as int, other text as str."""
    if isinstance(ch, str) and len(ch) == 1 and ord(ch) < 128:
        return ord(ch)
    return ch


class Orchestrator:
    def __init__(
        self,
        stdscr,
        engine,
        filter_enabled=True,
        output_format="plain",
        source_name="stdin",
    ):
        self.stdscr = stdscr
        curses.raw()
        self.stdscr.keypad(True)
        self.stdscr.timeout(100)

        self.engine = engine
        self.filter_enabled = filter_enabled
        self.output_format = str(getattr(output_format, "value", output_format))
        self.source_name = source_name

        self.layout = ScreenLayout(stdscr, filter_enabled=filter_enabled)
        self.grid = GridPane(engine)
        self.filter = FilterPane(engine.state.filter_text) if filter_enabled else None
        self.nav = NavigationController(
            engine,
            page_size=self.grid.body_height(self.layout.table_win),
            filter_enabled=filter_enabled,
        )

        # ---- status ----
        self.status_msg = None
        self.status_msg_until = 0

    def _set_status(self, msg, seconds=3):
        self.status_msg = msg
        self.status_msg_until = time.time() + seconds

    def _status_context(self):
        engine = self.engine
        return {
            "status_msg": self.status_msg,
            "status_until": self.status_msg_until,
            "mode": engine.active_mode.value,
            "modes": [m.value for m in engine.state.available_modes],
            "source": self.source_name,
            "visible_rows": engine.visible_row_count(),
            "total_rows": engine.table.row_count,
            "visible_cols": engine.visible_column_count(),
            "total_cols": engine.table.column_count,
            "output_format": self.output_format,
        }

    # ---------------- UI ----------------

    def redraw(self):
        try:
            curses.curs_set(1 if self.filter_enabled else 0)
        except curses.error:
            pass

        self.grid.draw(self.layout.table_win)

        sw = self.layout.status_win
        sw.erase()
        _, w = sw.getmaxyx()
        try:
            sw.addnstr(0, 0, render_status(self._status_context(), w), max(1, w - 1), curses.A_REVERSE)
        except curses.error:
            pass
        sw.refresh()

        # filter last so the terminal cursor stays in the filter bar
        if self.filter is not None:
            self.filter.draw(self.layout.filter_win)

    def _read_key(self):
        try:
            return normalize_key(self.stdscr.get_wch())
        except curses.error:
            return -1

    # ---------------- main loop ----------------

    def handle_key(self, ch):
        """Apply one key. Returns ("confirm", result), ("abort", None) or None."""
        if ch == 3:  # Ctrl+C
            return ("abort", None)

        if self.filter is not None and self.filter.meta_pending:
            result = self.filter.handle_key(ch)
            if result == "cancel":
                return ("abort", None)
            return None

        if ch == -1:
            return None

        if ch in (10, 13, curses.KEY_ENTER):
            return ("confirm", self.engine.dispatch(Confirm()))

        if self.nav.handle_key(ch):
            return None

        if self.filter is None:
            if ch in (27, ord("q")):
                return ("abort", None)
            return None

        result = self.filter.handle_key(ch)
        if result == "changed":
            self.engine.dispatch(SetFilter(self.filter.get_buffer()))
        return None

    def run(self):
        self.stdscr.clear()
        self.stdscr.refresh()
        self.redraw()

        while True:
            ch = self._read_key()
            if ch == curses.KEY_RESIZE:
                self.layout = ScreenLayout(self.stdscr, filter_enabled=self.filter_enabled)
                self.nav.page_size = self.grid.body_height(self.layout.table_win)
                self.redraw()
                continue

            outcome = self.handle_key(ch)
            if outcome is not None:
                action, result = outcome
                logger.debug("session ended: %s", action)
                return result

            self.redraw()
