import curses


class GridPane:
    PAIR_CELL_TEXT = 6
    PAIR_CELL_ACTIVE_TEXT = 5
    MAX_COL_WIDTH = 40
    MIN_COL_WIDTH = 3

    def __init__(self, engine):
        self.engine = engine
        self.cell_attr = curses.A_NORMAL
        self.active_attr = curses.A_REVERSE
        try:
            curses.start_color()
            curses.use_default_colors()
            curses.init_pair(self.PAIR_CELL_TEXT, curses.COLOR_WHITE, -1)
            curses.init_pair(
                self.PAIR_CELL_ACTIVE_TEXT, curses.COLOR_BLACK, curses.COLOR_WHITE
            )
            self.cell_attr = curses.color_pair(self.PAIR_CELL_TEXT)
            self.active_attr = curses.color_pair(self.PAIR_CELL_ACTIVE_TEXT)
        except curses.error:
            pass

        self.row_offset = 0
        self.col_offset = 0
        self.rendered_col_widths = {}

    @staticmethod
    def display_text(text: str) -> str:
        return text.replace("\r\n", " ").replace("\n", " ").replace("\r", " ")

    def body_height(self, win) -> int:
        h, _ = win.getmaxyx()
        # header line plus separator
        return max(1, h - 2)

    def _col_width(self, visible_pos, row_positions):
        table = self.engine.table
        col = self.engine.actual_column_index(visible_pos)
        max_len = len(self.display_text(table.header_label(col)))
        for pos in row_positions:
            text = table.cell(self.engine.actual_row_index(pos), col)
            max_len = max(max_len, len(self.display_text(text)))
        return max(self.MIN_COL_WIDTH, min(self.MAX_COL_WIDTH, max_len + 2))

    def adjust_row_viewport(self, body_h: int):
        total = self.engine.visible_row_count()
        selected = self.engine.state.selected_row
        if selected < self.row_offset:
            self.row_offset = selected
        elif selected >= self.row_offset + body_h:
            self.row_offset = selected - body_h + 1
        self.row_offset = max(0, min(self.row_offset, max(0, total - body_h)))

    def adjust_col_viewport(self, widths, avail_w: int) -> int:
        """Shift col_offset so the selected column is on screen.
        Returns how many columns fit starting at the new offset."""
        total = len(widths)
        if total == 0:
            self.col_offset = 0
            return 0

        selected = min(self.engine.state.selected_col, total - 1)
        if selected < self.col_offset:
            self.col_offset = selected

        def fit_from(start):
            used = 0
            count = 0
            for cw in widths[start:]:
                if used + cw + 1 > avail_w and count > 0:
                    break
                used += cw + 1
                count += 1
            return max(1, count)

        while selected >= self.col_offset + fit_from(self.col_offset):
            self.col_offset += 1
        self.col_offset = max(0, min(self.col_offset, total - 1))
        return fit_from(self.col_offset)

    # ---------- rendering ----------
    def draw(self, win):
        win.erase()
        try:
            win.bkgd(" ", self.cell_attr)
        except curses.error:
            pass
        h, w = win.getmaxyx()
        engine = self.engine
        table = engine.table

        body_h = self.body_height(win)
        self.adjust_row_viewport(body_h)
        row_positions = list(
            range(self.row_offset, min(engine.visible_row_count(), self.row_offset + body_h))
        )

        row_w = max(3, len(str(max(table.row_count - 1, 0))) + 1)
        avail_w = max(1, w - (row_w + 1))
        widths = [
            self._col_width(pos, row_positions)
            for pos in range(engine.visible_column_count())
        ]
        fit = self.adjust_col_viewport(widths, avail_w)
        visible_cols = tuple(range(self.col_offset, self.col_offset + fit))
        self.rendered_col_widths = {}

        # header
        x = row_w + 1
        for pos in visible_cols:
            eff_cw = min(widths[pos], max(1, w - x - 1))
            self.rendered_col_widths[pos] = eff_cw
            label = self.display_text(table.header_label(engine.actual_column_index(pos)))
            label_attr = curses.A_BOLD if table.headers is not None else curses.A_DIM
            try:
                win.addnstr(0, x, label[:eff_cw].ljust(eff_cw), eff_cw, label_attr)
            except curses.error:
                pass
            x += eff_cw + 1
        try:
            win.hline(1, 0, curses.ACS_HLINE if hasattr(curses, "ACS_HLINE") else ord("-"), w)
        except curses.error:
            pass

        if not row_positions:
            message = "no matching rows" if table.row_count else "no rows"
            try:
                win.addnstr(2, row_w + 1, message, max(1, w - row_w - 2), curses.A_DIM)
            except curses.error:
                pass
            win.refresh()
            return

        y = 2
        for pos in row_positions:
            if y >= h:
                break
            actual_row = engine.actual_row_index(pos)
            try:
                win.addnstr(y, 0, str(actual_row).rjust(row_w), row_w, curses.A_DIM)
            except curses.error:
                pass
            x = row_w + 1
            for col_pos in visible_cols:
                eff_cw = self.rendered_col_widths[col_pos]
                text = self.display_text(
                    table.cell(actual_row, engine.actual_column_index(col_pos))
                )
                attr = (
                    self.active_attr
                    if engine.cell_is_selected(pos, col_pos)
                    else self.cell_attr
                )
                try:
                    win.addnstr(y, x, text[:eff_cw].ljust(eff_cw), eff_cw, attr)
                except curses.error:
                    pass
                x += eff_cw + 1
            y += 1

        win.refresh()
