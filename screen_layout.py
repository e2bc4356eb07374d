import curses


class ScreenLayout:
    def __init__(self, stdscr, filter_enabled=True):
        self.stdscr = stdscr
        self.H, self.W = stdscr.getmaxyx()

        # layout: optional filter bar (1 line), table (main), status bar (1 line)
        self.filter_h = 1 if filter_enabled else 0
        self.status_h = 1

        self.table_h = max(1, self.H - self.filter_h - self.status_h)

        self.filter_win = None
        if self.filter_h:
            self.filter_win = curses.newwin(self.filter_h, self.W, 0, 0)

        self.table_win = curses.newwin(self.table_h, self.W, self.filter_h, 0)
        # grid pane must never own cursor
        self.table_win.leaveok(True)

        self.status_win = curses.newwin(
            self.status_h, self.W, self.filter_h + self.table_h, 0
        )
        self.status_win.leaveok(True)
