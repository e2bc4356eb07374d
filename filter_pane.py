import curses


class FilterPane:
    PROMPT = "> "

    def __init__(self, text=""):
        self.buffer = text or ""
        self.cursor = len(self.buffer)
        self.hscroll = 0
        self.meta_pending = False
        self.placeholder_attr = curses.A_DIM

    # ---------- state helpers ----------
    def get_buffer(self):
        return self.buffer

    def set_buffer(self, text):
        self.buffer = text or ""
        self.cursor = len(self.buffer)
        self.hscroll = 0

    # ---------- word helpers ----------
    @staticmethod
    def _is_word_char(ch):
        return ch.isalnum() or ch == "_"

    def _word_boundary_left(self):
        i = self.cursor
        while i > 0 and self.buffer[i - 1].isspace():
            i -= 1
        while (
            i > 0
            and not self._is_word_char(self.buffer[i - 1])
            and not self.buffer[i - 1].isspace()
        ):
            i -= 1
        while i > 0 and self._is_word_char(self.buffer[i - 1]):
            i -= 1
        return i

    def _word_boundary_right(self):
        i = self.cursor
        n = len(self.buffer)
        while i < n and not self._is_word_char(self.buffer[i]):
            i += 1
        while i < n and self._is_word_char(self.buffer[i]):
            i += 1
        return i

    def _edit(self, new_buffer, new_cursor):
        changed = new_buffer != self.buffer
        self.buffer = new_buffer
        self.cursor = new_cursor
        return "changed" if changed else None

    # ---------- input handling ----------
    def handle_key(self, ch):
        """Apply one key. Returns "changed" when the text changed,
        "cancel" for a bare Esc, otherwise None."""
        if self.meta_pending:
            self.meta_pending = False
            if ch in (ord("f"), ord("F")):
                self.cursor = self._word_boundary_right()
                return None
            if ch in (ord("b"), ord("B")):
                self.cursor = self._word_boundary_left()
                return None
            return "cancel"

        if ch == 27:  # Esc
            self.meta_pending = True
            return None

        if ch == 23:  # Ctrl+W
            start = self._word_boundary_left()
            return self._edit(self.buffer[:start] + self.buffer[self.cursor :], start)

        if ch == 21:  # Ctrl+U
            return self._edit(self.buffer[self.cursor :], 0)

        if ch == 11:  # Ctrl+K
            return self._edit(self.buffer[: self.cursor], self.cursor)

        if ch in (curses.KEY_BACKSPACE, 127, 8):
            if self.cursor == 0:
                return None
            return self._edit(
                self.buffer[: self.cursor - 1] + self.buffer[self.cursor :],
                self.cursor - 1,
            )

        if ch == curses.KEY_DC or ch == 4:  # Delete / Ctrl+D
            if self.cursor >= len(self.buffer):
                return None
            return self._edit(
                self.buffer[: self.cursor] + self.buffer[self.cursor + 1 :],
                self.cursor,
            )

        if ch == 2:  # Ctrl+B
            self.cursor = max(0, self.cursor - 1)
            return None

        if ch == 6:  # Ctrl+F
            self.cursor = min(len(self.buffer), self.cursor + 1)
            return None

        if ch in (curses.KEY_HOME, 1):  # Home or Ctrl+A
            self.cursor = 0
            return None

        if ch in (curses.KEY_END, 5):  # End or Ctrl+E
            self.cursor = len(self.buffer)
            return None

        if isinstance(ch, str):
            if ch.isprintable():
                return self._edit(
                    self.buffer[: self.cursor] + ch + self.buffer[self.cursor :],
                    self.cursor + len(ch),
                )
            return None

        if 32 <= ch <= 126:
            return self._edit(
                self.buffer[: self.cursor] + chr(ch) + self.buffer[self.cursor :],
                self.cursor + 1,
            )

        return None

    # ---------- rendering ----------
    def draw(self, win):
        win.erase()
        _, w = win.getmaxyx()
        prompt = self.PROMPT
        text_w = max(1, w - len(prompt) - 1)

        # keep cursor visible
        if self.cursor < self.hscroll:
            self.hscroll = self.cursor
        elif self.cursor > self.hscroll + text_w:
            self.hscroll = self.cursor - text_w

        visible = self.buffer[self.hscroll : self.hscroll + text_w]
        try:
            win.addnstr(0, 0, prompt, len(prompt), curses.A_BOLD)
            if visible:
                win.addnstr(0, len(prompt), visible, text_w)
            else:
                win.addnstr(0, len(prompt), "Filter...", text_w, self.placeholder_attr)
            win.move(0, max(0, min(len(prompt) + self.cursor - self.hscroll, w - 1)))
        except curses.error:
            pass

        win.refresh()
