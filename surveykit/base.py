"""Terminal plumbing shared by prompts: rendering, key reading and paging."""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from typing import Any, Sequence, TextIO, TypeVar

from .template import run_template

KEY_ARROW_LEFT = "\x02"
KEY_ARROW_RIGHT = "\x06"
KEY_ARROW_UP = "\x10"
KEY_ARROW_DOWN = "\x0e"
KEY_SPACE = " "
KEY_ENTER = "\r"
KEY_BACKSPACE = "\b"
KEY_DELETE = "\x7f"
KEY_INTERRUPT = "\x03"
KEY_END_TRANSMISSION = "\x04"
KEY_ESCAPE = "\x1b"
KEY_DELETE_WORD = "\x17"
KEY_DELETE_LINE = "\x18"
KEY_TAB = "\t"

_ARROWS = {"A": KEY_ARROW_UP, "B": KEY_ARROW_DOWN, "C": KEY_ARROW_RIGHT, "D": KEY_ARROW_LEFT}

T = TypeVar("T")


@dataclass
class Stdio:
    """The streams a prompt reads from and writes to."""

    in_: TextIO = field(default_factory=lambda: sys.stdin)
    out: TextIO = field(default_factory=lambda: sys.stdout)
    err: TextIO = field(default_factory=lambda: sys.stderr)


@dataclass
class Prompt:
    """Base for prompts: renders templates and reads keys from its streams."""

    stdio: Stdio = field(default_factory=Stdio, kw_only=True, repr=False, compare=False)
    _rendered: str = field(default="", init=False, repr=False, compare=False)
    _pushback: list = field(default_factory=list, init=False, repr=False, compare=False)

    def with_stdio(self, stdio: Stdio) -> "Prompt":
        self.stdio = stdio
        return self

    def _write(self, text: str) -> None:
        self.stdio.out.write(text)
        self.stdio.out.flush()

    def _reset(self) -> None:
        if not self._rendered:
            return
        lines = self._rendered.count("\n")
        self._write("\r\x1b[2K" + "\x1b[1A\x1b[2K" * lines)
        self._rendered = ""

    def render(self, template: str, data: Any) -> None:
        """Erase the previous output and draw the template with the given data."""
        user, layout = run_template(template, data)
        self._reset()
        self._write(user)
        self._rendered = layout

    def append_rendered_text(self, text: str) -> None:
        """Count extra text as part of the output erased by the next render."""
        self._rendered += text

    def _cursor_up(self, n: int = 1) -> None:
        self._write(f"\x1b[{n}A")

    def _cursor_previous_line(self, n: int = 1) -> None:
        self._write(f"\x1b[{n}F")

    def _cursor_next_line(self, n: int = 1) -> None:
        self._write(f"\x1b[{n}E")

    def _erase_line(self) -> None:
        self._write("\x1b[2K")

    def _hide_cursor(self) -> None:
        self._write("\x1b[?25l")

    def _show_cursor(self) -> None:
        self._write("\x1b[?25h")

    def _read_char(self) -> str:
        if self._pushback:
            return self._pushback.pop()
        char = self.stdio.in_.read(1)
        if not char:
            raise EOFError("end of input")
        return char

    def read_key(self) -> str:
        """Read one key, turning arrow escape sequences into arrow key codes."""
        char = self._read_char()
        if char != KEY_ESCAPE:
            return char
        try:
            second = self._read_char()
        except EOFError:
            return KEY_ESCAPE
        if second != "[":
            self._pushback.append(second)
            return KEY_ESCAPE
        try:
            third = self._read_char()
        except EOFError:
            self._pushback.append(second)
            return KEY_ESCAPE
        if third in _ARROWS:
            return _ARROWS[third]
        self._pushback.extend([third, second])
        return KEY_ESCAPE

    def read_line(self, mask: str = "") -> str:
        """Read an edited line of input; echo each character, or the mask if given."""
        line: list[str] = []
        cursor = 0
        while True:
            key = self.read_key()
            if key in ("\r", "\n"):
                return "".join(line)
            if key == KEY_INTERRUPT:
                raise KeyboardInterrupt
            if key == KEY_END_TRANSMISSION:
                if not line:
                    raise EOFError("end of input")
                continue
            if key in (KEY_BACKSPACE, KEY_DELETE):
                if cursor > 0:
                    cursor -= 1
                    del line[cursor]
                    self._write("\b \b")
            elif key == KEY_ARROW_LEFT:
                cursor = max(0, cursor - 1)
            elif key == KEY_ARROW_RIGHT:
                cursor = min(len(line), cursor + 1)
            elif key == KEY_DELETE_LINE:
                line.clear()
                cursor = 0
            elif key >= KEY_SPACE:
                line.insert(cursor, key)
                cursor += 1
                self._write(mask or key)


def paginate(page_size: int, choices: Sequence[T], selected: int) -> tuple[list[T], int]:
    """Return the visible page of choices and the selected index within it."""
    total = len(choices)
    if total < page_size:
        start, end, cursor = 0, total, selected
    elif selected < page_size // 2:
        start, end, cursor = 0, page_size, selected
    elif total - selected - 1 < page_size // 2:
        start, end = total - page_size, total
        cursor = selected - start
    else:
        above = page_size // 2
        cursor = above
        start = selected - above
        end = selected + (page_size - above)
    return list(choices[start:end]), cursor