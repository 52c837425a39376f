"""A single-line text input with optional help and suggestions."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Optional

from .base import (
    KEY_ARROW_DOWN,
    KEY_ARROW_LEFT,
    KEY_ARROW_RIGHT,
    KEY_ARROW_UP,
    KEY_BACKSPACE,
    KEY_DELETE,
    KEY_DELETE_LINE,
    KEY_END_TRANSMISSION,
    KEY_ENTER,
    KEY_ESCAPE,
    KEY_INTERRUPT,
    KEY_SPACE,
    KEY_TAB,
    Prompt,
    paginate,
)
from .config import PromptConfig
from .write import OptionAnswer, option_answer_list

INPUT_QUESTION_TEMPLATE = (
    '{% if show_help %}{{ color(config.icons.help.format) }}{{ config.icons.help.text }} '
    '{{ help }}{{ color("reset") }}\n{% endif %}'
    '{{ color(config.icons.question.format) }}{{ config.icons.question.text }} {{ color("reset") }}'
    '{{ color("default+hb") }}{{ message }} {{ color("reset") }}'
    '{% if show_answer %}'
    '{{ color("cyan") }}{{ answer }}{{ color("reset") }}\n'
    '{% elif page_entries %}'
    '{{ answer }} [Use arrows to move, enter to select, type to continue]\n'
    '{% for choice in page_entries %}'
    '{% if loop.index0 == selected_index %}{{ color(config.icons.select_focus.format) }}'
    '{{ config.icons.select_focus.text }} {% else %}{{ color("default") }}  {% endif %}'
    '{{ choice.value }}{{ color("reset") }}\n'
    '{% endfor %}'
    '{% else %}'
    '{% if (help and not show_help) or suggest %}{{ color("cyan") }}['
    '{% if help and not show_help %}{{ config.help_input }} for help'
    '{% if suggest %}, {% endif %}{% endif %}'
    '{% if suggest %}{{ color("cyan") }}{{ config.suggest_input }} for suggestions{% endif %}'
    ']{{ color("reset") }} {% endif %}'
    '{% if default %}{{ color("white") }}({{ default }}) {{ color("reset") }}{% endif %}'
    '{% endif %}'
)


class ReadLineAgain(Exception):
    """Raised while reading a line when it must restart from the given text."""

    def __init__(self, line: str):
        super().__init__("read line again")
        self.line = line


@dataclass
class Input(Prompt):
    """A text input accepted with enter; the answer is a string."""

    message: str = ""
    default: str = ""
    help: str = ""
    suggest: Optional[Callable[[str], list]] = None
    _answer: str = field(default="", init=False, repr=False, compare=False)
    _typed_answer: str = field(default="", init=False, repr=False, compare=False)
    _options: Optional[list] = field(default=None, init=False, repr=False, compare=False)
    _selected_index: int = field(default=0, init=False, repr=False, compare=False)
    _showing_help: bool = field(default=False, init=False, repr=False, compare=False)

    def on_rune(self, config: PromptConfig, key: str, line: str) -> tuple[str, bool]:
        """Handle suggestion keys; return (line, finished) or raise ReadLineAgain."""
        if self._options is not None and key in (KEY_ENTER, "\n"):
            return self._answer, True

        if self._options is not None and key == KEY_ESCAPE:
            self._answer = self._typed_answer
            self._options = None
        elif key == KEY_ARROW_UP and self._options:
            self._selected_index = (self._selected_index - 1) % len(self._options)
            self._answer = self._options[self._selected_index].value
        elif key in (KEY_ARROW_DOWN, KEY_TAB) and self._options:
            self._selected_index = (self._selected_index + 1) % len(self._options)
            self._answer = self._options[self._selected_index].value
        elif key == KEY_TAB and self.suggest is not None:
            self._answer = line
            self._typed_answer = line
            options = list(self.suggest(line))
            self._selected_index = 0
            if not options:
                return line, False
            self._answer = options[0]
            if len(options) == 1:
                self._typed_answer = self._answer
                self._options = None
            else:
                self._options = option_answer_list(options)
        else:
            if self._options is None:
                return line, False
            if key >= KEY_SPACE:
                self._answer += key
            self._typed_answer = self._answer
            self._options = None

        entries, index = paginate(config.page_size, self._options or [], self._selected_index)
        self.render(
            INPUT_QUESTION_TEMPLATE,
            InputTemplateData(
                self,
                config,
                answer=self._answer,
                show_help=self._showing_help,
                selected_index=index,
                page_entries=entries,
            ),
        )
        raise ReadLineAgain(self._typed_answer)

    def _read_line_with_default(self, default: str, config: PromptConfig) -> str:
        line = list(default)
        cursor = len(line)
        self._write(default)
        while True:
            key = self.read_key()
            if key == KEY_INTERRUPT:
                raise KeyboardInterrupt
            result, done = self.on_rune(config, key, "".join(line))
            if done:
                return result
            if key in ("\r", "\n"):
                return "".join(line)
            if key == KEY_END_TRANSMISSION:
                if not line:
                    raise EOFError("end of input")
            elif key in (KEY_BACKSPACE, KEY_DELETE):
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
                self._write(key)

    def _read_answer(self, config: PromptConfig) -> str:
        line = ""
        while True:
            if self._options is not None:
                line = ""
            try:
                return self._read_line_with_default(line, config)
            except ReadLineAgain as again:
                line = again.line

    def prompt(self, config: PromptConfig) -> str:
        """Ask the question and return the typed line, or the default when empty."""
        while True:
            self.render(
                INPUT_QUESTION_TEMPLATE,
                InputTemplateData(self, config, show_help=self._showing_help),
            )
            if not config.show_cursor:
                self._hide_cursor()
            try:
                line = self._read_answer(config)
            finally:
                if not config.show_cursor:
                    self._show_cursor()
            self._answer = line
            if line == config.help_input and self.help:
                self._showing_help = True
                continue
            break

        if not line:
            return self.default
        self.append_rendered_text(line)
        return line

    def cleanup(self, config: PromptConfig, value: str) -> None:
        """Redraw the question with the final answer."""
        answer = self._answer or self.default
        self.render(
            INPUT_QUESTION_TEMPLATE,
            InputTemplateData(self, config, show_answer=True, answer=answer),
        )


@dataclass
class InputTemplateData:
    """Values available to the input template."""

    input: Input
    config: PromptConfig
    show_answer: bool = False
    show_help: bool = False
    answer: str = ""
    page_entries: list[OptionAnswer] = field(default_factory=list)
    selected_index: int = 0

    @property
    def message(self) -> str:
        return self.input.message

    @property
    def default(self) -> str:
        return self.input.default

    @property
    def help(self) -> str:
        return self.input.help

    @property
    def suggest(self):
        return self.input.suggest