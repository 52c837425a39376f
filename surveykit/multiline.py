"""A free-text input spanning several lines."""

from __future__ import annotations

from dataclasses import dataclass

from .base import Prompt
from .config import PromptConfig

MULTILINE_QUESTION_TEMPLATE = (
    '{% if show_help %}{{ color(config.icons.help.format) }}{{ config.icons.help.text }} '
    '{{ help }}{{ color("reset") }}\n{% endif %}'
    '{{ color(config.icons.question.format) }}{{ config.icons.question.text }} {{ color("reset") }}'
    '{{ color("default+hb") }}{{ message }} {{ color("reset") }}'
    '{% if show_answer %}'
    '\n{{ color("cyan") }}{{ answer }}{{ color("reset") }}'
    '{% if answer %}\n{% endif %}'
    '{% else %}'
    '{% if default %}{{ color("white") }}({{ default }}) {{ color("reset") }}{% endif %}'
    '{{ color("cyan") }}[Enter 2 empty lines to finish]{{ color("reset") }}'
    '{% endif %}'
)


@dataclass
class Multiline(Prompt):
    """Reads lines until two empty lines in a row; the answer is the trimmed text."""

    message: str = ""
    default: str = ""
    help: str = ""

    def prompt(self, config: PromptConfig) -> str:
        """Ask for the text and return it, or the default when nothing was typed."""
        self.render(MULTILINE_QUESTION_TEMPLATE, MultilineTemplateData(self, config))

        lines: list[str] = []
        empty_once = False
        while True:
            line = self.read_line()
            self._write("\n")
            if line == "":
                if empty_once:
                    count = len(lines) + 2
                    self._cursor_previous_line(count)
                    for _ in range(count):
                        self._erase_line()
                        self._cursor_next_line(1)
                    self._cursor_previous_line(count)
                    break
                empty_once = True
            else:
                empty_once = False
            lines.append(line)

        text = "\n".join(lines).strip()
        if not text:
            return self.default

        self.append_rendered_text(text)
        return text

    def cleanup(self, config: PromptConfig, value: str) -> None:
        """Redraw the question with the text that was entered."""
        self.render(
            MULTILINE_QUESTION_TEMPLATE,
            MultilineTemplateData(self, config, answer=value, show_answer=True),
        )


@dataclass
class MultilineTemplateData:
    """Values available to the multiline template."""

    multiline: Multiline
    config: PromptConfig
    answer: str = ""
    show_answer: bool = False
    show_help: bool = False

    @property
    def message(self) -> str:
        return self.multiline.message

    @property
    def default(self) -> str:
        return self.multiline.default

    @property
    def help(self) -> str:
        return self.multiline.help