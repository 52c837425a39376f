"""A yes/no question answered with a typed reply."""

from __future__ import annotations

import json
import re
from dataclasses import dataclass

from .base import Prompt
from .config import PromptConfig
from .template import run_template

CONFIRM_QUESTION_TEMPLATE = (
    '{% if show_help %}{{ color(config.icons.help.format) }}{{ config.icons.help.text }} '
    '{{ help }}{{ color("reset") }}\n{% endif %}'
    '{{ color(config.icons.question.format) }}{{ config.icons.question.text }} {{ color("reset") }}'
    '{{ color("default+hb") }}{{ message }} {{ color("reset") }}'
    '{% if answer %}'
    '{{ color("cyan") }}{{ answer }}{{ color("reset") }}\n'
    '{% else %}'
    '{% if help and not show_help %}{{ color("cyan") }}[{{ config.help_input }} for help]'
    '{{ color("reset") }} {% endif %}'
    '{{ color("white") }}{% if default %}(Y/n) {% else %}(y/N) {% endif %}{{ color("reset") }}'
    '{% endif %}'
)

_ERROR_TEMPLATE = (
    '{{ color(config.icons.error.format) }}{{ config.icons.error.text }} '
    'Sorry, your reply was invalid: {{ message }}{{ color("reset") }}\n'
)

_YES = re.compile(r"y(?:es)?", re.IGNORECASE)
_NO = re.compile(r"no?", re.IGNORECASE)

_ANSWER_WORDS = {True: "Yes", False: "No"}


def yes_no(value: bool) -> str:
    """Return the word shown for a boolean answer."""
    return _ANSWER_WORDS[bool(value)]


@dataclass
class Confirm(Prompt):
    """A text input that accepts yes/no answers; the answer is a bool."""

    message: str = ""
    default: bool = False
    help: str = ""

    def _render_question(self, config: PromptConfig, *, answer: str = "", show_help: bool = False) -> None:
        self.render(
            CONFIRM_QUESTION_TEMPLATE,
            ConfirmTemplateData(self, config, answer=answer, show_help=show_help),
        )

    def _report_invalid(self, config: PromptConfig, message: str) -> None:
        self._reset()
        user, _ = run_template(_ERROR_TEMPLATE, {"config": config, "message": message})
        self._write(user)

    def _get_bool(self, config: PromptConfig) -> bool:
        show_help = False
        while True:
            reply = self.read_line()
            if _YES.fullmatch(reply):
                return True
            if _NO.fullmatch(reply):
                return False
            if reply == "":
                return self.default
            if reply == config.help_input and self.help:
                show_help = True
                self._render_question(config, show_help=True)
                continue
            quoted = json.dumps(reply, ensure_ascii=False)
            self._report_invalid(config, f"{quoted} is not a valid answer, please try again.")
            self._render_question(config, show_help=show_help)

    def prompt(self, config: PromptConfig) -> bool:
        """Ask the question and return the answer."""
        self._render_question(config)
        return self._get_bool(config)

    def cleanup(self, config: PromptConfig, value: bool) -> None:
        """Redraw the question with the final answer."""
        self._render_question(config, answer=yes_no(value))


@dataclass
class ConfirmTemplateData:
    """Values available to the confirm template."""

    confirm: Confirm
    config: PromptConfig
    answer: str = ""
    show_help: bool = False

    @property
    def message(self) -> str:
        return self.confirm.message

    @property
    def default(self) -> bool:
        return self.confirm.default

    @property
    def help(self) -> str:
        return self.confirm.help