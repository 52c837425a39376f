"""A masked text input."""

from __future__ import annotations

from dataclasses import dataclass

from .base import Prompt
from .config import PromptConfig
from .template import run_template

MASKED_QUESTION_TEMPLATE = (
    '{% if show_help %}{{ color(config.icons.help.format) }}{{ config.icons.help.text }} '
    '{{ help }}{{ color("reset") }}\n{% endif %}'
    '{{ color(config.icons.question.format) }}{{ config.icons.question.text }} {{ color("reset") }}'
    '{{ color("default+hb") }}{{ message }} {{ color("reset") }}'
    '{% if help and not show_help %}{{ color("cyan") }}[{{ config.help_input }} for help]'
    '{{ color("reset") }} {% endif %}'
)


@dataclass
class Password(Prompt):
    """Like an input, but typed text is shown as asterisks and there is no default."""

    message: str = ""
    help: str = ""

    def prompt(self, config: PromptConfig) -> str:
        """Ask for the hidden value and return it."""
        user, _ = run_template(MASKED_QUESTION_TEMPLATE, PasswordTemplateData(self, config))
        self._write(user)

        if not self.help:
            return self.read_line("*")

        while True:
            line = self.read_line("*")
            if line != config.help_input:
                break
            self.render(
                MASKED_QUESTION_TEMPLATE,
                PasswordTemplateData(self, config, show_help=True),
            )

        self.append_rendered_text("*" * len(line))
        return line

    def cleanup(self, config: PromptConfig, value: str) -> None:
        """Leave the masked line as it is."""
        return None


@dataclass
class PasswordTemplateData:
    """Values available to the masked input template."""

    password: Password
    config: PromptConfig
    show_help: bool = False

    @property
    def message(self) -> str:
        return self.password.message

    @property
    def help(self) -> str:
        return self.password.help