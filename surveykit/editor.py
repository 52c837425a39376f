"""A prompt that opens the user's editor on a temporary file."""

from __future__ import annotations

import io
import os
import shlex
import subprocess
import tempfile
from dataclasses import dataclass
from typing import Any

from .base import KEY_END_TRANSMISSION, KEY_INTERRUPT, Prompt
from .config import PromptConfig

EDITOR_QUESTION_TEMPLATE = (
    '{% if show_help %}{{ color(config.icons.help.format) }}{{ config.icons.help.text }} '
    '{{ help }}{{ color("reset") }}\n{% endif %}'
    '{{ color(config.icons.question.format) }}{{ config.icons.question.text }} {{ color("reset") }}'
    '{{ color("default+hb") }}{{ message }} {{ color("reset") }}'
    '{% if show_answer %}'
    '{{ color("cyan") }}{{ answer }}{{ color("reset") }}\n'
    '{% else %}'
    '{% if help and not show_help %}{{ color("cyan") }}[{{ config.help_input }} for help]'
    '{{ color("reset") }} {% endif %}'
    '{% if default and not hide_default %}{{ color("white") }}({{ default }}) '
    '{{ color("reset") }}{% endif %}'
    '{{ color("cyan") }}[Enter to launch editor] {{ color("reset") }}'
    '{% endif %}'
)

BOM = b"\xef\xbb\xbf"


def default_editor() -> str:
    """The editor named by $VISUAL or $EDITOR, else notepad on Windows and vim elsewhere."""
    return os.environ.get("VISUAL") or os.environ.get("EDITOR") or (
        "notepad" if os.name == "nt" else "vim"
    )


def _descriptor(stream: Any) -> Any:
    try:
        stream.fileno()
    except (AttributeError, OSError, io.UnsupportedOperation):
        return None
    return stream


@dataclass
class Editor(Prompt):
    """Launches an editor on enter; the answer is the saved text."""

    message: str = ""
    default: str = ""
    help: str = ""
    editor: str = ""
    hide_default: bool = False
    append_default: bool = False
    file_name: str = ""

    def prompt(self, config: PromptConfig) -> str:
        """Wait for enter, run the editor and return what was saved."""
        initial = self.default if self.default and self.append_default else ""
        return self._prompt(initial, config)

    def prompt_again(self, config: PromptConfig, invalid: Any, err: BaseException | None) -> str:
        """Reopen the editor on a rejected answer."""
        return self._prompt(str(invalid), config)

    def _wait_for_launch(self, config: PromptConfig) -> None:
        while True:
            key = self.read_key()
            if key in ("\r", "\n") or key == KEY_END_TRANSMISSION:
                return
            if key == KEY_INTERRUPT:
                raise KeyboardInterrupt
            if key == config.help_input and self.help:
                self.render(
                    EDITOR_QUESTION_TEMPLATE,
                    EditorTemplateData(self, config, show_help=True),
                )

    def _prompt(self, initial: str, config: PromptConfig) -> str:
        self.render(EDITOR_QUESTION_TEMPLATE, EditorTemplateData(self, config))

        self._hide_cursor()
        try:
            self._wait_for_launch(config)
        finally:
            self._show_cursor()

        prefix, star, suffix = (self.file_name or "survey*.txt").rpartition("*")
        if not star:
            prefix, suffix = suffix, ""
        fd, path = tempfile.mkstemp(prefix=prefix, suffix=suffix)
        try:
            # The byte order mark makes editors that guess encodings pick UTF-8.
            with os.fdopen(fd, "wb") as handle:
                handle.write(BOM)
                handle.write(initial.encode("utf-8"))

            args = shlex.split(self.editor or default_editor())
            args.append(path)
            subprocess.run(
                args,
                stdin=_descriptor(self.stdio.in_),
                stdout=_descriptor(self.stdio.out),
                stderr=_descriptor(self.stdio.err),
                check=True,
            )

            with open(path, "rb") as handle:
                raw = handle.read()
        finally:
            try:
                os.remove(path)
            except OSError:
                pass

        text = raw.removeprefix(BOM).decode("utf-8")
        if not text and not self.append_default:
            return self.default
        return text

    def cleanup(self, config: PromptConfig, value: Any) -> None:
        """Redraw the question, noting that an answer was received."""
        self.render(
            EDITOR_QUESTION_TEMPLATE,
            EditorTemplateData(self, config, answer="<Received>", show_answer=True),
        )


@dataclass
class EditorTemplateData:
    """Values available to the editor template."""

    editor: Editor
    config: PromptConfig
    answer: str = ""
    show_answer: bool = False
    show_help: bool = False

    @property
    def message(self) -> str:
        return self.editor.message

    @property
    def default(self) -> str:
        return self.editor.default

    @property
    def help(self) -> str:
        return self.editor.help

    @property
    def hide_default(self) -> bool:
        return self.editor.hide_default