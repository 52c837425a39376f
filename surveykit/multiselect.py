"""A list of options from which several can be chosen."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from .base import (
    KEY_ARROW_DOWN,
    KEY_ARROW_LEFT,
    KEY_ARROW_RIGHT,
    KEY_ARROW_UP,
    KEY_BACKSPACE,
    KEY_DELETE,
    KEY_DELETE_LINE,
    KEY_DELETE_WORD,
    KEY_END_TRANSMISSION,
    KEY_ESCAPE,
    KEY_INTERRUPT,
    KEY_SPACE,
    KEY_TAB,
    Prompt,
    paginate,
)
from .config import PromptConfig
from .write import OptionAnswer, option_answer_list

MULTI_SELECT_QUESTION_TEMPLATE = (
    '{% if show_help %}{{ color(config.icons.help.format) }}{{ config.icons.help.text }} '
    '{{ help }}{{ color("reset") }}\n{% endif %}'
    '{{ color(config.icons.question.format) }}{{ config.icons.question.text }} {{ color("reset") }}'
    '{{ color("default+hb") }}{{ message }}{{ filter_message }}{{ color("reset") }}'
    '{% if show_answer %}{{ color("cyan") }} {{ answer }}{{ color("reset") }}\n'
    '{% else %}'
    '  {{ color("cyan") }}[Use arrows to move, space to select, <right> to all, '
    '<left> to none, type to filter'
    '{% if help and not show_help %}, {{ config.help_input }} for more help{% endif %}]'
    '{{ color("reset") }}\n'
    '{% for option in page_entries %}'
    '{% if loop.index0 == selected_index %}{{ color(config.icons.select_focus.format) }}'
    '{{ config.icons.select_focus.text }}{{ color("reset") }}{% else %} {% endif %}'
    '{% if (checked or {}).get(option.index) %}{{ color(config.icons.marked_option.format) }} '
    '{{ config.icons.marked_option.text }} {% else %}'
    '{{ color(config.icons.unmarked_option.format) }} {{ config.icons.unmarked_option.text }} '
    '{% endif %}'
    '{{ color("reset") }} {{ option.value }}\n'
    '{% endfor %}'
    '{% endif %}'
)


@dataclass
class MultiSelect(Prompt):
    """Options chosen with arrows and space; the answer is a list of OptionAnswer."""

    message: str = ""
    options: list[str] = field(default_factory=list)
    default: Any = None
    help: str = ""
    page_size: int = 0
    vim_mode: bool = False
    filter_message: str = ""
    filter: Optional[Callable[[str, str, int], bool]] = None
    checked: dict[int, bool] = field(default_factory=dict)
    _filter_text: str = field(default="", init=False, repr=False, compare=False)
    _selected_index: int = field(default=0, init=False, repr=False, compare=False)
    _showing_help: bool = field(default=False, init=False, repr=False, compare=False)

    def _page_size(self, config: PromptConfig) -> int:
        return self.page_size or config.page_size

    def _clear_filter(self, config: PromptConfig) -> None:
        if not config.keep_filter:
            self._filter_text = ""

    def on_change(self, key: str, config: PromptConfig) -> None:
        """Update the selection state for one key press and redraw."""
        options = self.filter_options(config)
        old_filter = self._filter_text

        if key == KEY_ARROW_UP or (self.vim_mode and key == "k"):
            if self._selected_index == 0:
                self._selected_index = len(options) - 1
            else:
                self._selected_index -= 1
        elif key in (KEY_TAB, KEY_ARROW_DOWN) or (self.vim_mode and key == "j"):
            if self._selected_index == len(options) - 1:
                self._selected_index = 0
            else:
                self._selected_index += 1
        elif key == KEY_SPACE:
            if self._selected_index < len(options):
                index = options[self._selected_index].index
                self.checked[index] = not self.checked.get(index, False)
                self._clear_filter(config)
        elif key == config.help_input and self.help:
            self._showing_help = True
        elif key == KEY_ESCAPE:
            self.vim_mode = not self.vim_mode
        elif key in (KEY_DELETE_WORD, KEY_DELETE_LINE):
            self._filter_text = ""
        elif key in (KEY_DELETE, KEY_BACKSPACE):
            self._filter_text = self._filter_text[:-1]
        elif key >= KEY_SPACE:
            self._filter_text += key
            self.vim_mode = False
        elif key == KEY_ARROW_RIGHT:
            for option in options:
                self.checked[option.index] = True
            self._clear_filter(config)
        elif key == KEY_ARROW_LEFT:
            for option in options:
                self.checked[option.index] = False
            self._clear_filter(config)

        self.filter_message = f" {self._filter_text}" if self._filter_text else ""
        if old_filter != self._filter_text:
            options = self.filter_options(config)
            if options and len(options) <= self._selected_index:
                self._selected_index = len(options) - 1

        entries, index = paginate(self._page_size(config), options, self._selected_index)
        self.render(
            MULTI_SELECT_QUESTION_TEMPLATE,
            MultiSelectTemplateData(
                self,
                config,
                selected_index=index,
                checked=self.checked,
                show_help=self._showing_help,
                page_entries=entries,
            ),
        )

    def filter_options(self, config: PromptConfig) -> list[OptionAnswer]:
        """Return the options that pass the current filter."""
        if not self._filter_text:
            return option_answer_list(self.options)
        keep = self.filter or config.filter
        return [
            OptionAnswer(option, index)
            for index, option in enumerate(self.options)
            if keep(self._filter_text, option, index)
        ]

    def _apply_default(self) -> None:
        if not isinstance(self.default, (list, tuple)):
            return
        for item in self.default:
            if isinstance(item, str):
                if item in self.options:
                    self.checked[self.options.index(item)] = True
            elif isinstance(item, int) and not isinstance(item, bool):
                self.checked[item] = True

    def prompt(self, config: PromptConfig) -> list[OptionAnswer]:
        """Show the options and return the ones checked when enter is pressed."""
        self._apply_default()
        if not self.options:
            raise ValueError("please provide options to select from")

        entries, index = paginate(
            self._page_size(config), option_answer_list(self.options), self._selected_index
        )
        self._hide_cursor()
        try:
            self.render(
                MULTI_SELECT_QUESTION_TEMPLATE,
                MultiSelectTemplateData(
                    self,
                    config,
                    selected_index=index,
                    checked=self.checked,
                    page_entries=entries,
                ),
            )
            while True:
                key = self.read_key()
                if key in ("\r", "\n") or key == KEY_END_TRANSMISSION:
                    break
                if key == KEY_INTERRUPT:
                    raise KeyboardInterrupt
                self.on_change(key, config)
        finally:
            self._show_cursor()

        self._filter_text = ""
        self.filter_message = ""
        return [
            OptionAnswer(option, index)
            for index, option in enumerate(self.options)
            if self.checked.get(index)
        ]

    def cleanup(self, config: PromptConfig, value: list[OptionAnswer]) -> None:
        """Replace the option list with a summary of the chosen values."""
        self.render(
            MULTI_SELECT_QUESTION_TEMPLATE,
            MultiSelectTemplateData(
                self,
                config,
                selected_index=self._selected_index,
                checked=self.checked,
                answer=", ".join(answer.value for answer in value),
                show_answer=True,
            ),
        )


@dataclass
class MultiSelectTemplateData:
    """Values available to the multi-select template."""

    multi_select: MultiSelect
    config: PromptConfig
    answer: str = ""
    show_answer: bool = False
    checked: dict[int, bool] = field(default_factory=dict)
    selected_index: int = 0
    show_help: bool = False
    page_entries: list[OptionAnswer] = field(default_factory=list)

    @property
    def message(self) -> str:
        return self.multi_select.message

    @property
    def filter_message(self) -> str:
        return self.multi_select.filter_message

    @property
    def help(self) -> str:
        return self.multi_select.help