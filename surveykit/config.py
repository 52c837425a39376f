"""Runtime configuration shared by all prompts."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable


@dataclass
class Icon:
    """A glyph shown by a prompt and the colour style it is drawn in."""

    text: str
    format: str


@dataclass
class IconSet:
    """Icons used by the prompt templates."""

    help: Icon = field(default_factory=lambda: Icon("?", "cyan"))
    question: Icon = field(default_factory=lambda: Icon("?", "green+hb"))
    error: Icon = field(default_factory=lambda: Icon("X", "red"))
    marked_option: Icon = field(default_factory=lambda: Icon("[x]", "green"))
    unmarked_option: Icon = field(default_factory=lambda: Icon("[ ]", "default+hb"))
    select_focus: Icon = field(default_factory=lambda: Icon(">", "cyan+b"))


def default_filter(filter_value: str, option_value: str, index: int) -> bool:
    """Keep options that contain the filter, ignoring case."""
    return filter_value.lower() in option_value.lower()


@dataclass
class PromptConfig:
    """Settings passed to every prompt while it runs."""

    page_size: int = 7
    icons: IconSet = field(default_factory=IconSet)
    help_input: str = "?"
    suggest_input: str = "tab"
    filter: Callable[[str, str, int], bool] = default_filter
    keep_filter: bool = False
    show_cursor: bool = False


def default_icons() -> IconSet:
    """Return a fresh copy of the default icon set."""
    return IconSet()


def default_prompt_config() -> PromptConfig:
    """Return a fresh default configuration."""
    return PromptConfig()