"""Rendering of prompt templates, with and without ANSI colour codes."""

from __future__ import annotations

import dataclasses
import threading
from collections.abc import Mapping
from typing import Any

import jinja2

#: When true, user-facing output is rendered without colour escape codes.
DISABLE_COLOR = False

RESET = "\x1b[0m"

_COLORS = {
    "black": 0,
    "red": 1,
    "green": 2,
    "yellow": 3,
    "blue": 4,
    "magenta": 5,
    "cyan": 6,
    "white": 7,
    "default": 9,
}

_FG_ATTRIBUTES = (("b", "1;"), ("B", "5;"), ("u", "4;"), ("i", "7;"), ("s", "9;"))


def color_code(style: str) -> str:
    """Return the ANSI escape sequence for a style such as ``"red+b:white"``."""
    if not style or style == "off":
        return ""
    if style == "reset":
        return RESET

    fore, _, back = style.partition(":")
    fg_key, _, fg_style = fore.partition("+")
    bg_key, _, bg_style = back.partition("+")

    parts = ["\x1b["]
    base = 30
    for flag, code in _FG_ATTRIBUTES:
        if flag in fg_style:
            parts.append(code)
    if "h" in fg_style:
        base = 90
    if fg_key.isdigit():
        parts.append(f"38;5;{int(fg_key)};")
    else:
        parts.append(f"{base + _COLORS.get(fg_key, 0)};")

    if bg_key:
        base = 100 if "h" in bg_style else 40
        if bg_key.isdigit():
            parts.append(f"48;5;{int(bg_key)};")
        else:
            parts.append(f"{base + _COLORS.get(bg_key, 0)};")

    return "".join(parts)[:-1] + "m"


class _Palette:
    """The ``color`` template function, emitting escapes only when enabled."""

    def __init__(self, enabled: bool):
        self.enabled = enabled

    def __call__(self, style: str) -> str:
        return color_code(style) if self.enabled else ""


def _environment(color: _Palette) -> jinja2.Environment:
    env = jinja2.Environment(autoescape=False, keep_trailing_newline=True)
    env.globals["color"] = color
    return env


_COLOR_ENV = _environment(_Palette(True))
_PLAIN_ENV = _environment(_Palette(False))

_cache: dict[tuple[str, bool], tuple[jinja2.Template, jinja2.Template]] = {}
_cache_lock = threading.Lock()


def get_template_pair(template: str) -> tuple[jinja2.Template, jinja2.Template]:
    """Compile a template twice: for the user (maybe coloured) and for layout (plain)."""
    key = (template, DISABLE_COLOR)
    with _cache_lock:
        cached = _cache.get(key)
    if cached is not None:
        return cached

    plain = _PLAIN_ENV.from_string(template)
    user = plain if DISABLE_COLOR else _COLOR_ENV.from_string(template)
    pair = (user, plain)
    with _cache_lock:
        _cache[key] = pair
    return pair


def _context(data: Any) -> dict[str, Any]:
    if data is None:
        return {}
    if isinstance(data, Mapping):
        return dict(data)
    if dataclasses.is_dataclass(data) and not isinstance(data, type):
        context = {f.name: getattr(data, f.name) for f in dataclasses.fields(data)}
    else:
        context = {}
    for name in dir(data):
        if not name.startswith("_") and name not in context:
            context[name] = getattr(data, name)
    return context


def run_template(template: str, data: Any) -> tuple[str, str]:
    """Render a template, returning (user output, layout output without escapes)."""
    user, plain = get_template_pair(template)
    context = _context(data)
    return user.render(context), plain.render(context)