import io
import os
import shlex
import subprocess
import sys

import pytest

from surveykit import template
from surveykit.base import Stdio
from surveykit.config import default_icons, default_prompt_config
from surveykit.editor import (
    EDITOR_QUESTION_TEMPLATE,
    Editor,
    EditorTemplateData,
    default_editor,
)


@pytest.fixture(autouse=True)
def no_color(monkeypatch):
    monkeypatch.setattr(template, "DISABLE_COLOR", True)


def _stdio(text=""):
    return Stdio(in_=io.StringIO(text), out=io.StringIO(), err=io.StringIO())


def _command(code, *extra):
    parts = [shlex.quote(sys.executable), "-c", shlex.quote(code), *extra]
    return " ".join(parts)


WRITE_MESSAGE = _command("import sys; open(sys.argv[-1], 'w').write('Add editor prompt tests\\n')")
DO_NOTHING = _command("pass")
TRUNCATE = _command("import sys; open(sys.argv[-1], 'w').close()")
UPPERCASE = _command(
    "import sys; p = sys.argv[-1]; t = open(p, encoding='utf-8-sig').read(); "
    "open(p, 'w').write(t.upper())"
)
WRITE_PATH = _command("import sys; p = sys.argv[-1]; open(p, 'w').write(p)")

QUESTION = default_icons().question.text
HELP = default_icons().help.text
HELP_INPUT = default_prompt_config().help_input


@pytest.mark.parametrize(
    "prompt_kwargs, data_kwargs, expected",
    [
        (
            {"message": "What is your favorite month:"},
            {},
            f"{QUESTION} What is your favorite month: [Enter to launch editor] ",
        ),
        (
            {"message": "What is your favorite month:", "default": "April"},
            {},
            f"{QUESTION} What is your favorite month: (April) [Enter to launch editor] ",
        ),
        (
            {"message": "What is your favorite month:", "default": "April", "hide_default": True},
            {},
            f"{QUESTION} What is your favorite month: [Enter to launch editor] ",
        ),
        (
            {"message": "What is your favorite month:"},
            {"answer": "October", "show_answer": True},
            f"{QUESTION} What is your favorite month: October\n",
        ),
        (
            {"message": "What is your favorite month:", "help": "This is helpful"},
            {},
            f"{QUESTION} What is your favorite month: [{HELP_INPUT} for help] [Enter to launch editor] ",
        ),
        (
            {"message": "What is your favorite month:", "default": "April", "help": "This is helpful"},
            {},
            f"{QUESTION} What is your favorite month: [{HELP_INPUT} for help] (April) [Enter to launch editor] ",
        ),
        (
            {"message": "What is your favorite month:", "help": "This is helpful"},
            {"show_help": True},
            f"{HELP} This is helpful\n{QUESTION} What is your favorite month: [Enter to launch editor] ",
        ),
        (
            {"message": "What is your favorite month:", "default": "April", "help": "This is helpful"},
            {"show_help": True},
            f"{HELP} This is helpful\n{QUESTION} What is your favorite month: (April) [Enter to launch editor] ",
        ),
    ],
)
def test_editor_render(prompt_kwargs, data_kwargs, expected):
    stdio = _stdio()
    prompt = Editor(**prompt_kwargs, stdio=stdio)
    data = EditorTemplateData(prompt, default_prompt_config(), **data_kwargs)
    prompt.render(EDITOR_QUESTION_TEMPLATE, data)
    assert expected in stdio.out.getvalue()


def test_editor_prompt_interaction():
    stdio = _stdio("\n")
    prompt = Editor(editor=WRITE_MESSAGE, message="Edit git commit message", stdio=stdio)
    assert prompt.prompt(default_prompt_config()) == "Add editor prompt tests\n"
    assert "Edit git commit message [Enter to launch editor]" in stdio.out.getvalue()


def test_editor_prompt_with_default():
    stdio = _stdio("\n")
    prompt = Editor(editor=DO_NOTHING, message="Edit git commit message", default="No comment", stdio=stdio)
    assert prompt.prompt(default_prompt_config()) == "No comment"
    assert "Edit git commit message (No comment) [Enter to launch editor]" in stdio.out.getvalue()


def test_editor_prompt_overriding_default():
    prompt = Editor(
        editor=WRITE_MESSAGE, message="Edit git commit message", default="No comment", stdio=_stdio("\n")
    )
    assert prompt.prompt(default_prompt_config()) == "Add editor prompt tests\n"


def test_editor_prompt_hiding_default():
    stdio = _stdio("\n")
    prompt = Editor(
        editor=DO_NOTHING,
        message="Edit git commit message",
        default="No comment",
        hide_default=True,
        stdio=stdio,
    )
    assert prompt.prompt(default_prompt_config()) == "No comment"
    output = stdio.out.getvalue()
    assert "Edit git commit message [Enter to launch editor]" in output
    assert "(No comment)" not in output


def test_editor_prompt_for_help():
    stdio = _stdio("?\n")
    prompt = Editor(
        editor=WRITE_MESSAGE,
        message="Edit git commit message",
        help="Describe your git commit",
        stdio=stdio,
    )
    assert prompt.prompt(default_prompt_config()) == "Add editor prompt tests\n"
    output = stdio.out.getvalue()
    assert f"Edit git commit message [{HELP_INPUT} for help] [Enter to launch editor]" in output
    assert "Describe your git commit" in output


def test_editor_append_default_cleared_returns_empty():
    prompt = Editor(
        editor=TRUNCATE,
        message="Edit git commit message",
        default="No comment",
        append_default=True,
        stdio=_stdio("\n"),
    )
    assert prompt.prompt(default_prompt_config()) == ""


def test_editor_append_default_is_written_to_file():
    prompt = Editor(
        editor=UPPERCASE,
        message="Edit git commit message",
        default="No comment",
        append_default=True,
        stdio=_stdio("\n"),
    )
    assert prompt.prompt(default_prompt_config()) == "NO COMMENT"


def test_editor_with_editor_args():
    editor = _command("import sys; open(sys.argv[-1], 'w').write('Add editor prompt tests\\n')", "--")
    prompt = Editor(editor=editor, message="Edit git commit message", stdio=_stdio("\n"))
    assert prompt.prompt(default_prompt_config()) == "Add editor prompt tests\n"


def test_editor_prompt_again_starts_from_invalid_value():
    prompt = Editor(editor=UPPERCASE, message="Edit", stdio=_stdio("\n"))
    assert prompt.prompt_again(default_prompt_config(), "draft", ValueError("bad")) == "DRAFT"


def test_editor_file_name_pattern_and_removal():
    prompt = Editor(editor=WRITE_PATH, message="Edit", file_name="notes*.md", stdio=_stdio("\n"))
    path = prompt.prompt(default_prompt_config())
    name = os.path.basename(path)
    assert name.startswith("notes")
    assert name.endswith(".md")
    assert not os.path.exists(path)


def test_editor_failure_raises():
    prompt = Editor(editor=_command("import sys; sys.exit(3)"), message="Edit", stdio=_stdio("\n"))
    with pytest.raises(subprocess.CalledProcessError):
        prompt.prompt(default_prompt_config())


def test_editor_interrupt_raises():
    prompt = Editor(editor=DO_NOTHING, message="Edit", stdio=_stdio("\x03"))
    with pytest.raises(KeyboardInterrupt):
        prompt.prompt(default_prompt_config())


def test_editor_cleanup_shows_received():
    stdio = _stdio()
    prompt = Editor(message="What is your favorite month:", stdio=stdio)
    prompt.cleanup(default_prompt_config(), "text")
    assert f"{QUESTION} What is your favorite month: <Received>\n" in stdio.out.getvalue()


def test_default_editor_prefers_visual(monkeypatch):
    monkeypatch.setenv("VISUAL", "nano")
    monkeypatch.setenv("EDITOR", "emacs")
    assert default_editor() == "nano"


def test_default_editor_falls_back_to_editor(monkeypatch):
    monkeypatch.delenv("VISUAL", raising=False)
    monkeypatch.setenv("EDITOR", "emacs")
    assert default_editor() == "emacs"


def test_default_editor_without_environment(monkeypatch):
    monkeypatch.delenv("VISUAL", raising=False)
    monkeypatch.delenv("EDITOR", raising=False)
    assert default_editor() in ("vim", "notepad")