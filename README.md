# surveykit

Interactive questions for terminal programs. A prompt draws a question, reads
the user's keys from a stream and returns a typed answer. Templates are
rendered with Jinja2. Each one is rendered twice: once for the user, with ANSI
colour codes, and once without them for layout.

## Installing

```
pip install surveykit
```

To run the test suite:

```
pip install "surveykit[test]"
pytest
```

## Prompts

| Class         | Module                  | Answer                                        |
|---------------|-------------------------|-----------------------------------------------|
| `Confirm`     | `surveykit.confirm`     | `bool`                                        |
| `Input`       | `surveykit.input`       | `str`, with optional suggestions              |
| `Password`    | `surveykit.password`    | `str`, echoed as `*`                          |
| `Multiline`   | `surveykit.multiline`   | `str`, ends after two empty lines in a row    |
| `Editor`      | `surveykit.editor`      | `str`, written in an external editor          |
| `MultiSelect` | `surveykit.multiselect` | `list[OptionAnswer]`                          |

Every prompt is a dataclass derived from `surveykit.base.Prompt`. Each has two
methods:

- `prompt(config)` asks the question and returns the answer.
- `cleanup(config, value)` redraws the question with the final answer in
  place. For `Password` this does nothing.

A prompt reads from and writes to the streams in its `Stdio`. These default to
`sys.stdin`, `sys.stdout` and `sys.stderr`. You can set them with the
keyword-only `stdio` argument or with `with_stdio(stdio)`, which returns the
prompt:

```python
import io

from surveykit.base import Stdio
from surveykit.config import default_prompt_config
from surveykit.confirm import Confirm
from surveykit.multiselect import MultiSelect

config = default_prompt_config()

likes_pie = Confirm(message="Do you like pie?", default=True).with_stdio(
    Stdio(in_=io.StringIO("y\n"), out=io.StringIO())
)
answer = likes_pie.prompt(config)      # True
likes_pie.cleanup(config, answer)

days = MultiSelect(
    message="What days do you prefer:",
    options=["Sunday", "Monday", "Tuesday", "Wednesday"],
    default=["Monday"],
)
chosen = days.prompt(config)
days.cleanup(config, chosen)
print([opt.value for opt in chosen])
```

### Behaviour of each prompt

- **Confirm** accepts `y`/`yes` and `n`/`no` in any case. An empty reply gives
  `default`. Any other reply prints an error line and asks again.
- **Input** returns `default` when the line is empty. When `suggest` is set,
  Tab calls it with the text typed so far:
  - One suggestion replaces the text.
  - Several suggestions are listed. Arrow keys and Tab move between them,
    Enter picks the current one, and Escape goes back to what was typed.
- **Password** echoes `*` for each character and has no default.
- **Multiline** collects lines until two empty lines in a row. It returns the
  joined text with surrounding whitespace removed, or `default` when that text
  is empty. It does not react to the help key.
- **Editor** waits for Enter, then writes a temporary file that starts with a
  UTF-8 byte order mark. It runs the editor on that file and returns what was
  saved, without the mark.
  - The editor command is `editor` if set, otherwise `default_editor()`:
    `$VISUAL`, then `$EDITOR`, then `notepad` on Windows and `vim` elsewhere.
    The command is split with shell quoting rules.
  - `file_name` is the temporary file's name pattern, with `*` standing for
    the random part. It defaults to `survey*.txt`.
  - With `append_default` the file starts with `default`. Otherwise an empty
    result gives `default`.
  - `hide_default` leaves the default out of the question line.
  - `prompt_again(config, invalid, err)` reopens the editor on a rejected
    answer.
  - A non-zero exit from the editor raises `subprocess.CalledProcessError`.
- **MultiSelect** keys:

  | Key             | Action                                      |
  |-----------------|---------------------------------------------|
  | Up/Down, Tab    | move                                        |
  | Space           | toggle the focused option                   |
  | Right           | check every shown option                    |
  | Left            | uncheck every shown option                  |
  | printable keys  | filter the list                             |
  | Backspace       | delete the last filter character            |
  | Escape          | toggle vim mode (`j`/`k` to move)           |

  `default` may be a list of option texts or of indices. `checked` holds the
  checked state by index. `page_size` overrides the configured page size. A
  `filter` callable replaces the configured filter. With no options,
  `prompt` raises `ValueError`.

A prompt with a `help` text shows that text when the user enters the help key,
which is `?` by default.

Ctrl-C read from the input raises `KeyboardInterrupt`. Running out of input
raises `EOFError`.

## Configuration

`surveykit.config.default_prompt_config()` returns a `PromptConfig` with
these fields:

- `page_size`: 7
- `icons`: an `IconSet` of `Icon(text, format)` values; see `default_icons()`
- `help_input`: `"?"`
- `suggest_input`: `"tab"`. This is the text shown in the hint; the key itself
  is always Tab.
- `filter`: `default_filter`, a case-insensitive substring match
- `keep_filter`: `False`. When true, a multi-select filter is kept after
  selecting.
- `show_cursor`: `False`. When false, `Input` hides the cursor while reading.

## Storing answers

`surveykit.write.write_answer(target, name, value)` stores an answer in a
target:

- **An object with a `write_answer(name, value)` method** has that method
  called.
- **A `dict`** gets `target[name] = value`.
- **A `Ref`** has its `value` replaced. It is converted to `Ref.kind` when
  given, otherwise to the type of the value already held.
- **A `list`** is extended with the converted items.
- **Any other object** has the attribute matching `name` set.
  - The match is found by `find_field`. First it looks for a dataclass field
    whose metadata has `"survey"` equal to `name`. Then it looks for an
    attribute whose name matches `name` ignoring case. Fields of a nested
    dataclass marked with `"embed"` metadata are searched as if they belonged
    to the outer one.
  - When nothing matches, `FieldNotMatchError` is raised. `is_field_not_match`
    returns its question name.
  - The value is converted to the field's annotated type, or to the type of
    its current value.

Conversions:

- A string is parsed into `bool`, `int`, `float` or `timedelta`. Durations
  take the form `30s` or `1h30m`.
- An `OptionAnswer(value, index)` becomes its `value` for `str` and its
  `index` for `int`.
- Lists and tuples are converted item by item.

Anything that cannot be converted raises `TypeError` or `ValueError`.

```python
from surveykit.write import OptionAnswer, Ref, write_answer

count = Ref(0)
write_answer(count, "", "42")
assert count.value == 42

answers = {}
write_answer(answers, "day", OptionAnswer("Monday", 1))
assert answers["day"] == OptionAnswer("Monday", 1)
```

`option_answer_list(strings)` numbers a list of strings as `OptionAnswer`s.

## Templates and rendering

`surveykit.template.run_template(template, data)` renders a Jinja2 template
and returns two strings: `(user output, layout output)`.

- `data` may be a mapping or an object. For an object, its public attributes
  and properties are used.
- Templates call `color(style)`. In the layout output, and in the user output
  when `surveykit.template.DISABLE_COLOR` is true, it yields nothing.
- `color_code(style)` turns a style into its escape sequence. Styles look like
  `"cyan"`, `"default+hb"` or `"red+b:white"`, and `"reset"` gives the reset
  code.
- `get_template_pair` compiles and caches both variants.

`Prompt.render(template, data)` erases the lines drawn by the previous render
and writes the new output. `Prompt.append_rendered_text(text)` counts extra
text as part of what the next render erases.

Two more helpers are available:

- `Prompt.read_key()` reads one key and turns arrow escape sequences into
  arrow key codes.
- `Prompt.read_line(mask)` reads an edited line.

`surveykit.base.paginate(page_size, choices, selected)` returns the visible
page and the focused index within it.

## What it does not do

- There is no single-choice select prompt.
- There is no question runner that asks a list of named questions, validates
  or transforms answers, and writes them into a target. Call `prompt`,
  `cleanup` and `write_answer` yourself.
- Prompts do not switch the terminal into raw mode. They read their input
  stream one character at a time, so on a normal terminal keys arrive only
  after the terminal's own line buffering, and the terminal echoes them.
- There is no command-line program; this is a library only.