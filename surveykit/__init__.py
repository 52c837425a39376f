"""Interactive terminal prompts (confirm, input, password, multiline, editor, multi-select) and answer writing."""

__version__ = "0.1.0"