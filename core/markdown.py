"""Markdown hover documents."""

import re

_SPECIAL = re.compile(r"([\\`*_{}\[\]()#+\-!~>|<])")


def escape_markdown(text: str) -> str:
    """Escape characters that markdown would treat as syntax."""
    return _SPECIAL.sub(r"\\\1", text)


class MarkdownText:
    """Markdown document built by appending fragments.

    `is_trusted` tells the renderer to honour `command:` links.
    """

    def __init__(self, value: str = "", is_trusted: bool = False):
        self.value = value
        self.is_trusted = is_trusted

    def append_markdown(self, value: str) -> "MarkdownText":
        self.value += value
        return self

    def append_text(self, value: str) -> "MarkdownText":
        """Append plain text, escaped so it renders literally."""
        self.value += escape_markdown(value)
        return self

    def __str__(self) -> str:
        return self.value

    def __repr__(self) -> str:
        return f"MarkdownText({self.value!r}, is_trusted={self.is_trusted})"
