from __future__ import annotations

from enforcer.core.expand.expand_tabs import expand_tabs
from enforcer.core.lines import split_lines
from enforcer.core.model import DEFAULT_TAB_WIDTH


def _join(lines: list[str]) -> str:
    if not lines:
        return ""
    return "\n".join(lines) + "\n"


def remove_trailing_whitespace(text: str) -> str:
    return _join([line.rstrip(" \t") for line in split_lines(text)])


def untabify(text: str, tab_width: int = DEFAULT_TAB_WIDTH) -> str:
    """Convert tabs to spaces, line by line."""
    return _join([expand_tabs(line, tab_width, fill=" ") for line in split_lines(text)])


def clean_content(text: str, *, tab_width: int = DEFAULT_TAB_WIDTH, allow_tabs: bool = False) -> str:
    """Strip trailing whitespace, then convert tabs to spaces unless tabs are allowed.

    Output always ends with exactly one newline (empty input stays empty).
    """
    cleaned = remove_trailing_whitespace(text)
    if allow_tabs:
        return cleaned
    return untabify(cleaned, tab_width)
