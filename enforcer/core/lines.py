from __future__ import annotations


def split_lines(text: str) -> list[str]:
    """Split on "\\n" only, dropping one trailing "\\r" per line.

    Form feeds, vertical tabs and Unicode separators stay inside their line.
    A final newline does not start an extra empty line.
    """
    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]
