from __future__ import annotations

import logging
from typing import Optional

from enforcer.core.errors import EnforcerCheckError
from enforcer.core.lines import split_lines


logger = logging.getLogger(__name__)


# Per-line content rules:
# - C_TRAILING_WHITESPACE: line ends with a space or tab
# - C_HAS_TABS: line contains a tab (skipped when tabs are allowed)
# - C_ILLEGAL_CHARACTERS: non-ASCII character, or content that is not UTF-8
# - C_LINE_TOO_LONG: more than max_line_length characters (skipped when None)

FIXABLE_CODES = frozenset({"C_TRAILING_WHITESPACE", "C_HAS_TABS"})


def check_content(
    text: str,
    *,
    file: Optional[str] = None,
    allow_tabs: bool = False,
    max_line_length: Optional[int] = None,
) -> list[EnforcerCheckError]:
    """Check decoded file content line by line.

    Returns findings in line order; a line yields at most one finding per code.
    """
    logger.debug("check content of %s", file or "<text>")
    errors: list[EnforcerCheckError] = []

    for i, line in enumerate(split_lines(text), start=1):
        loc = f"line:{i}"
        if line.endswith((" ", "\t")):
            errors.append(
                EnforcerCheckError(
                    code="C_TRAILING_WHITESPACE",
                    message="line ends with whitespace",
                    file=file,
                    path=loc,
                )
            )
        if not allow_tabs and "\t" in line:
            errors.append(
                EnforcerCheckError(
                    code="C_HAS_TABS",
                    message=f"line contains {line.count(chr(9))} tab(s)",
                    file=file,
                    path=loc,
                )
            )
        if not line.isascii():
            errors.append(
                EnforcerCheckError(
                    code="C_ILLEGAL_CHARACTERS",
                    message="line contains non-ASCII characters",
                    file=file,
                    path=loc,
                )
            )
        if max_line_length is not None and len(line) > max_line_length:
            errors.append(
                EnforcerCheckError(
                    code="C_LINE_TOO_LONG",
                    message=f"line has {len(line)} characters (max={max_line_length})",
                    file=file,
                    path=loc,
                )
            )

    return errors


def check_bytes(
    data: bytes,
    *,
    file: Optional[str] = None,
    allow_tabs: bool = False,
    max_line_length: Optional[int] = None,
) -> list[EnforcerCheckError]:
    """Decode as UTF-8 and check. Undecodable content is a single finding."""
    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError as e:
        line_no = data.count(b"\n", 0, e.start) + 1
        return [
            EnforcerCheckError(
                code="C_ILLEGAL_CHARACTERS",
                message=f"content is not valid UTF-8 (first offending line {line_no})",
                file=file,
                path=None,
            )
        ]
    return check_content(
        text, file=file, allow_tabs=allow_tabs, max_line_length=max_line_length
    )


def is_fixable(errors: list[EnforcerCheckError]) -> bool:
    return any(e.code in FIXABLE_CODES for e in errors)
