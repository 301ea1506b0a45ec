from __future__ import annotations

import re

from enforcer.core.errors import EnforcerConfigError


DEFAULT_TAB_STOP_WIDTH = 8
DEFAULT_FILL = "-"

# A run is everything since the last tab or newline.
_RUN_BEFORE_TAB = re.compile(r"([^\t\n]*)\t")


def validate_tab_stop_width(tab_stop_width: object) -> int:
    # bool is an int subclass; True would silently mean width 1.
    if (
        isinstance(tab_stop_width, bool)
        or not isinstance(tab_stop_width, int)
        or tab_stop_width < 1
    ):
        raise EnforcerConfigError(
            code="E_INVALID_TAB_WIDTH",
            message=f"tab stop width must be a positive integer, got {tab_stop_width!r}",
            path="tab_width",
        )
    return tab_stop_width


def validate_fill(fill: object) -> str:
    if not isinstance(fill, str) or len(fill) != 1 or fill in ("\t", "\n", "\r"):
        raise EnforcerConfigError(
            code="E_INVALID_FILL",
            message=f"fill must be a single non-tab, non-newline character, got {fill!r}",
            path="fill",
        )
    return fill


def fill_length(run_length: int, tab_stop_width: int) -> int:
    """Fill characters needed after a run of `run_length` to reach the next stop.

    Always in [1, tab_stop_width]; an aligned run still advances a full stop.
    """
    return tab_stop_width - (run_length % tab_stop_width)


def expand_tabs(
    line: str, tab_stop_width: int = DEFAULT_TAB_STOP_WIDTH, fill: str = DEFAULT_FILL
) -> str:
    """Replace every tab in `line` with fill characters up to the next tab stop.

    Newlines are kept as-is and are never part of a run. Text after the last
    tab passes through unchanged.
    """
    width = validate_tab_stop_width(tab_stop_width)
    fill = validate_fill(fill)

    def _replace(m: re.Match[str]) -> str:
        run = m.group(1)
        return run + fill * fill_length(len(run), width)

    return _RUN_BEFORE_TAB.sub(_replace, line)
