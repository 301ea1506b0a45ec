from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from enforcer.core.errors import EnforcerError


DEFAULT_IGNORE: list[str] = [".git", ".bake", ".repo"]
DEFAULT_ENDINGS: list[str] = [".c", ".cpp", ".h"]
DEFAULT_TAB_WIDTH = 4


@dataclass(frozen=True)
class EnforcerConfig:
    ignore: list[str] = field(default_factory=lambda: list(DEFAULT_IGNORE))
    endings: list[str] = field(default_factory=lambda: list(DEFAULT_ENDINGS))
    tab_width: int = DEFAULT_TAB_WIDTH
    max_line_length: Optional[int] = None
    allow_tabs: bool = False

    source: Optional[str] = None  # config file the values were read from


@dataclass(frozen=True)
class FileReport:
    path: str
    errors: list[EnforcerError]
    cleaned: bool = False


@dataclass(frozen=True)
class RunReport:
    reports: list[FileReport]

    @property
    def errors(self) -> list[EnforcerError]:
        return [e for r in self.reports for e in r.errors]

    @property
    def cleaned(self) -> list[str]:
        return [r.path for r in self.reports if r.cleaned]

    @property
    def ok(self) -> bool:
        return not self.errors
