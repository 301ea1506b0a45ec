from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class EnforcerError(Exception):
    """Base error envelope.

    Load and config problems are raised. Content findings are returned as
    EnforcerCheckError with `path` set to `line:<n>` (1-based), or None when
    the finding is about the whole file.
    """

    code: str
    message: str
    file: Optional[str] = None
    path: Optional[str] = None

    def __str__(self) -> str:
        parts: list[str] = []
        if self.file:
            parts.append(self.file)
        if self.path:
            parts.append(self.path)
        loc = ":".join(parts) if parts else "<enforcer>"
        return f"{loc}: {self.code}: {self.message}"


class EnforcerLoadError(EnforcerError):
    pass


class EnforcerConfigError(EnforcerError):
    pass


class EnforcerCheckError(EnforcerError):
    pass
