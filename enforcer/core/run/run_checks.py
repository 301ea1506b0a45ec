from __future__ import annotations

import logging
import os
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from enforcer.core.check.check_content import check_bytes, is_fixable
from enforcer.core.clean.clean_content import clean_content
from enforcer.core.errors import EnforcerCheckError
from enforcer.core.model import EnforcerConfig, FileReport, RunReport


logger = logging.getLogger(__name__)

MAX_AUTO_THREADS = 12


def effective_threads(threads: int) -> int:
    if threads > 0:
        return threads
    return min(MAX_AUTO_THREADS, os.cpu_count() or 1)


def check_file(path: str | Path, config: EnforcerConfig, *, clean: bool = False) -> FileReport:
    """Check one file; with `clean`, fix whitespace/tab findings in place and re-check."""
    p = Path(path)
    file = str(p)
    try:
        data = p.read_bytes()
    except OSError as e:
        return FileReport(
            path=file,
            errors=[EnforcerCheckError(code="E_FILE_READ", message=str(e), file=file)],
        )

    def _check(raw: bytes) -> list[EnforcerCheckError]:
        return check_bytes(
            raw,
            file=file,
            allow_tabs=config.allow_tabs,
            max_line_length=config.max_line_length,
        )

    errors = _check(data)
    if not clean or not is_fixable(errors):
        return FileReport(path=file, errors=errors)

    # is_fixable implies the content decoded, so this cannot fail.
    text = data.decode("utf-8")
    cleaned = clean_content(text, tab_width=config.tab_width, allow_tabs=config.allow_tabs)
    try:
        p.write_bytes(cleaned.encode("utf-8"))
    except OSError as e:
        return FileReport(
            path=file,
            errors=errors + [EnforcerCheckError(code="E_FILE_WRITE", message=str(e), file=file)],
        )
    logger.info("cleaned %s", file)
    return FileReport(path=file, errors=_check(cleaned.encode("utf-8")), cleaned=True)


def run_checks(
    paths: list[Path],
    config: EnforcerConfig,
    *,
    clean: bool = False,
    threads: int = 4,
) -> RunReport:
    """Check (and optionally clean) files concurrently.

    Each worker owns exactly one file; reports come back sorted by path.
    """
    workers = effective_threads(threads)
    logger.debug("checking %d files with %d threads", len(paths), workers)

    if not paths:
        return RunReport(reports=[])

    with ThreadPoolExecutor(max_workers=workers) as ex:
        reports = list(ex.map(lambda p: check_file(p, config, clean=clean), paths))

    return RunReport(reports=sorted(reports, key=lambda r: r.path))
