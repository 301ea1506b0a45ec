from __future__ import annotations

import json
import logging
import os
import sys
from typing import Any, Optional

import typer
from rich.console import Console
from rich.markup import escape

from enforcer.core.errors import (
    EnforcerCheckError,
    EnforcerConfigError,
    EnforcerError,
    EnforcerLoadError,
)
from enforcer.core.expand.expand_tabs import expand_tabs
from enforcer.core.io.load_config import config_to_dict, merge_overrides, resolve_config
from enforcer.core.model import EnforcerConfig, RunReport
from enforcer.core.run.run_checks import run_checks
from enforcer.core.search.find_matches import find_matches

app = typer.Typer(add_completion=False, no_args_is_help=True)

logger = logging.getLogger("enforcer")

LOG_ENV_VAR = "ENFORCER_LOG"
LOG_FORMAT = "%(asctime)s [%(levelname)s] - %(message)s"

_handler = logging.StreamHandler()
_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%dT%H:%M:%S"))


@app.callback()
def _callback() -> None:
    """enforcer: keep source trees free of tabs, trailing whitespace and other clutter."""
    _init_logging()


@app.command("check")
def check(
    path: str = typer.Argument(".", help="Directory (or single file) to check"),
    endings: Optional[list[str]] = typer.Option(
        None,
        "-g",
        "--endings",
        help='File endings to check, e.g. -g .cpp -g .h or -g ".cpp,.h"',
    ),
    clean: bool = typer.Option(
        False, "-c", "--clean", help="Remove trailing whitespace and convert tabs to spaces"
    ),
    config_file: Optional[str] = typer.Option(
        None, "-f", "--config-file", help="Path to a configuration file"
    ),
    quiet: bool = typer.Option(False, "-q", "--quiet", help="Only print counts"),
    color: bool = typer.Option(False, "-a", "--color", help="Use colored output"),
    tabs: bool = typer.Option(
        False, "-t", "--tabs", help="Leave tabs alone (otherwise tabs are reported)"
    ),
    length: Optional[int] = typer.Option(
        None, "-l", "--length", min=1, help="Max line length (not checked if omitted)"
    ),
    threads: int = typer.Option(4, "-j", "--threads", min=0, help="Worker threads (0 = auto)"),
    tab_width: Optional[int] = typer.Option(
        None, "--tab-width", help="Tab stop width used when converting tabs"
    ),
    verbose: int = typer.Option(0, "-v", "--verbose", count=True, help="Verbosity level"),
    debug: bool = typer.Option(False, "--debug", help="Show debug output"),
    format: str = typer.Option("text", "--format", help="Output format: text|json"),
) -> None:
    """Check (and optionally clean) all matching files below PATH."""
    _init_logging(debug=debug, verbose=verbose)

    if format not in ("text", "json"):
        _print_errors(
            [
                EnforcerConfigError(
                    code="E_CHECK_UNKNOWN_FORMAT",
                    message=f"unknown format: {format} (choose one of: text, json)",
                    path="format",
                )
            ]
        )
        raise typer.Exit(code=2)

    def _emit_json(report: Optional[RunReport], errors: list[EnforcerError], exit_code: int) -> None:
        payload = {
            "tool": "enforcer",
            "command": "check",
            "ok": not errors,
            "file_count": len(report.reports) if report else 0,
            "error_count": len(errors),
            "errors": [_to_item(e) for e in _sorted_errors(errors)],
            "cleaned": report.cleaned if report else [],
        }
        typer.echo(json.dumps(payload, indent=2, sort_keys=True))
        raise typer.Exit(code=exit_code)

    try:
        config = resolve_config(path, config_file)
        config = merge_overrides(
            config,
            endings=_split_endings(endings),
            tab_width=tab_width,
            max_line_length=length,
            allow_tabs=tabs,
        )
        files = find_matches(path, config.ignore, config.endings)
    except EnforcerError as e:
        exit_code = 1 if isinstance(e, EnforcerLoadError) else 2
        if format == "json":
            _emit_json(None, [e], exit_code)
        _print_errors([e])
        raise typer.Exit(code=exit_code)

    logger.info("checking %d files below %s", len(files), path)
    report = run_checks(files, config, clean=clean, threads=threads)
    errors = report.errors

    if format == "json":
        _emit_json(report, errors, 2 if errors else 0)

    console = Console(
        highlight=False, soft_wrap=True, no_color=not color, force_terminal=color or None
    )
    if verbose > 0 or clean:
        for cleaned_path in report.cleaned:
            console.print(f"[green]cleaned:[/green] {escape(cleaned_path)}")

    if quiet:
        counts = _count_by_code(errors)
        for code in sorted(counts):
            typer.echo(f"{code}: {counts[code]}")
    elif errors:
        err_console = Console(
            stderr=True,
            highlight=False,
            soft_wrap=True,
            no_color=not color,
            force_terminal=color or None,
        )
        _print_errors(errors, console=err_console)

    summary = f"{len(files)} files checked, {len(errors)} findings"
    if report.cleaned:
        summary += f", {len(report.cleaned)} cleaned"
    if errors:
        console.print(f"[red]FAIL:[/red] {summary}")
        raise typer.Exit(code=2)
    console.print(f"[green]OK:[/green] {summary}")


@app.command("expand")
def expand(
    file: str = typer.Argument("-", help="File to expand ('-' reads stdin)"),
    tab_width: int = typer.Option(8, "--tab-width", help="Tab stop width"),
    fill: str = typer.Option("-", "--fill", help="Fill character written in place of a tab"),
) -> None:
    """Print FILE with every tab expanded to the next tab stop."""
    try:
        if file == "-":
            text = sys.stdin.read()
        else:
            with open(file, encoding="utf-8") as f:
                text = f.read()
    except FileNotFoundError:
        _print_errors(
            [EnforcerLoadError(code="E_FILE_NOT_FOUND", message="file does not exist", file=file)]
        )
        raise typer.Exit(code=1)
    except (OSError, UnicodeDecodeError) as e:
        _print_errors([EnforcerLoadError(code="E_FILE_READ", message=str(e), file=file)])
        raise typer.Exit(code=1)

    try:
        expanded = expand_tabs(text, tab_width, fill=fill)
    except EnforcerConfigError as e:
        _print_errors([e])
        raise typer.Exit(code=2)

    typer.echo(expanded, nl=False)


@app.command("config")
def config(
    path: str = typer.Argument(".", help="Directory whose configuration is shown"),
    config_file: Optional[str] = typer.Option(
        None, "-f", "--config-file", help="Path to a configuration file"
    ),
    format: str = typer.Option("text", "--format", help="Output format: text|json"),
) -> None:
    """Show the configuration that `check` would use for PATH."""
    if format not in ("text", "json"):
        _print_errors(
            [
                EnforcerConfigError(
                    code="E_CONFIG_UNKNOWN_FORMAT",
                    message=f"unknown format: {format} (choose one of: text, json)",
                    path="format",
                )
            ]
        )
        raise typer.Exit(code=2)

    try:
        cfg = resolve_config(path, config_file)
    except EnforcerLoadError as e:
        _print_errors([e])
        raise typer.Exit(code=1)
    except EnforcerConfigError as e:
        _print_errors([e])
        raise typer.Exit(code=2)

    if format == "json":
        typer.echo(json.dumps(config_to_dict(cfg), indent=2, sort_keys=True))
        return
    _print_config(cfg)


def _print_config(cfg: EnforcerConfig) -> None:
    typer.echo(f"source: {cfg.source or '<defaults>'}")
    typer.echo(f"ignore: {', '.join(cfg.ignore)}")
    typer.echo(f"endings: {', '.join(cfg.endings)}")
    typer.echo(f"tab_width: {cfg.tab_width}")
    typer.echo(f"max_line_length: {cfg.max_line_length if cfg.max_line_length else '<unchecked>'}")
    typer.echo(f"allow_tabs: {str(cfg.allow_tabs).lower()}")


def _split_endings(endings: Optional[list[str]]) -> list[str]:
    out: list[str] = []
    for raw in endings or []:
        for part in raw.split(","):
            part = part.strip().strip('"').strip("'")
            if part:
                out.append(part)
    return out


def _count_by_code(errors: list[EnforcerError]) -> dict[str, int]:
    counts: dict[str, int] = {}
    for e in errors:
        counts[e.code] = counts.get(e.code, 0) + 1
    return counts


def _to_item(e: EnforcerError) -> dict[str, Any]:
    if isinstance(e, EnforcerCheckError):
        source = "check"
    elif isinstance(e, EnforcerLoadError):
        source = "load"
    else:
        source = "config"
    return {
        "code": e.code,
        "message": e.message,
        "file": e.file,
        "path": e.path,
        "severity": "error",
        "source": source,
    }


def _line_key(e: EnforcerError) -> int:
    if e.path and e.path.startswith("line:"):
        try:
            return int(e.path[len("line:"):])
        except ValueError:
            return 0
    return 0


def _sorted_errors(errors: list[EnforcerError]) -> list[EnforcerError]:
    return sorted(errors, key=lambda e: (e.file or "", _line_key(e), e.path or "", e.code))


def _print_errors(errors: list[EnforcerError], console: Optional[Console] = None) -> None:
    for e in _sorted_errors(errors):
        if console is None:
            typer.echo(str(e), err=True)
        else:
            console.print(f"[red]{escape(str(e))}[/red]")


def _init_logging(*, debug: bool = False, verbose: int = 0) -> None:
    """Configure the `enforcer` logger once; ENFORCER_LOG overrides the level."""
    if debug:
        level = logging.DEBUG
    elif verbose > 0:
        level = logging.INFO
    else:
        level = logging.WARNING

    env_level = os.getenv(LOG_ENV_VAR)
    if env_level:
        resolved = logging.getLevelName(env_level.upper())
        if isinstance(resolved, int):
            level = resolved

    logger.setLevel(level)
    # Bind to the current stderr; it may have been swapped since import.
    _handler.stream = sys.stderr
    if _handler not in logger.handlers:
        logger.addHandler(_handler)


def main() -> None:
    app(prog_name="enforcer")


cli = typer.main.get_command(app)

if __name__ == "__main__":
    main()
