from __future__ import annotations

import json
import logging
from dataclasses import replace
from pathlib import Path
from typing import Any, Optional

import yaml

from enforcer.core.errors import EnforcerConfigError, EnforcerLoadError
from enforcer.core.expand.expand_tabs import validate_tab_stop_width
from enforcer.core.model import EnforcerConfig


logger = logging.getLogger(__name__)

CONFIG_FILE_NAMES = (".enforcer", ".enforcer.yaml", ".enforcer.yml", ".enforcer.json")
KNOWN_KEYS = ("ignore", "endings", "tab_width", "max_line_length", "allow_tabs")


def load_config(path: str | Path) -> EnforcerConfig:
    """Load an enforcer config file (YAML, or JSON for .json).

    Format:
      ignore: [".git", "build_*"]
      endings: [".c", ".cpp", ".h"]
      tab_width: 4
      max_line_length: 120
      allow_tabs: false

    Every key is optional; unknown keys are ignored.
    """
    p = Path(path)
    if not p.is_file():
        raise EnforcerLoadError(
            code="E_FILE_NOT_FOUND",
            message="config file does not exist",
            file=str(p),
        )

    suffix = p.suffix.lower()
    try:
        raw_text = p.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise EnforcerLoadError(code="E_FILE_READ", message=str(e), file=str(p)) from e

    try:
        if suffix in {"", ".yaml", ".yml"}:
            data = yaml.safe_load(raw_text)
        elif suffix == ".json":
            data = json.loads(raw_text)
        else:
            raise EnforcerLoadError(
                code="E_UNSUPPORTED_FORMAT",
                message="supported formats are .yaml/.yml, .json, or no suffix (YAML)",
                file=str(p),
            )
    except EnforcerLoadError:
        raise
    except (yaml.YAMLError, json.JSONDecodeError) as e:
        code = "E_JSON_PARSE" if suffix == ".json" else "E_YAML_PARSE"
        raise EnforcerLoadError(code=code, message=str(e), file=str(p)) from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise EnforcerLoadError(
            code="E_INVALID_TOP_LEVEL",
            message="top-level document must be a mapping/object",
            file=str(p),
        )

    return config_from_dict(data, file=str(p))


def config_from_dict(data: dict[str, Any], *, file: Optional[str] = None) -> EnforcerConfig:
    unknown = sorted(str(k) for k in data if k not in KNOWN_KEYS)
    if unknown:
        logger.warning("%s: ignoring unknown config keys: %s", file or "<config>", ", ".join(unknown))

    defaults = EnforcerConfig()
    ignore = _str_list(data, "ignore", defaults.ignore, file)
    endings = _str_list(data, "endings", defaults.endings, file)

    tab_width = data.get("tab_width", defaults.tab_width)
    try:
        validate_tab_stop_width(tab_width)
    except EnforcerConfigError as e:
        raise EnforcerConfigError(code=e.code, message=e.message, file=file, path="tab_width") from e

    max_line_length = data.get("max_line_length", defaults.max_line_length)
    if max_line_length is not None and (
        isinstance(max_line_length, bool) or not isinstance(max_line_length, int) or max_line_length < 1
    ):
        raise EnforcerConfigError(
            code="E_CONFIG_INVALID",
            message="max_line_length must be a positive integer or null",
            file=file,
            path="max_line_length",
        )

    allow_tabs = data.get("allow_tabs", defaults.allow_tabs)
    if not isinstance(allow_tabs, bool):
        raise EnforcerConfigError(
            code="E_CONFIG_INVALID",
            message="allow_tabs must be true or false",
            file=file,
            path="allow_tabs",
        )

    return EnforcerConfig(
        ignore=ignore,
        endings=endings,
        tab_width=tab_width,
        max_line_length=max_line_length,
        allow_tabs=allow_tabs,
        source=file,
    )


def _str_list(data: dict[str, Any], key: str, default: list[str], file: Optional[str]) -> list[str]:
    if key not in data:
        return list(default)
    v = data[key]
    if not isinstance(v, list) or not all(isinstance(x, str) and x.strip() for x in v):
        raise EnforcerConfigError(
            code="E_CONFIG_INVALID",
            message=f"{key} must be a list of non-empty strings",
            file=file,
            path=key,
        )
    return [x.strip() for x in v]


def discover_config(start: str | Path) -> Optional[Path]:
    """Return the first config file found in `start` (or its directory, for a file)."""
    p = Path(start)
    d = p if p.is_dir() else p.parent
    for name in CONFIG_FILE_NAMES:
        candidate = d / name
        if candidate.is_file():
            return candidate
    return None


def resolve_config(start: str | Path, config_file: Optional[str] = None) -> EnforcerConfig:
    """Explicit config file wins; otherwise discover one next to `start`; else defaults."""
    if config_file:
        return load_config(config_file)
    found = discover_config(start)
    if found is None:
        logger.debug("no config file found for %s, using defaults", start)
        return EnforcerConfig()
    logger.info("using config file %s", found)
    return load_config(found)


def merge_overrides(
    config: EnforcerConfig,
    *,
    endings: Optional[list[str]] = None,
    tab_width: Optional[int] = None,
    max_line_length: Optional[int] = None,
    allow_tabs: Optional[bool] = None,
) -> EnforcerConfig:
    """Apply command line overrides. None (or an empty endings list) keeps the config value."""
    changes: dict[str, Any] = {}
    if endings:
        changes["endings"] = list(endings)
    if tab_width is not None:
        changes["tab_width"] = validate_tab_stop_width(tab_width)
    if max_line_length is not None:
        changes["max_line_length"] = max_line_length
    if allow_tabs:
        changes["allow_tabs"] = True
    return replace(config, **changes) if changes else config


def config_to_dict(config: EnforcerConfig) -> dict[str, Any]:
    return {
        "source": config.source,
        "ignore": list(config.ignore),
        "endings": list(config.endings),
        "tab_width": config.tab_width,
        "max_line_length": config.max_line_length,
        "allow_tabs": config.allow_tabs,
    }
