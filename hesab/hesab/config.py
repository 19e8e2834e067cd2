"""
Configuration loading.

Settings come from a ``hesab.toml`` file or the ``[tool.hesab]`` table of a
``pyproject.toml``, found by walking up from the working directory.
"""

from __future__ import annotations

import logging
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .validation.messages import CATALOGS, DEFAULT_LOCALE

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "hesab.toml"


@dataclass(frozen=True)
class ValidationConfig:
    locale: str = DEFAULT_LOCALE
    strict_params: bool = False
    rulesets_dir: Path | None = None
    source: Path | None = None


def find_config(start: Path) -> Path | None:
    """Find hesab.toml, or a pyproject.toml with a [tool.hesab] table."""
    cur = start.resolve()
    for p in (cur, *cur.parents):
        candidate = p / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
        pyproject = p / "pyproject.toml"
        if pyproject.is_file() and _has_tool_table(pyproject):
            return pyproject
    return None


def _has_tool_table(pyproject: Path) -> bool:
    # Unrelated projects up the tree may carry a broken pyproject.toml.
    try:
        data = _read_toml(pyproject)
    except (ValueError, OSError):
        logger.debug("Skipping unreadable %s", pyproject)
        return False
    return _tool_table(data) is not None


def _read_toml(path: Path) -> dict[str, Any]:
    try:
        return tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as e:
        raise ValueError(f"{path}: invalid TOML: {e}") from e


def _tool_table(data: dict[str, Any]) -> dict[str, Any] | None:
    tool = data.get("tool")
    if not isinstance(tool, dict):
        return None
    table = tool.get("hesab")
    return table if isinstance(table, dict) else None


def parse_config(data: dict[str, Any], *, base_dir: Path | None = None, source: Path | None = None) -> ValidationConfig:
    where = str(source) if source else "config"

    locale = str(data.get("locale", DEFAULT_LOCALE)).strip() or DEFAULT_LOCALE
    if locale not in CATALOGS:
        raise ValueError(f"{where}: unknown locale {locale!r} (available: {', '.join(CATALOGS)})")

    strict_params = data.get("strict_params", False)
    if not isinstance(strict_params, bool):
        raise ValueError(f"{where}: strict_params must be true or false")

    rulesets_dir = None
    raw_dir = data.get("rulesets_dir")
    if isinstance(raw_dir, str) and raw_dir.strip():
        rulesets_dir = Path(raw_dir.strip())
        if base_dir is not None and not rulesets_dir.is_absolute():
            rulesets_dir = base_dir / rulesets_dir

    return ValidationConfig(locale=locale, strict_params=strict_params, rulesets_dir=rulesets_dir, source=source)


def load_config(path: Path | None = None, *, start: Path | None = None) -> ValidationConfig:
    """Load configuration from ``path`` or the nearest config file; defaults if none."""
    if path is None:
        path = find_config(start or Path.cwd())
        if path is None:
            return ValidationConfig()

    data = _read_toml(path)
    if path.name == "pyproject.toml":
        data = _tool_table(data) or {}
    return parse_config(data, base_dir=path.parent, source=path)
