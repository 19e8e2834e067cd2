from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import Any

from .schema import RulesetDef, RuleSpec, parse_rules

logger = logging.getLogger(__name__)


def _coerce_dict(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def parse_ruleset(data: dict[str, Any], *, source: str = "<ruleset>") -> RulesetDef:
    """Build a RulesetDef from already-decoded TOML data."""
    ruleset_id = str(data.get("ruleset_id", "")).strip()
    if not ruleset_id:
        raise ValueError(f"{source}: ruleset_id is required")

    try:
        version = int(data.get("version", 0))
    except (TypeError, ValueError):
        version = 0
    if version <= 0:
        raise ValueError(f"{source}: version must be a positive integer")

    fields: RuleSpec = {}
    for name, raw in _coerce_dict(data.get("fields")).items():
        if isinstance(raw, str) or (isinstance(raw, list) and all(isinstance(r, (str, dict)) for r in raw)):
            fields[str(name)] = parse_rules(raw)
        else:
            logger.warning("%s: ignoring field %r with unsupported rule definition", source, name)

    messages = {str(k): str(v) for k, v in _coerce_dict(data.get("messages")).items() if isinstance(v, str)}

    description = data.get("description")
    return RulesetDef(
        ruleset_id=ruleset_id,
        version=version,
        description=description if isinstance(description, str) else None,
        fields=fields,
        messages=messages,
    )


def load_ruleset(path: Path) -> RulesetDef:
    """
    Load a ruleset from TOML.

    Fields map to a pipe string (``"required|max:100"``) or a list of rule
    strings; an optional ``[messages]`` table overrides error messages.
    """
    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as e:
        raise ValueError(f"{path}: invalid TOML: {e}") from e
    return parse_ruleset(data, source=str(path))


def load_named_ruleset(name: str, rulesets_dir: Path) -> RulesetDef | None:
    """Load ``<rulesets_dir>/<name>.toml``, if present."""
    ruleset_path = rulesets_dir / f"{name}.toml"
    if not ruleset_path.exists():
        return None
    return load_ruleset(ruleset_path)
