"""Check command implementation."""

import json
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.table import Table

from ..config import ValidationConfig
from ..errors import RuleConfigError
from ..validation.checksums import build_sheba
from ..validation.helpers import check_password_strength
from ..validation.load import load_named_ruleset, load_ruleset
from ..validation.predicates import BUILTIN_RULES, RULE_EXPLANATIONS, list_rules
from ..validation.presets import PRESETS
from ..validation.schema import RulesetDef, parse_rule_spec
from ..validation.validator import Validator


def _resolve_ruleset(
    rules_path: Path | None,
    preset: str | None,
    config: ValidationConfig,
) -> RulesetDef:
    if rules_path is not None:
        return load_ruleset(rules_path)

    if preset is None:
        raise ValueError("Either a rules file or a preset name is required")
    if config.rulesets_dir is not None:
        ruleset = load_named_ruleset(preset, config.rulesets_dir)
        if ruleset is not None:
            return ruleset

    if preset not in PRESETS:
        raise ValueError(f"Unknown preset: {preset} (available: {', '.join(sorted(PRESETS))})")
    return RulesetDef(ruleset_id=f"preset/{preset}", version=1, fields=parse_rule_spec(PRESETS[preset]))


def _load_record(record_path: Path) -> dict[str, Any]:
    try:
        data = json.loads(record_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ValueError(f"{record_path}: invalid JSON: {e}") from e
    if not isinstance(data, dict):
        raise ValueError(f"{record_path}: record must be a JSON object")
    return data


def run_check(
    record_path: Path,
    *,
    rules_path: Path | None = None,
    preset: str | None = None,
    config: ValidationConfig | None = None,
    output_json: bool = False,
    locale: str | None = None,
    strict: bool | None = None,
) -> int:
    """Validate a JSON record against a ruleset.

    Args:
        record_path: JSON file holding one record (a JSON object)
        rules_path: TOML ruleset file
        preset: Name of a built-in preset or a ruleset in rulesets_dir
        config: Loaded configuration (defaults when None)
        output_json: Print the result as JSON instead of a table
        locale: Message locale override
        strict: Strict parameter checking override

    Returns:
        Exit code (0 = record passes, 1 = validation errors, 2 = bad input)
    """
    console = Console(stderr=True)
    config = config or ValidationConfig()

    if (rules_path is None) == (preset is None):
        console.print("Pass exactly one of --rules or --preset.", style="bold red")
        return 2

    try:
        ruleset = _resolve_ruleset(rules_path, preset, config)
        record = _load_record(record_path)
        validator = Validator(
            record,
            ruleset.fields,
            ruleset.messages,
            locale=locale or config.locale,
            strict=config.strict_params if strict is None else strict,
        ).validate()
    except (ValueError, OSError, RuleConfigError) as e:
        console.print(str(e), style="bold red")
        return 2

    errors = validator.get_errors()
    if output_json:
        output = {
            "passes": validator.passes(),
            "errors": errors,
            "first_error": validator.get_first_error(),
            "ruleset": {"ruleset_id": ruleset.ruleset_id, "version": ruleset.version},
        }
        print(json.dumps(output, indent=2, ensure_ascii=False))
    else:
        _print_human_output(console, ruleset, errors)

    return 0 if validator.passes() else 1


def _print_human_output(console: Console, ruleset: RulesetDef, errors: dict[str, list[str]]) -> None:
    console.print(f"Ruleset: {ruleset.ruleset_id} (v{ruleset.version})", style="dim")

    if not errors:
        console.print("✓ Record passes", style="bold green")
        return

    table = Table(show_header=True, header_style="bold")
    table.add_column("Field")
    table.add_column("Errors")
    for field, messages in errors.items():
        table.add_row(field, "\n".join(messages))
    console.print(table)

    count = sum(len(m) for m in errors.values())
    console.print(f"✗ {count} error(s) in {len(errors)} field(s)", style="bold red")


def run_list_rules() -> int:
    console = Console()
    table = Table(show_header=True, header_style="bold")
    table.add_column("Rule")
    table.add_column("Kind", style="dim")
    table.add_column("Description")
    for name in list_rules():
        kind = "built-in" if name in BUILTIN_RULES else "custom"
        table.add_row(name, kind, RULE_EXPLANATIONS.get(name, ""))
    console.print(table)
    return 0


def run_explain(rule_name: str) -> int:
    """Explain a validation rule.

    Returns:
        Exit code (0 = success, 1 = rule not found)
    """
    console = Console()
    rule_name = rule_name.strip()

    if rule_name not in RULE_EXPLANATIONS:
        console.print(f"Unknown rule: {rule_name}", style="bold red")
        console.print()
        console.print("Known rules:", style="bold")
        for name in list_rules():
            console.print(f"  - {name}")
        return 1

    from rich.markdown import Markdown

    console.print(Markdown(f"**{rule_name}**\n\n{RULE_EXPLANATIONS[rule_name]}"))
    return 0


def run_password(password: str, output_json: bool = False) -> int:
    strength = check_password_strength(password)
    if output_json:
        print(
            json.dumps(
                {
                    "score": strength.score,
                    "level": strength.level,
                    "feedback": strength.feedback,
                    "color": strength.color,
                },
                indent=2,
            )
        )
        return 0

    console = Console()
    console.print(f"Score: {strength.score} ({strength.level})", style=f"bold {strength.color}")
    for line in strength.feedback:
        console.print(f"  - {line}")
    return 0


def run_sheba(bban: str) -> int:
    console = Console()
    try:
        sheba = build_sheba(bban)
    except ValueError as e:
        console.print(str(e), style="bold red")
        return 1
    print(sheba)
    return 0
