"""Convenience entry points used by the API layer."""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Callable

from .schema import RuleInput
from .validator import Validator


@dataclass(frozen=True)
class ValidationSummary:
    passes: bool
    errors: dict[str, list[str]]
    first_error: str | None


@dataclass(frozen=True)
class FieldSummary:
    passes: bool
    errors: list[str]
    first_error: str | None


@dataclass(frozen=True)
class MultiSummary:
    all_passed: bool
    results: dict[str, ValidationSummary]


@dataclass
class PasswordStrength:
    score: int = 0
    level: str = "very-weak"
    feedback: list[str] = field(default_factory=list)
    color: str = "#ff4757"


def validate(
    data: Mapping[str, Any] | None,
    rules: Mapping[str, RuleInput],
    messages: Mapping[str, str] | None = None,
    **options: Any,
) -> Validator:
    """Build a Validator and run it."""
    return Validator(data, rules, messages, **options).validate()


def _summarize(validator: Validator) -> ValidationSummary:
    return ValidationSummary(
        passes=validator.passes(),
        errors=validator.get_errors(),
        first_error=validator.get_first_error(),
    )


def quick_validate(data: Mapping[str, Any] | None, rules: Mapping[str, RuleInput], **options: Any) -> ValidationSummary:
    return _summarize(validate(data, rules, **options))


def validate_field(value: Any, rules: RuleInput, field_name: str = "field", **options: Any) -> FieldSummary:
    """Validate a single value as if it were the only field of a record."""
    validator = validate({field_name: value}, {field_name: rules}, **options)
    return FieldSummary(
        passes=validator.passes(),
        errors=list(validator.get_errors().get(field_name, [])),
        first_error=validator.get_first_error(field_name),
    )


def validate_multiple(validations: Mapping[str, Any], **options: Any) -> MultiSummary:
    """
    Validate several independent payloads.

    Each entry is either a ``(data, rules[, messages])`` tuple or a mapping
    with ``data``, ``rules`` and optional ``messages``.
    """
    results: dict[str, ValidationSummary] = {}
    for key, entry in validations.items():
        if isinstance(entry, Mapping):
            data, rules, messages = entry.get("data"), entry.get("rules") or {}, entry.get("messages")
        else:
            data, rules, *rest = entry
            messages = rest[0] if rest else None
        validator = validate(data, rules, messages, **options)
        results[key] = _summarize(validator)
    return MultiSummary(all_passed=all(r.passes for r in results.values()), results=results)


def conditional_validate(
    data: Mapping[str, Any] | None,
    rules: Mapping[str, RuleInput],
    condition: Callable[[Mapping[str, Any]], bool],
    **options: Any,
) -> Validator:
    """Run ``rules`` only when ``condition(data)`` holds; otherwise pass."""
    if not condition(data or {}):
        return Validator(data, {}).validate()
    return validate(data, rules, **options)


_STRENGTH_LEVELS = (
    (2, "very-weak", "#ff4757"),
    (4, "weak", "#ff6b35"),
    (6, "medium", "#f39c12"),
    (8, "strong", "#2ecc71"),
)


def check_password_strength(password: str | None) -> PasswordStrength:
    result = PasswordStrength()

    if not password:
        result.feedback.append("Password is empty")
        return result

    if len(password) >= 12:
        result.score += 3
    elif len(password) >= 8:
        result.score += 2
    elif len(password) >= 6:
        result.score += 1
    else:
        result.feedback.append("Use at least 6 characters")

    checks = (
        (r"[a-z]", "Add a lower case letter"),
        (r"[A-Z]", "Add an upper case letter"),
        (r"[0-9]", "Add a digit"),
        (r"[^A-Za-z0-9]", "Add a symbol"),
    )
    for pattern, hint in checks:
        if re.search(pattern, password):
            result.score += 1
        else:
            result.feedback.append(hint)

    if re.search(r"(.)\1{2,}", password):
        result.feedback.append("Avoid repeating a character three times in a row")
    else:
        result.score += 1

    result.level, result.color = "very-strong", "#27ae60"
    for ceiling, level, color in _STRENGTH_LEVELS:
        if result.score <= ceiling:
            result.level, result.color = level, color
            break

    if not result.feedback:
        result.feedback.append("Password is strong")
    return result
