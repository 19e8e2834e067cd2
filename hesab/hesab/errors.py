"""Exceptions raised by the validation engine.

Validation failures are never raised; they are collected per field. These
exceptions describe broken rule configuration.
"""

from __future__ import annotations


class HesabError(Exception):
    """Base class for hesab errors."""


class RuleConfigError(HesabError):
    """A RuleSpec cannot be compiled (bad parameters in strict mode)."""

    def __init__(self, message: str, *, field: str | None = None, rule: str | None = None):
        self.field = field
        self.rule = rule
        if field is not None:
            message = f"{field}: {message}"
        super().__init__(message)


class UnknownRuleError(RuleConfigError):
    """A RuleSpec names a rule that is not registered."""

    def __init__(self, rule: str, *, field: str | None = None):
        super().__init__(f"Validation rule {rule!r} not found", field=field, rule=rule)
