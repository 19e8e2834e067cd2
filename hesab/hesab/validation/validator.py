from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from ..errors import RuleConfigError, UnknownRuleError
from .messages import DEFAULT_LOCALE, format_message
from .predicates import PARAM_CHECKS, PREDICATES, RecordLookup, RuleContext
from .schema import RuleDescriptor, RuleInput, RuleSpec, parse_rule_spec

logger = logging.getLogger(__name__)

_LOOKUP_RULES = frozenset({"unique", "exists"})


def compile_rule_spec(rules: Mapping[str, RuleInput], *, strict: bool = False) -> RuleSpec:
    """
    Normalize a RuleSpec and check it against the rule registry.

    Unknown rule names always raise. Malformed parameters raise only when
    ``strict`` is set; otherwise the affected rule simply fails at run time.
    """
    spec = parse_rule_spec(rules)
    for field, descriptors in spec.items():
        for rule in descriptors:
            if rule.name not in PREDICATES:
                raise UnknownRuleError(rule.name, field=field)
            if not strict:
                continue
            check = PARAM_CHECKS.get(rule.name)
            problem = check(rule.params) if check is not None else None
            if problem:
                raise RuleConfigError(f"rule {str(rule)!r} {problem}", field=field, rule=rule.name)
    logger.debug("Compiled rules for %d field(s)", len(spec))
    return spec


class Validator:
    """Run a RuleSpec against one record and collect per-field errors.

    Every rule of a field is evaluated, so a field can carry several
    messages; fields appear in the error map in RuleSpec order.
    """

    def __init__(
        self,
        data: Mapping[str, Any] | None,
        rules: Mapping[str, RuleInput],
        messages: Mapping[str, str] | None = None,
        *,
        locale: str = DEFAULT_LOCALE,
        lookup: RecordLookup | None = None,
        strict: bool = False,
    ):
        self.data: Mapping[str, Any] = data if data is not None else {}
        self.rules = compile_rule_spec(rules, strict=strict)
        self.messages = dict(messages or {})
        self.locale = locale
        self.lookup = lookup
        self.errors: dict[str, list[str]] = {}
        self._validated = False

        if lookup is None and any(r.name in _LOOKUP_RULES for rs in self.rules.values() for r in rs):
            logger.warning("unique/exists rules configured without a record lookup; they will pass")

    def validate(self) -> "Validator":
        errors: dict[str, list[str]] = {}

        for pattern, descriptors in self.rules.items():
            nullable = any(r.name == "nullable" for r in descriptors)
            for field in self.expand_field(pattern):
                value = self.get_value(field)
                if nullable and value is None:
                    continue

                ctx = RuleContext(field=field, record=self.data, get_value=self.get_value, lookup=self.lookup)
                for rule in descriptors:
                    if not self._check(rule, value, ctx):
                        errors.setdefault(field, []).append(self.get_error_message(field, rule, pattern))

        self.errors = errors
        self._validated = True
        logger.debug(
            "Validated %d field rule(s): %d field(s) failed",
            len(self.rules),
            len(errors),
        )
        return self

    def _check(self, rule: RuleDescriptor, value: Any, ctx: RuleContext) -> bool:
        fn = PREDICATES.get(rule.name)
        if fn is None:
            # Unregistered after compilation.
            raise UnknownRuleError(rule.name, field=ctx.field)
        return bool(fn(value, rule.params, ctx))

    def _ensure_validated(self) -> None:
        if not self._validated:
            self.validate()

    def expand_field(self, pattern: str) -> list[str]:
        """Expand ``items.*.qty`` into one concrete path per list element."""
        if "*" not in pattern.split("."):
            return [pattern]

        paths = [""]
        for segment in pattern.split("."):
            if segment != "*":
                paths = [f"{p}.{segment}" if p else segment for p in paths]
                continue
            expanded: list[str] = []
            for p in paths:
                container = self.get_value(p) if p else self.data
                if isinstance(container, (list, tuple)):
                    expanded.extend(f"{p}.{i}" if p else str(i) for i in range(len(container)))
                elif isinstance(container, Mapping):
                    expanded.extend(f"{p}.{k}" if p else str(k) for k in container)
            paths = expanded
        return paths

    def get_value(self, field: str) -> Any:
        """Look up a field, walking dotted paths through objects and lists."""
        if isinstance(self.data, Mapping) and field in self.data:
            return self.data[field]

        value: Any = self.data
        for key in field.split("."):
            if isinstance(value, Mapping) and key in value:
                value = value[key]
            elif isinstance(value, (list, tuple)) and key.isdigit() and int(key) < len(value):
                value = value[int(key)]
            else:
                return None
        return value

    def get_error_message(self, field: str, rule: RuleDescriptor, pattern: str | None = None) -> str:
        return format_message(field, rule, custom=self.messages, locale=self.locale, pattern=pattern)

    def passes(self) -> bool:
        self._ensure_validated()
        return not self.fails()

    def fails(self) -> bool:
        self._ensure_validated()
        return any(self.errors.values())

    def get_errors(self) -> dict[str, list[str]]:
        self._ensure_validated()
        return self.errors

    def get_first_error(self, field: str | None = None) -> str | None:
        self._ensure_validated()
        if field is not None:
            messages = self.errors.get(field)
            return messages[0] if messages else None

        for messages in self.errors.values():
            if messages:
                return messages[0]
        return None
