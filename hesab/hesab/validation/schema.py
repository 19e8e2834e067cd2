from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Sequence, Union


@dataclass(frozen=True)
class RuleDescriptor:
    name: str
    params: tuple[str, ...] = ()

    def __str__(self) -> str:
        if not self.params:
            return self.name
        return f"{self.name}:{','.join(self.params)}"


RuleInput = Union[str, RuleDescriptor, Mapping[str, Any], Sequence[Union[str, RuleDescriptor, Mapping[str, Any]]]]
RuleSpec = dict[str, tuple[RuleDescriptor, ...]]


@dataclass(frozen=True)
class RulesetDef:
    ruleset_id: str
    version: int
    description: str | None = None
    fields: RuleSpec = field(default_factory=dict)
    messages: dict[str, str] = field(default_factory=dict)


def parse_rule(text: str) -> RuleDescriptor:
    """
    Parse one ``name:param,param`` rule.

    Everything after the first ``:`` belongs to the parameters, so
    ``regex:^a:b$`` keeps its inner colon.
    """
    name, sep, rest = text.partition(":")
    params: tuple[str, ...] = ()
    if sep:
        params = tuple(p.strip() for p in rest.split(","))
    return RuleDescriptor(name=name.strip(), params=params)


def _coerce_descriptor(rule: Any) -> RuleDescriptor | None:
    if isinstance(rule, RuleDescriptor):
        return rule
    if isinstance(rule, str):
        return parse_rule(rule) if rule.strip() else None
    if isinstance(rule, Mapping):
        name = str(rule.get("name", "")).strip()
        if not name:
            return None
        raw_params = rule.get("params") or ()
        if isinstance(raw_params, str):
            raw_params = (raw_params,)
        return RuleDescriptor(name=name, params=tuple(str(p) for p in raw_params))
    return None


def parse_rules(rules: Any) -> tuple[RuleDescriptor, ...]:
    """Normalize a field's rules (pipe string, list, or descriptors)."""
    if isinstance(rules, str):
        items: Sequence[Any] = rules.split("|")
    elif isinstance(rules, (RuleDescriptor, Mapping)):
        items = [rules]
    elif isinstance(rules, (list, tuple)):
        items = rules
    else:
        return ()

    parsed = (_coerce_descriptor(r) for r in items)
    return tuple(d for d in parsed if d is not None)


def parse_rule_spec(spec: Mapping[str, RuleInput]) -> RuleSpec:
    return {str(name): parse_rules(rules) for name, rules in spec.items()}
