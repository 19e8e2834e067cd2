"""Declarative field validation (rules as data, predicates as code)."""

from .checksums import build_sheba, is_valid_national_id, is_valid_sheba, mod97, sheba_check_digits
from .helpers import (
    check_password_strength,
    conditional_validate,
    quick_validate,
    validate,
    validate_field,
    validate_multiple,
)
from .load import load_named_ruleset, load_ruleset
from .predicates import RecordLookup, RuleContext, list_rules, register_rule, unregister_rule
from .schema import RuleDescriptor, RulesetDef, parse_rules
from .validator import Validator, compile_rule_spec

__all__ = [
    "Validator",
    "compile_rule_spec",
    "validate",
    "quick_validate",
    "validate_field",
    "validate_multiple",
    "conditional_validate",
    "check_password_strength",
    "register_rule",
    "unregister_rule",
    "list_rules",
    "RecordLookup",
    "RuleContext",
    "RuleDescriptor",
    "RulesetDef",
    "parse_rules",
    "load_ruleset",
    "load_named_ruleset",
    "is_valid_national_id",
    "is_valid_sheba",
    "mod97",
    "sheba_check_digits",
    "build_sheba",
]
