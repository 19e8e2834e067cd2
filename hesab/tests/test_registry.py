"""Tests for the rule registry and catalog completeness."""

from typing import Any, get_args

import pytest

from hesab.errors import UnknownRuleError
from hesab.validation.messages import ENGLISH_MESSAGES, PERSIAN_MESSAGES
from hesab.validation.predicates import (
    BUILTIN_RULES,
    PREDICATES,
    RULE_EXPLANATIONS,
    RuleContext,
    RuleName,
    list_rules,
    register_rule,
    unregister_rule,
)
from hesab.validation.validator import Validator


def _iranian_plate(value: Any, params: tuple[str, ...], ctx: RuleContext) -> bool:
    return isinstance(value, str) and len(value.replace(" ", "")) == 8


@pytest.fixture
def plate_rule():
    register_rule(
        "plate",
        _iranian_plate,
        message=":field must be a vehicle plate",
        explanation="Vehicle plate, eight characters.",
    )
    yield "plate"
    unregister_rule("plate")


def test_catalog_is_complete() -> None:
    assert BUILTIN_RULES == set(get_args(RuleName))
    assert BUILTIN_RULES <= set(PREDICATES)
    assert BUILTIN_RULES <= set(RULE_EXPLANATIONS)
    assert BUILTIN_RULES - {"nullable"} <= set(ENGLISH_MESSAGES)
    assert set(ENGLISH_MESSAGES) == set(PERSIAN_MESSAGES)


def test_registered_rule_is_used_by_validator(plate_rule: str) -> None:
    rules = {"plate": "required|plate"}
    assert Validator({"plate": "12 ب 345 67"}, rules).passes()

    v = Validator({"plate": "123"}, rules)
    assert v.get_errors() == {"plate": ["plate must be a vehicle plate"]}
    assert list_rules()[-1] == "plate"
    assert RULE_EXPLANATIONS["plate"] == "Vehicle plate, eight characters."


def test_unregistered_rule_is_unknown_again(plate_rule: str) -> None:
    unregister_rule(plate_rule)
    with pytest.raises(UnknownRuleError):
        Validator({}, {"plate": "plate"})
    assert "plate" not in list_rules()


def test_builtin_rules_cannot_be_replaced_or_removed() -> None:
    with pytest.raises(ValueError):
        register_rule("email", _iranian_plate)
    with pytest.raises(ValueError):
        unregister_rule("email")


@pytest.mark.parametrize("name", ["", "a|b", "a:b", "a,b"])
def test_invalid_rule_names(name: str) -> None:
    with pytest.raises(ValueError):
        register_rule(name, _iranian_plate)


def test_list_rules_starts_with_builtins_in_catalog_order() -> None:
    names = list_rules()
    assert names[: len(BUILTIN_RULES)] == list(get_args(RuleName))
