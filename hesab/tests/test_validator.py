"""Tests for Validator error accumulation and queries."""

import logging

import pytest

from hesab.errors import RuleConfigError, UnknownRuleError
from hesab.validation.schema import RuleDescriptor
from hesab.validation.validator import Validator, compile_rule_spec


def test_rules_for_a_field_do_not_short_circuit() -> None:
    v = Validator({"email": ""}, {"email": "required|email"}).validate()

    assert v.get_errors() == {
        "email": ["email is required", "email must be a valid email address"],
    }
    assert v.fails()
    assert not v.passes()


def test_passing_record_has_empty_error_set() -> None:
    v = Validator({"name": "Acme", "age": 30}, {"name": "required|string", "age": "integer|min:18"})

    assert v.passes()
    assert not v.fails()
    assert v.get_errors() == {}
    assert v.get_first_error() is None


@pytest.mark.parametrize(
    ("data", "rules"),
    [
        ({}, {}),
        ({}, {"a": "required"}),
        ({"a": "x"}, {"a": "required|min:2", "b": "nullable|email"}),
        ({"a": [1, 2]}, {"a": "array|between:1,3"}),
        ({"a": 5}, {"a": "between:1,3"}),
    ],
)
def test_fails_iff_some_field_has_errors(data, rules) -> None:
    v = Validator(data, rules)
    assert v.fails() == any(bool(msgs) for msgs in v.get_errors().values())
    assert v.passes() is not v.fails()


def test_first_error_follows_rule_spec_order() -> None:
    v = Validator({}, {"zeta": "required", "alpha": "required"})

    assert list(v.get_errors()) == ["zeta", "alpha"]
    assert v.get_first_error() == "zeta is required"
    assert v.get_first_error("alpha") == "alpha is required"


def test_first_error_for_field_without_errors_is_none() -> None:
    v = Validator({"a": "x"}, {"a": "required", "b": "required"})
    assert v.get_first_error("a") is None
    assert v.get_first_error("missing") is None


def test_confirmed_password() -> None:
    rules = {"password": "confirmed"}
    assert Validator({"password": "x", "password_confirmation": "x"}, rules).passes()
    assert Validator({"password": "x", "password_confirmation": "y"}, rules).fails()


def test_confirmed_with_named_field() -> None:
    rules = {"confirmPassword": "required|confirmed:password"}
    assert Validator({"password": "s3cret", "confirmPassword": "s3cret"}, rules).passes()
    v = Validator({"password": "s3cret", "confirmPassword": "other"}, rules)
    assert v.get_errors() == {"confirmPassword": ["confirmPassword confirmation does not match"]}


def test_between_by_value_kind() -> None:
    rules = {"v": "between:1,3"}
    assert Validator({"v": "ab"}, rules).passes()
    assert Validator({"v": 5}, rules).fails()
    assert Validator({"v": [1, 2]}, rules).passes()


def test_validation_is_lazy_and_repeatable() -> None:
    data = {"name": ""}
    v = Validator(data, {"name": "required"})
    assert v.fails()

    data["name"] = "filled"
    assert v.validate().passes()
    assert v.get_errors() == {}


def test_dotted_paths_walk_objects_and_lists() -> None:
    data = {"address": {"city": "Tehran"}, "items": [{"qty": 2}]}
    v = Validator(data, {"address.city": "required", "items.0.qty": "integer", "address.zip": "required"})

    assert v.get_value("address.city") == "Tehran"
    assert v.get_value("items.0.qty") == 2
    assert v.get_value("items.5.qty") is None
    assert list(v.get_errors()) == ["address.zip"]


def test_wildcard_expands_per_list_element() -> None:
    data = {"items": [{"quantity": 2}, {"quantity": "x"}, {}]}
    v = Validator(data, {"items.*.quantity": "required|numeric"})

    assert v.expand_field("items.*.quantity") == ["items.0.quantity", "items.1.quantity", "items.2.quantity"]
    assert v.get_errors() == {
        "items.1.quantity": ["items.1.quantity must be a number"],
        "items.2.quantity": ["items.2.quantity is required", "items.2.quantity must be a number"],
    }


def test_wildcard_over_missing_list_expands_to_nothing() -> None:
    v = Validator({}, {"items.*.quantity": "required"})
    assert v.expand_field("items.*.quantity") == []
    assert v.passes()


def test_nullable_skips_missing_values_only() -> None:
    rules = {"email": "nullable|email"}
    assert Validator({}, rules).passes()
    assert Validator({"email": None}, rules).passes()
    assert Validator({"email": "nope"}, rules).fails()


def test_missing_field_without_nullable_is_checked() -> None:
    v = Validator({}, {"company": "string|max:100"})
    assert v.get_errors() == {"company": ["company must be text", "company must be at most 100"]}


def test_unknown_rule_raises_at_construction() -> None:
    with pytest.raises(UnknownRuleError) as excinfo:
        Validator({}, {"name": "required|shiny"})
    assert excinfo.value.rule == "shiny"
    assert excinfo.value.field == "name"


def test_malformed_parameter_fails_rule_by_default() -> None:
    v = Validator({"name": "abc"}, {"name": "min:abc"})
    assert v.fails()
    assert v.get_first_error("name") == "name must be at least abc"


@pytest.mark.parametrize("rule", ["min:abc", "max", "between:1", "regex:(", "in", "exists:customers"])
def test_strict_mode_rejects_malformed_parameters(rule: str) -> None:
    with pytest.raises(RuleConfigError):
        Validator({"name": "abc"}, {"name": rule}, strict=True)


def test_strict_mode_accepts_well_formed_rules() -> None:
    spec = compile_rule_spec({"name": "required|between:1,10|regex:^[a-z]+$|in:a,b"}, strict=True)
    assert spec["name"][1] == RuleDescriptor("between", ("1", "10"))


def test_custom_messages_field_then_rule() -> None:
    messages = {"name.required": "Customer name is required", "required": ":field is mandatory"}
    v = Validator({}, {"name": "required", "code": "required"}, messages)

    assert v.get_first_error("name") == "Customer name is required"
    assert v.get_first_error("code") == "code is mandatory"


def test_message_interpolation() -> None:
    v = Validator({"title": "abcdef", "n": 9}, {"title": "max:3", "n": "between:1,5"})
    assert v.get_first_error("title") == "title must be at most 3"
    assert v.get_first_error("n") == "n must be between 1 and 5"


def test_persian_locale() -> None:
    v = Validator({}, {"name": "required"}, locale="fa")
    assert v.get_first_error() == "name الزامی است"


def test_lookup_backed_rules(accounting_lookup) -> None:
    rules = {"customerId": "required|exists:customers,id", "email": "unique:users,email"}

    ok = Validator({"customerId": 12, "email": "new@example.ir"}, rules, lookup=accounting_lookup)
    assert ok.passes()

    bad = Validator({"customerId": 99, "email": "taken@example.ir"}, rules, lookup=accounting_lookup)
    assert set(bad.get_errors()) == {"customerId", "email"}
    assert ("customers", "id", 99, None) in accounting_lookup.calls


def test_missing_lookup_logs_warning(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING, logger="hesab.validation.validator"):
        v = Validator({"customerId": 1}, {"customerId": "exists:customers,id"})
    assert v.passes()
    assert "without a record lookup" in caplog.text


def test_none_data_is_treated_as_empty_record() -> None:
    v = Validator(None, {"name": "required"})
    assert v.get_errors() == {"name": ["name is required"]}


def test_wildcard_message_override() -> None:
    data = {"items": [{"qty": None}]}
    v = Validator(data, {"items.*.qty": "required"}, {"items.*.qty.required": "each line needs a quantity"})
    assert v.get_errors() == {"items.0.qty": ["each line needs a quantity"]}
