"""Tests for the accounting API rule presets."""

from hesab.validation.presets import CUSTOMER, INVOICE, PRESETS, REGISTER
from hesab.validation.validator import Validator, compile_rule_spec


def test_all_presets_compile_strictly() -> None:
    for name, rules in PRESETS.items():
        assert compile_rule_spec(rules, strict=True), name


def test_customer_preset_accepts_complete_record(valid_sheba: str, valid_national_id: str) -> None:
    record = {
        "name": "Acme Trading",
        "customerType": "company",
        "email": "info@acme.ir",
        "mobile": "0912 123 4567",
        "nationalId": valid_national_id,
        "postalCode": "1234567890",
        "sheba": valid_sheba,
        "creditLimit": 5000,
        "paymentTerms": 30,
    }
    assert Validator(record, CUSTOMER).passes()


def test_customer_preset_reports_each_bad_field() -> None:
    record = {
        "name": "A",
        "customerType": "partner",
        "nationalId": "1111111111",
        "sheba": "IR710570029971601460641002",
        "paymentTerms": 400,
    }
    errors = Validator(record, CUSTOMER).get_errors()
    assert list(errors) == ["name", "nationalId", "sheba", "customerType", "paymentTerms"]


def test_invoice_preset_checks_line_items(accounting_lookup) -> None:
    record = {
        "customerId": 12,
        "invoiceDate": "2024-03-01",
        "currencyCode": "IRR",
        "items": [
            {"productId": 1, "quantity": 2, "unitPrice": 150000},
            {"productId": 9, "quantity": 0, "unitPrice": 1000},
        ],
    }
    v = Validator(record, INVOICE, lookup=accounting_lookup)

    assert v.get_errors() == {
        "items.1.productId": ["selected items.1.productId is invalid"],
        "items.1.quantity": ["items.1.quantity must be at least 0.001"],
    }


def test_register_preset_confirmation() -> None:
    record = {
        "username": "sara_k",
        "email": "sara@example.ir",
        "password": "Secur3!Pass",
        "confirmPassword": "Secur3!Pass",
        "fullName": "Sara K",
    }
    assert Validator(record, REGISTER).passes()

    record["confirmPassword"] = "different"
    errors = Validator(record, REGISTER).get_errors()
    assert list(errors) == ["confirmPassword"]
