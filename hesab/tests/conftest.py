"""Pytest configuration and fixtures."""

from typing import Any

import pytest

from hesab.validation.predicates import RuleContext

VALID_SHEBA = "IR710570029971601460641001"
VALID_NATIONAL_ID = "0013542419"


class FakeLookup:
    """In-memory stand-in for the database behind unique/exists."""

    def __init__(self, rows: dict[tuple[str, str], list[Any]]):
        self.rows = rows
        self.calls: list[tuple[str, str, Any, str | None]] = []

    def count(self, table: str, column: str, value: Any, exclude_id: str | None = None) -> int:
        self.calls.append((table, column, value, exclude_id))
        values = self.rows.get((table, column), [])
        return sum(1 for v in values if str(v) == str(value) and str(v) != exclude_id)


@pytest.fixture
def valid_sheba() -> str:
    return VALID_SHEBA


@pytest.fixture
def valid_national_id() -> str:
    return VALID_NATIONAL_ID


@pytest.fixture
def ctx() -> RuleContext:
    """Context for calling predicates directly."""
    return RuleContext(field="field")


@pytest.fixture
def accounting_lookup() -> FakeLookup:
    return FakeLookup(
        {
            ("customers", "id"): [12, 13],
            ("currencies", "code"): ["IRR", "USD"],
            ("products", "id"): [1, 2, 3],
            ("users", "email"): ["taken@example.ir"],
        }
    )
