"""Tests for national ID and Sheba checksums."""

import pytest

from hesab.validation.checksums import (
    build_sheba,
    is_valid_national_id,
    is_valid_sheba,
    mod97,
    normalize_sheba,
    sheba_check_digits,
)


@pytest.mark.parametrize("value", ["0013542419", "1234567891"])
def test_national_id_valid(value: str) -> None:
    assert is_valid_national_id(value)


@pytest.mark.parametrize("digit", "0123456789")
def test_national_id_repeated_digits_rejected(digit: str) -> None:
    assert not is_valid_national_id(digit * 10)


@pytest.mark.parametrize("value", ["0013542418", "1234567892", "1234567801"])
def test_national_id_mutated_digit_fails(value: str) -> None:
    assert not is_valid_national_id(value)


@pytest.mark.parametrize("value", ["123456789", "00135424190", "00135424a9", "", None, 13542419])
def test_national_id_shape(value) -> None:
    assert not is_valid_national_id(value)


def test_national_id_remainder_below_two_uses_remainder() -> None:
    # 1*10+2*9+...+9*2 = 210, 210 % 11 == 1, so the check digit is 1.
    assert is_valid_national_id("1234567891")
    assert not is_valid_national_id("1234567890")


def test_mod97_iban_reference_value() -> None:
    # GB82WEST12345698765432 rearranged and converted to digits.
    assert mod97("3214282912345698765432161182") == 1


def test_mod97_rejects_non_digits() -> None:
    with pytest.raises(ValueError):
        mod97("12a4")


def test_sheba_valid(valid_sheba: str) -> None:
    assert is_valid_sheba(valid_sheba)


def test_sheba_normalizes_case_and_separators() -> None:
    assert normalize_sheba("ir71 0570-0299 7160") == "IR71057002997160"
    assert is_valid_sheba("ir71 0570 0299 7160 1460 6410 01")
    assert is_valid_sheba("IR71-0570-0299-7160-1460-6410-01")


def test_sheba_flipped_digit_fails() -> None:
    assert not is_valid_sheba("IR710570029971601460641002")
    assert not is_valid_sheba("IR720570029971601460641001")


@pytest.mark.parametrize(
    "value",
    [
        "IR71057002997160146064100",  # 23 digits
        "IR7105700299716014606410011",  # 25 digits
        "DE89370400440532013000",
        "GB82WEST12345698765432",
        "IR71057002997160146064100A",
        "",
        None,
        710570029971601460641001,
    ],
)
def test_sheba_shape_checked_before_checksum(value) -> None:
    assert not is_valid_sheba(value)


def test_sheba_check_digits() -> None:
    assert sheba_check_digits("0570029971601460641001") == "71"


def test_build_sheba_round_trip() -> None:
    bban = "0120000000004567891234"
    sheba = build_sheba(bban)
    assert sheba.startswith("IR") and sheba.endswith(bban)
    assert len(sheba) == 26
    assert is_valid_sheba(sheba)


def test_build_sheba_rejects_bad_bban() -> None:
    with pytest.raises(ValueError):
        build_sheba("12345")
