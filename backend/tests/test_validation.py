"""
Input coercion tests for spm.validation.
"""

from decimal import Decimal

import pytest

from spm.validation import (
    ValidationError,
    money_to_json,
    parse_money,
    parse_non_negative_int,
    parse_positive_int,
    quantize_money,
)


class TestMoney:

    @pytest.mark.parametrize(
        "raw,expected",
        [
            (1.5, Decimal("1.50")),
            ("2", Decimal("2.00")),
            (0, Decimal("0.00")),
            ("0.005", Decimal("0.01")),
            (Decimal("9999999.99"), Decimal("9999999.99")),
        ],
    )
    def test_accepted(self, raw, expected):
        assert parse_money(raw, "precio") == expected

    @pytest.mark.parametrize("raw", [None, "", "abc", -0.01, "NaN", "Infinity", True, [1], 10_000_000])
    def test_rejected(self, raw):
        with pytest.raises(ValidationError):
            parse_money(raw, "precio")

    def test_half_up(self):
        assert quantize_money(Decimal("2.345")) == Decimal("2.35")

    def test_json(self):
        assert money_to_json(Decimal("4.50")) == 4.5
        assert money_to_json(None) is None


class TestIntegers:

    def test_positive(self):
        assert parse_positive_int("3", "cantidad") == 3
        assert parse_positive_int(3.0, "cantidad") == 3

    @pytest.mark.parametrize("raw", [0, "-1", "2.5", "", " ", False])
    def test_positive_rejected(self, raw):
        with pytest.raises(ValidationError):
            parse_positive_int(raw, "cantidad")

    def test_non_negative_default(self):
        assert parse_non_negative_int(None, "stock") == 0
        assert parse_non_negative_int("", "stock", default=4) == 4
        assert parse_non_negative_int(0, "stock") == 0

    def test_non_negative_rejected(self):
        with pytest.raises(ValidationError):
            parse_non_negative_int(-1, "stock")
