"""
Tests for core.documents.formatting — rupee amounts, dates, file names.
"""

from datetime import date, datetime
from decimal import Decimal

import pytest

from core.documents.formatting import (
    export_filename,
    format_entry_date,
    format_inr,
    group_indian,
)


class TestGroupIndian:
    @pytest.mark.parametrize(
        "digits,expected",
        [
            ("0", "0"),
            ("999", "999"),
            ("1000", "1,000"),
            ("100000", "1,00,000"),
            ("1234567", "12,34,567"),
            ("10000000", "1,00,00,000"),
        ],
    )
    def test_lakh_crore_grouping(self, digits, expected):
        assert group_indian(digits) == expected


class TestFormatInr:
    def test_two_decimals(self):
        assert format_inr(Decimal("80")) == "₹80.00"
        assert format_inr(Decimal("1234567.5")) == "₹12,34,567.50"

    def test_negative_sign_before_symbol(self):
        assert format_inr(Decimal("-40.5")) == "-₹40.50"

    def test_rounds_half_up(self):
        assert format_inr(Decimal("0.005")) == "₹0.01"
        assert format_inr(Decimal("2.345")) == "₹2.35"

    def test_negative_rounding_to_zero_keeps_sign(self):
        assert format_inr(Decimal("-0.001")) == "-₹0.00"
        assert format_inr(Decimal("0.00")) == "₹0.00"

    def test_accepts_plain_numbers(self):
        assert format_inr(100000) == "₹1,00,000.00"
        assert format_inr("12.3") == "₹12.30"


class TestDatesAndNames:
    def test_day_month_year_without_padding(self):
        assert format_entry_date(date(2024, 1, 3)) == "3/1/2024"
        assert format_entry_date(datetime(2024, 11, 25, 10, 0)) == "25/11/2024"

    def test_filename_replaces_spaces(self):
        assert export_filename("Main Shop Book", "pdf") == "Main_Shop_Book.pdf"
        assert export_filename("Cash Book", ".xlsx") == "Cash_Book.xlsx"
