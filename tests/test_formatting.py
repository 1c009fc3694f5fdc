"""Tests for display formatting helpers."""

import pytest

from roomspa_admin.core.formatting import (
    datetime_input,
    format_currency,
    format_date,
    format_number,
    format_percent,
    lookup,
    normalize_services,
    ratio_percent,
)


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (1234.5, "$1,234.50"),
        ("99", "$99.00"),
        (None, "$0.00"),
        (-5, "-$5.00"),
        ("not a number", "$0.00"),
    ],
)
def test_format_currency(value, expected):
    """Test currency formatting of loosely typed amounts."""
    assert format_currency(value) == expected


def test_format_number_and_percent():
    """Test thousands separators and percent suffixes."""
    assert format_number(1500) == "1,500"
    assert format_number(2.5) == "2.50"
    assert format_percent(40) == "40%"
    assert format_percent(12.5) == "12.5%"


def test_ratio_percent_is_clamped():
    """Test usage ratios for progress bars."""
    assert ratio_percent(40, 100) == 40
    assert ratio_percent(5, 0) == 0
    assert ratio_percent(150, 100) == 100


def test_dates():
    """Test ISO and plain timestamps."""
    assert format_date("2024-01-15T10:30:00Z") == "Jan 15, 2024"
    assert format_date("2024-01-15 10:30:00") == "Jan 15, 2024"
    assert format_date("garbage") == ""
    assert datetime_input("2024-12-31T23:59:00Z") == "2024-12-31T23:59"
    assert datetime_input(None) == ""


def test_lookup():
    """Test dotted path reads."""
    record = {"customer": {"name": "Ann"}, "total": 0}
    assert lookup(record, "customer.name") == "Ann"
    assert lookup(record, "customer.email", "-") == "-"
    assert lookup(record, "total.value") is None
    assert lookup(record, "total") == 0


class TestNormalizeServices:
    """Tests for booking service labels."""

    def test_json_list(self):
        """Test a JSON encoded list."""
        assert normalize_services('["Swedish Massage", "Aromatherapy"]') == [
            "Swedish Massage",
            "Aromatherapy",
        ]

    def test_invalid_json_shown_verbatim(self):
        """Test that free text is not split on commas."""
        assert normalize_services("Deep Tissue, 60 min") == ["Deep Tissue, 60 min"]

    def test_mapping(self):
        """Test service to detail maps."""
        assert normalize_services({"Swedish": "60 min", "Hot Stone": None}) == [
            "Swedish (60 min)",
            "Hot Stone",
        ]

    def test_list_of_records(self):
        """Test lists of service records."""
        assert normalize_services([{"name": "Reflexology"}, "Facial"]) == [
            "Reflexology",
            "Facial",
        ]

    def test_empty(self):
        """Test missing values."""
        assert normalize_services(None) == []
        assert normalize_services("") == []
