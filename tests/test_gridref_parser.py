"""Tests for grid reference decoding."""

import pytest

from stalklog.gridref.errors import (
    GridReferenceError,
    MalformedReference,
    OddDigitCount,
    PrecisionOverflow,
    UnknownGridSquare,
)
from stalklog.gridref.models import GridSquareIndex
from stalklog.gridref.parser import decode, normalise


class TestNormalise:
    def test_strips_whitespace_and_uppercases(self):
        assert normalise(" so 514\t398 ") == "SO514398"

    def test_already_clean(self):
        assert normalise("SO514398") == "SO514398"


class TestDecode:
    def test_spaced_reference(self):
        d = decode("SO 514 398")
        assert d.letters == "SO"
        assert d.square == GridSquareIndex(column=3, row=10)
        assert d.easting_digits == 514
        assert d.northing_digits == 398
        assert d.precision == 3

    def test_lowercase_compact(self):
        d = decode("so5139")
        assert d.letters == "SO"
        assert (d.easting_digits, d.northing_digits, d.precision) == (51, 39, 2)

    def test_leading_zero_digits(self):
        d = decode("SO 050 009")
        assert d.easting_digits == 50
        assert d.northing_digits == 9

    def test_single_digit_pair(self):
        assert decode("TQ38").precision == 1

    def test_full_precision(self):
        d = decode("SO 51432 39876")
        assert d.precision == 5
        assert d.easting_digits == 51432
        assert d.northing_digits == 39876


class TestDecodeErrors:
    @pytest.mark.parametrize(
        "text",
        ["", "   ", "SO", "S0123456", "12SO34", "SO12AB", "SOX123456", "SO-123-456"],
    )
    def test_malformed(self, text: str):
        with pytest.raises(MalformedReference) as exc_info:
            decode(text)
        assert exc_info.value.kind == "malformed_reference"
        assert exc_info.value.text == text

    @pytest.mark.parametrize("text", ["SO123", "SO1", "SO 1234 567"])
    def test_odd_digit_count(self, text: str):
        with pytest.raises(OddDigitCount) as exc_info:
            decode(text)
        assert exc_info.value.kind == "odd_digit_count"

    @pytest.mark.parametrize("text", ["ZZ123456", "SI1234", "IA1234", "AA1234"])
    def test_unknown_grid_square(self, text: str):
        with pytest.raises(UnknownGridSquare) as exc_info:
            decode(text)
        assert exc_info.value.kind == "unknown_grid_square"

    @pytest.mark.parametrize("text", ["SO1234567890123", "SO123456789012"])
    def test_precision_overflow(self, text: str):
        with pytest.raises(PrecisionOverflow) as exc_info:
            decode(text)
        assert exc_info.value.kind == "precision_overflow"

    def test_errors_are_value_errors(self):
        with pytest.raises(ValueError):
            decode("nonsense")
        assert issubclass(GridReferenceError, ValueError)
