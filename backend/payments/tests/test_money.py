"""
Money helper tests

Rounding and conversion rules shared by the cart calculator and the
sale ledger.
"""
import pytest
from decimal import Decimal

from core_backend.exceptions import CartValidationError
from payments.money import (
    currency_exponent,
    from_minor,
    percentage_of,
    quantize,
    to_decimal,
    to_minor,
    zero,
)


class TestQuantize:
    """Rounding to the currency's minor unit"""

    def test_half_up_rounding(self):
        """CRITICAL: Verify .5 always rounds away from zero, never to even"""
        assert quantize("USD", "1.755") == Decimal("1.76")
        assert quantize("USD", "1.745") == Decimal("1.75")
        assert quantize("USD", "0.005") == Decimal("0.01")

    def test_zero_and_three_decimal_currencies(self):
        assert quantize("JPY", "1234.5") == Decimal("1235")
        assert quantize("KWD", "1.2345") == Decimal("1.235")

    def test_unknown_currency_defaults_to_two_decimals(self):
        assert currency_exponent("XYZ") == 2
        assert currency_exponent(None) == 2
        assert quantize("xyz", "2.345") == Decimal("2.35")


class TestConversions:

    def test_float_input_has_no_binary_artifacts(self):
        assert to_decimal(0.1) == Decimal("0.1")
        assert quantize("USD", 2.675) == Decimal("2.68")

    def test_minor_units(self):
        assert to_minor("USD", "10.127") == 1013
        assert from_minor("USD", 1013) == Decimal("10.13")
        assert to_minor("JPY", "1234.56") == 1235

    def test_percentage_is_unrounded(self):
        assert percentage_of("35.10", 5) == Decimal("1.755")

    def test_zero_has_currency_precision(self):
        assert str(zero("USD")) == "0.00"
        assert str(zero("JPY")) == "0"

    @pytest.mark.parametrize("bad", ["abc", "", None, "NaN", "Infinity"])
    def test_invalid_amounts_rejected(self, bad):
        with pytest.raises(CartValidationError):
            to_decimal(bad)
