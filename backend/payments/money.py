"""
Monetary precision helpers for cart and checkout calculations.

This module keeps all currency arithmetic in Decimal and only rounds
at the points where a value becomes visible to the cashier or is
written to the ledger (line totals, order discount, tax, grand total).

Key Principles:
1. NEVER use float for money
2. Carry full precision through intermediate steps
3. Round once, to the currency's minor unit, using ROUND_HALF_UP
4. Compare and aggregate in minor units when exactness matters
"""

from decimal import Decimal, ROUND_HALF_UP, getcontext, InvalidOperation
from typing import Union

from core_backend.exceptions import CartValidationError

# Set high precision for intermediate calculations
getcontext().prec = 28

# Currency minor unit exponents (how many decimal places)
CURRENCY_EXPONENT = {
    # 2-decimal currencies (most common)
    "USD": 2,  # United States Dollar (cents)
    "EUR": 2,  # Euro (cents)
    "GBP": 2,  # British Pound (pence)
    "CAD": 2,  # Canadian Dollar (cents)
    "GHS": 2,  # Ghanaian Cedi (pesewas)
    "NGN": 2,  # Nigerian Naira (kobo)
    "KES": 2,  # Kenyan Shilling (cents)
    "ZAR": 2,  # South African Rand (cents)
    "INR": 2,  # Indian Rupee (paise)

    # Zero-decimal currencies
    "JPY": 0,  # Japanese Yen (no subunit)
    "KRW": 0,  # South Korean Won (no subunit)
    "VND": 0,  # Vietnamese Dong (no subunit)
    "XOF": 0,  # West African CFA franc (no subunit)

    # 3-decimal currencies
    "KWD": 3,  # Kuwaiti Dinar (fils)
    "BHD": 3,  # Bahraini Dinar (fils)
    "OMR": 3,  # Omani Rial (baisa)
    "TND": 3,  # Tunisian Dinar (millime)
}

Amount = Union[Decimal, str, int, float]


def currency_exponent(currency: str) -> int:
    """
    Get the number of decimal places for a currency.

    Examples:
        >>> currency_exponent("USD")
        2
        >>> currency_exponent("JPY")
        0
        >>> currency_exponent("KWD")
        3
    """
    return CURRENCY_EXPONENT.get((currency or "").upper(), 2)


def quantize_decimal(currency: str) -> Decimal:
    """
    Get the quantization decimal for a currency (e.g. Decimal('0.01') for USD).
    """
    return Decimal(10) ** -currency_exponent(currency)


def to_decimal(amount: Amount) -> Decimal:
    """
    Convert user or catalog input into a Decimal without float artifacts.

    Raises:
        CartValidationError: If the value is not a finite number
    """
    if isinstance(amount, Decimal):
        value = amount
    else:
        if isinstance(amount, float):
            # Convert float to string first to avoid binary precision issues
            amount = str(amount)
        try:
            value = Decimal(amount)
        except (InvalidOperation, TypeError, ValueError):
            raise CartValidationError(f"Invalid monetary amount: {amount!r}")

    if not value.is_finite():
        raise CartValidationError(f"Invalid monetary amount: {amount!r}")
    return value


def quantize(currency: str, amount: Amount) -> Decimal:
    """
    Round to currency decimals using ROUND_HALF_UP.

    Examples:
        >>> quantize("USD", "1.755")
        Decimal('1.76')
        >>> quantize("USD", "10.125")
        Decimal('10.13')
        >>> quantize("JPY", "1234.5")
        Decimal('1235')
    """
    return to_decimal(amount).quantize(quantize_decimal(currency), rounding=ROUND_HALF_UP)


def to_minor(currency: str, amount: Amount) -> int:
    """
    Convert to minor units (e.g., cents) after quantization.

    Examples:
        >>> to_minor("USD", "10.127")
        1013
        >>> to_minor("JPY", "1234.56")
        1235
    """
    quantized = quantize(currency, amount)
    exponent = currency_exponent(currency)
    return int((quantized * (10 ** exponent)).to_integral_value())


def from_minor(currency: str, minor: int) -> Decimal:
    """
    Convert from minor units back to a Decimal with the currency's precision.

    Examples:
        >>> from_minor("USD", 1013)
        Decimal('10.13')
    """
    return (Decimal(minor) / (10 ** currency_exponent(currency))).quantize(quantize_decimal(currency))


def percentage_of(amount: Amount, percentage: Amount) -> Decimal:
    """
    Unrounded percentage of an amount (e.g. percentage_of("39.00", 10) == 3.9).

    Rounding is left to the caller so the value can keep full precision
    until it becomes visible.
    """
    return to_decimal(amount) * to_decimal(percentage) / Decimal("100")


def zero(currency: str) -> Decimal:
    """Zero with the currency's precision, e.g. Decimal('0.00')."""
    return Decimal(0).quantize(quantize_decimal(currency))
