"""
Integer-cent helpers.

All monetary values inside the services are integer cents. Euros only
appear at human-facing boundaries (emails, rendered documents).
"""
from decimal import Decimal, ROUND_HALF_UP, ROUND_FLOOR

CENTS_PER_EURO = 100


def round_half_up(numerator, denominator=1) -> int:
    """Round numerator/denominator to the nearest integer, halves away from zero"""
    if denominator == 0:
        raise ZeroDivisionError("denominator must not be zero")
    value = Decimal(numerator) / Decimal(denominator)
    return int(value.quantize(Decimal('1'), rounding=ROUND_HALF_UP))


def floor_div(numerator, denominator=1) -> int:
    """Floor of numerator/denominator for Decimal or int inputs"""
    value = Decimal(numerator) / Decimal(denominator)
    return int(value.to_integral_value(rounding=ROUND_FLOOR))


def cents_to_euros(cents: int) -> Decimal:
    return (Decimal(cents) / CENTS_PER_EURO).quantize(Decimal('0.01'))


def format_euros(cents: int) -> str:
    """Plain '12.34 EUR' rendering for notification texts"""
    return f"{cents_to_euros(cents)} EUR"
