"""General utility functions"""

from decimal import Decimal, InvalidOperation
from fractions import Fraction
from typing import Callable, Optional, TypeVar

A = TypeVar("A")
B = TypeVar("B")


def none_or(c: Callable[[A], B], e: Optional[A]) -> Optional[B]:
    if e is None:
        return None
    else:
        return c(e)


def fraction_to_decimal(frac: Fraction) -> Decimal:
    """Exact as long as the denominator divides a power of ten, rounded to the
    context precision otherwise"""
    return frac.numerator / Decimal(frac.denominator)


def parse_decimal(value: str) -> Decimal:
    """Parse a decimal number that may use a comma as the decimal separator,
    as is common in charts written with european locales"""
    try:
        decimal = Decimal(value.strip().replace(",", "."))
    except InvalidOperation:
        raise ValueError(f"{value!r} is not a valid decimal number") from None

    if not decimal.is_finite():
        raise ValueError(f"{value!r} is not a finite number")

    return decimal
