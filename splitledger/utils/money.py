"""Money parsing and tolerance helpers."""
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any

from splitledger.core.exceptions import InvalidAmount

# Single equality threshold for split sums and balance zero-suppression
TOLERANCE = Decimal("0.01")

CENT = Decimal("0.01")
HUNDRED = Decimal(100)

# Largest accepted amount; keeps cent quantization and Decimal128 storage exact
MAX_AMOUNT = Decimal("1e12")


def parse_decimal(value: Any, field: str = "amount") -> Decimal:
    """
    Parse user input into a finite Decimal.

    Accepts Decimal, int, float and numeric strings. Blank strings and None
    parse to zero, matching how empty form inputs are treated.
    Raises InvalidAmount for anything that is not a finite number.
    """
    if value is None:
        return Decimal(0)
    if isinstance(value, bool):
        raise InvalidAmount(f"Invalid {field}: {value!r}")
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return Decimal(0)
    try:
        # str() keeps floats at their shortest repr instead of binary noise
        parsed = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError):
        raise InvalidAmount(f"Invalid {field}: {value!r}")
    if not parsed.is_finite():
        raise InvalidAmount(f"Invalid {field}: {value!r}")
    return parsed


def parse_positive_amount(value: Any, field: str = "amount") -> Decimal:
    """Parse a strictly positive amount no larger than MAX_AMOUNT."""
    parsed = parse_decimal(value, field)
    if parsed <= 0:
        raise InvalidAmount(f"Invalid {field}: must be greater than zero")
    if parsed > MAX_AMOUNT:
        raise InvalidAmount(f"Invalid {field}: must not exceed {MAX_AMOUNT:,.0f}")
    return parsed


def within_tolerance(a: Decimal, b: Decimal) -> bool:
    return abs(a - b) <= TOLERANCE


def quantize_money(value: Decimal) -> Decimal:
    """Round to cents, half-up. Used only at display/serialization time."""
    return value.quantize(CENT, rounding=ROUND_HALF_UP)
