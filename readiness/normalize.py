# =============================================================================
# BOM READINESS ENGINE - NORMALIZER MODULE
# =============================================================================
# Coerces loosely typed upstream fields into safe floats and flags.
#
# KEY CONSTRAINT: nothing in here raises for bad data, it only falls back.
# =============================================================================

import math
from decimal import Decimal, ROUND_HALF_UP, localcontext

_TRUE_STRINGS = {"true", "1", "yes", "y", "t"}


def to_number(value, fallback: float = 0.0) -> float:
    """
    Convert arbitrary input to a finite float.

    Args:
        value: Raw field value (number, numeric string, None, ...)
        fallback: Returned when value is missing, NaN, infinite or non-numeric

    Returns:
        Finite float
    """
    if value is None:
        return fallback

    if isinstance(value, str):
        value = value.strip()
        if not value:
            return fallback

    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return fallback

    if not math.isfinite(number):
        return fallback
    return number


def to_bool(value) -> bool:
    """Coerce a flag field; strings are matched case-insensitively."""
    if value is None:
        return False
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_STRINGS
    return bool(value)


def round_to(value: float, places: int = 4) -> float:
    """
    Round half away from zero to a fixed number of decimal places.

    Goes through the shortest decimal repr of the float so that
    40.516200000000005 rounds as 40.5162 rather than drifting. Ties are
    judged on that repr, not the exact binary value, so 1.00005 rounds up
    to 1.0001 here where binary fixed-point formatting gives 1.0000.
    """
    number = Decimal(repr(to_number(value)))
    exponent = number.as_tuple().exponent
    int_digits = max(len(number.as_tuple().digits) + exponent, 1)
    with localcontext() as ctx:
        ctx.prec = int_digits + places + 2
        rounded = number.quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)
    return float(rounded)


# =============================================================================
# END OF NORMALIZER MODULE
# =============================================================================
