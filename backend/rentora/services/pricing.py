"""Stay length and total price computation for property bookings."""

from datetime import datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal

from rentora.models.enums import PriceUnit

_ONE_DAY = timedelta(days=1)
_CENTS = Decimal("0.01")


def _ceil_div(numerator: int, denominator: int) -> int:
    return -(-numerator // denominator)


def stay_length_days(check_in: datetime, check_out: datetime) -> int:
    """Whole days between check-in and check-out, rounding any partial day up.

    A 25 hour stay counts as 2 days. Callers must reject ``check_in >= check_out``
    before calling this.
    """
    days, remainder = divmod(check_out - check_in, _ONE_DAY)
    return days + (1 if remainder else 0)


def billable_units(price_unit: PriceUnit | str, stay_days: int) -> int:
    """Number of ``price_unit`` periods charged for a stay of ``stay_days`` days."""
    unit = PriceUnit(price_unit)
    if unit is PriceUnit.WEEKLY:
        return _ceil_div(stay_days, 7)
    if unit is PriceUnit.MONTHLY:
        return _ceil_div(stay_days, 30)
    # DAILY, and YEARLY billed per day. YEARLY does not divide by 365; flagged
    # until product confirms whether a year or the whole stay is the unit.
    return stay_days


def compute_total_price(base_price: Decimal, price_unit: PriceUnit | str, stay_days: int) -> Decimal:
    """Total price of a stay, rounded to cents.

    Deterministic and side-effect free: the same inputs always produce the
    same total.
    """
    total = Decimal(base_price) * billable_units(price_unit, stay_days)
    return total.quantize(_CENTS, rounding=ROUND_HALF_UP)
