from __future__ import annotations

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Union

Amount = Union[Decimal, int, float, str]

CENT = Decimal("0.01")
# Balances and payments within one cent of zero count as settled.
SETTLED_EPSILON = Decimal("0.01")
ZERO = Decimal("0")


def to_decimal(value: Amount) -> Decimal:
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, bool):
        raise TypeError("bool is not a monetary amount")
    elif isinstance(value, int):
        result = Decimal(value)
    elif isinstance(value, float):
        result = Decimal(str(value))
    elif isinstance(value, str):
        try:
            result = Decimal(value.strip())
        except InvalidOperation as exc:
            raise ValueError(f"not a number: {value!r}") from exc
    else:
        raise TypeError(f"unsupported amount type: {type(value).__name__}")

    if not result.is_finite():
        raise ValueError(f"amount must be finite, got {value!r}")
    return result


def round_cents(value: Amount) -> Decimal:
    # ROUND_HALF_UP on Decimal rounds half away from zero, for negatives too.
    try:
        return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)
    except InvalidOperation as exc:
        raise ValueError(f"amount too large to round to cents: {value!r}") from exc


def is_settled(value: Amount) -> bool:
    return abs(to_decimal(value)) <= SETTLED_EPSILON


def is_credit(value: Amount) -> bool:
    return to_decimal(value) > SETTLED_EPSILON


def is_debt(value: Amount) -> bool:
    return to_decimal(value) < -SETTLED_EPSILON


def format_currency(amount: Amount) -> str:
    rounded = round_cents(amount)
    if rounded == ZERO:
        rounded = abs(rounded)
    return f"${rounded}"
