"""Money and percentage helpers.

Every function here is total: invalid numeric input (None, NaN, infinities,
non-numbers) degrades to zero instead of raising, so a malformed figure coming
from a form or an old row never breaks a response. Rounding is half-up on the
decimal representation, so 2.675 rounds to 2.68.
"""

import math
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

CURRENCY_SYMBOL = "৳"

_CENT = Decimal("0.01")
_UNIT = Decimal("1")


def is_valid_number(value) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, Decimal):
        return value.is_finite()
    if isinstance(value, (int, float)):
        return math.isfinite(value)
    return False


def _to_decimal(value) -> Decimal:
    return value if isinstance(value, Decimal) else Decimal(str(value))


def _quantize(value: Decimal, exp: Decimal) -> Decimal:
    try:
        return value.quantize(exp, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        # More digits than the context precision: already integral at this magnitude
        return value


def round2(value) -> float:
    if not is_valid_number(value):
        return 0.0
    return float(_quantize(_to_decimal(value), _CENT))


def round_half_up(value) -> int:
    if not is_valid_number(value):
        return 0
    return int(_quantize(_to_decimal(value), _UNIT))


def safe_add(*values) -> float:
    total = 0.0
    for value in values:
        if not is_valid_number(value):
            continue
        total = round2(_to_decimal(total) + _to_decimal(value))
    return total


def safe_multiply(a, b) -> float:
    if not (is_valid_number(a) and is_valid_number(b)):
        return 0.0
    return round2(_to_decimal(a) * _to_decimal(b))


def safe_divide(numerator, denominator) -> float:
    if not (is_valid_number(numerator) and is_valid_number(denominator)) or denominator == 0:
        return 0.0
    return round2(_to_decimal(numerator) / _to_decimal(denominator))


def calculate_percentage(numerator, denominator) -> float:
    if not (is_valid_number(numerator) and is_valid_number(denominator)) or denominator == 0:
        return 0.0
    return round2(_to_decimal(numerator) / _to_decimal(denominator) * 100)


def calculate_profit(selling_price, buying_price, quantity) -> float:
    if not all(is_valid_number(v) for v in (selling_price, buying_price, quantity)):
        return 0.0
    return round2((_to_decimal(selling_price) - _to_decimal(buying_price)) * _to_decimal(quantity))


def calculate_profit_margin(profit, revenue) -> float:
    """Profit as a percentage of revenue."""
    return calculate_percentage(profit, revenue)


def _group_digits(digits: str) -> str:
    # South-Asian grouping: last three digits, then pairs (12,34,567)
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    parts = []
    while len(head) > 2:
        parts.insert(0, head[-2:])
        head = head[:-2]
    if head:
        parts.insert(0, head)
    return ",".join(parts + [tail])


def _format_decimal(value: Decimal, decimals: int, trim: bool) -> str:
    quantized = _quantize(value, _UNIT.scaleb(-decimals))
    sign = "-" if quantized < 0 else ""
    whole, _, fraction = f"{abs(quantized):f}".partition(".")
    if trim:
        fraction = fraction.rstrip("0")
    text = sign + _group_digits(whole)
    return f"{text}.{fraction}" if fraction else text


def format_currency(amount) -> str:
    """Render an amount as Taka with up to two decimals, e.g. ``৳12,34,567.5``."""
    if not is_valid_number(amount):
        return f"{CURRENCY_SYMBOL}0"
    return CURRENCY_SYMBOL + _format_decimal(_to_decimal(amount), 2, trim=True)


def format_number(value, decimals: int = 0) -> str:
    if not is_valid_number(value):
        return "0"
    return _format_decimal(_to_decimal(value), decimals, trim=False)
