import math
from decimal import Decimal

from ticketpro.services.currency import (
    calculate_percentage,
    calculate_profit,
    calculate_profit_margin,
    format_currency,
    format_number,
    round2,
    round_half_up,
    safe_add,
    safe_divide,
    safe_multiply,
)


def test_round2_is_half_up():
    assert round2(2.675) == 2.68
    assert round2(1.005) == 1.01
    assert round2(-1.005) == -1.01


def test_safe_add_skips_invalid_values():
    assert safe_add(0.1, 0.2) == 0.3
    assert safe_add(100, math.nan, None, math.inf, 50.255) == 150.26
    assert safe_add() == 0


def test_safe_multiply_and_divide():
    assert safe_multiply(1000, 3) == 3000
    assert safe_multiply(math.nan, 3) == 0
    assert safe_divide(10, 4) == 2.5
    assert safe_divide(10, 0) == 0
    assert safe_divide(None, 5) == 0


def test_percentage_and_profit():
    assert calculate_percentage(1, 3) == 33.33
    assert calculate_percentage(5, 0) == 0
    assert calculate_profit(100, 80, 10) == 200
    assert calculate_profit(math.nan, 80, 10) == 0
    assert calculate_profit(Decimal("52000.00"), Decimal("45000.00"), 1) == 7000
    assert calculate_profit_margin(20, 200) == 10


def test_round_half_up_for_averages():
    assert round_half_up(100000 / 3) == 33333
    assert round_half_up(2.5) == 3
    assert round_half_up("12") == 0


def test_format_currency_uses_lakh_grouping():
    assert format_currency(1234567) == "৳12,34,567"
    assert format_currency(45000) == "৳45,000"
    assert format_currency(999) == "৳999"
    assert format_currency(1500.5) == "৳1,500.5"
    assert format_currency(0) == "৳0"


def test_format_currency_never_raises():
    assert format_currency(math.nan) == "৳0"
    assert format_currency(None) == "৳0"
    assert format_currency("abc") == "৳0"


def test_format_number():
    assert format_number(50000000) == "5,00,00,000"
    assert format_number(1234.5, decimals=2) == "1,234.50"
    assert format_number(math.inf) == "0"
