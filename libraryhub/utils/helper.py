from decimal import Decimal, ROUND_HALF_UP

CENT = Decimal('0.01')
ZERO = Decimal('0.00')
# Largest value a NUMERIC(10, 2) column holds
MAX_MONEY = Decimal('99999999.99')


def to_money(value):
    """Convert a number (or numeric string) to a two-decimal Decimal"""
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        amount = value
    else:
        amount = Decimal(str(value))
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def money_to_float(value):
    """Serialize a money column for JSON, treating NULL as 0"""
    if value is None:
        return 0.0
    return float(value)


def format_datetime(value):
    if not value:
        return None
    return value.strftime('%Y-%m-%d %H:%M:%S')


def format_date(value):
    if not value:
        return None
    return value.strftime('%Y-%m-%d')
