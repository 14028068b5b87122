import math
import re
from decimal import Decimal, InvalidOperation, getcontext

ZERO = Decimal(0)

_LEADING_NUMBER = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")

# Room left below Emax so summing many amounts cannot overflow.
_SUM_HEADROOM = 18


def _in_range(value: Decimal) -> Decimal:
    if not value.is_finite():
        return ZERO
    if not value:
        return value
    context = getcontext()
    if value.adjusted() > context.Emax - _SUM_HEADROOM or value.adjusted() < context.Emin:
        return ZERO
    return value


def to_decimal_or_zero(value: object) -> Decimal:
    """Coerce a stored amount to Decimal. Anything unreadable becomes 0.

    Strings use their leading numeric prefix: '12abc' -> 12, 'abc' -> 0.
    Values whose exponent the decimal context cannot carry also become 0.
    """
    if value is None or isinstance(value, bool):
        return ZERO
    if isinstance(value, Decimal):
        return _in_range(value)
    if isinstance(value, int):
        return _in_range(Decimal(value))
    if isinstance(value, float):
        if math.isnan(value) or math.isinf(value):
            return ZERO
        return _in_range(Decimal(str(value)))
    if isinstance(value, str):
        match = _LEADING_NUMBER.match(value)
        if match is None:
            return ZERO
        try:
            return _in_range(Decimal(match.group(1)))
        except ArithmeticError:
            return ZERO
    return ZERO


def format_ils(amount: Decimal | int | float, symbol: str = "₪") -> str:
    """Format an amount with thousands separators: -1234.5 -> '-₪1,234.50'"""
    value = to_decimal_or_zero(amount)
    sign = "-" if value < 0 else ""
    return f"{sign}{symbol}{abs(value):,.2f}"


def parse_ils(text: str) -> Decimal | None:
    """Parse a user-typed amount. Returns None on invalid input.

    Accepts formats like '1234', '1234.50', '1,234.50', '₪1,234'.
    """
    text = text.strip().replace("₪", "").replace(",", "").strip()
    if not text:
        return None
    try:
        value = Decimal(text)
    except InvalidOperation:
        return None
    if not value.is_finite() or (value and not _in_range(value)):
        return None
    return value
