"""Formatting helpers for amounts, quantities, dates and free text."""

from __future__ import annotations

from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, List, Optional, Tuple, Union

from dateutil import parser as dateutil_parser

CURRENCY_SYMBOL = "₹"
CENTS = Decimal("0.01")

# strftime equivalents of dd/MM/yyyy and dd/MM/yyyy HH:mm
DATE_PATTERN = "%d/%m/%Y"
DATETIME_PATTERN = "%d/%m/%Y %H:%M"

DateLike = Union[date, datetime, str]

# Two unrelated defaults: a component missing from the input shows up as a
# difference between the two parses.
_DEFAULT_A = datetime(2000, 1, 1)
_DEFAULT_B = datetime(2001, 2, 2)


def to_decimal(value: Any) -> Decimal:
    """Coerce a JSON number or numeric string to ``Decimal``.

    Floats go through ``str`` so that 45.1 stays 45.1 instead of picking up
    binary noise. Booleans, blanks and non-finite values are rejected.
    """
    if isinstance(value, bool) or value is None:
        raise ValueError(f"not a number: {value!r}")
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, (int, float)):
        result = Decimal(str(value))
    elif isinstance(value, str):
        raw = value.strip()
        if not raw:
            raise ValueError("empty numeric value")
        try:
            result = Decimal(raw)
        except InvalidOperation as exc:
            raise ValueError(f"not a number: {value!r}") from exc
    else:
        raise ValueError(f"not a number: {value!r}")
    if not result.is_finite():
        raise ValueError(f"not a finite number: {value!r}")
    return result


def quantize_money(amount: Decimal) -> Decimal:
    return amount.quantize(CENTS, rounding=ROUND_HALF_UP)


def format_currency(amount: Any) -> str:
    return f"{CURRENCY_SYMBOL}{quantize_money(to_decimal(amount))}"


def format_quantity(qty: Any) -> str:
    try:
        quantity = to_decimal(qty)
    except ValueError:
        return str(qty)
    if quantity == quantity.to_integral_value():
        return str(int(quantity))
    return format(quantity.normalize(), "f")


def parse_date(raw: DateLike) -> Optional[datetime]:
    """Return a datetime for ``raw`` or None when it cannot be parsed.

    Strings must name a day, a month and a year. Partial input such as "5",
    "March" or "Monday" is rejected instead of being completed from the
    current date.
    """
    if isinstance(raw, datetime):
        return raw
    if isinstance(raw, date):
        return datetime(raw.year, raw.month, raw.day)
    if not isinstance(raw, str) or not raw.strip():
        return None
    text = raw.strip()
    try:
        first = dateutil_parser.parse(text, default=_DEFAULT_A)
        second = dateutil_parser.parse(text, default=_DEFAULT_B)
    except (ValueError, OverflowError):
        return None
    if first.date() != second.date():
        return None
    return first


def format_date(value: DateLike, pattern: str = DATE_PATTERN) -> str:
    """Format a date as dd/MM/yyyy, or with ``pattern`` when given.

    Strings that cannot be parsed are returned unchanged.
    """
    parsed = parse_date(value)
    if parsed is None:
        return value.strip() if isinstance(value, str) else str(value)
    return parsed.strftime(pattern)


def split_terms(text: str) -> List[str]:
    if not text:
        return []
    return text.replace("\r\n", "\n").replace("\r", "\n").split("\n")


def hex_to_rgb(value: str) -> Tuple[int, int, int]:
    raw = value.strip().lstrip("#")
    if len(raw) == 3:
        raw = "".join(ch * 2 for ch in raw)
    if len(raw) != 6:
        raise ValueError(f"invalid hex colour: {value!r}")
    return int(raw[0:2], 16), int(raw[2:4], 16), int(raw[4:6], 16)


def is_hex_color(value: Any) -> bool:
    if not isinstance(value, str) or not value.strip().startswith("#"):
        return False
    try:
        hex_to_rgb(value)
    except ValueError:
        return False
    return True
