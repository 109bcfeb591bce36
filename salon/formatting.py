from decimal import Decimal
from typing import Any

from babel.dates import format_date
from babel.numbers import format_currency as _babel_currency

from salon.parsing import parse_amount, parse_date


def format_currency(value: Any, currency: str = "BRL", locale: str = "pt_BR") -> str:
    """``40`` -> ``"R$ 40,00"``; anything unparseable shows as zero."""
    amount = parse_amount(value)
    return _babel_currency(amount if amount is not None else Decimal("0"), currency, locale=locale)


def format_date_simple(value: Any, locale: str = "pt_BR") -> str:
    if value is None or value == "":
        return ""
    d = parse_date(value)
    if d is None:
        return str(value)
    return format_date(d, format="dd/MM/yyyy", locale=locale)
