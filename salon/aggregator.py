import re
from decimal import Decimal
from typing import Any, Callable, Iterable, Iterator, Tuple

from salon.domain import MonthlySummary
from salon.normalizer import field
from salon.parsing import parse_amount, parse_date

_MONTH = re.compile(r"^\s*(\d{4})-(\d{1,2})\s*$")


def parse_month(value: str) -> Tuple[int, int]:
    """``"2025-03"`` -> ``(2025, 3)``; raises ``ValueError`` on anything else."""
    match = _MONTH.match(value or "")
    if not match:
        raise ValueError(f"month must look like YYYY-MM, got {value!r}")
    year, month = int(match.group(1)), int(match.group(2))
    if not 1 <= month <= 12:
        raise ValueError(f"month out of range: {month}")
    return year, month


def in_month(year: int, month: int, date_field: str) -> Callable[[Any], bool]:
    def _filter(row: Any) -> bool:
        d = parse_date(field(row, date_field))
        return d is not None and d.year == year and d.month == month

    return _filter


def iter_amounts(rows: Iterable[Any], pred: Callable[[Any], bool], amount_field: str) -> Iterator[Decimal]:
    for row in rows:
        if not pred(row):
            continue
        amount = parse_amount(field(row, amount_field))
        if amount is not None:
            yield amount


def total_for_month(rows: Iterable[Any], year: int, month: int, kind: str) -> Decimal:
    pred = in_month(year, month, f"{kind}.date")
    return sum(iter_amounts(rows, pred, f"{kind}.amount"), Decimal("0"))


def monthly_summary(
    year: int,
    month: int,
    appointments: Iterable[Any],
    expenses: Iterable[Any] = (),
) -> MonthlySummary:
    """Income (appointments) and expenses dated in ``year``/``month``.

    Rows with a missing or unparseable date, or an amount that does not parse,
    contribute nothing.
    """
    return MonthlySummary(
        month=f"{year:04d}-{month:02d}",
        total_income=total_for_month(appointments, year, month, "appointment"),
        total_expenses=total_for_month(expenses, year, month, "expense"),
    )
