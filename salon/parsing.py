"""Best-effort coercion of spreadsheet cell values.

Both helpers return ``None`` instead of raising; callers decide whether a
missing value is an error (form validation) or simply contributes nothing
(aggregation).
"""
import math
import re
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

import pandas as pd

_LEADING_NUMBER = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def parse_amount(value: Any) -> Optional[Decimal]:
    """Parse a currency amount the way ``parseFloat`` would.

    ``"40"``, ``40``, ``"40.5abc"`` and ``"40,5"`` all parse; ``True``,
    ``"abc"``, ``NaN`` and ``None`` do not.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        return value if value.is_finite() else None
    if isinstance(value, (int, float)):
        if isinstance(value, float) and not math.isfinite(value):
            return None
        return Decimal(str(value))
    if not isinstance(value, str):
        return None

    text = value.strip()
    if "," in text and "." not in text:
        text = text.replace(",", ".")
    match = _LEADING_NUMBER.match(text)
    if not match:
        return None
    try:
        parsed = Decimal(match.group(0))
    except InvalidOperation:
        return None
    return parsed if parsed.is_finite() else None


def parse_date(value: Any) -> Optional[date]:
    """Return the local calendar date of ``value`` or ``None``.

    Timezone-aware values (the spreadsheet API serializes dates as UTC
    instants) are shifted to the host's local time first.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        return value.astimezone().date() if value.tzinfo else value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        return None
    # pandas would also read words such as "today" or "now"
    if not value.strip()[0].isdigit():
        return None

    try:
        ts = pd.to_datetime(value.strip(), errors="coerce")
    except (ValueError, TypeError, OverflowError):
        return None
    if ts is None or pd.isna(ts):
        return None
    if ts.tzinfo is not None:
        return ts.to_pydatetime().astimezone().date()
    return ts.date()
