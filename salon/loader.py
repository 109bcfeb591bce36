import asyncio
from typing import Dict, Iterable, Optional, Tuple

from salon.aggregator import monthly_summary
from salon.domain import APPOINTMENT, EXPENSE, KINDS, MonthlySummary
from salon.logging_setup import get_logger
from salon.store import RecordStore
from salon.transport import ApiClient

logger = get_logger("salon.loader")


async def refresh_all(
    api: ApiClient,
    store: RecordStore,
    kinds: Iterable[str] = KINDS,
) -> Dict[str, Optional[str]]:
    """Fetch every list in parallel and wait for all of them to settle.

    Each successful fetch replaces its own list; a failed one leaves its list
    as it was. Returns kind -> error message (``None`` on success).
    """
    kinds = tuple(kinds)

    async def refresh(kind: str) -> int:
        records = await asyncio.to_thread(api.list_records, kind)
        store.replace_all(kind, records)
        return len(records)

    results = await asyncio.gather(*(refresh(k) for k in kinds), return_exceptions=True)

    errors: Dict[str, Optional[str]] = {}
    for kind, result in zip(kinds, results):
        if isinstance(result, BaseException):
            logger.warning("could not load %s list: %s", kind, result)
            errors[kind] = str(result)
        else:
            logger.debug("loaded %d %s records", result, kind)
            errors[kind] = None
    return errors


async def load_dashboard(
    api: ApiClient,
    store: RecordStore,
    year: int,
    month: int,
) -> Tuple[MonthlySummary, Dict[str, Optional[str]]]:
    errors = await refresh_all(api, store)
    summary = monthly_summary(year, month, store.records(APPOINTMENT), store.records(EXPENSE))
    return summary, errors
