from typing import Any, Dict, List, Tuple

from salon.domain import KINDS, REFERENCEABLE
from salon.events import RECORDS_REPLACED, EventBus
from salon.functional import Maybe, find_first
from salon.normalizer import identifier, text_field


def loose_equals(a: Any, b: Any) -> bool:
    """Identifier comparison where ``"7"``, ``7`` and ``7.0`` are the same id."""
    if a is None or b is None or a == "" or b == "":
        return False
    if isinstance(a, str) and isinstance(b, str):
        return a.strip() == b.strip()
    try:
        return float(a) == float(b)
    except (TypeError, ValueError, OverflowError):
        return str(a).strip() == str(b).strip()


class RecordStore:
    """Last-fetched lists of clients, services, appointments and expenses.

    Lists are only ever replaced wholesale; there is no incremental merge,
    edit or delete. Anything derived from a list (resolved names, summaries)
    must be recomputed after a replace, which is announced on ``bus``.
    """

    def __init__(self, bus: EventBus | None = None):
        self.bus = bus or EventBus()
        self._lists: Dict[str, Tuple[dict, ...]] = {kind: () for kind in KINDS}

    def _check(self, kind: str) -> None:
        if kind not in self._lists:
            raise ValueError(f"unknown record kind: {kind!r}")

    def _check_referenceable(self, kind: str) -> None:
        self._check(kind)
        if kind not in REFERENCEABLE:
            raise ValueError(f"{kind!r} records have no identifier")

    def replace_all(self, kind: str, records: Any) -> None:
        self._check(kind)
        if isinstance(records, (list, tuple)):
            snapshot = tuple(r for r in records if isinstance(r, dict))
        else:
            snapshot = ()
        self._lists[kind] = snapshot
        self.bus.publish(RECORDS_REPLACED, {"kind": kind, "count": len(snapshot)})

    def records(self, kind: str) -> Tuple[dict, ...]:
        self._check(kind)
        return self._lists[kind]

    def find_by_identifier(self, kind: str, ident: Any) -> Maybe[dict]:
        self._check_referenceable(kind)
        return find_first(self._lists[kind], lambda r: loose_equals(identifier(kind, r), ident))

    def options(self, kind: str) -> List[Tuple[str, str]]:
        """``(identifier, name)`` pairs for selection widgets; nameless rows are skipped."""
        self._check_referenceable(kind)
        out = []
        for r in self._lists[kind]:
            name = text_field(r, f"{kind}.name")
            if name:
                out.append((identifier(kind, r), name))
        return out
