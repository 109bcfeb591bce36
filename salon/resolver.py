"""Turn the client/service references stored on appointment rows into names.

Rows written by older versions of the sheet hold the client or service name
directly; newer rows hold a ``C_``/``S_`` identifier and, sometimes, the
name as well. Resolution degrades to ``"Unknown"`` and never raises.
"""
from typing import Any, Dict, Optional, Tuple

from salon.domain import CLIENT, ID_PREFIXES, SERVICE, UNKNOWN
from salon.events import RECORDS_REPLACED, Event
from salon.functional import find_first
from salon.normalizer import field, service_price, text_field
from salon.store import RecordStore


def _as_text(value: Any) -> str:
    if value is None or value is False:
        return ""
    return str(value).strip()


def resolve_reference(store: RecordStore, kind: str, ref: Any, raw_name: Any = "") -> str:
    ref_text = _as_text(ref)
    raw_text = _as_text(raw_name)
    if not ref_text and not raw_text:
        return UNKNOWN

    # older rows keep the id in the name column
    found = store.find_by_identifier(kind, ref if ref_text else raw_text)
    if found.is_some():
        return text_field(found.get_or_else({}), f"{kind}.name") or UNKNOWN

    for candidate in (raw_text, ref_text):
        if candidate and not candidate.startswith(ID_PREFIXES[kind]):
            return candidate
    return UNKNOWN


def resolve_client_name(store: RecordStore, row: Any) -> str:
    return resolve_reference(
        store, CLIENT,
        field(row, "appointment.client_id"),
        field(row, "appointment.client_name"),
    )


def resolve_service_name(store: RecordStore, row: Any) -> str:
    return resolve_reference(
        store, SERVICE,
        field(row, "appointment.service_id"),
        field(row, "appointment.service_name"),
    )


def suggest_price(store: RecordStore, service_ref: Any) -> Optional[str]:
    """Amount to pre-fill when a service is picked, e.g. ``"40.00"``.

    ``None`` means leave the amount field alone (unknown service, or no
    positive base price).
    """
    if not _as_text(service_ref):
        return None
    found = store.find_by_identifier(SERVICE, service_ref)
    if found.is_none():
        found = find_first(
            store.records(SERVICE),
            lambda s: text_field(s, "service.name") == _as_text(service_ref),
        )
    service = found.get_or_else(None)
    if service is None:
        return None
    price = service_price(service)
    if price <= 0:
        return None
    return f"{price:.2f}"


class DisplayNameCache:
    """Memoized ``resolve_reference``; emptied whenever the store replaces a list."""

    def __init__(self, store: RecordStore):
        self.store = store
        self._names: Dict[Tuple[str, str, str], str] = {}
        store.bus.subscribe(RECORDS_REPLACED, self._on_replaced)

    def _on_replaced(self, event: Event) -> None:
        self._names.clear()

    def __len__(self) -> int:
        return len(self._names)

    def name_for(self, kind: str, ref: Any, raw_name: Any = "") -> str:
        key = (kind, _as_text(ref), _as_text(raw_name))
        if key not in self._names:
            self._names[key] = resolve_reference(self.store, kind, ref, raw_name)
        return self._names[key]

    def client_name(self, row: Any) -> str:
        return self.name_for(CLIENT, field(row, "appointment.client_id"), field(row, "appointment.client_name"))

    def service_name(self, row: Any) -> str:
        return self.name_for(SERVICE, field(row, "appointment.service_id"), field(row, "appointment.service_name"))
