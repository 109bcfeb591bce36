from dataclasses import dataclass
from typing import Any, Optional

from salon.aggregator import monthly_summary, parse_month
from salon.domain import APPOINTMENT, CLIENT, EXPENSE, SERVICE, MonthlySummary
from salon.functional import Either
from salon.logging_setup import get_logger
from salon.store import RecordStore
from salon.transport import ApiClient, EnvelopeError, TransportError
from salon.validation import validate_appointment, validate_client, validate_expense, validate_service

logger = get_logger("salon.services")


@dataclass(frozen=True)
class Outcome:
    """What the page shows after a user action."""
    ok: bool
    message: str
    summary: Optional[MonthlySummary] = None


class SalonService:
    """Facade the page talks to: validate, send, then refresh the affected list.

    Validation failures never reach the API. Transport failures are turned
    into messages and leave the store untouched.
    """

    def __init__(self, api: ApiClient, store: RecordStore):
        self.api = api
        self.store = store

    def refresh(self, kind: str) -> Outcome:
        try:
            records = self.api.list_records(kind)
        except EnvelopeError as e:
            logger.warning("listing %s failed: %s", kind, e)
            return Outcome(False, f"Could not load {kind} list: {e}")
        except TransportError as e:
            logger.warning("listing %s failed: %s", kind, e)
            return Outcome(False, f"Could not load {kind} list.")
        self.store.replace_all(kind, records)
        return Outcome(True, f"{len(records)} {kind} records loaded.")

    def _submit(self, kind: str, validated: Either[dict, Any], success_message: str) -> Outcome:
        if validated.is_left():
            return Outcome(False, validated.get_error()["message"])

        try:
            self.api.create(validated.get_or_else(None))
        except EnvelopeError as e:
            logger.warning("saving %s rejected: %s", kind, e)
            return Outcome(False, f"Error saving: {e}")
        except TransportError as e:
            logger.error("saving %s failed: %s", kind, e)
            return Outcome(False, "Could not reach the server.")

        logger.info("%s saved", kind)
        refreshed = self.refresh(kind)
        if not refreshed.ok:
            return Outcome(True, f"{success_message} {refreshed.message}")
        return Outcome(True, success_message)

    def create_client(self, name: Any, phone: Any = "", notes: Any = "") -> Outcome:
        return self._submit(CLIENT, validate_client(name, phone, notes), "Client saved.")

    def create_service(self, name: Any, category: Any = "", price: Any = "", active: bool = True) -> Outcome:
        return self._submit(SERVICE, validate_service(name, category, price, active), "Service saved.")

    def create_appointment(self, **fields: Any) -> Outcome:
        return self._submit(APPOINTMENT, validate_appointment(**fields), "Appointment saved.")

    def create_expense(self, **fields: Any) -> Outcome:
        return self._submit(EXPENSE, validate_expense(**fields), "Expense saved.")

    def monthly_summary(self, month: str) -> Outcome:
        """Summary computed from the lists currently held by the store."""
        try:
            year, month_no = parse_month(month)
        except ValueError as e:
            return Outcome(False, str(e))
        summary = monthly_summary(
            year, month_no,
            self.store.records(APPOINTMENT),
            self.store.records(EXPENSE),
        )
        return Outcome(True, "", summary)
